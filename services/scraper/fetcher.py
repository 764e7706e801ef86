from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from core import constants
from core.config import Settings, settings
from core.exceptions import ContentNotFoundException, RetrievalException
from core.logger import get_logger

logger = get_logger(__name__)


class ForecastFetcher:
    """
    Drives headless Chromium to read the higher summits forecast.

    session() hands out a Page already showing the forecast outlook. With the
    per_cycle policy every session launches and closes its own browser; with
    reuse one browser stays up between cycles and each session gets a fresh
    context.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def _start_playwright(self) -> Playwright:
        try:
            return await async_playwright().start()
        except PlaywrightError as e:
            raise RetrievalException("Failed to start Playwright driver", {"error": str(e)}) from e

    async def _launch(self, playwright: Playwright) -> Browser:
        try:
            return await playwright.chromium.launch(
                headless=self.config.BROWSER_HEADLESS,
                args=constants.BROWSER_LAUNCH_ARGS,
            )
        except PlaywrightError as e:
            raise RetrievalException("Failed to launch browser", {"error": str(e)}) from e

    async def _shared_browser(self) -> Browser:
        """Returns the long-lived browser, relaunching it if it has died."""
        if self._browser is not None and self._browser.is_connected():
            return self._browser

        if self._browser is not None:
            logger.warning("[FETCHER] Shared browser disconnected, relaunching")

        if self._playwright is None:
            self._playwright = await self._start_playwright()

        self._browser = await self._launch(self._playwright)
        return self._browser

    async def _open_forecast(self, context: BrowserContext) -> Page:
        page = await context.new_page()
        page.set_default_timeout(self.config.PAGE_TIMEOUT_MS)

        url = self.config.FORECAST_URL
        logger.info(f"[FETCHER] Navigating to {url}")
        try:
            await page.goto(url, wait_until="domcontentloaded")
            # The outlook is rendered by script; clicking it waits until it is interactive
            outlook = await page.wait_for_selector(constants.OUTLOOK_SELECTOR)
            if outlook is None:
                raise ContentNotFoundException(
                    "Forecast outlook not found", {"selector": constants.OUTLOOK_SELECTOR}
                )
            await outlook.click()
        except PlaywrightTimeoutError as e:
            raise RetrievalException(f"Timeout loading {url}", {"url": url}) from e
        except PlaywrightError as e:
            raise RetrievalException(f"Browser error loading {url}", {"url": url, "error": str(e)}) from e

        return page

    async def _new_context(self, browser: Browser) -> BrowserContext:
        try:
            return await browser.new_context(user_agent=self.config.USER_AGENT)
        except PlaywrightError as e:
            raise RetrievalException("Failed to open browser context", {"error": str(e)}) from e

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Page]:
        """Yields a Page on the forecast; all browser resources are released on exit."""
        if self.config.BROWSER_SESSION_POLICY == constants.SESSION_POLICY_REUSE:
            browser = await self._shared_browser()
            context = await self._new_context(browser)
            try:
                yield await self._open_forecast(context)
            finally:
                await context.close()
        else:
            playwright = await self._start_playwright()
            try:
                browser = await self._launch(playwright)
                try:
                    context = await self._new_context(browser)
                    yield await self._open_forecast(context)
                finally:
                    await browser.close()
            finally:
                await playwright.stop()

    async def fetch_full_forecast(self, page: Page) -> str:
        """
        Reads the detailed forecast paragraph (typically ~2k characters).
        """
        selector = constants.FULL_FORECAST_SELECTOR
        try:
            element = await page.wait_for_selector(selector)
            if element is None:
                raise ContentNotFoundException("Full forecast not found", {"selector": selector})
            return await element.inner_text()
        except PlaywrightTimeoutError as e:
            raise ContentNotFoundException("Timeout waiting for full forecast", {"selector": selector}) from e
        except PlaywrightError as e:
            raise RetrievalException("Failed to read full forecast", {"error": str(e)}) from e

    async def fetch_abbreviated_forecast(self, page: Page) -> str:
        """
        Reads the per-day outlook blocks (typically ~700 characters) as a
        single line: line breaks inside a block are dropped and blocks are
        joined with a space.
        """
        selector = constants.ABBREVIATED_FORECAST_SELECTOR
        try:
            await page.wait_for_selector(selector)
            elements = await page.query_selector_all(selector)
            if not elements:
                raise ContentNotFoundException("Abbreviated forecast not found", {"selector": selector})

            parts = []
            for element in elements:
                text = await element.inner_text()
                parts.append(text.replace("\n", ""))
            return " ".join(parts)
        except PlaywrightTimeoutError as e:
            raise ContentNotFoundException(
                "Timeout waiting for abbreviated forecast", {"selector": selector}
            ) from e
        except PlaywrightError as e:
            raise RetrievalException("Failed to read abbreviated forecast", {"error": str(e)}) from e

    async def close(self) -> None:
        """Shuts down the shared browser, if any."""
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"[FETCHER] Error closing browser: {e}")
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
