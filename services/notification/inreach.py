import asyncio
from typing import Optional, Sequence

from playwright.async_api import Page, Error as PlaywrightError

from core import constants
from core.config import Settings, settings
from core.exceptions import MissingConfigException, NotificationException
from core.logger import get_logger
from services.notification.base import NotificationChannel

logger = get_logger(__name__)


class InReachNotifier(NotificationChannel):
    """
    Sends messages through a Garmin inReach reply page.

    The reply page is the verified link Garmin includes in messages sent from
    the device; typing into its textarea and pressing send delivers an SMS
    sized message back to the device.
    """

    def __init__(self, config: Optional[Settings] = None, send_delay: float = constants.CHUNK_SEND_DELAY):
        self.config = config or settings
        self.send_delay = send_delay

    @property
    def channel_name(self) -> str:
        return "inreach"

    def is_enabled(self) -> bool:
        return bool(self.config.NOTIFY_ENABLED and self.config.INREACH_REPLY_URL)

    async def send_chunks(self, session: Page, chunks: Sequence[str]) -> int:
        reply_url = self.config.INREACH_REPLY_URL
        if not reply_url:
            raise MissingConfigException("INREACH_REPLY_URL is not configured")

        chunks = list(chunks)
        if not chunks:
            return 0

        dry_run = self.config.NOTIFY_DRY_RUN
        logger.info(
            f"[INREACH] Sending {len(chunks)} message(s)",
            context={"dry_run": dry_run, "lengths": [len(c) for c in chunks]},
        )

        try:
            await session.goto(reply_url, wait_until="domcontentloaded")

            # Activate the textarea
            textarea = await session.wait_for_selector(constants.INREACH_MESSAGE_SELECTOR)
            if textarea is None:
                raise NotificationException(
                    "Reply textarea not found", {"selector": constants.INREACH_MESSAGE_SELECTOR}
                )
            await textarea.click()
            await session.keyboard.press("Enter")

            sent = 0
            for index, chunk in enumerate(chunks, start=1):
                await textarea.fill(chunk)
                if dry_run:
                    logger.info(f"[INREACH] Dry run, not sending {index}/{len(chunks)}: {chunk}")
                    continue

                await session.click(constants.INREACH_SEND_SELECTOR)
                sent += 1
                logger.debug(f"[INREACH] Sent {index}/{len(chunks)}")

                if index < len(chunks) and self.send_delay:
                    await asyncio.sleep(self.send_delay)

            return sent
        except PlaywrightError as e:
            raise NotificationException("Failed to send inReach message", {"error": str(e)}) from e
