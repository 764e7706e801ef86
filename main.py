import argparse
import asyncio
import signal
import sys
from typing import Optional

from core.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

from core.config import Settings, settings
from core.exceptions import BotException, ConfigurationException
from services.forecast_service import ForecastService


class ForecastBot:
    def __init__(self, config: Optional[Settings] = None, service: Optional[ForecastService] = None):
        self.config = config or settings
        self.service = service or ForecastService(self.config)
        self.running = True
        self.error_count = 0

    def validate_startup(self) -> None:
        """Validate configuration before the first cycle. Raises ConfigurationException."""
        logger.info("=" * 60)
        logger.info("Summit Forecast Bot - Starting Up")
        logger.info("=" * 60)

        logger.info(f"Source: {self.config.FORECAST_URL}")
        logger.info(f"Interval: {self.config.POLL_INTERVAL}s")
        logger.info(f"Slots: {self.config.FORECAST_FULL_PATH}, {self.config.FORECAST_ABBREVIATED_PATH}")
        logger.info(f"Notifications: {'on' if self.config.NOTIFY_ENABLED else 'off'}")
        logger.info(f"Browser session policy: {self.config.BROWSER_SESSION_POLICY}")

        for msg in self.config.validate_all():
            if "❌" in msg:
                logger.critical(msg)
            else:
                logger.warning(msg)

        self.config.require_valid()
        logger.info("[OK] Startup validation passed")

    def _install_signal_handlers(self) -> None:
        try:
            loop = asyncio.get_running_loop()
            if sys.platform != "win32":
                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(sig, self.stop)
            else:
                signal.signal(signal.SIGINT, lambda s, f: self.stop())
                signal.signal(signal.SIGTERM, lambda s, f: self.stop())
        except (NotImplementedError, RuntimeError, ValueError) as e:
            logger.warning(f"Could not set up signal handlers: {e}")

    async def run_once(self) -> None:
        self.validate_startup()
        try:
            await self.service.run()
        finally:
            await self.service.close()

    async def start(self) -> int:
        """Poll forever. Returns the process exit code."""
        try:
            self.validate_startup()
        except ConfigurationException as e:
            logger.critical(f"Startup validation failed: {e}")
            return 1

        self._install_signal_handlers()
        logger.info("Bot started. Press Ctrl+C to stop.")
        logger.info("=" * 60)

        exit_code = 0
        try:
            while self.running:
                try:
                    await self.service.run()
                    self.error_count = 0
                except ConfigurationException as e:
                    logger.critical(f"Configuration error: {e}")
                    exit_code = 1
                    break
                except BotException as e:
                    self.error_count += 1
                    logger.error(
                        f"Cycle failed ({self.error_count}/{self.config.MAX_CONSECUTIVE_ERRORS}): "
                        f"{type(e).__name__}: {e}",
                        context=e.details,
                    )
                    if self.error_count >= self.config.MAX_CONSECUTIVE_ERRORS:
                        logger.critical("Too many consecutive errors. Shutting down.")
                        exit_code = 1
                        break

                if self.running:
                    logger.info(f"Sleeping for {self.config.POLL_INTERVAL}s...")
                    try:
                        await asyncio.sleep(self.config.POLL_INTERVAL)
                    except asyncio.CancelledError:
                        logger.info("Sleep cancelled")
                        break
        finally:
            await self.service.close()

        self.stop()
        logger.info("Bot stopped cleanly")
        return exit_code

    def stop(self):
        if self.running:
            logger.info("=" * 60)
            logger.info("Stopping Bot...")
            logger.info("=" * 60)
            self.running = False


def build_settings(args: argparse.Namespace) -> Settings:
    """Applies command-line overrides on top of the environment settings."""
    overrides = {}
    if args.notify:
        overrides["NOTIFY_ENABLED"] = True
    if args.dry_run:
        overrides["NOTIFY_DRY_RUN"] = True
    if args.interval is not None:
        overrides["POLL_INTERVAL"] = args.interval
    if not overrides:
        return settings
    return settings.model_copy(update=overrides)


def cli(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Summit Forecast Bot")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument(
        "--notify",
        action="store_true",
        help="Forward abbreviated forecast changes to inReach (needs INREACH_REPLY_URL)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Type inReach messages without pressing send",
    )
    parser.add_argument("--interval", type=int, help="Override POLL_INTERVAL (seconds)")
    args = parser.parse_args(argv)

    if args.interval is not None and args.interval <= 0:
        parser.error("--interval must be positive")

    bot = ForecastBot(build_settings(args))
    exit_code = 0

    if args.once:
        try:
            logger.info("Running in --once mode")
            asyncio.run(bot.run_once())
            logger.info("Run completed successfully")
        except ConfigurationException as e:
            logger.critical(f"Startup validation failed: {e}")
            exit_code = 1
        except Exception as e:
            logger.critical(f"Run failed: {e}", exc_info=True)
            exit_code = 1
    else:
        try:
            exit_code = asyncio.run(bot.start())
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        except Exception as e:
            logger.critical(f"Fatal error: {e}", exc_info=True)
            exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(cli())
