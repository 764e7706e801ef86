from contextlib import AsyncExitStack
from pathlib import Path
from typing import Dict, Optional, Set

from core.config import Settings, settings
from core.exceptions import ConfigurationException, RetrievalException, StorageException
from core.interfaces import IForecastFetcher, IForecastRepository, INotifier
from core.logger import get_logger
from core.performance import CycleMonitor
from core.utils import async_retry, truncate_text
from models.forecast import CycleResult, ForecastKind, ForecastObservation, ForecastSlot
from repositories.forecast_repo import ForecastRepository
from services.components import Bootstrapper, ChangeDetector, HashCalculator, MessageChunker
from services.notification.inreach import InReachNotifier
from services.scraper.fetcher import ForecastFetcher

logger = get_logger(__name__)


class ForecastService:
    """
    One fetch, compare and persist pass over both forecast slots.

    Cycle order: fetch both variants, bootstrap any slot not yet seen by this
    process, then detect and persist full before abbreviated. When
    notifications are enabled, a changed abbreviated forecast is chunked and
    sent on the same browser session; a send that fails is repeated on the
    next cycle.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        fetcher: Optional[IForecastFetcher] = None,
        repository: Optional[IForecastRepository] = None,
        notifier: Optional[INotifier] = None,
    ):
        self.config = config or settings
        self.fetcher = fetcher or ForecastFetcher(self.config)
        self.repo = repository or ForecastRepository()
        self.notifier = notifier or InReachNotifier(self.config)

        hasher = HashCalculator()
        self.detector = ChangeDetector(self.repo, hasher)
        self.bootstrapper = Bootstrapper(self.repo)
        self.chunker = MessageChunker(self.config.CHUNK_MAX_LENGTH)
        self.monitor = CycleMonitor()

        self.slots: Dict[ForecastKind, ForecastSlot] = {
            ForecastKind.FULL: ForecastSlot(
                kind=ForecastKind.FULL, path=Path(self.config.FORECAST_FULL_PATH)
            ),
            ForecastKind.ABBREVIATED: ForecastSlot(
                kind=ForecastKind.ABBREVIATED, path=Path(self.config.FORECAST_ABBREVIATED_PATH)
            ),
        }
        self._bootstrapped: Set[ForecastKind] = set()
        self._pending_notification: Optional[str] = None

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.config.NOTIFY_ENABLED) and self.notifier.is_enabled()

    async def run(self) -> CycleResult:
        """
        Runs one cycle, retrying retrieval and storage failures with
        exponential backoff. Configuration errors are raised immediately.
        """
        retrying_cycle = async_retry(
            max_retries=self.config.CYCLE_MAX_RETRIES,
            base_delay=self.config.RETRY_BASE_DELAY,
            retryable_exceptions=(RetrievalException, StorageException),
            fail_fast_exceptions=(ConfigurationException,),
        )(self.run_cycle)
        return await retrying_cycle()

    async def run_cycle(self) -> CycleResult:
        result = CycleResult()

        try:
            async with AsyncExitStack() as stack:
                # Browser launch and navigation count towards the fetch phase
                with self.monitor.measure("fetch"):
                    session = await stack.enter_async_context(self.fetcher.session())
                    observations = [
                        ForecastObservation(
                            kind=ForecastKind.FULL,
                            text=await self.fetcher.fetch_full_forecast(session),
                        ),
                        ForecastObservation(
                            kind=ForecastKind.ABBREVIATED,
                            text=await self.fetcher.fetch_abbreviated_forecast(session),
                        ),
                    ]

                for observation in observations:
                    slot = self.slots[observation.kind]
                    if observation.kind not in self._bootstrapped:
                        if self.bootstrapper.ensure_exists(slot, observation.text):
                            result.bootstrapped.append(observation.kind)
                        self._bootstrapped.add(observation.kind)

                for observation in observations:
                    if self._update_slot(observation):
                        result.written.append(observation.kind)

                if ForecastKind.ABBREVIATED in result.written and self.notifications_enabled:
                    self._pending_notification = observations[1].text

                if self._pending_notification is not None and self.notifications_enabled:
                    result.chunks_sent = await self._send_pending(session)
        finally:
            self.monitor.log_summary()
            self.monitor.reset()

        logger.info(
            "[SERVICE] Cycle complete",
            context={
                "bootstrapped": [k.value for k in result.bootstrapped] or "-",
                "written": [k.value for k in result.written] or "-",
                "chunks_sent": result.chunks_sent,
            },
        )
        return result

    def _update_slot(self, observation: ForecastObservation) -> bool:
        """Persists the observation if it differs from the slot's stored text."""
        slot = self.slots[observation.kind]

        with self.monitor.measure("detect", {"slot": slot.kind.value}):
            changed = self.detector.has_changed(observation.text, slot)

        if not changed:
            logger.info(f"[SERVICE] {slot.kind.value} forecast unchanged")
            return False

        logger.info(
            f"[SERVICE] {slot.kind.value} forecast changed: {truncate_text(observation.text, 60)}"
        )
        with self.monitor.measure("persist", {"slot": slot.kind.value}):
            self.repo.persist(observation.text, slot)
        return True

    async def _send_pending(self, session) -> int:
        """
        Sends the pending abbreviated forecast. The text stays pending until
        a send succeeds, so a failed send is repeated on the next cycle even
        though the slot file already holds it.
        """
        with self.monitor.measure("notify"):
            sent = await self.notifier.send_chunks(
                session, self.chunker.chunk(self._pending_notification)
            )
        self._pending_notification = None
        return sent

    async def close(self) -> None:
        await self.fetcher.close()
