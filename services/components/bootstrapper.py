"""
Bootstrapper component that creates missing slot files on first run.
"""
from core.interfaces import IForecastRepository
from core.logger import get_logger
from models.forecast import ForecastSlot

logger = get_logger(__name__)


class Bootstrapper:
    """Seeds a slot with the first fetched text when its file is absent."""

    def __init__(self, repository: IForecastRepository):
        self.repository = repository

    def ensure_exists(self, slot: ForecastSlot, fallback_text: str) -> bool:
        """
        Creates the slot from fallback_text if it does not exist.
        An existing slot is left untouched and unread.

        Returns:
            True if the slot was created
        """
        if self.repository.exists(slot):
            return False

        logger.info(f"[BOOTSTRAP] No {slot.kind.value} forecast at {slot.path}, seeding it")
        self.repository.persist(fallback_text, slot)
        return True
