"""
ChangeDetector component for deciding whether a slot must be rewritten.
"""
from typing import Optional

from core.interfaces import IForecastRepository
from core.logger import get_logger
from models.forecast import ForecastSlot
from services.components.hash_calculator import HashCalculator

logger = get_logger(__name__)


class ChangeDetector:
    """
    Compares freshly fetched text against what is on disk right now.

    The stored side is re-read on every call rather than remembered from the
    last write, so a slot edited or truncated outside the bot is corrected on
    the next cycle.
    """

    def __init__(
        self,
        repository: IForecastRepository,
        hasher: Optional[HashCalculator] = None,
    ):
        self.repository = repository
        self.hasher = hasher or HashCalculator()

    def has_changed(self, new_text: str, slot: ForecastSlot) -> bool:
        """
        Args:
            new_text: Text fetched this cycle
            slot: Slot to compare against

        Returns:
            True if the fingerprints differ

        Raises:
            StorageReadException: the slot could not be read
        """
        stored_text = self.repository.read(slot)

        new_hash = self.hasher.fingerprint(new_text)
        stored_hash = self.hasher.fingerprint(stored_text)

        if new_hash == stored_hash:
            logger.debug(f"[CHANGE_DETECTOR] No change for {slot.kind.value} ({new_hash[:12]})")
            return False

        logger.debug(
            f"[CHANGE_DETECTOR] {slot.kind.value} changed: {stored_hash[:12]} -> {new_hash[:12]}"
        )
        return True
