import os
import sys
import tempfile
from typing import Callable, Optional

from core import constants
from core.exceptions import StorageReadException, StorageWriteException
from core.logger import get_logger
from models.forecast import ForecastSlot

logger = get_logger(__name__)


def echo_to_console(text: str) -> None:
    """Default observation stream: the raw forecast on stdout."""
    sys.stdout.write(f"{text}\n")
    sys.stdout.flush()


class ForecastRepository:
    """
    Plain-text storage for forecast slots.

    Each slot is one UTF-8 file holding the whole forecast, no header or
    trailing newline. Newlines are stored untranslated so the bytes read back
    are the bytes written.
    """

    def __init__(self, echo: Optional[Callable[[str], None]] = None):
        self.echo = echo or echo_to_console

    def exists(self, slot: ForecastSlot) -> bool:
        return slot.path.exists()

    def read(self, slot: ForecastSlot) -> str:
        """
        Reads the slot's current text from disk.

        Raises:
            StorageReadException: file missing, unreadable or not UTF-8
        """
        try:
            with open(slot.path, "r", encoding=constants.STORAGE_ENCODING, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadException(
                f"Failed to read {slot.kind.value} forecast",
                {"path": str(slot.path), "error": str(e)},
            ) from e

    def persist(self, text: str, slot: ForecastSlot) -> None:
        """
        Echoes the text to the observation stream, then replaces the slot file.

        The write lands in a temp file beside the slot and is moved into place
        with os.replace, so the slot never holds a partial forecast.

        Raises:
            StorageWriteException: the file could not be replaced
        """
        self.echo(text)

        directory = slot.path.parent
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{slot.path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding=constants.STORAGE_ENCODING, newline="") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, slot.path)
            tmp_path = None
        except OSError as e:
            raise StorageWriteException(
                f"Failed to write {slot.kind.value} forecast",
                {"path": str(slot.path), "error": str(e)},
            ) from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info(
            f"[REPO] Saved {slot.kind.value} forecast",
            context={"path": str(slot.path), "chars": len(text)},
        )
