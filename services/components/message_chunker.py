"""
MessageChunker component that splits text for 160-character satellite messages.
"""
from typing import Iterator, List

from core import constants


def chunk_text(text: str, max_length: int = constants.SMS_MAX_LENGTH) -> Iterator[str]:
    """
    Yields consecutive fragments of at most max_length characters.

    Every fragment but the last is exactly max_length long; the last holds the
    remainder. No fragment is ever empty, so "" yields nothing and a text whose
    length is a multiple of max_length has no trailing fragment. Each call
    returns a new generator.

    Raises:
        ValueError: max_length is less than 1
    """
    if max_length < 1:
        raise ValueError(f"max_length must be >= 1, got {max_length}")

    def _fragments() -> Iterator[str]:
        for start in range(0, len(text), max_length):
            yield text[start:start + max_length]

    return _fragments()


class MessageChunker:
    """Eager wrapper around chunk_text with a fixed fragment size."""

    def __init__(self, max_length: int = constants.SMS_MAX_LENGTH):
        if max_length < 1:
            raise ValueError(f"max_length must be >= 1, got {max_length}")
        self.max_length = max_length

    def chunk(self, text: str) -> List[str]:
        return list(chunk_text(text, self.max_length))
