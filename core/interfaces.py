"""
Protocol-based interfaces for Dependency Injection.
These interfaces define contracts for the poll cycle's collaborators, so the
browser, the filesystem and the satellite messenger can be swapped in tests.
"""
from typing import AsyncContextManager, Protocol, Sequence, runtime_checkable

from models.forecast import ForecastSlot


@runtime_checkable
class IForecastFetcher(Protocol):
    """Interface for forecast retrieval."""

    def session(self) -> AsyncContextManager:
        """Acquires a page session, released when the context exits."""
        ...

    async def fetch_full_forecast(self, session) -> str:
        """Returns the detailed forecast text."""
        ...

    async def fetch_abbreviated_forecast(self, session) -> str:
        """Returns the condensed per-day forecast as one line."""
        ...

    async def close(self) -> None:
        """Releases any browser kept alive between cycles."""
        ...


@runtime_checkable
class IForecastRepository(Protocol):
    """Interface for slot storage."""

    def exists(self, slot: ForecastSlot) -> bool:
        """Checks if the slot's file exists."""
        ...

    def read(self, slot: ForecastSlot) -> str:
        """Reads the slot's current text."""
        ...

    def persist(self, text: str, slot: ForecastSlot) -> None:
        """Echoes the text and replaces the slot's content."""
        ...


@runtime_checkable
class INotifier(Protocol):
    """Interface for chunked message delivery."""

    def is_enabled(self) -> bool:
        """Checks if the channel has the configuration it needs."""
        ...

    async def send_chunks(self, session, chunks: Sequence[str]) -> int:
        """Transmits chunks in order. Returns the number sent."""
        ...
