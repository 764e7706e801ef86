import os

# Keep test runs from writing a rotating log file into the working directory
os.environ["LOG_FILE"] = ""

import pytest
from contextlib import asynccontextmanager
from typing import List, Optional, Tuple, Union
from unittest.mock import AsyncMock, Mock

from core.config import Settings
from models.forecast import ForecastKind, ForecastSlot
from repositories.forecast_repo import ForecastRepository


# =============================================================================
# Fakes - External Collaborators
# =============================================================================


class FakeFetcher:
    """
    Stands in for ForecastFetcher. Each queued cycle is a (full, abbreviated)
    pair or an exception raised when the session opens.
    """

    def __init__(self, cycles: List[Union[Tuple[str, str], Exception]]):
        self.cycles = list(cycles)
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.closed = False
        self._current: Optional[Tuple[str, str]] = None

    @asynccontextmanager
    async def session(self):
        item = self.cycles.pop(0)
        if isinstance(item, Exception):
            raise item
        self.sessions_opened += 1
        self._current = item
        try:
            yield Mock(name="page")
        finally:
            self.sessions_closed += 1

    async def fetch_full_forecast(self, session) -> str:
        return self._current[0]

    async def fetch_abbreviated_forecast(self, session) -> str:
        return self._current[1]

    async def close(self) -> None:
        self.closed = True


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def make_config(tmp_path):
    """Builds Settings pointing at tmp_path, ignoring any .env file."""

    def _make(**overrides) -> Settings:
        values = {
            "FORECAST_FULL_PATH": str(tmp_path / "forecast_full.txt"),
            "FORECAST_ABBREVIATED_PATH": str(tmp_path / "forecast_abbreviated.txt"),
            "RETRY_BASE_DELAY": 0,
            "LOG_FILE": "",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def config(make_config) -> Settings:
    return make_config()


@pytest.fixture
def observed() -> List[str]:
    """Captures the observation stream."""
    return []


@pytest.fixture
def repository(observed) -> ForecastRepository:
    return ForecastRepository(echo=observed.append)


@pytest.fixture
def full_slot(tmp_path) -> ForecastSlot:
    return ForecastSlot(kind=ForecastKind.FULL, path=tmp_path / "forecast_full.txt")


@pytest.fixture
def abbreviated_slot(tmp_path) -> ForecastSlot:
    return ForecastSlot(kind=ForecastKind.ABBREVIATED, path=tmp_path / "forecast_abbreviated.txt")


@pytest.fixture
def fetcher_factory():
    """Returns the FakeFetcher class for building scripted fetchers."""
    return FakeFetcher


@pytest.fixture
def mock_notifier():
    notifier = Mock()
    notifier.is_enabled.return_value = True
    notifier.send_chunks = AsyncMock(side_effect=lambda session, chunks: len(chunks))
    return notifier
