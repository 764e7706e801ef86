"""
Tests for the ForecastBot poll loop and command-line overrides.
"""

import pytest
from unittest.mock import AsyncMock, Mock, patch

from core.exceptions import ConfigurationException, RetrievalException, StorageWriteException
from main import ForecastBot, build_settings, cli
from models.forecast import CycleResult


@pytest.fixture
def service():
    service = Mock()
    service.run = AsyncMock(return_value=CycleResult())
    service.close = AsyncMock()
    return service


class TestForecastBot:
    """Test suite for the poll loop"""

    @pytest.mark.asyncio
    async def test_sleeps_poll_interval_between_cycles(self, make_config, service):
        bot = ForecastBot(make_config(POLL_INTERVAL=60), service)
        sleep_calls = []

        async def fake_sleep(seconds):
            sleep_calls.append(seconds)
            if len(sleep_calls) == 3:
                bot.stop()

        with patch("main.asyncio.sleep", new=fake_sleep), \
                patch.object(ForecastBot, "_install_signal_handlers"):
            exit_code = await bot.start()

        assert exit_code == 0
        assert service.run.await_count == 3
        assert sleep_calls == [60, 60, 60]
        service.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sleeps_even_after_failed_cycle(self, make_config, service):
        service.run.side_effect = [RetrievalException("timeout"), CycleResult()]
        bot = ForecastBot(make_config(), service)
        sleep_calls = []

        async def fake_sleep(seconds):
            sleep_calls.append(seconds)
            if len(sleep_calls) == 2:
                bot.stop()

        with patch("main.asyncio.sleep", new=fake_sleep), \
                patch.object(ForecastBot, "_install_signal_handlers"):
            exit_code = await bot.start()

        assert exit_code == 0
        assert len(sleep_calls) == 2
        assert bot.error_count == 0

    @pytest.mark.asyncio
    async def test_exits_after_consecutive_failures(self, make_config, service):
        service.run.side_effect = StorageWriteException("disk full")
        bot = ForecastBot(make_config(MAX_CONSECUTIVE_ERRORS=3), service)

        with patch("main.asyncio.sleep", new=AsyncMock()), \
                patch.object(ForecastBot, "_install_signal_handlers"):
            exit_code = await bot.start()

        assert exit_code == 1
        assert service.run.await_count == 3
        service.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_configuration_error_during_cycle_is_fatal(self, make_config, service):
        service.run.side_effect = ConfigurationException("bad")
        bot = ForecastBot(make_config(), service)

        with patch("main.asyncio.sleep", new=AsyncMock()) as sleep, \
                patch.object(ForecastBot, "_install_signal_handlers"):
            exit_code = await bot.start()

        assert exit_code == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_startup_config_exits_before_polling(self, make_config, service):
        bot = ForecastBot(make_config(NOTIFY_ENABLED=True), service)

        exit_code = await bot.start()

        assert exit_code == 1
        service.run.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_run_once(self, make_config, service):
        bot = ForecastBot(make_config(), service)

        await bot.run_once()

        service.run.assert_awaited_once()
        service.close.assert_awaited_once()


class TestCli:
    """Test suite for argument handling"""

    def test_overrides(self):
        args = Mock(notify=True, dry_run=True, interval=30)

        config = build_settings(args)

        assert config.NOTIFY_ENABLED is True
        assert config.NOTIFY_DRY_RUN is True
        assert config.POLL_INTERVAL == 30

    def test_no_overrides_returns_global_settings(self):
        from core.config import settings

        assert build_settings(Mock(notify=False, dry_run=False, interval=None)) is settings

    def test_notify_without_url_fails_once_run(self, monkeypatch):
        from core.config import settings

        monkeypatch.setattr("main.settings", settings.model_copy(update={"INREACH_REPLY_URL": None}))

        with patch("main.ForecastService"):
            assert cli(["--once", "--notify"]) == 1

    def test_rejects_non_positive_interval(self):
        with pytest.raises(SystemExit):
            cli(["--interval", "0"])
