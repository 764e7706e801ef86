"""
Unit tests for ForecastRepository.

Tests cover:
- Whole-file replace semantics
- Echo-before-write ordering
- Read/write error mapping
"""

import os
import pytest
from unittest.mock import patch

from core.exceptions import StorageReadException, StorageWriteException
from models.forecast import ForecastKind, ForecastSlot
from repositories.forecast_repo import ForecastRepository


class TestForecastRepository:
    """Test suite for slot storage"""

    def test_exists(self, repository, full_slot):
        assert repository.exists(full_slot) is False
        full_slot.path.write_text("X", encoding="utf-8")
        assert repository.exists(full_slot) is True

    def test_persist_creates_file_with_exact_text(self, repository, full_slot):
        repository.persist("Summit winds 70mph", full_slot)
        assert full_slot.path.read_bytes() == b"Summit winds 70mph"

    def test_persist_replaces_whole_file(self, repository, full_slot):
        full_slot.path.write_text("A much longer previous forecast", encoding="utf-8")

        repository.persist("Short", full_slot)

        assert full_slot.path.read_text(encoding="utf-8") == "Short"

    def test_persist_echoes_text(self, repository, observed, full_slot):
        repository.persist("New forecast", full_slot)
        assert observed == ["New forecast"]

    def test_echo_happens_before_write(self, tmp_path, full_slot):
        seen_on_disk = []

        def echo(text):
            seen_on_disk.append(full_slot.path.exists())

        ForecastRepository(echo=echo).persist("X", full_slot)

        assert seen_on_disk == [False]

    def test_newlines_and_unicode_round_trip(self, repository, full_slot):
        text = "Line one\r\nLine two\n−20°F"

        repository.persist(text, full_slot)

        assert repository.read(full_slot) == text

    def test_persist_leaves_no_temp_files(self, repository, full_slot, tmp_path):
        repository.persist("one", full_slot)
        repository.persist("two", full_slot)

        assert os.listdir(tmp_path) == ["forecast_full.txt"]

    def test_persist_creates_parent_directory(self, repository, tmp_path):
        slot = ForecastSlot(kind=ForecastKind.FULL, path=tmp_path / "data" / "full.txt")

        repository.persist("X", slot)

        assert slot.path.read_text(encoding="utf-8") == "X"

    def test_read_missing_slot_raises(self, repository, full_slot):
        with pytest.raises(StorageReadException) as exc_info:
            repository.read(full_slot)
        assert exc_info.value.details["path"] == str(full_slot.path)

    def test_read_invalid_utf8_raises(self, repository, full_slot):
        full_slot.path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(StorageReadException):
            repository.read(full_slot)

    def test_write_failure_raises_and_keeps_old_content(self, repository, full_slot, tmp_path):
        full_slot.path.write_text("Old forecast", encoding="utf-8")

        with patch("repositories.forecast_repo.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageWriteException) as exc_info:
                repository.persist("New forecast", full_slot)

        assert "disk full" in exc_info.value.details["error"]
        assert full_slot.path.read_text(encoding="utf-8") == "Old forecast"
        assert os.listdir(tmp_path) == ["forecast_full.txt"]

    def test_write_into_file_path_as_directory_raises(self, repository, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        slot = ForecastSlot(kind=ForecastKind.FULL, path=blocker / "full.txt")

        with pytest.raises(StorageWriteException):
            repository.persist("X", slot)

    def test_default_echo_writes_stdout(self, full_slot, capsys):
        ForecastRepository().persist("Mon: windy.", full_slot)
        assert capsys.readouterr().out == "Mon: windy.\n"
