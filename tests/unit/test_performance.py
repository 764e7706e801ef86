"""
Unit tests for CycleMonitor.
"""

import pytest

from core.performance import CycleMonitor


class TestCycleMonitor:
    """Test suite for CycleMonitor"""

    def test_measure_records_duration(self):
        monitor = CycleMonitor()

        with monitor.measure("fetch"):
            pass

        stats = monitor.get_stats("fetch")
        assert stats["count"] == 1
        assert stats["failure_count"] == 0

    def test_measure_counts_failures(self):
        monitor = CycleMonitor()

        with pytest.raises(ValueError):
            with monitor.measure("persist", {"slot": "full"}):
                raise ValueError("disk")

        assert monitor.get_stats("persist")["failure_count"] == 1

    def test_reset_clears_everything(self):
        monitor = CycleMonitor()
        for _ in range(1000):
            with monitor.measure("fetch"):
                pass

        monitor.log_summary()
        monitor.reset()

        assert monitor.get_stats("fetch") == {}
        assert not monitor.durations
        assert not monitor.failure_counts
