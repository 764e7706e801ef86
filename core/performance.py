import time
from contextlib import contextmanager
from typing import Dict, Optional
from collections import defaultdict
from core.logger import get_logger

logger = get_logger(__name__)


class CycleMonitor:
    """Times poll cycle phases (fetch, detect, persist, notify)"""

    def __init__(self):
        self.durations: Dict[str, list] = defaultdict(list)
        self.failure_counts: Dict[str, int] = defaultdict(int)

    @contextmanager
    def measure(self, phase: str, context: Optional[Dict] = None):
        """
        Context manager to measure phase duration.

        Usage:
            with monitor.measure("fetch", {"url": url}):
                ...
        """
        start_time = time.monotonic()
        failed = False

        try:
            yield
        except Exception:
            failed = True
            self.failure_counts[phase] += 1
            raise
        finally:
            duration_ms = (time.monotonic() - start_time) * 1000
            self.durations[phase].append(duration_ms)

            if failed:
                logger.warning(f"{phase} failed", duration_ms=duration_ms, context=context or {})
            else:
                logger.debug(f"{phase} completed", duration_ms=duration_ms, context=context or {})

    def get_stats(self, phase: str) -> Dict:
        """Get statistics for a single phase"""
        durations = self.durations.get(phase)
        if not durations:
            return {}

        return {
            "phase": phase,
            "count": len(durations),
            "failure_count": self.failure_counts[phase],
            "avg_duration_ms": sum(durations) / len(durations),
            "max_duration_ms": max(durations),
        }

    def log_summary(self):
        """Log one line per measured phase"""
        if not self.durations:
            logger.info("No cycle metrics collected yet")
            return

        for phase in self.durations:
            stats = self.get_stats(phase)
            logger.info(
                f"{phase}: {stats['count']} runs, {stats['failure_count']} failed, "
                f"avg {stats['avg_duration_ms']:.0f}ms (max {stats['max_duration_ms']:.0f}ms)"
            )

    def reset(self):
        self.durations.clear()
        self.failure_counts.clear()
