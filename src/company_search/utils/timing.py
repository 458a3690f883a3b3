"""Latency tracking for index builds and search requests."""

import functools
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from threading import Lock
from typing import Any, Callable, Deque, Dict, Optional

from company_search.utils.logging import get_logger

logger = get_logger(__name__)


class TimingStat:
    """Running statistics for one timed operation."""

    def __init__(self, window_size: int = 1000):
        self.count = 0
        self.total_ms = 0.0
        self.max_ms = 0.0
        self.recent: Deque[float] = deque(maxlen=window_size)

    def add(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.max_ms = max(self.max_ms, duration_ms)
        self.recent.append(duration_ms)

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0

    def percentile(self, p: float) -> float:
        """Percentile over the recent window (p in [0, 100])."""
        if not self.recent:
            return 0.0
        ordered = sorted(self.recent)
        idx = min(int(len(ordered) * p / 100), len(ordered) - 1)
        return ordered[idx]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean_ms": round(self.mean_ms, 3),
            "max_ms": round(self.max_ms, 3),
            "p50_ms": round(self.percentile(50), 3),
            "p95_ms": round(self.percentile(95), 3),
        }


class LatencyTracker:
    """Thread-safe tracker for latency metrics across components."""

    def __init__(self, window_size: int = 1000):
        """
        Initialize latency tracker.

        Args:
            window_size: Number of recent timings kept per operation for
                        percentile estimates.
        """
        self._window_size = window_size
        self._stats: Dict[str, TimingStat] = defaultdict(
            lambda: TimingStat(self._window_size)
        )
        self._lock = Lock()

    def record(self, operation: str, duration_ms: float) -> None:
        with self._lock:
            self._stats[operation].add(duration_ms)

    def get_stats(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """
        Get statistics for operation(s).

        Args:
            operation: Specific operation name, or None for all operations

        Returns:
            Dictionary of statistics
        """
        with self._lock:
            if operation:
                if operation not in self._stats:
                    return {}
                return {operation: self._stats[operation].to_dict()}
            return {op: stat.to_dict() for op, stat in self._stats.items()}

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()


_global_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    """Get the global latency tracker instance."""
    return _global_tracker


@contextmanager
def TimingContext(operation: str, log_level: str = "debug"):
    """
    Context manager for timing a block of code.

    Example:
        with TimingContext("detail_resolution"):
            rows = engine.resolve(groups)

    Args:
        operation: Name of the operation being timed
        log_level: Logging level for the timing message
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        _global_tracker.record(operation, duration_ms)

        log_fn = getattr(logger, log_level, logger.debug)
        log_fn(f"{operation} completed in {duration_ms:.3f}ms")


def timed(operation: Optional[str] = None, log_level: str = "debug"):
    """
    Decorator for timing function execution.

    Args:
        operation: Name of the operation (defaults to function name)
        log_level: Logging level for the timing message
    """

    def decorator(func: Callable) -> Callable:
        op_name = operation or f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with TimingContext(op_name, log_level=log_level):
                return func(*args, **kwargs)

        return wrapper

    return decorator
