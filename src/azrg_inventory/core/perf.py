"""Performance tracking helpers for azrg-inventory."""

import logging
import time
import tracemalloc
from collections.abc import Iterator
from contextlib import contextmanager


class PerformanceTracker:
    """Track execution time and peak traced memory for operations"""

    def __init__(self, logger: logging.Logger):
        self.metrics: dict[str, float] = {}
        self.logger = logger
        self.start_times: dict[str, float] = {}
        self._started_tracemalloc = False

    def start(self, operation_name: str):
        """Start timing an operation"""
        if not tracemalloc.is_tracing():
            tracemalloc.start()
            self._started_tracemalloc = True
        self.start_times[operation_name] = time.perf_counter()

    def end(self, operation_name: str) -> float | None:
        """End timing an operation and log its duration and peak memory"""
        if operation_name not in self.start_times:
            return None
        duration = time.perf_counter() - self.start_times.pop(operation_name)
        self.metrics[operation_name] = duration

        peak_kb = 0
        if tracemalloc.is_tracing():
            _, peak = tracemalloc.get_traced_memory()
            peak_kb = peak // 1024
        if self._started_tracemalloc and not self.start_times:
            tracemalloc.stop()
            self._started_tracemalloc = False

        self.logger.info(f"Operation '{operation_name}' completed in {duration:.2f}s, peak memory: {peak_kb} KB")
        return duration

    @contextmanager
    def time_operation(self, operation_name: str) -> Iterator[None]:
        self.start(operation_name)
        try:
            yield
        finally:
            self.end(operation_name)
