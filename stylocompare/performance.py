"""
Performance monitoring utilities for stylocompare.

Every analysis is a single in-memory pass, so these helpers only time
operations and report progress over large inputs through the standard
``logging`` module. The package installs no handlers; configure logging
in the calling application to see the messages.

Classes:
    ProgressTracker: Progress logging for long-running operations
    PerformanceMonitor: Timing of named operations

Example:
    Performance monitoring::

        import logging
        from stylocompare.performance import PerformanceMonitor

        logging.basicConfig(level=logging.DEBUG)

        with PerformanceMonitor("My analysis") as monitor:
            result = expensive_operation()

        print(f"Operation took {monitor.elapsed_time:.2f} seconds")

.. codeauthor:: The stylocompare developers
"""

import logging
import time
from typing import Optional

from .config import CONFIG

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Lightweight progress tracking for long-running operations."""

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.description = description
        self.current = 0
        self.start_time = time.time()
        self.show_progress = total > CONFIG.PROGRESS_THRESHOLD

        if self.show_progress:
            logger.info(f"Starting {description} ({total:,} items)...")

    def update(self, increment: int = 1):
        """Update progress counter."""
        previous = self.current
        self.current += increment

        step = max(1, self.total // 10)
        if self.show_progress and self.current // step > previous // step:
            elapsed = time.time() - self.start_time
            percent = (self.current / self.total) * 100
            rate = self.current / elapsed if elapsed > 0 else 0

            logger.info(
                f"{self.description}: {percent:.1f}% ({self.current:,}/{self.total:,}) "
                f"[{rate:.1f} items/sec]"
            )

    def finish(self):
        """Mark progress as complete."""
        if self.show_progress:
            elapsed = time.time() - self.start_time
            logger.info(
                f"{self.description} completed in {elapsed:.2f}s "
                f"({self.current:,} items processed)"
            )


class PerformanceMonitor:
    """Time a named operation and log how long it took."""

    def __init__(self, operation: str):
        self.operation = operation
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None

    @property
    def elapsed_time(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    def __enter__(self):
        self.start_time = time.time()
        logger.debug(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.time()
        elapsed = self.elapsed_time

        if exc_type is not None:
            logger.debug(f"{self.operation} failed after {elapsed:.2f}s")
        elif elapsed > CONFIG.SLOW_OPERATION_SECONDS:
            logger.info(f"Performance: {self.operation} completed in {elapsed:.2f}s")
        else:
            logger.debug(f"{self.operation} completed in {elapsed:.3f}s")
