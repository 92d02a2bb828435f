"""Timing instrumentation for roster-level readiness computations."""
import functools
import logging
import time
from typing import Callable

logger = logging.getLogger("crew-readiness.perf")


def timed(func: Callable) -> Callable:
    """
    Decorator that measures and logs execution time at DEBUG.

    Usage::

        @timed
        def build_turnaround_risk_index(...):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.debug(
                f"{func.__qualname__} took {duration_ms} ms",
                extra={
                    "target": f"{func.__module__}.{func.__qualname__}",
                    "duration_ms": duration_ms,
                },
            )
    return wrapper
