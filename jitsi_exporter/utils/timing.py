# =============================================
# File: jitsi_exporter/utils/timing.py
# Purpose: Elapsed-milliseconds helper for request and scrape timing
# =============================================
import time
from contextlib import contextmanager


@contextmanager
def stopwatch():
    """Yields a callable returning whole milliseconds since entry."""
    t0 = time.perf_counter()
    yield lambda: int((time.perf_counter() - t0) * 1000)
