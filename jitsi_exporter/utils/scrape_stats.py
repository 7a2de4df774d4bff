# =============================================
# File: jitsi_exporter/utils/scrape_stats.py
# Purpose: In-process counters & latency histogram for the exporter's own scrapes
# =============================================
from __future__ import annotations
from typing import Dict, Any, List, Optional
import threading
import time

_lock = threading.Lock()

_counters: Dict[str, int] = {
    "scrapes_total": 0,
    "scrape_errors_total": 0,
}

# Labeled counter: error kind -> count
_errors_by_kind: Dict[str, int] = {}

# Fixed-bucket histogram for scrape latency (milliseconds)
# Buckets: <=50,100,200,500,1000,2000,5000,10000, +inf
_latency_buckets: List[int] = [50, 100, 200, 500, 1000, 2000, 5000, 10000]
_latency_counts: List[int] = [0 for _ in _latency_buckets] + [0]  # last is +inf (overflow)

_last_scrape_at: Optional[float] = None


def _observe_latency_ms(ms: int) -> None:
    idx = len(_latency_buckets)  # default overflow
    for i, thr in enumerate(_latency_buckets):
        if ms <= thr:
            idx = i
            break
    _latency_counts[idx] += 1


def record_scrape(latency_ms: int, error_kind: Optional[str] = None) -> None:
    global _last_scrape_at
    with _lock:
        _counters["scrapes_total"] += 1
        if error_kind:
            _counters["scrape_errors_total"] += 1
            _errors_by_kind[error_kind] = _errors_by_kind.get(error_kind, 0) + 1
        _observe_latency_ms(int(latency_ms))
        _last_scrape_at = time.time()


def snapshot() -> Dict[str, Any]:
    with _lock:
        return {
            "counters": dict(_counters),
            "errors": dict(_errors_by_kind),
            "latency_ms": {
                "buckets": list(_latency_buckets) + ["+Inf"],
                "counts": list(_latency_counts),
            },
            "last_scrape_at": _last_scrape_at,
        }


def reset() -> None:
    global _last_scrape_at
    with _lock:
        for key in _counters:
            _counters[key] = 0
        _errors_by_kind.clear()
        for i in range(len(_latency_counts)):
            _latency_counts[i] = 0
        _last_scrape_at = None
