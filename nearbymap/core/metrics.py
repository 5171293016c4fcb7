"""Timing helpers: per-run performance debugger and process-wide latency counters."""
import inspect
import time
from contextlib import contextmanager
from collections import defaultdict, deque
from pathlib import Path
from typing import Any, Callable, Dict, Union

from nearbymap.core.storage import append_performance_metrics

# Samples kept per name; snapshots describe this recent window only
MAX_SAMPLES = 1000

_timers = defaultdict(lambda: deque(maxlen=MAX_SAMPLES))

def record_sample(name: str, duration_ms: float):
    _timers[name].append(duration_ms)

@contextmanager
def record_latency(name: str):
    start = time.perf_counter()
    try:
        yield
    finally:
        record_sample(name, (time.perf_counter() - start) * 1000.0)

def get_metrics_snapshot():
    return {k: {
        "count": len(v),
        "avg_ms": (sum(v) / len(v)) if v else 0.0,
        "p95_ms": sorted(v)[max(int(len(v)*0.95)-1, 0)] if v else 0.0
    } for k, v in _timers.items()}

def reset_metrics():
    _timers.clear()


class PerformanceDebugger:
    """Collects elapsed milliseconds per step for a single widget run."""

    def __init__(self):
        self._results: Dict[str, int] = {}

    @property
    def results(self) -> Dict[str, int]:
        return dict(self._results)

    @contextmanager
    def record(self, name: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self._results[name] = int((time.perf_counter() - start) * 1000)

    async def wrap(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        """Call ``fn`` (sync or async) and store its duration under ``fn.__name__``."""
        with self.record(fn.__name__):
            result = fn(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        return result

    def append_to_file(self, storage_dir: Union[str, Path], name: str) -> bool:
        return append_performance_metrics(storage_dir, name, self._results)
