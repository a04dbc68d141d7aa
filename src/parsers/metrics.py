"""Discovery pipeline metrics — cycle counts, funnel sizes, error rates.

Counters accumulate during runtime and are read by the stats line
logged at the end of every cycle.
"""

import time
from collections import Counter
from threading import Lock


class PipelineMetrics:
    """Accumulator for the discovery funnel.

    Guarded by a lock so a stats reader never sees a half-updated cycle.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._start_time: float = time.monotonic()
        self.cycles: int = 0
        self.skipped_cycles: int = 0
        self.candidates: int = 0
        self.novel: int = 0
        self.stale: int = 0
        self.qualified: int = 0
        self.notified: int = 0
        self.notify_failures: int = 0
        self.fallbacks: int = 0
        self._source_errors: Counter[str] = Counter()

    def record_cycle(
        self,
        *,
        candidates: int,
        novel: int,
        stale: int,
        qualified: int,
        notified: int,
        failed: int,
    ) -> None:
        with self._lock:
            self.cycles += 1
            self.candidates += candidates
            self.novel += novel
            self.stale += stale
            self.qualified += qualified
            self.notified += notified
            self.notify_failures += failed

    def record_skip(self) -> None:
        with self._lock:
            self.skipped_cycles += 1

    def record_fallback(self) -> None:
        with self._lock:
            self.fallbacks += 1

    def record_source_error(self, source: str) -> None:
        with self._lock:
            self._source_errors[source] += 1

    def source_errors(self, source: str) -> int:
        return self._source_errors[source]

    @property
    def uptime_min(self) -> float:
        return (time.monotonic() - self._start_time) / 60

    def get_summary(self) -> dict:
        with self._lock:
            return {
                "uptime_min": round(self.uptime_min, 1),
                "cycles": self.cycles,
                "skipped_cycles": self.skipped_cycles,
                "candidates": self.candidates,
                "novel": self.novel,
                "stale": self.stale,
                "qualified": self.qualified,
                "notified": self.notified,
                "notify_failures": self.notify_failures,
                "fallbacks": self.fallbacks,
                "source_errors": dict(self._source_errors),
            }

    def format_stats_line(self) -> str:
        s = self.get_summary()
        parts = [
            f"cycles={s['cycles']}",
            f"skipped={s['skipped_cycles']}",
            f"candidates={s['candidates']}",
            f"novel={s['novel']}",
            f"qualified={s['qualified']}",
            f"sent={s['notified']}",
        ]
        if s["notify_failures"]:
            parts.append(f"send_fail={s['notify_failures']}")
        if s["source_errors"]:
            errs = ",".join(f"{k}:{v}" for k, v in sorted(s["source_errors"].items()))
            parts.append(f"src_err={errs}")
        return " ".join(parts)
