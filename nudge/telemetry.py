"""
Run statistics for property checks.

`CheckStats` counts what a single `Check.run` did and samples the process's
resident memory with psutil when the run finishes.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

import psutil


@dataclass
class CheckStats:
    """Counters for one property-check run."""

    start_time: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    corpus_size: int = 0
    iterations: int = 0
    mutations: int = 0
    exhausted_removed: int = 0
    shrink_attempts: int = 0
    shrink_accepted: int = 0
    shrink_errors: int = 0
    status: str | None = None
    elapsed_ms: int | None = None
    process_rss_mb: float | None = None
    _started: float = field(default_factory=time.monotonic, repr=False)

    def finish(self, status: str) -> None:
        """Record the outcome and take the end-of-run measurements."""
        self.status = status
        self.elapsed_ms = int((time.monotonic() - self._started) * 1000)
        try:
            rss = psutil.Process().memory_info().rss
            self.process_rss_mb = round(rss / (1024 * 1024), 2)
        except psutil.Error:
            self.process_rss_mb = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("_started")
        return data
