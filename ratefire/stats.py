from __future__ import annotations

import time
from dataclasses import dataclass, field

from .outcome import Outcome


@dataclass(frozen=True)
class Summary:
    total: int
    errors: int
    by_status: dict[int, int]
    elapsed: float


@dataclass
class RunningStatistics:
    """Running counters for one run.

    Owned by the aggregator loop: nothing else calls record().
    Invariant: sum(by_status.values()) + errors == total.
    """

    started_at: float = field(default_factory=time.monotonic)
    total: int = 0
    errors: int = 0
    by_status: dict[int, int] = field(default_factory=dict)
    _frozen: Summary | None = None

    def record(self, outcome: Outcome) -> None:
        if self._frozen is not None:
            raise RuntimeError("statistics already frozen")
        self.total += 1
        if outcome.ok:
            self.by_status[outcome.status_code] = self.by_status.get(outcome.status_code, 0) + 1
        else:
            self.errors += 1

    def freeze(self, now: float | None = None) -> Summary:
        """Stop counting and return the final snapshot (idempotent)."""
        if self._frozen is None:
            now = time.monotonic() if now is None else now
            self._frozen = Summary(
                total=self.total,
                errors=self.errors,
                by_status=dict(self.by_status),
                elapsed=max(0.0, now - self.started_at),
            )
        return self._frozen
