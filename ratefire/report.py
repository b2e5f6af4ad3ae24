from __future__ import annotations

from .shutdown import REASON_LIMIT, REASON_SIGNAL
from .stats import Summary


def requests_per_second(total: int, elapsed: float) -> float:
    # Float division; runs under a second still get a meaningful rate.
    return total / max(0.001, elapsed)


def summary_lines(summary: Summary, reason: str | None = None, detail: str | None = None) -> list[str]:
    rps = requests_per_second(summary.total, summary.elapsed)
    lines = [f"Completed {summary.total} requests in {summary.elapsed:.2f}s at {rps:.2f} requests/second."]
    for code in sorted(summary.by_status):
        lines.append(f"  [{code}] {summary.by_status[code]}")
    lines.append(f"  [ERR] {summary.errors}")
    if reason == REASON_SIGNAL:
        lines.append(f"Exiting on signal {detail}")
    elif reason == REASON_LIMIT:
        lines.append(f"Exiting after reaching limit of {detail} requests")
    return lines
