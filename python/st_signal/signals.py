"""Signal stream post-processing."""

from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidInputError
from .supertrend import compute_supertrend
from .types import Candle, LatestSignal, SupertrendPoint


def normalize(points: Sequence[SupertrendPoint], keep_only_signals: bool) -> List[SupertrendPoint]:
    """Optionally drop signal-less points, then stable-sort by timestamp.

    Idempotent for a given flag.
    """
    out = [p for p in points if p.signal is not None] if keep_only_signals else list(points)
    # sorted() is stable: equal timestamps keep their relative order
    return sorted(out, key=lambda p: p.timestamp)


def supertrend_sorted(
    candles: Sequence[Candle],
    atr_period: int,
    multiplier: float,
    keep_only_signals: bool = True,
) -> List[SupertrendPoint]:
    """Compute Supertrend and return the canonical time-ascending stream."""
    return normalize(compute_supertrend(candles, atr_period, multiplier), keep_only_signals)


def latest_signal(points: Sequence[SupertrendPoint]) -> LatestSignal:
    """Summarize the tail of an unfiltered stream.

    The last signaled point is searched among the points before the latest
    one, so a fresh signal on the latest candle is reported once, as
    ``last_point.signal``.
    """
    ordered = normalize(points, keep_only_signals=False)
    if not ordered:
        raise InvalidInputError("points must not be empty")
    last = ordered[-1]
    if last.trend_value is None:
        raise InvalidInputError("latest point has no trend value (still in ATR warm-up)")

    last_signaled = None
    for p in reversed(ordered[:-1]):
        if p.signal is not None:
            last_signaled = p
            break
    return LatestSignal(last_point=last, last_signaled_point=last_signaled)
