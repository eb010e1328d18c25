"""Indicator computation utilities.

ATR here is Wilder-smoothed and seeded with a simple average. Values during
the warm-up are None rather than NaN so that "absent" is explicit.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .errors import InvalidInputError
from .types import Candle


def _is_finite(x) -> bool:
    try:
        return bool(np.isfinite(x))
    except TypeError:
        return False


def validate_candles(candles: Sequence[Candle]) -> None:
    """Fail fast on empty input or candles with missing/non-finite OHLC."""
    if candles is None or len(candles) == 0:
        raise InvalidInputError("candles must not be empty")
    for i, c in enumerate(candles):
        for name in ("open", "high", "low", "close"):
            if not _is_finite(getattr(c, name, None)):
                raise InvalidInputError(f"candle {i} has missing or non-finite '{name}'")


def true_range(high: float, low: float, prev_close: float) -> float:
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


def compute_atr(candles: Sequence[Candle], period: int) -> List[Optional[float]]:
    """Average True Range aligned 1:1 with ``candles``.

    - i < period: None (insufficient history)
    - i == period: mean of the true ranges of candles 0..period-1, where the
      close before candle 0 is taken as 0
    - i > period: Wilder smoothing, (ATR[i-1] * (period - 1) + TR[i]) / period
    """
    if not isinstance(period, (int, np.integer)) or isinstance(period, bool) or period <= 0:
        raise InvalidInputError("period must be a positive integer")
    validate_candles(candles)

    n = len(candles)
    atr_values: List[Optional[float]] = [None] * n
    if n <= period:
        return atr_values

    seed = 0.0
    for i in range(period):
        prev_close = candles[i - 1].close if i > 0 else 0.0
        seed += true_range(candles[i].high, candles[i].low, prev_close)
    atr_values[period] = seed / period

    prev = atr_values[period]
    for i in range(period + 1, n):
        tr = true_range(candles[i].high, candles[i].low, candles[i - 1].close)
        prev = (prev * (period - 1) + tr) / period
        atr_values[i] = prev

    return atr_values
