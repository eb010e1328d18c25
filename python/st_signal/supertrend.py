"""Supertrend band/direction state machine.

The recurrence is path dependent: today's bands depend on yesterday's bands
and yesterday's close. It is written as a pure step function over an
explicit ``BandState`` so that it can be tested without a full candle series.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidInputError
from .indicators import compute_atr
from .types import BUY, SELL, Candle, SupertrendPoint

UP = 1
DOWN = -1


@dataclass(frozen=True)
class BandState:
    """Rolling band state carried from one candle to the next."""

    upper_band: float
    lower_band: float
    trend_value: float
    direction: int  # +1 uptrend, -1 downtrend


def initial_state(upper_band: float, lower_band: float) -> BandState:
    """Seed state at the first usable candle (uptrend by convention)."""
    return BandState(
        upper_band=upper_band,
        lower_band=lower_band,
        trend_value=lower_band,
        direction=UP,
    )


def supertrend_step(
    prev: Optional[BandState],
    candle: Candle,
    prev_close: float,
    atr: float,
    multiplier: float,
) -> Tuple[BandState, SupertrendPoint]:
    """Advance the state machine by one candle.

    ``prev`` is None at the first usable candle: the state is seeded from the
    raw bands and no signal is emitted there.
    """
    hl2 = (candle.high + candle.low) / 2.0
    upper_band = hl2 + multiplier * atr
    lower_band = hl2 - multiplier * atr

    seeding = prev is None
    if seeding:
        prev = initial_state(upper_band, lower_band)

    # Bands only move with the trend unless the previous close broke through.
    if upper_band < prev.upper_band or prev_close > prev.upper_band:
        curr_upper = upper_band
    else:
        curr_upper = prev.upper_band
    if lower_band > prev.lower_band or prev_close < prev.lower_band:
        curr_lower = lower_band
    else:
        curr_lower = prev.lower_band

    if prev.trend_value == prev.upper_band:
        direction = UP if candle.close > curr_upper else DOWN
    else:
        direction = DOWN if candle.close < curr_lower else UP

    trend_value = curr_lower if direction == UP else curr_upper

    signal = None
    if not seeding and direction != prev.direction:
        signal = BUY if direction == UP else SELL

    state = BandState(
        upper_band=curr_upper,
        lower_band=curr_lower,
        trend_value=trend_value,
        direction=direction,
    )
    return state, SupertrendPoint(timestamp=candle.timestamp, trend_value=trend_value, signal=signal)


def compute_supertrend(
    candles: Sequence[Candle],
    atr_period: int,
    multiplier: float,
) -> List[SupertrendPoint]:
    """One SupertrendPoint per candle.

    Candles must be in strictly ascending timestamp order; the result is
    undefined otherwise.
    """
    if not np.isfinite(multiplier) or multiplier <= 0:
        raise InvalidInputError("multiplier must be positive")
    atr = compute_atr(candles, atr_period)

    points: List[SupertrendPoint] = []
    state: Optional[BandState] = None
    for i, candle in enumerate(candles):
        if i < atr_period or atr[i] is None:
            points.append(SupertrendPoint(timestamp=candle.timestamp))
            continue
        state, point = supertrend_step(state, candle, candles[i - 1].close, atr[i], multiplier)
        points.append(point)

    return points
