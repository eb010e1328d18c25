from __future__ import annotations

import random

import pytest

from st_signal.types import Candle

MINUTE_MS = 60_000


def _build(closes, spread=0.5, start=0, step=MINUTE_MS):
    return [
        Candle(
            timestamp=start + i * step,
            open=float(c),
            high=float(c) + spread,
            low=float(c) - spread,
            close=float(c),
            volume=1.0,
        )
        for i, c in enumerate(closes)
    ]


@pytest.fixture
def make_candles():
    """Candles with fixed high/low spread around each close."""
    return _build


@pytest.fixture
def walk_candles():
    """Deterministic random-walk candles."""

    def _walk(n=300, seed=42, start_price=100.0):
        rng = random.Random(seed)
        closes = []
        price = start_price
        for _ in range(n):
            price = max(1.0, price + rng.gauss(0, 1.5))
            closes.append(price)
        return _build(closes, spread=0.8)

    return _walk


@pytest.fixture
def crossover_closes():
    # period=2, multiplier=1: SELL at index 7, BUY at index 10
    return [10, 11, 12, 13, 14, 15, 16, 12, 8, 6, 10, 14]
