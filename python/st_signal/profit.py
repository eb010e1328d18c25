"""Profit simulator.

Two modes share one accumulator:
- paper: walk a Supertrend signal stream, fully investing the balance on BUY
- ledger: reconcile persisted trade records, tracking executed ("actual")
  and originally expected prices side by side

At most one long position is open at a time; nothing is ever shorted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np

from .config import SimulationConfig
from .errors import InvalidInputError
from .types import (
    BUY,
    SELL,
    SUCCESS,
    TRADE_STATUSES,
    TRADE_TYPES,
    ClosedTrade,
    ProfitStats,
    ReconciliationResult,
    SupertrendPoint,
    Trade,
)

logger = logging.getLogger(__name__)

PAPER = "paper"
LEDGER = "ledger"


def _is_finite(x) -> bool:
    try:
        return bool(np.isfinite(x))
    except TypeError:
        return False


@dataclass
class _OpenPosition:
    entry_price: float
    quantity: float
    fee_accrued: float
    entry_timestamp: Any


class _ProfitTrack:
    """Running balance and win/loss counters for one track."""

    def __init__(self, initial_balance: float, label: str = ""):
        self.initial_balance = float(initial_balance)
        self.balance = float(initial_balance)
        self.label = label
        self.total_trades = 0
        self.total_wins = 0
        self.total_losses = 0
        self.total_profit = 0.0
        self.trades: List[ClosedTrade] = []

    def realize(
        self,
        position: _OpenPosition,
        exit_price: float,
        exit_timestamp: Any,
        profit: float,
    ) -> None:
        self.balance += profit
        self.total_trades += 1
        self.total_profit += profit
        if profit >= 0:
            self.total_wins += 1
        else:
            self.total_losses += 1

        cost_basis = position.entry_price * position.quantity
        return_pct = (profit / cost_basis) * 100.0 if cost_basis else float("nan")
        self.trades.append(
            ClosedTrade(
                entry_timestamp=position.entry_timestamp,
                exit_timestamp=exit_timestamp,
                entry_price=float(position.entry_price),
                exit_price=float(exit_price),
                quantity=float(position.quantity),
                profit=float(profit),
                return_pct=float(return_pct),
            )
        )
        logger.debug(
            "%strade %s: buy %.6f -> sell %.6f qty %.6f profit %.6f (%.2f%%)",
            f"[{self.label}] " if self.label else "",
            "win" if profit >= 0 else "loss",
            position.entry_price,
            exit_price,
            position.quantity,
            profit,
            return_pct,
        )

    def stats(self) -> ProfitStats:
        return ProfitStats(
            final_balance=self.balance,
            total_trades=self.total_trades,
            total_wins=self.total_wins,
            total_losses=self.total_losses,
            total_profit=self.total_profit,
            trades=tuple(self.trades),
        )


def _check_balance(initial_balance: float) -> None:
    if not _is_finite(initial_balance) or initial_balance <= 0:
        raise InvalidInputError("initial_balance must be positive")


# ---------- paper mode ----------


def simulate(
    points: Sequence[SupertrendPoint],
    fee: float = 0.02,
    initial_balance: float = 100.0,
    slippage: float = 0.005,
    price_decimals: Optional[int] = None,
) -> ProfitStats:
    """Paper-trade a time-ascending signal stream.

    BUY opens a position at trend_value * (1 + slippage) using the whole
    balance. SELL closes it at trend_value * (1 - slippage); the flat ``fee``
    is charged for both legs. A position still open at the end is not
    realized.
    """
    _check_balance(initial_balance)
    if not _is_finite(fee) or fee < 0:
        raise InvalidInputError("fee must be non-negative")
    if not _is_finite(slippage) or not (0 <= slippage < 1):
        raise InvalidInputError("slippage must be in [0, 1)")

    track = _ProfitTrack(initial_balance)
    position: Optional[_OpenPosition] = None

    for point in points:
        if point.signal is None:
            continue
        if point.trend_value is None:
            raise InvalidInputError(f"signal at {point.timestamp} has no trend value")

        price = float(point.trend_value)
        if price_decimals is not None:
            price = round(price, int(price_decimals))

        if point.signal == BUY:
            if position is not None:
                logger.debug("BUY at %s ignored: position already open", point.timestamp)
                continue
            entry_price = price * (1 + slippage)
            position = _OpenPosition(
                entry_price=entry_price,
                quantity=track.balance / entry_price,
                fee_accrued=fee,
                entry_timestamp=point.timestamp,
            )
        elif point.signal == SELL:
            if position is None:
                logger.debug("SELL at %s ignored: no open position", point.timestamp)
                continue
            exit_price = price * (1 - slippage)
            profit = position.quantity * (exit_price - position.entry_price) - (position.fee_accrued + fee)
            track.realize(position, exit_price, point.timestamp, profit)
            position = None
        else:
            raise InvalidInputError(f"unknown signal: {point.signal!r}")

    return track.stats()


# ---------- ledger mode ----------


def _validate_trade(i: int, trade: Trade) -> None:
    if trade.type not in TRADE_TYPES:
        raise InvalidInputError(f"trade {i} has unknown type {trade.type!r}")
    if trade.status not in TRADE_STATUSES:
        raise InvalidInputError(f"trade {i} has unknown status {trade.status!r}")
    if trade.status != SUCCESS:
        return
    for name in ("amount", "actual_execution_price", "expected_execution_price"):
        if not _is_finite(getattr(trade, name)):
            raise InvalidInputError(f"successful trade {i} is missing '{name}'")
    if trade.fee is not None and not _is_finite(trade.fee):
        raise InvalidInputError(f"trade {i} has non-finite fee")


def _in_creation_order(trades: Sequence[Trade]) -> List[Trade]:
    if trades and all(t.creation_date is not None for t in trades):
        return sorted(trades, key=lambda t: t.creation_date)
    return list(trades)


def reconcile(trades: Sequence[Trade], initial_balance: float = 100.0) -> ReconciliationResult:
    """Replay successful ledger trades on an "actual" and an "expected" track.

    Actual prices already embed slippage; expected prices are slippage-free.
    Per round trip: profit = (sell * amount - sell_fee) - (buy * amount + buy_fee).
    A SELL without an open BUY is ignored; a second BUY replaces the open one.
    """
    _check_balance(initial_balance)
    for i, trade in enumerate(trades):
        _validate_trade(i, trade)

    actual = _ProfitTrack(initial_balance, label="actual")
    expected = _ProfitTrack(initial_balance, label="expected")
    open_actual: Optional[_OpenPosition] = None
    open_expected: Optional[_OpenPosition] = None

    for trade in _in_creation_order(trades):
        if trade.status != SUCCESS:
            continue
        fee = float(trade.fee or 0.0)
        amount = float(trade.amount)

        if trade.type == BUY:
            if open_actual is not None:
                logger.debug("BUY at %s replaces the open position", trade.creation_date)
            open_actual = _OpenPosition(float(trade.actual_execution_price), amount, fee, trade.creation_date)
            open_expected = _OpenPosition(float(trade.expected_execution_price), amount, fee, trade.creation_date)
            continue

        if open_actual is None:
            logger.debug("SELL at %s ignored: no open position", trade.creation_date)
            continue

        for track, position, sell_price in (
            (actual, open_actual, float(trade.actual_execution_price)),
            (expected, open_expected, float(trade.expected_execution_price)),
        ):
            cost = position.entry_price * position.quantity + position.fee_accrued
            earnings = sell_price * position.quantity - fee
            track.realize(position, sell_price, trade.creation_date, earnings - cost)
        open_actual = None
        open_expected = None

    return ReconciliationResult(actual_profit=actual.stats(), expected_profit=expected.stats())


def calculate_profit(
    records: Sequence[Any],
    mode: str = PAPER,
    sim_cfg: SimulationConfig = SimulationConfig(),
):
    """Single entry point for both profit modes.

    - mode="paper": ``records`` are SupertrendPoints, returns ProfitStats
    - mode="ledger": ``records`` are Trades, returns ReconciliationResult
    """
    mode_l = str(mode).lower()
    if mode_l == PAPER:
        return simulate(
            records,
            fee=sim_cfg.fee,
            initial_balance=sim_cfg.initial_balance,
            slippage=sim_cfg.slippage,
            price_decimals=sim_cfg.price_decimals,
        )
    if mode_l == LEDGER:
        return reconcile(records, initial_balance=sim_cfg.initial_balance)
    raise InvalidInputError(f"unknown profit mode: {mode!r}")
