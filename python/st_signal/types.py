"""Shared types for the Supertrend signal engine.

The guiding principle is to keep the runtime objects small and explicit.
Every object here is a value produced by one computation pass and consumed
by the next stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .errors import InvalidInputError

BUY = "BUY"
SELL = "SELL"

PENDING = "PENDING"
SUCCESS = "SUCCESS"
FAILURE = "FAILURE"

TRADE_TYPES = (BUY, SELL)
TRADE_STATUSES = (PENDING, SUCCESS, FAILURE)


@dataclass(frozen=True)
class Candle:
    """OHLCV candle.

    ``timestamp`` may be any totally ordered value (epoch millis, datetime).
    """

    timestamp: Any
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @classmethod
    def from_mapping(cls, d: Mapping[str, Any]) -> "Candle":
        """Build a candle from a dict with lowercase OHLCV keys."""
        missing = [k for k in ("timestamp", "open", "high", "low", "close") if d.get(k) is None]
        if missing:
            raise InvalidInputError(f"Candle is missing fields: {missing}")
        return cls(
            timestamp=d["timestamp"],
            open=float(d["open"]),
            high=float(d["high"]),
            low=float(d["low"]),
            close=float(d["close"]),
            volume=float(d.get("volume") or 0.0),
        )


@dataclass(frozen=True)
class SupertrendPoint:
    """One Supertrend output per candle.

    ``trend_value`` and ``signal`` are None during the ATR warm-up.
    """

    timestamp: Any
    trend_value: Optional[float] = None
    signal: Optional[str] = None  # 'BUY'/'SELL'/None


@dataclass(frozen=True)
class Trade:
    """A persisted trade record, as read from the ledger."""

    type: str  # 'BUY'/'SELL'
    status: str  # 'PENDING'/'SUCCESS'/'FAILURE'
    amount: float
    expected_execution_price: float
    actual_execution_price: Optional[float] = None
    fee: Optional[float] = None
    creation_date: Any = None

    @classmethod
    def from_mapping(cls, d: Mapping[str, Any]) -> "Trade":
        """Build from a ledger document (camelCase keys, as stored)."""
        return cls(
            type=str(d.get("type", "")).upper(),
            status=str(d.get("status", "")).upper(),
            amount=d.get("amount"),
            expected_execution_price=d.get("expectedExecutionPrice"),
            actual_execution_price=d.get("actualExecutionPrice"),
            fee=d.get("fee"),
            creation_date=d.get("creationDate"),
        )


@dataclass(frozen=True)
class ClosedTrade:
    """A realized BUY -> SELL round trip."""

    entry_timestamp: Any
    exit_timestamp: Any
    entry_price: float
    exit_price: float
    quantity: float
    profit: float
    return_pct: float  # profit relative to the cost basis, in percent


@dataclass(frozen=True)
class ProfitStats:
    """Aggregate performance of one simulation/reconciliation track.

    Invariants: total_trades == total_wins + total_losses and
    total_profit == final_balance - initial balance (within float rounding).
    """

    final_balance: float
    total_trades: int = 0
    total_wins: int = 0
    total_losses: int = 0
    total_profit: float = 0.0
    trades: tuple[ClosedTrade, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReconciliationResult:
    """Ledger reconciliation: executed prices vs originally expected prices."""

    actual_profit: ProfitStats
    expected_profit: ProfitStats


@dataclass(frozen=True)
class LatestSignal:
    """Most recent point plus the last signaled point before it."""

    last_point: SupertrendPoint
    last_signaled_point: Optional[SupertrendPoint]

    @property
    def signal(self) -> Optional[str]:
        return self.last_point.signal
