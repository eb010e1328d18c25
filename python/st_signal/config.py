"""Configuration objects.

Style rules:
- keep signatures stable (no alias chaos)
- prefer explicit field names
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional


def _map_params(d: dict, mapping: dict[str, str]) -> dict:
    kwargs = {}
    for k, v in (d or {}).items():
        if k in mapping:
            kwargs[mapping[k]] = v
    return kwargs


@dataclass(frozen=True)
class SupertrendConfig:
    """Supertrend indicator parameters."""

    atr_period: int = 10
    multiplier: float = 3.0
    # drop points without a BUY/SELL before reporting
    keep_only_signals: bool = True

    @classmethod
    def from_params_dict(cls, d: dict) -> "SupertrendConfig":
        """Create from a request/params dict (camelCase keys). Unknown keys are ignored."""
        mapping = {
            "atrPeriod": "atr_period",
            "atrLength": "atr_period",
            "multiplier": "multiplier",
            "doFilter": "keep_only_signals",
            "keepOnlySignals": "keep_only_signals",
        }
        kwargs = _map_params(d, mapping)
        if "atr_period" in kwargs:
            kwargs["atr_period"] = int(kwargs["atr_period"])
        if "multiplier" in kwargs:
            kwargs["multiplier"] = float(kwargs["multiplier"])
        return cls(**kwargs)


@dataclass(frozen=True)
class SimulationConfig:
    """Paper-trading parameters.

    ``fee`` is a flat amount charged per leg; ``slippage`` is a fraction of
    the reference price.
    """

    fee: float = 0.02
    initial_balance: float = 100.0
    slippage: float = 0.005

    # The original backtest rounded reference prices to 2 decimals. Off by default.
    price_decimals: Optional[int] = None

    @classmethod
    def from_params_dict(cls, d: dict) -> "SimulationConfig":
        mapping = {
            "transactionFee": "fee",
            "fee": "fee",
            "initialBalance": "initial_balance",
            "slippage": "slippage",
            "priceDecimals": "price_decimals",
        }
        kwargs = _map_params(d, mapping)
        for k in ("fee", "initial_balance", "slippage"):
            if k in kwargs:
                kwargs[k] = float(kwargs[k])
        return cls(**kwargs)


@dataclass(frozen=True)
class LoggingConfig:
    """Logging level, read from LOG_LEVEL when not given."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
