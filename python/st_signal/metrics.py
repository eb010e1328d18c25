"""Performance metrics."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .types import ProfitStats


def equity_curve(stats: ProfitStats, initial_balance: float) -> pd.Series:
    """Balance after each realized trade, indexed by exit timestamp.

    The first entry is the initial balance at the first trade's entry.
    """
    if not stats.trades:
        return pd.Series([float(initial_balance)], dtype=float, name="Balance")
    index = [stats.trades[0].entry_timestamp] + [t.exit_timestamp for t in stats.trades]
    balances = np.cumsum([float(initial_balance)] + [t.profit for t in stats.trades])
    return pd.Series(balances, index=index, dtype=float, name="Balance")


def max_drawdown(equity: pd.Series) -> float:
    """Maximum drawdown (as positive fraction)."""
    x = equity.astype(float).to_numpy()
    if len(x) == 0:
        return float("nan")
    peak = np.maximum.accumulate(x)
    dd = 1.0 - (x / np.maximum(peak, np.finfo(float).tiny))
    return float(np.nanmax(dd))


def win_rate(stats: ProfitStats) -> float:
    if stats.total_trades == 0:
        return float("nan")
    return stats.total_wins / stats.total_trades


def summarize(stats: ProfitStats, initial_balance: float) -> dict:
    """Flat dict for reporting (camelCase keys, as the HTTP layer expects)."""
    eq = equity_curve(stats, initial_balance)
    return {
        "initialBalance": float(initial_balance),
        "finalBalance": float(stats.final_balance),
        "totalTrades": int(stats.total_trades),
        "totalWins": int(stats.total_wins),
        "totalLosses": int(stats.total_losses),
        "totalProfit": float(stats.total_profit),
        "winRate": win_rate(stats),
        "maxDrawdown": max_drawdown(eq),
    }
