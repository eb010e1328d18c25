"""Very small random-search optimizer over Supertrend parameters.

Samples (atr_period, multiplier) pairs from a hand-picked grid without
replacement and ranks them by realized profit.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .backtest import run_supertrend
from .config import SimulationConfig, SupertrendConfig
from .metrics import equity_curve, max_drawdown, win_rate
from .types import Candle

logger = logging.getLogger(__name__)

ATR_PERIODS = [7, 10, 14, 20]
MULTIPLIERS = [2.0, 3.0, 4.0]


@dataclass(frozen=True)
class OptResult:
    score: float
    total_trades: int
    win_rate: float
    max_dd: float
    params: SupertrendConfig


def random_search_supertrend(
    candles: Sequence[Candle],
    n_evals: int = 12,
    seed: int = 7,
    sim_cfg: SimulationConfig = SimulationConfig(),
    atr_periods: Sequence[int] = ATR_PERIODS,
    multipliers: Sequence[float] = MULTIPLIERS,
    output_dir: Optional[str | Path] = None,
) -> list[OptResult]:
    """Random search; results are sorted best-first by total profit."""
    rng = random.Random(seed)
    grid = list(itertools.product(atr_periods, multipliers))
    picks = rng.sample(grid, k=min(max(0, int(n_evals)), len(grid)))

    results: list[OptResult] = []
    for atr_period, multiplier in picks:
        cfg = SupertrendConfig(atr_period=int(atr_period), multiplier=float(multiplier))
        stats = run_supertrend(candles, cfg, sim_cfg).stats
        mdd = max_drawdown(equity_curve(stats, sim_cfg.initial_balance))
        results.append(
            OptResult(
                score=float(stats.total_profit),
                total_trades=stats.total_trades,
                win_rate=win_rate(stats),
                max_dd=mdd,
                params=cfg,
            )
        )
        logger.debug("atr_period=%s multiplier=%s profit=%.4f", atr_period, multiplier, stats.total_profit)

    # sort best-first
    results.sort(key=lambda r: r.score, reverse=True)

    if output_dir is not None:
        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        rows = []
        for r in results:
            d = r.params.__dict__.copy()
            d.update({"score": r.score, "total_trades": r.total_trades, "win_rate": r.win_rate, "max_dd": r.max_dd})
            rows.append(d)
        pd.DataFrame(rows).to_csv(out_dir / "opt_results.csv", index=False, encoding="utf-8")

    if results:
        best = results[0]
        logger.info("best: atr_period=%d multiplier=%.2f profit=%.4f", best.params.atr_period, best.params.multiplier, best.score)
    return results
