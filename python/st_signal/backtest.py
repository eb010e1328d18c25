"""Backtest runner: candles -> Supertrend signals -> paper-trading stats."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .config import SimulationConfig, SupertrendConfig
from .data_provider import CsvProvider, OhlcvFrame, candles_from_frame, points_to_frame, trades_to_frame
from .profit import simulate
from .signals import supertrend_sorted
from .types import Candle, ProfitStats, SupertrendPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacktestResult:
    points: List[SupertrendPoint]
    stats: ProfitStats


def run_supertrend(
    candles: Sequence[Candle],
    st_cfg: SupertrendConfig = SupertrendConfig(),
    sim_cfg: SimulationConfig = SimulationConfig(),
) -> BacktestResult:
    """In-memory backtest; no I/O."""
    points = supertrend_sorted(candles, st_cfg.atr_period, st_cfg.multiplier, st_cfg.keep_only_signals)
    stats = simulate(
        points,
        fee=sim_cfg.fee,
        initial_balance=sim_cfg.initial_balance,
        slippage=sim_cfg.slippage,
        price_decimals=sim_cfg.price_decimals,
    )
    return BacktestResult(points=points, stats=stats)


def run_supertrend_from_csv(
    csv_path: str | Path,
    symbol: str,
    output_dir: str | Path = "outputs",
    st_cfg: SupertrendConfig = SupertrendConfig(),
    sim_cfg: SimulationConfig = SimulationConfig(),
) -> dict:
    frame = CsvProvider().fetch(csv_path=csv_path, symbol=symbol)
    return _run_core(frame, output_dir, st_cfg, sim_cfg)


def _run_core(
    frame: OhlcvFrame,
    output_dir: str | Path,
    st_cfg: SupertrendConfig,
    sim_cfg: SimulationConfig,
) -> dict:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    candles = candles_from_frame(frame)
    result = run_supertrend(candles, st_cfg, sim_cfg)
    logger.info(
        "%s: %d candles, %d points, %d trades, profit %.4f",
        frame.symbol,
        len(candles),
        len(result.points),
        result.stats.total_trades,
        result.stats.total_profit,
    )

    tag = frame.symbol.replace("/", "_").replace(".", "_")
    signals_path = out_dir / f"signals_{tag}.csv"
    trades_path = out_dir / f"trades_{tag}.csv"
    points_to_frame(result.points).to_csv(signals_path, encoding="utf-8")
    trades_to_frame(result.stats.trades).to_csv(trades_path, index=False, encoding="utf-8")

    return {"signals": signals_path, "trades": trades_path, "stats": result.stats}
