import pandas as pd
import pytest

from st_signal.backtest import run_supertrend, run_supertrend_from_csv
from st_signal.config import SimulationConfig, SupertrendConfig
from st_signal.types import BUY, SELL


def test_run_supertrend_in_memory(walk_candles):
    result = run_supertrend(
        walk_candles(400, seed=9),
        SupertrendConfig(atr_period=7, multiplier=2.0),
        SimulationConfig(fee=0.0, initial_balance=100.0, slippage=0.0),
    )
    assert result.points
    assert all(p.signal in (BUY, SELL) for p in result.points)
    assert result.stats.final_balance == pytest.approx(100.0 + result.stats.total_profit)


def test_run_from_csv_writes_outputs(tmp_path, walk_candles):
    candles = walk_candles(300, seed=4)
    csv_path = tmp_path / "candles.csv"
    pd.DataFrame(
        {
            "timestamp": [1_700_000_000_000 + c.timestamp for c in candles],
            "open": [c.open for c in candles],
            "high": [c.high for c in candles],
            "low": [c.low for c in candles],
            "close": [c.close for c in candles],
            "volume": [c.volume for c in candles],
        }
    ).to_csv(csv_path, index=False)

    out = run_supertrend_from_csv(
        csv_path,
        "SOL/USDT",
        output_dir=tmp_path / "out",
        st_cfg=SupertrendConfig(atr_period=7, multiplier=2.0),
    )

    assert out["signals"].name == "signals_SOL_USDT.csv"
    assert out["signals"].exists()
    assert out["trades"].exists()

    signals = pd.read_csv(out["signals"])
    assert set(signals["signal"]) <= {BUY, SELL}
    trades = pd.read_csv(out["trades"])
    assert len(trades) == out["stats"].total_trades
