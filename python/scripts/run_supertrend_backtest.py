from __future__ import annotations

import argparse
import json

from st_signal.backtest import run_supertrend_from_csv
from st_signal.config import SimulationConfig, SupertrendConfig
from st_signal.log import setup_logging
from st_signal.metrics import summarize


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--csv", type=str, required=True, help="OHLCV CSV path (timestamp,open,high,low,close,volume).")
    p.add_argument("--symbol", type=str, default="SOL/USDT")
    p.add_argument("--output_dir", type=str, default="outputs")
    p.add_argument("--atr_period", type=int, default=10)
    p.add_argument("--multiplier", type=float, default=3.0)
    p.add_argument("--fee", type=float, default=0.02, help="Flat fee per leg. Default 0.02.")
    p.add_argument("--initial_balance", type=float, default=100.0)
    p.add_argument("--slippage", type=float, default=0.005, help="Fractional slippage. Default 0.005.")
    p.add_argument("--price_decimals", type=int, default=None, help="Round reference prices before slippage.")
    p.add_argument("--log_level", type=str, default=None)
    args = p.parse_args()

    setup_logging("st_signal", args.log_level)

    st_cfg = SupertrendConfig(atr_period=args.atr_period, multiplier=args.multiplier)
    sim_cfg = SimulationConfig(
        fee=args.fee,
        initial_balance=args.initial_balance,
        slippage=args.slippage,
        price_decimals=args.price_decimals,
    )

    out = run_supertrend_from_csv(
        csv_path=args.csv,
        symbol=args.symbol,
        output_dir=args.output_dir,
        st_cfg=st_cfg,
        sim_cfg=sim_cfg,
    )
    print(out["signals"])
    print(out["trades"])
    print(json.dumps(summarize(out["stats"], sim_cfg.initial_balance), indent=2))


if __name__ == "__main__":
    main()
