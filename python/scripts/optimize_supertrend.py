from __future__ import annotations

import argparse

from st_signal.config import SimulationConfig
from st_signal.data_provider import CsvProvider, candles_from_frame
from st_signal.log import setup_logging
from st_signal.optimize import random_search_supertrend


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--csv", type=str, required=True)
    p.add_argument("--symbol", type=str, default="SOL/USDT")
    p.add_argument("--start", type=str, default=None)
    p.add_argument("--end", type=str, default=None)
    p.add_argument("--n_evals", type=int, default=12)
    p.add_argument("--seed", type=int, default=7)
    p.add_argument("--output_dir", type=str, default="outputs_opt")
    p.add_argument("--top", type=int, default=5)
    args = p.parse_args()

    setup_logging("st_signal")

    frame = CsvProvider().fetch(args.csv, args.symbol)
    df = frame.df
    if args.start or args.end:
        df = df.loc[args.start:args.end]
    candles = candles_from_frame(df)

    results = random_search_supertrend(
        candles,
        n_evals=args.n_evals,
        seed=args.seed,
        sim_cfg=SimulationConfig(),
        output_dir=args.output_dir,
    )
    for r in results[: args.top]:
        print(
            f"atr_period={r.params.atr_period} multiplier={r.params.multiplier:.2f} "
            f"profit={r.score:.4f} trades={r.total_trades} win_rate={r.win_rate:.2%} max_dd={r.max_dd:.2%}"
        )


if __name__ == "__main__":
    main()
