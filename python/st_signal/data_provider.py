"""CSV candle loading and result export on a standardized OHLCV schema.

These adapters live outside the pure engine: the engine itself only sees
sequences of ``Candle``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from .errors import InvalidInputError
from .types import Candle, ClosedTrade, SupertrendPoint

REQUIRED_COLUMNS = ["Open", "High", "Low", "Close", "Volume"]


@dataclass(frozen=True)
class OhlcvFrame:
    """Standard OHLCV dataframe wrapper."""

    df: pd.DataFrame  # columns: Open, High, Low, Close, Volume; index: datetime
    symbol: str


def _standardize_ohlcv_columns(df: pd.DataFrame) -> pd.DataFrame:
    rename_map = {}
    for col in df.columns:
        c = str(col).strip().lower()
        if c in {"open", "o"}:
            rename_map[col] = "Open"
        elif c in {"high", "h"}:
            rename_map[col] = "High"
        elif c in {"low", "l"}:
            rename_map[col] = "Low"
        elif c in {"close", "c"}:
            rename_map[col] = "Close"
        elif c in {"volume", "vol", "v"}:
            rename_map[col] = "Volume"
    df = df.rename(columns=rename_map).copy()

    # Volume is informational only; tolerate exchanges that omit it.
    if "Volume" not in df.columns:
        df["Volume"] = 0.0

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InvalidInputError(f"Missing required OHLCV columns: {missing}")

    df = df[REQUIRED_COLUMNS].astype(float)
    df = df[~df.index.duplicated(keep="last")].sort_index()
    return df


class CsvProvider:
    """Load OHLCV candles from a CSV file."""

    def fetch(self, csv_path: str | Path, symbol: str, datetime_col: str = "timestamp") -> OhlcvFrame:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(str(path))

        df = pd.read_csv(path)
        if datetime_col not in df.columns:
            # try common alternatives
            for cand in ["Timestamp", "Date", "Datetime", "datetime", "date", "Time", "time"]:
                if cand in df.columns:
                    datetime_col = cand
                    break

        if datetime_col not in df.columns:
            raise InvalidInputError(f"CSV must contain a datetime column. Tried '{datetime_col}' and common aliases.")

        ts = df[datetime_col]
        # exchange exports use epoch milliseconds
        if pd.api.types.is_numeric_dtype(ts):
            df[datetime_col] = pd.to_datetime(ts, unit="ms", utc=True)
        else:
            df[datetime_col] = pd.to_datetime(ts)
        df = df.set_index(datetime_col).sort_index()

        df = _standardize_ohlcv_columns(df)
        return OhlcvFrame(df=df, symbol=symbol)


def candles_from_frame(frame: OhlcvFrame | pd.DataFrame) -> List[Candle]:
    """Convert a standardized frame into time-ascending candles."""
    df = frame.df if isinstance(frame, OhlcvFrame) else _standardize_ohlcv_columns(frame)
    df = df.sort_index()
    if df[["Open", "High", "Low", "Close"]].isna().any().any():
        raise InvalidInputError("OHLC columns contain missing values")

    candles = []
    for ts, row in zip(df.index, df.itertuples(index=False)):
        if isinstance(ts, pd.Timestamp):
            ts = ts.to_pydatetime()
        candles.append(
            Candle(
                timestamp=ts,
                open=float(row.Open),
                high=float(row.High),
                low=float(row.Low),
                close=float(row.Close),
                volume=float(row.Volume),
            )
        )
    return candles


def points_to_frame(points: Sequence[SupertrendPoint]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(p) for p in points], columns=["timestamp", "trend_value", "signal"])
    return df.set_index("timestamp")


def trades_to_frame(trades: Sequence[ClosedTrade]) -> pd.DataFrame:
    cols = ["entry_timestamp", "exit_timestamp", "entry_price", "exit_price", "quantity", "profit", "return_pct"]
    return pd.DataFrame([asdict(t) for t in trades], columns=cols)
