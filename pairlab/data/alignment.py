"""Date alignment of two daily close series into a PairSeries."""

from dataclasses import dataclass

import pandas as pd

from pairlab.spread.pair import PairSpec


class InsufficientDataError(RuntimeError):
    """Not enough aligned history to compute statistics for the lookback."""


@dataclass
class PairSeries:
    """Aligned history for a pair plus the current price of each leg."""
    pair: PairSpec
    df: pd.DataFrame        # DatetimeIndex (UTC dates), columns: close_1, close_2
    current_1: float
    current_2: float
    source: str             # e.g. "binance" or "hyperliquid+cryptocompare"

    @property
    def days(self) -> int:
        return len(self.df)


def align_closes(closes_1: pd.Series, closes_2: pd.Series) -> pd.DataFrame:
    """Inner-join two close series on date."""
    merged = pd.concat(
        [closes_1.rename("close_1"), closes_2.rename("close_2")],
        axis=1,
        join="inner",
    ).sort_index()
    return merged.dropna()


def split_history(merged: pd.DataFrame, days: int) -> tuple[pd.DataFrame, pd.Series]:
    """Split aligned closes into `days` historical rows and the in-progress row.

    Raises
    ------
    InsufficientDataError
        If fewer than days + 1 aligned dates are available.
    """
    if len(merged) < days + 1:
        raise InsufficientDataError(f"Insufficient aligned data: {len(merged)} days")
    return merged.iloc[:-1].iloc[-days:], merged.iloc[-1]
