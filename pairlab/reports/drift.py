"""Beta drift analysis: does hedge-ratio drift during a trade predict its outcome?

Trades are bucketed by absolute drift |beta_exit - beta_entry| and by drift as a
percentage of the entry beta. Buckets are half-open [min, max).
"""

from dataclasses import dataclass

import pandas as pd

from pairlab.reports.parser import Trade
from pairlab.utils.constants import (
    ABSOLUTE_DRIFT_BUCKETS,
    PERCENT_DRIFT_BUCKETS,
    TOP_DRIFT_COUNT,
)


@dataclass
class DriftBucket:
    """Aggregated outcome statistics for one drift range."""
    label: str
    min: float
    max: float
    count: int
    win_rate: float                 # % of trades with ROI > 0
    avg_roi: float
    avg_error: float                # mean |error %|
    avg_abs_error: float | None     # mean |actual - predicted|; absolute buckets only
    diverged_count: int
    diverged_percent: float


@dataclass
class DriftAnalysis:
    """Output of analyze_beta_drift()."""
    absolute: list[DriftBucket]
    percent: list[DriftBucket]
    top_drift: list[Trade]
    n_valid: int

    def absolute_bucket(self, label: str) -> DriftBucket | None:
        return next((b for b in self.absolute if b.label == label), None)


def trades_to_frame(trades: list[Trade]) -> pd.DataFrame:
    """Tabulate trades; absent numbers become NaN, divergence stays object-typed."""
    return pd.DataFrame(
        {
            "abs_drift": [t.abs_beta_drift for t in trades],
            "pct_drift": [t.percent_beta_drift for t in trades],
            "roi": [t.actual_roi for t in trades],
            "error_pct": [t.error_percent for t in trades],
            "difference": [t.difference for t in trades],
            "won": [t.won for t in trades],
            "diverged": pd.Series([t.diverged for t in trades], dtype=object),
        },
    ).astype({"abs_drift": float, "pct_drift": float, "roi": float,
              "error_pct": float, "difference": float, "won": bool})


def _assign_buckets(values: pd.Series, buckets: list[tuple[str, float, float]]) -> pd.Series:
    edges = [b[1] for b in buckets] + [buckets[-1][2]]
    labels = [b[0] for b in buckets]
    return pd.cut(values, bins=edges, labels=labels, right=False)


def _summarize(
    df: pd.DataFrame,
    buckets: list[tuple[str, float, float]],
    bucket_col: pd.Series,
    with_abs_error: bool,
) -> list[DriftBucket]:
    out = []
    for label, lo, hi in buckets:
        group = df.loc[bucket_col == label]
        n = len(group)
        if n == 0:
            continue

        # Missing values count as 0 in the averages but remain in the denominator
        avg_roi = group["roi"].fillna(0.0).sum() / n
        avg_error = group["error_pct"].fillna(0.0).abs().sum() / n
        avg_abs_error = group["difference"].fillna(0.0).abs().sum() / n if with_abs_error else None
        diverged = int(group["diverged"].eq(True).sum())

        out.append(DriftBucket(
            label=label,
            min=lo,
            max=hi,
            count=n,
            win_rate=float(group["won"].sum()) / n * 100,
            avg_roi=float(avg_roi),
            avg_error=float(avg_error),
            avg_abs_error=None if avg_abs_error is None else float(avg_abs_error),
            diverged_count=diverged,
            diverged_percent=diverged / n * 100,
        ))
    return out


def top_trades_by_drift(trades: list[Trade], n: int = TOP_DRIFT_COUNT) -> list[Trade]:
    """Trades with the largest absolute drift, descending; ties keep input order."""
    return sorted(trades, key=lambda t: t.abs_beta_drift or 0.0, reverse=True)[:n]


def analyze_beta_drift(trades: list[Trade]) -> DriftAnalysis:
    """Bucket trades by absolute and percent beta drift.

    Trades without an absolute drift are excluded from every output. Percent
    buckets additionally exclude trades without a percent drift.
    """
    valid = [t for t in trades if t.abs_beta_drift is not None]
    if not valid:
        return DriftAnalysis(absolute=[], percent=[], top_drift=[], n_valid=0)

    df = trades_to_frame(valid)

    abs_bucket = _assign_buckets(df["abs_drift"], ABSOLUTE_DRIFT_BUCKETS)
    absolute = _summarize(df, ABSOLUTE_DRIFT_BUCKETS, abs_bucket, with_abs_error=True)

    pct_bucket = _assign_buckets(df["pct_drift"], PERCENT_DRIFT_BUCKETS)
    percent = _summarize(df, PERCENT_DRIFT_BUCKETS, pct_bucket, with_abs_error=False)

    return DriftAnalysis(
        absolute=absolute,
        percent=percent,
        top_drift=top_trades_by_drift(valid),
        n_valid=len(valid),
    )
