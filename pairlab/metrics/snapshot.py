"""Aggregate pair statistics per (pair, timeframe) for the snapshot report.

This is the metrics aggregation layer. Low-level computation lives in pairlab/stats/.
"""

import logging
import time
from dataclasses import dataclass, field

import numpy as np

from pairlab.config.pairs import SnapshotConfig
from pairlab.data.alignment import InsufficientDataError, PairSeries
from pairlab.data.fetcher import PriceFetcher
from pairlab.spread.pair import PairSpec
from pairlab.stats.correlation import beta_stability, correlation_and_beta, simple_returns
from pairlab.stats.halflife import half_life_from_autocorr
from pairlab.stats.stationarity import (
    adf_pvalue,
    diff_autocorrelation,
    is_cointegrated,
    mean_reversion_rate,
    pseudo_adf,
)
from pairlab.stats.zscore import ZScoreError, log_spread, spread_zscore
from pairlab.utils.constants import ZSCORE_WINDOW

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PairStatistics:
    """Snapshot statistics for one pair over one lookback."""
    days: int
    correlation: float
    beta: float                 # hedge ratio: $beta of leg 2 per $1 of leg 1
    current_spread: float
    mean_spread: float
    zscore: float
    mean_reversion_rate: float
    autocorrelation: float      # lag-1 autocorrelation of spread changes
    adf_stat: float             # heuristic pseudo-ADF (-rho * sqrt(N))
    is_cointegrated: bool
    half_life: float | None
    gamma: float                # beta instability vs. a recent sub-window
    adf_pvalue: float           # statsmodels ADF, informational only


@dataclass
class TimeframeResult:
    """Statistics for one lookback, or the reason they could not be computed."""
    days: int
    stats: PairStatistics | None = None
    error: str | None = None
    source: str | None = None

    @property
    def ok(self) -> bool:
        return self.stats is not None


@dataclass
class PairSnapshot:
    """All timeframe results for one pair."""
    pair: PairSpec
    results: list[TimeframeResult] = field(default_factory=list)

    def successful(self) -> list[TimeframeResult]:
        return sorted((r for r in self.results if r.ok), key=lambda r: r.days)

    def failed(self) -> list[TimeframeResult]:
        return [r for r in self.results if not r.ok]


def compute_pair_statistics(
    prices_1,
    prices_2,
    current_1: float,
    current_2: float,
    zscore_window: int = ZSCORE_WINDOW,
) -> PairStatistics:
    """Compute correlation, hedge ratio, spread z-score and cointegration heuristics.

    Parameters
    ----------
    prices_1, prices_2 : array-like
        Aligned historical closes (oldest first), same length N >= 2.
    current_1, current_2 : float
        Current prices used for the current spread.
    zscore_window : int
        Trailing window for spread mean/std (capped at N).

    Raises
    ------
    ZScoreError
        If the spread window has zero standard deviation.
    ValueError
        If the series are too short or of different lengths.
    """
    p1 = np.asarray(prices_1, dtype=np.float64)
    p2 = np.asarray(prices_2, dtype=np.float64)
    if len(p1) != len(p2):
        raise ValueError(f"Price series length mismatch: {len(p1)} vs {len(p2)}")
    if len(p1) < 2:
        raise ValueError(f"Need at least 2 prices, got {len(p1)}")

    r1 = simple_returns(p1)
    r2 = simple_returns(p2)
    correlation, beta = correlation_and_beta(r1, r2)

    spreads = log_spread(p1, p2, beta)
    current_spread = float(np.log(current_1) - beta * np.log(current_2))
    z = spread_zscore(spreads, current_spread, window=zscore_window)

    mr_rate = mean_reversion_rate(spreads, z.mean_spread)
    rho = diff_autocorrelation(spreads)
    adf_stat = pseudo_adf(rho, len(spreads))

    return PairStatistics(
        days=len(p1),
        correlation=correlation,
        beta=beta,
        current_spread=z.current_spread,
        mean_spread=z.mean_spread,
        zscore=z.zscore,
        mean_reversion_rate=mr_rate,
        autocorrelation=rho,
        adf_stat=float(adf_stat),
        is_cointegrated=is_cointegrated(adf_stat, mr_rate, rho),
        half_life=half_life_from_autocorr(rho, len(spreads) - 1),
        gamma=beta_stability(r1, r2, beta),
        adf_pvalue=adf_pvalue(spreads),
    )


def statistics_for_series(series: PairSeries, zscore_window: int = ZSCORE_WINDOW) -> PairStatistics:
    """compute_pair_statistics() on a fetched PairSeries."""
    return compute_pair_statistics(
        series.df["close_1"].values,
        series.df["close_2"].values,
        series.current_1,
        series.current_2,
        zscore_window=zscore_window,
    )


def run_snapshot(
    config: SnapshotConfig,
    fetcher: PriceFetcher,
    sleep=time.sleep,
) -> list[PairSnapshot]:
    """Fetch and analyse every (pair, timeframe) sequentially.

    A fixed config.request_delay is slept before each request except the
    first. Failures are recorded per timeframe and never abort the run.
    """
    snapshots = []
    first = True

    for pair in config.pairs:
        logger.info(f"Analyzing {pair.name}...")
        snap = PairSnapshot(pair=pair)

        for days in config.timeframes:
            logger.info(f"  {days}d...")
            if not first and config.request_delay > 0:
                sleep(config.request_delay)
            first = False

            try:
                series = fetcher.fetch_pair(pair, days)
                stats = statistics_for_series(series, zscore_window=config.zscore_window)
                snap.results.append(TimeframeResult(days=days, stats=stats, source=series.source))
            except (InsufficientDataError, ZScoreError, ValueError) as e:
                logger.warning(f"  Error: {e}")
                snap.results.append(TimeframeResult(days=days, error=str(e)))

        snapshots.append(snap)

    return snapshots
