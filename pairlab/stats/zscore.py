"""Log-price spread and its z-score against a trailing window."""

from dataclasses import dataclass

import numpy as np

from pairlab.utils.constants import SPREAD_FLAT_RTOL, ZSCORE_WINDOW


class ZScoreError(ValueError):
    """Raised when the spread window has zero dispersion."""


@dataclass(frozen=True)
class SpreadZScore:
    """Current spread position relative to the trailing window."""
    current_spread: float
    mean_spread: float
    std_spread: float
    zscore: float
    window: int


def is_flat(values) -> bool:
    """True if the series has no dispersion beyond floating-point noise.

    A constant log spread (e.g. p1 = k * p2) leaves rounding residue of
    order 1e-16 rather than an exact zero std.
    """
    v = np.asarray(values, dtype=np.float64)
    v = v[np.isfinite(v)]
    if len(v) == 0:
        return True
    scale = max(1.0, float(np.abs(v).max()))
    return float(v.std()) <= SPREAD_FLAT_RTOL * scale


def log_spread(prices1, prices2, beta: float) -> np.ndarray:
    """S(t) = ln(p1) - beta * ln(p2)."""
    p1 = np.asarray(prices1, dtype=np.float64)
    p2 = np.asarray(prices2, dtype=np.float64)
    return np.log(p1) - beta * np.log(p2)


def spread_zscore(
    spreads,
    current_spread: float,
    window: int = ZSCORE_WINDOW,
) -> SpreadZScore:
    """Z-score of current_spread against the last min(window, len) spreads.

    Mean and standard deviation are population statistics (ddof=0).

    Raises
    ------
    ZScoreError
        If the window is constant (zero std up to rounding) or not finite.
    """
    s = np.asarray(spreads, dtype=np.float64)
    if len(s) == 0:
        raise ZScoreError("Empty spread series")

    w = min(window, len(s))
    recent = s[-w:]
    mean = float(recent.mean())
    std = float(recent.std())

    if not np.isfinite(std) or is_flat(recent):
        raise ZScoreError(f"Spread standard deviation is zero over the last {w} days")

    z = (current_spread - mean) / std
    if not np.isfinite(z):
        raise ZScoreError(f"Non-finite z-score (spread={current_spread}, mean={mean}, std={std})")

    return SpreadZScore(
        current_spread=float(current_spread),
        mean_spread=mean,
        std_spread=std,
        zscore=float(z),
        window=w,
    )
