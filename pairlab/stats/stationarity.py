"""Mean-reversion and cointegration diagnostics for a spread series.

Two flavours:
- Heuristic (snapshot parity): lag-1 autocorrelation of spread changes,
  pseudo-ADF = -rho * sqrt(N), combined with the mean-reversion rate.
  Thresholds are kept fixed for parity with earlier reports, not for
  statistical rigour.
- Full (statsmodels): augmented Dickey-Fuller with AIC lag selection,
  reported as an informational p-value only.
"""

import numpy as np
from numba import njit
from statsmodels.tsa.stattools import adfuller

from pairlab.stats.zscore import is_flat
from pairlab.utils.constants import (
    AUTOCORR_THRESHOLD,
    COINTEGRATION_ADF_THRESHOLD,
    MEAN_REVERSION_THRESHOLD,
)


@njit(cache=True)
def _reverting_transitions_numba(spreads, mean):
    """Count days where a deviation from mean is followed by a move back toward it."""
    count = 0
    for i in range(1, len(spreads)):
        deviation = spreads[i - 1] - mean
        change = spreads[i] - spreads[i - 1]
        if deviation > 0.0 and change < 0.0:
            count += 1
        elif deviation < 0.0 and change > 0.0:
            count += 1
    return count


def mean_reversion_rate(spreads, mean: float) -> float:
    """Fraction of day-to-day transitions that move back toward mean."""
    s = np.ascontiguousarray(spreads, dtype=np.float64)
    if len(s) < 2:
        return 0.0
    return _reverting_transitions_numba(s, float(mean)) / (len(s) - 1)


def diff_autocorrelation(spreads) -> float:
    """Lag-1 autocorrelation coefficient of first differences.

    autocov = sum_{i>=1} (d_i - m)(d_{i-1} - m) / (len(d) - 1)
    var     = sum (d_i - m)^2 / len(d)
    Returns 0.0 when the variance is zero or there are fewer than 2 differences.
    """
    d = np.diff(np.asarray(spreads, dtype=np.float64))
    if len(d) < 2:
        return 0.0

    dev = d - d.mean()
    var = (dev ** 2).sum() / len(d)
    if var <= 0.0:
        return 0.0
    autocov = (dev[1:] * dev[:-1]).sum() / (len(d) - 1)
    return float(autocov / var)


def pseudo_adf(autocorr: float, n: int) -> float:
    """Heuristic ADF-like statistic: -rho * sqrt(N)."""
    return -autocorr * np.sqrt(n)


def is_cointegrated(adf_stat: float, mr_rate: float, autocorr: float) -> bool:
    """Heuristic cointegration flag.

    True if adf_stat < -2.5, or if mr_rate > 0.5 and |autocorr| < 0.3.
    """
    return bool(
        adf_stat < COINTEGRATION_ADF_THRESHOLD
        or (mr_rate > MEAN_REVERSION_THRESHOLD and abs(autocorr) < AUTOCORR_THRESHOLD)
    )


def adf_pvalue(spreads) -> float:
    """ADF p-value (statsmodels, AIC lag selection).

    NaN when the series is too short or constant up to rounding.
    """
    s = np.asarray(spreads, dtype=np.float64)
    s = s[np.isfinite(s)]
    if len(s) < 10 or is_flat(s):
        return np.nan
    try:
        return float(adfuller(s, autolag="AIC")[1])
    except (ValueError, np.linalg.LinAlgError):
        return np.nan
