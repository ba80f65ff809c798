"""Return correlation and hedge ratio (beta) between two price series."""

import numpy as np

from pairlab.utils.constants import (
    GAMMA_MIN_RETURNS,
    GAMMA_SHORT_MIN_RETURNS,
    GAMMA_SHORT_WINDOW_MIN,
)


def simple_returns(prices) -> np.ndarray:
    """Daily simple returns (p[i] - p[i-1]) / p[i-1]."""
    p = np.asarray(prices, dtype=np.float64)
    return (p[1:] - p[:-1]) / p[:-1]


def _population_moments(r1: np.ndarray, r2: np.ndarray) -> tuple[float, float, float]:
    """Population covariance and variances (divide by n, not n-1)."""
    dev1 = r1 - r1.mean()
    dev2 = r2 - r2.mean()
    n = len(r1)
    return float((dev1 * dev2).sum() / n), float((dev1 ** 2).sum() / n), float((dev2 ** 2).sum() / n)


def beta_from_returns(r1: np.ndarray, r2: np.ndarray) -> float:
    """Hedge ratio beta = Cov(r1, r2) / Var(r2). Returns 0.0 when Var(r2) is 0."""
    cov, _, var2 = _population_moments(np.asarray(r1, dtype=np.float64), np.asarray(r2, dtype=np.float64))
    return cov / var2 if var2 > 0 else 0.0


def correlation_and_beta(r1, r2) -> tuple[float, float]:
    """Pearson correlation and beta of r1 on r2 from population moments.

    Degenerate inputs (a zero-variance leg) yield correlation 0.0; beta is
    0.0 when the explanatory leg r2 has zero variance.
    """
    r1 = np.asarray(r1, dtype=np.float64)
    r2 = np.asarray(r2, dtype=np.float64)
    if len(r1) != len(r2):
        raise ValueError(f"Return series length mismatch: {len(r1)} vs {len(r2)}")
    if len(r1) == 0:
        raise ValueError("Empty return series")

    cov, var1, var2 = _population_moments(r1, r2)
    if var1 > 0 and var2 > 0:
        correlation = cov / (np.sqrt(var1) * np.sqrt(var2))
    else:
        correlation = 0.0
    beta = cov / var2 if var2 > 0 else 0.0
    return float(correlation), float(beta)


def beta_stability(r1, r2, beta: float) -> float:
    """Gamma: how far sub-window betas drift from the full-window beta.

    With >= 15 returns, compare against the beta of the last max(7, n // 3)
    returns. With 6-14 returns, average the deviation of the two half-window
    betas. Fewer returns give 0.0.
    """
    r1 = np.asarray(r1, dtype=np.float64)
    r2 = np.asarray(r2, dtype=np.float64)
    n = len(r1)

    if n >= GAMMA_SHORT_MIN_RETURNS:
        window = max(GAMMA_SHORT_WINDOW_MIN, n // 3)
        short_beta = beta_from_returns(r1[-window:], r2[-window:])
        return abs(short_beta - beta)

    if n >= GAMMA_MIN_RETURNS:
        mid = n // 2
        beta_1 = beta_from_returns(r1[:mid], r2[:mid])
        beta_2 = beta_from_returns(r1[mid:], r2[mid:])
        return (abs(beta_1 - beta) + abs(beta_2 - beta)) / 2

    return 0.0
