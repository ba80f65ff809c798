"""Half-life of mean reversion from the autocorrelation of spread changes.

half_life = -ln(2) / ln(1 + rho), where rho is the lag-1 autocorrelation of
first differences. Only defined for -1 < rho < 0 (changes tend to reverse).
"""

import numpy as np

from pairlab.utils.constants import HALF_LIFE_MAX, HALF_LIFE_MIN_DIFFS


def half_life_from_autocorr(autocorr: float, n_diffs: int) -> float | None:
    """Half-life in days, or None if undefined or implausible (>= 1000 days)."""
    if n_diffs < HALF_LIFE_MIN_DIFFS:
        return None
    if not (-1.0 < autocorr < 0.0):
        return None

    hl = -np.log(2) / np.log1p(autocorr)
    if not np.isfinite(hl) or hl <= 0 or hl >= HALF_LIFE_MAX:
        return None
    return float(hl)
