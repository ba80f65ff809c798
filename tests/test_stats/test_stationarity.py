"""Tests for mean-reversion and cointegration diagnostics."""

import numpy as np
import pytest

from pairlab.stats.stationarity import (
    adf_pvalue,
    diff_autocorrelation,
    is_cointegrated,
    mean_reversion_rate,
    pseudo_adf,
)


def test_mean_reversion_rate_oscillating():
    """Every step of an oscillation around the mean reverts."""
    assert mean_reversion_rate([1.0, 3.0, 1.0, 3.0, 1.0], 2.0) == pytest.approx(1.0)


def test_mean_reversion_rate_trend():
    """Only the two steps starting below the mean count; at-mean deviation is ignored."""
    assert mean_reversion_rate([1.0, 2.0, 3.0, 4.0, 5.0], 3.0) == pytest.approx(0.5)


def test_mean_reversion_rate_short_series():
    assert mean_reversion_rate([1.0], 1.0) == 0.0
    assert mean_reversion_rate([1.0, 2.0], 1.5) == pytest.approx(1.0)


def test_diff_autocorrelation_alternating():
    """Alternating changes: hand-computed rho = -0.96 / 0.96 = -1."""
    assert diff_autocorrelation([0.0, 1.0, 0.0, 1.0, 0.0, 1.0]) == pytest.approx(-1.0)


def test_diff_autocorrelation_degenerate():
    assert diff_autocorrelation([1.0, 2.0, 3.0, 4.0]) == 0.0     # constant changes
    assert diff_autocorrelation([1.0, 2.0]) == 0.0               # single change


def test_pseudo_adf():
    assert pseudo_adf(0.5, 100) == pytest.approx(-5.0)
    assert pseudo_adf(-1.0, 6) == pytest.approx(np.sqrt(6))


def test_cointegration_rules():
    assert is_cointegrated(-3.0, 0.1, 0.9) is True       # ADF rule
    assert is_cointegrated(0.0, 0.6, 0.2) is True        # mean reversion rule
    assert is_cointegrated(0.0, 0.6, -0.4) is False      # autocorr too strong
    assert is_cointegrated(0.0, 0.5, 0.0) is False       # rate must exceed 0.5
    assert is_cointegrated(-2.5, 0.1, 0.0) is False      # strict threshold


def test_alternating_spread_not_cointegrated():
    """Alternating spread: rho = -1, pseudo-ADF = +sqrt(6), |rho| too large."""
    spreads = [0.0, 1.0, 0.0, 1.0, 0.0, 1.0]
    rho = diff_autocorrelation(spreads)
    mr = mean_reversion_rate(spreads, 0.5)
    assert mr == pytest.approx(1.0)
    assert is_cointegrated(pseudo_adf(rho, len(spreads)), mr, rho) is False


def test_adf_pvalue_stationary_noise():
    rng = np.random.default_rng(42)
    assert adf_pvalue(rng.normal(0, 1, 300)) < 0.05


def test_adf_pvalue_undefined_cases():
    assert np.isnan(adf_pvalue([1.0, 2.0, 3.0]))
    assert np.isnan(adf_pvalue(np.full(50, 1.0)))


def test_adf_pvalue_near_constant_spread():
    """Float residue around a constant is not fed to the ADF regression."""
    p = np.linspace(10.0, 20.0, 50)
    spreads = np.log(3.0 * p) - np.log(p)
    assert np.isnan(adf_pvalue(spreads))
