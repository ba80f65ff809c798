"""Shared fixtures for pair analysis tests."""

import numpy as np
import pandas as pd

from pairlab.data.sources import CandleSource, DataSourceError
from pairlab.reports.parser import Trade
from pairlab.spread.pair import PairSpec
from pairlab.utils.constants import DataSource, Direction

REPORT_HEADER = (
    "| Pair | Entry Time | Entry Z | Exit Z | Direction | Actual ROI | Predicted ROI "
    "| Difference | Error % | Beta Entry | Beta Exit | Beta Δ |"
)
REPORT_SEPARATOR = "|------|------------|---------|--------|-----------|------------|---------------|------------|---------|------------|-----------|--------|"


def make_report_row(
    pair: str = "HYPE/ZEC",
    entry_time: str = "2025-01-10 08:00",
    entry_z: str = "-2.10",
    exit_z: str = "-0.40",
    direction: str = "long",
    actual_roi: str = "+1.25%",
    predicted_roi: str = "+1.50%",
    difference: str = "-0.25%",
    error_pct: str = "-16.7%",
    beta_entry: str = "0.8000",
    beta_exit: str = "0.8300",
    beta_delta: str = "+0.0300",
) -> str:
    """One markdown table row in the backtester's column order."""
    cells = [pair, entry_time, entry_z, exit_z, direction, actual_roi, predicted_roi,
             difference, error_pct, beta_entry, beta_exit, beta_delta]
    return "| " + " | ".join(cells) + " |"


def make_report(rows: list[str], preamble: str = "# ROI Backtest\n\n## Trades\n", trailer: str = "") -> str:
    """Full report text with header, separator and the given rows."""
    lines = [preamble, REPORT_HEADER, REPORT_SEPARATOR, *rows]
    text = "\n".join(lines) + "\n"
    if trailer:
        text += "\n" + trailer
    return text


def make_trade(
    abs_drift: float | None,
    roi: float | None,
    pair: str = "AAA/BBB",
    beta_entry: float | None = 1.0,
    error_percent: float | None = 10.0,
    difference: float | None = 0.5,
    diverged: bool | None = False,
) -> Trade:
    """Trade with the fields the drift analysis reads; percent drift derived from beta_entry."""
    pct = abs_drift / abs(beta_entry) * 100 if abs_drift is not None and beta_entry else None
    return Trade(
        pair=pair,
        entry_time="2025-01-01",
        entry_z=-2.0,
        exit_z=-0.5,
        direction="long",
        actual_roi=roi,
        predicted_roi=None,
        difference=difference,
        error_percent=error_percent,
        beta_entry=beta_entry,
        beta_exit=None,
        beta_delta=abs_drift,
        abs_beta_drift=abs_drift,
        percent_beta_drift=pct,
        diverged=diverged,
        won=roi is not None and roi > 0,
    )


def make_pair(symbol1: str = "HYPE", symbol2: str = "ZEC", direction: Direction = Direction.LONG) -> PairSpec:
    return PairSpec(symbol1=symbol1, symbol2=symbol2, left_side=symbol1, direction=direction)


def make_closes(values, start: str = "2025-01-01") -> pd.Series:
    """Wrap values in a daily, date-indexed close Series."""
    idx = pd.date_range(start, periods=len(values), freq="D")
    return pd.Series(np.asarray(values, dtype=float), index=idx, name="close")


def make_pair_prices(
    n: int = 60,
    beta_true: float = 0.8,
    noise_std: float = 0.01,
    seed: int = 42,
) -> tuple[np.ndarray, np.ndarray]:
    """Synthetic daily closes where leg 1 returns ≈ beta_true * leg 2 returns + noise."""
    rng = np.random.default_rng(seed)
    r2 = rng.normal(0, 0.03, n - 1)
    r1 = beta_true * r2 + rng.normal(0, noise_std, n - 1)
    p2 = 50.0 * np.cumprod(np.concatenate([[1.0], 1 + r2]))
    p1 = 20.0 * np.cumprod(np.concatenate([[1.0], 1 + r1]))
    return p1, p2


class FakeSource(CandleSource):
    """In-memory CandleSource: symbol -> close Series; unknown symbols fail."""

    def __init__(self, name: DataSource, closes: dict[str, pd.Series], current: dict[str, float] | None = None):
        super().__init__(timeout=1.0)
        self.name = name
        self.closes = closes
        self.current = current or {}
        self.calls: list[tuple[str, int]] = []

    def fetch_closes(self, symbol: str, quote: str, days: int) -> pd.Series:
        self.calls.append((symbol, days))
        if symbol not in self.closes:
            raise DataSourceError(f"No data from {self.name.value} for {symbol}")
        return self.closes[symbol]

    def fetch_current(self, symbol: str, quote: str) -> float | None:
        return self.current.get(symbol)
