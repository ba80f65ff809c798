"""Completed trade history: loading, summary statistics and console rendering.

The history file is written by the trade exit tooling:

    {"trades": [{"pair", "entryTime", "exitTime", "entryZScore", "exitZScore",
                 "daysInTrade", "totalPnL"}, ...],
     "stats": {"totalTrades", "wins", "losses", "winRate", "avgPnL", "totalPnL"}}
"""

import json
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from pairlab.utils.constants import HISTORY_RECENT_COUNT

SEPARATOR = "─" * 80


def _optional_float(value) -> float | None:
    return None if value is None else float(value)


@dataclass(frozen=True)
class TradeHistoryRecord:
    """One closed trade as persisted in the history file."""
    pair: str
    entry_time: str | int | None
    exit_time: str | int | None
    entry_zscore: float | None
    exit_zscore: float | None
    days_in_trade: float
    total_pnl: float    # % return

    @classmethod
    def from_dict(cls, d: dict) -> "TradeHistoryRecord":
        return cls(
            pair=str(d.get("pair", "?")),
            entry_time=d.get("entryTime"),
            exit_time=d.get("exitTime"),
            entry_zscore=_optional_float(d.get("entryZScore")),
            exit_zscore=_optional_float(d.get("exitZScore")),
            days_in_trade=float(d.get("daysInTrade") or 0),
            total_pnl=float(d.get("totalPnL") or 0.0),
        )


@dataclass(frozen=True)
class HistoryStats:
    """Summary over all closed trades."""
    total_trades: int
    wins: int
    losses: int
    win_rate: float     # %
    avg_pnl: float      # % per trade
    total_pnl: float    # cumulative %

    @classmethod
    def from_dict(cls, d: dict) -> "HistoryStats":
        return cls(
            total_trades=int(d.get("totalTrades") or 0),
            wins=int(d.get("wins") or 0),
            losses=int(d.get("losses") or 0),
            win_rate=float(d.get("winRate") or 0.0),
            avg_pnl=float(d.get("avgPnL") or 0.0),
            total_pnl=float(d.get("totalPnL") or 0.0),
        )


@dataclass
class TradeHistory:
    trades: list[TradeHistoryRecord]
    stats: HistoryStats


def summarize_trades(trades: list[TradeHistoryRecord]) -> HistoryStats:
    """Recompute summary statistics from the trade records."""
    if not trades:
        return HistoryStats(0, 0, 0, 0.0, 0.0, 0.0)

    pnl = pd.Series([t.total_pnl for t in trades], dtype=float)
    wins = int((pnl > 0).sum())
    n = len(pnl)
    return HistoryStats(
        total_trades=n,
        wins=wins,
        losses=n - wins,
        win_rate=round(wins / n * 100, 1),
        avg_pnl=round(float(pnl.mean()), 2),
        total_pnl=float(pnl.sum()),
    )


def parse_history(raw: dict) -> TradeHistory:
    """Build a TradeHistory from the decoded JSON document.

    Missing ``trades`` defaults to an empty list; a missing ``stats`` block is
    recomputed from the trades.
    """
    trades = [TradeHistoryRecord.from_dict(t) for t in raw.get("trades") or []]
    stats_raw = raw.get("stats")
    stats = HistoryStats.from_dict(stats_raw) if stats_raw else summarize_trades(trades)
    return TradeHistory(trades=trades, stats=stats)


def load_history(path: Path | str) -> TradeHistory:
    """Load the trade history JSON.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file is not a JSON object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trade history not found: {path}")
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Trade history must be a JSON object, got {type(raw).__name__}")
    return parse_history(raw)


def _signed(value: float, digits: int = 2) -> str:
    return f"{'+' if value >= 0 else ''}{value:.{digits}f}"


def _zscore(value: float | None) -> str:
    return "N/A" if value is None else f"{value:.2f}"


def _date(value) -> str:
    if value is None or value == "":
        return "?"
    try:
        ts = pd.to_datetime(value, unit="ms") if isinstance(value, (int, float)) else pd.to_datetime(value)
    except (ValueError, TypeError):
        return str(value)
    return ts.strftime("%Y-%m-%d")


def format_history(history: TradeHistory, limit: int = HISTORY_RECENT_COUNT) -> list[str]:
    """Console lines for the history summary and the most recent trades."""
    if not history.trades:
        return ["  No completed trades yet."]

    s = history.stats
    lines = [
        "  Overall Stats",
        f"  ├ Total Trades: {s.total_trades}",
        f"  ├ Win Rate: {s.win_rate:g}% ({s.wins}W / {s.losses}L)",
        f"  ├ Avg P&L: {_signed(s.avg_pnl)}%",
        f"  └ Cumulative P&L: {_signed(s.total_pnl)}%",
        "",
        SEPARATOR,
        "",
        "  Recent Trades (newest first)",
        "",
    ]

    for t in list(reversed(history.trades))[:limit]:
        tag = "WIN " if t.total_pnl >= 0 else "LOSS"
        lines += [
            f"  [{tag}] {t.pair}",
            f"    ├ {_date(t.entry_time)} → {_date(t.exit_time)} ({t.days_in_trade:g}d)",
            f"    ├ Z: {_zscore(t.entry_zscore)} → {_zscore(t.exit_zscore)}",
            f"    └ P&L: {_signed(t.total_pnl)}%",
            "",
        ]

    remaining = len(history.trades) - limit
    if remaining > 0:
        lines.append(f"  ... and {remaining} more trades")

    return lines
