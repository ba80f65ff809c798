"""Markdown parsing for backtest trade reports.

Reports are produced by the ROI backtester as a pipe-delimited table:

    | Pair | Entry Time | Entry Z | Exit Z | Direction | Actual ROI | Predicted ROI |
    | Difference | Error % | Beta Entry | Beta Exit | Beta Δ |

Numeric cells follow "leading number, else absent" semantics: "+1.25%" parses
to 1.25, while "N/A", unparsable text and an exact zero are treated as absent.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from pairlab.utils.constants import (
    REPORT_MIN_COLUMNS,
    REPORT_PREFIX,
    REPORT_SUFFIX,
    REPORT_TABLE_HEADER,
)

_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SEPARATOR_ROW = "|------|"


@dataclass(frozen=True)
class Trade:
    """One parsed report row with its derived beta-drift fields."""
    pair: str
    entry_time: str
    entry_z: float | None
    exit_z: float | None
    direction: str
    actual_roi: float | None
    predicted_roi: float | None
    difference: float | None
    error_percent: float | None
    beta_entry: float | None
    beta_exit: float | None
    beta_delta: float | None
    abs_beta_drift: float | None
    percent_beta_drift: float | None
    diverged: bool | None   # |exit z| > |entry z|; None when either z is absent
    won: bool
    exit_time: str | None = None


def parse_number(text: str) -> float | None:
    """Parse the leading numeric prefix of a cell.

    Returns None for "N/A", unparsable text and zero.
    """
    if text is None:
        return None
    m = _NUMBER_PREFIX.match(text.strip())
    if m is None:
        return None
    value = float(m.group(0))
    return value or None


def find_latest_report(reports_dir: Path | str) -> Path:
    """Return the lexically last ``backtest_ALL_*.md`` file in reports_dir.

    Raises
    ------
    FileNotFoundError
        If the directory does not exist or holds no matching report.
    """
    reports_dir = Path(reports_dir)
    if not reports_dir.is_dir():
        raise FileNotFoundError(f"{reports_dir} directory not found")

    files = sorted(
        p for p in reports_dir.iterdir()
        if p.is_file() and p.name.startswith(REPORT_PREFIX) and p.name.endswith(REPORT_SUFFIX)
    )
    if not files:
        raise FileNotFoundError(f"No ROI backtest reports found in {reports_dir}")
    return files[-1]


def build_trade(cols: list[str]) -> Trade:
    """Build a Trade from the trimmed, non-empty cells of one table row."""
    entry_z = parse_number(cols[2])
    exit_z = None if cols[3] == "N/A" else parse_number(cols[3])
    actual_roi = parse_number(cols[5])
    beta_entry = parse_number(cols[9])
    beta_exit = parse_number(cols[10])
    beta_delta = parse_number(cols[11])

    if beta_delta is not None:
        abs_drift = abs(beta_delta)
    elif beta_entry is not None and beta_exit is not None:
        abs_drift = abs(beta_exit - beta_entry)
    else:
        abs_drift = None

    # beta_entry is never 0 here (zero parses as absent)
    if beta_entry is not None and abs_drift is not None:
        pct_drift = abs_drift / abs(beta_entry) * 100
    else:
        pct_drift = None

    if entry_z is not None and exit_z is not None:
        diverged = abs(exit_z) > abs(entry_z)
    else:
        diverged = None

    return Trade(
        pair=cols[0],
        entry_time=cols[1],
        entry_z=entry_z,
        exit_z=exit_z,
        direction=cols[4],
        actual_roi=actual_roi,
        predicted_roi=parse_number(cols[6]),
        difference=parse_number(cols[7]),
        error_percent=parse_number(cols[8]),
        beta_entry=beta_entry,
        beta_exit=beta_exit,
        beta_delta=beta_delta,
        abs_beta_drift=abs_drift,
        percent_beta_drift=pct_drift,
        diverged=diverged,
        won=actual_roi is not None and actual_roi > 0,
        exit_time=cols[12] if len(cols) > REPORT_MIN_COLUMNS else None,
    )


def parse_report_text(content: str) -> list[Trade]:
    """Parse every trade row of the report table.

    Rows with fewer than 12 cells are skipped. The table ends at the first
    markdown heading after the header.

    Raises
    ------
    ValueError
        If the table header is not present.
    """
    lines = content.split("\n")

    header_index = next(
        (i for i, line in enumerate(lines) if REPORT_TABLE_HEADER in line),
        None,
    )
    if header_index is None:
        raise ValueError("Could not find table header")

    trades = []
    for raw in lines[header_index + 2:]:
        line = raw.strip()
        if "##" in line:
            break
        if not line.startswith("|") or line == _SEPARATOR_ROW:
            continue

        cols = [c.strip() for c in line.split("|")]
        cols = [c for c in cols if c]
        if len(cols) < REPORT_MIN_COLUMNS:
            continue

        trades.append(build_trade(cols))

    return trades


def parse_report(path: Path | str) -> list[Trade]:
    """Read a markdown report from disk and parse its trade table."""
    content = Path(path).read_text(encoding="utf-8")
    return parse_report_text(content)
