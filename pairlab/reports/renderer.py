"""Markdown rendering of a beta drift analysis."""

from datetime import datetime, timezone
from pathlib import Path

from pairlab.reports.drift import DriftAnalysis
from pairlab.utils.constants import ABSOLUTE_DRIFT_BUCKETS, DRIFT_REPORT_PREFIX, TOP_DRIFT_COUNT

LOW_DRIFT_LABEL = ABSOLUTE_DRIFT_BUCKETS[0][0]
HIGH_DRIFT_LABEL = ABSOLUTE_DRIFT_BUCKETS[-1][0]


def _fmt(value: float | None, digits: int, suffix: str = "") -> str:
    if value is None:
        return "N/A"
    return f"{value:.{digits}f}{suffix}"


def _yes_no(flag: bool | None) -> str:
    return "Yes" if flag else "No"


def render_key_findings(analysis: DriftAnalysis) -> list[str]:
    """Compare the lowest and highest absolute-drift buckets.

    Emits nothing unless both buckets are populated.
    """
    low = analysis.absolute_bucket(LOW_DRIFT_LABEL)
    high = analysis.absolute_bucket(HIGH_DRIFT_LABEL)
    if low is None or high is None:
        return []

    lines = [
        f"- **Low drift ({LOW_DRIFT_LABEL}):** {low.win_rate:.1f}% win rate, {low.avg_roi:.2f}% avg ROI",
        f"- **High drift ({HIGH_DRIFT_LABEL}):** {high.win_rate:.1f}% win rate, {high.avg_roi:.2f}% avg ROI",
    ]
    if high.win_rate < low.win_rate or high.avg_roi < low.avg_roi:
        lines.append("- **Conclusion:** High beta drift correlates with worse performance")
    return lines


def render_drift_report(analysis: DriftAnalysis, generated_at: datetime | None = None) -> str:
    """Render the full drift report as markdown."""
    generated_at = generated_at or datetime.now(timezone.utc)

    out = [
        "# Beta Drift Analysis",
        "",
        f"Generated: {generated_at.isoformat()}",
        "",
        "## Analysis by Absolute Beta Drift",
        "",
        "| Beta Drift Range | Trades | Win Rate | Avg ROI | Avg Error % | Avg Abs Error | Diverged | Diverged % |",
        "|------------------|--------|----------|---------|-------------|---------------|----------|------------|",
    ]
    for b in analysis.absolute:
        out.append(
            f"| {b.label} | {b.count} | {b.win_rate:.1f}% | {b.avg_roi:.2f}% | {b.avg_error:.1f}% "
            f"| {_fmt(b.avg_abs_error, 2, '%')} | {b.diverged_count} | {b.diverged_percent:.1f}% |"
        )

    out += [
        "",
        "## Analysis by Percent Beta Drift",
        "",
        "| Beta Drift % | Trades | Win Rate | Avg ROI | Avg Error % | Diverged | Diverged % |",
        "|--------------|--------|----------|---------|-------------|----------|------------|",
    ]
    for b in analysis.percent:
        out.append(
            f"| {b.label} | {b.count} | {b.win_rate:.1f}% | {b.avg_roi:.2f}% | {b.avg_error:.1f}% "
            f"| {b.diverged_count} | {b.diverged_percent:.1f}% |"
        )

    out += [
        "",
        f"## Top {TOP_DRIFT_COUNT} Trades by Beta Drift",
        "",
        "| Pair | Beta Entry | Beta Exit | Beta Δ | % Drift | Actual ROI | Won | Diverged |",
        "|------|-----------|-----------|--------|---------|------------|-----|----------|",
    ]
    for t in analysis.top_drift:
        out.append(
            f"| {t.pair} | {_fmt(t.beta_entry, 4)} | {_fmt(t.beta_exit, 4)} | {_fmt(t.abs_beta_drift, 4)} "
            f"| {_fmt(t.percent_beta_drift, 1, '%')} | {_fmt(t.actual_roi, 2, '%')} "
            f"| {_yes_no(t.won)} | {_yes_no(t.diverged)} |"
        )

    out += ["", "## Key Findings", ""]
    out += render_key_findings(analysis)

    return "\n".join(out) + "\n"


def drift_report_filename(now: datetime | None = None) -> str:
    """Timestamped output name, e.g. beta_drift_analysis_2025-01-31T14-05-09.md."""
    now = now or datetime.now(timezone.utc)
    return f"{DRIFT_REPORT_PREFIX}{now.strftime('%Y-%m-%dT%H-%M-%S')}.md"


def write_drift_report(report: str, output_dir: Path | str, now: datetime | None = None) -> Path:
    """Write the report under output_dir (created if missing). Returns the file path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / drift_report_filename(now)
    path.write_text(report, encoding="utf-8")
    return path
