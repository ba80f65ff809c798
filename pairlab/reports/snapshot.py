"""Markdown and console rendering of pair snapshots."""

from datetime import datetime, timezone
from pathlib import Path

from pairlab.metrics.snapshot import PairSnapshot
from pairlab.utils.constants import Direction


def _section_title(snap: PairSnapshot) -> str:
    side = "SHORT" if snap.pair.direction == Direction.SHORT else "LONG"
    return f"## {snap.pair.name} - {side} {snap.pair.left_side}"


def render_pair_section(snap: PairSnapshot) -> list[str]:
    """Statistics table, hedge-ratio guidance and errors for one pair."""
    ok = snap.successful()
    out = [
        _section_title(snap),
        "",
        "| Timeframe | Correlation | Beta | Z-Score | Spread (Current) | Spread (Mean) | Cointegrated | MR Rate | Half-Life |",
        "|-----------|------------|------|---------|-----------------|---------------|--------------|---------|-----------|",
    ]
    for r in ok:
        s = r.stats
        half_life = f"{s.half_life:.1f}d" if s.half_life is not None else "N/A"
        out.append(
            f"| {r.days}d | {s.correlation:.3f} | {s.beta:.3f} | {s.zscore:.2f} "
            f"| {s.current_spread:.4f} | {s.mean_spread:.4f} | {'Yes' if s.is_cointegrated else 'No'} "
            f"| {s.mean_reversion_rate:.2f} | {half_life} |"
        )

    out += ["", "**Hedge Ratio (for delta-neutral position):**"]
    for r in ok:
        out.append(
            f"- **{r.days}d:** For $1 of {snap.pair.symbol1} (base), "
            f"use ${r.stats.beta:.4f} of {snap.pair.symbol2} (underlying)"
        )

    failed = snap.failed()
    if failed:
        out += ["", "**Errors:**"]
        out += [f"- **{r.days}d:** {r.error}" for r in failed]

    out.append("")
    return out


def render_snapshot_report(snapshots: list[PairSnapshot], generated_at: datetime | None = None) -> str:
    """Render the full snapshot report as markdown."""
    generated_at = generated_at or datetime.now(timezone.utc)
    out = [
        "# PAIR TRADING SNAPSHOT",
        f"**Generated:** {generated_at.isoformat()}",
        "",
    ]
    for snap in snapshots:
        out += render_pair_section(snap)
    return "\n".join(out) + "\n"


def summary_lines(snapshots: list[PairSnapshot]) -> list[str]:
    """One console line per (pair, timeframe), in request order."""
    lines = []
    for snap in snapshots:
        lines.append(f"{snap.pair.name}:")
        for r in snap.results:
            if not r.ok:
                lines.append(f"  {r.days}d: ERROR - {r.error}")
                continue
            s = r.stats
            lines.append(
                f"  {r.days}d: Corr {s.correlation:.3f}, Beta {s.beta:.3f}, Z {s.zscore:.2f}, "
                f"Cointegrated: {'Yes' if s.is_cointegrated else 'No'}"
            )
    return lines


def write_snapshot_report(report: str, path: Path | str) -> Path:
    """Write (overwrite) the snapshot report. Returns the file path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report, encoding="utf-8")
    return path
