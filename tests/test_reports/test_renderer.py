"""Tests for beta drift markdown rendering."""

from datetime import datetime, timezone

from pairlab.reports.drift import analyze_beta_drift
from pairlab.reports.renderer import (
    drift_report_filename,
    render_drift_report,
    render_key_findings,
    write_drift_report,
)
from tests.conftest import make_trade

NOW = datetime(2025, 1, 31, 14, 5, 9, tzinfo=timezone.utc)


def test_report_sections_present():
    analysis = analyze_beta_drift([make_trade(0.005, 1.0), make_trade(0.25, -1.0)])
    report = render_drift_report(analysis, generated_at=NOW)

    assert report.startswith("# Beta Drift Analysis")
    assert "Generated: 2025-01-31T14:05:09+00:00" in report
    for heading in ("## Analysis by Absolute Beta Drift", "## Analysis by Percent Beta Drift",
                    "## Top 10 Trades by Beta Drift", "## Key Findings"):
        assert heading in report
    assert "| 0.00-0.01 | 1 | 100.0% | 1.00% | 10.0% | 0.50% | 0 | 0.0% |" in report


def test_key_findings_with_conclusion():
    analysis = analyze_beta_drift([make_trade(0.005, 2.0), make_trade(0.25, -1.0)])
    lines = render_key_findings(analysis)

    assert lines[0] == "- **Low drift (0.00-0.01):** 100.0% win rate, 2.00% avg ROI"
    assert lines[1] == "- **High drift (0.20+):** 0.0% win rate, -1.00% avg ROI"
    assert lines[2] == "- **Conclusion:** High beta drift correlates with worse performance"


def test_key_findings_without_conclusion():
    analysis = analyze_beta_drift([make_trade(0.005, 1.0), make_trade(0.25, 3.0)])
    lines = render_key_findings(analysis)
    assert len(lines) == 2


def test_key_findings_need_both_extreme_buckets():
    analysis = analyze_beta_drift([make_trade(0.005, 1.0), make_trade(0.03, 1.0)])
    assert render_key_findings(analysis) == []


def test_missing_values_render_as_na():
    trade = make_trade(0.3, None, beta_entry=None)
    report = render_drift_report(analyze_beta_drift([trade]), generated_at=NOW)
    assert "| AAA/BBB | N/A | N/A | 0.3000 | N/A | N/A | No | No |" in report


def test_filename_pattern():
    assert drift_report_filename(NOW) == "beta_drift_analysis_2025-01-31T14-05-09.md"


def test_write_creates_directory(tmp_path):
    out_dir = tmp_path / "reports"
    path = write_drift_report("# Beta Drift Analysis\n", out_dir, now=NOW)
    assert path == out_dir / "beta_drift_analysis_2025-01-31T14-05-09.md"
    assert path.read_text(encoding="utf-8") == "# Beta Drift Analysis\n"
