"""Beta drift analysis of the latest ROI backtest report.

Reads the newest backtest_reports/backtest_ALL_*.md, buckets trades by how far
the hedge ratio drifted between entry and exit, and writes a timestamped
beta_drift_analysis_*.md report.

Usage:
    python scripts/analyze_beta_drift.py
    python scripts/analyze_beta_drift.py --reports-dir backtest_reports --output-dir out -v
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pairlab.reports.drift import analyze_beta_drift
from pairlab.reports.parser import find_latest_report, parse_report
from pairlab.reports.renderer import render_drift_report, write_drift_report
from pairlab.utils.constants import REPORTS_DIR
from pairlab.utils.logging_config import setup_logging

log = logging.getLogger("pairlab.drift")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Beta drift vs. trade outcome analysis")
    parser.add_argument("--reports-dir", type=Path, default=Path(REPORTS_DIR),
                        help=f"Directory holding backtest_ALL_*.md reports (default: {REPORTS_DIR})")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Where to write the analysis (default: the reports directory)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging (DEBUG)")
    return parser.parse_args()


def run(reports_dir: Path, output_dir: Path) -> Path:
    report_path = find_latest_report(reports_dir)
    log.info(f"Reading: {report_path}")

    trades = parse_report(report_path)
    log.info(f"Parsed {len(trades)} trades")

    analysis = analyze_beta_drift(trades)
    log.info(f"Analyzing {analysis.n_valid} trades with beta drift data")

    report = render_drift_report(analysis)
    path = write_drift_report(report, output_dir)
    log.info(f"Report saved: {path}")
    print(report)
    return path


def main() -> None:
    args = parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        run(args.reports_dir, args.output_dir or args.reports_dir)
    except (FileNotFoundError, ValueError) as e:
        log.error(f"Error: {e}")
        sys.exit(1)
    except Exception:
        log.exception("Beta drift analysis failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
