"""Pair trading snapshot: correlation, hedge ratio, z-score and cointegration.

For every pair in config/pairs.yaml and every lookback (30/90/180d by default),
fetches daily closes (Hyperliquid -> Binance -> CryptoCompare) and writes a
markdown snapshot to pair_snapshot.md.

Usage:
    python scripts/pair_snapshot.py
    python scripts/pair_snapshot.py --timeframes 30 90 --delay 0.5 -v
    python scripts/pair_snapshot.py --config my_pairs.yaml --output reports/snapshot.md
"""

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pairlab.config.pairs import load_snapshot_config
from pairlab.data.fetcher import PriceFetcher
from pairlab.metrics.snapshot import run_snapshot
from pairlab.reports.snapshot import render_snapshot_report, summary_lines, write_snapshot_report
from pairlab.utils.constants import SNAPSHOT_FILE
from pairlab.utils.logging_config import setup_logging

log = logging.getLogger("pairlab.snapshot")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pair trading snapshot report")
    parser.add_argument("--config", type=Path, default=None,
                        help="Pair configuration YAML (default: config/pairs.yaml)")
    parser.add_argument("--output", type=Path, default=Path(SNAPSHOT_FILE),
                        help=f"Report path (default: {SNAPSHOT_FILE})")
    parser.add_argument("--timeframes", type=int, nargs="+", default=None,
                        help="Override lookbacks in days (e.g. 30 90 180)")
    parser.add_argument("--delay", type=float, default=None,
                        help="Override pause between requests (seconds)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging (DEBUG)")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = load_snapshot_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        log.error(f"Error: {e}")
        sys.exit(1)

    # --- CLI overrides ---
    if args.timeframes:
        cfg = dataclasses.replace(cfg, timeframes=tuple(args.timeframes))
        log.info(f"[CONFIG] Timeframes override: {list(cfg.timeframes)}")
    if args.delay is not None:
        cfg = dataclasses.replace(cfg, request_delay=args.delay)
        log.info(f"[CONFIG] Request delay override: {args.delay}s")

    log.info("=== PAIR TRADING SNAPSHOT ===")
    t_start = time.time()

    try:
        fetcher = PriceFetcher(timeout=cfg.request_timeout)
        snapshots = run_snapshot(cfg, fetcher)
        path = write_snapshot_report(render_snapshot_report(snapshots), args.output)
    except Exception:
        log.exception("Snapshot failed")
        sys.exit(1)

    log.info("SNAPSHOT COMPLETE")
    log.info(f"Report saved to: {path}")
    print()
    for line in summary_lines(snapshots):
        print(line)

    log.info(f"Total elapsed: {time.time() - t_start:.1f}s")


if __name__ == "__main__":
    main()
