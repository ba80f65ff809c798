"""Show completed trades from config/trade_history.json.

Usage:
    python scripts/show_history.py
    python scripts/show_history.py --file path/to/trade_history.json
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pairlab.history.viewer import format_history, load_history
from pairlab.utils.constants import HISTORY_FILE
from pairlab.utils.logging_config import setup_logging

log = logging.getLogger("pairlab.history")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Display completed trade history")
    parser.add_argument("--file", type=Path, default=PROJECT_ROOT / HISTORY_FILE,
                        help=f"Trade history JSON (default: {HISTORY_FILE})")
    parser.add_argument("--limit", type=int, default=20, help="Number of recent trades to show")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging()

    try:
        history = load_history(args.file)
        lines = format_history(history, limit=args.limit)
    except (FileNotFoundError, ValueError) as e:
        log.error(f"Error: {e}")
        sys.exit(1)
    except Exception:
        log.exception("Failed to show trade history")
        sys.exit(1)

    print("\nTrade History\n")
    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
