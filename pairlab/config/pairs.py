"""Snapshot configuration loaded from config/pairs.yaml.

Usage:
    from pairlab.config.pairs import load_snapshot_config

    cfg = load_snapshot_config()
    for pair in cfg.pairs:
        ...
"""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from pairlab.spread.pair import PairSpec
from pairlab.utils.constants import PAIRS_CONFIG_FILE, Direction, ZSCORE_WINDOW

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / PAIRS_CONFIG_FILE

DEFAULT_TIMEFRAMES: tuple[int, ...] = (30, 90, 180)
DEFAULT_REQUEST_DELAY: float = 1.5
DEFAULT_REQUEST_TIMEOUT: float = 30.0


@dataclass(frozen=True)
class SnapshotConfig:
    """Pairs, lookbacks and API pacing for the snapshot generator."""
    pairs: tuple[PairSpec, ...]
    timeframes: tuple[int, ...] = DEFAULT_TIMEFRAMES
    zscore_window: int = ZSCORE_WINDOW
    request_delay: float = DEFAULT_REQUEST_DELAY   # seconds between pair/timeframe requests
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    source_path: Path | None = field(default=None, compare=False)


# Module-level cache keyed by resolved path
_CACHE: dict[Path, SnapshotConfig] = {}


def parse_snapshot_config(raw: dict, source_path: Path | None = None) -> SnapshotConfig:
    """Build a SnapshotConfig from the parsed YAML mapping.

    Raises
    ------
    ValueError
        If no pairs are defined or a pair entry is incomplete.
    """
    api = raw.get("api") or {}
    quote = api.get("quote", "USDT")

    pairs_raw = raw.get("pairs") or {}
    if not pairs_raw:
        raise ValueError("No pairs defined in pair configuration")

    pairs = []
    for name, data in pairs_raw.items():
        try:
            pairs.append(PairSpec(
                symbol1=str(data["symbol1"]),
                symbol2=str(data["symbol2"]),
                left_side=str(data.get("left_side", data["symbol1"])),
                direction=Direction(data.get("direction", "long")),
                quote=str(data.get("quote", quote)),
            ))
        except KeyError as e:
            raise ValueError(f"Pair '{name}' is missing field {e}") from e

    timeframes = tuple(int(d) for d in raw.get("timeframes", DEFAULT_TIMEFRAMES))
    if any(d < 2 for d in timeframes):
        raise ValueError(f"Timeframes must be >= 2 days, got {list(timeframes)}")

    return SnapshotConfig(
        pairs=tuple(pairs),
        timeframes=timeframes,
        zscore_window=int(raw.get("zscore_window", ZSCORE_WINDOW)),
        request_delay=float(api.get("request_delay", DEFAULT_REQUEST_DELAY)),
        request_timeout=float(api.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
        source_path=source_path,
    )


def load_snapshot_config(path: Path | str | None = None) -> SnapshotConfig:
    """Load snapshot configuration from YAML (cached per path).

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    """
    yaml_path = Path(path).resolve() if path is not None else DEFAULT_CONFIG_PATH
    if yaml_path in _CACHE:
        return _CACHE[yaml_path]

    if not yaml_path.exists():
        raise FileNotFoundError(f"Pair configuration not found: {yaml_path}")

    with open(yaml_path) as f:
        raw = yaml.safe_load(f) or {}

    cfg = parse_snapshot_config(raw, source_path=yaml_path)
    _CACHE[yaml_path] = cfg
    return cfg
