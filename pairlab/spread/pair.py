"""PairSpec dataclass — metadata for a trading pair."""

from dataclasses import dataclass

from pairlab.utils.constants import Direction


@dataclass(frozen=True)
class PairSpec:
    """Defines a pair: log(symbol1) - beta * log(symbol2).

    symbol1 is the base leg, symbol2 the underlying (hedge) leg.
    """
    symbol1: str
    symbol2: str
    left_side: str
    direction: Direction = Direction.LONG
    quote: str = "USDT"

    @property
    def name(self) -> str:
        return f"{self.symbol1}/{self.symbol2}"

    def __str__(self) -> str:
        return self.name
