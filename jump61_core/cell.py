from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Side(Enum):
    """A square's color. WHITE marks a square that neither player owns yet."""
    WHITE = '-'
    RED = 'r'
    BLUE = 'b'

    @property
    def symbol(self) -> str:
        return self.value

    def opposite(self) -> 'Side':
        if self is Side.RED:
            return Side.BLUE
        if self is Side.BLUE:
            return Side.RED
        return self

    @classmethod
    def from_symbol(cls, symbol: str) -> 'Side':
        """Parses a dump symbol ('-', 'r', 'b'), also accepting full color names."""
        text = symbol.strip().lower()
        for side in cls:
            if text in (side.value, side.name.lower()):
                return side
        raise ValueError(f'Unknown side: {symbol!r}')


@dataclass(frozen=True)
class Cell:
    """The contents of one square: its owner and how many spots it holds."""
    owner: Side
    spots: int

    def __str__(self) -> str:
        return f'{self.spots}{self.owner.symbol}'


EMPTY = Cell(Side.WHITE, 1)
