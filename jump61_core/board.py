from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Tuple

from .cell import EMPTY, Cell, Side
from .errors import IllegalMoveError, NoHistoryError, ReadonlyBoardError

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]  # (row, col), both counted from 1
Notifier = Callable[['Board'], None]


def _nop(board: 'Board') -> None:
    pass


class Board:
    """The state of a Jump61 game.

    Squares are addressed either by row and column (both between 1 and size)
    or by square number, counting row-major from 0 to size*size - 1. Methods
    taking a square accept either form: ``get(2, 3)`` or ``get(7)``.

    The side to move is derived from the spots on the board, so any position
    reachable by legal play has a well-defined mover. Every externally
    visible change is announced to the notifier.
    """

    def __init__(self, n: int, notifier: Optional[Notifier] = None):
        self._notifier: Notifier = notifier or _nop
        self._readonly: Optional['ReadonlyBoard'] = None
        self._reset(n)

    @classmethod
    def from_board(cls, other) -> 'Board':
        """A board holding OTHER's contents, with a clear undo history and no notifier."""
        source = other._board if isinstance(other, ReadonlyBoard) else other
        board = cls.__new__(cls)
        board._notifier = _nop
        board._readonly = None
        board._n = source.size
        # Neighbor lists are never mutated, so copies share them.
        board._adjacent = source._adjacent
        board._load(source.cells())
        return board

    def _reset(self, n: int) -> None:
        if n < 2:
            raise ValueError(f'Board size must be at least 2, got {n}')
        self._n = n
        self._cells: List[Cell] = [EMPTY] * (n * n)
        self._history: List[Tuple[Cell, ...]] = []
        self._adjacent: List[List[int]] = [self._compute_neighbors(sq) for sq in range(n * n)]
        self._recount()

    def _compute_neighbors(self, sq: int) -> List[int]:
        # Overflow order: down, up, right, left.
        r, c = self.row(sq), self.col(sq)
        out: List[int] = []
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            if self.exists(r + dr, c + dc):
                out.append(self.sq_num(r + dr, c + dc))
        return out

    def _load(self, cells: Iterable[Cell]) -> None:
        loaded = list(cells)
        if len(loaded) != self._n * self._n:
            raise ValueError(f'Expected {self._n * self._n} cells, got {len(loaded)}')
        self._cells = loaded
        self._history = []
        self._recount()

    def _recount(self) -> None:
        self._owned = {side: 0 for side in Side}
        self._total = 0
        for cell in self._cells:
            self._owned[cell.owner] += 1
            self._total += cell.spots

    def _put(self, sq: int, cell: Cell) -> None:
        """Replaces square SQ, keeping the spot and ownership tallies current."""
        old = self._cells[sq]
        self._owned[old.owner] -= 1
        self._owned[cell.owner] += 1
        self._total += cell.spots - old.spots
        self._cells[sq] = cell

    # ---------- Geometry ----------

    @property
    def size(self) -> int:
        return self._n

    def row(self, sq: int) -> int:
        return sq // self._n + 1

    def col(self, sq: int) -> int:
        return sq % self._n + 1

    def sq_num(self, r: int, c: int) -> int:
        return (c - 1) + (r - 1) * self._n

    def exists(self, r: int, c: Optional[int] = None) -> bool:
        if c is None:
            return 0 <= r < self._n * self._n
        return 1 <= r <= self._n and 1 <= c <= self._n

    def _square(self, r: int, c: Optional[int] = None) -> int:
        if not self.exists(r, c):
            where = r if c is None else (r, c)
            raise ValueError(f'No such square: {where}')
        return r if c is None else self.sq_num(r, c)

    def move_string(self, r: int, c: Optional[int] = None) -> str:
        if c is None:
            r, c = self.row(r), self.col(r)
        return f'{r} {c}'

    def neighbors(self, r: int, c: Optional[int] = None) -> List[int]:
        """Square numbers adjacent to a square, in the order down, up, right, left."""
        return list(self._adjacent[self._square(r, c)])

    def capacity(self, r: int, c: Optional[int] = None) -> int:
        """How many spots a square holds before it overflows: its neighbor count."""
        return len(self._adjacent[self._square(r, c)])

    # ---------- Queries ----------

    def get(self, r: int, c: Optional[int] = None) -> Cell:
        return self._cells[self._square(r, c)]

    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._cells)

    def num_pieces(self) -> int:
        """Total spots on the board, unowned squares included."""
        return self._total

    def whose_move(self) -> Side:
        """The side to play next. Once the game is won this is the loser."""
        return Side.RED if (self._total + self._n) % 2 == 0 else Side.BLUE

    def num_of_side(self, side: Side) -> int:
        """Number of squares colored SIDE."""
        return self._owned[side]

    def get_winner(self) -> Optional[Side]:
        total = self._n * self._n
        if self._owned[Side.RED] == total:
            return Side.RED
        if self._owned[Side.BLUE] == total:
            return Side.BLUE
        return None

    @property
    def num_moves(self) -> int:
        """Number of moves that undo() can take back."""
        return len(self._history)

    def is_legal(self, side: Side, r: Optional[int] = None, c: Optional[int] = None) -> bool:
        """With a square, whether SIDE may add a spot there now. Without one,
        whether SIDE has any square left that the opponent does not own."""
        if r is None:
            opponent = side.opposite()
            return any(cell.owner is not opponent for cell in self._cells)
        if not self.exists(r, c) or self.get_winner() is not None:
            return False
        if side is not self.whose_move():
            return False
        sq = self._square(r, c)
        cell = self._cells[sq]
        if cell.owner is side:
            return True
        return cell.owner is Side.WHITE and cell.spots < len(self._adjacent[sq])

    # ---------- Mutation ----------

    def add_spot(self, side: Side, r: int, c: Optional[int] = None) -> None:
        """Adds a spot for SIDE to a square and resolves every overflow it causes."""
        self._check_legal(side, r, c)
        sq = self._square(r, c)
        self._history.append(tuple(self._cells))
        self._play(side, sq)
        self._announce()

    def _check_legal(self, side: Side, r: int, c: Optional[int] = None) -> None:
        if not self.is_legal(side, r, c):
            where = self.move_string(r, c) if self.exists(r, c) else str(r if c is None else (r, c))
            raise IllegalMoveError(
                f'{side.name} may not add a spot at {where}',
                context={'to_move': self.whose_move().name, 'winner': getattr(self.get_winner(), 'name', None)},
            )

    def _play(self, side: Side, sq: int) -> None:
        """Adds SIDE's spot at SQ and runs the cascade. No history, no notifier."""
        spots = self._cells[sq].spots + 1
        if spots <= len(self._adjacent[sq]):
            self._put(sq, Cell(side, spots))
        else:
            overflows = self._jump(side, sq)
            logger.debug('%s at %s set off %d overflows', side.name, self.move_string(sq), overflows)

    def _jump(self, side: Side, sq: int) -> int:
        """Overflows square SQ for SIDE and every square that spills over in
        turn, depth first, exactly as a recursive spread would visit them.
        Stops as soon as one side owns the whole board. Returns the number of
        overflows."""
        self._put(sq, Cell(side, 1))
        stack = [iter(self._adjacent[sq])]
        overflows = 1
        while stack and self.get_winner() is None:
            nxt = next(stack[-1], None)
            if nxt is None:
                stack.pop()
                continue
            spots = self._cells[nxt].spots + 1
            if spots > len(self._adjacent[nxt]):
                self._put(nxt, Cell(side, 1))
                stack.append(iter(self._adjacent[nxt]))
                overflows += 1
            else:
                self._put(nxt, Cell(side, spots))
        return overflows

    def undo(self) -> None:
        """Takes back the most recent add_spot, including its whole cascade."""
        if not self._history:
            raise NoHistoryError('No moves to undo since the board was cleared or copied')
        self._cells = list(self._history.pop())
        self._recount()
        logger.debug('undo: %d moves left in history', len(self._history))
        self._announce()

    def set(self, r: int, c: int, num: int, side: Side) -> None:
        """Forces square (R, C) to NUM spots of SIDE, or to an empty white
        square when NUM is 0. Skips legality checks and the undo history."""
        if num < 0:
            raise ValueError(f'Spot count must be non-negative, got {num}')
        sq = self._square(r, c)
        self._put(sq, Cell(side, num) if num > 0 else Cell(Side.WHITE, 0))
        self._announce()

    def clear(self, n: int) -> None:
        """Resets to an empty N x N board and forgets the undo history."""
        self._reset(n)
        self._announce()

    def copy_from(self, other) -> None:
        """Takes OTHER's contents (same size) and forgets the undo history."""
        if other.size != self._n:
            raise ValueError(f'Cannot copy a {other.size}x{other.size} board into a {self._n}x{self._n} one')
        self._load(other.cells())

    # ---------- Notification ----------

    def set_notifier(self, notifier: Optional[Notifier]) -> None:
        self._notifier = notifier or _nop
        self._announce()

    def _announce(self) -> None:
        self._notifier(self)

    def readonly_board(self) -> 'ReadonlyBoard':
        if self._readonly is None:
            self._readonly = ReadonlyBoard(self)
        return self._readonly

    # ---------- Text ----------

    def dump(self) -> str:
        """The dumped representation: one line per row between '===' markers."""
        lines = ['===']
        for r in range(1, self._n + 1):
            row = ''.join(f'{self.get(r, c)} ' for c in range(1, self._n + 1))
            lines.append('    ' + row)
        lines.append('===')
        return '\n'.join(lines) + '\n'

    def pretty(self) -> str:
        """Human-readable rendering with row numbers and a column ruler."""
        rows = self.dump().strip().splitlines()[1:-1]
        lines = [f'{i:2d} {line.strip()}' for i, line in enumerate(rows, start=1)]
        lines.append('  ' + ''.join(f'{c:3d}' for c in range(1, self._n + 1)))
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.dump()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (Board, ReadonlyBoard)):
            return NotImplemented
        return self.size == other.size and self.cells() == other.cells()

    __hash__ = None  # type: ignore[assignment]


class ReadonlyBoard:
    """A view of a Board that answers queries and refuses every mutation."""

    _QUERIES = frozenset({
        'size', 'row', 'col', 'sq_num', 'exists', 'move_string', 'neighbors', 'capacity',
        'get', 'cells', 'num_pieces', 'whose_move', 'num_of_side', 'get_winner',
        'num_moves', 'is_legal', 'dump', 'pretty',
    })
    _MUTATORS = frozenset({'add_spot', 'undo', 'set', 'clear', 'copy_from', 'set_notifier'})

    def __init__(self, board: Board):
        self._board = board

    def __getattr__(self, name: str):
        if name in self._QUERIES:
            return getattr(self._board, name)
        if name in self._MUTATORS:
            def refuse(*args, **kwargs):
                raise ReadonlyBoardError(f'{name}() is not allowed on a read-only board')
            return refuse
        raise AttributeError(name)

    def __str__(self) -> str:
        return self._board.dump()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (Board, ReadonlyBoard)):
            return NotImplemented
        return self.size == other.size and self.cells() == other.cells()

    __hash__ = None  # type: ignore[assignment]
