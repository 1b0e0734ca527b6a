from __future__ import annotations

# Facade module that re-exports the Jump61 core.
# The Flask app and the tests import from here; the single-responsibility
# modules live under jump61_core/*.

from jump61_core.cell import Cell, Side, EMPTY
from jump61_core.board import Board, ReadonlyBoard, Coord
from jump61_core.moves import legal_moves, legal_coords, apply_move
from jump61_core.ai import (
    DEFAULT_DEPTH,
    DEFAULT_MAX_NODES,
    DEFAULT_TIME_LIMIT,
    static_eval,
    min_max,
    choose_move,
    ai_pick_move,
)
from jump61_core.errors import (
    Jump61Error,
    IllegalMoveError,
    NoHistoryError,
    InvalidSenseError,
    NoLegalMoveError,
    ReadonlyBoardError,
)


def new_board(size: int) -> Board:
    return Board(size)


def board_from_copy(other) -> Board:
    """A copy of OTHER's contents with a fresh undo history."""
    return Board.from_board(other)


def main() -> None:
    # CLI driver delegated to jump61_core.cli
    from jump61_core.cli import main as _main
    raise SystemExit(_main())


if __name__ == '__main__':
    main()
