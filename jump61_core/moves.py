from __future__ import annotations

from typing import List

from .board import Board, Coord
from .cell import Side


def legal_moves(board, side: Side) -> List[int]:
    """Square numbers SIDE may play right now, in ascending order."""
    if board.get_winner() is not None or side is not board.whose_move():
        return []
    return [sq for sq in range(board.size * board.size) if board.is_legal(side, sq)]


def legal_coords(board, side: Side) -> List[Coord]:
    """Same as legal_moves, as (row, col) pairs."""
    return [(board.row(sq), board.col(sq)) for sq in legal_moves(board, side)]


def apply_move(board, side: Side, sq: int) -> Board:
    """Plays SIDE at square SQ on a fresh copy of BOARD and returns the copy.

    The copy keeps no undo history, since search nodes are thrown away."""
    child = Board.from_board(board)
    child._check_legal(side, sq)
    child._play(side, sq)
    return child
