from __future__ import annotations

import logging
import os
import time
from typing import Optional

from .board import Coord
from .cell import Side
from .errors import InvalidSenseError, NoLegalMoveError
from .moves import apply_move, legal_moves

logger = logging.getLogger(__name__)


def _env_number(name: str, cast):
    raw = os.getenv(name, '').strip()
    if not raw:
        return None
    value = cast(raw)
    return value if value > 0 else None


DEFAULT_DEPTH = int(os.getenv('JUMP61_DEPTH', '3'))
DEFAULT_MAX_NODES: Optional[int] = _env_number('JUMP61_MAX_NODES', int)
DEFAULT_TIME_LIMIT: Optional[float] = _env_number('JUMP61_TIME_LIMIT', float)


class _SearchCutoff(Exception):
    """Raised inside the search when the node or time budget runs out."""


def static_eval(board) -> int:
    """Heuristic value of BOARD: RED's squares minus BLUE's. Positive favors RED."""
    return board.num_of_side(Side.RED) - board.num_of_side(Side.BLUE)


class _Search:
    """One alpha-beta search. Tracks the node budget and the best root move."""

    def __init__(self, max_nodes: Optional[int] = None, time_limit: Optional[float] = None):
        self.max_nodes = max_nodes
        self.deadline = time.monotonic() + time_limit if time_limit else None
        self.nodes = 0
        self.found_move: Optional[int] = None

    def _tick(self) -> None:
        self.nodes += 1
        if self.max_nodes is not None and self.nodes > self.max_nodes:
            raise _SearchCutoff(f'node limit {self.max_nodes} reached')
        if self.deadline is not None and self.nodes % 64 == 0 and time.monotonic() > self.deadline:
            raise _SearchCutoff('time limit reached')

    def min_max(self, board, depth: int, save_move: bool, sense: int, alpha: int, beta: int) -> int:
        """Value of BOARD searched DEPTH plies deep. SENSE is 1 when RED
        (maximizing) is to move and -1 when BLUE (minimizing) is. When
        SAVE_MOVE, the square giving the returned value goes to found_move."""
        if sense not in (1, -1):
            raise InvalidSenseError(f'Sense must be 1 or -1, got {sense!r}')
        self._tick()
        if depth == 0 or board.get_winner() is not None:
            return static_eval(board)
        side = Side.RED if sense == 1 else Side.BLUE
        moves = legal_moves(board, side)
        if not moves:
            raise NoLegalMoveError(
                f'{side.name} has no legal move',
                context={'to_move': board.whose_move().name},
            )
        limit = board.size * board.size + 1
        best = -limit if sense == 1 else limit
        for sq in moves:
            child = apply_move(board, side, sq)
            # An overflow can leave the spot parity unchanged, so the mover may repeat.
            child_sense = 1 if child.whose_move() is Side.RED else -1
            value = self.min_max(child, depth - 1, False, child_sense, alpha, beta)
            if sense == 1:
                if value > best:
                    best = value
                    if save_move:
                        self.found_move = sq
                alpha = max(alpha, best)
            else:
                if value < best:
                    best = value
                    if save_move:
                        self.found_move = sq
                beta = min(beta, best)
            if alpha >= beta:
                break
        return best


def min_max(board, depth: int, sense: int, alpha: Optional[int] = None, beta: Optional[int] = None) -> int:
    """Alpha-beta value of BOARD to DEPTH plies. See _Search.min_max."""
    limit = board.size * board.size + 1
    return _Search().min_max(
        board, depth, False, sense,
        -limit if alpha is None else alpha,
        limit if beta is None else beta,
    )


def choose_move(
    board,
    side: Side,
    depth: int,
    max_nodes: Optional[int] = None,
    time_limit: Optional[float] = None,
) -> int:
    """Picks a square for SIDE by searching DEPTH plies with alpha-beta pruning.

    Ties go to the lowest square number, so the choice is deterministic. If
    MAX_NODES or TIME_LIMIT (seconds) cuts the search short, the best root
    move finished so far is returned, or the first legal square if none was.
    """
    if depth <= 0:
        raise ValueError(f'Search depth must be positive, got {depth}')
    moves = legal_moves(board, side)
    if not moves:
        raise NoLegalMoveError(
            f'{side.name} has no legal move',
            context={'to_move': board.whose_move().name, 'winner': getattr(board.get_winner(), 'name', None)},
        )
    sense = 1 if side is Side.RED else -1
    limit = board.size * board.size + 1
    search = _Search(max_nodes=max_nodes, time_limit=time_limit)
    try:
        value = search.min_max(board, depth, True, sense, -limit, limit)
        logger.debug('%s: depth %d value %d after %d nodes', side.name, depth, value, search.nodes)
    except _SearchCutoff as e:
        logger.warning('Search for %s cut off after %d nodes: %s', side.name, search.nodes, e)
    if search.found_move is None:
        return moves[0]
    return search.found_move


def ai_pick_move(board, depth: Optional[int] = None) -> Coord:
    """Picks a move for the side to move, as (row, col), using the configured defaults."""
    side = board.whose_move()
    sq = choose_move(
        board,
        side,
        depth if depth is not None else DEFAULT_DEPTH,
        max_nodes=DEFAULT_MAX_NODES,
        time_limit=DEFAULT_TIME_LIMIT,
    )
    return board.row(sq), board.col(sq)
