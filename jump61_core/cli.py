from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional, Sequence

from .ai import DEFAULT_DEPTH, DEFAULT_MAX_NODES, DEFAULT_TIME_LIMIT, choose_move
from .board import Board, Coord
from .errors import Jump61Error

logger = logging.getLogger(__name__)

DEFAULT_SIZE = int(os.getenv('JUMP61_SIZE', '6'))


def parse_moves(text: str) -> List[Coord]:
    """Parses 'r c; r c; ...' (commas also separate row from column)."""
    moves: List[Coord] = []
    for chunk in text.split(';'):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [t for t in chunk.replace(',', ' ').split() if t != '']
        if len(parts) != 2:
            raise ValueError(f'Could not parse move {chunk!r}; expected "row col"')
        moves.append((int(parts[0]), int(parts[1])))
    return moves


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Jump61 position analyzer and move suggester')
    parser.add_argument('--size', type=int, default=DEFAULT_SIZE, help='Board size (NxN)')
    parser.add_argument('--depth', type=int, default=DEFAULT_DEPTH, help='Search depth in plies')
    parser.add_argument('--moves', default='', help='Moves to replay from an empty board, e.g. "1 1; 2 2"')
    parser.add_argument('--undo', type=int, default=0, help='Take back this many replayed moves')
    parser.add_argument('--dump', action='store_true', help='Print the raw dump instead of the numbered view')
    parser.add_argument('--max-nodes', type=int, default=DEFAULT_MAX_NODES, help='Cut the search off after this many nodes')
    parser.add_argument('--time-limit', type=float, default=DEFAULT_TIME_LIMIT, help='Cut the search off after this many seconds')
    parser.add_argument('--log-level', default=os.getenv('JUMP61_LOG_LEVEL', 'WARNING'), help='Logging level')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        board = Board(args.size)
        for r, c in parse_moves(args.moves):
            side = board.whose_move()
            board.add_spot(side, r, c)
            logger.info('%s plays %s', side.name, board.move_string(r, c))
        for _ in range(args.undo):
            board.undo()
    except (ValueError, Jump61Error) as e:
        print(f'error: {e}')
        return 2

    print(board.dump() if args.dump else board.pretty())
    winner = board.get_winner()
    if winner is not None:
        print(f'\n{winner.name} wins.')
        return 0

    side = board.whose_move()
    print(f'\n{side.name} to move.')
    try:
        sq = choose_move(board, side, args.depth, max_nodes=args.max_nodes, time_limit=args.time_limit)
    except (ValueError, Jump61Error) as e:
        print(f'error: {e}')
        return 1
    print(f'Suggested move for {side.name}: {board.move_string(sq)}')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
