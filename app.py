from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, List

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from game import (  # noqa: E402
    Board,
    Side,
    DEFAULT_DEPTH,
    DEFAULT_MAX_NODES,
    DEFAULT_TIME_LIMIT,
    Jump61Error,
    IllegalMoveError,
    NoLegalMoveError,
    choose_move,
    legal_coords,
)

logger = logging.getLogger(__name__)

DEFAULT_SIZE = int(os.getenv("JUMP61_SIZE", "6"))
MAX_SIZE = 16
MAX_DEPTH = int(os.getenv("JUMP61_MAX_DEPTH", "6"))
# The API always searches under a node budget, even when none is configured.
API_MAX_NODES = DEFAULT_MAX_NODES or 200000

app = Flask(__name__)


class BadBoard(ValueError):
    pass


def board_to_json(b: Board) -> Dict[str, Any]:
    return {
        "size": int(b.size),
        "cells": [[int(cell.spots), cell.owner.symbol] for cell in b.cells()],
    }


def board_from_json(obj: Any) -> Board:
    """Builds a Board from {"size": N, "cells": [[spots, side], ...]} (row-major)."""
    if not isinstance(obj, dict):
        raise BadBoard("board required")
    try:
        size = int(obj["size"])
        cells = list(obj["cells"])
    except (KeyError, TypeError, ValueError) as e:
        raise BadBoard(f"bad board: {e}") from e
    if not 2 <= size <= MAX_SIZE:
        raise BadBoard(f"size must be between 2 and {MAX_SIZE}")
    if len(cells) != size * size:
        raise BadBoard(f"expected {size * size} cells, got {len(cells)}")
    board = Board(size)
    for sq, entry in enumerate(cells):
        try:
            spots, symbol = entry
            board.set(board.row(sq), board.col(sq), int(spots), Side.from_symbol(str(symbol)))
        except (TypeError, ValueError) as e:
            raise BadBoard(f"bad cell {sq}: {e}") from e
    return board


def _coords_to_json(coords) -> List[List[int]]:
    return [[int(r), int(c)] for (r, c) in coords]


def _position_json(b: Board) -> Dict[str, Any]:
    winner = b.get_winner()
    to_move = b.whose_move()
    return {
        "board": board_to_json(b),
        "toMove": to_move.symbol if winner is None else None,
        "winner": winner.symbol if winner is not None else None,
        "legalMoves": _coords_to_json(legal_coords(b, to_move)) if winner is None else [],
        "dump": b.dump(),
    }


def _error(message: str, status: int, **extra: Any) -> Any:
    logger.info("rejected %s: %s", request.path, message)
    body = {"ok": False, "error": message}
    body.update(extra)
    return jsonify(body), status


def _body_board() -> Board:
    body = request.get_json(force=True, silent=True) or {}
    return board_from_json(body.get("board"))


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        size = int(body.get("size", DEFAULT_SIZE))
    except (TypeError, ValueError):
        return _error("size must be an integer", 400)
    if not 2 <= size <= MAX_SIZE:
        return _error(f"size must be between 2 and {MAX_SIZE}", 400)
    board = Board(size)
    out = {"ok": True}
    out.update(_position_json(board))
    return jsonify(out)


@app.post("/api/legal")
def api_legal() -> Any:
    try:
        board = _body_board()
    except BadBoard as e:
        return _error(str(e), 400)
    return jsonify({"ok": True, "legalMoves": _position_json(board)["legalMoves"]})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = board_from_json(body.get("board"))
        r, c = (int(x) for x in body["move"])
    except BadBoard as e:
        return _error(str(e), 400)
    except (KeyError, TypeError, ValueError):
        return _error("move must be [row, col]", 400)
    side = board.whose_move()
    try:
        board.add_spot(side, r, c)
    except IllegalMoveError as e:
        legal = _coords_to_json(legal_coords(board, side))
        return _error("Illegal move", 400, detail=e.to_dict(), legalMoves=legal)
    out: Dict[str, Any] = {"ok": True, "move": [r, c], "side": side.symbol}
    out.update(_position_json(board))
    return jsonify(out)


@app.post("/api/ai")
def api_ai() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = board_from_json(body.get("board"))
        depth = int(body.get("depth", DEFAULT_DEPTH))
    except BadBoard as e:
        return _error(str(e), 400)
    except (TypeError, ValueError):
        return _error("depth must be an integer", 400)
    if not 1 <= depth <= MAX_DEPTH:
        return _error(f"depth must be between 1 and {MAX_DEPTH}", 400)
    if board.get_winner() is not None:
        return _error("Game is already over", 400, winner=board.get_winner().symbol)
    side = board.whose_move()
    try:
        sq = choose_move(board, side, depth, max_nodes=API_MAX_NODES, time_limit=DEFAULT_TIME_LIMIT)
        board.add_spot(side, sq)
    except (NoLegalMoveError, IllegalMoveError) as e:
        # Rules-engine inconsistency: the board passed validation.
        logger.error("AI failed to move for %s: %s", side.name, e)
        return jsonify({"ok": False, "error": "No AI move available", "detail": e.to_dict()}), 500
    out: Dict[str, Any] = {"ok": True, "move": [board.row(sq), board.col(sq)], "side": side.symbol}
    out.update(_position_json(board))
    return jsonify(out)


@app.errorhandler(Jump61Error)
def handle_engine_error(e: Jump61Error) -> Any:
    logger.error("unhandled engine error: %s", e)
    return jsonify({"ok": False, "error": e.message, "detail": e.to_dict()}), 500


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    app.run(host="127.0.0.1", port=int(os.getenv("PORT", "5000")), debug=debug)
