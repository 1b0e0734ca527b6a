"""
Jump61 error hierarchy.

Every engine error derives from Jump61Error so callers can catch them as a
group. The orchestration layer decides what to do with them: re-prompt a
human after IllegalMoveError, treat NoLegalMoveError from the search as a
fatal rules-engine inconsistency.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "Jump61Error",
    "IllegalMoveError",
    "NoHistoryError",
    "InvalidSenseError",
    "NoLegalMoveError",
    "ReadonlyBoardError",
]


class Jump61Error(Exception):
    """Base exception for all Jump61 engine errors."""
    code: str = "JUMP61_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {"code": self.code, "message": self.message, "context": self.context}


class IllegalMoveError(Jump61Error):
    """A spot was requested on a square the side may not play."""
    code: str = "ILLEGAL_MOVE"


class NoHistoryError(Jump61Error):
    """undo() was called with nothing left to undo."""
    code: str = "NO_HISTORY"


class InvalidSenseError(Jump61Error):
    """The search was asked to neither maximize (1) nor minimize (-1)."""
    code: str = "INVALID_SENSE"


class NoLegalMoveError(Jump61Error):
    """The search found no candidate square for the side to move."""
    code: str = "NO_LEGAL_MOVE"


class ReadonlyBoardError(Jump61Error):
    """A mutating call reached a read-only board view."""
    code: str = "READONLY_BOARD"
