"""
Board Transform – Pure Index Geometry
=====================================

Functions over the flat 64-slot board.  Index 0 is a8, index 63 is h1
(row-major, rank 8 first), the same order the codec produces.
"""

from __future__ import annotations

from typing import Optional, Sequence

from chess_scanner.board.codec import NUM_SQUARES, Board, Piece

FILES: str = "abcdefgh"


def rotate180(board: Sequence[Optional[Piece]]) -> Board:
    """Rotate the position by 180°: the piece on *i* moves to *63 - i*.

    Colours are untouched.  This models turning the physical board
    around, e.g. after scanning a photo taken from Black's side.
    """
    return tuple(reversed(board))


def _check_index(index: int) -> None:
    if not 0 <= index < NUM_SQUARES:
        raise ValueError(f"Square index out of range: {index}")


def square_name(index: int) -> str:
    """Algebraic name of a square index (``0 → "a8"``, ``63 → "h1"``)."""
    _check_index(index)
    row, col = divmod(index, 8)
    return f"{FILES[col]}{8 - row}"


def square_index(name: str) -> int:
    """Inverse of :func:`square_name` (``"e2" → 52``)."""
    name = name.strip().lower()
    if len(name) != 2 or name[0] not in FILES or name[1] not in "12345678":
        raise ValueError(f"Not a square name: {name!r}")
    row = 8 - int(name[1])
    col = FILES.index(name[0])
    return row * 8 + col


def view_index(index: int, flipped: bool = False) -> int:
    """Map a display cell (top-left = 0) to the board index it shows.

    Flipping the view only changes what is drawn where; the board itself
    is never modified.  The mapping is its own inverse.
    """
    _check_index(index)
    return NUM_SQUARES - 1 - index if flipped else index
