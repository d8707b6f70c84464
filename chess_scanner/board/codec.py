"""
Board Codec – FEN ⇄ 64-Square Board
===================================

Responsibilities:
  1. Decode the placement field of a FEN string into a flat board of 64
     slots, row-major from a8 (index 0) to h1 (index 63).
  2. Encode a board back into a full six-field FEN string.
  3. Decide the side to move for a FEN returned by the vision model.

The decoder is *permissive*: this is a position editor, not a
rules engine.  Rank lengths and piece counts are never checked, and a
malformed placement produces a best-effort board instead of an error:

  • ``/`` separators are skipped; the fill cursor is *not* realigned at a
    rank boundary, so a short rank shifts every following piece.
  • A digit advances the cursor by its value.
  • A letter from ``pnbrqkPNBRQK`` places a piece and advances by one.
  • Any other character is ignored and does not advance the cursor.
  • Writes past h1 are dropped; unfilled slots stay empty.

Only the side to move survives a round trip.  Castling rights, en-passant
target and the clocks are always written as ``- - 0 1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

# ── Constants ──────────────────────────────────────────────────────────

NUM_SQUARES: int = 64

PIECE_KINDS: str = "pnbrqk"
WHITE: str = "w"
BLACK: str = "b"
COLORS: Tuple[str, str] = (WHITE, BLACK)

INITIAL_FEN: str = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Suffix written after the side to move: castling, en passant, clocks
FEN_SUFFIX: str = "- - 0 1"

COLOR_STRATEGIES: Tuple[str, str] = ("substring", "field")
DEFAULT_COLOR_STRATEGY: str = "substring"


# ── Data structures ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Piece:
    """A chess piece as a value: two white pawns are interchangeable."""
    kind: str                  # one of "pnbrqk"
    color: str                 # "w" | "b"

    def __post_init__(self) -> None:
        if self.kind not in PIECE_KINDS or len(self.kind) != 1:
            raise ValueError(f"Unknown piece kind: {self.kind!r}")
        if self.color not in COLORS:
            raise ValueError(f"Unknown piece color: {self.color!r}")

    @property
    def symbol(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        return self.kind.upper() if self.color == WHITE else self.kind

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        """Build a piece from a FEN letter such as ``"Q"`` or ``"n"``."""
        if len(symbol) != 1 or symbol.lower() not in PIECE_KINDS:
            raise ValueError(f"Not a FEN piece letter: {symbol!r}")
        color = WHITE if symbol.isupper() else BLACK
        return cls(kind=symbol.lower(), color=color)


Board = Tuple[Optional[Piece], ...]


# ── Board constructors ─────────────────────────────────────────────────

def empty_board() -> Board:
    """Return a board with all 64 squares empty."""
    return (None,) * NUM_SQUARES


def initial_board() -> Board:
    """Return the standard starting position."""
    return decode(INITIAL_FEN)


# ── Decoding ───────────────────────────────────────────────────────────

def decode(fen: str) -> Board:
    """Convert a FEN string into a 64-slot board.

    Only the first whitespace-delimited field (piece placement) is read.
    Never raises for string input; see the module docstring for how
    malformed placements are absorbed.

    Parameters
    ----------
    fen : str
        Full FEN record or a bare placement field.

    Returns
    -------
    Board
        Tuple of exactly 64 ``Piece`` or ``None`` entries (a8 → h1).
    """
    fields = fen.split()
    placement = fields[0] if fields else ""

    slots: list[Optional[Piece]] = [None] * NUM_SQUARES
    cursor = 0

    for ch in placement:
        if ch in "0123456789":
            cursor += int(ch)
        elif ch.lower() in PIECE_KINDS:
            if cursor < NUM_SQUARES:
                slots[cursor] = Piece.from_symbol(ch)
            cursor += 1
        # "/" and unknown characters are skipped without moving the cursor

    return tuple(slots)


# ── Encoding ───────────────────────────────────────────────────────────

def encode(board: Sequence[Optional[Piece]], active_color: str = WHITE) -> str:
    """Convert a board into a six-field FEN string.

    Parameters
    ----------
    board : sequence of Piece | None
        Exactly 64 slots in a8 → h1 order.
    active_color : str
        Side to move, ``"w"`` or ``"b"``.

    Returns
    -------
    str
        e.g. ``"rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"``.
    """
    if len(board) != NUM_SQUARES:
        raise ValueError(f"Expected {NUM_SQUARES} squares, got {len(board)}")
    if active_color not in COLORS:
        raise ValueError(f"Active color must be 'w' or 'b', got {active_color!r}")

    chars: list[str] = []
    empty_count = 0

    for i, piece in enumerate(board):
        if i > 0 and i % 8 == 0:
            if empty_count > 0:
                chars.append(str(empty_count))
                empty_count = 0
            chars.append("/")

        if piece is None:
            empty_count += 1
        else:
            if empty_count > 0:
                chars.append(str(empty_count))
                empty_count = 0
            chars.append(piece.symbol)

    if empty_count > 0:
        chars.append(str(empty_count))

    return f"{''.join(chars)} {active_color} {FEN_SUFFIX}"


# ── Side to move ───────────────────────────────────────────────────────

def infer_active_color(fen: str, strategy: str = DEFAULT_COLOR_STRATEGY) -> str:
    """Decide the side to move for a FEN coming back from analysis.

    ``"substring"`` returns black whenever the literal token ``" b "``
    appears anywhere in *fen*, white otherwise.  This matches how scanned
    positions have always been read, including its false positives.

    ``"field"`` reads the second whitespace-delimited field instead and
    falls back to white when it is missing or not ``w``/``b``.
    """
    if strategy == "substring":
        return BLACK if " b " in fen else WHITE
    if strategy == "field":
        fields = fen.split()
        if len(fields) > 1 and fields[1] in COLORS:
            return fields[1]
        return WHITE
    raise ValueError(
        f"Unknown color strategy {strategy!r} (expected one of {COLOR_STRATEGIES})"
    )
