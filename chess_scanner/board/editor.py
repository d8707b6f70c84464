"""
Board Editor State – Modes, Selection & Edits
=============================================

All editor state lives in one immutable :class:`EditorState`.  Every user
gesture is an *event*; :func:`apply` maps ``(state, event)`` to the next
state and never mutates its input, so any sequence of gestures can be
replayed in a test without a rendering layer.

Edit modes:
  • **MOVE**  – first click selects an occupied square, second click moves
    the piece there (overwriting whatever stood on the target).  Clicking
    the selected square again deselects it.
  • **ERASE** – each click empties the square.
  • **PLACE** – each click drops a copy of the armed piece on the square.

Any mode change clears the selection.  Entering PLACE arms a pawn of the
palette colour when nothing is armed; entering MOVE or ERASE disarms.
No legality checks are made anywhere.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from chess_scanner.board.codec import (
    BLACK,
    COLORS,
    DEFAULT_COLOR_STRATEGY,
    NUM_SQUARES,
    WHITE,
    Board,
    Piece,
    decode,
    empty_board,
    infer_active_color,
    initial_board,
)
from chess_scanner.board.transform import rotate180

log = logging.getLogger(__name__)


class EditMode(enum.Enum):
    MOVE = "MOVE"
    ERASE = "ERASE"
    PLACE = "PLACE"


# ── State ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EditorState:
    """Snapshot of everything the board editor knows."""
    board: Board
    mode: EditMode = EditMode.MOVE
    selected: Optional[int] = None          # MOVE-mode source square
    armed: Optional[Piece] = None           # PLACE-mode template
    palette_color: str = WHITE              # colour offered when arming
    active_color: str = WHITE               # side to move written to FEN
    flipped: bool = False                   # view orientation only

    @classmethod
    def initial(cls) -> "EditorState":
        return cls(board=initial_board())


# ── Events ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SetMode:
    mode: EditMode


@dataclass(frozen=True)
class ClickSquare:
    index: int


@dataclass(frozen=True)
class ArmPiece:
    piece: Optional[Piece]


@dataclass(frozen=True)
class SetPaletteColor:
    color: str


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Rotate:
    pass


@dataclass(frozen=True)
class FlipView:
    pass


@dataclass(frozen=True)
class SetActiveColor:
    color: str


@dataclass(frozen=True)
class ToggleActiveColor:
    pass


@dataclass(frozen=True)
class LoadFen:
    """Replace the board with a decoded FEN (e.g. a scan result)."""
    fen: str
    color_strategy: str = DEFAULT_COLOR_STRATEGY


Event = Union[
    SetMode, ClickSquare, ArmPiece, SetPaletteColor, Reset, Clear,
    Rotate, FlipView, SetActiveColor, ToggleActiveColor, LoadFen,
]


# ── Transitions ────────────────────────────────────────────────────────

def _check_color(color: str) -> None:
    if color not in COLORS:
        raise ValueError(f"Color must be 'w' or 'b', got {color!r}")


def _with_square(board: Board, index: int, piece: Optional[Piece]) -> Board:
    slots = list(board)
    slots[index] = piece
    return tuple(slots)


def _set_mode(state: EditorState, mode: EditMode) -> EditorState:
    armed = state.armed
    if mode is EditMode.PLACE:
        if armed is None:
            armed = Piece("p", state.palette_color)
    else:
        armed = None
    return replace(state, mode=mode, selected=None, armed=armed)


def _click(state: EditorState, index: int) -> EditorState:
    if not 0 <= index < NUM_SQUARES:
        raise ValueError(f"Square index out of range: {index}")

    if state.mode is EditMode.PLACE:
        if state.armed is None:
            return state
        return replace(state, board=_with_square(state.board, index, state.armed))

    if state.mode is EditMode.ERASE:
        return replace(state, board=_with_square(state.board, index, None))

    # MOVE
    if state.selected == index:
        return replace(state, selected=None)

    if state.selected is not None:
        source = state.selected
        board = _with_square(state.board, index, state.board[source])
        board = _with_square(board, source, None)
        log.debug("Moved square %d -> %d", source, index)
        return replace(state, board=board, selected=None)

    if state.board[index] is not None:
        return replace(state, selected=index)
    return state


def apply(state: EditorState, event: Event) -> EditorState:
    """Return the state that results from *event*; *state* is unchanged."""
    if isinstance(event, ClickSquare):
        return _click(state, event.index)

    if isinstance(event, SetMode):
        return _set_mode(state, event.mode)

    if isinstance(event, ArmPiece):
        return replace(state, armed=event.piece)

    if isinstance(event, SetPaletteColor):
        _check_color(event.color)
        return replace(state, palette_color=event.color)

    if isinstance(event, Reset):
        return replace(state, board=initial_board(), selected=None)

    if isinstance(event, Clear):
        return replace(state, board=empty_board(), selected=None)

    if isinstance(event, Rotate):
        return replace(state, board=rotate180(state.board), selected=None)

    if isinstance(event, FlipView):
        return replace(state, flipped=not state.flipped)

    if isinstance(event, SetActiveColor):
        _check_color(event.color)
        return replace(state, active_color=event.color)

    if isinstance(event, ToggleActiveColor):
        color = BLACK if state.active_color == WHITE else WHITE
        return replace(state, active_color=color)

    if isinstance(event, LoadFen):
        return replace(
            state,
            board=decode(event.fen),
            active_color=infer_active_color(event.fen, event.color_strategy),
            selected=None,
        )

    raise TypeError(f"Unsupported editor event: {event!r}")
