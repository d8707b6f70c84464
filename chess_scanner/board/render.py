"""
Board Rendering – Image & Text Views
====================================

Draws the editor board for humans.  The image view mirrors the web board:
light/dark green squares, rank digits along the left edge, file letters
along the bottom edge, and a translucent yellow square under the MOVE
selection.  Pieces are drawn as their FEN letters (white pieces filled
white with a dark outline, black pieces filled black).

Flipping the view only changes which board index lands in which cell;
see :func:`chess_scanner.board.transform.view_index`.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import cv2
import numpy as np

from chess_scanner.board.codec import NUM_SQUARES, WHITE, Piece
from chess_scanner.board.transform import square_name, view_index

log = logging.getLogger(__name__)

# ── Palette (BGR) ──────────────────────────────────────────────────────

LIGHT_SQUARE = (208, 236, 235)     # #EBECD0
DARK_SQUARE = (82, 149, 115)       # #739552
SELECTION = (0, 245, 245)          # #F5F500
WHITE_PIECE = (255, 255, 255)
BLACK_PIECE = (20, 20, 20)
OUTLINE = (40, 40, 40)

SQUARE_SIZE: int = 64


def render_board(
    board: Sequence[Optional[Piece]],
    flipped: bool = False,
    selected: Optional[int] = None,
    square_size: int = SQUARE_SIZE,
) -> np.ndarray:
    """Draw *board* as a BGR image of ``8 * square_size`` pixels a side.

    Parameters
    ----------
    board : sequence of Piece | None
        64 slots in a8 → h1 order.
    flipped : bool
        Show the board from Black's side.
    selected : int, optional
        Board index to highlight (MOVE-mode selection).
    square_size : int
        Side length of one square in pixels.

    Returns
    -------
    np.ndarray
        ``(8 * square_size, 8 * square_size, 3)`` uint8 image.
    """
    if len(board) != NUM_SQUARES:
        raise ValueError(f"Expected {NUM_SQUARES} squares, got {len(board)}")
    if square_size < 1:
        raise ValueError(f"Square size must be at least 1 px, got {square_size}")

    size = square_size * 8
    img = np.zeros((size, size, 3), dtype=np.uint8)
    label_scale = square_size / 160
    piece_scale = square_size / 40
    piece_thickness = max(1, square_size // 24)

    for cell in range(NUM_SQUARES):
        index = view_index(cell, flipped)
        view_row, view_col = divmod(cell, 8)
        row, col = divmod(index, 8)
        x = view_col * square_size
        y = view_row * square_size

        is_dark = (row + col) % 2 == 1
        bg = DARK_SQUARE if is_dark else LIGHT_SQUARE
        text_color = LIGHT_SQUARE if is_dark else DARK_SQUARE
        img[y:y + square_size, x:x + square_size] = bg

        if selected == index:
            region = img[y:y + square_size, x:x + square_size]
            overlay = np.full_like(region, SELECTION)
            img[y:y + square_size, x:x + square_size] = cv2.addWeighted(
                region, 0.5, overlay, 0.5, 0,
            )

        name = square_name(index)
        # Rank digit on the left column, file letter on the bottom row
        if view_col == 0:
            cv2.putText(
                img, name[1], (x + 3, y + int(square_size * 0.22)),
                cv2.FONT_HERSHEY_SIMPLEX, label_scale, text_color, 1, cv2.LINE_AA,
            )
        if view_row == 7:
            cv2.putText(
                img, name[0], (x + square_size - int(square_size * 0.2), y + square_size - 3),
                cv2.FONT_HERSHEY_SIMPLEX, label_scale, text_color, 1, cv2.LINE_AA,
            )

        piece = board[index]
        if piece is not None:
            _draw_piece(img, piece, x, y, square_size, piece_scale, piece_thickness)

    return img


def _draw_piece(
    img: np.ndarray,
    piece: Piece,
    x: int,
    y: int,
    square_size: int,
    scale: float,
    thickness: int,
) -> None:
    label = piece.kind.upper()
    font = cv2.FONT_HERSHEY_DUPLEX
    (tw, th), _ = cv2.getTextSize(label, font, scale, thickness)
    org = (x + (square_size - tw) // 2, y + (square_size + th) // 2)

    if piece.color == WHITE:
        cv2.putText(img, label, org, font, scale, OUTLINE, thickness + 2, cv2.LINE_AA)
        cv2.putText(img, label, org, font, scale, WHITE_PIECE, thickness, cv2.LINE_AA)
    else:
        cv2.putText(img, label, org, font, scale, BLACK_PIECE, thickness, cv2.LINE_AA)


def save_board_image(
    path: str,
    board: Sequence[Optional[Piece]],
    flipped: bool = False,
    selected: Optional[int] = None,
    square_size: int = SQUARE_SIZE,
) -> None:
    """Render *board* and write it to *path* (format from the extension).

    Raises ``OSError`` when the file cannot be written, including when
    OpenCV has no encoder for the extension.
    """
    img = render_board(board, flipped=flipped, selected=selected, square_size=square_size)
    try:
        ok = cv2.imwrite(path, img)
    except cv2.error as exc:
        raise OSError(f"Could not write board image to {path}: unsupported format") from exc
    if not ok:
        raise OSError(f"Could not write board image to {path}")
    log.info("Saved board image to %s", path)


def board_to_text(
    board: Sequence[Optional[Piece]],
    flipped: bool = False,
    selected: Optional[int] = None,
) -> str:
    """Plain-text diagram: FEN letters, ``.`` for empty, ``*`` marks selection."""
    if len(board) != NUM_SQUARES:
        raise ValueError(f"Expected {NUM_SQUARES} squares, got {len(board)}")

    lines: list[str] = []
    files = ""
    for view_row in range(8):
        cells: list[str] = []
        rank = ""
        for view_col in range(8):
            index = view_index(view_row * 8 + view_col, flipped)
            name = square_name(index)
            rank = name[1]
            if view_row == 7:
                files += f" {name[0]}"
            piece = board[index]
            symbol = piece.symbol if piece is not None else "."
            marker = "*" if index == selected else " "
            cells.append(f"{marker}{symbol}")
        lines.append(f"{rank} {''.join(cells)}")
    lines.append(f"  {files}")
    return "\n".join(lines)
