"""
Tests for the board image and text views.
"""

import numpy as np
import pytest

from chess_scanner.board.codec import empty_board, initial_board
from chess_scanner.board.render import (
    DARK_SQUARE,
    LIGHT_SQUARE,
    board_to_text,
    render_board,
    save_board_image,
)


def pixel(img, y, x):
    return tuple(int(v) for v in img[y, x])


def test_render_shape_and_square_colors():
    img = render_board(empty_board(), square_size=64)
    assert img.shape == (512, 512, 3)
    assert img.dtype == np.uint8
    # top middle of a8 (light) and b8 (dark), away from labels
    assert pixel(img, 5, 40) == LIGHT_SQUARE
    assert pixel(img, 5, 64 + 40) == DARK_SQUARE


def test_selection_follows_flipped_view():
    img = render_board(empty_board(), flipped=True, selected=0, square_size=64)
    # a8 is drawn bottom-right when flipped
    assert pixel(img, 7 * 64 + 5, 7 * 64 + 32) != LIGHT_SQUARE
    assert pixel(img, 5, 40) == LIGHT_SQUARE


def test_render_rejects_short_board():
    with pytest.raises(ValueError):
        render_board(empty_board()[:10])


def test_save_board_image(tmp_path):
    target = tmp_path / "board.png"
    save_board_image(str(target), initial_board(), square_size=32)
    assert target.stat().st_size > 0


def test_text_view():
    lines = board_to_text(initial_board()).splitlines()
    assert lines[0] == "8  r n b q k b n r"
    assert lines[7] == "1  R N B Q K B N R"
    assert lines[-1].split() == list("abcdefgh")


def test_text_view_flipped_with_selection():
    lines = board_to_text(initial_board(), flipped=True, selected=52).splitlines()
    assert lines[0] == "1  R N B K Q B N R"
    assert lines[-1].split() == list("hgfedcba")
    assert "*P" in lines[1]


@pytest.mark.parametrize("square_size", [0, -8])
def test_render_rejects_non_positive_square_size(square_size):
    with pytest.raises(ValueError, match="Square size"):
        render_board(empty_board(), square_size=square_size)


def test_save_board_image_unsupported_extension(tmp_path):
    target = tmp_path / "board.txt"
    with pytest.raises(OSError, match="Could not write board image"):
        save_board_image(str(target), initial_board(), square_size=16)
    assert not target.exists()
