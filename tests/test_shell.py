"""
Tests for the terminal editor shell.
"""

import io

import cv2

from chess_scanner.app import ScannerController
from chess_scanner.board.codec import Piece
from chess_scanner.shell import EditorShell


class NoAnalyzer:
    def is_available(self):
        return False

    def analyze_position(self, image):
        raise AssertionError("should not be called")


def make_shell():
    out = io.StringIO()
    controller = ScannerController(NoAnalyzer())
    return EditorShell(controller, out), controller, out


def test_move_and_print_fen():
    shell, controller, out = make_shell()
    shell.run(["mode move", "click e2", "click e4", "fen"])
    assert "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR w - - 0 1" in out.getvalue()


def test_squares_by_index():
    shell, controller, out = make_shell()
    shell.run(["click 52", "click 36"])
    assert controller.state.board[36] == Piece("p", "w")


def test_place_with_palette_color():
    shell, controller, out = make_shell()
    shell.run(["color b", "mode place", "arm q", "click a1"])
    assert controller.state.board[56] == Piece("q", "b")


def test_place_rotate_turn_export():
    shell, controller, out = make_shell()
    shell.run(["clear", "mode place", "arm k", "click a8", "rotate", "turn", "export"])
    assert controller.state.board[63] == Piece("k", "w")
    assert controller.state.active_color == "b"
    assert out.getvalue().strip().endswith("https://lichess.org/analysis/8/8/8/8/8/8/8/7K_b_-_-_0_1")


def test_load_fen_with_spaces():
    shell, controller, out = make_shell()
    shell.run(["load 4k3/8/8/8/8/8/8/4K3 b - - 0 1"])
    assert controller.state.board[4] == Piece("k", "b")
    assert controller.state.active_color == "b"


def test_errors_are_reported_not_raised():
    shell, controller, out = make_shell()
    shell.run(["click z9", "mode fly", "arm x", "turn q", "click 99", "bogus", "load"])
    text = out.getvalue()
    assert "error: Not a square: z9" in text
    assert "error: Unknown mode: fly" in text
    assert "Unknown command: bogus" in text
    assert "error: Square index out of range: 99" in text
    assert "error: Usage: load <fen>" in text


def test_quit_stops_processing():
    shell, controller, out = make_shell()
    shell.run(["clear", "quit", "reset"])
    assert all(sq is None for sq in controller.state.board)


def test_scan_unavailable_message(tmp_path):
    shell, controller, out = make_shell()
    shell.run([f"scan {tmp_path / 'board.jpg'}"])
    assert "Analysis unavailable" in out.getvalue()


def test_show_and_render(tmp_path):
    shell, controller, out = make_shell()
    target = tmp_path / "board.png"
    shell.run(["click e2", "show", f"render {target}"])
    text = out.getvalue()
    assert "*P" in text
    assert "mode=MOVE" in text
    assert cv2.imread(str(target)).shape == (512, 512, 3)


def test_render_unsupported_extension_reports_error(tmp_path):
    shell, controller, out = make_shell()
    shell.run([f"render {tmp_path / 'board.txt'}", "clear"])
    assert "error: Could not write board image" in out.getvalue()
    # the session keeps going after the failed render
    assert all(sq is None for sq in controller.state.board)
