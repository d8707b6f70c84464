"""
Chess Scanner – Main Entry Point
================================

Commands:

  1. **Scan**    – Send a photo or screenshot of a chessboard to the vision
                   model and print the FEN and analysis link.
  2. **Render**  – Draw a FEN position as a PNG.
  3. **Export**  – Print the analysis link for a FEN position.
  4. **Edit**    – Interactive board editor (move / erase / place).

Usage examples
--------------

**Scanning**::

    GEMINI_API_KEY=... python chess_scanner.py scan \\
        --image board.jpg \\
        --render board.png

**Rendering**::

    python chess_scanner.py render \\
        --fen "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b - - 0 1" \\
        --output board.png --flip

**Editing**::

    python chess_scanner.py edit --fen "8/8/8/4k3/8/8/8/4K3 w - - 0 1"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from chess_scanner.app import ScannerController, analysis_url
from chess_scanner.board.codec import (
    COLOR_STRATEGIES,
    Board,
    INITIAL_FEN,
    decode,
    encode,
    infer_active_color,
)
from chess_scanner.board.editor import LoadFen
from chess_scanner.board.render import board_to_text, save_board_image
from chess_scanner.config import Settings
from chess_scanner.inference.vision_api import GeminiVisionAnalyzer
from chess_scanner.shell import EditorShell, prompt_lines

log = logging.getLogger("chess_scanner")


def _build_controller(args: argparse.Namespace) -> ScannerController:
    settings = Settings.from_env()
    if getattr(args, "model", None):
        settings.model = args.model
    if getattr(args, "color_inference", None):
        settings.color_inference = args.color_inference
    analyzer = GeminiVisionAnalyzer(api_key=settings.api_key, model=settings.model)
    return ScannerController(analyzer, settings=settings)


def _normalise_fen(fen: str, strategy: str) -> str:
    """Round-trip a user FEN through the codec (placement + side to move)."""
    return encode(decode(fen), infer_active_color(fen, strategy))


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _save_or_exit(path: str, board: Board, **kwargs) -> None:
    try:
        save_board_image(path, board, **kwargs)
    except OSError as exc:
        log.error("%s", exc)
        sys.exit(1)


# ═══════════════════════════════════════════════════════════════════════
# Scan
# ═══════════════════════════════════════════════════════════════════════

def cmd_scan(args: argparse.Namespace) -> None:
    """Run the vision model on an image."""
    controller = _build_controller(args)
    if not controller.analysis_available:
        log.error("Vision analysis unavailable: set GEMINI_API_KEY (or API_KEY)")
        sys.exit(1)

    try:
        data = Path(args.image).read_bytes()
    except OSError:
        log.error("Could not read image: %s", args.image)
        sys.exit(1)

    if not controller.scan(data):
        log.error(controller.error)
        sys.exit(1)

    state = controller.state
    print("\n" + "=" * 60)
    print("  CHESS SCAN RESULT")
    print("=" * 60)
    print(f"  FEN            : {controller.fen()}")
    print(f"  To play        : {'White' if state.active_color == 'w' else 'Black'}")
    print(f"  Analysis       : {controller.export_url()}")
    print("=" * 60)
    print(board_to_text(state.board))
    print()

    if args.render:
        _save_or_exit(args.render, state.board)


# ═══════════════════════════════════════════════════════════════════════
# Render / Export
# ═══════════════════════════════════════════════════════════════════════

def cmd_render(args: argparse.Namespace) -> None:
    """Draw a FEN position to an image file."""
    _save_or_exit(
        args.output, decode(args.fen), flipped=args.flip, square_size=args.square_size,
    )


def cmd_export(args: argparse.Namespace) -> None:
    """Print the analysis URL for a FEN position."""
    settings = Settings.from_env()
    fen = _normalise_fen(args.fen, settings.color_inference)
    print(analysis_url(fen, args.base_url or settings.analysis_url))


# ═══════════════════════════════════════════════════════════════════════
# Edit
# ═══════════════════════════════════════════════════════════════════════

def cmd_edit(args: argparse.Namespace) -> None:
    """Interactive board editor."""
    controller = _build_controller(args)
    if args.fen:
        controller.dispatch(
            LoadFen(args.fen, color_strategy=controller.settings.color_inference),
        )
    if not controller.analysis_available:
        log.info("No API key configured; 'scan' is disabled in this session")

    shell = EditorShell(controller, sys.stdout)
    shell.execute("show")
    shell.run(prompt_lines())


# ═══════════════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chess_scanner",
        description="Chessboard photo → FEN scanner and position editor.",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # ── scan ──
    p_scan = sub.add_parser("scan", help="Scan a chessboard image")
    p_scan.add_argument("--image", required=True,
                        help="Path to a photo or screenshot")
    p_scan.add_argument("--model", default=None,
                        help="Vision model name (overrides CHESS_SCANNER_MODEL)")
    p_scan.add_argument("--color-inference", default=None,
                        choices=COLOR_STRATEGIES,
                        help="How to read the side to move from the result")
    p_scan.add_argument("--render", default=None,
                        help="Also save the scanned board as an image")

    # ── render ──
    p_render = sub.add_parser("render", help="Draw a FEN position as an image")
    p_render.add_argument("--fen", default=INITIAL_FEN)
    p_render.add_argument("--output", default="board.png")
    p_render.add_argument("--flip", action="store_true",
                          help="Show the board from Black's side")
    p_render.add_argument("--square-size", type=_positive_int, default=64)

    # ── export ──
    p_exp = sub.add_parser("export", help="Print the analysis URL for a FEN")
    p_exp.add_argument("--fen", required=True)
    p_exp.add_argument("--base-url", default=None,
                       help="Analysis site base (overrides CHESS_SCANNER_ANALYSIS_URL)")

    # ── edit ──
    p_edit = sub.add_parser("edit", help="Interactive board editor")
    p_edit.add_argument("--fen", default=None,
                        help="Start from this position instead of the initial one")
    p_edit.add_argument("--model", default=None)
    p_edit.add_argument("--color-inference", default=None,
                        choices=COLOR_STRATEGIES)

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    dispatch = {
        "scan": cmd_scan,
        "render": cmd_render,
        "export": cmd_export,
        "edit": cmd_edit,
    }

    dispatch[args.command](args)


if __name__ == "__main__":
    main()
