"""
Interactive board editor for the terminal.

Reads one command per line and drives a :class:`ScannerController`.
Squares may be given as names (``e2``) or indices (``52``).
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Callable, Dict, Iterable, List, TextIO

from chess_scanner.app import ScannerController
from chess_scanner.board.codec import Piece
from chess_scanner.board.editor import (
    ArmPiece,
    Clear,
    ClickSquare,
    EditMode,
    FlipView,
    LoadFen,
    Reset,
    Rotate,
    SetActiveColor,
    SetMode,
    SetPaletteColor,
    ToggleActiveColor,
)
from chess_scanner.board.render import board_to_text, save_board_image
from chess_scanner.board.transform import square_index

log = logging.getLogger(__name__)

PROMPT = "chess> "

HELP_TEXT = """\
Commands:
  mode move|erase|place   switch edit mode (clears selection)
  arm <p|n|b|r|q|k>       arm a piece of the palette colour for PLACE
  color w|b               set the palette colour
  click <square>          click a square (e2 or 0-63)
  rotate                  rotate the position 180 degrees
  flip                    flip the view (board unchanged)
  turn [w|b]              set or toggle the side to move
  reset | clear           starting position | empty board
  load <fen>              load a FEN string
  scan <image>            analyse a photo of a board
  fen                     print the FEN (clipboard payload)
  export                  print the analysis URL
  show                    print the board
  render <file.png>       save the board as an image
  quit"""


class ShellError(ValueError):
    """Bad command or argument typed at the prompt."""


def _parse_square(token: str) -> int:
    if token.isdigit():
        return int(token)
    try:
        return square_index(token)
    except ValueError as exc:
        raise ShellError(f"Not a square: {token}") from exc


def _one_arg(args: List[str], usage: str) -> str:
    if len(args) != 1:
        raise ShellError(f"Usage: {usage}")
    return args[0]


def _color_arg(token: str) -> str:
    color = token.lower()
    if color not in ("w", "b"):
        raise ShellError("Color must be w or b")
    return color


class EditorShell:
    """Command interpreter bound to one controller and one output stream."""

    def __init__(self, controller: ScannerController, out: TextIO) -> None:
        self.controller = controller
        self.out = out
        self.commands: Dict[str, Callable[[List[str]], None]] = {
            "mode": self._mode,
            "arm": self._arm,
            "color": self._color,
            "click": self._click,
            "rotate": lambda args: self.controller.dispatch(Rotate()),
            "flip": lambda args: self.controller.dispatch(FlipView()),
            "turn": self._turn,
            "reset": lambda args: self.controller.dispatch(Reset()),
            "clear": lambda args: self.controller.dispatch(Clear()),
            "load": self._load,
            "scan": self._scan,
            "fen": lambda args: self._print(self.controller.copy_fen()),
            "export": lambda args: self._print(self.controller.export_url()),
            "show": lambda args: self._show(),
            "render": self._render,
            "help": lambda args: self._print(HELP_TEXT),
        }

    def _print(self, text: str) -> None:
        self.out.write(text + "\n")

    def _show(self) -> None:
        state = self.controller.state
        self._print(board_to_text(state.board, state.flipped, state.selected))
        armed = state.armed.symbol if state.armed else "-"
        side = "White" if state.active_color == "w" else "Black"
        self._print(f"mode={state.mode.value}  armed={armed}  {side} to play")

    # ── Commands ───────────────────────────────────────────────────────

    def _mode(self, args: List[str]) -> None:
        name = _one_arg(args, "mode move|erase|place").upper()
        try:
            mode = EditMode[name]
        except KeyError as exc:
            raise ShellError(f"Unknown mode: {args[0]}") from exc
        self.controller.dispatch(SetMode(mode))

    def _arm(self, args: List[str]) -> None:
        kind = _one_arg(args, "arm <p|n|b|r|q|k>").lower()
        try:
            piece = Piece(kind, self.controller.state.palette_color)
        except ValueError as exc:
            raise ShellError(str(exc)) from exc
        self.controller.dispatch(ArmPiece(piece))

    def _color(self, args: List[str]) -> None:
        self.controller.dispatch(SetPaletteColor(_color_arg(_one_arg(args, "color w|b"))))

    def _click(self, args: List[str]) -> None:
        index = _parse_square(_one_arg(args, "click <square>"))
        if not 0 <= index < 64:
            raise ShellError(f"Square index out of range: {index}")
        self.controller.dispatch(ClickSquare(index))

    def _turn(self, args: List[str]) -> None:
        if not args:
            self.controller.dispatch(ToggleActiveColor())
        else:
            self.controller.dispatch(SetActiveColor(_color_arg(_one_arg(args, "turn [w|b]"))))

    def _load(self, args: List[str]) -> None:
        if not args:
            raise ShellError("Usage: load <fen>")
        self.controller.dispatch(
            LoadFen(" ".join(args), color_strategy=self.controller.settings.color_inference),
        )

    def _scan(self, args: List[str]) -> None:
        path = Path(_one_arg(args, "scan <image>"))
        if not self.controller.can_scan:
            self._print("Analysis unavailable (set GEMINI_API_KEY) or already running.")
            return
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ShellError(f"Could not read image: {path}") from exc
        if self.controller.scan(data):
            self._show()
        else:
            self._print(self.controller.error or "Scan failed.")

    def _render(self, args: List[str]) -> None:
        path = _one_arg(args, "render <file.png>")
        state = self.controller.state
        try:
            save_board_image(path, state.board, flipped=state.flipped, selected=state.selected)
        except (OSError, ValueError) as exc:
            raise ShellError(str(exc)) from exc
        self._print(f"Saved {path}")

    # ── Loop ───────────────────────────────────────────────────────────

    def execute(self, line: str) -> bool:
        """Run one command line.  Returns False when the user quits."""
        try:
            tokens = shlex.split(line)
        except ValueError as exc:
            self._print(f"error: {exc}")
            return True
        if not tokens:
            return True

        name, args = tokens[0].lower(), tokens[1:]
        log.debug("Shell command: %s %s", name, args)
        if name in ("quit", "exit"):
            return False

        handler = self.commands.get(name)
        if handler is None:
            self._print(f"Unknown command: {name} (try 'help')")
            return True

        try:
            handler(args)
        except ShellError as exc:
            self._print(f"error: {exc}")
        return True

    def run(self, lines: Iterable[str]) -> None:
        for line in lines:
            if not self.execute(line):
                break


def prompt_lines(prompt: str = PROMPT) -> Iterable[str]:
    """Yield lines typed at the terminal until EOF."""
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return
