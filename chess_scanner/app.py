"""
Scanner Controller
==================

Owns the single :class:`~chess_scanner.board.editor.EditorState`, the
injected vision analyzer and the scan busy flag.  Everything the shell or
CLI does goes through here.

Scans are single-flight: while one is running ``can_scan`` is False and a
second ``scan`` call is refused instead of queued.  Any failure (bad image,
network error, malformed reply) leaves the board untouched and sets the
same user-facing message.
"""

from __future__ import annotations

import logging
from typing import Optional

from chess_scanner.board.codec import encode
from chess_scanner.board.editor import EditorState, Event, LoadFen, apply
from chess_scanner.config import Settings
from chess_scanner.errors import ChessScannerError
from chess_scanner.inference.image_prep import prepare_image
from chess_scanner.inference.vision_api import VisionAnalyzer

log = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Could not analyze image. Please try again."


def analysis_url(fen: str, base_url: str) -> str:
    """Analysis page URL with the FEN (spaces → ``_``) as the last segment."""
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url + fen.replace(" ", "_")


class ScannerController:
    """Application state plus the operations the user can trigger."""

    def __init__(
        self,
        analyzer: VisionAnalyzer,
        settings: Optional[Settings] = None,
        state: Optional[EditorState] = None,
    ) -> None:
        self.analyzer = analyzer
        self.settings = settings or Settings()
        self.state = state or EditorState.initial()
        self.analyzing = False
        self.error: Optional[str] = None

    # ── Editing ────────────────────────────────────────────────────────

    def dispatch(self, event: Event) -> EditorState:
        self.state = apply(self.state, event)
        return self.state

    # ── Analysis ───────────────────────────────────────────────────────

    @property
    def analysis_available(self) -> bool:
        return self.analyzer.is_available()

    @property
    def can_scan(self) -> bool:
        return self.analysis_available and not self.analyzing

    def scan(self, image: bytes) -> bool:
        """Analyse a raw image and load the resulting position.

        Returns True when the board was replaced, False when the scan was
        refused or failed (``self.error`` then holds the message to show).
        *image* may be raw file bytes or a base64 ``data:image/`` URL.

        Only ``ChessScannerError`` counts as a failed analysis; see
        :class:`VisionAnalyzer`.  Other exceptions propagate, with the
        busy flag already cleared.
        """
        if self.analyzing:
            log.warning("Scan already in progress; ignoring new request")
            return False
        if not self.analysis_available:
            log.warning("Scan requested but vision analysis is unavailable")
            self.error = ANALYSIS_FAILED_MESSAGE
            return False

        self.analyzing = True
        self.error = None
        try:
            jpeg = prepare_image(
                image,
                max_size=self.settings.max_image_size,
                quality=self.settings.jpeg_quality,
            )
            fen = self.analyzer.analyze_position(jpeg)
        except ChessScannerError as exc:
            log.error("Image analysis failed: %s", exc)
            self.error = ANALYSIS_FAILED_MESSAGE
            return False
        finally:
            self.analyzing = False

        self.dispatch(LoadFen(fen, color_strategy=self.settings.color_inference))
        log.info("Loaded scanned position, %s to move", self.state.active_color)
        return True

    # ── Export ─────────────────────────────────────────────────────────

    def fen(self) -> str:
        return encode(self.state.board, self.state.active_color)

    def copy_fen(self) -> str:
        """Clipboard payload: the full FEN string, nothing else."""
        return self.fen()

    def export_url(self) -> str:
        return analysis_url(self.fen(), self.settings.analysis_url)
