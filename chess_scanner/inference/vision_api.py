"""
Vision Analysis – Chessboard Image → FEN via Gemini
===================================================

The remote model does all the recognition work.  This module only builds
the request (one JPEG + a fixed instruction), constrains the response to
``{"fen": "<string>"}`` and turns every way the call can go wrong into a
single :class:`~chess_scanner.errors.AnalysisError`.

Contract:
  • One attempt per scan: no retries, no backoff, no partial results.
  • A missing API key never fails at import time.  The analyzer reports
    ``is_available() == False`` and refuses to run.
  • The side to move in the returned FEN is *not* trusted here; callers
    decide it with :func:`chess_scanner.board.codec.infer_active_color`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError

from chess_scanner.config import DEFAULT_MODEL
from chess_scanner.errors import AnalysisError

log = logging.getLogger(__name__)


ANALYSIS_PROMPT = """\
You are a Grandmaster-level chess engine with advanced computer vision capabilities.
Analyze this image of a chessboard. The image might be a digital screenshot OR a \
real-world photo with perspective distortion, shadows, and 3D pieces.

Task:
1. Identify the orientation of the board.
   - Look for board coordinates (numbers 1-8, letters a-h) on the edges.
   - If no coordinates are visible, deduce orientation from the piece setup \
(e.g. White King usually on e1, White Queen on d1; Black King on e8).
   - In real photos the side closest to the camera is usually the "bottom".
2. Identify every piece on the board (King, Queen, Rook, Bishop, Knight, Pawn) \
and its color (White, Black).
3. Generate the FEN (Forsyth-Edwards Notation) string representing this position.

Critical rules:
- Accurately distinguish between similar pieces (Pawn vs Bishop, Queen vs King) \
even in low light or at 3D angles.
- If the board is viewed from the Black side, normalize the FEN so it represents \
the standard board state (White at the bottom, rank 8 at top, rank 1 at bottom).
- Return ONLY the FEN string in the JSON response.
- Default the active color to 'w' unless the position strongly suggests \
otherwise (e.g. a check).
"""


# ── Response schema ────────────────────────────────────────────────────

class FenResponse(BaseModel):
    """Shape the model is constrained to answer with."""
    fen: str = Field(description="The FEN string of the chess position.")


# ── Capability ─────────────────────────────────────────────────────────

class VisionAnalyzer(Protocol):
    """What the controller needs from an image → FEN service.

    ``analyze_position`` must report every failure (transport, quota,
    malformed reply) as :class:`~chess_scanner.errors.AnalysisError`.
    The controller only turns ``ChessScannerError`` subclasses into the
    "could not analyze" message; anything else propagates to the caller
    as a bug in the implementation.
    """

    def is_available(self) -> bool:
        ...

    def analyze_position(self, image: bytes) -> str:
        """Return a FEN for a JPEG image or raise ``AnalysisError``."""
        ...


# ── Gemini implementation ──────────────────────────────────────────────

class GeminiVisionAnalyzer:
    """Image → FEN through the Google GenAI SDK.

    Parameters
    ----------
    api_key : str
        Gemini API key.  Empty disables analysis.
    model : str
        Model name passed to ``generate_content``.
    client : object, optional
        Pre-built ``genai.Client``; created lazily from *api_key* otherwise.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        client: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    def is_available(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def analyze_position(self, image: bytes) -> str:
        if not self.is_available():
            raise AnalysisError("Vision analysis is unavailable: no API key configured")

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=FenResponse,
        )
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image, mime_type="image/jpeg"),
                    ANALYSIS_PROMPT,
                ],
                config=config,
            )
        except Exception as exc:
            log.error("Gemini request failed: %s", exc)
            raise AnalysisError("Vision model request failed") from exc

        return parse_response_text(response.text)


def parse_response_text(text: Optional[str]) -> str:
    """Extract the FEN from the model's JSON body."""
    if not text:
        raise AnalysisError("Empty response from vision model")
    try:
        parsed = FenResponse.model_validate_json(text)
    except ValidationError as exc:
        log.error("Malformed vision response: %s", text[:200])
        raise AnalysisError("Malformed response from vision model") from exc

    fen = parsed.fen.strip()
    if not fen:
        raise AnalysisError("Vision model returned an empty FEN")
    log.info("Vision model returned FEN: %s", fen)
    return fen
