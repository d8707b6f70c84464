"""
Runtime settings, read from the environment.

A local ``.env`` file is loaded first (``python-dotenv``) so the API key
can live outside the shell profile.  Do NOT hardcode the key here.

Supported variables:
  - GEMINI_API_KEY (falls back to GOOGLE_API_KEY, then API_KEY)
  - CHESS_SCANNER_MODEL
  - CHESS_SCANNER_MAX_IMAGE_SIZE
  - CHESS_SCANNER_JPEG_QUALITY
  - CHESS_SCANNER_COLOR_INFERENCE   ("substring" | "field")
  - CHESS_SCANNER_ANALYSIS_URL
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from chess_scanner.board.codec import COLOR_STRATEGIES, DEFAULT_COLOR_STRATEGY

log = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_MAX_IMAGE_SIZE = 1024      # longest side in px, bounds upload size
DEFAULT_JPEG_QUALITY = 70
DEFAULT_COLOR_INFERENCE = DEFAULT_COLOR_STRATEGY
DEFAULT_ANALYSIS_URL = "https://lichess.org/analysis/"

API_KEY_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default
    if value <= 0:
        log.warning("Ignoring %s=%d (must be positive), using %d", name, value, default)
        return default
    return value


@dataclass
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    max_image_size: int = DEFAULT_MAX_IMAGE_SIZE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    color_inference: str = DEFAULT_COLOR_INFERENCE
    analysis_url: str = DEFAULT_ANALYSIS_URL

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        load_dotenv_file: bool = True,
    ) -> "Settings":
        """Build settings from *env* (defaults to ``os.environ``)."""
        if env is None:
            if load_dotenv_file:
                load_dotenv()
            env = os.environ

        api_key = ""
        for name in API_KEY_VARS:
            api_key = env.get(name, "").strip()
            if api_key:
                break

        color_inference = env.get("CHESS_SCANNER_COLOR_INFERENCE", "").strip().lower()
        if not color_inference:
            color_inference = DEFAULT_COLOR_INFERENCE
        elif color_inference not in COLOR_STRATEGIES:
            log.warning(
                "Ignoring CHESS_SCANNER_COLOR_INFERENCE=%r, using %r",
                color_inference, DEFAULT_COLOR_INFERENCE,
            )
            color_inference = DEFAULT_COLOR_INFERENCE

        quality = _int_from_env(env, "CHESS_SCANNER_JPEG_QUALITY", DEFAULT_JPEG_QUALITY)
        if quality > 100:
            log.warning("JPEG quality %d clamped to 100", quality)
            quality = 100

        return cls(
            api_key=api_key,
            model=env.get("CHESS_SCANNER_MODEL", "").strip() or DEFAULT_MODEL,
            max_image_size=_int_from_env(
                env, "CHESS_SCANNER_MAX_IMAGE_SIZE", DEFAULT_MAX_IMAGE_SIZE,
            ),
            jpeg_quality=quality,
            color_inference=color_inference,
            analysis_url=(
                env.get("CHESS_SCANNER_ANALYSIS_URL", "").strip() or DEFAULT_ANALYSIS_URL
            ),
        )
