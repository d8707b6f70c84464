"""
Tests for environment-driven settings.
"""

from chess_scanner.board.codec import DEFAULT_COLOR_STRATEGY
from chess_scanner.board.editor import LoadFen
from chess_scanner.config import (
    DEFAULT_ANALYSIS_URL,
    DEFAULT_JPEG_QUALITY,
    DEFAULT_MAX_IMAGE_SIZE,
    DEFAULT_MODEL,
    Settings,
)


def test_defaults_from_empty_env():
    settings = Settings.from_env({})
    assert settings.api_key == ""
    assert settings.model == DEFAULT_MODEL
    assert settings.max_image_size == DEFAULT_MAX_IMAGE_SIZE
    assert settings.jpeg_quality == DEFAULT_JPEG_QUALITY
    assert settings.color_inference == DEFAULT_COLOR_STRATEGY
    assert settings.analysis_url == DEFAULT_ANALYSIS_URL


def test_api_key_fallback_order():
    assert Settings.from_env({"API_KEY": "c"}).api_key == "c"
    assert Settings.from_env({"GOOGLE_API_KEY": "b", "API_KEY": "c"}).api_key == "b"
    env = {"GEMINI_API_KEY": "a", "GOOGLE_API_KEY": "b", "API_KEY": "c"}
    assert Settings.from_env(env).api_key == "a"
    assert Settings.from_env({"GEMINI_API_KEY": "  ", "API_KEY": "c"}).api_key == "c"


def test_overrides():
    settings = Settings.from_env({
        "CHESS_SCANNER_MODEL": "gemini-test",
        "CHESS_SCANNER_MAX_IMAGE_SIZE": "512",
        "CHESS_SCANNER_JPEG_QUALITY": "90",
        "CHESS_SCANNER_COLOR_INFERENCE": "Field",
        "CHESS_SCANNER_ANALYSIS_URL": "https://example.org/analysis/",
    })
    assert settings.model == "gemini-test"
    assert settings.max_image_size == 512
    assert settings.jpeg_quality == 90
    assert settings.color_inference == "field"
    assert settings.analysis_url == "https://example.org/analysis/"


def test_invalid_values_fall_back():
    settings = Settings.from_env({
        "CHESS_SCANNER_MAX_IMAGE_SIZE": "huge",
        "CHESS_SCANNER_JPEG_QUALITY": "-5",
        "CHESS_SCANNER_COLOR_INFERENCE": "guess",
    })
    assert settings.max_image_size == DEFAULT_MAX_IMAGE_SIZE
    assert settings.jpeg_quality == DEFAULT_JPEG_QUALITY
    assert settings.color_inference == DEFAULT_COLOR_STRATEGY


def test_quality_is_clamped():
    assert Settings.from_env({"CHESS_SCANNER_JPEG_QUALITY": "150"}).jpeg_quality == 100


def test_color_strategy_defaults_agree():
    assert DEFAULT_COLOR_STRATEGY == "substring"
    assert Settings().color_inference == DEFAULT_COLOR_STRATEGY
    assert LoadFen("8/8/8/8/8/8/8/8").color_strategy == DEFAULT_COLOR_STRATEGY
