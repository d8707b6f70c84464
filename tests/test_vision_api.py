"""
Unit tests for the Gemini vision analyzer.

The SDK is never contacted: a fake client records the request and returns
canned bodies.
"""

from types import SimpleNamespace

import pytest

from chess_scanner.errors import AnalysisError
from chess_scanner.inference import vision_api
from chess_scanner.inference.vision_api import (
    ANALYSIS_PROMPT,
    FenResponse,
    GeminiVisionAnalyzer,
    parse_response_text,
)

FEN = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def make_client(text=None, error=None):
    return SimpleNamespace(models=FakeModels(text=text, error=error))


# ============================================================================
# Availability
# ============================================================================

def test_unavailable_without_key():
    analyzer = GeminiVisionAnalyzer(api_key="")
    assert analyzer.is_available() is False
    with pytest.raises(AnalysisError, match="unavailable"):
        analyzer.analyze_position(b"jpeg")


def test_client_is_created_lazily(monkeypatch):
    created = []

    def fake_client(api_key):
        created.append(api_key)
        return make_client(text='{"fen": "8/8/8/8/8/8/8/8 w - - 0 1"}')

    monkeypatch.setattr(vision_api.genai, "Client", fake_client)

    analyzer = GeminiVisionAnalyzer(api_key="secret")
    assert analyzer.is_available() is True
    assert created == []

    analyzer.analyze_position(b"jpeg")
    analyzer.analyze_position(b"jpeg")
    assert created == ["secret"]


# ============================================================================
# Request shape
# ============================================================================

def test_request_contains_image_prompt_and_schema():
    client = make_client(text='{"fen": "%s"}' % FEN)
    analyzer = GeminiVisionAnalyzer(model="test-model", client=client)

    assert analyzer.analyze_position(b"\xff\xd8jpeg") == FEN

    (call,) = client.models.calls
    assert call["model"] == "test-model"
    image_part, prompt = call["contents"]
    assert image_part.inline_data.mime_type == "image/jpeg"
    assert image_part.inline_data.data == b"\xff\xd8jpeg"
    assert prompt == ANALYSIS_PROMPT
    assert call["config"].response_mime_type == "application/json"


def test_prompt_describes_normalisation_and_default_color():
    assert "rank 8 at top" in ANALYSIS_PROMPT
    assert "'w'" in ANALYSIS_PROMPT


# ============================================================================
# Failures
# ============================================================================

def test_transport_error_becomes_analysis_error():
    analyzer = GeminiVisionAnalyzer(client=make_client(error=RuntimeError("boom")))
    with pytest.raises(AnalysisError, match="request failed"):
        analyzer.analyze_position(b"jpeg")


@pytest.mark.parametrize("text", [None, "", "not json", '{"other": 1}', '{"fen": "   "}', "[]"])
def test_bad_bodies_raise(text):
    analyzer = GeminiVisionAnalyzer(client=make_client(text=text))
    with pytest.raises(AnalysisError):
        analyzer.analyze_position(b"jpeg")


def test_parse_response_strips_whitespace():
    assert parse_response_text('{"fen": "  8/8/8/8/8/8/8/8 w - - 0 1 "}') == (
        "8/8/8/8/8/8/8/8 w - - 0 1"
    )


def test_response_schema_requires_fen():
    schema = FenResponse.model_json_schema()
    assert schema["required"] == ["fen"]
    assert schema["properties"]["fen"]["type"] == "string"
