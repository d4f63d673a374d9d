"""Unit tests for the Gemini chart image client."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from core.ai.image_generation import (
    NO_DATA_MESSAGE,
    ChartImageGenerationError,
    ChartImageGenerator,
    extract_inline_image,
)
from core.chart_settings import ChartConfig

pytestmark = pytest.mark.unit

CONFIG = ChartConfig(target_data="Hipertensi=150", program_service="PTM", period="2025")


def _generator(handler, *, api_key: str = "test-key") -> ChartImageGenerator:  # type: ignore[no-untyped-def]
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ChartImageGenerator(
        api_key=api_key,
        model="image-model",
        api_url="https://example.test/models/{model}:generateContent",
        client=client,
    )


def test_generate_returns_inline_image_as_data_uri() -> None:
    """The first inline image part becomes the data URI."""

    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "candidates": [
                    {
                        "content": {
                            "parts": [
                                {"text": "Here is your chart."},
                                {"inlineData": {"mimeType": "image/png", "data": "iVBORw0KGgo="}},
                            ]
                        }
                    }
                ]
            },
        )

    image = _generator(handler).generate(CONFIG)

    assert image.data_uri == "data:image/png;base64,iVBORw0KGgo="
    assert len(requests) == 1
    assert requests[0].url.path == "/models/image-model:generateContent"
    assert requests[0].headers["x-goog-api-key"] == "test-key"
    body = json.loads(requests[0].content)
    assert "Hipertensi=150" in body["contents"][0]["parts"][0]["text"]


def test_generate_raises_when_response_has_no_image() -> None:
    """A text-only response is a generation failure with a clear message."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "sorry"}]}}]})

    with pytest.raises(ChartImageGenerationError) as excinfo:
        _generator(handler).generate(CONFIG)
    assert excinfo.value.message == NO_DATA_MESSAGE


def test_generate_does_not_retry_http_errors() -> None:
    """Server errors fail immediately after exactly one request."""

    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    with pytest.raises(ChartImageGenerationError):
        _generator(handler).generate(CONFIG)
    assert len(calls) == 1


def test_generate_requires_api_key() -> None:
    """Without an API key no request is made."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ChartImageGenerationError, match="not configured"):
        _generator(handler, api_key="").generate(CONFIG)


def test_extract_inline_image_ignores_non_image_parts() -> None:
    """Inline parts that are not images are skipped."""

    body = {"candidates": [{"content": {"parts": [{"inlineData": {"mimeType": "text/plain", "data": "eA=="}}]}}]}

    assert extract_inline_image(body) is None
    assert extract_inline_image(None) is None


def test_generate_logs_request_failure_with_lazy_arguments(caplog: pytest.LogCaptureFixture) -> None:
    """HTTP failures are logged once at ERROR with the exception as an argument."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "internal"}})

    with caplog.at_level(logging.ERROR, logger="core.ai.image_generation"):
        with pytest.raises(ChartImageGenerationError):
            _generator(handler).generate(CONFIG)

    failures = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(failures) == 1
    assert failures[0].msg == "Chart image generation request failed: %s"
    assert isinstance(failures[0].args[0], httpx.HTTPStatusError)
