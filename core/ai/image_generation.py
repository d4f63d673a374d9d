"""Chart image generation via the Gemini REST API.

One request per call and no retries: the dashboard offers a manual
"Generate again" button instead.

Usage:
    image = ChartImageGenerator().generate(config)
    image.data_uri  # "data:image/png;base64,..."
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from django.conf import settings

from core.ai.prompts import build_generation_request
from core.chart_settings import ChartConfig

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "Image generation returned no data."


class ChartImageGenerationError(Exception):
    """Raised when the image model fails or returns no image payload."""

    def __init__(self, message: str = NO_DATA_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True, slots=True)
class GeneratedImage:
    """Image payload returned by the model."""

    mime_type: str
    base64_data: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


class ChartImageGenerator:
    """Thin client for Gemini `generateContent` with image output.

    Settings:
        GEMINI_API_KEY: API key (required).
        GEMINI_API_URL: Endpoint template with a `{model}` placeholder.
        GEMINI_IMAGE_MODEL: Image-capable model id.
        GEMINI_TIMEOUT_SECONDS: Request timeout.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else getattr(settings, "GEMINI_API_KEY", "")
        self.model = model or getattr(settings, "GEMINI_IMAGE_MODEL", "")
        self.api_url = api_url or getattr(settings, "GEMINI_API_URL", "")
        self.timeout = timeout if timeout is not None else getattr(settings, "GEMINI_TIMEOUT_SECONDS", 120.0)
        self._client = client

    def generate(self, config: ChartConfig) -> GeneratedImage:
        """Generate a chart image for the given configuration.

        Args:
            config: Chart configuration; `target_data` is embedded verbatim.

        Returns:
            GeneratedImage with the first inline image part of the response.

        Raises:
            ChartImageGenerationError: API key missing, HTTP failure, or a
                response without image data.
        """

        if not self.api_key:
            logger.error("Chart image generation requested but GEMINI_API_KEY is not configured")
            raise ChartImageGenerationError("Image generation is not configured (missing API key).")

        url = self.api_url.format(model=self.model)
        payload = build_generation_request(config)
        try:
            response = self._post(url, payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Chart image generation request failed: %s", exc)
            raise ChartImageGenerationError() from exc

        image = extract_inline_image(body)
        if image is None:
            logger.error("Chart image generation response contained no image part")
            raise ChartImageGenerationError()
        logger.info("Generated chart image (%s, %d base64 chars)", image.mime_type, len(image.base64_data))
        return image

    def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        if self._client is not None:
            return self._client.post(url, headers=headers, json=payload, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, headers=headers, json=payload)


def extract_inline_image(body: Any) -> GeneratedImage | None:
    """Return the first inline image part of a generateContent response."""

    if not isinstance(body, dict):
        return None
    for candidate in body.get("candidates") or []:
        content = (candidate or {}).get("content") or {}
        for part in content.get("parts") or []:
            inline = (part or {}).get("inlineData") or (part or {}).get("inline_data")
            if not inline:
                continue
            data = inline.get("data")
            mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            if data and str(mime_type).startswith("image/"):
                return GeneratedImage(mime_type=mime_type, base64_data=data)
    return None
