"""Image hosting adapter (freeimage.host).

Gallery images are not stored by the portal itself; they are pushed to an
external host and only the returned public URL is recorded.

Usage:
    url = FreeImageHostClient().upload_data_uri("data:image/png;base64,iVBORw0...")
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Any

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


class ImageUploadError(Exception):
    """Raised when an image cannot be uploaded to the image host."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def split_data_uri(data_uri: str) -> tuple[str, str]:
    """Split an image data URI into (mime_type, base64_data).

    Raises:
        ImageUploadError: If the value is not a base64 image data URI.
    """

    match = _DATA_URI_RE.match((data_uri or "").strip())
    if not match:
        raise ImageUploadError("Invalid data URI: expected base64 image content.")
    return match.group("mime"), match.group("data")


def bytes_to_data_uri(content: bytes, content_type: str) -> str:
    """Encode raw image bytes as a data URI."""

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class FreeImageHostClient:
    """Upload client for the freeimage.host (Chevereto) API.

    Settings:
        FREEIMAGE_API_KEY: API key (required).
        FREEIMAGE_API_URL: Upload endpoint.
        FREEIMAGE_TIMEOUT_SECONDS: Request timeout.
    """

    # Largest decoded upload the host accepts.
    MAX_IMAGE_SIZE = 64 * 1024 * 1024

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else getattr(settings, "FREEIMAGE_API_KEY", "")
        self.api_url = api_url or getattr(settings, "FREEIMAGE_API_URL", "")
        self.timeout = timeout if timeout is not None else getattr(settings, "FREEIMAGE_TIMEOUT_SECONDS", 60.0)
        self._client = client

    def upload_data_uri(self, data_uri: str) -> str:
        """Upload an image given as a data URI.

        Args:
            data_uri: `data:image/<type>;base64,<payload>`.

        Returns:
            Public URL of the hosted image.

        Raises:
            ImageUploadError: Malformed input, missing configuration, HTTP
                failure, or an unexpected API response.
        """

        _, base64_data = split_data_uri(data_uri)
        try:
            decoded_size = len(base64.b64decode(base64_data, validate=True))
        except (binascii.Error, ValueError) as exc:
            raise ImageUploadError("Invalid data URI: base64 payload could not be decoded.") from exc
        if decoded_size > self.MAX_IMAGE_SIZE:
            raise ImageUploadError(
                f"Image too large ({decoded_size // (1024 * 1024)} MB); "
                f"maximum is {self.MAX_IMAGE_SIZE // (1024 * 1024)} MB."
            )

        if not self.api_key:
            logger.error("Image upload requested but FREEIMAGE_API_KEY is not configured")
            raise ImageUploadError("Image hosting is not configured (missing API key).")

        form = {
            "key": self.api_key,
            "action": "upload",
            "source": base64_data,
            "format": "json",
        }
        try:
            response = self._post(form)
        except httpx.HTTPError as exc:
            logger.error("Error uploading to freeimage.host: %s", exc)
            raise ImageUploadError(f"Failed to upload image to hosting: {exc}") from exc

        if response.status_code >= 400:
            logger.error("freeimage.host rejected upload: %s %s", response.status_code, response.text[:200])
            raise ImageUploadError(f"Failed to upload image to hosting: HTTP {response.status_code}")

        try:
            result: Any = response.json()
        except ValueError as exc:
            raise ImageUploadError("Invalid response from image hosting (not JSON).") from exc

        url = _hosted_url(result)
        if url is None:
            logger.error("Unexpected freeimage.host response: %s", str(result)[:200])
            raise ImageUploadError("Invalid response from image hosting.")

        logger.info("Uploaded image to freeimage.host: %s", url)
        return url

    def _post(self, form: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.api_url, data=form, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.api_url, data=form)


def _hosted_url(result: Any) -> str | None:
    """Return `image.url` from a successful upload response."""

    if not isinstance(result, dict) or result.get("status_code") != 200:
        return None
    image = result.get("image") or {}
    url = image.get("url") if isinstance(image, dict) else None
    return url or None
