"""Chart image export: generate, upload, then record in the gallery.

The three steps run sequentially. Only a generation failure is a failed export;
later failures degrade the result instead of discarding the generated image:

- upload fails: `TransientChartImage` (image data only, not saved),
- gallery record fails: `PersistedChartImage` without a gallery id.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Protocol

from django.utils import timezone
from django.utils.text import slugify

from core.ai.image_generation import ChartImageGenerator, GeneratedImage
from core.ai.prompts import chart_image_title
from core.chart_settings import ChartConfig
from core.gallery import GalleryRecordError, add_gallery_image_record
from core.image_hosting import FreeImageHostClient, ImageUploadError
from core.models import GalleryCategory, GalleryImage

logger = logging.getLogger(__name__)

TRANSIENT_WARNING = "The chart image was generated but could not be saved permanently."
UNRECORDED_WARNING = "The chart image was uploaded but could not be added to the gallery."


class ExportStatus(str, enum.Enum):
    """States of a chart image export."""

    idle = "idle"
    generating = "generating"
    succeeded_persisted = "succeeded_persisted"
    succeeded_transient = "succeeded_transient"
    failed = "failed"


class ImageGenerator(Protocol):
    """Produces a chart image from a configuration."""

    def generate(self, config: ChartConfig) -> GeneratedImage:
        """Return the generated image or raise ChartImageGenerationError."""


class ImageUploader(Protocol):
    """Stores an image data URI and returns a durable URL."""

    def upload_data_uri(self, data_uri: str) -> str:
        """Return the public URL or raise ImageUploadError."""


GalleryRecorder = Callable[..., GalleryImage]


@dataclass(frozen=True, slots=True)
class PersistedChartImage:
    """Export result whose image has a durable URL.

    Attributes:
        image_data: Generated image as a data URI.
        url: Public URL returned by the image host.
        gallery_image_id: Primary key of the gallery record, or None when the
            record could not be written.
        source: Snapshot of the configuration the image was generated from.
        warning: User-facing warning for a partially completed export.
    """

    image_data: str
    url: str
    gallery_image_id: int | None
    source: ChartConfig
    warning: str | None = None
    kind: Literal["persisted"] = "persisted"

    @property
    def status(self) -> ExportStatus:
        return ExportStatus.succeeded_persisted

    @property
    def display_url(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class TransientChartImage:
    """Export result whose image was generated but not saved."""

    image_data: str
    source: ChartConfig
    warning: str = TRANSIENT_WARNING
    kind: Literal["transient"] = "transient"

    @property
    def status(self) -> ExportStatus:
        return ExportStatus.succeeded_transient

    @property
    def url(self) -> None:
        return None

    @property
    def display_url(self) -> str:
        return self.image_data


ChartImageExport = PersistedChartImage | TransientChartImage


def chart_image_filename(config: ChartConfig) -> str:
    """Return the gallery file name for an exported chart."""

    slug = slugify(chart_image_title(config)) or "chart"
    stamp = timezone.now().strftime("%Y%m%d-%H%M%S")
    return f"{slug}-{stamp}.png"


def export_chart_image(
    config: ChartConfig,
    *,
    generator: ImageGenerator | None = None,
    uploader: ImageUploader | None = None,
    recorder: GalleryRecorder | None = None,
) -> ChartImageExport:
    """Generate a chart image and store it in the gallery.

    Args:
        config: Chart configuration to render.
        generator: Image generator; defaults to ChartImageGenerator.
        uploader: Upload adapter; defaults to FreeImageHostClient.
        recorder: Gallery record writer; defaults to add_gallery_image_record.

    Returns:
        PersistedChartImage when the upload succeeded, otherwise
        TransientChartImage carrying the generated data.

    Raises:
        ChartImageGenerationError: When generation fails. No retry is made.
    """

    generator = generator or ChartImageGenerator()
    uploader = uploader or FreeImageHostClient()
    recorder = recorder or add_gallery_image_record

    logger.info("Chart image export: %s", ExportStatus.generating.value)
    image = generator.generate(config)
    data_uri = image.data_uri

    try:
        url = uploader.upload_data_uri(data_uri)
    except ImageUploadError as exc:
        logger.warning("Chart image export degraded, upload failed: %s", exc)
        return TransientChartImage(image_data=data_uri, source=config)

    try:
        record = recorder(
            name=chart_image_filename(config),
            url=url,
            category=GalleryCategory.CHART,
        )
    except GalleryRecordError as exc:
        logger.warning("Chart image uploaded to %s but gallery record failed: %s", url, exc)
        return PersistedChartImage(
            image_data=data_uri,
            url=url,
            gallery_image_id=None,
            source=config,
            warning=UNRECORDED_WARNING,
        )

    logger.info("Chart image export: %s (%s)", ExportStatus.succeeded_persisted.value, url)
    return PersistedChartImage(
        image_data=data_uri,
        url=url,
        gallery_image_id=record.pk,
        source=config,
    )
