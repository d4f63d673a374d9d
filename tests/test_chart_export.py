"""Unit tests for the chart image export pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from core.ai.image_generation import ChartImageGenerationError, GeneratedImage
from core.chart_settings import ChartConfig
from core.export import (
    TRANSIENT_WARNING,
    UNRECORDED_WARNING,
    ExportStatus,
    PersistedChartImage,
    TransientChartImage,
    chart_image_filename,
    export_chart_image,
)
from core.gallery import GalleryRecordError
from core.image_hosting import ImageUploadError
from core.models import GalleryCategory

pytestmark = pytest.mark.unit

CONFIG = ChartConfig(target_data="Hipertensi=150\nISPA=320", program_service="PTM", period="2025")
IMAGE = GeneratedImage(mime_type="image/png", base64_data="iVBORw0KGgo=")


@dataclass
class StubGenerator:
    """Records calls and returns a fixed image (or raises)."""

    error: Exception | None = None
    calls: list[ChartConfig] = field(default_factory=list)

    def generate(self, config: ChartConfig) -> GeneratedImage:
        self.calls.append(config)
        if self.error is not None:
            raise self.error
        return IMAGE


@dataclass
class StubUploader:
    """Returns a fixed URL (or raises)."""

    error: Exception | None = None
    uploads: list[str] = field(default_factory=list)

    def upload_data_uri(self, data_uri: str) -> str:
        self.uploads.append(data_uri)
        if self.error is not None:
            raise self.error
        return "https://iili.io/chart.png"


@dataclass
class StubRecord:
    pk: int


class StubRecorder:
    """Captures gallery record writes."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.records: list[dict[str, str]] = []

    def __call__(self, *, name: str, url: str, category: str) -> StubRecord:
        self.records.append({"name": name, "url": url, "category": category})
        if self.error is not None:
            raise self.error
        return StubRecord(pk=7)


def test_export_persists_uploaded_image_in_gallery() -> None:
    """Generate, upload, and record in sequence."""

    generator, uploader, recorder = StubGenerator(), StubUploader(), StubRecorder()

    result = export_chart_image(CONFIG, generator=generator, uploader=uploader, recorder=recorder)

    assert isinstance(result, PersistedChartImage)
    assert result.status is ExportStatus.succeeded_persisted
    assert result.url == "https://iili.io/chart.png"
    assert result.image_data == IMAGE.data_uri
    assert result.gallery_image_id == 7
    assert result.source == CONFIG
    assert result.warning is None
    assert generator.calls == [CONFIG]
    assert uploader.uploads == [IMAGE.data_uri]
    assert recorder.records[0]["url"] == "https://iili.io/chart.png"
    assert recorder.records[0]["category"] == GalleryCategory.CHART
    assert recorder.records[0]["name"].startswith("annual-target-report-ptm-period-2025-")


def test_export_returns_transient_image_when_upload_fails() -> None:
    """An upload failure keeps the generated image and raises nothing."""

    recorder = StubRecorder()

    result = export_chart_image(
        CONFIG,
        generator=StubGenerator(),
        uploader=StubUploader(error=ImageUploadError("host down")),
        recorder=recorder,
    )

    assert isinstance(result, TransientChartImage)
    assert result.kind == "transient"
    assert result.status is ExportStatus.succeeded_transient
    assert result.image_data == IMAGE.data_uri
    assert result.url is None
    assert result.warning == TRANSIENT_WARNING
    assert recorder.records == []


def test_export_keeps_url_when_gallery_record_fails() -> None:
    """A gallery failure after upload still returns the durable URL."""

    result = export_chart_image(
        CONFIG,
        generator=StubGenerator(),
        uploader=StubUploader(),
        recorder=StubRecorder(error=GalleryRecordError("db down")),
    )

    assert isinstance(result, PersistedChartImage)
    assert result.gallery_image_id is None
    assert result.url == "https://iili.io/chart.png"
    assert result.warning == UNRECORDED_WARNING


def test_export_propagates_generation_failure_without_retry() -> None:
    """Generation failure is the failed state and nothing else runs."""

    generator = StubGenerator(error=ChartImageGenerationError())
    uploader = StubUploader()

    with pytest.raises(ChartImageGenerationError, match="returned no data"):
        export_chart_image(CONFIG, generator=generator, uploader=uploader, recorder=StubRecorder())

    assert len(generator.calls) == 1
    assert uploader.uploads == []


def test_chart_image_filename_uses_generic_title_without_metadata() -> None:
    """Filenames fall back to the generic title slug."""

    assert chart_image_filename(ChartConfig(target_data="A=1")).startswith("annual-target-report-")
