"""Persistence for the chart configuration document.

The chart is configured by a single deployment-wide document stored at
`settings.CHART_SETTINGS_PATH`. Reads are soft: a missing document or an
unavailable store yields `None` so public pages can fall back to default data.
Writes merge into the stored document and invalidate cached pages that display
the chart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from django.conf import settings
from django.db import DatabaseError, transaction

from core.models import SettingsDocument
from core.page_cache import invalidate_paths

logger = logging.getLogger(__name__)

DEFAULT_TARGET_DATA = "\n".join(
    [
        "Hipertensi=150",
        "Diabetes Melitus=95",
        "ISPA=320",
        "Pemeriksaan Ibu Hamil (K1-K4)=210",
        "Imunisasi Dasar Lengkap=180",
        "Penimbangan Balita di Posyandu=400",
    ]
)

_DOCUMENT_FIELDS = {
    "target_data": "targetData",
    "program_service": "programService",
    "person_in_charge": "personInCharge",
    "period": "period",
}


class DocumentStoreUnavailable(Exception):
    """Raised by a DocumentStore when its backend cannot be reached."""


class ChartSettingsError(Exception):
    """Raised when the chart configuration cannot be written."""


class DocumentStore(Protocol):
    """Minimal key-value document store keyed by path."""

    def get(self, path: str) -> dict[str, Any] | None:
        """Return the document at `path`, or None when it does not exist."""

    def set(self, path: str, data: dict[str, Any], *, merge: bool) -> None:
        """Write `data` at `path`, merging into the existing document when `merge`."""


class DatabaseDocumentStore:
    """DocumentStore backed by the `SettingsDocument` table."""

    def get(self, path: str) -> dict[str, Any] | None:
        try:
            document = SettingsDocument.objects.filter(path=path).first()
        except DatabaseError as exc:
            raise DocumentStoreUnavailable(str(exc)) from exc
        if document is None:
            return None
        return dict(document.data or {})

    def set(self, path: str, data: dict[str, Any], *, merge: bool) -> None:
        try:
            with transaction.atomic():
                document, _ = SettingsDocument.objects.get_or_create(path=path)
                current = dict(document.data or {}) if merge else {}
                current.update(data)
                document.data = current
                document.save(update_fields=["data", "updated_at"])
        except DatabaseError as exc:
            raise DocumentStoreUnavailable(str(exc)) from exc


@dataclass(frozen=True, slots=True)
class ChartConfig:
    """Raw chart input plus descriptive metadata.

    Attributes:
        target_data: Unparsed `NAME=VALUE` text, persisted verbatim.
        program_service: Program/service name used for the chart title.
        person_in_charge: Responsible person.
        period: Reporting period label.
    """

    target_data: str
    program_service: str | None = None
    person_in_charge: str | None = None
    period: str | None = None

    def as_document(self) -> dict[str, str]:
        """Return the persisted document shape, omitting unset optional fields."""

        document: dict[str, str] = {}
        for attr, key in _DOCUMENT_FIELDS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            document[key] = value
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> ChartConfig | None:
        """Build a ChartConfig from a stored document.

        Returns:
            ChartConfig, or None when the document has no string `targetData`.
        """

        target_data = document.get("targetData")
        if not isinstance(target_data, str):
            return None
        return cls(
            target_data=target_data,
            program_service=_optional_text(document.get("programService")),
            person_in_charge=_optional_text(document.get("personInCharge")),
            period=_optional_text(document.get("period")),
        )


def default_store() -> DocumentStore:
    """Return the DocumentStore used when callers do not pass one."""

    return DatabaseDocumentStore()


def chart_settings_path() -> str:
    """Return the well-known document path for the chart configuration."""

    return getattr(settings, "CHART_SETTINGS_PATH", "settings/charts")


def load_chart_config(store: DocumentStore | None = None) -> ChartConfig | None:
    """Load the stored chart configuration.

    Args:
        store: Optional DocumentStore; defaults to the database store.

    Returns:
        ChartConfig, or None when the document is missing, malformed, or the
        store is unavailable.
    """

    store = store or default_store()
    path = chart_settings_path()
    try:
        document = store.get(path)
    except DocumentStoreUnavailable as exc:
        logger.warning("Chart settings store unavailable, using fallback data: %s", exc)
        return None

    if document is None:
        logger.info("Chart settings document %s does not exist", path)
        return None
    config = ChartConfig.from_document(document)
    if config is None:
        logger.warning("Chart settings document %s has no targetData", path)
    return config


def load_chart_config_or_default(store: DocumentStore | None = None) -> tuple[ChartConfig, bool]:
    """Load the chart configuration, substituting the default dataset.

    Returns:
        A tuple of (config, is_default) where `is_default` is True when the
        stored document could not be used.
    """

    config = load_chart_config(store)
    if config is None:
        return ChartConfig(target_data=DEFAULT_TARGET_DATA), True
    return config, False


def save_chart_config(
    config: ChartConfig,
    store: DocumentStore | None = None,
    *,
    fields: tuple[str, ...] | None = None,
) -> None:
    """Merge-write the chart configuration and invalidate dependent pages.

    Args:
        config: Configuration to write. Optional fields that are None are not
            written, so previously stored values survive.
        store: Optional DocumentStore; defaults to the database store.
        fields: Optional subset of ChartConfig attribute names to write. Use
            this for partial updates that must not touch `target_data`.

    Raises:
        ChartSettingsError: When the store rejects the write.
    """

    document = config.as_document()
    if fields is not None:
        unknown = set(fields) - set(_DOCUMENT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown chart config fields: {sorted(unknown)}")
        allowed = {_DOCUMENT_FIELDS[name] for name in fields}
        document = {key: value for key, value in document.items() if key in allowed}

    store = store or default_store()
    try:
        store.set(chart_settings_path(), document, merge=True)
    except DocumentStoreUnavailable as exc:
        logger.error("Failed to update chart settings: %s", exc)
        raise ChartSettingsError(f"Failed to update chart data: {exc}") from exc

    invalidate_paths(tuple(getattr(settings, "CHART_REVALIDATE_PATHS", ("/",))))


def _optional_text(value: Any) -> str | None:
    """Return a stored optional string field, or None when unset/blank."""

    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None
