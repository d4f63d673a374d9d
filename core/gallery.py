"""Gallery record services.

Writes raise `GalleryRecordError` so dashboard views can report them. Reads
used by public pages never raise and degrade to an empty list.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError

from core.models import GalleryCategory, GalleryImage

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


class GalleryRecordError(Exception):
    """Raised when a gallery record cannot be written or deleted."""


def normalize_category(category: str | None) -> str:
    """Return a known gallery category, falling back to "Other"."""

    cleaned = (category or "").strip()
    if cleaned in GalleryCategory.values:
        return cleaned
    return GalleryCategory.OTHER


def add_gallery_image_record(*, name: str, url: str, category: str | None) -> GalleryImage:
    """Persist a gallery record for an already-hosted image.

    Args:
        name: Display/file name.
        url: Public URL returned by the image host.
        category: Gallery category; unknown values become "Other".

    Returns:
        The created GalleryImage.

    Raises:
        GalleryRecordError: When the database rejects the write.
    """

    try:
        return GalleryImage.objects.create(
            name=name.strip() or "image",
            url=url,
            category=normalize_category(category),
        )
    except DatabaseError as exc:
        logger.error("Failed to save gallery record for %s: %s", url, exc)
        raise GalleryRecordError(f"Failed to save the image to the gallery: {exc}") from exc


def list_gallery_images(category: str | None = None) -> list[GalleryImage]:
    """Return gallery images newest first, optionally filtered by category.

    Returns:
        A list of GalleryImage. Database failures are logged and produce an
        empty list so public pages still render.
    """

    try:
        queryset = GalleryImage.objects.all()
        if category and category != ALL_CATEGORIES:
            queryset = queryset.filter(category=category)
        return list(queryset)
    except DatabaseError:
        logger.warning("Failed to load gallery images", exc_info=True)
        return []


def gallery_categories(images: list[GalleryImage]) -> list[str]:
    """Return distinct categories present in `images`, in first-seen order."""

    seen: dict[str, None] = {}
    for image in images:
        seen.setdefault(image.category or GalleryCategory.OTHER, None)
    return list(seen)


def delete_gallery_image(pk: int) -> bool:
    """Delete a gallery record (the hosted file is left in place).

    Returns:
        True when a record was deleted, False when it did not exist.

    Raises:
        GalleryRecordError: When the database rejects the delete.
    """

    try:
        deleted, _ = GalleryImage.objects.filter(pk=pk).delete()
    except DatabaseError as exc:
        logger.error("Failed to delete gallery record %s: %s", pk, exc)
        raise GalleryRecordError(f"Failed to delete the gallery record: {exc}") from exc
    return deleted > 0
