"""Database models for the core app.

The portal keeps two kinds of persisted state for the chart pipeline:

- path-addressed settings documents (one JSON document per well-known path,
  shared by the whole deployment, last write wins),
- gallery records pointing at images hosted elsewhere.
"""

from __future__ import annotations

from django.db import models


class SettingsDocument(models.Model):
    """A JSON document stored under a well-known path.

    Attributes:
        path: Document path, e.g. `settings/charts`.
        data: Document body. Keys are stored exactly as written by callers.
        updated_at: Timestamp of the most recent write.
    """

    path = models.CharField(max_length=200, unique=True)
    data = models.JSONField(default=dict, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["path"]

    def __str__(self) -> str:
        """Return the document path for admin/debug usage."""

        return self.path


class GalleryCategory(models.TextChoices):
    """Gallery categories used by the public gallery filter."""

    HEALTH_EDUCATION = "Penyuluhan Kesehatan", "Health education"
    HEALTH_CHECK = "Pemeriksaan Kesehatan", "Health check"
    IMMUNIZATION = "Vaksinasi / Imunisasi", "Vaccination / immunization"
    POSYANDU = "Kegiatan Posyandu", "Posyandu activity"
    EXERCISE = "Senam / Olahraga Bersama", "Group exercise"
    MEETING = "Rapat / Pertemuan Internal", "Internal meeting"
    FACILITIES = "Stok Obat / Fasilitas", "Medicine stock / facilities"
    CHART = "Grafik", "Chart"
    OTHER = "Lain-lain", "Other"


class GalleryImage(models.Model):
    """A gallery entry for an externally hosted image.

    Deleting a record does not delete the hosted file.

    Attributes:
        name: Display/file name.
        url: Public URL returned by the image host.
        category: One of GalleryCategory; unknown values fall back to "Other".
        created_at: Creation timestamp used for newest-first ordering.
    """

    name = models.CharField(max_length=255)
    url = models.URLField(max_length=1000)
    category = models.CharField(
        max_length=80,
        choices=GalleryCategory.choices,
        default=GalleryCategory.OTHER,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        """Return a concise display string."""

        return f"GalleryImage({self.name}, {self.category})"
