"""Create the settings document store and the gallery record table."""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    """Initial schema for the core app."""

    initial = True

    dependencies: list[tuple[str, str]] = []

    operations = [
        migrations.CreateModel(
            name="SettingsDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("path", models.CharField(max_length=200, unique=True)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["path"],
            },
        ),
        migrations.CreateModel(
            name="GalleryImage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("url", models.URLField(max_length=1000)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Penyuluhan Kesehatan", "Health education"),
                            ("Pemeriksaan Kesehatan", "Health check"),
                            ("Vaksinasi / Imunisasi", "Vaccination / immunization"),
                            ("Kegiatan Posyandu", "Posyandu activity"),
                            ("Senam / Olahraga Bersama", "Group exercise"),
                            ("Rapat / Pertemuan Internal", "Internal meeting"),
                            ("Stok Obat / Fasilitas", "Medicine stock / facilities"),
                            ("Grafik", "Chart"),
                            ("Lain-lain", "Other"),
                        ],
                        default="Lain-lain",
                        max_length=80,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
