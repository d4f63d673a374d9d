"""Admin registrations for the core app."""

from __future__ import annotations

from django.contrib import admin

from core.models import GalleryImage, SettingsDocument


@admin.register(SettingsDocument)
class SettingsDocumentAdmin(admin.ModelAdmin):
    """Admin configuration for SettingsDocument."""

    list_display = ("path", "updated_at")
    search_fields = ("path",)
    readonly_fields = ("updated_at",)


@admin.register(GalleryImage)
class GalleryImageAdmin(admin.ModelAdmin):
    """Admin configuration for GalleryImage."""

    list_display = ("name", "category", "created_at")
    list_filter = ("category",)
    search_fields = ("name", "url")
