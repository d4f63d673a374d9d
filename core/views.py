"""Views for the public portal pages and the admin chart/gallery dashboard."""

from __future__ import annotations

import logging
from typing import Any

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from core.ai.image_generation import ChartImageGenerationError
from core.ai.prompts import chart_image_title
from core.chart_settings import (
    ChartSettingsError,
    load_chart_config_or_default,
    save_chart_config,
)
from core.charting.render import EMPTY_STATE_MESSAGE, render_target_chart
from core.export import ChartImageExport, ExportStatus, export_chart_image
from core.forms import ChartSettingsForm, GalleryUploadForm
from core.gallery import (
    ALL_CATEGORIES,
    GalleryRecordError,
    add_gallery_image_record,
    delete_gallery_image,
    gallery_categories,
    list_gallery_images,
)
from core.image_hosting import FreeImageHostClient, ImageUploadError, bytes_to_data_uri
from core.page_cache import get_or_build
from core.parsers.chart_data import parse_chart_data
from core.redirects import redirect_back

logger = logging.getLogger(__name__)

_EMPTY_CHART_PAYLOAD: dict[str, Any] = {"title": None, "emptyState": EMPTY_STATE_MESSAGE, "chart": None}


def build_public_chart_payload() -> dict[str, Any]:
    """Return the JSON chart payload shown on public pages.

    The stored configuration is used when available; otherwise the default
    dataset is rendered.
    """

    config, _ = load_chart_config_or_default()
    records = parse_chart_data(config.target_data).records
    return render_target_chart(records, title=chart_image_title(config)).as_json()


def _public_chart_payload(path: str) -> dict[str, Any]:
    """Return the cached public chart payload, never raising."""

    try:
        return get_or_build(path, build_public_chart_payload)
    except Exception:  # noqa: BLE001
        logger.exception("Failed to build the public chart payload")
        return dict(_EMPTY_CHART_PAYLOAD)


def home(request: HttpRequest) -> HttpResponse:
    """Render the public home page with the target chart."""

    return render(request, "core/home.html", {"chart": _public_chart_payload("/")})


def chart_api(request: HttpRequest) -> JsonResponse:
    """Return the public chart payload as JSON."""

    return JsonResponse(_public_chart_payload("/api/chart/"))


def gallery(request: HttpRequest) -> HttpResponse:
    """Render the public gallery with an optional category filter."""

    active_category = (request.GET.get("category") or ALL_CATEGORIES).strip() or ALL_CATEGORIES
    all_images = list_gallery_images()
    if active_category == ALL_CATEGORIES:
        images = all_images
    else:
        images = [image for image in all_images if image.category == active_category]
    return render(
        request,
        "core/gallery.html",
        {
            "images": images,
            "categories": gallery_categories(all_images),
            "active_category": active_category,
            "all_categories": ALL_CATEGORIES,
        },
    )


def _chart_dashboard_context(
    form: ChartSettingsForm,
    *,
    export_result: ChartImageExport | None = None,
    export_status: ExportStatus = ExportStatus.idle,
) -> dict[str, Any]:
    """Return template context for the chart dashboard.

    The preview follows the submitted text when the form is bound, so skipped
    lines are reported next to what the administrator just typed.
    """

    source = form.data if form.is_bound else form.initial
    parsed = parse_chart_data(source.get("target_data") or "")
    preview = render_target_chart(parsed.records)
    return {
        "form": form,
        "preview": preview.as_json(),
        "skipped_lines": parsed.skipped,
        "export_result": export_result,
        "export_status": export_status.value,
    }


@login_required
def dashboard_charts(request: HttpRequest) -> HttpResponse:
    """Edit and save the chart configuration."""

    if request.method == "POST":
        form = ChartSettingsForm(request.POST)
        if form.is_valid():
            try:
                save_chart_config(form.to_config())
            except ChartSettingsError as exc:
                messages.error(request, str(exc))
            else:
                skipped = len(parse_chart_data(form.cleaned_data["target_data"]).skipped)
                messages.success(request, "Chart data saved.")
                if skipped:
                    messages.warning(request, f"{skipped} line(s) were skipped because they are not NAME=VALUE.")
                return redirect("core:dashboard_charts")
        return render(request, "core/dashboard_charts.html", _chart_dashboard_context(form))

    config, is_default = load_chart_config_or_default()
    if is_default:
        messages.info(request, "No chart data saved yet. Showing the default dataset.")
    form = ChartSettingsForm(initial=ChartSettingsForm.initial_from_config(config))
    return render(request, "core/dashboard_charts.html", _chart_dashboard_context(form))


@login_required
@require_POST
def export_chart(request: HttpRequest) -> HttpResponse:
    """Generate a chart image from the stored configuration and show the result."""

    config, _ = load_chart_config_or_default()
    form = ChartSettingsForm(initial=ChartSettingsForm.initial_from_config(config))

    try:
        result = export_chart_image(config)
    except ChartImageGenerationError as exc:
        messages.error(request, f"Failed to generate the chart image: {exc.message}")
        return render(
            request,
            "core/dashboard_charts.html",
            _chart_dashboard_context(form, export_status=ExportStatus.failed),
        )

    if result.warning:
        messages.warning(request, result.warning)
    else:
        messages.success(request, "Chart image generated and saved to the gallery.")
    return render(
        request,
        "core/dashboard_charts.html",
        _chart_dashboard_context(form, export_result=result, export_status=result.status),
    )


@login_required
def dashboard_gallery(request: HttpRequest) -> HttpResponse:
    """List gallery records and upload new images."""

    if request.method == "POST":
        form = GalleryUploadForm(request.POST, request.FILES)
        if form.is_valid():
            uploaded = form.cleaned_data["image"]
            try:
                data_uri = bytes_to_data_uri(uploaded.read(), uploaded.content_type)
                url = FreeImageHostClient().upload_data_uri(data_uri)
                add_gallery_image_record(
                    name=uploaded.name,
                    url=url,
                    category=form.cleaned_data["category"],
                )
            except ImageUploadError as exc:
                messages.error(request, exc.message)
            except GalleryRecordError as exc:
                messages.error(request, str(exc))
            else:
                messages.success(request, "Image uploaded to the gallery.")
                return redirect("core:dashboard_gallery")
    else:
        form = GalleryUploadForm()

    return render(
        request,
        "core/dashboard_gallery.html",
        {"form": form, "images": list_gallery_images()},
    )


@login_required
@require_POST
def dashboard_gallery_delete(request: HttpRequest, pk: int) -> HttpResponse:
    """Delete a gallery record."""

    try:
        deleted = delete_gallery_image(pk)
    except GalleryRecordError as exc:
        messages.error(request, str(exc))
    else:
        if deleted:
            messages.success(request, "Gallery image deleted.")
        else:
            messages.warning(request, "That gallery image no longer exists.")
    return redirect_back(request, fallback=reverse("core:dashboard_gallery"))
