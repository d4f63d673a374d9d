"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.home, name="home"),
    path("api/chart/", views.chart_api, name="chart_api"),
    path("gallery/", views.gallery, name="gallery"),
    path("dashboard/", views.dashboard_charts, name="dashboard"),
    path("dashboard/charts/", views.dashboard_charts, name="dashboard_charts"),
    path("dashboard/charts/export/", views.export_chart, name="export_chart"),
    path("dashboard/gallery/", views.dashboard_gallery, name="dashboard_gallery"),
    path("dashboard/gallery/<int:pk>/delete/", views.dashboard_gallery_delete, name="dashboard_gallery_delete"),
]
