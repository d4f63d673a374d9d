"""Integration tests for signing out of the chart dashboard."""

from __future__ import annotations

import pytest
from django.urls import reverse

pytestmark = pytest.mark.integration


@pytest.mark.django_db
def test_dashboard_navigation_offers_logout_form(auth_client) -> None:
    """The chart dashboard renders logout as a POST form with a CSRF token."""

    response = auth_client.get(reverse("core:dashboard_charts"))
    assert response.status_code == 200

    html = response.content.decode("utf-8")
    assert f'<form method="post" action="{reverse("logout")}"' in html
    assert "csrfmiddlewaretoken" in html
    assert f'href="{reverse("core:dashboard_gallery")}"' in html


@pytest.mark.django_db
def test_logout_returns_to_public_home(auth_client) -> None:
    """Signing out lands on the public home page, which still shows the chart."""

    response = auth_client.post(reverse("logout"), follow=True)

    assert response.redirect_chain == [("/", 302)]
    assert response.context["chart"]["chart"] is not None
    html = response.content.decode("utf-8")
    assert f'href="{reverse("login")}"' in html
    assert reverse("core:dashboard_charts") not in html


@pytest.mark.django_db
def test_logged_out_client_cannot_export_chart(auth_client) -> None:
    """After logout the export action redirects to login instead of running."""

    auth_client.post(reverse("logout"))

    response = auth_client.post(reverse("core:export_chart"))

    assert response.status_code == 302
    assert response["Location"].startswith(reverse("login"))
