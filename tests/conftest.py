"""Pytest fixtures shared across unit and Django integration tests."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _clear_page_cache() -> Iterator[None]:
    """Start every test with an empty cache so cached chart payloads never leak."""

    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def admin_user(db):
    """Return a portal administrator account."""

    user_model = get_user_model()
    return user_model.objects.create_user(username="admin-ponja", password="password")


@pytest.fixture
def auth_client(client, admin_user):
    """Return a Django test client authenticated as the administrator."""

    client.force_login(admin_user)
    return client


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching the database, views, commands, or IO.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
