"""Path-keyed cache for rendered public page fragments.

Public pages cache the expensive part of their context (the rendered chart
payload) under the request path. Writes to the underlying settings call
`invalidate_path` so the next request rebuilds from fresh data.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable
from typing import TypeVar

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

T = TypeVar("T")

_KEY_PREFIX = "page-cache"


def cache_key_for_path(path: str) -> str:
    """Return the cache key used for a request path.

    Args:
        path: URL path such as `/` or `/api/chart/`.

    Returns:
        A memcached-safe key derived from the trimmed path.
    """

    normalized = path.strip() or "/"
    digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
    return f"{_KEY_PREFIX}:{digest}"


def get_or_build(path: str, builder: Callable[[], T]) -> T:
    """Return the cached value for `path`, building and storing it on a miss."""

    key = cache_key_for_path(path)
    cached = cache.get(key)
    if cached is not None:
        return cached
    value = builder()
    cache.set(key, value, timeout=getattr(settings, "PAGE_CACHE_TIMEOUT", 300))
    return value


def invalidate_path(path: str) -> bool:
    """Drop the cached entry for `path`.

    Returns:
        True when the cache backend accepted the delete. Cache backend errors
        are logged and reported as False.
    """

    try:
        cache.delete(cache_key_for_path(path))
    except Exception:  # noqa: BLE001
        logger.warning("Failed to invalidate page cache for %s", path, exc_info=True)
        return False
    logger.info("Invalidated page cache for %s", path)
    return True


def invalidate_paths(paths: list[str] | tuple[str, ...]) -> None:
    """Invalidate every path in `paths`."""

    for path in paths:
        invalidate_path(path)
