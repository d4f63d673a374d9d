"""Redirect helpers for dashboard POST actions.

Dashboard actions redirect back to the page that submitted them. The target
comes from user-controlled values (`next`, the referer), so each candidate is
validated with `url_has_allowed_host_and_scheme` before use.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import DisallowedHost
from django.http import HttpRequest, HttpResponseRedirect
from django.shortcuts import redirect
from django.utils.http import url_has_allowed_host_and_scheme


def redirect_back(request: HttpRequest, *, fallback: str) -> HttpResponseRedirect:
    """Redirect to `next` or the referer when safe, else to `fallback`.

    Args:
        request: Incoming POST request.
        fallback: URL used when no candidate passes validation.

    Returns:
        An HttpResponseRedirect to a same-site URL.
    """

    hosts = set(settings.ALLOWED_HOSTS)
    try:
        hosts.add(request.get_host())
    except DisallowedHost:
        pass

    for candidate in (request.POST.get("next"), request.META.get("HTTP_REFERER")):
        target = (candidate or "").strip()
        if target and url_has_allowed_host_and_scheme(
            url=target,
            allowed_hosts=hosts,
            require_https=request.is_secure(),
        ):
            return redirect(target)
    return redirect(fallback)
