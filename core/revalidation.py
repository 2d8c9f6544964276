# core/revalidation.py
"""
Page cache and invalidation.

Public list endpoints serve their payloads through ``cached_page``; every
mutation calls ``revalidate_path`` for the pages that display the affected
collection, which drops the cached payload and emits ``page_invalidated``
so other listeners (e.g. a CDN purger) can react.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.dispatch import Signal

logger = logging.getLogger("devfest.revalidation")

# Sent once per invalidated path: page_invalidated.send(sender=None, path="/agenda")
page_invalidated = Signal()

# Page paths used across the apps
PATH_HOME = "/"
PATH_ADMIN = "/admin"
PATH_AGENDA = "/agenda"
PATH_VOLUNTEER = "/volunteer"
PATH_DASHBOARD = "/volunteer/dashboard"


def page_cache_key(path: str) -> str:
    return f"page:{path}"


def cached_page(path: str, builder):
    """
    Return the cached payload for ``path``, building and storing it on miss.
    """
    key = page_cache_key(path)
    payload = cache.get(key)
    if payload is None:
        payload = builder()
        cache.set(key, payload, getattr(settings, "PAGE_CACHE_TIMEOUT", 300))
    return payload


def revalidate_path(*paths: str) -> None:
    for path in paths:
        cache.delete(page_cache_key(path))
        page_invalidated.send(sender=None, path=path)
        logger.debug(f"Page invalidated: {path}")
