from __future__ import annotations

import logging
from typing import Any, Callable

from django.utils.module_loading import import_string

from .contracts import ContentKind, ResolvedContent
from .settings import HideSiteSettings, get_hide_site_settings

logger = logging.getLogger(__name__)

ID_KWARGS = ("pk", "id", "object_id")

ContentResolver = Callable[[Any, dict[str, Any]], ResolvedContent | None]


def _as_id(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def resolve_from_view(request, view_kwargs: dict[str, Any]) -> ResolvedContent | None:
    """
    Default resolver: read the content identity from the resolved URL kwargs.

    ``pk``/``id``/``object_id`` give the numeric id, ``slug`` the slug. URL
    names listed in HIDE_SITE_TERM_URL_NAMES are treated as taxonomy terms.
    """
    explicit = getattr(request, "hide_site_content", None)
    if isinstance(explicit, ResolvedContent):
        return explicit

    content_id = None
    for key in ID_KWARGS:
        if key in view_kwargs:
            content_id = _as_id(view_kwargs[key])
            break
    slug = str(view_kwargs.get("slug", "") or "")
    if content_id is None and not slug:
        return None

    match = getattr(request, "resolver_match", None)
    url_name = getattr(match, "view_name", "") or ""
    kind = ContentKind.SINGULAR
    if url_name and url_name in get_hide_site_settings().term_url_names:
        kind = ContentKind.TERM
    return ResolvedContent(id=content_id, slug=slug, kind=kind)


def get_content_resolver(config: HideSiteSettings) -> ContentResolver:
    if config.content_resolver:
        return import_string(config.content_resolver)
    return resolve_from_view


def resolve_content(request, view_kwargs: dict[str, Any], config: HideSiteSettings) -> ResolvedContent | None:
    try:
        resolver = get_content_resolver(config)
        return resolver(request, view_kwargs)
    except Exception:
        logger.exception("Hide-site content resolver failed for %s", getattr(request, "path", ""))
        return None
