from __future__ import annotations

import logging
from typing import Any

from django.db import DatabaseError

from .adapter import sanitize_options, to_config
from .contracts import HideSiteConfig
from .settings import get_hide_site_settings

logger = logging.getLogger(__name__)


def load_options() -> dict[str, Any]:
    """Raw options: the stored row, else HIDE_SITE_OPTIONS from settings."""
    from ..models import HideSiteOptions

    fallback = get_hide_site_settings().default_options
    try:
        row = HideSiteOptions.objects.filter(pk=HideSiteOptions.SINGLETON_PK).first()
    except DatabaseError as exc:
        logger.warning("Hide-site options table unavailable, using settings defaults: %s", exc)
        return fallback
    if row is None:
        return fallback
    return row.as_payload()


def load_config() -> HideSiteConfig:
    return to_config(load_options())


def save_options(**fields: Any):
    """Sanitize and store options, merging with what is currently stored."""
    from ..models import HideSiteOptions

    current = load_options()
    merged = {**current, **{key: value for key, value in fields.items() if value is not None}}
    cleaned = sanitize_options(merged, strict=True)
    row, _ = HideSiteOptions.objects.update_or_create(
        pk=HideSiteOptions.SINGLETON_PK,
        defaults=cleaned,
    )
    logger.info(
        "Hide-site options saved: scope=%s mode=%s redirect_page=%s",
        row.hide_scope,
        row.mode,
        row.redirect_page,
    )
    return row
