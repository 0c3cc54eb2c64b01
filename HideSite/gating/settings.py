from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass(frozen=True, slots=True)
class HideSiteSettings:
    default_options: dict[str, Any]
    admin_prefixes: tuple[str, ...]
    api_prefixes: tuple[str, ...]
    skip_prefixes: tuple[str, ...]
    login_paths: tuple[str, ...]
    login_next: bool
    home_url: str
    page_url_name: str
    page_url_resolver: str
    content_resolver: str
    term_url_names: tuple[str, ...]
    admin_permission: str


def _as_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(str(item) for item in value or ())


def get_hide_site_settings() -> HideSiteSettings:
    options = getattr(settings, "HIDE_SITE_OPTIONS", {})
    return HideSiteSettings(
        default_options=dict(options) if isinstance(options, dict) else {},
        admin_prefixes=_as_tuple(getattr(settings, "HIDE_SITE_ADMIN_PREFIXES", ("/admin/",))),
        api_prefixes=_as_tuple(getattr(settings, "HIDE_SITE_API_PREFIXES", ("/api/",))),
        skip_prefixes=_as_tuple(
            getattr(settings, "HIDE_SITE_SKIP_PREFIXES", ("/static/", "/media/"))
        ),
        login_paths=_as_tuple(getattr(settings, "HIDE_SITE_LOGIN_PATHS", ())),
        login_next=bool(getattr(settings, "HIDE_SITE_LOGIN_NEXT", False)),
        home_url=str(getattr(settings, "HIDE_SITE_HOME_URL", "/") or "/"),
        page_url_name=str(getattr(settings, "HIDE_SITE_PAGE_URL_NAME", "") or ""),
        page_url_resolver=str(getattr(settings, "HIDE_SITE_PAGE_URL_RESOLVER", "") or ""),
        content_resolver=str(getattr(settings, "HIDE_SITE_CONTENT_RESOLVER", "") or ""),
        term_url_names=_as_tuple(getattr(settings, "HIDE_SITE_TERM_URL_NAMES", ())),
        admin_permission=str(
            getattr(settings, "HIDE_SITE_ADMIN_PERMISSION", "HideSite.change_hidesiteoptions")
        ),
    )
