from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import urlsplit, urlunsplit

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.http import QueryDict
from django.shortcuts import resolve_url
from django.urls import NoReverseMatch, reverse
from django.utils.module_loading import import_string

from .contracts import LOGIN_PAGE
from .exceptions import TargetUnresolvable
from .settings import HideSiteSettings, get_hide_site_settings

logger = logging.getLogger(__name__)


def login_url(*, next_path: str | None = None, config: HideSiteSettings | None = None) -> str:
    config = config or get_hide_site_settings()
    url = resolve_url(settings.LOGIN_URL)
    if config.login_next and next_path:
        parts = list(urlsplit(url))
        querystring = QueryDict(parts[3], mutable=True)
        querystring["next"] = next_path
        parts[3] = querystring.urlencode(safe="/")
        url = urlunsplit(parts)
    return url


def _page_url_resolver(config: HideSiteSettings) -> Callable[[int], str | None]:
    if config.page_url_resolver:
        return import_string(config.page_url_resolver)
    if not config.page_url_name:
        raise TargetUnresolvable("No page URL resolver or URL name is configured.")
    url_name = config.page_url_name

    def _reverse(page_id: int) -> str:
        return reverse(url_name, kwargs={"pk": page_id})

    return _reverse


def page_url(page_id: int, *, config: HideSiteSettings | None = None) -> str:
    """Permalink for a page id, or raise TargetUnresolvable."""
    config = config or get_hide_site_settings()
    try:
        resolver = _page_url_resolver(config)
        url = resolver(page_id)
    except NoReverseMatch as exc:
        raise TargetUnresolvable(f"Page {page_id} has no URL: {exc}") from exc
    except ObjectDoesNotExist as exc:
        raise TargetUnresolvable(f"Page {page_id} does not exist.") from exc
    except ImportError as exc:
        raise TargetUnresolvable(f"Page URL resolver cannot be imported: {exc}") from exc
    if not url:
        raise TargetUnresolvable(f"Page {page_id} no longer resolves.")
    return str(url)


def resolve_redirect_url(target: int, *, next_path: str | None = None) -> str:
    """
    Turn a redirect page reference into a URL.

    LOGIN_PAGE maps to the login URL; a page id maps to its permalink and
    falls back to the home URL when the page cannot be resolved.
    """
    config = get_hide_site_settings()
    if target == LOGIN_PAGE:
        return login_url(next_path=next_path, config=config)
    try:
        return page_url(target, config=config)
    except TargetUnresolvable as exc:
        logger.warning("Hide-site redirect page %s unresolvable, using home URL: %s", target, exc)
        return config.home_url
    except Exception:
        logger.exception("Hide-site page URL resolver failed for page %s, using home URL", target)
        return config.home_url
