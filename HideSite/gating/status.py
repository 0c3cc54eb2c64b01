from __future__ import annotations

from typing import Any

from .adapter import format_content_rules
from .store import load_config
from .targets import resolve_redirect_url


def hide_site_status_snapshot() -> dict[str, Any]:
    config = load_config()
    return {
        "hide_scope": config.hide_scope.value,
        "mode": config.global_mode.value,
        "redirect_page": config.redirect_page,
        "redirects_to_login": config.redirects_to_login,
        "redirect_url": resolve_redirect_url(config.redirect_page),
        "global_roles": sorted(config.global_roles),
        "content_rules": format_content_rules(config.content_rules).splitlines(),
        "content_rules_count": len(config.content_rules),
    }
