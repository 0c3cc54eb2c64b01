from __future__ import annotations

from .contracts import (
    LOGIN_PAGE,
    AccessDecision,
    ContentKind,
    GlobalMode,
    HideScope,
    HideSiteConfig,
    RequestContext,
    Viewer,
)


def _is_redirect_page(config: HideSiteConfig, ctx: RequestContext) -> bool:
    content = ctx.resolved_content
    if config.redirect_page == LOGIN_PAGE or content is None:
        return False
    return content.kind is ContentKind.SINGULAR and content.id == config.redirect_page


def _decide_global(config: HideSiteConfig, viewer: Viewer) -> AccessDecision:
    mode = config.global_mode
    if mode is GlobalMode.OFF:
        return AccessDecision.allow("Site hiding is disabled.")
    if not viewer.is_authenticated:
        return AccessDecision.redirect(config.redirect_page, "Site is hidden from guests.")
    if mode is GlobalMode.FULL:
        if viewer.is_site_administrator:
            return AccessDecision.allow("Site administrators bypass full hiding.")
        return AccessDecision.redirect(config.redirect_page, "Site is fully hidden.")
    if mode is GlobalMode.ROLES:
        hidden_for = viewer.roles & config.global_roles
        if hidden_for:
            return AccessDecision.redirect(
                config.redirect_page,
                f"Site is hidden for role(s): {', '.join(sorted(hidden_for))}.",
            )
        return AccessDecision.allow("No viewer role is hidden.")
    raise ValueError(f"Unhandled global mode: {mode!r}")


def _decide_by_content(config: HideSiteConfig, viewer: Viewer, ctx: RequestContext) -> AccessDecision:
    content = ctx.resolved_content
    if content is None:
        return AccessDecision.allow("Request does not target a content item.")

    # Every matching rule is checked; any one that hides the item wins.
    for rule in config.content_rules:
        if not rule.matches(content):
            continue
        if not viewer.is_authenticated:
            return AccessDecision.redirect(
                config.redirect_page, f"Content '{rule.identifier}' is hidden from guests."
            )
        if not rule.allowed_exempt_roles:
            return AccessDecision.redirect(
                config.redirect_page, f"Content '{rule.identifier}' is hidden from everyone."
            )
        if not viewer.roles & rule.allowed_exempt_roles:
            return AccessDecision.redirect(
                config.redirect_page,
                f"Content '{rule.identifier}' is visible only to: {', '.join(sorted(rule.allowed_exempt_roles))}.",
            )
    return AccessDecision.allow("No content rule hides this item.")


def decide(config: HideSiteConfig, viewer: Viewer, ctx: RequestContext) -> AccessDecision:
    """
    Evaluate the hiding rules for one request.

    Pure function of its inputs. Admin, AJAX/REST and login requests, as well
    as requests for the configured redirect page itself, are always allowed so
    the gate can never lock out the admin UI or loop on its own destination.
    """
    if ctx.is_admin_area:
        return AccessDecision.allow("Admin area is never gated.")
    if ctx.is_ajax_or_rest:
        return AccessDecision.allow("AJAX/REST requests are never gated.")
    if ctx.is_login_page:
        return AccessDecision.allow("Login page is never gated.")
    if _is_redirect_page(config, ctx):
        return AccessDecision.allow("Request targets the redirect page.")

    if config.hide_scope is HideScope.GLOBAL:
        return _decide_global(config, viewer)
    if config.hide_scope is HideScope.BY_CONTENT:
        return _decide_by_content(config, viewer, ctx)
    raise ValueError(f"Unhandled hide scope: {config.hide_scope!r}")
