from __future__ import annotations

import logging
from urllib.parse import urlsplit

from django.conf import settings
from django.http import HttpResponseRedirect
from django.shortcuts import resolve_url

from .gating.content import resolve_content
from .gating.contracts import AccessDecision, RequestContext
from .gating.engine import decide
from .gating.identity import viewer_from_user
from .gating.settings import HideSiteSettings, get_hide_site_settings
from .gating.store import load_config
from .gating.targets import resolve_redirect_url

logger = logging.getLogger(__name__)


class HideSiteMiddleware:
    """
    Redirects visitors away from hidden pages.

    Runs in ``process_view`` so the resolved URL kwargs are available to the
    content resolver. Requests that never reach a view (unmatched URLs served
    by the 404 handler or a fallback middleware) are gated on the way out.
    Must be installed after AuthenticationMiddleware.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        if not hasattr(request, "hide_site_decision"):
            redirect_response = self.gate(request, None)
            if redirect_response is not None:
                return redirect_response
        return response

    def _is_login_page(self, request, config: HideSiteSettings) -> bool:
        login_path = resolve_url(settings.LOGIN_URL)
        return login_path in (request.path, request.path_info) or request.path_info in config.login_paths

    def _is_ajax_or_rest(self, request, config: HideSiteSettings) -> bool:
        if request.headers.get("x-requested-with") == "XMLHttpRequest":
            return True
        return bool(config.api_prefixes) and request.path_info.startswith(config.api_prefixes)

    def build_context(self, request, view_kwargs, config: HideSiteSettings) -> RequestContext:
        return RequestContext(
            is_admin_area=bool(config.admin_prefixes) and request.path_info.startswith(config.admin_prefixes),
            is_ajax_or_rest=self._is_ajax_or_rest(request, config),
            is_login_page=self._is_login_page(request, config),
            resolved_content=resolve_content(request, view_kwargs or {}, config),
        )

    def gate(self, request, view_kwargs):
        config = get_hide_site_settings()
        if config.skip_prefixes and request.path_info.startswith(config.skip_prefixes):
            request.hide_site_decision = None
            return None

        ctx = self.build_context(request, view_kwargs, config)
        viewer = viewer_from_user(getattr(request, "user", None), admin_permission=config.admin_permission)
        decision = decide(load_config(), viewer, ctx)
        request.hide_site_decision = decision

        if decision.allowed:
            logger.debug("Hide-site allowed %s: %s", request.path, decision.reason)
            return None

        url = resolve_redirect_url(decision.target, next_path=request.get_full_path())
        if urlsplit(url).path == request.path:
            # Fallback targets (home URL, slug-only permalinks) are not covered by the page id check.
            request.hide_site_decision = AccessDecision.allow("Request targets the redirect URL.")
            logger.debug("Hide-site allowed %s: it is the redirect URL", request.path)
            return None
        logger.info("Hide-site redirecting %s to %s: %s", request.path, url, decision.reason)
        return HttpResponseRedirect(url)

    def process_view(self, request, view_func, view_args, view_kwargs):
        return self.gate(request, view_kwargs)
