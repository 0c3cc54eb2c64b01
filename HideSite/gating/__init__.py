from .contracts import (
    LOGIN_PAGE,
    AccessDecision,
    ContentKind,
    ContentRule,
    GlobalMode,
    HideScope,
    HideSiteConfig,
    RequestContext,
    ResolvedContent,
    Viewer,
)
from .engine import decide

__all__ = [
    "LOGIN_PAGE",
    "AccessDecision",
    "ContentKind",
    "ContentRule",
    "GlobalMode",
    "HideScope",
    "HideSiteConfig",
    "RequestContext",
    "ResolvedContent",
    "Viewer",
    "decide",
]
