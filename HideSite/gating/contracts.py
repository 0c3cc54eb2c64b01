from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

LOGIN_PAGE = 0

_NUMERIC_IDENTIFIER = re.compile(r"^[+-]?\d+$")


class HideScope(str, Enum):
    GLOBAL = "global"
    # Stored value kept compatible with options exported from older installs.
    BY_CONTENT = "by_material"


class GlobalMode(str, Enum):
    OFF = "off"
    FULL = "full"
    ROLES = "roles"


class ContentKind(str, Enum):
    SINGULAR = "singular"
    TERM = "term"


@dataclass(frozen=True, slots=True)
class ResolvedContent:
    """Identity of the content item targeted by the current request."""

    id: int | None
    slug: str = ""
    kind: ContentKind = ContentKind.SINGULAR


@dataclass(frozen=True, slots=True)
class ContentRule:
    """
    Hides one content item. The item stays visible only to authenticated
    viewers holding at least one of ``allowed_exempt_roles``; an empty set
    hides it from everyone.

    The listed roles keep access. Rule lines carried over from installs where
    the listed roles were the ones being hidden must be inverted.
    """

    identifier: str
    allowed_exempt_roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_numeric(self) -> bool:
        return bool(_NUMERIC_IDENTIFIER.match(self.identifier))

    def matches(self, content: ResolvedContent) -> bool:
        if self.is_numeric:
            return content.id is not None and int(self.identifier) == content.id
        return self.identifier == content.slug


@dataclass(frozen=True, slots=True)
class HideSiteConfig:
    hide_scope: HideScope = HideScope.GLOBAL
    global_mode: GlobalMode = GlobalMode.OFF
    redirect_page: int = LOGIN_PAGE
    global_roles: frozenset[str] = field(default_factory=frozenset)
    content_rules: tuple[ContentRule, ...] = ()

    @classmethod
    def default(cls) -> "HideSiteConfig":
        return cls()

    @property
    def redirects_to_login(self) -> bool:
        return self.redirect_page == LOGIN_PAGE


@dataclass(frozen=True, slots=True)
class Viewer:
    is_authenticated: bool
    roles: frozenset[str] = field(default_factory=frozenset)
    is_site_administrator: bool = False

    @classmethod
    def anonymous(cls) -> "Viewer":
        return cls(is_authenticated=False)


@dataclass(frozen=True, slots=True)
class RequestContext:
    is_admin_area: bool = False
    is_ajax_or_rest: bool = False
    is_login_page: bool = False
    resolved_content: ResolvedContent | None = None


@dataclass(frozen=True, slots=True)
class AccessDecision:
    """Outcome of one gate evaluation. ``target`` is a page reference, not a URL."""

    allowed: bool
    target: int | None = None
    reason: str = ""

    @classmethod
    def allow(cls, reason: str = "") -> "AccessDecision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def redirect(cls, target: int, reason: str = "") -> "AccessDecision":
        return cls(allowed=False, target=target, reason=reason)
