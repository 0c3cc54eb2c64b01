from __future__ import annotations

from typing import Any, Iterable

from .contracts import LOGIN_PAGE, ContentRule, GlobalMode, HideScope, HideSiteConfig
from .exceptions import ConfigurationError


def _as_roles(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    roles: list[str] = []
    for item in value:
        role = str(item).strip()
        if role and role not in roles:
            roles.append(role)
    return tuple(roles)


def _as_page(value: Any) -> int:
    try:
        page = int(value)
    except (TypeError, ValueError):
        return LOGIN_PAGE
    return page if page > 0 else LOGIN_PAGE


def _as_scope(value: Any) -> HideScope:
    try:
        return HideScope(str(value or "").strip())
    except ValueError:
        return HideScope.GLOBAL


def _as_mode(value: Any) -> GlobalMode:
    try:
        return GlobalMode(str(value or "").strip())
    except ValueError:
        return GlobalMode.OFF


def parse_rule_line(line: str) -> ContentRule | None:
    """Parse ``identifier|role1,role2``. Returns None for blank or identifier-less lines."""
    line = line.strip()
    if not line:
        return None
    parts = line.split("|")
    identifier = parts[0].strip()
    roles = parts[1] if len(parts) > 1 else ""
    if not identifier:
        return None
    return ContentRule(identifier=identifier, allowed_exempt_roles=frozenset(_as_roles(roles)))


def parse_content_rules(text: str, *, strict: bool = False) -> tuple[ContentRule, ...]:
    rules: list[ContentRule] = []
    for number, line in enumerate(str(text or "").splitlines(), start=1):
        rule = parse_rule_line(line)
        if rule is None:
            if strict and line.strip():
                raise ConfigurationError(f"Line {number}: missing content identifier before '|'.")
            continue
        rules.append(rule)
    return tuple(rules)


def _rules_from_mapping(value: Any) -> tuple[ContentRule, ...]:
    if isinstance(value, str):
        return parse_content_rules(value)
    if not isinstance(value, (list, tuple)):
        return ()
    rules: list[ContentRule] = []
    for item in value:
        # Structured shape: {"identifier": "42", "groups": ["editor"]}
        if isinstance(item, dict):
            identifier = str(item.get("identifier", "") or "").strip()
            if identifier:
                rules.append(
                    ContentRule(
                        identifier=identifier,
                        allowed_exempt_roles=frozenset(_as_roles(item.get("groups"))),
                    )
                )
        elif isinstance(item, str):
            rule = parse_rule_line(item)
            if rule is not None:
                rules.append(rule)
    return tuple(rules)


def format_content_rules(rules: Iterable[ContentRule]) -> str:
    return "\n".join(
        f"{rule.identifier}|{','.join(sorted(rule.allowed_exempt_roles))}" for rule in rules
    )


def to_config(payload: dict[str, Any] | None) -> HideSiteConfig:
    """
    Adapter: raw stored options -> HideSiteConfig.

    Accepted keys (all optional):
    - hide_scope: "global" | "by_material"
    - mode: "off" | "full" | "roles"
    - redirect_page: page id, 0 for the login page
    - roles: list or comma separated string
    - materials_mapping: rule lines or a list of {"identifier", "groups"}

    Anything unknown degrades to the disabled default instead of raising.
    """
    if not isinstance(payload, dict):
        return HideSiteConfig.default()
    return HideSiteConfig(
        hide_scope=_as_scope(payload.get("hide_scope")),
        global_mode=_as_mode(payload.get("mode")),
        redirect_page=_as_page(payload.get("redirect_page")),
        global_roles=frozenset(_as_roles(payload.get("roles"))),
        content_rules=_rules_from_mapping(payload.get("materials_mapping")),
    )


def sanitize_options(raw: dict[str, Any], *, strict: bool = False) -> dict[str, Any]:
    """Normalize options for storage in their persisted text forms."""
    mapping = raw.get("materials_mapping", "")
    if isinstance(mapping, (list, tuple)) and all(isinstance(line, str) for line in mapping):
        mapping = "\n".join(mapping)
    if isinstance(mapping, str):
        rules = parse_content_rules(mapping, strict=strict)
    else:
        rules = _rules_from_mapping(mapping)
    return {
        "hide_scope": _as_scope(raw.get("hide_scope")).value,
        "mode": _as_mode(raw.get("mode")).value,
        "redirect_page": _as_page(raw.get("redirect_page")),
        "roles": ",".join(_as_roles(raw.get("roles"))),
        "materials_mapping": format_content_rules(rules),
    }
