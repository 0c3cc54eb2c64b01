from __future__ import annotations

from typing import Any

from .contracts import Viewer


def viewer_from_user(user: Any, *, admin_permission: str) -> Viewer:
    """Build the viewer for a ``django.contrib.auth`` user; roles are group names."""
    if user is None or not getattr(user, "is_authenticated", False):
        return Viewer.anonymous()
    roles = frozenset(
        str(name).strip() for name in user.groups.values_list("name", flat=True) if str(name).strip()
    )
    is_admin = bool(getattr(user, "is_superuser", False)) or bool(
        admin_permission and user.has_perm(admin_permission)
    )
    return Viewer(is_authenticated=True, roles=roles, is_site_administrator=is_admin)
