"""Permission names owned by the plugin."""

from __future__ import annotations

from twig_cap.adapters.host import PermissionService

PERMISSION_IGNORE = "twigcap.ignore"

PERMISSIONS: tuple[str, ...] = (PERMISSION_IGNORE,)


def register_permissions(service: PermissionService, owner: str) -> None:
    for name in PERMISSIONS:
        service.register_permission(name, owner)
