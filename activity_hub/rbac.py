"""RBAC module/action registry and role defaults."""
from __future__ import annotations

from typing import Literal

PermissionAction = Literal["view", "add", "edit", "delete"]

ACTION_BY_METHOD: dict[str, PermissionAction] = {
    "GET": "view",
    "HEAD": "view",
    "OPTIONS": "view",
    "POST": "add",
    "PUT": "edit",
    "PATCH": "edit",
    "DELETE": "delete",
}

SYSTEM_MODULES: list[dict[str, str]] = [
    {"key": "activities", "name": "Activities"},
    {"key": "reviews", "name": "Reviews"},
    {"key": "portfolio", "name": "Portfolio"},
    {"key": "analytics", "name": "Analytics"},
    {"key": "faculty_analytics", "name": "Faculty Analytics"},
    {"key": "categories", "name": "Categories"},
]


def _full_permissions() -> dict[str, bool]:
    return {"view": True, "add": True, "edit": True, "delete": True}


def _view_only() -> dict[str, bool]:
    return {"view": True, "add": False, "edit": False, "delete": False}


def _no_access() -> dict[str, bool]:
    return {"view": False, "add": False, "edit": False, "delete": False}


def _module_defaults(fill: dict[str, bool]) -> dict[str, dict[str, bool]]:
    return {module["key"]: dict(fill) for module in SYSTEM_MODULES}


ROLE_PERMISSIONS: dict[str, dict[str, dict[str, bool]]] = {
    "admin": _module_defaults(_full_permissions()),
    "faculty": {
        **_module_defaults(_no_access()),
        "activities": _view_only(),
        "reviews": {"view": True, "add": True, "edit": True, "delete": False},
        "portfolio": {"view": True, "add": True, "edit": False, "delete": False},
        "analytics": _view_only(),
        "faculty_analytics": _view_only(),
        "categories": _view_only(),
    },
    "student": {
        **_module_defaults(_no_access()),
        "activities": {"view": True, "add": True, "edit": True, "delete": False},
        "portfolio": {"view": True, "add": True, "edit": False, "delete": False},
        "analytics": _view_only(),
        "categories": _view_only(),
    },
}


def has_permission(role: str, module: str, action: str) -> bool:
    permission = ROLE_PERMISSIONS.get(role, {}).get(module)
    if not permission:
        return False
    return bool(permission.get(action, False))
