# permissions.py
"""
RBAC for the application.
- permission_required(action, subject): main route decorator, checks the role matrix.
- role_required([...]): coarse role check (ADMIN always passes).
- can(role, action, subject) / abilities_for(role): plain lookups for services and tests.

Roles:
- ADMIN   : everything, including user management
- MANAGER : manages equipment, metrology and maintenance; reads inventory and settings
- OPERATOR: reads everything operational, updates equipment, updates/completes maintenance
- VIEWER  : read only (also the fallback for unknown roles)
"""

from functools import wraps
from typing import Dict, FrozenSet, Iterable, Optional, Set

from flask import abort
from flask_login import current_user, login_required

ADMIN = "ADMIN"
MANAGER = "MANAGER"
OPERATOR = "OPERATOR"
VIEWER = "VIEWER"
ROLES = (ADMIN, MANAGER, OPERATOR, VIEWER)

SUBJECTS = ("Dashboard", "Equipment", "Metrology", "Inventory", "Maintenance", "Settings", "User")
ACTIONS = ("manage", "read", "create", "update", "delete", "calibrate", "schedule", "complete")

CRUD = frozenset({"read", "create", "update", "delete"})
READ = frozenset({"read"})

_VIEWER_GRANTS: Dict[str, FrozenSet[str]] = {
    "Dashboard": READ,
    "Equipment": READ,
    "Metrology": READ,
    "Inventory": READ,
    "Maintenance": READ,
}

# ADMIN is handled separately: "manage" on everything
ABILITIES: Dict[str, Dict[str, FrozenSet[str]]] = {
    MANAGER: {
        "Dashboard": READ,
        "Equipment": CRUD,
        "Metrology": CRUD | {"calibrate"},
        "Inventory": READ,
        "Maintenance": CRUD | {"schedule", "complete"},
        "Settings": READ,
    },
    OPERATOR: {
        "Dashboard": READ,
        "Equipment": frozenset({"read", "update"}),
        "Metrology": READ,
        "Inventory": READ,
        "Maintenance": frozenset({"read", "update", "complete"}),
    },
    VIEWER: _VIEWER_GRANTS,
}

NAV_SUBJECTS = {
    "/": "Dashboard",
    "/equipment": "Equipment",
    "/metrology": "Metrology",
    "/inventory": "Inventory",
    "/maintenance": "Maintenance",
    "/settings": "Settings",
}


# ------------------------------- MATRIX LOOKUPS ------------------------------ #
def normalize_role(role: Optional[str]) -> str:
    role = (role or "").upper()
    return role if role in ROLES else VIEWER


def abilities_for(role: Optional[str]) -> Dict[str, Set[str]]:
    """Subject -> granted actions for a role. ADMIN gets every action everywhere."""
    role = normalize_role(role)
    if role == ADMIN:
        return {subject: set(ACTIONS) for subject in SUBJECTS}
    return {subject: set(actions) for subject, actions in ABILITIES[role].items()}


def can(role: Optional[str], action: str, subject: str) -> bool:
    role = normalize_role(role)
    if role == ADMIN:
        return True
    granted = ABILITIES[role].get(subject, frozenset())
    return "manage" in granted or action in granted


def can_access_nav_item(role: Optional[str], path: str) -> bool:
    subject = NAV_SUBJECTS.get(path)
    return bool(subject) and can(role, "read", subject)


def current_role() -> Optional[str]:
    if not current_user.is_authenticated:
        return None
    return getattr(current_user, "role", None)


def current_user_can(action: str, subject: str) -> bool:
    return current_user.is_authenticated and can(current_role(), action, subject)


# ------------------------------- DECORATORS ---------------------------------- #
def permission_required(action: str, subject: str):
    """
    Restrict a route to sessions whose role grants ``action`` on ``subject``.
    Example:
        @permission_required("complete", "Maintenance")
        def complete(task_id): ...

    Unauthenticated -> 401 (through login_manager), missing grant -> 403.
    """
    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def wrapped(*args, **kwargs):
            if not can(current_role(), action, subject):
                abort(403)
            return view_func(*args, **kwargs)

        return wrapped
    return decorator


def role_required(allowed_roles: Iterable[str]):
    """
    Restrict a route to explicit roles. ADMIN always passes.
    Example:
        @role_required([MANAGER])
    """
    if isinstance(allowed_roles, str):
        allowed: Set[str] = {allowed_roles}
    else:
        allowed = set(allowed_roles or [])

    def decorator(view_func):
        @wraps(view_func)
        @login_required
        def wrapped(*args, **kwargs):
            role = normalize_role(current_role())
            if role == ADMIN or role in allowed:
                return view_func(*args, **kwargs)
            abort(403)

        return wrapped
    return decorator
