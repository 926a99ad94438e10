"""
Role-based access control.

Maps admin pages to the roles allowed to open them and provides the role
predicates used by routers and services.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from .enums import UserRole

EXECUTIVE_ROLES: frozenset[UserRole] = frozenset(
    {
        UserRole.PRESIDENT,
        UserRole.VP_EXTERNAL,
        UserRole.VP_OPERATIONS,
        UserRole.VP_EDUCATION,
        UserRole.VP_MARKETING,
        UserRole.VP_CONFERENCES,
        UserRole.VP_FINANCE,
        UserRole.VP_COMMUNITY,
        UserRole.VP_SPONSORSHIPS,
        UserRole.VP_RECRUITMENT,
        UserRole.VP_TECHNOLOGY,
    }
)

_ADMIN = UserRole.ADMIN
_PRES = UserRole.PRESIDENT
_RECRUITING = [_ADMIN, _PRES, UserRole.VP_RECRUITMENT, UserRole.VP_OPERATIONS]
_COMMS = [_ADMIN, _PRES, UserRole.VP_MARKETING, UserRole.VP_EXTERNAL, UserRole.VP_OPERATIONS]

PAGE_PERMISSIONS: Dict[str, List[UserRole]] = {
    "dashboard": [_ADMIN, _PRES],
    "users": [_ADMIN, _PRES],
    "permissions": [_ADMIN, _PRES],
    "settings": [_ADMIN, _PRES, UserRole.VP_TECHNOLOGY],
    "audit": [_ADMIN, _PRES],
    "analytics": [_ADMIN, _PRES, UserRole.VP_OPERATIONS, UserRole.VP_MARKETING, UserRole.VP_RECRUITMENT],
    "events": [_ADMIN, _PRES, UserRole.VP_EXTERNAL, UserRole.VP_OPERATIONS, UserRole.VP_MARKETING, UserRole.VP_CONFERENCES],
    "recruitment": list(_RECRUITING),
    "recruitment-portal": list(_RECRUITING),
    "recruitment-timeline": list(_RECRUITING),
    "coffee-chats": list(_RECRUITING),
    "interviews": list(_RECRUITING),
    "waitlists": list(_RECRUITING),
    "member-levels": list(_RECRUITING),
    "forms": [_ADMIN, _PRES, UserRole.VP_OPERATIONS, UserRole.VP_RECRUITMENT, UserRole.VP_EXTERNAL],
    "projects": [_ADMIN, _PRES, UserRole.VP_OPERATIONS, UserRole.VP_TECHNOLOGY, UserRole.VP_EDUCATION],
    "team": [_ADMIN, _PRES, UserRole.VP_OPERATIONS, UserRole.VP_RECRUITMENT],
    "content": [_ADMIN, _PRES, UserRole.VP_MARKETING, UserRole.VP_OPERATIONS],
    "newsroom": [_ADMIN, _PRES, UserRole.VP_MARKETING, UserRole.VP_EXTERNAL],
    "newsletter": list(_COMMS),
    "notifications": list(_COMMS),
    "internships": [_ADMIN, _PRES, UserRole.VP_EXTERNAL, UserRole.VP_SPONSORSHIPS, UserRole.VP_OPERATIONS],
    "companies": [_ADMIN, _PRES, UserRole.VP_EXTERNAL, UserRole.VP_SPONSORSHIPS, UserRole.VP_OPERATIONS],
    "changelog": [_ADMIN, _PRES, UserRole.VP_TECHNOLOGY, UserRole.VP_OPERATIONS],
}

ROLE_DISPLAY_NAMES: Dict[UserRole, str] = {
    UserRole.USER: "User",
    UserRole.ADMIN: "Administrator",
    UserRole.PROJECT_TEAM_MEMBER: "Project Team Member",
    UserRole.GENERAL_MEMBER: "General Member",
    UserRole.ROUND1: "Round 1 Member",
    UserRole.ROUND2: "Round 2 Member",
    UserRole.SPECIAL_PRIVS: "Special Privileges",
    UserRole.PRESIDENT: "President",
    UserRole.VP_EXTERNAL: "VP External Affairs",
    UserRole.VP_OPERATIONS: "VP Operations",
    UserRole.VP_EDUCATION: "VP Education",
    UserRole.VP_MARKETING: "VP Marketing",
    UserRole.VP_CONFERENCES: "VP Conferences",
    UserRole.VP_FINANCE: "VP Finance",
    UserRole.VP_COMMUNITY: "VP Community",
    UserRole.VP_SPONSORSHIPS: "VP Sponsorships",
    UserRole.VP_RECRUITMENT: "VP Recruitment",
    UserRole.VP_TECHNOLOGY: "VP Technology",
}


def _as_roles(roles: Iterable[str]) -> set[str]:
    return {r.value if isinstance(r, UserRole) else str(r) for r in roles}


def has_role(user_roles: Iterable[str], required: UserRole) -> bool:
    return required.value in _as_roles(user_roles)


def has_any_role(user_roles: Iterable[str], required: Iterable[UserRole]) -> bool:
    held = _as_roles(user_roles)
    return any(UserRole(r).value in held for r in required)


def is_admin(user_roles: Iterable[str]) -> bool:
    return has_role(user_roles, UserRole.ADMIN)


def has_any_admin_access(user_roles: Iterable[str]) -> bool:
    """True for ADMIN or any executive board role."""
    return is_admin(user_roles) or has_any_role(user_roles, EXECUTIVE_ROLES)


def can_register_for_event(user_roles: Iterable[str], required_roles_any: Iterable[str] | None) -> bool:
    """Anyone may register when the event lists no role requirement."""
    required = [UserRole(r) for r in (required_roles_any or [])]
    if not required:
        return True
    return has_any_role(user_roles, required)


def can_access_page(user_roles: Iterable[str], page: str) -> bool:
    """
    Check whether the roles grant access to an admin page.

    ADMIN may open every page. Unknown pages are closed to everyone else.
    """
    roles = list(user_roles)
    if is_admin(roles):
        return True
    return has_any_role(roles, PAGE_PERMISSIONS.get(page, []))


def accessible_pages(user_roles: Iterable[str]) -> List[str]:
    roles = list(user_roles)
    return [page for page in PAGE_PERMISSIONS if can_access_page(roles, page)]


def validate_roles(roles: Iterable[str]) -> List[UserRole]:
    """Keep only recognised role names, preserving order and dropping duplicates."""
    known = {r.value for r in UserRole}
    result: List[UserRole] = []
    for role in roles:
        if role in known and UserRole(role) not in result:
            result.append(UserRole(role))
    return result


def role_display_name(role: str) -> str:
    try:
        return ROLE_DISPLAY_NAMES[UserRole(role)]
    except ValueError:
        return role
