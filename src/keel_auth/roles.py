"""Role claim parsing."""

import json
from typing import Sequence

DEFAULT_ALLOWED_ROLES: tuple[str, ...] = ("user", "admin", "moderator", "editor")

_FALLBACK_ROLES = ["user"]


def parse_user_roles(
    roles_json: str | None,
    allowed_roles: Sequence[str] = DEFAULT_ALLOWED_ROLES,
) -> list[str]:
    """Parse a JSON-encoded list of roles, keeping only allowed ones.

    Falls back to ``["user"]`` when the input is empty, not a JSON array,
    or contains no allowed role.

    Examples
    --------
    >>> parse_user_roles('["admin", "user"]')
    ['admin', 'user']
    >>> parse_user_roles(None)
    ['user']
    """
    if not roles_json:
        return list(_FALLBACK_ROLES)

    try:
        parsed = json.loads(roles_json)
    except ValueError:
        return list(_FALLBACK_ROLES)

    if not isinstance(parsed, list):
        return list(_FALLBACK_ROLES)

    roles = [role for role in parsed if isinstance(role, str) and role in allowed_roles]
    return roles or list(_FALLBACK_ROLES)
