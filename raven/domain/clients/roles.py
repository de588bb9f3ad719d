"""
Role set handling.

A client's roles are an ordered, de-duplicated list stored as a single
comma-joined column, e.g. ``"A-TEAM,MEMBER"``.
"""

from typing import Iterable, Optional

ROLE_SEPARATOR = ","

CLIENT = "CLIENT"
MEMBER = "MEMBER"
A_TEAM = "A-TEAM"
ADMIN = "ADMIN"

DEFAULT_ROLE = CLIENT


def parse_roles(stored: Optional[str]) -> list[str]:
    """Split the stored column into an ordered role list, dropping blanks and repeats"""
    if not stored:
        return []
    roles: list[str] = []
    for part in stored.split(ROLE_SEPARATOR):
        role = part.strip()
        if role and role not in roles:
            roles.append(role)
    return roles


def serialize_roles(roles: Iterable[str]) -> str:
    return ROLE_SEPARATOR.join(parse_roles(ROLE_SEPARATOR.join(roles)))


def merge_role(current_roles: Iterable[str], new_role: str) -> list[str]:
    """
    Add ``new_role`` to the end of ``current_roles`` unless already present.

    Pure and idempotent: merging a role that is already held returns the
    same roles in the same order.
    """
    new_role = new_role.strip()
    if not new_role or ROLE_SEPARATOR in new_role:
        raise ValueError(f"Invalid role tag: {new_role!r}")

    merged = list(current_roles)
    if new_role not in merged:
        merged.append(new_role)
    return merged


def merge_stored_role(stored: Optional[str], new_role: str) -> str:
    """merge_role over the storage representation"""
    return serialize_roles(merge_role(parse_roles(stored), new_role))
