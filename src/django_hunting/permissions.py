"""Ownership and role checks for mutating operations.

The acting user is always a ``Member``; admins may act on records owned by
any member.
"""

from .exceptions import Forbidden


def is_admin(actor) -> bool:
    return actor is not None and actor.is_admin


def can_access(actor, owner_id) -> bool:
    """Check if actor owns a record or is an admin."""
    if actor is None:
        return False
    return actor.is_admin or actor.pk == owner_id


def require_owner_or_admin(actor, owner_id, reason: str | None = None) -> None:
    """Raise Forbidden unless actor owns the record or is an admin."""
    if not can_access(actor, owner_id):
        raise Forbidden(reason) if reason else Forbidden()


def require_admin(actor, reason: str = "Admin role required") -> None:
    if not is_admin(actor):
        raise Forbidden(reason)
