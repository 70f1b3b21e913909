"""Helpers shared by the service modules."""

from django.db import IntegrityError


class _Unset:
    """Sentinel for "argument not supplied" where None is a meaningful value."""

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()


def pk_of(value):
    """Accept a model instance or a primary key and return the key."""
    return getattr(value, "pk", value)


def get_constraint_name(exc: IntegrityError) -> str | None:
    """Extract PostgreSQL constraint name from IntegrityError.

    Returns constraint name if available, None otherwise.
    """
    if exc.__cause__ and hasattr(exc.__cause__, "diag"):
        return exc.__cause__.diag.constraint_name
    return None


def violates(exc: IntegrityError, constraint: str, fallback_marker: str) -> bool:
    """Check whether an IntegrityError was raised by the named constraint.

    PostgreSQL reports the constraint name. SQLite only reports the offending
    columns (e.g. "UNIQUE constraint failed: django_hunting_visit.member_id"),
    so ``fallback_marker`` is matched against the message instead.
    """
    name = get_constraint_name(exc)
    if name is not None:
        return name == constraint
    message = str(exc)
    return constraint in message or fallback_marker in message


def apply_tracked_update(obj, field: str, new_value, changes: dict) -> None:
    """Apply a field update and track the change if value differs.

    Args:
        obj: Model instance to update
        field: Field name to update
        new_value: New value (UNSET means no change requested)
        changes: Dict to record changes for audit log
    """
    if new_value is UNSET:
        return

    old_value = getattr(obj, field)
    if new_value == old_value:
        return

    old_str = str(old_value) if old_value is not None else None
    new_str = str(new_value) if new_value is not None else None

    changes[field] = {"old": old_str, "new": new_str}
    setattr(obj, field, new_value)
