"""Audit logging for hunting-ground writes.

Services emit audit events through this module after a successful write and
inside the same transaction, so a rolled-back operation leaves no entry.

Usage:
    from django_hunting.audit import log_event, Actions

    log_event(
        action=Actions.VISIT_OPENED,
        target=visit,
        actor=member,
        data={"locality_id": str(visit.locality_id)},
    )
"""

from .conf import get_setting
from .models import AuditEntry


# =============================================================================
# Stable Action Constants
# =============================================================================
# Stored in AuditEntry.action. Add new actions, never rename existing ones.


class Actions:
    """Stable audit action strings."""

    # Visits
    VISIT_OPENED = "visit_opened"
    VISIT_CLOSED = "visit_closed"
    VISIT_AUTO_CLOSED = "visit_auto_closed"
    VISIT_UPDATED = "visit_updated"
    VISIT_GUEST_ADDED = "visit_guest_added"
    VISIT_DELETED = "visit_deleted"

    # Catches
    CATCH_RECORDED = "catch_recorded"
    CATCH_UPDATED = "catch_updated"
    CATCH_DELETED = "catch_deleted"

    # Seasons / harvest plan
    SEASON_CREATED = "season_created"
    SEASON_UPDATED = "season_updated"
    SEASON_DELETED = "season_deleted"
    PLAN_ITEM_UPSERTED = "plan_item_upserted"
    PLAN_ITEM_DELETED = "plan_item_deleted"

    # Cabin bookings
    BOOKING_CREATED = "booking_created"
    BOOKING_UPDATED = "booking_updated"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_DELETED = "booking_deleted"


def _model_label(obj) -> str:
    return f"{obj._meta.app_label}.{obj._meta.model_name}"


def log_event(action: str, target=None, actor=None, changes: dict = None, data: dict = None):
    """Record an audit entry for a write.

    Args:
        action: One of the Actions constants
        target: Model instance the action applied to
        actor: Acting Member (None for system actions such as auto-close)
        changes: Field diffs as {"field": {"old": x, "new": y}}
        data: Additional context

    Returns:
        The AuditEntry, or None when auditing is disabled
    """
    if not get_setting("AUDIT_ENABLED"):
        return None

    entry = AuditEntry(
        action=action,
        actor=actor,
        actor_display=str(actor)[:200] if actor is not None else "system",
        changes=changes or {},
        metadata=data or {},
    )
    if target is not None:
        entry.model_label = _model_label(target)
        entry.object_id = str(target.pk) if target.pk else ""
        entry.object_repr = str(target)[:200]
    entry.save()
    return entry
