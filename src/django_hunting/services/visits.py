"""Visit lifecycle services.

Provides:
- open_visit: Occupy a locality (one open visit per member and per locality)
- close_visit: Close an open visit, freeing its locality
- add_guest: Attach a guest to a visit (idempotent)
- update_visit: Edit visit notes
- delete_visit: Admin-only removal of a visit and its catches
- close_stale_visits: Nightly auto-close of visits left open

All write operations are atomic. Checks run before the write; a failing check
leaves the database untouched.
"""

import logging
from datetime import timedelta

from django.db import IntegrityError, transaction
from django.db.models import Max
from django.utils import timezone

from ..audit import Actions, log_event
from ..conf import get_setting
from ..exceptions import (
    AlreadyClosed,
    CatchesOutsideRange,
    ClosedVisitImmutable,
    Invalid,
    InvalidEndDate,
    LocalityInactive,
    LocalityOccupied,
    MemberHasActiveVisit,
    MemberInactive,
    VisitNotFound,
)
from ..models import Locality, Member, Visit
from ..permissions import is_admin, require_admin, require_owner_or_admin
from ._helpers import UNSET, apply_tracked_update, pk_of, violates

logger = logging.getLogger(__name__)


def _get_visit_for_update(visit) -> Visit:
    pk = pk_of(visit)
    locked = Visit.objects.select_for_update().filter(pk=pk).first()
    if locked is None:
        raise VisitNotFound(pk)
    return locked


def _occupant_of(locality) -> Visit | None:
    return (
        Visit.objects.open()
        .filter(locality=locality)
        .select_related("member")
        .first()
    )


@transaction.atomic
def open_visit(
    member,
    locality,
    start_date,
    *,
    has_guest: bool = False,
    guest_name: str | None = None,
    guest_note: str | None = None,
    note: str | None = None,
    actor=None,
) -> Visit:
    """
    Open a visit of a member at a locality.

    Args:
        member: Member (or pk) the visit belongs to
        locality: Locality (or pk) being occupied
        start_date: When the visit starts
        has_guest: Whether the member brings a guest
        guest_name: Guest name, stored only when has_guest
        guest_note: Guest note, stored only when has_guest
        note: Free-text note
        actor: Acting member; defaults to the member. Only admins may open
            a visit on behalf of someone else.

    Returns:
        The new open Visit

    Raises:
        LocalityInactive: If the locality is missing or inactive
        Forbidden: If a non-admin actor opens a visit for another member
        MemberInactive: If the member is missing or inactive
        MemberHasActiveVisit: If the member already has an open visit
        LocalityOccupied: If another open visit targets the locality
    """
    member_pk = pk_of(member)
    locality_pk = pk_of(locality)

    # Lock locality, then member, so concurrent callers serialize on the check
    locality = Locality.objects.select_for_update().filter(pk=locality_pk).first()
    if locality is None or not locality.is_active:
        raise LocalityInactive(locality_pk)

    if actor is not None and actor.pk != member_pk:
        require_admin(actor, "Only an admin may open a visit for another member")

    member = Member.objects.select_for_update().filter(pk=member_pk).first()
    if member is None or not member.is_active:
        raise MemberInactive(member_pk)

    if Visit.objects.open().filter(member=member).exists():
        raise MemberHasActiveVisit(member)

    occupant = _occupant_of(locality)
    if occupant is not None:
        logger.warning(
            "Locality %s already occupied by %s (visit %s)",
            locality, occupant.member, occupant.pk,
        )
        raise LocalityOccupied(locality, occupant.member.display_name)

    try:
        with transaction.atomic():
            visit = Visit.objects.create(
                member=member,
                locality=locality,
                start_date=start_date,
                has_guest=has_guest,
                guest_name=(guest_name or "").strip() if has_guest else "",
                guest_note=(guest_note or "") if has_guest else "",
                note=note or "",
            )
    except IntegrityError as e:
        if violates(e, "hunting_visit_one_open_per_member", "django_hunting_visit.member_id"):
            logger.warning("Open-visit constraint hit for member %s", member.pk)
            raise MemberHasActiveVisit(member) from e
        if violates(e, "hunting_visit_one_open_per_locality", "django_hunting_visit.locality_id"):
            logger.warning("Occupancy constraint hit for locality %s", locality.pk)
            raise LocalityOccupied(locality) from e
        raise

    log_event(
        action=Actions.VISIT_OPENED,
        target=visit,
        actor=actor or member,
        data={"locality_id": str(locality.pk), "member_id": str(member.pk)},
    )
    logger.info("Visit %s opened by %s at %s", visit.pk, member, locality)
    return visit


def _close(visit: Visit, end_date) -> Visit:
    visit.end_date = end_date
    visit.save(update_fields=["end_date", "updated_at"])
    return visit


@transaction.atomic
def close_visit(visit, end_date, actor) -> Visit:
    """
    Close an open visit.

    Raises:
        VisitNotFound: If the visit does not exist
        Forbidden: If actor is neither the owner nor an admin
        AlreadyClosed: If the visit already has an end date
        InvalidEndDate: If end_date is before the start or in the future
        CatchesOutsideRange: If a catch was hunted after end_date
    """
    visit = _get_visit_for_update(visit)
    require_owner_or_admin(actor, visit.member_id, "Not allowed to close another member's visit")

    if not visit.is_open:
        raise AlreadyClosed(visit.pk)

    if end_date < visit.start_date:
        raise InvalidEndDate(end_date, "before the visit start")

    tolerance = timedelta(seconds=get_setting("END_DATE_TOLERANCE_SECONDS"))
    if end_date > timezone.now() + tolerance:
        raise InvalidEndDate(end_date, "in the future")

    late_catches = list(
        visit.catches.filter(hunted_at__gt=end_date).values_list("pk", flat=True)
    )
    if late_catches:
        raise CatchesOutsideRange(end_date, late_catches)

    _close(visit, end_date)

    log_event(
        action=Actions.VISIT_CLOSED,
        target=visit,
        actor=actor,
        data={"end_date": end_date.isoformat()},
    )
    logger.info("Visit %s closed, locality %s is free", visit.pk, visit.locality_id)
    return visit


@transaction.atomic
def add_guest(visit, guest_name: str, actor) -> Visit:
    """
    Mark a visit as having a guest.

    Calling it again with the same name leaves the visit unchanged.

    Raises:
        VisitNotFound: If the visit does not exist
        Forbidden: If actor is neither the owner nor an admin
        Invalid: If guest_name is blank
    """
    visit = _get_visit_for_update(visit)
    require_owner_or_admin(actor, visit.member_id)

    guest_name = (guest_name or "").strip()
    if not guest_name:
        raise Invalid("Guest name is required")

    if visit.has_guest and visit.guest_name == guest_name:
        return visit

    changes = {}
    apply_tracked_update(visit, "has_guest", True, changes)
    apply_tracked_update(visit, "guest_name", guest_name, changes)
    visit.save(update_fields=["has_guest", "guest_name", "updated_at"])

    log_event(action=Actions.VISIT_GUEST_ADDED, target=visit, actor=actor, changes=changes)
    return visit


@transaction.atomic
def update_visit(visit, actor, *, note=UNSET, guest_note=UNSET) -> Visit:
    """
    Edit the free-text fields of a visit.

    Non-admins cannot edit a closed visit.

    Raises:
        VisitNotFound, Forbidden, ClosedVisitImmutable
    """
    visit = _get_visit_for_update(visit)
    require_owner_or_admin(actor, visit.member_id)

    if not visit.is_open and not is_admin(actor):
        raise ClosedVisitImmutable(visit.pk)

    changes = {}
    apply_tracked_update(visit, "note", note, changes)
    apply_tracked_update(visit, "guest_note", guest_note, changes)

    if changes:
        visit.save(update_fields=[*changes.keys(), "updated_at"])
        log_event(action=Actions.VISIT_UPDATED, target=visit, actor=actor, changes=changes)

    return visit


@transaction.atomic
def delete_visit(visit, actor) -> None:
    """
    Delete a visit together with its catches. Admin only.

    Raises:
        Forbidden: If actor is not an admin
        VisitNotFound: If the visit does not exist
    """
    require_admin(actor, "Only an admin may delete visits")
    visit = _get_visit_for_update(visit)

    log_event(
        action=Actions.VISIT_DELETED,
        target=visit,
        actor=actor,
        data={"catch_count": visit.catches.count()},
    )
    visit.delete()


def auto_close_cutoff(now=None):
    """Return the most recent local-day cutoff at or before ``now``."""
    now = now or timezone.now()
    local_now = timezone.localtime(now)
    cutoff = local_now.replace(
        hour=get_setting("AUTO_CLOSE_HOUR"), minute=0, second=0, microsecond=0
    )
    if cutoff > local_now:
        cutoff -= timedelta(days=1)
    return cutoff


@transaction.atomic
def _auto_close(visit_pk, cutoff, now) -> Visit | None:
    visit = Visit.objects.select_for_update().filter(pk=visit_pk).first()
    if visit is None or not visit.is_open:
        return None

    # Never end a visit before one of its catches
    latest_catch = visit.catches.aggregate(latest=Max("hunted_at"))["latest"]
    end_date = max(cutoff, latest_catch) if latest_catch else cutoff
    if end_date > now:
        logger.warning(
            "Visit %s has a catch after %s, leaving it open", visit.pk, now.isoformat()
        )
        return None

    _close(visit, end_date)
    log_event(
        action=Actions.VISIT_AUTO_CLOSED,
        target=visit,
        data={"end_date": end_date.isoformat()},
    )
    return visit


def close_stale_visits(now=None) -> list[Visit]:
    """
    Close every open visit that started before today's cutoff.

    Meant to run shortly after the cutoff (see ``HUNTING_AUTO_CLOSE_HOUR``).
    Each visit is closed in its own transaction.

    Returns:
        The visits that were closed
    """
    now = now or timezone.now()
    cutoff = auto_close_cutoff(now)

    stale_pks = list(
        Visit.objects.open()
        .filter(start_date__lt=cutoff)
        .values_list("pk", flat=True)
    )

    closed = []
    for pk in stale_pks:
        visit = _auto_close(pk, cutoff, now)
        if visit is not None:
            closed.append(visit)

    logger.info("Auto-closed %d visit(s) at cutoff %s", len(closed), cutoff.isoformat())
    return closed
