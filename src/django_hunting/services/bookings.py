"""Cabin booking services.

Provides:
- create_booking: Reserve a cabin (no overlap with confirmed bookings)
- update_booking: Change range or details of a confirmed booking
- cancel_booking: CONFIRMED -> CANCELLED
- delete_booking: Explicit hard delete

Overlap uses the strict rule from ``django_hunting.intervals``: a booking that
starts exactly when another ends does not conflict. Cancelled bookings never
block anything.
"""

import logging

from django.db import IntegrityError, transaction

from ..audit import Actions, log_event
from ..exceptions import (
    AlreadyCancelled,
    BookingConflict,
    BookingNotFound,
    CabinInactiveOrMissing,
    CancelledImmutable,
    InvalidRange,
    MemberInactive,
)
from ..models import Cabin, CabinBooking, Member
from ..permissions import require_owner_or_admin
from ._helpers import UNSET, apply_tracked_update, pk_of, violates

logger = logging.getLogger(__name__)

NO_OVERLAP_CONSTRAINT = "hunting_booking_no_overlap"


def find_conflict(cabin, start_at, end_at, exclude=None) -> CabinBooking | None:
    """Return a confirmed booking of the cabin overlapping [start_at, end_at), if any."""
    qs = CabinBooking.objects.confirmed().filter(cabin=cabin).overlapping(start_at, end_at)
    if exclude is not None:
        qs = qs.exclude(pk=pk_of(exclude))
    return qs.select_related("member").order_by("start_at").first()


def _raise_on_conflict(cabin, start_at, end_at, exclude=None) -> None:
    conflicting = find_conflict(cabin, start_at, end_at, exclude=exclude)
    if conflicting is not None:
        logger.warning(
            "Booking of %s [%s, %s) conflicts with booking %s",
            cabin, start_at.isoformat(), end_at.isoformat(), conflicting.pk,
        )
        raise BookingConflict(conflicting.member.display_name)


def _save_booking(booking: CabinBooking, **save_kwargs) -> None:
    try:
        with transaction.atomic():
            booking.save(**save_kwargs)
    except IntegrityError as e:
        # PostgreSQL exclusion constraint, see migration 0002
        if violates(e, NO_OVERLAP_CONSTRAINT, NO_OVERLAP_CONSTRAINT):
            logger.warning("Overlap constraint hit for cabin %s", booking.cabin_id)
            raise BookingConflict() from e
        raise


def _lock_cabin(cabin_pk) -> Cabin | None:
    return Cabin.objects.select_for_update().filter(pk=cabin_pk).first()


@transaction.atomic
def create_booking(
    cabin,
    member,
    start_at,
    end_at,
    *,
    title: str | None = None,
    note: str | None = None,
) -> CabinBooking:
    """
    Book a cabin for a member.

    Same-instant bookings (start_at == end_at) are allowed.

    Args:
        cabin: Cabin (or pk) to book
        member: Member (or pk) making the booking
        start_at: Start of the stay
        end_at: End of the stay

    Returns:
        The confirmed CabinBooking

    Raises:
        InvalidRange: If end_at is before start_at
        CabinInactiveOrMissing: If the cabin is missing or inactive
        MemberInactive: If the member is missing or inactive
        BookingConflict: If a confirmed booking of the cabin overlaps
    """
    if end_at < start_at:
        raise InvalidRange(start_at, end_at)

    cabin_pk = pk_of(cabin)
    cabin = _lock_cabin(cabin_pk)
    if cabin is None or not cabin.is_active:
        raise CabinInactiveOrMissing(cabin_pk)

    member_pk = pk_of(member)
    member = Member.objects.filter(pk=member_pk).first()
    if member is None or not member.is_active:
        raise MemberInactive(member_pk)

    _raise_on_conflict(cabin, start_at, end_at)

    booking = CabinBooking(
        cabin=cabin,
        member=member,
        start_at=start_at,
        end_at=end_at,
        title=title or "",
        note=note or "",
        status=CabinBooking.Status.CONFIRMED,
    )
    _save_booking(booking)

    log_event(
        action=Actions.BOOKING_CREATED,
        target=booking,
        actor=member,
        data={
            "cabin_id": str(cabin.pk),
            "start_at": start_at.isoformat(),
            "end_at": end_at.isoformat(),
        },
    )
    logger.info("Cabin %s booked by %s (booking %s)", cabin, member, booking.pk)
    return booking


def _get_booking_for_update(booking) -> CabinBooking:
    pk = pk_of(booking)
    locked = CabinBooking.objects.select_for_update().filter(pk=pk).first()
    if locked is None:
        raise BookingNotFound(pk)
    return locked


@transaction.atomic
def update_booking(
    booking,
    actor,
    *,
    start_at=UNSET,
    end_at=UNSET,
    title=UNSET,
    note=UNSET,
) -> CabinBooking:
    """
    Update a confirmed booking.

    The overlap check runs again (excluding the booking itself) when the
    range changes.

    Raises:
        BookingNotFound, Forbidden, CancelledImmutable, InvalidRange,
        BookingConflict
    """
    booking = _get_booking_for_update(booking)
    require_owner_or_admin(actor, booking.member_id, "Not allowed to modify another member's booking")

    if booking.is_cancelled:
        raise CancelledImmutable(booking.pk)

    new_start = booking.start_at if start_at is UNSET else start_at
    new_end = booking.end_at if end_at is UNSET else end_at
    if new_end < new_start:
        raise InvalidRange(new_start, new_end)

    range_changed = new_start != booking.start_at or new_end != booking.end_at
    if range_changed:
        cabin = _lock_cabin(booking.cabin_id)
        _raise_on_conflict(cabin, new_start, new_end, exclude=booking)

    changes = {}
    apply_tracked_update(booking, "start_at", start_at, changes)
    apply_tracked_update(booking, "end_at", end_at, changes)
    apply_tracked_update(booking, "title", UNSET if title is UNSET else (title or ""), changes)
    apply_tracked_update(booking, "note", UNSET if note is UNSET else (note or ""), changes)

    if changes:
        _save_booking(booking)
        log_event(action=Actions.BOOKING_UPDATED, target=booking, actor=actor, changes=changes)

    return booking


@transaction.atomic
def cancel_booking(booking, actor) -> CabinBooking:
    """
    Cancel a booking. Cancelled bookings are kept, not deleted.

    Raises:
        BookingNotFound, Forbidden, AlreadyCancelled
    """
    booking = _get_booking_for_update(booking)
    require_owner_or_admin(actor, booking.member_id, "Not allowed to cancel another member's booking")

    if booking.is_cancelled:
        raise AlreadyCancelled(booking.pk)

    booking.status = CabinBooking.Status.CANCELLED
    booking.save(update_fields=["status", "updated_at"])

    log_event(action=Actions.BOOKING_CANCELLED, target=booking, actor=actor)
    logger.info("Booking %s of %s cancelled", booking.pk, booking.cabin_id)
    return booking


@transaction.atomic
def delete_booking(booking, actor) -> None:
    """
    Permanently delete a booking, whatever its status.

    Raises:
        BookingNotFound, Forbidden
    """
    booking = _get_booking_for_update(booking)
    require_owner_or_admin(actor, booking.member_id, "Not allowed to delete another member's booking")

    log_event(
        action=Actions.BOOKING_DELETED,
        target=booking,
        actor=actor,
        data={"status": booking.status},
    )
    booking.delete()
