"""Read-side queries for django-hunting.

Selectors never write and never raise domain exceptions; a missing record is
returned as None.
"""

from .models import CabinBooking, Catch, HuntingSeason, Locality, Visit
from .services._helpers import pk_of


def get_active_visit(member) -> Visit | None:
    """Return the member's open visit, if any."""
    return (
        Visit.objects.open()
        .filter(member_id=pk_of(member))
        .select_related("locality")
        .first()
    )


def get_locality_occupant(locality) -> Visit | None:
    """Return the open visit occupying a locality, if any."""
    return (
        Visit.objects.open()
        .filter(locality_id=pk_of(locality))
        .select_related("member")
        .first()
    )


def open_visits() -> list[Visit]:
    """All open visits with member and locality, oldest first."""
    return list(
        Visit.objects.open()
        .select_related("member", "locality")
        .order_by("start_date")
    )


def free_localities() -> list[Locality]:
    """Active localities without an open visit."""
    return list(
        Locality.objects.active()
        .exclude(pk__in=Visit.objects.open().values("locality_id"))
        .order_by("name")
    )


def visits_for_member(member, limit: int = 50) -> list[Visit]:
    """A member's visits, most recent first."""
    qs = (
        Visit.objects.filter(member_id=pk_of(member))
        .select_related("locality")
        .order_by("-start_date")
    )
    return list(qs[:limit])


def catches_for_visit(visit) -> list[Catch]:
    """Catches of a visit in the order they were hunted."""
    return list(
        Catch.objects.filter(visit_id=pk_of(visit))
        .select_related("species", "hunting_locality")
        .order_by("hunted_at")
    )


def get_active_season() -> HuntingSeason | None:
    return HuntingSeason.objects.filter(is_active=True).first()


def bookings_in_range(start, end, cabin=None) -> list[CabinBooking]:
    """Confirmed bookings with any point inside [start, end].

    Both bounds are inclusive, so a booking ending exactly at ``start`` is
    listed. This is a calendar query, not the overlap rule used to reject
    bookings.

    Args:
        start: Window start
        end: Window end
        cabin: Optional Cabin (or pk) to restrict to

    Returns:
        List of CabinBooking ordered by start_at
    """
    qs = CabinBooking.objects.confirmed().touching(start, end)
    if cabin is not None:
        qs = qs.filter(cabin_id=pk_of(cabin))
    return list(qs.select_related("cabin", "member").order_by("start_at"))
