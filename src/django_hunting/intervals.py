"""Interval overlap rule shared by locality occupancy and cabin bookings.

Two ranges [A, B) and [C, D) overlap if A < D and C < B. A missing end is
treated as infinity, which is how an open visit occupies its locality.

Touching ranges (C == B) do not overlap, so back-to-back cabin bookings that
share a boundary are allowed. Zero-length ranges go through the same
inequality: a stay that starts and ends on the same instant still conflicts with
a booking that strictly contains it.
"""

from django.db.models import Q


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Return True iff [a_start, a_end) and [b_start, b_end) intersect.

    ``a_end`` or ``b_end`` may be None for an unbounded range.
    """
    a_before_b_ends = b_end is None or a_start < b_end
    b_before_a_ends = a_end is None or b_start < a_end
    return a_before_b_ends and b_before_a_ends


def overlap_q(start, end, start_field: str = "start_at", end_field: str = "end_at") -> Q:
    """Build a filter matching rows whose range overlaps [start, end).

    Same rule as :func:`overlaps`, with a NULL ``end_field`` treated as
    infinity and ``end=None`` meaning the probe range is unbounded.
    """
    # Other range must end after this one starts (or have no end)
    q = Q(**{f"{end_field}__isnull": True}) | Q(**{f"{end_field}__gt": start})
    # Other range must start before this one ends
    if end is not None:
        q &= Q(**{f"{start_field}__lt": end})
    return q
