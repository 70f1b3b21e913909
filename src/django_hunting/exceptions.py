"""Custom exceptions for django-hunting.

Every error is raised before any write happens. Callers map the ``kind`` of an
exception (not_found, forbidden, conflict, invalid, immutable) to their own
response codes.
"""


class HuntingError(Exception):
    """Base exception for hunting-ground errors."""

    kind = "error"


# =============================================================================
# Kinds
# =============================================================================


class NotFound(HuntingError):
    """Referenced entity does not exist."""

    kind = "not_found"


class Forbidden(HuntingError):
    """Actor lacks ownership or admin rights for the operation."""

    kind = "forbidden"

    def __init__(self, reason: str = "Not allowed to modify a record owned by another member"):
        self.reason = reason
        super().__init__(reason)


class Conflict(HuntingError):
    """A uniqueness or exclusivity invariant would be violated."""

    kind = "conflict"


class Invalid(HuntingError):
    """Input is malformed or violates a policy."""

    kind = "invalid"


class Immutable(HuntingError):
    """Operation is blocked by the current state of the record."""

    kind = "immutable"


# =============================================================================
# Not found
# =============================================================================


class _EntityNotFound(NotFound):
    entity = "Record"

    def __init__(self, pk):
        self.pk = pk
        super().__init__(f"{self.entity} '{pk}' not found")


class VisitNotFound(_EntityNotFound):
    entity = "Visit"


class CatchNotFound(_EntityNotFound):
    entity = "Catch"


class BookingNotFound(_EntityNotFound):
    entity = "Cabin booking"


class SeasonNotFound(_EntityNotFound):
    entity = "Hunting season"


class SpeciesNotFound(_EntityNotFound):
    entity = "Species"


class PlanItemNotFound(_EntityNotFound):
    entity = "Harvest plan item"


# =============================================================================
# Conflict
# =============================================================================


class LocalityOccupied(Conflict):
    """Another open visit already targets the locality."""

    def __init__(self, locality, occupant_name: str = ""):
        self.locality = locality
        self.occupant_name = occupant_name
        message = f"Locality '{locality}' is occupied"
        if occupant_name:
            message += f" by {occupant_name}"
        super().__init__(message)


class MemberHasActiveVisit(Conflict):
    """The member already has an open visit."""

    def __init__(self, member):
        self.member = member
        super().__init__(f"Member '{member}' already has an open visit")


class BookingConflict(Conflict):
    """A confirmed booking of the same cabin overlaps the requested range."""

    def __init__(self, conflicting_member_name: str = ""):
        self.conflicting_member_name = conflicting_member_name
        message = "Cabin is already booked for the selected time"
        if conflicting_member_name:
            message += f" ({conflicting_member_name})"
        super().__init__(message)


class DuplicateSeasonName(Conflict):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Hunting season '{name}' already exists")


class SeasonHasPlanItems(Conflict):
    def __init__(self, season):
        self.season = season
        super().__init__(f"Hunting season '{season}' still has harvest plan items")


class SeasonAlreadyActive(Conflict):
    """Another season was activated concurrently."""

    def __init__(self, season):
        self.season = season
        super().__init__(f"Cannot activate '{season}': another season is already active")


# =============================================================================
# Invalid
# =============================================================================


class LocalityInactive(Invalid):
    """Locality does not exist or is inactive."""

    def __init__(self, locality_id):
        self.locality_id = locality_id
        super().__init__(f"Locality '{locality_id}' does not exist or is not active")


class MemberInactive(Invalid):
    def __init__(self, member_id):
        self.member_id = member_id
        super().__init__(f"Member '{member_id}' does not exist or is not active")


class InvalidEndDate(Invalid):
    def __init__(self, end_date, reason: str):
        self.end_date = end_date
        self.reason = reason
        super().__init__(f"Invalid end date {end_date.isoformat()}: {reason}")


class CatchesOutsideRange(Invalid):
    """Closing the visit would leave recorded catches after its end."""

    def __init__(self, end_date, catch_ids: list):
        self.end_date = end_date
        self.catch_ids = catch_ids
        super().__init__(
            f"{len(catch_ids)} catch(es) were hunted after {end_date.isoformat()}"
        )


class SpeciesInactiveOrMissing(Invalid):
    def __init__(self, species_id):
        self.species_id = species_id
        super().__init__(f"Species '{species_id}' does not exist or is not active")


class MissingRequiredField(Invalid):
    """A field the species requires is absent, blank or unknown."""

    def __init__(self, field_name: str, species_name: str = ""):
        self.field_name = field_name
        self.species_name = species_name
        message = f"Field '{field_name}' is required"
        if species_name:
            message += f" for species '{species_name}'"
        super().__init__(message)


class InvalidChoice(Invalid):
    def __init__(self, field_name: str, value):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid value '{value}' for field '{field_name}'")


class GuestShooterInvalid(Invalid):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid guest shooter: {reason}")


class HuntedAtOutOfRange(Invalid):
    """Hunted time falls outside the visit window."""

    def __init__(self, hunted_at, start_date, end_date=None):
        self.hunted_at = hunted_at
        self.start_date = start_date
        self.end_date = end_date
        window_end = end_date.isoformat() if end_date else "open"
        super().__init__(
            f"Hunted time {hunted_at.isoformat()} is outside the visit window "
            f"[{start_date.isoformat()}, {window_end}]"
        )


class InvalidRange(Invalid):
    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"End {end} is before start {start}")


class CabinInactiveOrMissing(Invalid):
    def __init__(self, cabin_id):
        self.cabin_id = cabin_id
        super().__init__(f"Cabin '{cabin_id}' does not exist or is not active")


# =============================================================================
# Immutable
# =============================================================================


class AlreadyClosed(Immutable):
    def __init__(self, visit_id):
        self.visit_id = visit_id
        super().__init__(f"Visit '{visit_id}' is already closed")


class ClosedVisitImmutable(Immutable):
    """Non-admins cannot change a closed visit or its catches."""

    def __init__(self, visit_id):
        self.visit_id = visit_id
        super().__init__(f"Visit '{visit_id}' is closed and can only be changed by an admin")


class CancelledImmutable(Immutable):
    def __init__(self, booking_id):
        self.booking_id = booking_id
        super().__init__(f"Cabin booking '{booking_id}' is cancelled and cannot be changed")


class AlreadyCancelled(Immutable):
    def __init__(self, booking_id):
        self.booking_id = booking_id
        super().__init__(f"Cabin booking '{booking_id}' is already cancelled")
