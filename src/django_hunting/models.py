"""Models for django-hunting.

Key invariants (enforced by services, backed by database constraints):
- One open visit per member (end_date IS NULL)
- One open visit per locality (end_date IS NULL)
- One active hunting season
- One harvest plan item per (season, species)
- Confirmed bookings of a cabin never overlap (PostgreSQL exclusion constraint,
  see migration 0002)

Mutate these models through ``django_hunting.services`` only. Direct updates
bypass the checks that keep the invariants centralized.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q

from .intervals import overlap_q


class HuntingBaseModel(models.Model):
    """Base model with UUID PK and timestamps."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ActiveQuerySet(models.QuerySet):
    """Queryset for models soft-deactivated through an is_active flag."""

    def active(self):
        return self.filter(is_active=True)


class Member(HuntingBaseModel):
    """A member of the hunting association."""

    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        MEMBER = "member", "Member"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="hunting_member",
    )
    display_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.MEMBER)
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ["display_name"]

    def __str__(self):
        return self.display_name

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN


class Locality(HuntingBaseModel):
    """A hunting locality. At most one open visit may target it."""

    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "localities"

    def __str__(self):
        return self.name


class Species(HuntingBaseModel):
    """Game species. The requires_* flags make catch fields mandatory."""

    name = models.CharField(max_length=100, unique=True)
    requires_age = models.BooleanField(default=False)
    requires_sex = models.BooleanField(default=False)
    requires_tag = models.BooleanField(default=False)
    requires_weight = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "species"

    def __str__(self):
        return self.name

    @property
    def required_fields(self) -> list[str]:
        """Catch field names this species makes mandatory."""
        flags = [
            ("age", self.requires_age),
            ("sex", self.requires_sex),
            ("tag_number", self.requires_tag),
            ("weight", self.requires_weight),
        ]
        return [name for name, required in flags if required]


class VisitQuerySet(models.QuerySet):
    def open(self):
        return self.filter(end_date__isnull=True)

    def closed(self):
        return self.filter(end_date__isnull=False)


class Visit(HuntingBaseModel):
    """
    A time-bounded occupation of one locality by one member.

    Lifecycle: OPEN (end_date is null) -> CLOSED (end_date set, irreversible).
    """

    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="visits")
    locality = models.ForeignKey(Locality, on_delete=models.PROTECT, related_name="visits")
    start_date = models.DateTimeField(db_index=True)
    end_date = models.DateTimeField(null=True, blank=True)

    has_guest = models.BooleanField(default=False)
    guest_name = models.CharField(max_length=100, blank=True)
    guest_note = models.CharField(max_length=500, blank=True)
    note = models.CharField(max_length=1000, blank=True)

    objects = VisitQuerySet.as_manager()

    class Meta:
        ordering = ["-start_date"]
        indexes = [
            models.Index(fields=["member", "end_date"], name="hunting_visit_member_end_idx"),
            models.Index(fields=["locality", "end_date"], name="hunting_visit_locality_end_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["member"],
                condition=Q(end_date__isnull=True),
                name="hunting_visit_one_open_per_member",
            ),
            models.UniqueConstraint(
                fields=["locality"],
                condition=Q(end_date__isnull=True),
                name="hunting_visit_one_open_per_locality",
            ),
            models.CheckConstraint(
                condition=Q(end_date__isnull=True) | Q(end_date__gte=models.F("start_date")),
                name="hunting_visit_end_after_start",
            ),
        ]

    def __str__(self):
        status = "open" if self.is_open else "closed"
        return f"Visit({self.member}, {self.locality}, {status})"

    @property
    def is_open(self) -> bool:
        return self.end_date is None


class Catch(HuntingBaseModel):
    """A single recorded kill, attributed to a visit and a species."""

    class Sex(models.TextChoices):
        MALE = "male", "Male"
        FEMALE = "female", "Female"
        UNKNOWN = "unknown", "Unknown"

    class ShooterType(models.TextChoices):
        MEMBER = "member", "Member"
        GUEST = "guest", "Guest"

    visit = models.ForeignKey(Visit, on_delete=models.CASCADE, related_name="catches")
    species = models.ForeignKey(Species, on_delete=models.PROTECT, related_name="catches")
    hunting_locality = models.ForeignKey(
        Locality,
        on_delete=models.PROTECT,
        related_name="catches",
        help_text="Where the animal was taken; defaults to the visit locality",
    )
    hunted_at = models.DateTimeField(db_index=True)

    sex = models.CharField(max_length=10, choices=Sex.choices, default=Sex.UNKNOWN)
    age = models.CharField(max_length=50, blank=True)
    weight = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True)
    tag_number = models.CharField(max_length=50, blank=True)

    shooter_type = models.CharField(
        max_length=10,
        choices=ShooterType.choices,
        default=ShooterType.MEMBER,
    )
    guest_shooter_name = models.CharField(max_length=100, blank=True)
    note = models.CharField(max_length=1000, blank=True)

    class Meta:
        ordering = ["-hunted_at"]
        verbose_name_plural = "catches"
        indexes = [
            models.Index(fields=["species", "hunted_at"], name="hunting_catch_species_at_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(weight__isnull=True) | Q(weight__gte=0),
                name="hunting_catch_weight_not_negative",
            ),
        ]

    def __str__(self):
        return f"{self.species} @ {self.hunted_at:%Y-%m-%d %H:%M}"


class HuntingSeason(HuntingBaseModel):
    """A hunting season bounding the harvest report's date window (inclusive)."""

    name = models.CharField(max_length=50, unique=True)
    date_from = models.DateField()
    date_to = models.DateField()
    is_active = models.BooleanField(default=False)

    class Meta:
        ordering = ["-date_from"]
        constraints = [
            models.UniqueConstraint(
                fields=["is_active"],
                condition=Q(is_active=True),
                name="hunting_season_one_active",
            ),
            models.CheckConstraint(
                condition=Q(date_to__gte=models.F("date_from")),
                name="hunting_season_dates_ordered",
            ),
        ]

    def __str__(self):
        return self.name


class HarvestPlanItem(HuntingBaseModel):
    """Planned kill count for one species in one season.

    Taken/remaining/percentage are computed by the harvest report, never stored.
    """

    season = models.ForeignKey(
        HuntingSeason,
        on_delete=models.CASCADE,
        related_name="plan_items",
    )
    species = models.ForeignKey(Species, on_delete=models.PROTECT, related_name="plan_items")
    planned_count = models.PositiveIntegerField()
    note = models.CharField(max_length=500, blank=True)

    class Meta:
        ordering = ["species__name"]
        constraints = [
            models.UniqueConstraint(
                fields=["season", "species"],
                name="hunting_plan_item_unique_season_species",
            ),
        ]

    def __str__(self):
        return f"{self.season}: {self.species} x{self.planned_count}"


class Cabin(HuntingBaseModel):
    name = models.CharField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True, db_index=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class CabinBookingQuerySet(models.QuerySet):
    def confirmed(self):
        return self.filter(status=CabinBooking.Status.CONFIRMED)

    def overlapping(self, start, end):
        """Bookings whose [start_at, end_at) range intersects [start, end)."""
        return self.filter(overlap_q(start, end))

    def touching(self, start, end):
        """Bookings with any point inside the closed window [start, end]."""
        return self.filter(start_at__lte=end, end_at__gte=start)


class CabinBooking(HuntingBaseModel):
    """A reservation of a cabin.

    Lifecycle: CONFIRMED -> CANCELLED (terminal). Hard delete is a separate,
    explicit operation.
    """

    class Status(models.TextChoices):
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"

    cabin = models.ForeignKey(Cabin, on_delete=models.PROTECT, related_name="bookings")
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="cabin_bookings")
    start_at = models.DateTimeField()
    end_at = models.DateTimeField()
    title = models.CharField(max_length=100, blank=True)
    note = models.CharField(max_length=1000, blank=True)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.CONFIRMED,
        db_index=True,
    )

    objects = CabinBookingQuerySet.as_manager()

    class Meta:
        ordering = ["start_at"]
        indexes = [
            models.Index(fields=["cabin", "status", "start_at"], name="hunting_booking_cabin_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_at__gte=models.F("start_at")),
                name="hunting_booking_end_after_start",
            ),
        ]

    def __str__(self):
        return f"{self.cabin}: {self.start_at:%Y-%m-%d} - {self.end_at:%Y-%m-%d} ({self.status})"

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.Status.CANCELLED


class AuditEntry(models.Model):
    """Append-only audit record of a hunting-ground write.

    No soft delete - audit entries are immutable records.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    action = models.CharField(max_length=50, db_index=True)
    model_label = models.CharField(max_length=100, blank=True)
    object_id = models.CharField(max_length=255, blank=True, db_index=True)
    object_repr = models.CharField(max_length=200, blank=True)
    actor = models.ForeignKey(
        Member,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    actor_display = models.CharField(max_length=200, blank=True)
    changes = models.JSONField(default=dict, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "audit entries"

    def __str__(self):
        return f"{self.action} {self.model_label}:{self.object_id}"
