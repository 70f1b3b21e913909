"""Tests for django-hunting models and database constraints."""

from datetime import date
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from django_hunting.models import (
    CabinBooking,
    Catch,
    HarvestPlanItem,
    HuntingSeason,
    Locality,
    Species,
    Visit,
)
from tests.helpers import aware


@pytest.mark.django_db
class TestSpecies:
    def test_required_fields_follow_flags(self):
        species = Species.objects.create(
            name="Wild boar", requires_age=True, requires_tag=True, requires_weight=True
        )
        assert species.required_fields == ["age", "tag_number", "weight"]

    def test_no_flags_no_required_fields(self, species):
        assert species.required_fields == []


@pytest.mark.django_db
class TestActiveQuerySet:
    def test_active_excludes_deactivated(self, locality, other_locality):
        other_locality.is_active = False
        other_locality.save()

        assert list(Locality.objects.active()) == [locality]


@pytest.mark.django_db
class TestVisitConstraints:
    """Database backstops for the open-visit invariants."""

    def test_second_open_visit_for_member_rejected(self, member, locality, other_locality):
        Visit.objects.create(member=member, locality=locality, start_date=aware(2024, 10, 1, 6))

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Visit.objects.create(
                    member=member, locality=other_locality, start_date=aware(2024, 10, 1, 7)
                )

    def test_second_open_visit_for_locality_rejected(self, member, other_member, locality):
        Visit.objects.create(member=member, locality=locality, start_date=aware(2024, 10, 1, 6))

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Visit.objects.create(
                    member=other_member, locality=locality, start_date=aware(2024, 10, 1, 7)
                )

    def test_closed_visits_do_not_count(self, member, locality):
        Visit.objects.create(
            member=member,
            locality=locality,
            start_date=aware(2024, 10, 1, 6),
            end_date=aware(2024, 10, 1, 9),
        )
        visit = Visit.objects.create(member=member, locality=locality, start_date=aware(2024, 10, 2, 6))

        assert visit.is_open
        assert Visit.objects.open().count() == 1
        assert Visit.objects.closed().count() == 1

    def test_end_before_start_rejected(self, member, locality):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Visit.objects.create(
                    member=member,
                    locality=locality,
                    start_date=aware(2024, 10, 1, 6),
                    end_date=aware(2024, 10, 1, 5),
                )


@pytest.mark.django_db
class TestCatchConstraints:
    def test_negative_weight_rejected(self, member, locality, species):
        visit = Visit.objects.create(member=member, locality=locality, start_date=aware(2024, 10, 1, 6))

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                Catch.objects.create(
                    visit=visit,
                    species=species,
                    hunting_locality=locality,
                    hunted_at=aware(2024, 10, 1, 7),
                    weight=Decimal("-1"),
                )

    def test_defaults(self, member, locality, species):
        visit = Visit.objects.create(member=member, locality=locality, start_date=aware(2024, 10, 1, 6))
        catch = Catch.objects.create(
            visit=visit, species=species, hunting_locality=locality, hunted_at=aware(2024, 10, 1, 7)
        )

        assert catch.sex == Catch.Sex.UNKNOWN
        assert catch.shooter_type == Catch.ShooterType.MEMBER
        assert catch.weight is None


@pytest.mark.django_db
class TestSeasonConstraints:
    def test_two_active_seasons_rejected(self, season):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                HuntingSeason.objects.create(
                    name="2025/26",
                    date_from=date(2025, 4, 1),
                    date_to=date(2026, 3, 31),
                    is_active=True,
                )

    def test_many_inactive_seasons_allowed(self):
        HuntingSeason.objects.create(name="A", date_from=date(2020, 1, 1), date_to=date(2020, 12, 31))
        HuntingSeason.objects.create(name="B", date_from=date(2021, 1, 1), date_to=date(2021, 12, 31))

        assert HuntingSeason.objects.filter(is_active=False).count() == 2

    def test_date_to_before_date_from_rejected(self):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                HuntingSeason.objects.create(
                    name="Broken", date_from=date(2024, 5, 1), date_to=date(2024, 4, 1)
                )

    def test_plan_item_unique_per_species(self, season, species):
        HarvestPlanItem.objects.create(season=season, species=species, planned_count=3)

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                HarvestPlanItem.objects.create(season=season, species=species, planned_count=5)


@pytest.mark.django_db
class TestCabinBookingQuerySet:
    def _book(self, cabin, member, start, end, status=CabinBooking.Status.CONFIRMED):
        return CabinBooking.objects.create(
            cabin=cabin, member=member, start_at=start, end_at=end, status=status
        )

    def test_overlapping_uses_strict_bounds(self, cabin, member):
        booking = self._book(cabin, member, aware(2024, 11, 1, 12), aware(2024, 11, 3, 12))

        assert list(CabinBooking.objects.overlapping(aware(2024, 11, 2), aware(2024, 11, 4))) == [booking]
        assert not CabinBooking.objects.overlapping(aware(2024, 11, 3, 12), aware(2024, 11, 5)).exists()
        assert not CabinBooking.objects.overlapping(aware(2024, 10, 30), aware(2024, 11, 1, 12)).exists()

    def test_touching_uses_inclusive_bounds(self, cabin, member):
        booking = self._book(cabin, member, aware(2024, 11, 1, 12), aware(2024, 11, 3, 12))

        assert list(CabinBooking.objects.touching(aware(2024, 11, 3, 12), aware(2024, 11, 5))) == [booking]

    def test_confirmed_excludes_cancelled(self, cabin, member):
        self._book(
            cabin, member, aware(2024, 11, 1), aware(2024, 11, 2), status=CabinBooking.Status.CANCELLED
        )

        assert not CabinBooking.objects.confirmed().exists()

    def test_end_before_start_rejected(self, cabin, member):
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                self._book(cabin, member, aware(2024, 11, 2), aware(2024, 11, 1))
