"""Pytest configuration for django-hunting tests."""

from datetime import date

import pytest
from django_hunting.models import Cabin, HuntingSeason, Locality, Member, Species


@pytest.fixture
def member(db, django_user_model):
    """Create a regular member linked to a user."""
    user = django_user_model.objects.create_user(username="novak", password="testpass123")
    return Member.objects.create(user=user, display_name="Jan Novak", email="novak@test.local")


@pytest.fixture
def other_member(db):
    """Create another regular member for multi-member tests."""
    return Member.objects.create(display_name="Petr Svoboda")


@pytest.fixture
def admin(db):
    """Create an admin member."""
    return Member.objects.create(display_name="Hunt Master", role=Member.Role.ADMIN)


@pytest.fixture
def locality(db):
    return Locality.objects.create(name="Oak Ridge")


@pytest.fixture
def other_locality(db):
    return Locality.objects.create(name="Beaver Pond")


@pytest.fixture
def species(db):
    """A species with no required fields."""
    return Species.objects.create(name="Fox")


@pytest.fixture
def roe_deer(db):
    """A species requiring sex and weight."""
    return Species.objects.create(name="Roe deer", requires_sex=True, requires_weight=True)


@pytest.fixture
def cabin(db):
    return Cabin.objects.create(name="Upper Cabin")


@pytest.fixture
def season(db):
    """The active 2024/25 season."""
    return HuntingSeason.objects.create(
        name="2024/25",
        date_from=date(2024, 4, 1),
        date_to=date(2025, 3, 31),
        is_active=True,
    )
