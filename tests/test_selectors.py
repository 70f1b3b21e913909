"""Tests for read-side selectors."""

import pytest
from freezegun import freeze_time

from django_hunting.selectors import (
    catches_for_visit,
    free_localities,
    get_active_season,
    get_active_visit,
    get_locality_occupant,
    open_visits,
    visits_for_member,
)
from django_hunting.services import CatchFields, close_visit, open_visit, record_catch
from tests.helpers import aware


@pytest.mark.django_db
class TestVisitSelectors:
    def test_active_visit_and_occupant(self, member, locality):
        visit = open_visit(member, locality, aware(2024, 10, 1, 9))

        assert get_active_visit(member) == visit
        assert get_locality_occupant(locality) == visit
        assert open_visits() == [visit]

    def test_nothing_after_close(self, member, locality):
        visit = open_visit(member, locality, aware(2024, 10, 1, 9))
        with freeze_time("2024-10-01 12:00:00"):
            close_visit(visit, aware(2024, 10, 1, 11), member)

        assert get_active_visit(member) is None
        assert get_locality_occupant(locality) is None
        assert visits_for_member(member) == [visit]

    def test_free_localities(self, member, locality, other_locality):
        open_visit(member, locality, aware(2024, 10, 1, 9))

        assert free_localities() == [other_locality]

    def test_catches_in_hunted_order(self, member, locality, species):
        visit = open_visit(member, locality, aware(2024, 10, 1, 6))
        late = record_catch(visit, CatchFields(species=species, hunted_at=aware(2024, 10, 1, 9)), member)
        early = record_catch(visit, CatchFields(species=species, hunted_at=aware(2024, 10, 1, 7)), member)

        assert catches_for_visit(visit) == [early, late]

    def test_active_season(self, season):
        assert get_active_season() == season
