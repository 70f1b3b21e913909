"""Tests for hunting season services."""

import uuid
from datetime import date

import pytest

from django_hunting.exceptions import (
    DuplicateSeasonName,
    InvalidRange,
    SeasonAlreadyActive,
    SeasonHasPlanItems,
    SeasonNotFound,
)
from django_hunting.models import HuntingSeason
from django_hunting.services import (
    create_season,
    delete_season,
    update_season,
    upsert_plan_item,
)


@pytest.mark.django_db
class TestCreateSeason:
    def test_create_inactive_season(self):
        season = create_season("2025/26", date(2025, 4, 1), date(2026, 3, 31))

        assert season.is_active is False

    def test_name_is_stripped(self):
        season = create_season("  2025/26 ", date(2025, 4, 1), date(2026, 3, 31))

        assert season.name == "2025/26"

    def test_duplicate_name_rejected(self, season):
        with pytest.raises(DuplicateSeasonName):
            create_season("2024/25", date(2024, 4, 1), date(2025, 3, 31))

    def test_reversed_dates_rejected(self):
        with pytest.raises(InvalidRange):
            create_season("Broken", date(2025, 4, 1), date(2025, 3, 31))

    def test_single_day_season_allowed(self):
        season = create_season("Opening day", date(2025, 9, 1), date(2025, 9, 1))

        assert season.date_from == season.date_to

    def test_activating_deactivates_previous(self, season):
        new = create_season("2025/26", date(2025, 4, 1), date(2026, 3, 31), is_active=True)

        season.refresh_from_db()
        assert season.is_active is False
        assert new.is_active is True
        assert HuntingSeason.objects.filter(is_active=True).count() == 1


@pytest.mark.django_db
class TestUpdateSeason:
    def test_rename(self, season):
        updated = update_season(season, name="2024/2025")

        assert updated.name == "2024/2025"

    def test_rename_to_existing_name_rejected(self, season):
        create_season("2025/26", date(2025, 4, 1), date(2026, 3, 31))

        with pytest.raises(DuplicateSeasonName):
            update_season(season, name="2025/26")

    def test_keeping_own_name_allowed(self, season):
        updated = update_season(season, name="2024/25", date_to=date(2025, 4, 30))

        assert updated.date_to == date(2025, 4, 30)

    def test_dates_checked_against_stored_values(self, season):
        with pytest.raises(InvalidRange):
            update_season(season, date_to=date(2024, 3, 1))

    def test_activate_keeps_single_active(self, season):
        old = create_season("2023/24", date(2023, 4, 1), date(2024, 3, 31))

        update_season(old, is_active=True)

        season.refresh_from_db()
        old.refresh_from_db()
        assert old.is_active is True
        assert season.is_active is False

    def test_any_sequence_leaves_at_most_one_active(self, season):
        a = create_season("A", date(2020, 1, 1), date(2020, 12, 31), is_active=True)
        b = create_season("B", date(2021, 1, 1), date(2021, 12, 31))
        update_season(b, is_active=True)
        update_season(a, is_active=True)
        update_season(a, is_active=False)
        create_season("C", date(2022, 1, 1), date(2022, 12, 31), is_active=True)

        assert HuntingSeason.objects.filter(is_active=True).count() == 1

    def test_concurrent_activation_maps_to_conflict(self, season, monkeypatch):
        """The partial unique index rejects a second active season the lock missed."""
        other = create_season("2023/24", date(2023, 4, 1), date(2024, 3, 31))
        monkeypatch.setattr("django_hunting.services.seasons._deactivate_others", lambda *args: None)

        with pytest.raises(SeasonAlreadyActive):
            update_season(other, is_active=True)

        assert HuntingSeason.objects.filter(is_active=True).get() == season

    def test_missing_season(self):
        with pytest.raises(SeasonNotFound):
            update_season(uuid.uuid4(), name="Ghost")


@pytest.mark.django_db
class TestDeleteSeason:
    def test_delete_empty_season(self, season):
        delete_season(season)

        assert not HuntingSeason.objects.exists()

    def test_season_with_plan_items_kept(self, season, species):
        upsert_plan_item(season, species, 3)

        with pytest.raises(SeasonHasPlanItems):
            delete_season(season)

        assert HuntingSeason.objects.filter(pk=season.pk).exists()
