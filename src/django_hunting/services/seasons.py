"""Hunting season services.

At most one season is active. Activating a season deactivates the others in
the same transaction; the partial unique constraint on is_active backs this up.
Season management is admin-only; callers check ``permissions.require_admin``.
"""

import logging

from django.db import IntegrityError, transaction

from ..audit import Actions, log_event
from ..exceptions import (
    DuplicateSeasonName,
    InvalidRange,
    SeasonAlreadyActive,
    SeasonHasPlanItems,
    SeasonNotFound,
)
from ..models import HuntingSeason
from ._helpers import UNSET, apply_tracked_update, pk_of, violates

logger = logging.getLogger(__name__)


def _deactivate_others(season_pk=None) -> None:
    active = HuntingSeason.objects.select_for_update().filter(is_active=True)
    if season_pk is not None:
        active = active.exclude(pk=season_pk)
    for other in active:
        other.is_active = False
        other.save(update_fields=["is_active", "updated_at"])
        logger.info("Season %s deactivated", other)


def _save_season(season: HuntingSeason, **save_kwargs) -> None:
    try:
        with transaction.atomic():
            season.save(**save_kwargs)
    except IntegrityError as e:
        if violates(e, "django_hunting_huntingseason_name_key", "django_hunting_huntingseason.name"):
            raise DuplicateSeasonName(season.name) from e
        if violates(e, "hunting_season_one_active", "django_hunting_huntingseason.is_active"):
            raise SeasonAlreadyActive(season) from e
        raise


@transaction.atomic
def create_season(name: str, date_from, date_to, *, is_active: bool = False) -> HuntingSeason:
    """
    Create a hunting season.

    Raises:
        DuplicateSeasonName: If a season with this name exists
        InvalidRange: If date_to is before date_from
        SeasonAlreadyActive: If another season was activated concurrently
    """
    name = name.strip()
    if HuntingSeason.objects.filter(name=name).exists():
        raise DuplicateSeasonName(name)
    if date_to < date_from:
        raise InvalidRange(date_from, date_to)

    if is_active:
        _deactivate_others()

    season = HuntingSeason(name=name, date_from=date_from, date_to=date_to, is_active=is_active)
    _save_season(season)

    log_event(action=Actions.SEASON_CREATED, target=season, data={"is_active": is_active})
    return season


@transaction.atomic
def update_season(
    season,
    *,
    name=UNSET,
    date_from=UNSET,
    date_to=UNSET,
    is_active=UNSET,
) -> HuntingSeason:
    """
    Update a hunting season.

    Raises:
        SeasonNotFound, DuplicateSeasonName, InvalidRange, SeasonAlreadyActive
    """
    pk = pk_of(season)
    season = HuntingSeason.objects.select_for_update().filter(pk=pk).first()
    if season is None:
        raise SeasonNotFound(pk)

    if name is not UNSET:
        name = name.strip()
        if HuntingSeason.objects.filter(name=name).exclude(pk=season.pk).exists():
            raise DuplicateSeasonName(name)

    new_from = season.date_from if date_from is UNSET else date_from
    new_to = season.date_to if date_to is UNSET else date_to
    if new_to < new_from:
        raise InvalidRange(new_from, new_to)

    if is_active is True and not season.is_active:
        _deactivate_others(season.pk)

    changes = {}
    apply_tracked_update(season, "name", name, changes)
    apply_tracked_update(season, "date_from", date_from, changes)
    apply_tracked_update(season, "date_to", date_to, changes)
    apply_tracked_update(season, "is_active", is_active, changes)

    if changes:
        _save_season(season)
        log_event(action=Actions.SEASON_UPDATED, target=season, changes=changes)

    return season


@transaction.atomic
def delete_season(season) -> None:
    """
    Delete a season that has no harvest plan items.

    Raises:
        SeasonNotFound, SeasonHasPlanItems
    """
    pk = pk_of(season)
    season = HuntingSeason.objects.select_for_update().filter(pk=pk).first()
    if season is None:
        raise SeasonNotFound(pk)
    if season.plan_items.exists():
        raise SeasonHasPlanItems(season)

    log_event(action=Actions.SEASON_DELETED, target=season)
    season.delete()
