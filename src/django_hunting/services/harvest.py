"""Harvest plan services.

Provides:
- compute_harvest_report: Planned vs. taken vs. remaining per species
- upsert_plan_item: Create or overwrite the plan for a (season, species) pair
- delete_plan_item: Remove a plan item
- get_active_season_report: Report for the active season, if any

The report is a pure read-side projection of the catch ledger. It is
recomputed on every call and nothing derived from it is stored.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from django.db import transaction
from django.db.models import Count

from ..audit import Actions, log_event
from ..exceptions import Invalid, PlanItemNotFound, SeasonNotFound, SpeciesNotFound
from ..models import Catch, HarvestPlanItem, HuntingSeason, Species
from ._helpers import pk_of

logger = logging.getLogger(__name__)


@dataclass
class HarvestReportItem:
    """Quota figures for one species in a season."""

    species_id: object
    species_name: str
    planned_count: int
    taken_count: int
    remaining_count: int
    percentage: int
    exceeded: bool
    note: str = ""

    def as_dict(self) -> dict:
        return {
            "speciesId": str(self.species_id),
            "speciesName": self.species_name,
            "plannedCount": self.planned_count,
            "takenCount": self.taken_count,
            "remainingCount": self.remaining_count,
            "percentage": self.percentage,
            "exceeded": self.exceeded,
            "note": self.note or None,
        }


@dataclass
class HarvestReport:
    season_id: object
    season_name: str
    date_from: date
    date_to: date
    items: list[HarvestReportItem] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "seasonId": str(self.season_id),
            "items": [item.as_dict() for item in self.items],
        }

    def item_for(self, species) -> HarvestReportItem | None:
        species_pk = pk_of(species)
        for item in self.items:
            if item.species_id == species_pk:
                return item
        return None


def quota_percentage(taken: int, planned: int) -> int:
    """Percentage of the plan taken, rounded half up; 0 when nothing is planned."""
    if planned <= 0:
        return 0
    return (200 * taken + planned) // (2 * planned)


def _get_season(season) -> HuntingSeason:
    pk = pk_of(season)
    found = HuntingSeason.objects.filter(pk=pk).first()
    if found is None:
        raise SeasonNotFound(pk)
    return found


def taken_counts(date_from: date, date_to: date) -> dict:
    """Count catches per species hunted within [date_from, date_to] (local dates)."""
    rows = (
        Catch.objects.filter(
            hunted_at__date__gte=date_from,
            hunted_at__date__lte=date_to,
        )
        .values("species_id")
        .annotate(taken=Count("id"))
        .order_by()
    )
    return {row["species_id"]: row["taken"] for row in rows}


def compute_harvest_report(season) -> HarvestReport:
    """
    Compute the harvest report for a season.

    Args:
        season: HuntingSeason (or pk)

    Returns:
        HarvestReport with one item per plan item of the season

    Raises:
        SeasonNotFound: If the season does not exist
    """
    season = _get_season(season)
    taken_by_species = taken_counts(season.date_from, season.date_to)

    report = HarvestReport(
        season_id=season.pk,
        season_name=season.name,
        date_from=season.date_from,
        date_to=season.date_to,
    )
    for plan_item in season.plan_items.select_related("species"):
        taken = taken_by_species.get(plan_item.species_id, 0)
        planned = plan_item.planned_count
        report.items.append(
            HarvestReportItem(
                species_id=plan_item.species_id,
                species_name=plan_item.species.name,
                planned_count=planned,
                taken_count=taken,
                remaining_count=planned - taken,
                percentage=quota_percentage(taken, planned),
                exceeded=taken >= planned,
                note=plan_item.note,
            )
        )
    return report


def get_active_season_report() -> HarvestReport | None:
    season = HuntingSeason.objects.filter(is_active=True).first()
    if season is None:
        return None
    return compute_harvest_report(season)


@transaction.atomic
def upsert_plan_item(season, species, planned_count: int, note: str | None = None) -> HarvestPlanItem:
    """
    Create or overwrite the plan item for (season, species).

    A note of None keeps the stored note.

    Raises:
        SeasonNotFound: If the season does not exist
        SpeciesNotFound: If the species does not exist
        Invalid: If planned_count is negative
    """
    season = _get_season(season)

    species_pk = pk_of(species)
    species = Species.objects.filter(pk=species_pk).first()
    if species is None:
        raise SpeciesNotFound(species_pk)

    if planned_count < 0:
        raise Invalid("Planned count cannot be negative")

    defaults = {"planned_count": planned_count}
    if note is not None:
        defaults["note"] = note

    item, created = HarvestPlanItem.objects.update_or_create(
        season=season,
        species=species,
        defaults=defaults,
    )

    log_event(
        action=Actions.PLAN_ITEM_UPSERTED,
        target=item,
        data={"created": created, "planned_count": planned_count},
    )
    logger.info(
        "Harvest plan %s: %s set to %d (%s)",
        season, species, planned_count, "created" if created else "updated",
    )
    return item


@transaction.atomic
def delete_plan_item(season, item_id) -> None:
    """
    Delete a plan item of a season.

    Raises:
        PlanItemNotFound: If no such item exists in the season
    """
    item = HarvestPlanItem.objects.filter(pk=item_id, season_id=pk_of(season)).first()
    if item is None:
        raise PlanItemNotFound(item_id)

    log_event(action=Actions.PLAN_ITEM_DELETED, target=item)
    item.delete()
