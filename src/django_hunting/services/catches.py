"""Catch recording services.

A catch has no lifecycle of its own. Its validity is re-derived from its
current species and visit on every write:
- every field the species requires is present (UNKNOWN sex and zero weight
  count as absent)
- hunted_at lies within [visit.start_date, visit.end_date or +inf]
- a guest shooter needs a visit with a guest and a resolvable guest name

Closed-visit immutability is a policy on top of these: only admins may change
or delete catches of a closed visit.
"""

import logging
from dataclasses import dataclass, fields as dataclass_fields, replace
from datetime import datetime
from decimal import Decimal

from django.db import transaction

from ..audit import Actions, log_event
from ..exceptions import (
    CatchNotFound,
    ClosedVisitImmutable,
    GuestShooterInvalid,
    HuntedAtOutOfRange,
    InvalidChoice,
    LocalityInactive,
    MissingRequiredField,
    SpeciesInactiveOrMissing,
    VisitNotFound,
)
from ..models import Catch, Locality, Species, Visit
from ..permissions import is_admin, require_owner_or_admin
from ._helpers import UNSET, apply_tracked_update, pk_of

logger = logging.getLogger(__name__)


@dataclass
class CatchFields:
    """Catch input. ``None`` means the field was not supplied.

    On update, supplied values replace stored ones and absent values keep the
    stored value. An empty string is a supplied value that clears the field;
    for sex and shooter_type it resets them to UNKNOWN and MEMBER.
    """

    species: object = None
    hunted_at: datetime | None = None
    sex: str | None = None
    age: str | None = None
    weight: Decimal | None = None
    tag_number: str | None = None
    shooter_type: str | None = None
    guest_shooter_name: str | None = None
    hunting_locality: object = None
    note: str | None = None

    def merged_with(self, catch: Catch) -> "CatchFields":
        """Return the effective field set: new value, else the stored one."""
        merged = {}
        for field in dataclass_fields(self):
            value = getattr(self, field.name)
            if value is None:
                value = getattr(catch, field.name)
            merged[field.name] = value
        return CatchFields(**merged)


def _is_absent(field_name: str, value) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    if field_name == "sex":
        return value == Catch.Sex.UNKNOWN
    if field_name == "weight":
        return value == 0
    return False


def _check_choices(values: CatchFields) -> None:
    if values.sex is not None and values.sex not in Catch.Sex.values:
        raise InvalidChoice("sex", values.sex)
    if values.shooter_type is not None and values.shooter_type not in Catch.ShooterType.values:
        raise InvalidChoice("shooter_type", values.shooter_type)


def validate_required_fields(species: Species, values: CatchFields) -> None:
    """Raise MissingRequiredField for the first field the species requires but lacks."""
    for field_name in species.required_fields:
        if _is_absent(field_name, getattr(values, field_name)):
            raise MissingRequiredField(field_name, species.name)


def _check_hunted_at(visit: Visit, hunted_at) -> None:
    if hunted_at < visit.start_date:
        raise HuntedAtOutOfRange(hunted_at, visit.start_date, visit.end_date)
    if visit.end_date is not None and hunted_at > visit.end_date:
        raise HuntedAtOutOfRange(hunted_at, visit.start_date, visit.end_date)


def _resolve_guest_shooter(visit: Visit, shooter_type, guest_shooter_name) -> str:
    """Return the guest shooter name to store, validating guest shooters."""
    if shooter_type != Catch.ShooterType.GUEST:
        return ""
    if not visit.has_guest:
        raise GuestShooterInvalid("the visit has no guest")
    name = (guest_shooter_name or "").strip() or visit.guest_name.strip()
    if not name:
        raise GuestShooterInvalid("guest name is required")
    return name


def _get_active_species(species) -> Species:
    pk = pk_of(species)
    found = Species.objects.filter(pk=pk).first() if pk is not None else None
    if found is None or not found.is_active:
        raise SpeciesInactiveOrMissing(pk)
    return found


def _get_active_locality(locality) -> Locality:
    pk = pk_of(locality)
    found = Locality.objects.filter(pk=pk).first()
    if found is None or not found.is_active:
        raise LocalityInactive(pk)
    return found


@transaction.atomic
def record_catch(visit, fields: CatchFields, actor) -> Catch:
    """
    Record a catch on a visit.

    Owners may add catches to their own visits, open or closed; admins to any.

    Args:
        visit: Visit (or pk) the catch belongs to
        fields: Catch input; species and hunted_at are mandatory
        actor: Acting member

    Returns:
        The created Catch

    Raises:
        VisitNotFound, Forbidden, SpeciesInactiveOrMissing, InvalidChoice, MissingRequiredField,
        GuestShooterInvalid, HuntedAtOutOfRange, LocalityInactive
    """
    visit_pk = pk_of(visit)
    # Lock the visit so a concurrent close cannot slip an end date under us
    visit = Visit.objects.select_for_update().filter(pk=visit_pk).first()
    if visit is None:
        raise VisitNotFound(visit_pk)

    require_owner_or_admin(actor, visit.member_id, "Not allowed to add catches to this visit")

    species = _get_active_species(fields.species)

    if fields.hunted_at is None:
        raise MissingRequiredField("hunted_at")

    values = CatchFields(
        species=species,
        hunted_at=fields.hunted_at,
        sex=fields.sex or Catch.Sex.UNKNOWN,
        age=fields.age,
        weight=fields.weight,
        tag_number=fields.tag_number,
        shooter_type=fields.shooter_type or Catch.ShooterType.MEMBER,
        guest_shooter_name=fields.guest_shooter_name,
        note=fields.note,
    )
    _check_choices(values)
    validate_required_fields(species, values)
    guest_shooter_name = _resolve_guest_shooter(
        visit, values.shooter_type, values.guest_shooter_name
    )
    _check_hunted_at(visit, values.hunted_at)

    if fields.hunting_locality is not None:
        hunting_locality = _get_active_locality(fields.hunting_locality)
    else:
        hunting_locality = visit.locality

    catch = Catch.objects.create(
        visit=visit,
        species=species,
        hunting_locality=hunting_locality,
        hunted_at=values.hunted_at,
        sex=values.sex,
        age=values.age or "",
        weight=values.weight,
        tag_number=values.tag_number or "",
        shooter_type=values.shooter_type,
        guest_shooter_name=guest_shooter_name,
        note=values.note or "",
    )

    log_event(
        action=Actions.CATCH_RECORDED,
        target=catch,
        actor=actor,
        data={
            "visit_id": str(visit.pk),
            "species_id": str(species.pk),
            "shooter_type": catch.shooter_type,
        },
    )
    logger.info("Catch %s of %s recorded on visit %s", catch.pk, species, visit.pk)
    return catch


def _get_catch_with_locked_visit(catch) -> tuple[Catch, Visit]:
    pk = pk_of(catch)
    found = Catch.objects.filter(pk=pk).select_related("species").first()
    if found is None:
        raise CatchNotFound(pk)
    visit = Visit.objects.select_for_update().get(pk=found.visit_id)
    return found, visit


def _check_can_modify(visit: Visit, actor, reason: str) -> None:
    require_owner_or_admin(actor, visit.member_id, reason)
    if not visit.is_open and not is_admin(actor):
        raise ClosedVisitImmutable(visit.pk)


@transaction.atomic
def update_catch(catch, fields: CatchFields, actor) -> Catch:
    """
    Update a catch, re-validating the effective (merged) field set.

    The species is only checked for being active when it changes, so a
    species deactivated mid-season does not lock its existing catches.

    Raises:
        CatchNotFound, Forbidden, ClosedVisitImmutable, SpeciesInactiveOrMissing,
        InvalidChoice, MissingRequiredField, GuestShooterInvalid, HuntedAtOutOfRange,
        LocalityInactive
    """
    catch, visit = _get_catch_with_locked_visit(catch)
    _check_can_modify(visit, actor, "Not allowed to modify another member's catch")

    # An empty string resets a choice field to its default
    if fields.sex == "":
        fields = replace(fields, sex=Catch.Sex.UNKNOWN)
    if fields.shooter_type == "":
        fields = replace(fields, shooter_type=Catch.ShooterType.MEMBER)
    _check_choices(fields)

    if fields.species is not None and pk_of(fields.species) != catch.species_id:
        species = _get_active_species(fields.species)
    else:
        species = catch.species

    effective = fields.merged_with(catch)
    effective.species = species

    if fields.hunted_at is not None:
        _check_hunted_at(visit, effective.hunted_at)

    if fields.hunting_locality is not None:
        hunting_locality = _get_active_locality(fields.hunting_locality)
    else:
        hunting_locality = UNSET

    guest_shooter_name = _resolve_guest_shooter(
        visit, effective.shooter_type, effective.guest_shooter_name
    )
    validate_required_fields(species, effective)

    changes = {}
    apply_tracked_update(catch, "species", species, changes)
    apply_tracked_update(catch, "hunting_locality", hunting_locality, changes)
    for name in ("hunted_at", "sex", "age", "weight", "tag_number", "shooter_type", "note"):
        value = getattr(fields, name)
        apply_tracked_update(catch, name, UNSET if value is None else value, changes)
    apply_tracked_update(catch, "guest_shooter_name", guest_shooter_name, changes)

    if changes:
        catch.save()
        log_event(action=Actions.CATCH_UPDATED, target=catch, actor=actor, changes=changes)
        logger.info("Catch %s updated: %s", catch.pk, ", ".join(changes))

    return catch


@transaction.atomic
def delete_catch(catch, actor) -> None:
    """
    Delete a catch.

    Raises:
        CatchNotFound, Forbidden, ClosedVisitImmutable
    """
    catch, visit = _get_catch_with_locked_visit(catch)
    _check_can_modify(visit, actor, "Not allowed to delete another member's catch")

    log_event(
        action=Actions.CATCH_DELETED,
        target=catch,
        actor=actor,
        data={"visit_id": str(visit.pk), "species_id": str(catch.species_id)},
    )
    catch.delete()
