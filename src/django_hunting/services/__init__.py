"""Write-side services for django-hunting.

Every function here runs in a transaction and raises an exception from
``django_hunting.exceptions`` before touching the database when a check fails.
"""

from ._helpers import UNSET
from .bookings import cancel_booking, create_booking, delete_booking, update_booking
from .catches import CatchFields, delete_catch, record_catch, update_catch
from .harvest import (
    HarvestReport,
    HarvestReportItem,
    compute_harvest_report,
    delete_plan_item,
    get_active_season_report,
    upsert_plan_item,
)
from .seasons import create_season, delete_season, update_season
from .visits import (
    add_guest,
    close_stale_visits,
    close_visit,
    delete_visit,
    open_visit,
    update_visit,
)

__all__ = [
    "UNSET",
    # Visits
    "open_visit",
    "close_visit",
    "add_guest",
    "update_visit",
    "delete_visit",
    "close_stale_visits",
    # Catches
    "CatchFields",
    "record_catch",
    "update_catch",
    "delete_catch",
    # Harvest plan
    "HarvestReport",
    "HarvestReportItem",
    "compute_harvest_report",
    "get_active_season_report",
    "upsert_plan_item",
    "delete_plan_item",
    # Seasons
    "create_season",
    "update_season",
    "delete_season",
    # Cabin bookings
    "create_booking",
    "update_booking",
    "cancel_booking",
    "delete_booking",
]
