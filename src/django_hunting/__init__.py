"""
django-hunting: Hunting-ground activity tracking for a hunting association.

Provides:
- Visit: A member's occupation of one locality (one open visit per member and per locality)
- Catch: A recorded kill validated against its species policy and visit window
- HarvestPlanItem: Per-season, per-species quota with an on-demand harvest report
- CabinBooking: Non-overlapping reservations of a shared cabin
"""

__version__ = "0.1.0"
