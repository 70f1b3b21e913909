"""Configuration helpers for django-hunting."""

from django.conf import settings


DEFAULTS = {
    # Allowed clock skew when checking that a visit end date is not in the future
    "END_DATE_TOLERANCE_SECONDS": 60,
    # Hour of the local day used as cutoff when auto-closing stale visits
    "AUTO_CLOSE_HOUR": 0,
    "AUDIT_ENABLED": True,
}


def get_setting(name: str, default=None):
    """Get a setting with HUNTING_ prefix, falling back to the package default."""
    if default is None:
        default = DEFAULTS.get(name)
    return getattr(settings, f"HUNTING_{name}", default)
