"""Shared helpers for django-hunting tests."""

from datetime import datetime

from django.utils import timezone


def aware(*args) -> datetime:
    """Build an aware datetime in the current time zone."""
    return timezone.make_aware(datetime(*args))
