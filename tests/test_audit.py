"""Tests for audit logging and permission helpers."""

import pytest

from django_hunting.audit import Actions, log_event
from django_hunting.exceptions import Forbidden, LocalityOccupied
from django_hunting.models import AuditEntry
from django_hunting.permissions import can_access, require_admin, require_owner_or_admin
from django_hunting.services import open_visit
from tests.helpers import aware


@pytest.mark.django_db
class TestLogEvent:
    def test_records_target_and_actor(self, member, locality):
        entry = log_event(
            action=Actions.VISIT_UPDATED,
            target=locality,
            actor=member,
            changes={"note": {"old": "", "new": "x"}},
            data={"source": "test"},
        )

        assert entry.model_label == "django_hunting.locality"
        assert entry.object_id == str(locality.pk)
        assert entry.object_repr == "Oak Ridge"
        assert entry.actor_display == "Jan Novak"
        assert entry.metadata == {"source": "test"}

    def test_system_actor(self, locality):
        entry = log_event(action=Actions.VISIT_AUTO_CLOSED, target=locality)

        assert entry.actor is None
        assert entry.actor_display == "system"

    def test_disabled_by_setting(self, settings, member, locality):
        settings.HUNTING_AUDIT_ENABLED = False

        assert log_event(action=Actions.VISIT_OPENED, target=locality, actor=member) is None
        open_visit(member, locality, aware(2024, 10, 1, 9))

        assert not AuditEntry.objects.exists()

    def test_entry_rolled_back_with_failed_write(self, member, other_member, locality):
        open_visit(member, locality, aware(2024, 10, 1, 9))

        with pytest.raises(LocalityOccupied):
            open_visit(other_member, locality, aware(2024, 10, 1, 10))

        assert AuditEntry.objects.filter(action=Actions.VISIT_OPENED).count() == 1


@pytest.mark.django_db
class TestPermissions:
    def test_owner_can_access(self, member):
        assert can_access(member, member.pk) is True

    def test_other_member_cannot_access(self, member, other_member):
        assert can_access(other_member, member.pk) is False

    def test_admin_can_access_anything(self, admin, member):
        assert can_access(admin, member.pk) is True

    def test_no_actor_cannot_access(self, member):
        assert can_access(None, member.pk) is False

    def test_require_owner_or_admin_raises_with_reason(self, member, other_member):
        with pytest.raises(Forbidden) as exc_info:
            require_owner_or_admin(other_member, member.pk, "Not yours")

        assert exc_info.value.reason == "Not yours"
        assert exc_info.value.kind == "forbidden"

    def test_require_admin(self, admin, member):
        require_admin(admin)

        with pytest.raises(Forbidden):
            require_admin(member)
