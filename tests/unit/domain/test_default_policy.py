"""Unit tests for the default policy table."""

from __future__ import annotations

import pytest

from src.domain.errors.classification import DefaultPolicyIncompleteError
from src.domain.models.classification import TaskClassification
from src.domain.models.routing_policy import (
    ManagerAssignee,
    OffsetType,
    Priority,
    RoleApprover,
    RoleAssignee,
)
from src.domain.services.default_policy import (
    DEFAULT_POLICY_NOTIFICATIONS,
    DEFAULT_POLICY_TABLE,
    default_policy_for,
    validate_default_policy,
)


class TestDefaultPolicyTable:
    """Tests for the built-in default policy table."""

    def test_covers_every_classification(self) -> None:
        """The built-in table passes startup validation."""
        validate_default_policy(DEFAULT_POLICY_TABLE)
        assert set(DEFAULT_POLICY_TABLE) == set(TaskClassification)

    def test_missing_entry_fails_validation(self) -> None:
        """A gap is a configuration bug that stops startup."""
        table = {
            c: entry for c, entry in DEFAULT_POLICY_TABLE.items() if c != TaskClassification.COM
        }
        with pytest.raises(DefaultPolicyIncompleteError, match="COM") as exc_info:
            validate_default_policy(table)
        assert exc_info.value.missing == ("COM",)

    def test_system_access_default(self) -> None:
        """SYS goes to the IT Team with IT Lead approval, 3 days before start."""
        entry = default_policy_for(TaskClassification.SYS)
        assert entry.assignee == RoleAssignee(role="IT Team")
        assert entry.requires_approval
        assert entry.approver == RoleApprover(role="IT Lead")
        assert entry.timing.offset_type is OffsetType.BEFORE_START
        assert entry.timing.days_offset == 3
        assert entry.timing.priority is Priority.HIGH

    def test_orientation_goes_to_manager(self) -> None:
        """ORI defaults to the subject's manager on the start date."""
        entry = default_policy_for(TaskClassification.ORI)
        assert entry.assignee == ManagerAssignee()
        assert entry.timing.offset_type is OffsetType.ON_START
        assert not entry.requires_approval

    def test_training_is_after_start(self) -> None:
        """TRN is due a week after the start date."""
        entry = default_policy_for(TaskClassification.TRN)
        assert entry.timing.offset_type is OffsetType.AFTER_START
        assert entry.timing.days_offset == 7

    def test_entries_without_approval_have_no_approver(self) -> None:
        """An approver is only listed when approval is required."""
        for entry in DEFAULT_POLICY_TABLE.values():
            assert entry.requires_approval == (entry.approver is not None)

    def test_notifications_only_choose_channels(self) -> None:
        """The fallback leaves per-event notification flags to the template."""
        assert DEFAULT_POLICY_NOTIFICATIONS.send_email is True
        assert DEFAULT_POLICY_NOTIFICATIONS.send_teams is False
        assert DEFAULT_POLICY_NOTIFICATIONS.notify_on_assignment is None
        assert DEFAULT_POLICY_NOTIFICATIONS.notify_on_completion is None
