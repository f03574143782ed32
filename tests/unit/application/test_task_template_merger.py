"""Unit tests for TaskTemplateMerger."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import date, datetime

import pytest

from src.application.services.task_template_merger import TaskTemplateMerger, new_task_id
from src.domain.errors.task import InvalidAnchorDateError
from src.domain.models.classification import TaskCategory, TaskClassification
from src.domain.models.classification_rule import ClassificationRule
from src.domain.models.configurable_task import TaskPatch
from src.domain.models.routing_policy import (
    NotificationSettings,
    OffsetType,
    Priority,
    RoleApprover,
    RoleAssignee,
    TimingPolicy,
)
from src.domain.models.task_template import SourceReference, SourceType, TaskLibraryTemplate
from src.domain.services.default_policy import default_policy_for
from src.domain.services.routing_materializer import materialize

RuleFactory = Callable[..., ClassificationRule]
TemplateFactory = Callable[..., TaskLibraryTemplate]

ANCHOR = date(2025, 3, 10)


class TestMerge:
    """Tests for merging a single template."""

    def test_routing_overrides_template_defaults(
        self,
        merger: TaskTemplateMerger,
        rule_factory: RuleFactory,
        template_factory: TemplateFactory,
    ) -> None:
        """Rule priority and timing win over the template's own defaults."""
        template = template_factory(
            timing=TimingPolicy(OffsetType.ON_START, 0, Priority.MEDIUM),
            default_assignee=RoleAssignee(role="Template Team"),
        )
        routing = materialize(
            rule_factory(rule_id=1, priority=Priority.CRITICAL), TaskClassification.SYS
        )
        task = merger.merge(template, routing, ANCHOR)
        assert task.priority is Priority.CRITICAL
        assert task.assignee == RoleAssignee(role="IT Team")
        assert task.offset_type is OffsetType.BEFORE_START
        assert task.due_date == date(2025, 3, 7)

    def test_template_routing_fields_are_informational(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Default-policy routing also wins over template routing fields."""
        template = template_factory(
            TaskClassification.TRN,
            default_assignee=RoleAssignee(role="Template Team"),
            timing=TimingPolicy(OffsetType.ON_START, 0, Priority.CRITICAL),
            requires_approval=True,
            default_approver=RoleApprover(role="Template Lead"),
        )
        routing = materialize(default_policy_for(TaskClassification.TRN), TaskClassification.TRN)
        task = merger.merge(template, routing, ANCHOR)
        assert task.assignee == routing.assignee
        assert task.requires_approval is routing.requires_approval is False
        assert task.approver is None
        assert task.offset_type is routing.offset_type
        assert task.priority is routing.priority

    def test_rule_routing_marks_task_configured(
        self,
        merger: TaskTemplateMerger,
        rule_factory: RuleFactory,
        template_factory: TemplateFactory,
    ) -> None:
        """Tasks routed by a rule start out configured."""
        routing = materialize(rule_factory(rule_id=8), TaskClassification.SYS)
        task = merger.merge(template_factory(), routing)
        assert task.is_configured
        assert task.rule_id == 8
        assert task.due_date is None

    def test_default_routing_is_not_configured(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Tasks on the default policy still need review."""
        routing = materialize(default_policy_for(TaskClassification.SYS), TaskClassification.SYS)
        task = merger.merge(template_factory(), routing, ANCHOR)
        assert not task.is_configured
        assert task.rule_id is None

    def test_overrides_win_and_configure(
        self,
        merger: TaskTemplateMerger,
        template_factory: TemplateFactory,
    ) -> None:
        """Caller overrides beat the routing and recompute the due date."""
        routing = materialize(default_policy_for(TaskClassification.SYS), TaskClassification.SYS)
        overrides = TaskPatch(priority=Priority.LOW, offset_type=OffsetType.AFTER_START)
        task = merger.merge(template_factory(), routing, ANCHOR, overrides=overrides)
        assert task.priority is Priority.LOW
        assert task.due_date == date(2025, 3, 13)
        assert task.is_configured

    def test_notifications_overlay_template(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Flags the default policy leaves open come from the template."""
        template = template_factory(
            notifications=NotificationSettings(
                send_email=False,
                send_teams=True,
                notify_on_assignment=False,
                notify_on_completion=True,
                notify_manager_on_completion=True,
            )
        )
        routing = materialize(default_policy_for(TaskClassification.SYS), TaskClassification.SYS)
        notifications = merger.merge(template, routing).notifications
        assert notifications.send_email is True
        assert notifications.send_teams is False
        assert notifications.notify_on_assignment is False
        assert notifications.notify_manager_on_completion is True

    def test_template_fields_are_copied(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Descriptive fields come from the template."""
        template = template_factory(
            title="Provision VPN",
            task_code="SYS-003",
            description="Set up VPN access",
            source=SourceReference(SourceType.SYSTEM, 12),
            estimated_hours=1.5,
            is_mandatory=True,
            send_reminder=False,
        )
        routing = materialize(default_policy_for(TaskClassification.SYS), TaskClassification.SYS)
        task = merger.merge(template, routing, task_id="keep-me")
        assert task.id == "keep-me"
        assert task.title == "Provision VPN"
        assert task.task_code == "SYS-003"
        assert task.instructions == "Set up VPN access"
        assert task.source == SourceReference(SourceType.SYSTEM, 12)
        assert task.category is TaskCategory.SYSTEM_ACCESS
        assert task.is_mandatory
        assert not task.send_reminder

    def test_datetime_anchor_is_accepted(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Datetime anchors use their calendar date."""
        routing = materialize(default_policy_for(TaskClassification.TRN), TaskClassification.TRN)
        task = merger.merge(
            template_factory(TaskClassification.TRN), routing, datetime(2025, 3, 10, 9, 0)
        )
        assert task.due_date == date(2025, 3, 17)

    def test_invalid_anchor_is_rejected(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """A non-date anchor raises."""
        routing = materialize(default_policy_for(TaskClassification.SYS), TaskClassification.SYS)
        with pytest.raises(InvalidAnchorDateError):
            merger.merge(template_factory(), routing, "2025-03-10")  # type: ignore[arg-type]


class TestMergeAll:
    """Tests for merging a checklist."""

    def test_dependencies_map_to_task_ids(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Template codes become ids; unknown and self references drop."""
        templates = [
            template_factory(title="Create account", task_code="SYS-001"),
            template_factory(
                title="Grant VPN",
                task_code="SYS-002",
                depends_on_task_codes=("SYS-001", "SYS-999", "SYS-002"),
                blocked_until_complete=True,
            ),
        ]
        routings = {
            TaskClassification.SYS: materialize(
                default_policy_for(TaskClassification.SYS), TaskClassification.SYS
            )
        }
        first, second = merger.merge_all(templates, routings, ANCHOR)
        assert first.id == "task-1"
        assert second.depends_on_task_ids == ("task-1",)
        assert second.blocked_until_complete
        assert not first.has_dependencies

    def test_preserves_template_order(
        self, merger: TaskTemplateMerger, template_factory: TemplateFactory
    ) -> None:
        """Tasks come back in template order."""
        templates = [
            template_factory(TaskClassification.DOC, "Collect ID"),
            template_factory(TaskClassification.SYS, "Create account"),
        ]
        routings = {
            c: materialize(default_policy_for(c), c)
            for c in (TaskClassification.DOC, TaskClassification.SYS)
        }
        tasks = merger.merge_all(templates, routings)
        assert [task.title for task in tasks] == ["Collect ID", "Create account"]


class TestNewTaskId:
    """Tests for the default id factory."""

    def test_ids_are_unique_uuid7(self) -> None:
        """Generated ids are distinct version 7 UUIDs."""
        first, second = new_task_id(), new_task_id()
        assert first != second
        assert uuid.UUID(first).version == 7
