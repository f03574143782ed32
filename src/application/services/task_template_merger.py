"""Task template merger.

Combines a task library template with a resolved routing and a due-date
anchor into a ConfigurableTask.

Precedence for routing fields (highest first):
1. Explicit user overrides (TaskPatch) when re-merging an edited task
2. The resolved routing (classification rule or default policy)
3. The template's own defaults

The routing is always complete for assignee, approval and timing, so a
template default can never override an active rule. Notification flags
the routing leaves unspecified fall back to the template.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import date

from uuid6 import uuid7

from src.application.services.base import LoggingMixin
from src.domain.models.classification import TaskClassification
from src.domain.models.configurable_task import ConfigurableTask, TaskPatch
from src.domain.models.resolved_routing import ResolvedRouting
from src.domain.models.task_template import TaskLibraryTemplate
from src.domain.services.due_date import compute_due_date, normalize_anchor_date


def new_task_id() -> str:
    """Generate a time-ordered task id (UUIDv7)."""
    return str(uuid7())


class TaskTemplateMerger(LoggingMixin):
    """Materializes configurable tasks from templates and routings."""

    def __init__(self, id_factory: Callable[[], str] = new_task_id) -> None:
        """Initialize the merger.

        Args:
            id_factory: Produces ids for new tasks.
        """
        self._new_id = id_factory
        self._init_logger(component="materialization")

    def merge(
        self,
        template: TaskLibraryTemplate,
        routing: ResolvedRouting,
        anchor_date: date | None = None,
        overrides: TaskPatch | None = None,
        task_id: str | None = None,
    ) -> ConfigurableTask:
        """Materialize one task.

        Args:
            template: Template providing the base fields.
            routing: Routing resolved for the template's classification.
            anchor_date: Date the due date is computed from; None leaves the
                due date unset.
            overrides: User edits to apply on top of the routing.
            task_id: Id to keep when re-merging an existing task.

        Returns:
            The configured task. It is marked configured when the routing
            came from a rule or overrides were applied.

        Raises:
            InvalidAnchorDateError: If anchor_date is not a date.
        """
        anchor = normalize_anchor_date(anchor_date) if anchor_date is not None else None

        task = ConfigurableTask(
            id=task_id or self._new_id(),
            task_code=template.task_code,
            title=template.title,
            classification=routing.classification,
            category=template.category,
            source=template.source,
            assignee=routing.assignee,
            requires_approval=routing.requires_approval,
            approver=routing.approver,
            escalation=routing.escalation,
            auto_approve=routing.auto_approve,
            offset_type=routing.offset_type,
            days_offset=routing.days_offset,
            priority=routing.priority,
            sla=routing.sla,
            notifications=routing.notifications.overlay(template.notifications),
            send_reminder=template.send_reminder,
            reminder_days_before=template.reminder_days_before,
            estimated_hours=template.estimated_hours,
            instructions=template.instructions or template.description,
            is_mandatory=template.is_mandatory,
            is_configured=routing.is_from_rule,
            blocked_until_complete=template.blocked_until_complete,
            rule_id=routing.rule_id,
        )
        if overrides is not None and not overrides.is_empty:
            task = overrides.apply_to(task)
        if anchor is not None:
            task = task.with_due_date(
                compute_due_date(anchor, task.offset_type, task.days_offset)
            )
        return task

    def merge_all(
        self,
        templates: Iterable[TaskLibraryTemplate],
        routings: Mapping[TaskClassification, ResolvedRouting],
        anchor_date: date | None = None,
    ) -> list[ConfigurableTask]:
        """Materialize a checklist and link its dependencies.

        Template dependency codes are translated to the ids of the tasks
        built here; codes with no task in this build are dropped.

        Args:
            templates: Templates in display order.
            routings: Routing per classification, covering every template.
            anchor_date: Date due dates are computed from.

        Returns:
            The tasks in template order.
        """
        templates = list(templates)
        tasks = [
            self.merge(template, routings[template.classification], anchor_date)
            for template in templates
        ]

        ids_by_code = {
            template.task_code: task.id
            for template, task in zip(templates, tasks)
            if template.task_code
        }
        linked: list[ConfigurableTask] = []
        dropped = 0
        for template, task in zip(templates, tasks):
            if template.depends_on_task_codes:
                dependency_ids = tuple(
                    ids_by_code[code]
                    for code in template.depends_on_task_codes
                    if code in ids_by_code and ids_by_code[code] != task.id
                )
                dropped += len(template.depends_on_task_codes) - len(dependency_ids)
                task = replace(task, depends_on_task_ids=dependency_ids)
            linked.append(task)

        if dropped:
            self._log.info("task_dependencies_dropped", count=dropped)
        return linked

