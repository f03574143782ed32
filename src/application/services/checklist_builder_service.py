"""Checklist builder service.

Turns a process request into an editing session:

1. One template read (library templates applicable to the process)
2. Optional manager lookup (failure -> Manager tasks stay unassigned)
3. One batch routing resolution for every classification involved
4. One merge per template, plus ad-hoc tasks for the selected items
   (documents, systems, assets, training) the library does not cover

Store failures while reading templates or looking up the manager are
logged and degrade the result; caller input problems (unknown
classification, invalid anchor date) raise before anything is fetched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from src.application.ports.org_directory import OrgDirectoryProtocol
from src.application.ports.task_persistence import TaskPersistenceProtocol
from src.application.ports.task_template_repository import (
    TaskTemplateRepositoryProtocol,
    TemplateFilter,
)
from src.application.services.base import LoggingMixin
from src.application.services.editing_session import EditingSession
from src.application.services.rule_resolver_service import RuleResolverService
from src.application.services.task_template_merger import TaskTemplateMerger
from src.domain.entities.working_configuration_set import WorkingConfigurationSet
from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.routing_policy import PersonIdentity
from src.domain.models.task_template import SourceReference, TaskLibraryTemplate
from src.domain.services.due_date import normalize_anchor_date
from src.infrastructure.observability.session_context import (
    bind_session_id,
    generate_session_id,
)


@dataclass(frozen=True)
class SelectedItem:
    """An item picked for the process that becomes an ad-hoc task.

    Attributes:
        classification: Classification driving the task's routing.
        title: Task title built by the caller (e.g. "Provision Salesforce").
        source: The document/system/asset/training item picked.
        instructions: Guidance for the assignee.
        estimated_hours: Expected effort.
    """

    classification: TaskClassification | str
    title: str
    source: SourceReference = field(default_factory=SourceReference)
    instructions: str = ""
    estimated_hours: float | None = None


@dataclass(frozen=True)
class ChecklistRequest:
    """Everything needed to build the checklist of one process.

    Attributes:
        process_id: The onboarding/mover/offboarding record.
        process_type: The kind of process.
        anchor_date: Start date, effective date or last day.
        department: Department of the subject person.
        job_title: Job title of the subject person.
        employee: Subject person, used to look up the manager.
        manager: Known manager; skips the directory lookup.
        selected_items: Items to turn into ad-hoc tasks.
        include_library: Whether library templates are included.
        mandatory_only: Include only mandatory library templates.
    """

    process_id: str
    process_type: ProcessType
    anchor_date: date
    department: str | None = None
    job_title: str | None = None
    employee: PersonIdentity | None = None
    manager: PersonIdentity | None = None
    selected_items: Sequence[SelectedItem] = ()
    include_library: bool = True
    mandatory_only: bool = False


class ChecklistBuilderService(LoggingMixin):
    """Builds editing sessions from process requests."""

    def __init__(
        self,
        resolver: RuleResolverService,
        template_repository: TaskTemplateRepositoryProtocol,
        persistence: TaskPersistenceProtocol,
        org_directory: OrgDirectoryProtocol | None = None,
        merger: TaskTemplateMerger | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            resolver: Routing resolution.
            template_repository: Task library reads.
            persistence: Receives confirmed tasks.
            org_directory: Manager lookups; None disables them.
            merger: Task materialization.
        """
        self._resolver = resolver
        self._templates = template_repository
        self._persistence = persistence
        self._directory = org_directory
        self._merger = merger or TaskTemplateMerger()
        self._init_logger(component="checklist_builder")

    async def templates_for_process(
        self,
        process_type: ProcessType,
        department: str | None = None,
        job_title: str | None = None,
        mandatory_only: bool = False,
    ) -> list[TaskLibraryTemplate]:
        """List the active library templates that belong in a process.

        A template store failure yields an empty list.

        Args:
            process_type: The kind of process.
            department: Department of the subject person.
            job_title: Job title of the subject person.
            mandatory_only: Keep only mandatory templates.

        Returns:
            Applicable templates in sort order.
        """
        try:
            templates = await self._templates.list_templates(
                TemplateFilter(process_type=process_type, is_active=True)
            )
        except Exception as exc:
            self._log.warning(
                "template_store_unavailable",
                process_type=process_type.value,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return []

        applicable = [
            template
            for template in templates
            if template.is_active and template.applies_to(process_type, department, job_title)
        ]
        if mandatory_only:
            applicable = [template for template in applicable if template.is_mandatory]
        return sorted(applicable, key=lambda template: template.sort_order)

    async def build(self, request: ChecklistRequest) -> EditingSession:
        """Build the checklist for a process and open an editing session.

        Args:
            request: The process request.

        Returns:
            An open editing session over the generated tasks.

        Raises:
            InvalidAnchorDateError: If the anchor date is not a date.
            UnknownClassificationError: If a selected item has an unknown
                classification.
        """
        anchor = normalize_anchor_date(request.anchor_date)
        ad_hoc = [_template_for_item(item) for item in request.selected_items]

        session_id = generate_session_id()
        bind_session_id(session_id)
        log = self._log_operation(
            "build",
            process_id=request.process_id,
            process_type=request.process_type.value,
        )

        library: list[TaskLibraryTemplate] = []
        if request.include_library:
            library = await self.templates_for_process(
                request.process_type,
                request.department,
                request.job_title,
                request.mandatory_only,
            )
        templates = library + ad_hoc

        manager = await self._find_manager(request)
        routings = await self._resolver.resolve_batch(
            {template.classification for template in templates},
            process_type=request.process_type,
            department=request.department,
            manager=manager,
        )
        tasks = self._merger.merge_all(templates, routings, anchor)

        working_set = WorkingConfigurationSet(tasks, anchor_date=anchor)
        log.info(
            "checklist_built",
            library_tasks=len(library),
            ad_hoc_tasks=len(ad_hoc),
            configured=working_set.configured_count,
            manager_known=manager is not None,
        )
        return EditingSession(
            session_id=session_id,
            process_id=request.process_id,
            working_set=working_set,
            persistence=self._persistence,
        )

    async def _find_manager(self, request: ChecklistRequest) -> PersonIdentity | None:
        if request.manager is not None:
            return request.manager
        if self._directory is None or request.employee is None:
            return None
        try:
            return await self._directory.get_manager(request.employee)
        except Exception as exc:
            self._log.warning(
                "manager_lookup_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return None


def _template_for_item(item: SelectedItem) -> TaskLibraryTemplate:
    return TaskLibraryTemplate(
        classification=TaskClassification.parse(item.classification),
        title=item.title,
        source=item.source,
        instructions=item.instructions,
        estimated_hours=item.estimated_hours,
    )
