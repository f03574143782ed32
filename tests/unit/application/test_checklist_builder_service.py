"""Unit tests for ChecklistBuilderService and EditingSession."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import pytest
import structlog

from src.application.services.checklist_builder_service import (
    ChecklistBuilderService,
    ChecklistRequest,
    SelectedItem,
)
from src.application.services.editing_session import SessionState
from src.application.services.rule_resolver_service import RuleResolverService
from src.application.services.task_template_merger import TaskTemplateMerger
from src.domain.errors.classification import UnknownClassificationError
from src.domain.errors.task import EditingSessionClosedError, InvalidAnchorDateError
from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.classification_rule import ClassificationRule
from src.domain.models.configurable_task import TaskPatch
from src.domain.models.routing_policy import ManagerAssignee, PersonIdentity, Priority
from src.domain.models.task_template import SourceReference, SourceType, TaskLibraryTemplate
from src.infrastructure.stubs.classification_rule_repository_stub import (
    ClassificationRuleRepositoryStub,
)
from src.infrastructure.stubs.org_directory_stub import OrgDirectoryStub
from src.infrastructure.stubs.task_persistence_stub import TaskPersistenceStub
from src.infrastructure.stubs.task_template_repository_stub import (
    TaskTemplateRepositoryStub,
)

RuleFactory = Callable[..., ClassificationRule]

ANCHOR = date(2025, 3, 10)
EMPLOYEE = PersonIdentity(person_id=7, name="Sam Ortiz", email="sam.ortiz@example.com")


def _library() -> list[TaskLibraryTemplate]:
    return [
        TaskLibraryTemplate(
            classification=TaskClassification.DOC,
            title="Collect signed contract",
            task_code="DOC-001",
            is_mandatory=True,
            sort_order=1,
        ),
        TaskLibraryTemplate(
            classification=TaskClassification.ORI,
            title="Welcome meeting",
            task_code="ORI-001",
            depends_on_task_codes=("DOC-001",),
            sort_order=2,
        ),
        TaskLibraryTemplate(
            classification=TaskClassification.SYS,
            title="Revoke access",
            process_types=frozenset({ProcessType.OFFBOARDING}),
            sort_order=3,
        ),
        TaskLibraryTemplate(
            classification=TaskClassification.FIN,
            title="Set up payroll",
            departments=frozenset({"Sales"}),
            sort_order=4,
        ),
        TaskLibraryTemplate(
            classification=TaskClassification.TRN,
            title="Retired course",
            is_active=False,
        ),
    ]


def _request(**kwargs: object) -> ChecklistRequest:
    defaults: dict[str, object] = {
        "process_id": "onb-1001",
        "process_type": ProcessType.ONBOARDING,
        "anchor_date": ANCHOR,
        "department": "Finance",
        "employee": EMPLOYEE,
    }
    defaults.update(kwargs)
    return ChecklistRequest(**defaults)  # type: ignore[arg-type]


@pytest.fixture
def directory(manager: PersonIdentity) -> OrgDirectoryStub:
    """Directory knowing the employee's manager."""
    return OrgDirectoryStub({EMPLOYEE.email: manager})  # type: ignore[dict-item]


@pytest.fixture
def builder(
    rule_repository: ClassificationRuleRepositoryStub,
    task_persistence: TaskPersistenceStub,
    directory: OrgDirectoryStub,
    merger: TaskTemplateMerger,
) -> ChecklistBuilderService:
    """Builder over in-memory stores with the sample library."""
    return ChecklistBuilderService(
        resolver=RuleResolverService(rule_repository),
        template_repository=TaskTemplateRepositoryStub(_library()),
        persistence=task_persistence,
        org_directory=directory,
        merger=merger,
    )


class TestTemplatesForProcess:
    """Tests for library filtering."""

    @pytest.mark.asyncio
    async def test_filters_by_process_department_and_activity(
        self, builder: ChecklistBuilderService
    ) -> None:
        """Only active templates that belong in the process are listed."""
        templates = await builder.templates_for_process(ProcessType.ONBOARDING, "Finance")
        assert [t.title for t in templates] == ["Collect signed contract", "Welcome meeting"]

    @pytest.mark.asyncio
    async def test_mandatory_only(self, builder: ChecklistBuilderService) -> None:
        """The mandatory filter keeps mandatory templates only."""
        templates = await builder.templates_for_process(
            ProcessType.ONBOARDING, mandatory_only=True
        )
        assert [t.title for t in templates] == ["Collect signed contract"]

    @pytest.mark.asyncio
    async def test_store_failure_yields_empty_library(
        self, resolver: RuleResolverService, task_persistence: TaskPersistenceStub
    ) -> None:
        """An unavailable template store degrades to no library tasks."""
        builder = ChecklistBuilderService(
            resolver=resolver,
            template_repository=TaskTemplateRepositoryStub(_library(), force_unavailable=True),
            persistence=task_persistence,
        )
        assert await builder.templates_for_process(ProcessType.ONBOARDING) == []


class TestBuild:
    """Tests for building a checklist."""

    @pytest.mark.asyncio
    async def test_builds_library_and_ad_hoc_tasks(
        self, builder: ChecklistBuilderService, manager: PersonIdentity
    ) -> None:
        """Library templates and selected items both become tasks."""
        item = SelectedItem(
            classification="hrd",
            title="Issue laptop",
            source=SourceReference(SourceType.ASSET, 3),
            estimated_hours=2.0,
        )
        session = await builder.build(_request(selected_items=[item]))
        titles = [task.title for task in session.tasks]
        assert titles == ["Collect signed contract", "Welcome meeting", "Issue laptop"]

        welcome = session.tasks[1]
        assert welcome.assignee == ManagerAssignee(person=manager)
        assert welcome.due_date == ANCHOR
        assert welcome.depends_on_task_ids == (session.tasks[0].id,)

        laptop = session.tasks[2]
        assert laptop.source == SourceReference(SourceType.ASSET, 3)
        assert laptop.due_date == date(2025, 3, 5)

    @pytest.mark.asyncio
    async def test_rule_routing_applies(
        self,
        builder: ChecklistBuilderService,
        rule_repository: ClassificationRuleRepositoryStub,
        rule_factory: RuleFactory,
    ) -> None:
        """A department rule routes the matching tasks."""
        await rule_repository.create_rule(
            rule_factory(
                TaskClassification.DOC,
                role="Finance HR",
                departments={"Finance"},
                priority=Priority.CRITICAL,
            )
        )
        session = await builder.build(_request())
        contract = session.tasks[0]
        assert contract.priority is Priority.CRITICAL
        assert contract.is_configured
        assert rule_repository.list_calls == 1

    @pytest.mark.asyncio
    async def test_known_manager_skips_lookup(
        self, builder: ChecklistBuilderService, directory: OrgDirectoryStub
    ) -> None:
        """A manager in the request is used as is."""
        boss = PersonIdentity(person_id=1, name="Ada Boss")
        session = await builder.build(_request(manager=boss))
        assert session.tasks[1].assignee == ManagerAssignee(person=boss)
        assert directory.lookups == []

    @pytest.mark.asyncio
    async def test_manager_lookup_failure_leaves_unassigned(
        self, builder: ChecklistBuilderService, directory: OrgDirectoryStub
    ) -> None:
        """A failed directory lookup leaves Manager tasks unassigned."""
        directory.fail_with = ConnectionError("directory down")
        session = await builder.build(_request())
        assert session.tasks[1].assignee == ManagerAssignee(person=None)

    @pytest.mark.asyncio
    async def test_without_library(self, builder: ChecklistBuilderService) -> None:
        """Library templates can be left out."""
        session = await builder.build(_request(include_library=False))
        assert session.tasks == ()

    @pytest.mark.asyncio
    async def test_unknown_item_classification_rejected(
        self, builder: ChecklistBuilderService
    ) -> None:
        """Bad caller input fails before anything is built."""
        with pytest.raises(UnknownClassificationError):
            await builder.build(
                _request(selected_items=[SelectedItem(classification="ZZZ", title="x")])
            )

    @pytest.mark.asyncio
    async def test_invalid_anchor_rejected(self, builder: ChecklistBuilderService) -> None:
        """A non-date anchor fails before anything is built."""
        with pytest.raises(InvalidAnchorDateError):
            await builder.build(_request(anchor_date="2025-03-10"))

    @pytest.mark.asyncio
    async def test_session_id_bound_to_log_context(
        self, builder: ChecklistBuilderService
    ) -> None:
        """The session id is bound for log correlation while the session is open."""
        session = await builder.build(_request())
        assert structlog.contextvars.get_contextvars()["session_id"] == session.session_id


class TestEditingSession:
    """Tests for the editing session lifecycle."""

    @pytest.mark.asyncio
    async def test_confirm_persists_selected_tasks_once(
        self, builder: ChecklistBuilderService, task_persistence: TaskPersistenceStub
    ) -> None:
        """Confirmation hands the selected tasks to persistence once."""
        session = await builder.build(_request())
        first_id = session.tasks[0].id
        session.update_one(first_id, TaskPatch(is_selected=False))

        persisted = await session.confirm()

        assert [task.title for task in persisted] == ["Welcome meeting"]
        assert task_persistence.save_calls == 1
        assert task_persistence.saved["onb-1001"] == persisted
        assert session.state is SessionState.CONFIRMED
        assert "session_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_closed_session_rejects_use(
        self, builder: ChecklistBuilderService, task_persistence: TaskPersistenceStub
    ) -> None:
        """A confirmed session cannot be edited or confirmed again."""
        session = await builder.build(_request())
        await session.confirm()
        with pytest.raises(EditingSessionClosedError, match="confirmed"):
            await session.confirm()
        with pytest.raises(EditingSessionClosedError):
            session.update_many([t.id for t in session.tasks], TaskPatch(title="x"))
        assert task_persistence.save_calls == 1

    @pytest.mark.asyncio
    async def test_cancel_discards(
        self, builder: ChecklistBuilderService, task_persistence: TaskPersistenceStub
    ) -> None:
        """Cancelling discards the tasks without persisting."""
        session = await builder.build(_request())
        session.cancel()
        assert session.state is SessionState.CANCELLED
        assert session.tasks == ()
        assert task_persistence.save_calls == 0
        with pytest.raises(EditingSessionClosedError, match="cancelled"):
            session.cancel()

    @pytest.mark.asyncio
    async def test_failed_confirm_keeps_session_open(
        self, builder: ChecklistBuilderService, task_persistence: TaskPersistenceStub
    ) -> None:
        """A persistence failure propagates and the session can retry."""
        session = await builder.build(_request())
        task_persistence.fail_with = OSError("database unavailable")
        with pytest.raises(OSError, match="database unavailable"):
            await session.confirm()
        assert session.is_open

        task_persistence.fail_with = None
        await session.confirm()
        assert session.state is SessionState.CONFIRMED

    @pytest.mark.asyncio
    async def test_bulk_edit_and_renumber(self, builder: ChecklistBuilderService) -> None:
        """Bulk edits and auto-numbering go through the session."""
        session = await builder.build(
            _request(selected_items=[SelectedItem(classification="DOC", title="Copy passport")])
        )
        ids = [task.id for task in session.tasks]
        assert session.update_many(ids, TaskPatch(priority=Priority.LOW)) == 3
        assert session.auto_number() == ["DOC-002"]
        assert session.working_set.configured_count == 3
