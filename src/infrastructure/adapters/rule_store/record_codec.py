"""Flat record codec for the rule store.

The Rule Store keeps rules and templates as flat records (one key per
column, snake_case). Scope lists, tags and dependency codes may be stored
either natively as lists or as JSON-encoded text; both are accepted on
read and JSON text is written.

Decoding policy:
- Malformed scope data (unparsable JSON, not a list, unknown process
  type) is logged and treated as an empty scope, i.e. "matches everything"
- days offsets are read as magnitudes (sign dropped)
- A template assignee type of "Auto" (or missing) means "no template
  default"
- Unknown classifications and structurally invalid policies raise; the
  store skips such records
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog

from src.domain.errors.rule import InvalidRuleError
from src.domain.models.classification import ProcessType, TaskClassification
from src.domain.models.classification_rule import (
    ApprovalPolicy,
    ClassificationRule,
    RuleScope,
)
from src.domain.models.routing_policy import (
    Approver,
    ApproverType,
    Assignee,
    AssigneeType,
    AutoApprovePolicy,
    EmployeeAssignee,
    EscalationPolicy,
    ManagerApprover,
    ManagerAssignee,
    NotificationSettings,
    OffsetType,
    PersonIdentity,
    Priority,
    RoleApprover,
    RoleAssignee,
    SkipLevelApprover,
    SlaPolicy,
    SpecificApprover,
    SpecificAssignee,
    TimingPolicy,
)
from src.domain.models.task_template import (
    SourceReference,
    SourceType,
    TaskLibraryTemplate,
)

logger = structlog.get_logger(__name__)

Record = dict[str, Any]

AUTO_ASSIGNEE = "Auto"
_TRUE_STRINGS = frozenset({"true", "1", "yes", "y"})


# =============================================================================
# Scalar helpers
# =============================================================================


def _bool(value: Any, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def _int(value: Any, default: int | None = None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# =============================================================================
# List fields
# =============================================================================


def decode_string_list(value: Any, field_name: str, record_id: Any = None) -> list[str]:
    """Decode a list field stored natively or as JSON text.

    Malformed values are logged and decoded as an empty list.
    """
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning(
                "malformed_list_field",
                field=field_name,
                record_id=record_id,
                reason="invalid_json",
            )
            return []
    if not isinstance(value, list):
        logger.warning(
            "malformed_list_field",
            field=field_name,
            record_id=record_id,
            reason="not_a_list",
        )
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def encode_string_list(values: Any) -> str:
    """Encode a collection of strings as JSON text (sorted for sets)."""
    if isinstance(values, (set, frozenset)):
        values = sorted(str(v) for v in values)
    return json.dumps([str(v) for v in values])


def _process_types(value: Any, field_name: str, record_id: Any) -> frozenset[ProcessType]:
    raw = decode_string_list(value, field_name, record_id)
    try:
        return frozenset(ProcessType(item) for item in raw)
    except ValueError:
        logger.warning(
            "malformed_list_field",
            field=field_name,
            record_id=record_id,
            reason="unknown_process_type",
            values=raw,
        )
        return frozenset()


# =============================================================================
# Variants
# =============================================================================


def _person(record: Mapping[str, Any], prefix: str) -> PersonIdentity:
    return PersonIdentity(
        person_id=_int(record.get(f"{prefix}_id")),
        name=_str(record.get(f"{prefix}_name")),
        email=_str(record.get(f"{prefix}_email")),
    )


def _person_record(prefix: str, person: PersonIdentity | None) -> Record:
    return {
        f"{prefix}_id": person.person_id if person else None,
        f"{prefix}_name": person.name if person else None,
        f"{prefix}_email": person.email if person else None,
    }


def decode_assignee(record: Mapping[str, Any], prefix: str) -> Assignee | None:
    """Decode ``<prefix>_type`` / ``_role`` / person columns into a variant.

    Returns None for a missing or "Auto" type.

    Raises:
        InvalidRuleError: For an unknown assignee type.
    """
    raw_type = _str(record.get(f"{prefix}_type"))
    if raw_type is None or raw_type == AUTO_ASSIGNEE:
        return None
    try:
        assignee_type = AssigneeType(raw_type)
    except ValueError:
        raise InvalidRuleError(f"unknown assignee type {raw_type!r}") from None
    if assignee_type == AssigneeType.ROLE:
        return RoleAssignee(role=_str(record.get(f"{prefix}_role")))
    if assignee_type == AssigneeType.SPECIFIC:
        return SpecificAssignee(person=_person(record, prefix))
    if assignee_type == AssigneeType.MANAGER:
        return ManagerAssignee()
    return EmployeeAssignee()


def encode_assignee(prefix: str, assignee: Assignee | None) -> Record:
    """Encode an assignee variant into flat columns."""
    if assignee is None:
        return {
            f"{prefix}_type": AUTO_ASSIGNEE,
            f"{prefix}_role": None,
            **_person_record(prefix, None),
        }
    role = assignee.role if isinstance(assignee, RoleAssignee) else None
    person = assignee.person if isinstance(assignee, SpecificAssignee) else None
    return {
        f"{prefix}_type": assignee.type.value,
        f"{prefix}_role": role,
        **_person_record(prefix, person),
    }


def decode_approver(record: Mapping[str, Any], prefix: str) -> Approver | None:
    """Decode approver columns into a variant, None when no type is set.

    Raises:
        InvalidRuleError: For an unknown approver type.
    """
    raw_type = _str(record.get(f"{prefix}_type"))
    if raw_type is None:
        return None
    try:
        approver_type = ApproverType(raw_type)
    except ValueError:
        raise InvalidRuleError(f"unknown approver type {raw_type!r}") from None
    if approver_type == ApproverType.ROLE:
        return RoleApprover(role=_str(record.get(f"{prefix}_role")))
    if approver_type == ApproverType.SPECIFIC:
        return SpecificApprover(person=_person(record, prefix))
    if approver_type == ApproverType.MANAGER:
        return ManagerApprover()
    return SkipLevelApprover()


def encode_approver(prefix: str, approver: Approver | None) -> Record:
    """Encode an approver variant into flat columns."""
    role = approver.role if isinstance(approver, RoleApprover) else None
    person = approver.person if isinstance(approver, SpecificApprover) else None
    return {
        f"{prefix}_type": approver.type.value if approver else None,
        f"{prefix}_role": role,
        **_person_record(prefix, person),
    }


def _timing(record: Mapping[str, Any], prefix: str = "") -> TimingPolicy:
    offset_raw = _str(record.get(f"{prefix}offset_type"))
    priority_raw = _str(record.get(f"{prefix}priority"))
    try:
        offset_type = OffsetType(offset_raw) if offset_raw else OffsetType.ON_START
        priority = Priority(priority_raw) if priority_raw else Priority.MEDIUM
    except ValueError as exc:
        raise InvalidRuleError(str(exc)) from None
    days = _int(record.get(f"{prefix}days_offset"), 0) or 0
    return TimingPolicy(offset_type=offset_type, days_offset=abs(days), priority=priority)


def _classification(record: Mapping[str, Any]) -> TaskClassification:
    return TaskClassification.parse(record.get("classification"))  # type: ignore[arg-type]


# =============================================================================
# Classification rules
# =============================================================================


def rule_from_record(record: Mapping[str, Any]) -> ClassificationRule:
    """Decode a flat rule record.

    Raises:
        UnknownClassificationError: If the classification is unknown.
        InvalidRuleError: If a variant type or timing value is unknown.
    """
    record_id = record.get("id")
    escalation = None
    if "escalation_enabled" in record or "escalation_approver_type" in record:
        target = decode_approver(record, "escalation_approver")
        escalation = EscalationPolicy(
            enabled=_bool(record.get("escalation_enabled")),
            after_days=_int(record.get("escalation_days")),
            escalate_to=target if not isinstance(target, ManagerApprover) else None,
        )
    auto_approve = None
    if "auto_approve_enabled" in record:
        auto_approve = AutoApprovePolicy(
            enabled=_bool(record.get("auto_approve_enabled")),
            max_cost=_float(record.get("auto_approve_max_cost")),
            max_days=_int(record.get("auto_approve_max_days")),
        )
    sla = None
    if "sla_enabled" in record:
        sla = SlaPolicy(
            enabled=_bool(record.get("sla_enabled")),
            target_days=_int(record.get("sla_days")),
            warning_days=_int(record.get("sla_warning_days")),
        )

    requires_approval = _bool(record.get("requires_approval"))
    return ClassificationRule(
        classification=_classification(record),
        id=_int(record_id),
        scope=RuleScope(
            process_types=_process_types(record.get("process_types"), "process_types", record_id),
            departments=frozenset(
                decode_string_list(record.get("departments"), "departments", record_id)
            ),
        ),
        assignee=decode_assignee(record, "assignee") or RoleAssignee(role=None),
        approval=ApprovalPolicy(
            requires_approval=requires_approval,
            approver=decode_approver(record, "approver") if requires_approval else None,
            escalation=escalation,
            auto_approve=auto_approve,
        ),
        timing=_timing(record),
        sla=sla,
        notifications=NotificationSettings(
            send_email=_bool(record.get("send_email_notification"), True),
            send_teams=_bool(record.get("send_teams_notification"), False),
            notify_on_assignment=_bool(record.get("notify_on_assignment"), True),
            notify_on_completion=_bool(record.get("notify_on_completion"), True),
            notify_manager_on_completion=_bool(
                record.get("notify_manager_on_completion"), False
            ),
            teams_channel_webhook=_str(record.get("teams_channel_webhook")),
        ),
        is_active=_bool(record.get("is_active"), True),
        sort_order=_int(record.get("sort_order"), 0) or 0,
        description=_str(record.get("description")) or "",
        created_at=_datetime(record.get("created_at")),
        modified_at=_datetime(record.get("modified_at")),
    )


def rule_to_record(rule: ClassificationRule) -> Record:
    """Encode a rule into a flat record with JSON-encoded scope lists."""
    approval = rule.approval
    record: Record = {
        "id": rule.id,
        "classification": rule.classification.value,
        "process_types": encode_string_list(rule.scope.process_types),
        "departments": encode_string_list(rule.scope.departments),
        **encode_assignee("assignee", rule.assignee),
        "requires_approval": approval.requires_approval,
        **encode_approver("approver", approval.approver),
        "offset_type": rule.timing.offset_type.value,
        "days_offset": rule.timing.days_offset,
        "priority": rule.timing.priority.value,
        "send_email_notification": bool(rule.notifications.send_email),
        "send_teams_notification": bool(rule.notifications.send_teams),
        "notify_on_assignment": bool(rule.notifications.notify_on_assignment),
        "notify_on_completion": bool(rule.notifications.notify_on_completion),
        "notify_manager_on_completion": bool(
            rule.notifications.notify_manager_on_completion
        ),
        "teams_channel_webhook": rule.notifications.teams_channel_webhook,
        "is_active": rule.is_active,
        "sort_order": rule.sort_order,
        "description": rule.description,
        "created_at": _iso(rule.created_at),
        "modified_at": _iso(rule.modified_at),
    }
    if approval.escalation is not None:
        record["escalation_enabled"] = approval.escalation.enabled
        record["escalation_days"] = approval.escalation.after_days
        record.update(encode_approver("escalation_approver", approval.escalation.escalate_to))
    if approval.auto_approve is not None:
        record["auto_approve_enabled"] = approval.auto_approve.enabled
        record["auto_approve_max_cost"] = approval.auto_approve.max_cost
        record["auto_approve_max_days"] = approval.auto_approve.max_days
    if rule.sla is not None:
        record["sla_enabled"] = rule.sla.enabled
        record["sla_days"] = rule.sla.target_days
        record["sla_warning_days"] = rule.sla.warning_days
    return record


# =============================================================================
# Task library templates
# =============================================================================


def template_from_record(record: Mapping[str, Any]) -> TaskLibraryTemplate:
    """Decode a flat task library record.

    A missing or malformed process type list decodes as ``[All]``. A
    library template without an explicit source refers to itself.

    Raises:
        UnknownClassificationError: If the classification is unknown.
        InvalidRuleError: If a variant type or timing value is unknown.
    """
    record_id = _int(record.get("id"))
    process_types = _process_types(record.get("process_types"), "process_types", record_id)

    source_type_raw = _str(record.get("source_type"))
    try:
        source_type = SourceType(source_type_raw) if source_type_raw else SourceType.CUSTOM
    except ValueError:
        raise InvalidRuleError(f"unknown source type {source_type_raw!r}") from None
    source_id = record.get("source_id")
    if source_id is None and source_type == SourceType.CUSTOM:
        source_id = record_id

    has_timing = any(
        _str(record.get(key)) is not None
        for key in ("default_offset_type", "default_days_offset", "default_priority")
    )
    requires_approval = _bool(record.get("requires_approval"))

    return TaskLibraryTemplate(
        classification=_classification(record),
        title=_str(record.get("title")) or "",
        id=record_id,
        task_code=_str(record.get("task_code")),
        sequence_number=_int(record.get("sequence_number")),
        description=_str(record.get("description")) or "",
        instructions=_str(record.get("instructions")) or "",
        source=SourceReference(source_type=source_type, source_id=source_id),
        process_types=process_types or frozenset({ProcessType.ALL}),
        departments=frozenset(
            decode_string_list(record.get("departments"), "departments", record_id)
        ),
        job_titles=frozenset(
            decode_string_list(record.get("job_titles"), "job_titles", record_id)
        ),
        default_assignee=decode_assignee(record, "default_assignee"),
        timing=_timing(record, "default_") if has_timing else None,
        requires_approval=requires_approval,
        default_approver=decode_approver(record, "default_approver")
        if requires_approval
        else None,
        notifications=NotificationSettings(
            send_email=_bool(record.get("send_email_notification"), True),
            send_teams=_bool(record.get("send_teams_notification"), False),
            notify_on_assignment=_bool(record.get("notify_on_assignment"), True),
            notify_on_completion=_bool(record.get("notify_on_complete"), True),
            notify_manager_on_completion=_bool(
                record.get("notify_manager_on_completion"), False
            ),
        ),
        send_reminder=_bool(record.get("send_reminder"), True),
        reminder_days_before=_int(record.get("reminder_days_before"), 1) or 0,
        depends_on_task_codes=tuple(
            decode_string_list(
                record.get("depends_on_task_codes"), "depends_on_task_codes", record_id
            )
        ),
        blocked_until_complete=_bool(record.get("blocked_until_complete")),
        estimated_hours=_float(record.get("estimated_hours")),
        is_active=_bool(record.get("is_active"), True),
        is_mandatory=_bool(record.get("is_mandatory")),
        sort_order=_int(record.get("sort_order"), 0) or 0,
        tags=tuple(decode_string_list(record.get("tags"), "tags", record_id)),
    )


def template_to_record(template: TaskLibraryTemplate) -> Record:
    """Encode a template into a flat record with JSON-encoded list fields."""
    timing = template.timing
    return {
        "id": template.id,
        "title": template.title,
        "task_code": template.task_code,
        "sequence_number": template.sequence_number,
        "classification": template.classification.value,
        "category": template.category.value,
        "description": template.description,
        "instructions": template.instructions,
        "source_type": template.source.source_type.value,
        "source_id": template.source.source_id,
        "process_types": encode_string_list(template.process_types),
        "departments": encode_string_list(template.departments),
        "job_titles": encode_string_list(template.job_titles),
        **encode_assignee("default_assignee", template.default_assignee),
        "default_offset_type": timing.offset_type.value if timing else None,
        "default_days_offset": timing.days_offset if timing else None,
        "default_priority": timing.priority.value if timing else None,
        "requires_approval": template.requires_approval,
        **encode_approver("default_approver", template.default_approver),
        "send_email_notification": bool(template.notifications.send_email),
        "send_teams_notification": bool(template.notifications.send_teams),
        "notify_on_assignment": bool(template.notifications.notify_on_assignment),
        "notify_on_complete": bool(template.notifications.notify_on_completion),
        "notify_manager_on_completion": bool(
            template.notifications.notify_manager_on_completion
        ),
        "send_reminder": template.send_reminder,
        "reminder_days_before": template.reminder_days_before,
        "depends_on_task_codes": encode_string_list(template.depends_on_task_codes),
        "blocked_until_complete": template.blocked_until_complete,
        "estimated_hours": template.estimated_hours,
        "is_active": template.is_active,
        "is_mandatory": template.is_mandatory,
        "sort_order": template.sort_order,
        "tags": encode_string_list(template.tags),
    }
