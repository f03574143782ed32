"""Task classification taxonomy.

This module defines the fixed set of task categories that drive routing
policy, the process types a rule or template can be scoped to, and the
task code format used by the task library (``SYS-001``).

Key Concepts:
- Classification: three-letter category code (DOC, SYS, HRD, ...)
- Process type: Onboarding, Mover, Offboarding, or All (wildcard)
- Task category: the coarser grouping shown while editing a checklist
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from src.domain.errors.classification import UnknownClassificationError

TASK_CODE_PATTERN = re.compile(r"^([A-Z]{3})-(\d{3,})$")

# Prefix used for tasks whose category has no classification
GENERAL_TASK_CODE_PREFIX: str = "GEN"


class TaskClassification(StrEnum):
    """Fixed enumeration of task categories.

    Members compare equal to their code strings, so consumers can switch
    on either the member or the raw value.
    """

    DOC = "DOC"
    SYS = "SYS"
    HRD = "HRD"
    TRN = "TRN"
    ORI = "ORI"
    CMP = "CMP"
    FAC = "FAC"
    SEC = "SEC"
    FIN = "FIN"
    COM = "COM"

    @property
    def label(self) -> str:
        """Human readable label for this classification."""
        return CLASSIFICATION_INFO[self].label

    @property
    def description(self) -> str:
        """One-line description of what this classification covers."""
        return CLASSIFICATION_INFO[self].description

    @classmethod
    def parse(cls, value: TaskClassification | str) -> TaskClassification:
        """Parse a value into a TaskClassification.

        Matching is case-insensitive and ignores surrounding whitespace.

        Args:
            value: A member or its code string.

        Returns:
            The matching TaskClassification.

        Raises:
            UnknownClassificationError: If the value is not in the taxonomy.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownClassificationError(value)
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise UnknownClassificationError(value) from None


@dataclass(frozen=True)
class ClassificationInfo:
    """Static display data for a classification."""

    label: str
    description: str


CLASSIFICATION_INFO: dict[TaskClassification, ClassificationInfo] = {
    TaskClassification.DOC: ClassificationInfo(
        "Documentation", "Paperwork, contracts, and document collection"
    ),
    TaskClassification.SYS: ClassificationInfo(
        "System Access", "Software, applications, and system provisioning"
    ),
    TaskClassification.HRD: ClassificationInfo(
        "Hardware", "Laptops, phones, and physical equipment"
    ),
    TaskClassification.TRN: ClassificationInfo(
        "Training", "Courses, certifications, and learning"
    ),
    TaskClassification.ORI: ClassificationInfo(
        "Orientation", "Induction, introductions, and onboarding sessions"
    ),
    TaskClassification.CMP: ClassificationInfo(
        "Compliance", "Legal, regulatory, and policy requirements"
    ),
    TaskClassification.FAC: ClassificationInfo(
        "Facilities", "Workspace, desk, and office setup"
    ),
    TaskClassification.SEC: ClassificationInfo(
        "Security", "Access cards, badges, and physical security"
    ),
    TaskClassification.FIN: ClassificationInfo(
        "Finance", "Payroll, banking, and financial setup"
    ),
    TaskClassification.COM: ClassificationInfo(
        "Communication", "Email, Teams, and communication accounts"
    ),
}


class ProcessType(StrEnum):
    """HR process a rule or template applies to.

    ALL is a wildcard: a scope or template listing it matches every
    process type.
    """

    ONBOARDING = "Onboarding"
    MOVER = "Mover"
    OFFBOARDING = "Offboarding"
    ALL = "All"


class TaskCategory(StrEnum):
    """Grouping shown on a configurable task while a checklist is edited."""

    DOCUMENTATION = "Documentation"
    SYSTEM_ACCESS = "System Access"
    EQUIPMENT = "Equipment"
    TRAINING = "Training"
    ORIENTATION = "Orientation"
    COMPLIANCE = "Compliance"
    GENERAL = "General"

    @classmethod
    def for_classification(cls, classification: TaskClassification) -> TaskCategory:
        """Map a classification onto its editing category (GENERAL if none)."""
        return _CATEGORY_BY_CLASSIFICATION.get(classification, cls.GENERAL)

    @property
    def code_prefix(self) -> str:
        """Task code prefix used when auto-numbering tasks of this category."""
        for classification, category in _CATEGORY_BY_CLASSIFICATION.items():
            if category is self:
                return classification.value
        return GENERAL_TASK_CODE_PREFIX


_CATEGORY_BY_CLASSIFICATION: dict[TaskClassification, TaskCategory] = {
    TaskClassification.DOC: TaskCategory.DOCUMENTATION,
    TaskClassification.SYS: TaskCategory.SYSTEM_ACCESS,
    TaskClassification.HRD: TaskCategory.EQUIPMENT,
    TaskClassification.TRN: TaskCategory.TRAINING,
    TaskClassification.ORI: TaskCategory.ORIENTATION,
    TaskClassification.CMP: TaskCategory.COMPLIANCE,
}


def process_types_match(
    scoped: frozenset[ProcessType], process_type: ProcessType | None
) -> bool:
    """Check a process-type scope against a requested process type.

    An empty scope, an ALL entry, or no requested type all match.
    """
    if not scoped or process_type is None:
        return True
    return process_type in scoped or ProcessType.ALL in scoped


def generate_task_code(classification: TaskClassification | str, sequence_number: int) -> str:
    """Build a task code such as ``SYS-001``.

    The sequence number is zero padded to at least three digits.

    Args:
        classification: Classification (or prefix string) for the code.
        sequence_number: Positive sequence number within the classification.

    Returns:
        The formatted task code.

    Raises:
        ValueError: If sequence_number is not positive.
    """
    if sequence_number < 1:
        raise ValueError(f"sequence_number must be positive, got {sequence_number}")
    return f"{classification}-{sequence_number:03d}"


def parse_task_code(task_code: str) -> tuple[TaskClassification, int] | None:
    """Split a task code into classification and sequence number.

    Returns:
        (classification, sequence_number), or None when the code is not in
        ``AAA-NNN`` form (three or more digits) or its prefix is not a known classification.
    """
    match = TASK_CODE_PATTERN.match(task_code)
    if match is None:
        return None
    try:
        classification = TaskClassification(match.group(1))
    except ValueError:
        return None
    return classification, int(match.group(2))
