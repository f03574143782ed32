"""Unit tests for the task classification taxonomy."""

from __future__ import annotations

import pytest

from src.domain.errors.classification import UnknownClassificationError
from src.domain.exceptions import RoutingEngineError
from src.domain.models.classification import (
    ProcessType,
    TaskCategory,
    TaskClassification,
    generate_task_code,
    parse_task_code,
    process_types_match,
)


class TestTaskClassificationParse:
    """Tests for TaskClassification.parse."""

    def test_parses_exact_code(self) -> None:
        """Exact codes map onto their member."""
        assert TaskClassification.parse("SYS") is TaskClassification.SYS

    def test_parse_is_case_insensitive_and_trims(self) -> None:
        """Lower case and surrounding whitespace are accepted."""
        assert TaskClassification.parse("  hrd ") is TaskClassification.HRD

    def test_member_passes_through(self) -> None:
        """A member is returned unchanged."""
        assert TaskClassification.parse(TaskClassification.FIN) is TaskClassification.FIN

    @pytest.mark.parametrize("value", ["XYZ", "", "SYSTEM", 7, None])
    def test_unknown_value_is_rejected(self, value: object) -> None:
        """Values outside the taxonomy raise instead of defaulting."""
        with pytest.raises(UnknownClassificationError) as exc_info:
            TaskClassification.parse(value)  # type: ignore[arg-type]
        assert exc_info.value.value == value

    def test_unknown_classification_is_routing_engine_error(self) -> None:
        """The error belongs to the engine's error hierarchy."""
        with pytest.raises(RoutingEngineError, match="Unknown task classification"):
            TaskClassification.parse("ABC")

    def test_members_compare_equal_to_codes(self) -> None:
        """Members can be switched on by their raw code."""
        assert TaskClassification.DOC == "DOC"

    def test_every_member_has_label_and_description(self) -> None:
        """Every classification carries display metadata."""
        for classification in TaskClassification:
            assert classification.label
            assert classification.description


class TestTaskCategory:
    """Tests for the editing category mapping."""

    def test_mapped_classifications(self) -> None:
        """Classifications with a category map onto it."""
        assert (
            TaskCategory.for_classification(TaskClassification.SYS)
            is TaskCategory.SYSTEM_ACCESS
        )
        assert TaskCategory.for_classification(TaskClassification.HRD) is TaskCategory.EQUIPMENT

    def test_unmapped_classification_is_general(self) -> None:
        """Classifications without a category fall into GENERAL."""
        assert TaskCategory.for_classification(TaskClassification.FIN) is TaskCategory.GENERAL

    def test_code_prefixes(self) -> None:
        """Categories number their tasks with the classification code."""
        assert TaskCategory.TRAINING.code_prefix == "TRN"
        assert TaskCategory.GENERAL.code_prefix == "GEN"


class TestTaskCodes:
    """Tests for task code formatting and parsing."""

    def test_generate_pads_to_three_digits(self) -> None:
        """Sequence numbers are zero padded."""
        assert generate_task_code(TaskClassification.SYS, 7) == "SYS-007"

    def test_generate_rejects_non_positive(self) -> None:
        """Sequence numbers start at 1."""
        with pytest.raises(ValueError, match="must be positive"):
            generate_task_code(TaskClassification.SYS, 0)

    def test_parse_valid_code(self) -> None:
        """A well-formed code splits into classification and number."""
        assert parse_task_code("DOC-012") == (TaskClassification.DOC, 12)

    def test_codes_past_999_round_trip(self) -> None:
        """Sequence numbers above 999 widen the code and still parse."""
        code = generate_task_code(TaskClassification.SYS, 1000)
        assert code == "SYS-1000"
        assert parse_task_code(code) == (TaskClassification.SYS, 1000)

    @pytest.mark.parametrize("code", ["DOC12", "doc-012", "XYZ-001", "DOC-1"])
    def test_parse_invalid_code(self, code: str) -> None:
        """Malformed codes or unknown prefixes parse to None."""
        assert parse_task_code(code) is None


class TestProcessTypesMatch:
    """Tests for process-type scope matching."""

    def test_empty_scope_matches_everything(self) -> None:
        """An empty scope is unrestricted."""
        assert process_types_match(frozenset(), ProcessType.MOVER)

    def test_all_wildcard(self) -> None:
        """ALL matches every process type."""
        assert process_types_match(frozenset({ProcessType.ALL}), ProcessType.OFFBOARDING)

    def test_unlisted_type_does_not_match(self) -> None:
        """A listed scope excludes other process types."""
        assert not process_types_match(
            frozenset({ProcessType.ONBOARDING}), ProcessType.OFFBOARDING
        )

    def test_unknown_context_matches(self) -> None:
        """No requested process type matches any scope."""
        assert process_types_match(frozenset({ProcessType.ONBOARDING}), None)
