# pyright: reportAny=false
"""Unit tests for ideaflow exceptions.

These tests verify that exception constructors correctly store context
attributes. We don't test Python built-in behaviors (inheritance, str()).
"""

from pathlib import Path

from ideaflow.enums import RefinementStep, RemoteErrorKind
from ideaflow.exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    InvalidStepError,
    MergeArityError,
    RemoteError,
    RemoteNotConfiguredError,
    StepValidationError,
)


class TestConfigLoadError:
    def test_stores_location_context(self) -> None:
        error = ConfigLoadError(
            "Parse error", path=Path("/project/ideaflow.toml"), line=15, column=8
        )

        assert error.path == Path("/project/ideaflow.toml")
        assert error.line == 15
        assert error.column == 8

    def test_context_fields_default_to_none(self) -> None:
        error = ConfigLoadError("Simple error")

        assert error.path is None
        assert error.line is None
        assert error.column is None


class TestConfigValidationError:
    def test_stores_validation_context(self) -> None:
        error = ConfigValidationError(
            "Invalid enum value",
            key="storage.backend",
            value="redis",
            expected="'sqlite' or 'memory'",
            source="project",
        )

        assert error.key == "storage.backend"
        assert error.value == "redis"
        assert error.expected == "'sqlite' or 'memory'"
        assert error.source == "project"


class TestWorkflowErrors:
    def test_invalid_step_keeps_value_and_is_a_value_error(self) -> None:
        error = InvalidStepError("bad step", value="seven")

        assert error.value == "seven"
        assert isinstance(error, ValueError)

    def test_step_validation_error_step_defaults_to_none(self) -> None:
        assert StepValidationError("blocked").step is None

    def test_merge_arity_error_is_a_concept_variation_failure(self) -> None:
        error = MergeArityError("too few", count=1)

        assert error.count == 1
        assert error.step is RefinementStep.CONCEPT_VARIATIONS


class TestRemoteError:
    def test_defaults(self) -> None:
        error = RemoteError("boom")

        assert error.kind is RemoteErrorKind.UNKNOWN
        assert error.field is None
        assert error.status_code is None
        assert error.detail == "boom"

    def test_stores_classification(self) -> None:
        error = RemoteError(
            "column missing",
            kind=RemoteErrorKind.UNKNOWN_COLUMN,
            field="market_insights",
            status_code=400,
        )

        assert error.kind is RemoteErrorKind.UNKNOWN_COLUMN
        assert error.field == "market_insights"
        assert error.status_code == 400

    def test_not_configured_is_a_network_failure(self) -> None:
        error = RemoteNotConfiguredError()

        assert error.kind is RemoteErrorKind.NETWORK
        assert "No remote" in str(error)
