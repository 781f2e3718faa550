"""ideaflow exceptions."""

from pathlib import Path
from typing import Any

from ideaflow.enums import RefinementStep, RemoteErrorKind


class IdeaflowError(Exception):
    """Base exception for ideaflow errors."""


class ConfigError(IdeaflowError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# Workflow Exceptions
# =============================================================================


class WorkflowError(IdeaflowError):
    """Base exception for refinement workflow errors."""


class InvalidStepError(WorkflowError, ValueError):
    """Raised when a step value cannot be interpreted as a workflow step.

    Attributes:
        value: The rejected value.
    """

    def __init__(self, message: str, *, value: object) -> None:
        """Initialize with error message and the rejected value."""
        super().__init__(message)
        self.value: object = value


class StepValidationError(WorkflowError):
    """Raised when a step precondition is not satisfied.

    The message is user-facing and is what the workflow shows inline.

    Attributes:
        step: The step whose precondition failed, if known.
    """

    def __init__(self, message: str, *, step: RefinementStep | None = None) -> None:
        """Initialize with a user-facing message and the failing step."""
        super().__init__(message)
        self.step: RefinementStep | None = step


class MergeArityError(StepValidationError):
    """Raised when a merge is attempted with too few or too many variations.

    Attributes:
        count: Number of variations supplied.
    """

    def __init__(self, message: str, *, count: int) -> None:
        """Initialize with a user-facing message and the supplied count."""
        super().__init__(message, step=RefinementStep.CONCEPT_VARIATIONS)
        self.count: int = count


# =============================================================================
# Remote Exceptions
# =============================================================================


class RemoteError(IdeaflowError):
    """Raised when the remote data service rejects or fails a call.

    Attributes:
        kind: Structured classification of the failure.
        field: The offending field for UNKNOWN_COLUMN failures.
        status_code: HTTP status code, when the failure came from HTTP.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: RemoteErrorKind = RemoteErrorKind.UNKNOWN,
        field: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize with error message and classification."""
        super().__init__(message)
        self.kind: RemoteErrorKind = kind
        self.field: str | None = field
        self.status_code: int | None = status_code

    @property
    def detail(self) -> str:
        """Technical detail suitable for support diagnostics."""
        return str(self)


class RemoteNotConfiguredError(RemoteError):
    """Raised when a remote call is needed but no remote service is configured."""

    def __init__(self, message: str = "No remote data service is configured") -> None:
        """Initialize with a NETWORK-kind error."""
        super().__init__(message, kind=RemoteErrorKind.NETWORK)
