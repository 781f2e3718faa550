"""Classification of remote failures into structured kinds.

Backend error text is matched here, once, when a response is turned into a
``RemoteError``. Everything downstream switches on ``RemoteError.kind``.
"""

import re

from ideaflow.enums import RemoteErrorKind
from ideaflow.exceptions import RemoteError

# PostgreSQL / PostgREST error codes
_CODE_KINDS: dict[str, RemoteErrorKind] = {
    "23505": RemoteErrorKind.DUPLICATE_KEY,
    "23503": RemoteErrorKind.FOREIGN_KEY,
    "42501": RemoteErrorKind.PERMISSION_DENIED,
    "42703": RemoteErrorKind.UNKNOWN_COLUMN,
    "PGRST204": RemoteErrorKind.UNKNOWN_COLUMN,
}

_MESSAGE_KINDS: tuple[tuple[str, RemoteErrorKind], ...] = (
    ("duplicate key", RemoteErrorKind.DUPLICATE_KEY),
    ("violates foreign key constraint", RemoteErrorKind.FOREIGN_KEY),
    ("permission denied", RemoteErrorKind.PERMISSION_DENIED),
)

_COLUMN_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"column \"?(?:\w+\.)?(?P<field>\w+)\"?(?: of relation \"?\w+\"?)? does not exist"),
    re.compile(r"Could not find the '(?P<field>\w+)' column"),
)


def extract_column(message: str) -> str | None:
    """Return the column named in an unknown-column message, if any."""
    for pattern in _COLUMN_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group("field")
    return None


def classify_error_message(
    message: str,
    code: str | None = None,
) -> tuple[RemoteErrorKind, str | None]:
    """Classify a backend error.

    Args:
        message: Human-readable error text from the backend.
        code: Machine error code, when the backend sent one.

    Returns:
        The error kind and, for unknown-column errors, the offending field.
    """
    field = extract_column(message)
    if code is not None and code in _CODE_KINDS:
        kind = _CODE_KINDS[code]
        return kind, field if kind is RemoteErrorKind.UNKNOWN_COLUMN else None

    lowered = message.lower()
    for needle, kind in _MESSAGE_KINDS:
        if needle in lowered:
            return kind, None
    if field is not None:
        return RemoteErrorKind.UNKNOWN_COLUMN, field
    return RemoteErrorKind.UNKNOWN, None


def remote_error(
    message: str,
    *,
    code: str | None = None,
    status_code: int | None = None,
) -> RemoteError:
    """Build a classified RemoteError."""
    kind, field = classify_error_message(message, code)
    return RemoteError(message, kind=kind, field=field, status_code=status_code)
