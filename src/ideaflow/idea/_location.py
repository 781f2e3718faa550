"""URL-like location the workflow mirrors its step into."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlencode, urlsplit

STEP_PARAM = "step"


@runtime_checkable
class Location(Protocol):
    """Read and replace query parameters of the current route."""

    @property
    def path(self) -> str:
        """Route path, e.g. ``/idea-hub/refinement``."""
        ...

    def get_param(self, name: str) -> str | None:
        """Return a query parameter, or None if absent."""
        ...

    def replace_param(self, name: str, value: str) -> None:
        """Set a query parameter without adding a history entry."""
        ...


@dataclass(slots=True)
class MemoryLocation:
    """In-process location used by the CLI and tests.

    Replacements are recorded in ``history`` (newest last) so callers can
    observe the order of location updates.
    """

    path: str = "/idea-hub/refinement"
    query: dict[str, str] = field(default_factory=dict)
    history: list[str] = field(default_factory=list)

    @classmethod
    def from_url(cls, url: str) -> "MemoryLocation":
        """Build a location from a path with an optional query string."""
        parts = urlsplit(url)
        return cls(path=parts.path or "/", query=dict(parse_qsl(parts.query)))

    @property
    def url(self) -> str:
        """Path plus encoded query string."""
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query)}"

    def get_param(self, name: str) -> str | None:
        return self.query.get(name)

    def replace_param(self, name: str, value: str) -> None:
        self.query[name] = value
        self.history.append(self.url)
