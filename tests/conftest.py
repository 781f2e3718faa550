"""Shared test fixtures for ideaflow tests."""

import os
from collections.abc import Callable

import pytest
from rich.console import Console

from ideaflow.idea import IdeaDraftStorage, IdeaWorkflow, MemoryLocation
from ideaflow.models import Variation
from ideaflow.remote import FakeRemoteService
from ideaflow.session import UserSession
from ideaflow.utils import MockStateStore, StateStoreKey, StateStoreValue

WorkflowFactory = Callable[..., IdeaWorkflow]


class BrokenStateStore(MockStateStore):
    """A store whose every operation fails, like a full or locked disk."""

    def __getitem__(self, key: StateStoreKey) -> StateStoreValue:
        msg = "store unavailable"
        raise OSError(msg)

    def set(
        self,
        key: StateStoreKey,
        value: StateStoreValue,
        *,
        author: str | None = None,
    ) -> None:
        msg = "store unavailable"
        raise OSError(msg)

    def delete(self, key: StateStoreKey) -> bool:
        msg = "store unavailable"
        raise OSError(msg)


def make_variation(index: int, **overrides: object) -> Variation:
    """A concept variation with predictable text."""
    fields: dict[str, object] = {
        "id": f"v{index}",
        "title": f"Idea{index} Plus",
        "description": f"A service number {index}",
        "differentiator": f"Feature {index}.",
        "target_market": f"Market {index}.",
        "revenue_model": f"Model {index}.",
    }
    fields.update(overrides)
    return Variation.model_validate(fields)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store() -> MockStateStore:
    return MockStateStore()


@pytest.fixture
def storage(store: MockStateStore) -> IdeaDraftStorage:
    return IdeaDraftStorage(store)


@pytest.fixture
def location() -> MemoryLocation:
    return MemoryLocation()


@pytest.fixture
def user() -> UserSession:
    return UserSession(user_id="user-1", email="founder@example.test")


@pytest.fixture
def make_workflow(
    storage: IdeaDraftStorage, location: MemoryLocation, user: UserSession
) -> WorkflowFactory:
    """Return a factory building workflows over the shared store and location.

    Every call builds a fresh container, as a page reload would.
    """

    def _make(**overrides: object) -> IdeaWorkflow:
        kwargs: dict[str, object] = {
            "storage": storage,
            "location": location,
            "user": user,
        }
        kwargs.update(overrides)
        return IdeaWorkflow(**kwargs)  # pyright: ignore[reportArgumentType]

    return _make


@pytest.fixture
def workflow(make_workflow: WorkflowFactory) -> IdeaWorkflow:
    return make_workflow()


@pytest.fixture
def remote() -> FakeRemoteService:
    return FakeRemoteService()


@pytest.fixture
def console() -> Console:
    return Console(
        width=100,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host IDEAFLOW_* variables out of configuration loading."""
    for name in list(os.environ):
        if name.startswith("IDEAFLOW_"):
            monkeypatch.delenv(name)
