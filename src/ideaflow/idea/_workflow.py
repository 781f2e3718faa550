"""The workflow state container.

``IdeaWorkflow`` exclusively owns the idea document and the step cursor.
Every change is mirrored to the durable draft storage and, for the cursor,
to the location's ``step`` query parameter.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from ideaflow.enums import RefinementStep
from ideaflow.exceptions import InvalidStepError
from ideaflow.idea._location import STEP_PARAM
from ideaflow.idea._storage import parse_step, require_step
from ideaflow.models import IdeaData

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.idea._location import Location
    from ideaflow.idea._storage import IdeaDraftStorage
    from ideaflow.session import UserSession

DEFAULT_ROUTE = "/idea-hub/refinement"
TOTAL_STEPS = len(RefinementStep)


class IdeaWorkflow:
    """In-progress idea document, step cursor and transient UI flags.

    Attributes:
        is_loading: Set while a remote operation is in progress.
        error: Inline error message, or None.
        success: Inline success message, or None.
        user: The signed-in user, if any.
        route: Path of the refinement page.
    """

    total_steps: int = TOTAL_STEPS

    def __init__(  # noqa: PLR0913
        self,
        storage: "IdeaDraftStorage",
        location: "Location",
        user: "UserSession | None" = None,
        initial_step: int | None = None,
        route: str | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._storage = storage
        self._location = location
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.workflow")
        self.user = user
        self.route = route or DEFAULT_ROUTE
        self.is_loading = False
        self.error: str | None = None
        self.success: str | None = None

        snapshot = storage.load()
        self._document: IdeaData = snapshot.document
        self._cursor: RefinementStep = self._resolve_cursor(snapshot.cursor, initial_step)

        _ = self._storage.save(self._document, self._cursor)
        self._location.replace_param(STEP_PARAM, str(int(self._cursor)))
        self._logger.debug(
            "workflow_loaded",
            step=int(self._cursor),
            has_id=self._document.id is not None,
        )

    def _resolve_cursor(
        self,
        stored: RefinementStep | None,
        initial_step: int | None,
    ) -> RefinementStep:
        from_location = self._location.get_param(STEP_PARAM)
        if from_location is not None:
            step = parse_step(from_location)
            if step is not None:
                return step
            self._logger.warning("location_step_invalid", value=from_location)
        if stored is not None:
            return stored
        if initial_step is not None:
            step = parse_step(initial_step)
            if step is not None:
                return step
            self._logger.warning("initial_step_invalid", value=initial_step)
        return RefinementStep.BASIC_INFO

    # Document

    @property
    def document(self) -> IdeaData:
        """The current idea document."""
        return self._document

    def mutate_document(self, updater: Callable[[IdeaData], IdeaData]) -> IdeaData:
        """Replace the document with ``updater(document)`` and persist it.

        The cursor is not touched. Persistence failures are logged by the
        storage and otherwise ignored.
        """
        self._document = updater(self._document)
        _ = self._storage.save_document(self._document)
        return self._document

    def update_fields(self, **fields: object) -> IdeaData:
        """Set document fields by name, validating the result.

        Raises:
            ValueError: If a name is not a document field or a value does
                not validate.
        """
        unknown = sorted(set(fields) - set(IdeaData.model_fields))
        if unknown:
            msg = f"Unknown idea fields: {', '.join(unknown)}"
            raise ValueError(msg)

        def _apply(document: IdeaData) -> IdeaData:
            data = document.model_dump(by_alias=True)
            data.update(fields)
            try:
                return IdeaData.model_validate(data)
            except ValidationError as e:
                raise ValueError(str(e)) from e

        return self.mutate_document(_apply)

    # Cursor

    @property
    def cursor(self) -> RefinementStep:
        """The current step."""
        return self._cursor

    @property
    def step_url(self) -> str:
        """The route with the current step as query parameter."""
        return f"{self.route}?{STEP_PARAM}={int(self._cursor)}"

    def set_cursor(self, step: object) -> bool:
        """Move to a step.

        The document is persisted first, then the cursor, then the location
        is updated. Values outside ``0 <= step < 5`` are logged and ignored.

        Returns:
            True if the cursor was accepted.
        """
        try:
            target = require_step(step)
        except InvalidStepError as e:
            self._logger.warning("invalid_step", value=e.value, total_steps=self.total_steps)
            return False
        _ = self._storage.save_document(self._document)
        self._cursor = target
        _ = self._storage.save_cursor(target)
        self._location.replace_param(STEP_PARAM, str(int(target)))
        self._logger.debug("step_changed", step=int(target))
        return True

    # Durability

    def save_to_local_storage(self) -> bool:
        """Flush document and cursor to durable storage."""
        return self._storage.save(self._document, self._cursor)

    def clear_local_storage(self) -> bool:
        """Remove the durable draft. In-memory state is untouched."""
        return self._storage.clear()

    def clear_messages(self) -> None:
        """Reset the inline error and success messages."""
        self.error = None
        self.success = None
