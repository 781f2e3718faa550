"""Remote persistence of the idea with a degrading retry ladder.

The ladder has three rungs:

1. The full payload, with every derived sub-document.
2. If the backend rejected an unknown column that is in the payload, the
   full payload without that column.
3. Otherwise, or if rung 2 failed too, the base payload of plain text
   fields only.

The document is never lost: it is flushed to local storage before the
first rung, and a failed ladder leaves it unchanged.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from ideaflow.enums import RemoteErrorKind
from ideaflow.exceptions import RemoteError, RemoteNotConfiguredError
from ideaflow.models import TEXT_FIELDS, IdeaData

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.idea._storage import IdeaDraftStorage
    from ideaflow.idea._workflow import IdeaWorkflow
    from ideaflow.remote import Payload, RemoteDataService, SavedRecord

NOT_LOGGED_IN = "You must be logged in to save your idea. Your progress is saved locally."
MISSING_BASICS = "Please provide at least a title and description before saving."
SAVED = "Idea saved successfully!"
UPDATED = "Idea updated successfully!"

# After this many attempts the message includes the technical detail
PERSISTENT_AFTER = 2

_KIND_MESSAGES: dict[RemoteErrorKind, str] = {
    RemoteErrorKind.DUPLICATE_KEY: (
        "You already have an idea with this title. Please use a different title."
    ),
    RemoteErrorKind.FOREIGN_KEY: (
        "There was an issue with the database relationships. Your progress is saved locally."
    ),
    RemoteErrorKind.PERMISSION_DENIED: (
        "You don't have permission to save this idea. Please check your account status."
    ),
}


def error_message(error: RemoteError, attempts: int) -> str:
    """User-facing message for a failed save."""
    if error.kind in _KIND_MESSAGES:
        return _KIND_MESSAGES[error.kind]
    if attempts > PERSISTENT_AFTER:
        return (
            "Persistent error saving to database. Your progress is saved locally. "
            f"Technical details: {error.detail}"
        )
    return f"Error saving idea: {error.detail}. Your progress is saved locally."


def base_payload(document: IdeaData, user_id: str) -> "Payload":
    """The plain-text fields every backend accepts."""
    payload: Payload = {
        "user_id": user_id,
        "title": document.title.strip(),
        "description": document.description.strip(),
    }
    for name in TEXT_FIELDS:
        payload[name] = getattr(document, name)
    payload["status"] = "draft"
    return payload


def full_payload(document: IdeaData, user_id: str) -> "Payload":
    """The base payload plus every derived sub-document, as JSON values."""
    derived = document.model_dump(
        mode="json",
        by_alias=True,
        include={
            "ai_feedback",
            "business_suggestions",
            "selected_suggestions",
            "concept_variations",
            "selected_variation",
            "merged_variation",
        },
    )
    return {**base_payload(document, user_id), **derived}


@dataclass(frozen=True, slots=True)
class SaveOutcome:
    """Result of one save.

    Attributes:
        saved: Whether any rung succeeded.
        record: Identity returned by the remote on success.
        rung: The rung that succeeded (1 to 3).
        error: The final error when every rung failed.
        message: The message that was shown.
    """

    saved: bool
    record: "SavedRecord | None" = None
    rung: int | None = None
    error: RemoteError | None = None
    message: str | None = None


class IdeaSaver:
    """Saves the workflow document to the remote data service.

    When ``storage`` is given the attempt counter is read from and written
    back to it, so it keeps counting across savers built for the same draft.

    Attributes:
        attempts: Number of ladder runs so far, including the current one.
    """

    def __init__(
        self,
        remote: "RemoteDataService | None" = None,
        *,
        storage: "IdeaDraftStorage | None" = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._remote = remote
        self._storage = storage
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.saver")
        self.attempts = storage.load_save_attempts() if storage is not None else 0

    def _count_attempt(self) -> None:
        if self._storage is not None:
            self.attempts = self._storage.load_save_attempts()
        self.attempts += 1
        if self._storage is not None:
            _ = self._storage.save_save_attempts(self.attempts)

    async def _send(self, document: IdeaData, payload: "Payload") -> "SavedRecord":
        if self._remote is None:
            raise RemoteNotConfiguredError
        if document.id is not None:
            return await self._remote.update_idea(document.id, payload)
        return await self._remote.insert_idea(payload)

    async def _climb(self, document: IdeaData, user_id: str) -> tuple["SavedRecord", int]:
        full = full_payload(document, user_id)
        try:
            return await self._send(document, full), 1
        except RemoteError as e:
            self._logger.warning("save_rung_failed", rung=1, kind=e.kind.value, error=str(e))
            first = e

        if first.kind is RemoteErrorKind.UNKNOWN_COLUMN and first.field in full:
            trimmed = {k: v for k, v in full.items() if k != first.field}
            try:
                return await self._send(document, trimmed), 2
            except RemoteError as e:
                self._logger.warning(
                    "save_rung_failed", rung=2, kind=e.kind.value, field=first.field, error=str(e)
                )

        return await self._send(document, base_payload(document, user_id)), 3

    async def save(self, workflow: "IdeaWorkflow") -> SaveOutcome:
        """Run the ladder and report the result through the workflow flags.

        Never raises for remote failures.
        """
        if workflow.user is None:
            workflow.error = NOT_LOGGED_IN
            return SaveOutcome(saved=False, message=NOT_LOGGED_IN)
        document = workflow.document
        if not document.title.strip() or not document.description.strip():
            workflow.error = MISSING_BASICS
            return SaveOutcome(saved=False, message=MISSING_BASICS)

        workflow.is_loading = True
        workflow.clear_messages()
        self._count_attempt()
        try:
            _ = workflow.save_to_local_storage()
            updating = document.id is not None
            try:
                record, rung = await self._climb(document, workflow.user.user_id)
            except RemoteError as e:
                message = error_message(e, self.attempts)
                workflow.error = message
                self._logger.error(
                    "save_failed",
                    attempts=self.attempts,
                    kind=e.kind.value,
                    error=str(e),
                )
                return SaveOutcome(saved=False, error=e, message=message)

            _ = workflow.mutate_document(
                lambda doc: doc.model_copy(update={"id": record.id, "version": record.version})
            )
            message = UPDATED if updating else SAVED
            workflow.success = message
            self._logger.info("idea_saved", idea_id=record.id, rung=rung, updated=updating)
            return SaveOutcome(saved=True, record=record, rung=rung, message=message)
        finally:
            workflow.is_loading = False
