"""Best-effort local durability for the idea draft.

Every operation here swallows storage and serialization failures: a
degraded store means "nothing was saved", never an exception in the caller.
"""

from typing import TYPE_CHECKING, NamedTuple

import structlog
from pydantic import ValidationError

from ideaflow.enums import RefinementStep
from ideaflow.exceptions import InvalidStepError
from ideaflow.models import IdeaData, default_idea_data

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.utils import StateStore

DEFAULT_KEY_PREFIX = "wheel99"


class DraftSnapshot(NamedTuple):
    """What ``IdeaDraftStorage.load`` recovered.

    ``cursor`` is None when no valid step was stored.
    """

    document: IdeaData
    cursor: RefinementStep | None


def parse_step(value: object) -> RefinementStep | None:
    """Interpret a stored or query-string value as a step, or None.

    Accepts ints and decimal strings in ``0 <= n < 5``. Booleans, floats
    and anything else are rejected.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text.lstrip("-").isdecimal():
            return None
        value = int(text)
    if not isinstance(value, int):
        return None
    try:
        return RefinementStep(value)
    except ValueError:
        return None


def require_step(value: object) -> RefinementStep:
    """Like ``parse_step``, but raising for unusable values.

    Raises:
        InvalidStepError: If ``value`` is not a step.
    """
    step = parse_step(value)
    if step is None:
        msg = f"Invalid step: {value!r}"
        raise InvalidStepError(msg, value=value)
    return step


class IdeaDraftStorage:
    """Mirror of the workflow document and cursor in a state store.

    Three keys are used: ``<prefix>_idea_refinement_data`` holds the document
    as JSON, ``<prefix>_idea_refinement_step`` holds the cursor as a decimal
    string and ``<prefix>_idea_save_attempts`` counts remote save attempts.
    """

    def __init__(
        self,
        store: "StateStore",
        *,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        author: str | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._store = store
        self._author = author
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.storage")
        self.data_key = f"{key_prefix}_idea_refinement_data"
        self.step_key = f"{key_prefix}_idea_refinement_step"
        self.attempts_key = f"{key_prefix}_idea_save_attempts"

    def save(self, document: IdeaData, cursor: RefinementStep | int) -> bool:
        """Write the document, then the cursor. Returns False on any failure."""
        return self.save_document(document) and self.save_cursor(cursor)

    def save_document(self, document: IdeaData) -> bool:
        """Write the document key only."""
        try:
            payload = document.model_dump_json(by_alias=True)
            self._store.set(self.data_key, payload, author=self._author)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_save_failed", key=self.data_key, error=str(e))
            return False
        return True

    def save_cursor(self, cursor: RefinementStep | int) -> bool:
        """Write the cursor key only."""
        try:
            self._store.set(self.step_key, str(int(cursor)), author=self._author)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_save_failed", key=self.step_key, error=str(e))
            return False
        return True

    def load(self) -> DraftSnapshot:
        """Read both keys, substituting defaults for anything unusable."""
        return DraftSnapshot(self._load_document(), self._load_cursor())

    def _read(self, key: str) -> object:
        try:
            return self._store[key]
        except KeyError:
            return None

    def _load_document(self) -> IdeaData:
        try:
            raw = self._read(self.data_key)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_load_failed", key=self.data_key, error=str(e))
            return default_idea_data()
        if raw is None:
            return default_idea_data()
        if not isinstance(raw, str | bytes):
            self._logger.warning("draft_corrupt", key=self.data_key, type=type(raw).__name__)
            return default_idea_data()
        try:
            return IdeaData.model_validate_json(raw)
        except ValidationError as e:
            self._logger.warning("draft_corrupt", key=self.data_key, error=str(e))
            return default_idea_data()

    def _load_cursor(self) -> RefinementStep | None:
        try:
            raw = self._read(self.step_key)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_load_failed", key=self.step_key, error=str(e))
            return None
        if raw is None:
            return None
        step = parse_step(raw)
        if step is None:
            self._logger.warning("draft_step_invalid", key=self.step_key, value=raw)
        return step

    def load_save_attempts(self) -> int:
        """Remote save attempts recorded so far, 0 when unknown."""
        try:
            raw = self._read(self.attempts_key)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_load_failed", key=self.attempts_key, error=str(e))
            return 0
        if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 0:
            return raw
        if raw is not None:
            self._logger.warning("save_attempts_invalid", key=self.attempts_key, value=raw)
        return 0

    def save_save_attempts(self, attempts: int) -> bool:
        """Write the save attempt counter."""
        try:
            self._store.set(self.attempts_key, attempts, author=self._author)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_save_failed", key=self.attempts_key, error=str(e))
            return False
        return True

    def clear(self) -> bool:
        """Delete the draft keys. Returns False on any failure."""
        try:
            _ = self._store.delete(self.data_key)
            _ = self._store.delete(self.step_key)
            _ = self._store.delete(self.attempts_key)
        except Exception as e:  # noqa: BLE001
            self._logger.error("draft_clear_failed", error=str(e))
            return False
        return True
