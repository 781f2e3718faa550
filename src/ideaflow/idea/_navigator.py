"""Bounds-checked forward and backward movement between refinement steps."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from ideaflow.enums import RefinementStep
from ideaflow.exceptions import StepValidationError
from ideaflow.models import IdeaData

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.idea._workflow import IdeaWorkflow

BASIC_INFO_BLOCKED = "Please provide a title and description before continuing"
VARIATION_BLOCKED = "Please select a variation or merge variations before continuing"


@dataclass(frozen=True, slots=True)
class StepRule:
    """Advance precondition for a step.

    Attributes:
        precondition: Returns True when the document allows advancing.
        message: Inline error shown when the precondition fails.
    """

    precondition: Callable[[IdeaData], bool]
    message: str


def _has_basic_info(document: IdeaData) -> bool:
    return bool(document.title.strip()) and bool(document.description.strip())


def _has_chosen_variation(document: IdeaData) -> bool:
    return document.chosen_variation() is not None


STEP_RULES: dict[RefinementStep, StepRule] = {
    RefinementStep.BASIC_INFO: StepRule(_has_basic_info, BASIC_INFO_BLOCKED),
    RefinementStep.CONCEPT_VARIATIONS: StepRule(_has_chosen_variation, VARIATION_BLOCKED),
}


def can_advance(step: RefinementStep, document: IdeaData) -> bool:
    """Whether the document satisfies the step's advance precondition.

    Steps without a rule always allow advancing.
    """
    rule = STEP_RULES.get(step)
    return rule is None or rule.precondition(document)


def next_label(step: RefinementStep) -> str:
    """Caption for the forward action at a step."""
    if step + 1 < len(RefinementStep):
        return f"Continue to {RefinementStep(step + 1).label}"
    return "Next"


def previous_label(step: RefinementStep) -> str:
    """Caption for the backward action at a step."""
    if step > 0:
        return f"Back to {RefinementStep(step - 1).label}"
    return "Back"


class StepNavigator:
    """Drives the workflow cursor one step at a time."""

    def __init__(
        self,
        workflow: "IdeaWorkflow",
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._workflow = workflow
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.navigator")

    @property
    def is_first(self) -> bool:
        return self._workflow.cursor == RefinementStep.BASIC_INFO

    @property
    def is_last(self) -> bool:
        return self._workflow.cursor == RefinementStep.COMPONENT_VARIATIONS

    @property
    def next_label(self) -> str:
        return next_label(self._workflow.cursor)

    @property
    def previous_label(self) -> str:
        return previous_label(self._workflow.cursor)

    def can_advance(self) -> bool:
        """Whether the current step's precondition holds."""
        return can_advance(self._workflow.cursor, self._workflow.document)

    def check_advance(self) -> None:
        """Raise if the current step's precondition does not hold.

        Raises:
            StepValidationError: Carrying the step's inline message.
        """
        step = self._workflow.cursor
        rule = STEP_RULES.get(step)
        if rule is not None and not rule.precondition(self._workflow.document):
            raise StepValidationError(rule.message, step=step)

    def advance(self) -> bool:
        """Move forward one step.

        Does nothing at the last step. A failed precondition sets the
        workflow error and leaves the cursor where it is.

        Returns:
            True if the cursor moved.
        """
        step = self._workflow.cursor
        if self.is_last:
            return False
        try:
            self.check_advance()
        except StepValidationError as e:
            self._workflow.error = str(e)
            self._logger.info("advance_blocked", step=int(step))
            return False
        _ = self._workflow.save_to_local_storage()
        return self._workflow.set_cursor(step + 1)

    def retreat(self) -> bool:
        """Move back one step. Does nothing at the first step."""
        step = self._workflow.cursor
        if self.is_first:
            return False
        _ = self._workflow.save_to_local_storage()
        return self._workflow.set_cursor(step - 1)
