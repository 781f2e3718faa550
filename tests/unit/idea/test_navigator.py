import pytest

from ideaflow.enums import RefinementStep
from ideaflow.exceptions import StepValidationError
from ideaflow.idea import (
    IdeaDraftStorage,
    IdeaWorkflow,
    StepNavigator,
    can_advance,
    next_label,
    previous_label,
)
from ideaflow.idea._navigator import BASIC_INFO_BLOCKED, VARIATION_BLOCKED
from ideaflow.models import IdeaData, MergedVariation
from tests.conftest import make_variation


@pytest.fixture
def navigator(workflow: IdeaWorkflow) -> StepNavigator:
    return StepNavigator(workflow)


class TestCanAdvance:
    @pytest.mark.parametrize(
        ("title", "description", "expected"),
        [
            ("Coffee", "Fresh beans", True),
            ("Coffee", "   ", False),
            ("", "Fresh beans", False),
            ("  ", "  ", False),
        ],
    )
    def test_basic_info_needs_title_and_description(
        self, title: str, description: str, expected: bool
    ) -> None:
        document = IdeaData(title=title, description=description)

        assert can_advance(RefinementStep.BASIC_INFO, document) is expected

    def test_concept_variations_needs_a_choice(self) -> None:
        variations = IdeaData().with_variations((make_variation(1), make_variation(2)))

        assert not can_advance(RefinementStep.CONCEPT_VARIATIONS, variations)
        assert can_advance(
            RefinementStep.CONCEPT_VARIATIONS, variations.with_selected_variation("v1")
        )
        assert can_advance(
            RefinementStep.CONCEPT_VARIATIONS,
            variations.with_merged_variation(MergedVariation(title="Merged: a + b")),
        )

    @pytest.mark.parametrize(
        "step",
        [
            RefinementStep.BUSINESS_MODEL,
            RefinementStep.DETAILED_REFINEMENT,
            RefinementStep.COMPONENT_VARIATIONS,
        ],
    )
    def test_other_steps_are_unconditional(self, step: RefinementStep) -> None:
        assert can_advance(step, IdeaData())


class TestLabels:
    def test_next_label(self) -> None:
        assert next_label(RefinementStep.BASIC_INFO) == (
            f"Continue to {RefinementStep.CONCEPT_VARIATIONS.label}"
        )
        assert next_label(RefinementStep.COMPONENT_VARIATIONS) == "Next"

    def test_previous_label(self) -> None:
        assert previous_label(RefinementStep.BASIC_INFO) == "Back"
        assert previous_label(RefinementStep.BUSINESS_MODEL) == (
            f"Back to {RefinementStep.CONCEPT_VARIATIONS.label}"
        )


class TestStepNavigator:
    def test_check_advance_raises_with_message(self, navigator: StepNavigator) -> None:
        with pytest.raises(StepValidationError) as exc_info:
            navigator.check_advance()

        assert str(exc_info.value) == BASIC_INFO_BLOCKED
        assert exc_info.value.step is RefinementStep.BASIC_INFO

    def test_check_advance_passes_for_steps_without_rule(
        self, workflow: IdeaWorkflow, navigator: StepNavigator
    ) -> None:
        workflow.set_cursor(RefinementStep.BUSINESS_MODEL)

        navigator.check_advance()

    def test_advance_blocked_without_basics(
        self, workflow: IdeaWorkflow, navigator: StepNavigator
    ) -> None:
        assert navigator.advance() is False

        assert workflow.cursor is RefinementStep.BASIC_INFO
        assert workflow.error == BASIC_INFO_BLOCKED

    def test_advance_blocked_without_choice(
        self, workflow: IdeaWorkflow, navigator: StepNavigator
    ) -> None:
        workflow.mutate_document(
            lambda doc: doc.with_variations((make_variation(1), make_variation(2)))
        )
        workflow.set_cursor(RefinementStep.CONCEPT_VARIATIONS)

        assert navigator.advance() is False

        assert workflow.cursor is RefinementStep.CONCEPT_VARIATIONS
        assert workflow.error == VARIATION_BLOCKED

    def test_advance_moves_and_persists(
        self,
        workflow: IdeaWorkflow,
        navigator: StepNavigator,
        storage: IdeaDraftStorage,
    ) -> None:
        workflow.update_fields(title="Coffee", description="Fresh beans")

        assert navigator.advance() is True

        assert workflow.cursor is RefinementStep.CONCEPT_VARIATIONS
        snapshot = storage.load()
        assert snapshot.cursor is RefinementStep.CONCEPT_VARIATIONS
        assert snapshot.document.title == "Coffee"

    def test_advance_at_last_step_is_noop(
        self, workflow: IdeaWorkflow, navigator: StepNavigator
    ) -> None:
        workflow.set_cursor(RefinementStep.COMPONENT_VARIATIONS)

        assert navigator.is_last
        assert navigator.advance() is False
        assert workflow.cursor is RefinementStep.COMPONENT_VARIATIONS
        assert workflow.error is None

    def test_retreat(self, workflow: IdeaWorkflow, navigator: StepNavigator) -> None:
        workflow.set_cursor(RefinementStep.DETAILED_REFINEMENT)

        assert navigator.retreat() is True

        assert workflow.cursor is RefinementStep.BUSINESS_MODEL

    def test_retreat_at_first_step_is_noop(self, navigator: StepNavigator) -> None:
        assert navigator.is_first
        assert navigator.retreat() is False

    def test_retreat_ignores_preconditions(
        self, workflow: IdeaWorkflow, navigator: StepNavigator
    ) -> None:
        workflow.set_cursor(RefinementStep.CONCEPT_VARIATIONS)

        assert navigator.retreat() is True
        assert workflow.cursor is RefinementStep.BASIC_INFO

    def test_labels_follow_cursor(
        self, workflow: IdeaWorkflow, navigator: StepNavigator
    ) -> None:
        workflow.set_cursor(RefinementStep.BUSINESS_MODEL)

        assert navigator.next_label == next_label(RefinementStep.BUSINESS_MODEL)
        assert navigator.previous_label == previous_label(RefinementStep.BUSINESS_MODEL)
