"""State-transition contracts of the five refinement steps.

Each step wraps the shared ``IdeaWorkflow`` and an ``IdeaGenerator``. Steps
keep only transient UI state (merge selection, edit drafts, candidates,
in-flight flags); the document and cursor always live in the workflow.

Async generation triggers are exclusive per step instance: a trigger that
arrives while another is in flight is ignored and returns False.
"""

import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Concatenate

import structlog

from ideaflow.enums import ComponentType, RefinementStep, SuggestionCategory
from ideaflow.exceptions import MergeArityError
from ideaflow.idea._fallback import NO_DESCRIPTION, UNTITLED, mock_variations
from ideaflow.idea._generation import GenerationSource, IdeaGenerator
from ideaflow.idea._merge import TOO_MANY_MESSAGE, merge_variations
from ideaflow.models import (
    MAX_VARIATIONS,
    ComponentVariation,
    IdeaData,
    SelectedSuggestions,
    Variation,
)

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.idea._workflow import IdeaWorkflow

NEED_TITLE_OR_DESCRIPTION = (
    "Please provide either a title or description before generating feedback"
)
NEED_TITLE = "Please provide at least a title before continuing"
NEED_TITLE_AND_DESCRIPTION = "Please provide at least a title and description"
NEED_VARIATION_INPUT = (
    "Please provide at least a title and description before generating variations"
)
NEED_CHOSEN_VARIATION = "Please select a variation or merge variations before continuing"

FEEDBACK_MESSAGES: dict[GenerationSource, str] = {
    GenerationSource.REMOTE: "AI feedback generated successfully!",
    GenerationSource.FALLBACK: "AI feedback generated (using fallback data)",
    GenerationSource.DISABLED: "AI feedback generated!",
}

# Editing these clears the inline error
_ERROR_CLEARING_FIELDS = frozenset({"title", "description"})


class RefinementStepBase:
    """Shared plumbing for step components."""

    step: ClassVar[RefinementStep]

    def __init__(
        self,
        workflow: "IdeaWorkflow",
        generator: IdeaGenerator | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self.workflow = workflow
        self.generator = generator or IdeaGenerator()
        self.is_generating = False
        self._logger: "FilteringBoundLogger" = (
            logger or structlog.get_logger("ideaflow.steps")
        ).bind(step=self.step.name.lower())

    @property
    def document(self) -> IdeaData:
        return self.workflow.document

    @property
    def user_id(self) -> str | None:
        return self.workflow.user.user_id if self.workflow.user else None

    def _reject(self, message: str) -> bool:
        self.workflow.error = message
        self._logger.info("step_rejected", reason=message)
        return False

    def _advance_to(self, step: RefinementStep) -> bool:
        _ = self.workflow.save_to_local_storage()
        return self.workflow.set_cursor(step)

    def update_field(self, name: str, value: str) -> IdeaData:
        """Set one document field.

        Raises:
            ValueError: If ``name`` is not a document field.
        """
        document = self.workflow.update_fields(**{name: value})
        if name in _ERROR_CLEARING_FIELDS:
            self.workflow.error = None
        return document


def exclusive[S: RefinementStepBase, **P](
    method: Callable[Concatenate[S, P], Awaitable[bool]],
) -> Callable[Concatenate[S, P], Awaitable[bool]]:
    """Ignore calls while the step already has a generation in flight."""

    @functools.wraps(method)
    async def wrapper(self: S, *args: P.args, **kwargs: P.kwargs) -> bool:
        if self.is_generating:
            self._logger.debug("generation_in_flight", action=method.__name__)
            return False
        self.is_generating = True
        try:
            return await method(self, *args, **kwargs)
        finally:
            self.is_generating = False

    return wrapper


class _FeedbackMixin(RefinementStepBase):
    async def _store_feedback(self) -> None:
        result = await self.generator.feedback(self.document, self.user_id)
        _ = self.workflow.mutate_document(
            lambda doc: doc.model_copy(update={"ai_feedback": result.value})
        )
        self.workflow.success = FEEDBACK_MESSAGES[result.source]


class BasicInfoStep(_FeedbackMixin):
    """Step 0: title, description and first feedback."""

    step: ClassVar[RefinementStep] = RefinementStep.BASIC_INFO

    @exclusive
    async def generate_feedback(self) -> bool:
        """Generate AI feedback; needs a title or a description."""
        if not self.document.title and not self.document.description:
            return self._reject(NEED_TITLE_OR_DESCRIPTION)
        self.workflow.clear_messages()
        _ = self.workflow.save_to_local_storage()
        await self._store_feedback()
        _ = self.workflow.save_to_local_storage()
        return True

    def continue_(self) -> bool:
        """Fill placeholders for an empty description and move on.

        Only a title is required here, which is looser than the navigator.
        """
        if not self.document.title.strip():
            return self._reject(NEED_TITLE)
        _ = self.workflow.save_to_local_storage()
        _ = self.workflow.mutate_document(
            lambda doc: doc.model_copy(
                update={
                    "title": doc.title or UNTITLED,
                    "description": doc.description or NO_DESCRIPTION,
                }
            )
        )
        return self.workflow.set_cursor(RefinementStep.CONCEPT_VARIATIONS)


@dataclass(slots=True)
class VariationDraft:
    """Editable copy of a variation. Nothing changes until it is committed."""

    id: str
    title: str
    description: str
    differentiator: str
    target_market: str
    revenue_model: str

    @classmethod
    def from_variation(cls, variation: Variation) -> "VariationDraft":
        return cls(
            id=variation.id,
            title=variation.title,
            description=variation.description,
            differentiator=variation.differentiator,
            target_market=variation.target_market,
            revenue_model=variation.revenue_model,
        )

    def apply_to(self, variation: Variation) -> Variation:
        """Return ``variation`` with the drafted text fields."""
        return variation.model_copy(
            update={
                "title": self.title,
                "description": self.description,
                "differentiator": self.differentiator,
                "target_market": self.target_market,
                "revenue_model": self.revenue_model,
            }
        )


class ConceptVariationsStep(RefinementStepBase):
    """Step 1: pick or merge alternative framings of the idea.

    Attributes:
        merge_mode: Whether selections toggle membership in the merge set.
        merge_selection: Variation ids chosen for merging, in click order.
        editing: The open edit draft, if any.
    """

    step: ClassVar[RefinementStep] = RefinementStep.CONCEPT_VARIATIONS

    def __init__(
        self,
        workflow: "IdeaWorkflow",
        generator: IdeaGenerator | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        super().__init__(workflow, generator, logger=logger)
        self.merge_mode = False
        self.merge_selection: list[str] = []
        self.editing: VariationDraft | None = None

    @property
    def variations(self) -> tuple[Variation, ...]:
        return self.document.concept_variations or ()

    @exclusive
    async def generate_variations(self) -> bool:
        """Replace the variations, fallback first, then AI if available.

        Any previous selection or merge is cleared.
        """
        if not self.document.title or not self.document.description:
            return self._reject(NEED_VARIATION_INPUT)
        self.workflow.clear_messages()
        self.merge_selection = []
        fallback = mock_variations(self.document.title, self.document.description)
        _ = self.workflow.mutate_document(lambda doc: doc.with_variations(fallback))
        result = await self.generator.variations(self.document, self.user_id)
        if result.source is GenerationSource.REMOTE:
            _ = self.workflow.mutate_document(lambda doc: doc.with_variations(result.value))
        return True

    def select_variation(self, variation_id: str) -> bool:
        """Select one variation, or toggle it in the merge set in merge mode.

        Unknown ids are ignored and return False.
        """
        if self.merge_mode and variation_id in self.merge_selection:
            self.merge_selection.remove(variation_id)
            return True
        if self.document.variation(variation_id) is None:
            return False
        if self.merge_mode:
            if len(self.merge_selection) >= MAX_VARIATIONS:
                return self._reject(TOO_MANY_MESSAGE)
            self.merge_selection.append(variation_id)
            return True
        _ = self.workflow.mutate_document(
            lambda doc: doc.with_selected_variation(variation_id)
        )
        return True

    def toggle_merge_mode(self) -> bool:
        """Flip merge mode and reset the merge set. Returns the new mode."""
        self.merge_mode = not self.merge_mode
        self.merge_selection = []
        return self.merge_mode

    def merge_selected(self) -> bool:
        """Store the merge of the selected variations and leave merge mode."""
        chosen = [v for v in self.variations if v.id in self.merge_selection]
        try:
            merged = merge_variations(chosen)
        except MergeArityError as e:
            return self._reject(str(e))
        _ = self.workflow.mutate_document(lambda doc: doc.with_merged_variation(merged))
        self.merge_mode = False
        self.merge_selection = []
        self._logger.info("variations_merged", count=len(chosen))
        return True

    def begin_edit(self, variation_id: str) -> VariationDraft | None:
        """Open an edit draft for a variation."""
        variation = self.document.variation(variation_id)
        if variation is None:
            return None
        self.editing = VariationDraft.from_variation(variation)
        return self.editing

    def cancel_edit(self) -> None:
        self.editing = None

    def commit_edit(self, draft: VariationDraft) -> bool:
        """Write a draft back to its variation.

        If the variation is the selected one, ``selected_variation`` is
        refreshed too.
        """
        if self.document.variation(draft.id) is None:
            return False

        def _commit(doc: IdeaData) -> IdeaData:
            variations = tuple(
                draft.apply_to(v) if v.id == draft.id else v
                for v in doc.concept_variations or ()
            )
            update: dict[str, object] = {"concept_variations": variations}
            selected = doc.selected_variation
            if selected is not None and selected.id == draft.id:
                update["selected_variation"] = draft.apply_to(selected)
            return doc.model_copy(update=update)

        _ = self.workflow.mutate_document(_commit)
        self.editing = None
        return True

    def delete_variation(self, variation_id: str) -> bool:
        """Remove a variation, clearing the selection if it pointed there."""
        if self.document.variation(variation_id) is None:
            return False

        def _delete(doc: IdeaData) -> IdeaData:
            update: dict[str, object] = {
                "concept_variations": tuple(
                    v for v in doc.concept_variations or () if v.id != variation_id
                )
            }
            if doc.selected_variation is not None and doc.selected_variation.id == variation_id:
                update["selected_variation"] = None
            return doc.model_copy(update=update)

        _ = self.workflow.mutate_document(_delete)
        if variation_id in self.merge_selection:
            self.merge_selection.remove(variation_id)
        return True

    def continue_(self) -> bool:
        """Copy the chosen variation into the idea and move on."""
        chosen = self.document.chosen_variation()
        if chosen is None:
            return self._reject(NEED_CHOSEN_VARIATION)
        _ = self.workflow.save_to_local_storage()
        _ = self.workflow.mutate_document(
            lambda doc: doc.model_copy(
                update={
                    "title": chosen.title or doc.title,
                    "description": chosen.description or doc.description,
                    "target_audience": chosen.target_market or doc.target_audience,
                    "unique_value": chosen.differentiator or doc.unique_value,
                    "revenue_model": chosen.revenue_model or doc.revenue_model,
                }
            )
        )
        return self.workflow.set_cursor(RefinementStep.BUSINESS_MODEL)


class BusinessModelStep(RefinementStepBase):
    """Step 2: pick business-model suggestions."""

    step: ClassVar[RefinementStep] = RefinementStep.BUSINESS_MODEL

    @property
    def selected(self) -> SelectedSuggestions:
        return self.document.selected_suggestions or SelectedSuggestions()

    async def ensure_suggestions(self) -> bool:
        """Generate suggestions unless the document already has some."""
        current = self.document.business_suggestions
        if current is not None and not current.is_empty():
            return False
        return await self.generate_suggestions()

    @exclusive
    async def generate_suggestions(self) -> bool:
        """Replace the business suggestions with AI or fallback content."""
        self.workflow.error = None
        result = await self.generator.business_suggestions(self.document, self.user_id)
        _ = self.workflow.mutate_document(
            lambda doc: doc.model_copy(update={"business_suggestions": result.value})
        )
        return True

    def toggle_suggestion(self, category: SuggestionCategory, item: str) -> bool:
        """Flip one suggestion's membership. Returns whether it is now selected."""
        selected = self.selected.toggle(category, item)
        _ = self.workflow.mutate_document(
            lambda doc: doc.model_copy(update={"selected_suggestions": selected})
        )
        return selected.contains(category, item)

    def continue_(self) -> bool:
        return self._advance_to(RefinementStep.DETAILED_REFINEMENT)


class DetailedRefinementStep(_FeedbackMixin):
    """Step 3: fill in the free-text fields."""

    step: ClassVar[RefinementStep] = RefinementStep.DETAILED_REFINEMENT

    @property
    def _selected(self) -> SelectedSuggestions:
        return self.document.selected_suggestions or SelectedSuggestions()

    @exclusive
    async def generate_feedback(self) -> bool:
        """Regenerate AI feedback; needs both title and description."""
        if not self.document.title or not self.document.description:
            return self._reject(NEED_TITLE_AND_DESCRIPTION)
        self.workflow.clear_messages()
        await self._store_feedback()
        return True

    def suggested_target_audience(self) -> str:
        return ", ".join(self._selected.target_audience)

    def suggested_business_model(self) -> str:
        pricing = self._selected.pricing_model
        if not pricing:
            return ""
        customers = ", ".join(self._selected.customer_type) or "customers"
        return f"{', '.join(pricing)} model targeting {customers}"

    def suggested_marketing_strategy(self) -> str:
        channels = self._selected.sales_channels
        if not channels:
            return ""
        return f"Marketing through {', '.join(channels)}"

    def apply_suggestions(self) -> bool:
        """Fill empty fields from the selected suggestions.

        Returns:
            True if any field changed.
        """
        derived = {
            "target_audience": self.suggested_target_audience(),
            "business_model": self.suggested_business_model(),
            "marketing_strategy": self.suggested_marketing_strategy(),
        }
        update = {
            name: text
            for name, text in derived.items()
            if text and not getattr(self.document, name)
        }
        if not update:
            return False
        _ = self.workflow.mutate_document(lambda doc: doc.model_copy(update=update))
        return True

    def continue_(self) -> bool:
        return self._advance_to(RefinementStep.COMPONENT_VARIATIONS)


class ComponentVariationsStep(RefinementStepBase):
    """Step 4: alternatives for each free-text component. Terminal.

    Attributes:
        candidates: Latest candidates per component.
        generating: The component currently being generated, if any.
    """

    step: ClassVar[RefinementStep] = RefinementStep.COMPONENT_VARIATIONS

    def __init__(
        self,
        workflow: "IdeaWorkflow",
        generator: IdeaGenerator | None = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        super().__init__(workflow, generator, logger=logger)
        self.candidates: dict[ComponentType, tuple[ComponentVariation, ...]] = {}
        self.generating: ComponentType | None = None

    @exclusive
    async def generate(self, component: ComponentType) -> bool:
        """Produce up to five candidates for one component."""
        if not self.document.title or not self.document.description:
            return self._reject(NEED_TITLE_AND_DESCRIPTION)
        self.workflow.error = None
        self.generating = component
        try:
            result = await self.generator.component_variations(
                self.document, component, self.user_id
            )
        finally:
            self.generating = None
        self.candidates[component] = result.value
        return True

    def select(self, component: ComponentType, candidate_id: str) -> bool:
        """Write a candidate's text into the document field."""
        current = self.candidates.get(component, ())
        chosen = next((c for c in current if c.id == candidate_id), None)
        if chosen is None:
            return False
        self.candidates[component] = tuple(
            c.model_copy(update={"is_selected": c.id == candidate_id}) for c in current
        )
        _ = self.workflow.update_fields(**{component.value: chosen.text})
        return True


# Steps with their own continue action; the last step has none
CONTINUE_CLASSES: dict[
    RefinementStep,
    type[BasicInfoStep | ConceptVariationsStep | BusinessModelStep | DetailedRefinementStep],
] = {
    RefinementStep.BASIC_INFO: BasicInfoStep,
    RefinementStep.CONCEPT_VARIATIONS: ConceptVariationsStep,
    RefinementStep.BUSINESS_MODEL: BusinessModelStep,
    RefinementStep.DETAILED_REFINEMENT: DetailedRefinementStep,
}

STEP_CLASSES: dict[RefinementStep, type[RefinementStepBase]] = {
    **CONTINUE_CLASSES,
    RefinementStep.COMPONENT_VARIATIONS: ComponentVariationsStep,
}
