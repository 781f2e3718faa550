"""Idea document models.

The in-progress idea is an immutable pydantic tree. Every change produces a
new document via ``model_copy``; the workflow container swaps the whole
document in one assignment.

Variation records keep the camelCase field names of the stored JSON
(``targetMarket``, ``revenueModel``, ``isSelected``) so that drafts written
by earlier clients load unchanged.
"""

from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ideaflow.enums import ComponentType, SuggestionCategory

MAX_VARIATIONS = 5

# Free-text fields that every remote record accepts
TEXT_FIELDS: tuple[str, ...] = tuple(component.value for component in ComponentType)

_ALIASED = ConfigDict(
    frozen=True,
    extra="ignore",
    validate_by_name=True,
    validate_by_alias=True,
    serialize_by_alias=True,
)


class MergedVariation(BaseModel):
    """A variation synthesized from several others. Has no id."""

    model_config: ClassVar[ConfigDict] = _ALIASED

    title: str = ""
    description: str = ""
    differentiator: str = ""
    target_market: str = Field(default="", alias="targetMarket")
    revenue_model: str = Field(default="", alias="revenueModel")


class Variation(MergedVariation):
    """One alternative framing of the idea."""

    id: str
    is_selected: bool = Field(default=False, alias="isSelected")


class ComponentVariation(BaseModel):
    """A candidate text for one free-text idea component."""

    model_config: ClassVar[ConfigDict] = _ALIASED

    id: str
    text: str
    is_selected: bool = Field(default=False, alias="isSelected")


class AIFeedback(BaseModel):
    """Structured feedback on an idea. All seven lists are always present."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    opportunities: tuple[str, ...] = ()
    threats: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()
    market_insights: tuple[str, ...] = ()
    validation_tips: tuple[str, ...] = ()

    @field_validator("*", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return () if value is None else value


class BusinessSuggestions(BaseModel):
    """Candidate business-model choices, one list per category."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    target_audience: tuple[str, ...] = ()
    sales_channels: tuple[str, ...] = ()
    pricing_model: tuple[str, ...] = ()
    customer_type: tuple[str, ...] = ()
    integration_needs: tuple[str, ...] = ()

    @field_validator("*", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return () if value is None else value

    def get(self, category: SuggestionCategory) -> tuple[str, ...]:
        """Return the items for a category."""
        items: tuple[str, ...] = getattr(self, category.value)
        return items

    def is_empty(self) -> bool:
        """Whether every category is empty."""
        return not any(self.get(category) for category in SuggestionCategory)


class SelectedSuggestions(BusinessSuggestions):
    """The user's chosen subset of business suggestions.

    Membership, not order, is meaningful.
    """

    def contains(self, category: SuggestionCategory, item: str) -> bool:
        """Whether an item is selected in a category."""
        return item in self.get(category)

    def toggle(self, category: SuggestionCategory, item: str) -> Self:
        """Return a copy with the item's membership flipped."""
        current = self.get(category)
        if item in current:
            updated = tuple(existing for existing in current if existing != item)
        else:
            updated = (*current, item)
        return self.model_copy(update={category.value: updated})


def check_variations(variations: tuple[Variation, ...]) -> None:
    """Reject variation lists a document cannot hold.

    Raises:
        ValueError: Naming the first rule the list breaks.
    """
    if len(variations) > MAX_VARIATIONS:
        msg = f"at most {MAX_VARIATIONS} concept variations are allowed"
        raise ValueError(msg)
    ids = [variation.id for variation in variations]
    if len(set(ids)) != len(ids):
        msg = "concept variation ids must be unique"
        raise ValueError(msg)
    if sum(1 for variation in variations if variation.is_selected) > 1:
        msg = "at most one concept variation may be selected"
        raise ValueError(msg)


class IdeaData(BaseModel):
    """The in-progress business idea.

    Empty strings mean "unset". ``selected_variation`` and
    ``merged_variation`` are mutually exclusive, and at most one entry of
    ``concept_variations`` is flagged as selected.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    version: int | None = None

    title: str = ""
    description: str = ""

    problem_statement: str = ""
    solution_concept: str = ""
    target_audience: str = ""
    unique_value: str = ""
    business_model: str = ""
    marketing_strategy: str = ""
    revenue_model: str = ""
    go_to_market: str = ""
    market_size: str | None = None

    ai_feedback: AIFeedback | None = None
    business_suggestions: BusinessSuggestions | None = None
    selected_suggestions: SelectedSuggestions | None = None
    concept_variations: tuple[Variation, ...] | None = Field(
        default=None, max_length=MAX_VARIATIONS
    )
    selected_variation: Variation | None = None
    merged_variation: MergedVariation | None = None

    @field_validator("concept_variations")
    @classmethod
    def _check_variations(
        cls, value: tuple[Variation, ...] | None
    ) -> tuple[Variation, ...] | None:
        if value is None:
            return value
        check_variations(value)
        return value

    @model_validator(mode="after")
    def _check_exclusive_choice(self) -> Self:
        if self.selected_variation is not None and self.merged_variation is not None:
            msg = "selected_variation and merged_variation are mutually exclusive"
            raise ValueError(msg)
        return self

    def variation(self, variation_id: str) -> Variation | None:
        """Find a concept variation by id."""
        for variation in self.concept_variations or ():
            if variation.id == variation_id:
                return variation
        return None

    def with_variations(self, variations: tuple[Variation, ...]) -> Self:
        """Replace the concept variations and clear any previous choice.

        Raises:
            ValueError: If there are too many variations or their ids repeat.
        """
        fresh = tuple(v.model_copy(update={"is_selected": False}) for v in variations)
        check_variations(fresh)
        return self.model_copy(
            update={
                "concept_variations": fresh,
                "selected_variation": None,
                "merged_variation": None,
            }
        )

    def with_selected_variation(self, variation_id: str) -> Self:
        """Select one variation, deselecting all others and any merge.

        Unknown ids leave the document unchanged.
        """
        chosen = self.variation(variation_id)
        if chosen is None:
            return self
        chosen = chosen.model_copy(update={"is_selected": True})
        variations = tuple(
            chosen if v.id == variation_id else v.model_copy(update={"is_selected": False})
            for v in self.concept_variations or ()
        )
        return self.model_copy(
            update={
                "concept_variations": variations,
                "selected_variation": chosen,
                "merged_variation": None,
            }
        )

    def with_merged_variation(self, merged: MergedVariation) -> Self:
        """Store a merged variation, deselecting every entry."""
        variations = (
            tuple(v.model_copy(update={"is_selected": False}) for v in self.concept_variations)
            if self.concept_variations is not None
            else None
        )
        return self.model_copy(
            update={
                "concept_variations": variations,
                "selected_variation": None,
                "merged_variation": merged,
            }
        )

    def chosen_variation(self) -> MergedVariation | None:
        """The selected or merged variation, whichever is present."""
        if self.selected_variation is not None:
            return self.selected_variation
        return self.merged_variation

    def base_fields(self) -> dict[str, str]:
        """Title, description and the eight free-text fields."""
        fields = {"title": self.title, "description": self.description}
        for name in TEXT_FIELDS:
            fields[name] = getattr(self, name)
        return fields


def default_idea_data() -> IdeaData:
    """The document a fresh workflow starts from."""
    return IdeaData(
        ai_feedback=AIFeedback(),
        selected_suggestions=SelectedSuggestions(),
    )
