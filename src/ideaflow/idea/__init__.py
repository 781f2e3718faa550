"""The idea refinement workflow: document, cursor, steps and persistence."""

from ._autosave import Autosaver
from ._fallback import (
    NO_DESCRIPTION,
    UNTITLED,
    mock_business_suggestions,
    mock_component_variations,
    mock_feedback,
    mock_variations,
)
from ._generation import (
    FLAG_CONTEXT,
    Generated,
    GenerationSource,
    IdeaGenerator,
    component_prompt,
    parse_candidates,
    unique_variation_ids,
)
from ._location import STEP_PARAM, Location, MemoryLocation
from ._merge import (
    MIN_MERGE,
    TOO_FEW_MESSAGE,
    TOO_MANY_MESSAGE,
    check_merge_arity,
    merge_variations,
)
from ._navigator import (
    STEP_RULES,
    StepNavigator,
    StepRule,
    can_advance,
    next_label,
    previous_label,
)
from ._saver import IdeaSaver, SaveOutcome, base_payload, error_message, full_payload
from ._steps import (
    CONTINUE_CLASSES,
    STEP_CLASSES,
    BasicInfoStep,
    BusinessModelStep,
    ComponentVariationsStep,
    ConceptVariationsStep,
    DetailedRefinementStep,
    RefinementStepBase,
    VariationDraft,
)
from ._storage import (
    DEFAULT_KEY_PREFIX,
    DraftSnapshot,
    IdeaDraftStorage,
    parse_step,
    require_step,
)
from ._workflow import DEFAULT_ROUTE, TOTAL_STEPS, IdeaWorkflow

__all__ = [
    "CONTINUE_CLASSES",
    "DEFAULT_KEY_PREFIX",
    "DEFAULT_ROUTE",
    "FLAG_CONTEXT",
    "MIN_MERGE",
    "NO_DESCRIPTION",
    "STEP_CLASSES",
    "STEP_PARAM",
    "STEP_RULES",
    "TOO_FEW_MESSAGE",
    "TOO_MANY_MESSAGE",
    "TOTAL_STEPS",
    "UNTITLED",
    "Autosaver",
    "BasicInfoStep",
    "BusinessModelStep",
    "ComponentVariationsStep",
    "ConceptVariationsStep",
    "DetailedRefinementStep",
    "DraftSnapshot",
    "Generated",
    "GenerationSource",
    "IdeaDraftStorage",
    "IdeaGenerator",
    "IdeaSaver",
    "IdeaWorkflow",
    "Location",
    "MemoryLocation",
    "RefinementStepBase",
    "SaveOutcome",
    "StepNavigator",
    "StepRule",
    "VariationDraft",
    "base_payload",
    "can_advance",
    "check_merge_arity",
    "component_prompt",
    "error_message",
    "full_payload",
    "merge_variations",
    "mock_business_suggestions",
    "mock_component_variations",
    "mock_feedback",
    "mock_variations",
    "next_label",
    "parse_candidates",
    "parse_step",
    "previous_label",
    "require_step",
    "unique_variation_ids",
]
