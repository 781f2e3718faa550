"""Onboarding step graph and controller."""

from ._controller import (
    COMPLETED_MARKER,
    ROLE_KEY,
    OnboardingController,
    parse_onboarding_step,
    parse_role,
)
from ._graph import (
    NEXT_STEP,
    NEXT_STEP_BY_ROLE,
    PREVIOUS_STEP,
    PREVIOUS_STEP_BY_ROLE,
    PROGRESS_ORDER,
    next_step,
    previous_step,
    progress,
)

__all__ = [
    "COMPLETED_MARKER",
    "NEXT_STEP",
    "NEXT_STEP_BY_ROLE",
    "PREVIOUS_STEP",
    "PREVIOUS_STEP_BY_ROLE",
    "PROGRESS_ORDER",
    "ROLE_KEY",
    "OnboardingController",
    "next_step",
    "parse_onboarding_step",
    "parse_role",
    "previous_step",
    "progress",
]
