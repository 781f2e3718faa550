"""Onboarding step graph.

Forward and backward moves are table lookups keyed by step, with a
per-role override where the path branches.
"""

from ideaflow.enums import OnboardingStep, UserRole

_S = OnboardingStep

# Role-independent forward edges
NEXT_STEP: dict[OnboardingStep, OnboardingStep] = {
    _S.WELCOME: _S.ROLE_SELECTION,
    _S.COMPANY_STAGE: _S.INDUSTRY_SELECTION,
    _S.JOIN_COMPANY: _S.SKILL_LEVEL,
    _S.SERVICE_CATEGORIES: _S.INDUSTRY_SELECTION,
    _S.INDUSTRY_SELECTION: _S.GOALS_SELECTION,
    _S.SKILL_LEVEL: _S.GOALS_SELECTION,
    _S.GOALS_SELECTION: _S.THEME_PREFERENCES,
    _S.THEME_PREFERENCES: _S.NOTIFICATION_PREFERENCES,
    _S.NOTIFICATION_PREFERENCES: _S.RECOMMENDATIONS,
    _S.RECOMMENDATIONS: _S.COMPLETION,
}

# Forward edges that depend on the chosen role
NEXT_STEP_BY_ROLE: dict[OnboardingStep, dict[UserRole | None, OnboardingStep]] = {
    _S.ROLE_SELECTION: {
        UserRole.FOUNDER: _S.COMPANY_STAGE,
        UserRole.COMPANY_MEMBER: _S.JOIN_COMPANY,
        UserRole.SERVICE_PROVIDER: _S.SERVICE_CATEGORIES,
        None: _S.SKILL_LEVEL,
    },
}

PREVIOUS_STEP: dict[OnboardingStep, OnboardingStep] = {
    _S.ROLE_SELECTION: _S.WELCOME,
    _S.COMPANY_STAGE: _S.ROLE_SELECTION,
    _S.JOIN_COMPANY: _S.ROLE_SELECTION,
    _S.SERVICE_CATEGORIES: _S.ROLE_SELECTION,
    _S.THEME_PREFERENCES: _S.GOALS_SELECTION,
    _S.NOTIFICATION_PREFERENCES: _S.THEME_PREFERENCES,
    _S.RECOMMENDATIONS: _S.NOTIFICATION_PREFERENCES,
    _S.COMPLETION: _S.RECOMMENDATIONS,
}

PREVIOUS_STEP_BY_ROLE: dict[OnboardingStep, dict[UserRole | None, OnboardingStep]] = {
    _S.INDUSTRY_SELECTION: {
        UserRole.FOUNDER: _S.COMPANY_STAGE,
        UserRole.SERVICE_PROVIDER: _S.SERVICE_CATEGORIES,
        UserRole.COMPANY_MEMBER: _S.ROLE_SELECTION,
        None: _S.ROLE_SELECTION,
    },
    _S.SKILL_LEVEL: {
        UserRole.FOUNDER: _S.INDUSTRY_SELECTION,
        UserRole.SERVICE_PROVIDER: _S.INDUSTRY_SELECTION,
        UserRole.COMPANY_MEMBER: _S.JOIN_COMPANY,
        None: _S.ROLE_SELECTION,
    },
    _S.GOALS_SELECTION: {
        UserRole.FOUNDER: _S.INDUSTRY_SELECTION,
        UserRole.SERVICE_PROVIDER: _S.INDUSTRY_SELECTION,
        UserRole.COMPANY_MEMBER: _S.SKILL_LEVEL,
        None: _S.SKILL_LEVEL,
    },
}

# Order used for the progress bar. Branch-only steps are not listed.
PROGRESS_ORDER: tuple[OnboardingStep, ...] = (
    _S.WELCOME,
    _S.ROLE_SELECTION,
    _S.COMPANY_STAGE,
    _S.INDUSTRY_SELECTION,
    _S.SKILL_LEVEL,
    _S.GOALS_SELECTION,
    _S.THEME_PREFERENCES,
    _S.NOTIFICATION_PREFERENCES,
    _S.RECOMMENDATIONS,
    _S.COMPLETION,
)
PROGRESS_DENOMINATOR = 7


def next_step(step: OnboardingStep, role: UserRole | None) -> OnboardingStep | None:
    """The step after ``step``, or None at completion."""
    by_role = NEXT_STEP_BY_ROLE.get(step)
    if by_role is not None:
        return by_role.get(role, by_role[None])
    return NEXT_STEP.get(step)


def previous_step(step: OnboardingStep, role: UserRole | None) -> OnboardingStep | None:
    """The step before ``step``, or None at welcome."""
    by_role = PREVIOUS_STEP_BY_ROLE.get(step)
    if by_role is not None:
        return by_role.get(role, by_role[None])
    return PREVIOUS_STEP.get(step)


def progress(step: OnboardingStep) -> float:
    """Percentage shown on the progress bar, clamped to 0..100."""
    try:
        index = PROGRESS_ORDER.index(step)
    except ValueError:
        return 0.0
    return max(0.0, min(100.0, index / PROGRESS_DENOMINATOR * 100))
