"""Enumeration types for ideaflow."""

from enum import IntEnum, StrEnum


class RefinementStep(IntEnum):
    """Steps of the idea refinement workflow, in order."""

    BASIC_INFO = 0
    CONCEPT_VARIATIONS = 1
    BUSINESS_MODEL = 2
    DETAILED_REFINEMENT = 3
    COMPONENT_VARIATIONS = 4

    @property
    def label(self) -> str:
        """Human-readable step name."""
        return _STEP_LABELS[self]


_STEP_LABELS: dict[RefinementStep, str] = {
    RefinementStep.BASIC_INFO: "Basic Info",
    RefinementStep.CONCEPT_VARIATIONS: "Concept Variations",
    RefinementStep.BUSINESS_MODEL: "Business Model",
    RefinementStep.DETAILED_REFINEMENT: "Detailed Refinement",
    RefinementStep.COMPONENT_VARIATIONS: "Component Variations",
}


class RemoteErrorKind(StrEnum):
    """Structured classification of remote data service failures."""

    DUPLICATE_KEY = "duplicate_key"
    FOREIGN_KEY = "foreign_key"
    PERMISSION_DENIED = "permission_denied"
    UNKNOWN_COLUMN = "unknown_column"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ComponentType(StrEnum):
    """Free-text idea components that can be varied independently."""

    PROBLEM_STATEMENT = "problem_statement"
    SOLUTION_CONCEPT = "solution_concept"
    TARGET_AUDIENCE = "target_audience"
    UNIQUE_VALUE = "unique_value"
    BUSINESS_MODEL = "business_model"
    MARKETING_STRATEGY = "marketing_strategy"
    REVENUE_MODEL = "revenue_model"
    GO_TO_MARKET = "go_to_market"


class SuggestionCategory(StrEnum):
    """Categories of business-model suggestions."""

    TARGET_AUDIENCE = "target_audience"
    SALES_CHANNELS = "sales_channels"
    PRICING_MODEL = "pricing_model"
    CUSTOMER_TYPE = "customer_type"
    INTEGRATION_NEEDS = "integration_needs"


class UserRole(StrEnum):
    """Roles a user can pick during onboarding."""

    FOUNDER = "founder"
    COMPANY_MEMBER = "company_member"
    SERVICE_PROVIDER = "service_provider"


class OnboardingStep(StrEnum):
    """Steps of the onboarding flow."""

    WELCOME = "welcome"
    ROLE_SELECTION = "role_selection"
    COMPANY_STAGE = "company_stage"
    JOIN_COMPANY = "join_company"
    SERVICE_CATEGORIES = "service_categories"
    INDUSTRY_SELECTION = "industry_selection"
    SKILL_LEVEL = "skill_level"
    GOALS_SELECTION = "goals_selection"
    THEME_PREFERENCES = "theme_preferences"
    NOTIFICATION_PREFERENCES = "notification_preferences"
    RECOMMENDATIONS = "recommendations"
    COMPLETION = "completion"
