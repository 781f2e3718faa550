"""The remote data service boundary."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ideaflow.models import AIFeedback, BusinessSuggestions, IdeaData, Variation
from ideaflow.remote._models import (
    ChatMessage,
    GenerationContext,
    OnboardingState,
    Payload,
    Persona,
    PersonaRequest,
    SavedRecord,
)


@runtime_checkable
class RemoteDataService(Protocol):
    """AI generation, idea persistence, feature flags and onboarding records.

    Every method may raise ``RemoteError`` with a structured ``kind``.
    """

    async def refine_idea(self, idea: IdeaData, context: GenerationContext) -> AIFeedback:
        """Generate structured feedback for an idea."""
        ...

    async def generate_variations(
        self, idea: IdeaData, context: GenerationContext
    ) -> list[Variation]:
        """Generate alternative framings of an idea."""
        ...

    async def generate_business_model(
        self, idea: IdeaData, context: GenerationContext
    ) -> BusinessSuggestions:
        """Generate business-model candidates for an idea."""
        ...

    async def chat_response(
        self,
        prompt: str,
        history: Sequence[ChatMessage],
        context: GenerationContext,
    ) -> str:
        """Free-text completion for a prompt."""
        ...

    async def insert_idea(self, payload: Payload) -> SavedRecord:
        """Create an idea record."""
        ...

    async def update_idea(self, idea_id: str, payload: Payload) -> SavedRecord:
        """Overwrite the given fields of an existing idea record."""
        ...

    async def get_feature_flag(self, name: str, user_id: str | None = None) -> bool | None:
        """Look up a flag, user-specific first, then global. None if unset."""
        ...

    async def get_onboarding_state(
        self, user_id: str, persona_id: str
    ) -> OnboardingState | None:
        """Fetch onboarding progress, or None if never started."""
        ...

    async def update_onboarding_state(
        self, user_id: str, persona_id: str, update: Payload
    ) -> None:
        """Merge fields into the onboarding record, creating it if missing."""
        ...

    async def create_persona(self, user_id: str, persona: PersonaRequest) -> Persona:
        """Create a persona for a user."""
        ...
