"""Request and response shapes exchanged with the remote data service."""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ideaflow.enums import UserRole

type Payload = dict[str, Any]  # pyright: ignore[reportExplicitAny]


class GenerationContext(BaseModel):
    """Who is asking for generation, and from where."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    user_id: str = ""
    company_id: str | None = None
    use_existing_models: bool = True
    context: str | None = None


class SavedRecord(BaseModel):
    """Identity the remote assigned to a persisted idea."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    id: str
    version: int | None = None


class ChatMessage(BaseModel):
    """One turn of a chat history."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    role: str
    content: str


class OnboardingState(BaseModel):
    """Remote record of a user's onboarding progress for one persona."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    user_id: str
    persona_id: str
    current_step: str | None = None
    form_data: Payload = Field(default_factory=dict)
    is_complete: bool = False
    completed_steps: tuple[str, ...] = ()


class PersonaRequest(BaseModel):
    """A persona to create during onboarding."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    name: str
    type: UserRole
    is_active: bool = True
    is_public: bool = False


class Persona(BaseModel):
    """A created persona."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = ""
    type: UserRole | None = None
