"""In-memory remote data service for tests and offline runs."""

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import uuid4

from ideaflow.exceptions import RemoteError
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


@dataclass
class FakeRemoteService:
    """Scriptable stand-in for ``RemoteDataService``.

    Canned results are returned from the generation methods. Failures are
    queued per method name with ``fail`` and raised in order, one per call,
    before the method does any work. Every call is appended to ``calls`` as
    ``(method, argument)``.
    """

    feedback: AIFeedback = field(default_factory=AIFeedback)
    variations: list[Variation] = field(default_factory=list)
    business_suggestions: BusinessSuggestions = field(default_factory=BusinessSuggestions)
    chat_reply: str = ""
    flags: dict[tuple[str, str | None], bool] = field(default_factory=dict)
    ideas: dict[str, Payload] = field(default_factory=dict)
    onboarding_states: dict[tuple[str, str], OnboardingState] = field(default_factory=dict)
    personas: list[Persona] = field(default_factory=list)
    calls: list[tuple[str, object]] = field(default_factory=list)
    _failures: dict[str, deque[RemoteError]] = field(default_factory=dict)

    def fail(self, method: str, *errors: RemoteError) -> None:
        """Queue errors to raise from the next calls to ``method``."""
        self._failures.setdefault(method, deque()).extend(errors)

    def calls_to(self, method: str) -> list[object]:
        """Arguments of every recorded call to ``method``."""
        return [argument for name, argument in self.calls if name == method]

    def _record(self, method: str, argument: object) -> None:
        self.calls.append((method, argument))
        pending = self._failures.get(method)
        if pending:
            raise pending.popleft()

    async def refine_idea(self, idea: IdeaData, context: GenerationContext) -> AIFeedback:
        self._record("refine_idea", idea)
        return self.feedback

    async def generate_variations(
        self, idea: IdeaData, context: GenerationContext
    ) -> list[Variation]:
        self._record("generate_variations", idea)
        return list(self.variations)

    async def generate_business_model(
        self, idea: IdeaData, context: GenerationContext
    ) -> BusinessSuggestions:
        self._record("generate_business_model", idea)
        return self.business_suggestions

    async def chat_response(
        self,
        prompt: str,
        history: Sequence[ChatMessage],
        context: GenerationContext,
    ) -> str:
        self._record("chat_response", prompt)
        return self.chat_reply

    async def insert_idea(self, payload: Payload) -> SavedRecord:
        self._record("insert_idea", dict(payload))
        idea_id = str(uuid4())
        self.ideas[idea_id] = dict(payload)
        return SavedRecord(id=idea_id, version=1)

    async def update_idea(self, idea_id: str, payload: Payload) -> SavedRecord:
        self._record("update_idea", (idea_id, dict(payload)))
        if idea_id not in self.ideas:
            msg = f"Idea {idea_id} not found"
            raise RemoteError(msg, status_code=404)
        self.ideas[idea_id] = {**self.ideas[idea_id], **payload}
        version = int(self.ideas[idea_id].get("version", 1)) + 1
        self.ideas[idea_id]["version"] = version
        return SavedRecord(id=idea_id, version=version)

    async def get_feature_flag(self, name: str, user_id: str | None = None) -> bool | None:
        self._record("get_feature_flag", (name, user_id))
        if user_id is not None and (name, user_id) in self.flags:
            return self.flags[(name, user_id)]
        return self.flags.get((name, None))

    async def get_onboarding_state(
        self, user_id: str, persona_id: str
    ) -> OnboardingState | None:
        self._record("get_onboarding_state", (user_id, persona_id))
        return self.onboarding_states.get((user_id, persona_id))

    async def update_onboarding_state(
        self, user_id: str, persona_id: str, update: Payload
    ) -> None:
        self._record("update_onboarding_state", (user_id, persona_id, dict(update)))
        existing = self.onboarding_states.get((user_id, persona_id))
        base = (
            existing.model_dump()
            if existing is not None
            else {"user_id": user_id, "persona_id": persona_id}
        )
        self.onboarding_states[(user_id, persona_id)] = OnboardingState.model_validate(
            {**base, **update}
        )

    async def create_persona(self, user_id: str, persona: PersonaRequest) -> Persona:
        self._record("create_persona", (user_id, persona))
        created = Persona(id=str(uuid4()), name=persona.name, type=persona.type)
        self.personas.append(created)
        return created
