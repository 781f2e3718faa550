"""Remote data service boundary: AI generation, records and feature flags."""

from ._errors import classify_error_message, extract_column, remote_error
from ._fake import FakeRemoteService
from ._flags import ENHANCED_IDEA_GENERATION, FeatureFlags
from ._http import HttpRemoteService
from ._models import (
    ChatMessage,
    GenerationContext,
    OnboardingState,
    Payload,
    Persona,
    PersonaRequest,
    SavedRecord,
)
from ._protocol import RemoteDataService

__all__ = [
    "ENHANCED_IDEA_GENERATION",
    "ChatMessage",
    "FakeRemoteService",
    "FeatureFlags",
    "GenerationContext",
    "HttpRemoteService",
    "OnboardingState",
    "Payload",
    "Persona",
    "PersonaRequest",
    "RemoteDataService",
    "SavedRecord",
    "classify_error_message",
    "extract_column",
    "remote_error",
]
