"""AI generation with deterministic fallback.

Each request first resolves the ``enhanced_idea_generation`` flag. When the
flag is off, fallback content is returned directly. When it is on, the remote
service is asked and any ``RemoteError`` (including an unconfigured remote)
is logged and replaced by fallback content. Callers can tell the three
outcomes apart through ``Generated.source``.
"""

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from ideaflow.enums import ComponentType
from ideaflow.exceptions import RemoteError, RemoteNotConfiguredError
from ideaflow.idea._fallback import (
    NO_DESCRIPTION,
    UNTITLED,
    mock_business_suggestions,
    mock_component_variations,
    mock_feedback,
    mock_variations,
)
from ideaflow.models import (
    MAX_VARIATIONS,
    AIFeedback,
    BusinessSuggestions,
    ComponentVariation,
    IdeaData,
    Variation,
)
from ideaflow.remote import ENHANCED_IDEA_GENERATION, FeatureFlags, GenerationContext

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ideaflow.remote import RemoteDataService

# Calling context reported to the flag lookup
FLAG_CONTEXT = "idea_refinement"

_LIST_ITEM = re.compile(r"^(\d+[\.\):]|[\-\*•])\s+(.+)$")


class GenerationSource(StrEnum):
    """Where generated content came from."""

    REMOTE = "remote"
    FALLBACK = "fallback"
    DISABLED = "disabled"


@dataclass(frozen=True, slots=True)
class Generated[T]:
    """Generated content tagged with its source.

    Attributes:
        value: The generated or fallback content.
        source: Which path produced it.
    """

    value: T
    source: GenerationSource


def parse_candidates(response: str, limit: int = MAX_VARIATIONS) -> list[str]:
    """Extract list items from a free-text response.

    Numbered (``1.``, ``2)``, ``3:``) and bulleted (``-``, ``*``, ``•``)
    lines are taken first. If there are none, blank-line separated
    paragraphs are used instead.
    """
    items: list[str] = []
    for line in response.split("\n"):
        match = _LIST_ITEM.match(line.strip())
        if match:
            items.append(match.group(2).strip())
    if not items:
        items = [p.strip() for p in response.split("\n\n") if p.strip()]
    return items[:limit]


def unique_variation_ids(variations: Sequence[Variation]) -> tuple[Variation, ...]:
    """Give a fresh id to every variation whose id was already seen."""
    seen: set[str] = set()
    unique: list[Variation] = []
    for variation in variations:
        if variation.id in seen:
            unique.append(variation.model_copy(update={"id": str(uuid4())}))
        else:
            unique.append(variation)
        seen.add(unique[-1].id)
    return tuple(unique)


def component_prompt(document: IdeaData, component: ComponentType) -> str:
    """Prompt asking for alternatives to one free-text component."""
    current: str = getattr(document, component.value) or "Not specified"
    return (
        f"Generate 5 different variations of the {component.value.replace('_', ' ', 1)} "
        "for this business idea:\n\n"
        f"Title: {document.title}\n"
        f"Description: {document.description}\n"
        f"Current {current}\n\n"
        "Each variation should be distinct and offer a different perspective or approach."
    )


class IdeaGenerator:
    """Produces feedback, variations and suggestions for an idea."""

    def __init__(
        self,
        flags: FeatureFlags | None = None,
        remote: "RemoteDataService | None" = None,
        *,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._remote = remote
        self._flags = flags or FeatureFlags(remote=remote)
        self._logger: "FilteringBoundLogger" = logger or structlog.get_logger("ideaflow.generation")

    async def enhanced(self, user_id: str | None = None) -> bool:
        """Whether AI generation is enabled for the user."""
        return await self._flags.is_enabled(
            ENHANCED_IDEA_GENERATION, user_id=user_id, context=FLAG_CONTEXT
        )

    def _service(self) -> "RemoteDataService":
        if self._remote is None:
            raise RemoteNotConfiguredError
        return self._remote

    async def _generate[T](
        self,
        what: str,
        user_id: str | None,
        call: Callable[["RemoteDataService", GenerationContext], Awaitable[T | None]],
        fallback: Callable[[], T],
    ) -> Generated[T]:
        if not await self.enhanced(user_id):
            return Generated(fallback(), GenerationSource.DISABLED)
        context = GenerationContext(user_id=user_id or "")
        try:
            value = await call(self._service(), context)
        except RemoteError as e:
            self._logger.warning(
                "generation_failed", what=what, kind=e.kind.value, error=str(e)
            )
            return Generated(fallback(), GenerationSource.FALLBACK)
        if value is None:
            self._logger.info("generation_empty", what=what)
            return Generated(fallback(), GenerationSource.FALLBACK)
        self._logger.info("generation_succeeded", what=what)
        return Generated(value, GenerationSource.REMOTE)

    async def feedback(
        self, document: IdeaData, user_id: str | None = None
    ) -> Generated[AIFeedback]:
        """SWOT-style feedback for the idea."""
        idea = document.model_copy(
            update={
                "title": document.title or UNTITLED,
                "description": document.description or NO_DESCRIPTION,
            }
        )

        async def _call(remote: "RemoteDataService", context: GenerationContext) -> AIFeedback:
            return await remote.refine_idea(idea, context)

        return await self._generate(
            "feedback", user_id, _call, lambda: mock_feedback(idea.title)
        )

    async def variations(
        self, document: IdeaData, user_id: str | None = None
    ) -> Generated[tuple[Variation, ...]]:
        """Up to five alternative framings of the idea."""

        async def _call(
            remote: "RemoteDataService", context: GenerationContext
        ) -> tuple[Variation, ...] | None:
            generated = await remote.generate_variations(document, context)
            return unique_variation_ids(generated[:MAX_VARIATIONS]) or None

        return await self._generate(
            "variations",
            user_id,
            _call,
            lambda: mock_variations(document.title, document.description),
        )

    async def business_suggestions(
        self, document: IdeaData, user_id: str | None = None
    ) -> Generated[BusinessSuggestions]:
        """Business-model candidates for the idea."""

        async def _call(
            remote: "RemoteDataService", context: GenerationContext
        ) -> BusinessSuggestions:
            return await remote.generate_business_model(document, context)

        return await self._generate(
            "business_suggestions", user_id, _call, mock_business_suggestions
        )

    async def component_variations(
        self,
        document: IdeaData,
        component: ComponentType,
        user_id: str | None = None,
    ) -> Generated[tuple[ComponentVariation, ...]]:
        """Up to five alternative texts for one component."""

        async def _call(
            remote: "RemoteDataService", context: GenerationContext
        ) -> tuple[ComponentVariation, ...] | None:
            response = await remote.chat_response(
                component_prompt(document, component), [], context
            )
            candidates = tuple(
                ComponentVariation(id=uuid4().hex[:7], text=text)
                for text in parse_candidates(response)
            )
            return candidates or None

        return await self._generate(
            f"component:{component.value}",
            user_id,
            _call,
            lambda: mock_component_variations(component),
        )
