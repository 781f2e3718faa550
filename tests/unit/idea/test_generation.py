import pytest
from structlog.testing import capture_logs

from ideaflow.config import FeaturesConfig
from ideaflow.enums import ComponentType, RemoteErrorKind
from ideaflow.exceptions import RemoteError
from ideaflow.idea import (
    FLAG_CONTEXT,
    GenerationSource,
    IdeaGenerator,
    component_prompt,
    mock_business_suggestions,
    mock_component_variations,
    parse_candidates,
)
from ideaflow.models import AIFeedback, BusinessSuggestions, IdeaData
from ideaflow.remote import ENHANCED_IDEA_GENERATION, FakeRemoteService, FeatureFlags
from tests.conftest import make_variation

pytestmark = pytest.mark.anyio

ENABLED = FeaturesConfig(overrides={ENHANCED_IDEA_GENERATION: True})
DISABLED = FeaturesConfig(overrides={ENHANCED_IDEA_GENERATION: False})


def _generator(remote: FakeRemoteService, features: FeaturesConfig = ENABLED) -> IdeaGenerator:
    return IdeaGenerator(FeatureFlags(features, remote), remote)


class TestParseCandidates:
    def test_numbered_and_bulleted_lines(self) -> None:
        response = "Here you go:\n1. First\n2) Second\n3: Third\n- Fourth\n* Fifth\n• Sixth"

        assert parse_candidates(response) == ["First", "Second", "Third", "Fourth", "Fifth"]

    def test_paragraph_fallback(self) -> None:
        response = "Alpha idea.\n\n  Beta idea.  \n\n\n"

        assert parse_candidates(response) == ["Alpha idea.", "Beta idea."]

    def test_empty_response(self) -> None:
        assert parse_candidates("") == []
        assert parse_candidates("   \n\n  ") == []

    def test_custom_limit(self) -> None:
        assert parse_candidates("1. a\n2. b\n3. c", limit=2) == ["a", "b"]


class TestComponentPrompt:
    def test_includes_idea_and_current_value(self) -> None:
        document = IdeaData(
            title="Coffee", description="Fresh beans", problem_statement="Stale coffee"
        )

        prompt = component_prompt(document, ComponentType.PROBLEM_STATEMENT)

        assert prompt.startswith(
            "Generate 5 different variations of the problem statement for this business idea:"
        )
        assert "Title: Coffee\n" in prompt
        assert "Description: Fresh beans\n" in prompt
        assert "Current Stale coffee\n" in prompt

    def test_unset_component(self) -> None:
        prompt = component_prompt(IdeaData(), ComponentType.GO_TO_MARKET)

        assert "variations of the go to_market" in prompt
        assert "Current Not specified" in prompt


class TestIdeaGenerator:
    async def test_disabled_flag_skips_remote(self, remote: FakeRemoteService) -> None:
        result = await _generator(remote, DISABLED).business_suggestions(IdeaData())

        assert result.source is GenerationSource.DISABLED
        assert result.value == mock_business_suggestions()
        assert remote.calls == []

    async def test_remote_result(self, remote: FakeRemoteService) -> None:
        remote.feedback = AIFeedback(strengths=("Tasty",))

        result = await _generator(remote).feedback(IdeaData(title="Coffee"), "user-1")

        assert result.source is GenerationSource.REMOTE
        assert result.value.strengths == ("Tasty",)

    async def test_feedback_fills_missing_title_and_description(
        self, remote: FakeRemoteService
    ) -> None:
        await _generator(remote).feedback(IdeaData())

        sent = remote.calls_to("refine_idea")[0]
        assert isinstance(sent, IdeaData)
        assert sent.title == "Untitled Idea"
        assert sent.description == "No description provided"

    async def test_remote_failure_falls_back(self, remote: FakeRemoteService) -> None:
        remote.fail("refine_idea", RemoteError("boom", kind=RemoteErrorKind.NETWORK))

        with capture_logs() as logs:
            result = await _generator(remote).feedback(IdeaData(title="Coffee"))

        assert result.source is GenerationSource.FALLBACK
        assert result.value.strengths[0] == "Coffee has a clear value proposition"
        failed = [log for log in logs if log["event"] == "generation_failed"]
        assert failed[0]["kind"] == "network"

    async def test_missing_remote_falls_back(self) -> None:
        generator = IdeaGenerator(FeatureFlags(ENABLED))

        result = await generator.business_suggestions(IdeaData())

        assert result.source is GenerationSource.FALLBACK

    async def test_default_flags_enable_generation(self) -> None:
        assert await IdeaGenerator().enhanced() is True

    async def test_flag_context_reported(self, remote: FakeRemoteService) -> None:
        features = FeaturesConfig(disabled_contexts={ENHANCED_IDEA_GENERATION: [FLAG_CONTEXT]})

        assert await _generator(remote, features).enhanced("user-1") is False

    async def test_variations_capped_at_five(self, remote: FakeRemoteService) -> None:
        remote.variations = [make_variation(i) for i in range(7)]

        result = await _generator(remote).variations(IdeaData(title="Coffee"))

        assert result.source is GenerationSource.REMOTE
        assert [v.id for v in result.value] == ["v0", "v1", "v2", "v3", "v4"]

    async def test_repeated_variation_ids_are_renamed(self, remote: FakeRemoteService) -> None:
        remote.variations = [
            make_variation(1, id="v"),
            make_variation(2, id="v"),
            make_variation(3, id="v"),
        ]

        result = await _generator(remote).variations(IdeaData(title="Coffee"))

        ids = [v.id for v in result.value]
        assert ids[0] == "v"
        assert len(set(ids)) == 3
        assert [v.title for v in result.value] == ["Idea1 Plus", "Idea2 Plus", "Idea3 Plus"]

    async def test_empty_variations_fall_back(self, remote: FakeRemoteService) -> None:
        result = await _generator(remote).variations(
            IdeaData(title="Coffee", description="fresh beans")
        )

        assert result.source is GenerationSource.FALLBACK
        assert result.value[0].title == "Premium Coffee"

    async def test_business_suggestions_from_remote(self, remote: FakeRemoteService) -> None:
        remote.business_suggestions = BusinessSuggestions(pricing_model=("Per cup",))

        result = await _generator(remote).business_suggestions(IdeaData())

        assert result.source is GenerationSource.REMOTE
        assert result.value.pricing_model == ("Per cup",)

    async def test_component_variations_parse_chat_reply(
        self, remote: FakeRemoteService
    ) -> None:
        remote.chat_reply = "1. First take\n2. Second take"

        result = await _generator(remote).component_variations(
            IdeaData(title="Coffee"), ComponentType.UNIQUE_VALUE
        )

        assert result.source is GenerationSource.REMOTE
        assert [v.text for v in result.value] == ["First take", "Second take"]
        assert len({v.id for v in result.value}) == 2
        prompt = remote.calls_to("chat_response")[0]
        assert isinstance(prompt, str)
        assert "unique value" in prompt

    async def test_component_variations_without_candidates(
        self, remote: FakeRemoteService
    ) -> None:
        result = await _generator(remote).component_variations(
            IdeaData(), ComponentType.REVENUE_MODEL
        )

        assert result.source is GenerationSource.FALLBACK
        assert result.value == mock_component_variations(ComponentType.REVENUE_MODEL)
