import pytest

from ideaflow.enums import ComponentType
from ideaflow.idea import (
    UNTITLED,
    mock_business_suggestions,
    mock_component_variations,
    mock_feedback,
    mock_variations,
)
from ideaflow.models import MAX_VARIATIONS


def test_mock_feedback_mentions_title() -> None:
    feedback = mock_feedback("Coffee Club")

    assert feedback.strengths[0] == "Coffee Club has a clear value proposition"
    assert all(
        len(items) == 3
        for items in (
            feedback.strengths,
            feedback.weaknesses,
            feedback.opportunities,
            feedback.threats,
            feedback.suggestions,
            feedback.market_insights,
            feedback.validation_tips,
        )
    )


def test_mock_feedback_without_title() -> None:
    assert mock_feedback("").strengths[0].startswith(UNTITLED)


def test_mock_variations_use_title_and_description() -> None:
    variations = mock_variations("Coffee", "fresh beans")

    assert len(variations) == MAX_VARIATIONS
    assert variations[0].title == "Premium Coffee"
    assert "fresh beans" in variations[0].description
    assert not any(v.is_selected for v in variations)
    assert len({v.id for v in variations}) == MAX_VARIATIONS


def test_mock_variations_have_fresh_ids() -> None:
    first = {v.id for v in mock_variations("A", "b")}
    second = {v.id for v in mock_variations("A", "b")}

    assert first.isdisjoint(second)


def test_mock_business_suggestions_fill_every_category() -> None:
    suggestions = mock_business_suggestions()

    assert not suggestions.is_empty()
    assert "Freemium" in suggestions.pricing_model


@pytest.mark.parametrize("component", list(ComponentType))
def test_mock_component_variations(component: ComponentType) -> None:
    variations = mock_component_variations(component)

    assert [v.id for v in variations] == ["1", "2", "3", "4", "5"]
    assert all(v.text for v in variations)
    assert not any(v.is_selected for v in variations)
