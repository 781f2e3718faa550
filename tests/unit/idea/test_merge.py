import pytest

from ideaflow.exceptions import MergeArityError
from ideaflow.idea import TOO_FEW_MESSAGE, TOO_MANY_MESSAGE, merge_variations
from tests.conftest import make_variation


class TestMergeVariations:
    def test_two_variations(self) -> None:
        first = make_variation(
            1,
            title="Premium Coffee",
            description="A high-end subscription",
            differentiator="Rare beans.",
            target_market="Connoisseurs.",
            revenue_model="Subscription.",
        )
        second = make_variation(
            2,
            title="Budget Coffee",
            description="The affordable option",
            differentiator="Low prices",
            target_market="Students",
            revenue_model="Volume sales.",
        )

        merged = merge_variations([first, second])

        assert merged.title == "Merged: Premium + Budget"
        assert merged.description == (
            "A combined approach that incorporates high-end subscription "
            "with affordable option"
        )
        assert merged.differentiator == "Unique combination of rare beans and low prices"
        assert merged.target_market == "connoisseurs, serving both students"
        assert merged.revenue_model == (
            "Multi-faceted approach using subscription combined with volume sales"
        )

    def test_follows_input_order(self) -> None:
        variations = [make_variation(i) for i in (3, 1, 2)]

        merged = merge_variations(variations)

        assert merged.title == "Merged: Idea3 + Idea1 + Idea2"
        assert merged.description == (
            "A combined approach that incorporates service number 3 "
            "with service number 1 with service number 2"
        )

    def test_strips_only_one_leading_article(self) -> None:
        merged = merge_variations(
            [
                make_variation(1, description="An app for the people"),
                make_variation(2, description="Another idea"),
            ]
        )

        assert merged.description == (
            "A combined approach that incorporates app for the people with another idea"
        )

    def test_empty_title_contributes_empty_token(self) -> None:
        merged = merge_variations([make_variation(1, title=""), make_variation(2)])

        assert merged.title == "Merged:  + Idea2"

    def test_is_deterministic(self) -> None:
        variations = [make_variation(i) for i in range(4)]

        assert merge_variations(variations) == merge_variations(list(variations))

    @pytest.mark.parametrize("count", [0, 1])
    def test_rejects_too_few(self, count: int) -> None:
        with pytest.raises(MergeArityError, match=TOO_FEW_MESSAGE) as exc_info:
            merge_variations([make_variation(i) for i in range(count)])

        assert exc_info.value.count == count

    def test_rejects_too_many(self) -> None:
        with pytest.raises(MergeArityError, match=TOO_MANY_MESSAGE):
            merge_variations([make_variation(i) for i in range(6)])

    def test_accepts_five(self) -> None:
        merged = merge_variations([make_variation(i) for i in range(5)])

        assert merged.title.count(" + ") == 4
