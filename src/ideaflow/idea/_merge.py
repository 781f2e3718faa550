"""Deterministic synthesis of one variation from several."""

import re
from collections.abc import Sequence

from ideaflow.exceptions import MergeArityError
from ideaflow.models import MAX_VARIATIONS, MergedVariation, Variation

MIN_MERGE = 2

TOO_FEW_MESSAGE = "Please select at least two variations to merge"
TOO_MANY_MESSAGE = f"You can select a maximum of {MAX_VARIATIONS} variations to merge"

_LEADING_ARTICLE = re.compile(r"^(?:a|an|the) ", re.IGNORECASE)


def _phrase(text: str) -> str:
    return _LEADING_ARTICLE.sub("", text.lower(), count=1)


def _clause(text: str) -> str:
    return text.lower().removesuffix(".")


def check_merge_arity(count: int) -> None:
    """Reject merge selections outside 2..5.

    Raises:
        MergeArityError: With the user-facing message for the violation.
    """
    if count < MIN_MERGE:
        raise MergeArityError(TOO_FEW_MESSAGE, count=count)
    if count > MAX_VARIATIONS:
        raise MergeArityError(TOO_MANY_MESSAGE, count=count)


def merge_variations(variations: Sequence[Variation]) -> MergedVariation:
    """Combine 2 to 5 variations into one, in input order.

    Pure string transformation with no randomness, so equal inputs always
    give equal output.

    Raises:
        MergeArityError: If fewer than 2 or more than 5 variations are given.
    """
    check_merge_arity(len(variations))

    title_tokens = [(v.title.split() or [""])[0] for v in variations]
    description_parts = [
        f"incorporates {_phrase(v.description)}" if index == 0 else f"with {_phrase(v.description)}"
        for index, v in enumerate(variations)
    ]

    return MergedVariation(
        title="Merged: " + " + ".join(title_tokens),
        description="A combined approach that " + " ".join(description_parts),
        differentiator="Unique combination of "
        + " and ".join(_clause(v.differentiator) for v in variations),
        target_market=", serving both ".join(_clause(v.target_market) for v in variations),
        revenue_model="Multi-faceted approach using "
        + " combined with ".join(_clause(v.revenue_model) for v in variations),
    )
