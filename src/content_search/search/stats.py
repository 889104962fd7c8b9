"""Statistical helpers for relatedness scoring and facet counts.

The functions here stay independent of the index so they can be unit tested
on plain values.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from enum import Enum

from content_search.domain.model import Difficulty, SearchableItem, SearchField


def jaccard_similarity(left: Set[str], right: Set[str]) -> float:
    """Return shared / union size, treating two empty sets as dissimilar."""
    union = len(left | right)
    return len(left & right) / max(1, union)


def difficulty_distance(left: Difficulty | None, right: Difficulty | None) -> int:
    """Return the number of levels between two difficulties (0 if either is unset)."""
    if left is None or right is None:
        return 0
    return abs(left.rank - right.rank)


def relatedness(
    source: SearchableItem,
    candidate: SearchableItem,
    *,
    category_bonus: float = 0.2,
    difficulty_penalty: float = 0.05,
) -> tuple[float, frozenset[SearchField]]:
    """Return the unclamped relatedness of ``candidate`` to ``source``.

    Jaccard similarity over tags, plus a bonus for a shared category, minus
    a penalty per level of difficulty distance. Callers clamp to [0, 1] and
    rank on the clamped value.
    """
    matched: set[SearchField] = set()
    score = jaccard_similarity(source.tags, candidate.tags)
    if score > 0:
        matched.add(SearchField.TAGS)
    if source.category == candidate.category:
        score += category_bonus
        matched.add(SearchField.CATEGORY)
    score -= difficulty_penalty * difficulty_distance(source.difficulty, candidate.difficulty)
    return score, frozenset(matched)


def clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def facet_counts(grouping: Mapping[Enum | str, Set[str]]) -> dict[str, int]:
    """Count ids per facet value, keyed by plain string and sorted by key."""
    counts = {(key.value if isinstance(key, Enum) else key): len(ids) for key, ids in grouping.items() if ids}
    return dict(sorted(counts.items()))
