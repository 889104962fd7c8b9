"""Weighted multi-field relevance ranking for content queries."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
import heapq

from content_search.domain.model import SearchableItem, SearchField
from content_search.search.analyzers import normalize, unique_terms
from content_search.search.fuzzy import EXACT_SCORE, match_score
from content_search.search.index import ContentIndex
from content_search.search.schema import DEFAULT_FIELD_WEIGHTS, FieldWeights


MatchCache = dict[tuple[str, str], float]


@dataclass(frozen=True)
class RankedItem:
    """Represents a scored item produced by the ranking engine."""

    item_id: str
    score: float
    matched_fields: frozenset[SearchField]


def tie_break_key(item: SearchableItem) -> tuple[int, str]:
    """Order equal-score items by content type rank, then id."""
    return (item.type.rank, item.id)


def result_order_key(score: float, item: SearchableItem) -> tuple[float, int, str]:
    """Sort key placing higher scores first and applying the tie-break."""
    return (-score, *tie_break_key(item))


class RankingEngine:
    """Compute composite relevance scores for indexed items.

    Each query term is scored per field as the best fuzzy match against any
    token of that field, weighted by the field weight and summed across
    fields, giving a per-term score in [0, 1]. Per-term scores are combined
    with a probabilistic OR (``1 - prod(1 - s)``), so the result stays in
    [0, 1] for any query length, a term matching nothing leaves the score
    unchanged, and each additional matching term can only raise it.
    """

    def __init__(self, weights: FieldWeights | None = None) -> None:
        self.weights: Mapping[SearchField, float] = (weights or DEFAULT_FIELD_WEIGHTS).normalized()

    def tokenize_query(self, text: str) -> tuple[str, ...]:
        """Return the distinct normalized query terms in query order."""
        return unique_terms(normalize(text))

    def best_match(self, term: str, field_terms: Collection[str], cache: MatchCache | None = None) -> float:
        """Return the best match score of ``term`` against any of ``field_terms``."""
        if not field_terms:
            return 0.0
        if term in field_terms:
            return EXACT_SCORE

        best = 0.0
        for candidate in field_terms:
            key = (term, candidate)
            if cache is not None and key in cache:
                score = cache[key]
            else:
                score = match_score(term, candidate)
                if cache is not None:
                    cache[key] = score
            best = max(best, score)
        return best

    def score_term(
        self,
        term: str,
        field_terms: Mapping[SearchField, Collection[str]],
        cache: MatchCache | None = None,
    ) -> tuple[float, frozenset[SearchField]]:
        """Return the weighted score of one query term and the fields it matched."""
        total = 0.0
        matched: set[SearchField] = set()
        for search_field, weight in self.weights.items():
            if weight <= 0:
                continue
            best = self.best_match(term, field_terms.get(search_field, ()), cache)
            if best > 0:
                total += best * weight
                matched.add(search_field)
        return min(total, 1.0), frozenset(matched)

    def score(
        self,
        field_terms: Mapping[SearchField, Collection[str]],
        query_terms: Iterable[str],
        cache: MatchCache | None = None,
    ) -> tuple[float, frozenset[SearchField]]:
        """Return the composite score in [0, 1] and the contributing fields."""
        miss = 1.0
        matched: set[SearchField] = set()
        for term in query_terms:
            term_score, term_fields = self.score_term(term, field_terms, cache)
            miss *= 1.0 - term_score
            matched.update(term_fields)
        return min(max(1.0 - miss, 0.0), 1.0), frozenset(matched)

    def rank(
        self,
        index: ContentIndex,
        query_terms: tuple[str, ...],
        candidate_ids: Iterable[str],
        *,
        limit: int | None = None,
    ) -> list[RankedItem]:
        """Return candidates with a nonzero score, best first."""
        if not query_terms:
            return []

        cache: MatchCache = {}
        ranked: list[RankedItem] = []
        for item_id in candidate_ids:
            score, matched_fields = self.score(index.terms_for(item_id), query_terms, cache)
            if score <= 0:
                continue
            ranked.append(RankedItem(item_id=item_id, score=score, matched_fields=matched_fields))

        def order(entry: RankedItem) -> tuple[float, int, str]:
            return result_order_key(entry.score, index.items_by_id[entry.item_id])

        if limit is not None and limit < len(ranked):
            return heapq.nsmallest(limit, ranked, key=order)
        return sorted(ranked, key=order)
