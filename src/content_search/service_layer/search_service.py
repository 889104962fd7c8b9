"""Search service orchestration layer.

``ContentSearch`` is the query façade: a stateless wrapper over one
immutable ``ContentIndex`` exposing search, suggestions, related content and
facet statistics. ``SearchEngineHandle`` owns the currently published
façade and swaps in a freshly built one on rebuild.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import threading
from typing import Any

from pydantic import ValidationError

from content_search.config import Settings, get_settings
from content_search.domain.errors import InvalidArgumentError, NotFoundError
from content_search.domain.model import (
    ContentType,
    IndexStats,
    SearchableItem,
    SearchFilters,
    SearchResult,
    Suggestion,
)
from content_search.observability.metrics import INDEX_ITEM_COUNT, track_query
from content_search.observability.tracing import create_span
from content_search.search.fuzzy import find_fuzzy_matches
from content_search.search.index import ContentIndex, build_index
from content_search.search.ranking import RankingEngine, result_order_key, tie_break_key
from content_search.search.schema import FieldWeights
from content_search.search.stats import clamp_unit, facet_counts, relatedness


logger = logging.getLogger(__name__)

FiltersInput = SearchFilters | Mapping[str, Any] | None


def coerce_filters(filters: FiltersInput) -> SearchFilters:
    """Validate raw filter input, rejecting unknown type/difficulty values."""
    if filters is None:
        return SearchFilters()
    if isinstance(filters, SearchFilters):
        return filters
    if not isinstance(filters, Mapping):
        raise InvalidArgumentError(f"filters must be a mapping, got {type(filters).__name__}")
    try:
        return SearchFilters.model_validate(dict(filters))
    except ValidationError as exc:
        fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
        raise InvalidArgumentError(f"Invalid filter values for: {', '.join(fields) or 'filters'}") from exc


class ContentSearch:
    """High-level query API over one immutable content index.

    Every operation is synchronous and side-effect free apart from metrics
    and logging; the wrapped index is never modified.
    """

    def __init__(
        self,
        index: ContentIndex,
        settings: Settings | None = None,
        *,
        ranking_engine: RankingEngine | None = None,
    ) -> None:
        self.index = index
        self.settings = settings or get_settings()
        self.ranking_engine = ranking_engine or RankingEngine(FieldWeights.from_settings(self.settings))

    @classmethod
    def from_corpus(
        cls,
        corpus: Iterable[SearchableItem | Mapping[str, Any]],
        settings: Settings | None = None,
    ) -> ContentSearch:
        return cls(build_index(corpus), settings)

    def search(self, query: str = "", filters: FiltersInput = None, limit: int | None = None) -> list[SearchResult]:
        """Return items matching ``query`` within ``filters``, best first.

        Args:
            query: Free text; an empty (or separator-only) query lists all
                filter matches with score 1.0 instead of ranking.
            filters: Facet constraints, conjunctive across facets.
            limit: Maximum results; ``None`` or ``0`` uses the configured
                default and negative values are rejected.

        Returns:
            Ranked results, or ``[]`` when neither query nor filters are given.
        """
        with track_query("search"):
            resolved_limit = self._resolve_limit(limit, self.settings.search_default_limit)
            resolved_filters = coerce_filters(filters)
            query_terms = self.ranking_engine.tokenize_query(query or "")

            if not query_terms and resolved_filters.is_empty():
                return []

            with create_span(
                "content_search.search",
                attributes={"query.terms": len(query_terms), "query.limit": resolved_limit},
            ) as span:
                candidate_ids = (
                    self.index.items_by_id.keys()
                    if resolved_filters.is_empty()
                    else self.index.filter_ids(resolved_filters)
                )

                if not query_terms:
                    items = sorted((self.index.items_by_id[item_id] for item_id in candidate_ids), key=tie_break_key)
                    results = [SearchResult(item=item, score=1.0) for item in items[:resolved_limit]]
                else:
                    ranked = self.ranking_engine.rank(self.index, query_terms, candidate_ids, limit=resolved_limit)
                    results = [
                        SearchResult(
                            item=self.index.items_by_id[entry.item_id],
                            score=entry.score,
                            matched_fields=entry.matched_fields,
                        )
                        for entry in ranked
                    ]
                span.set_attribute("search.results", len(results))

        logger.debug("Search %r matched %d results (limit %d)", query, len(results), resolved_limit)
        return results

    def search_by_category(self, query: str, category: str, limit: int | None = 10) -> list[SearchResult]:
        return self.search(query, SearchFilters(categories=frozenset({category})), limit)

    def search_by_type(self, query: str, content_type: ContentType | str, limit: int | None = 10) -> list[SearchResult]:
        return self.search(query, {"types": [content_type]}, limit)

    def suggest(self, prefix: str, limit: int | None = None) -> list[Suggestion]:
        """Return vocabulary completions for the last term of ``prefix``.

        Entries either start with the normalized prefix term or fuzzy-match
        it. They are ordered by how many items carry the term, then
        alphabetically. Prefix terms shorter than the configured minimum
        yield no suggestions.
        """
        with track_query("suggest"):
            resolved_limit = self._resolve_limit(limit, self.settings.suggest_default_limit)
            terms = self.ranking_engine.tokenize_query(prefix or "")
            if not terms:
                return []
            target = terms[-1]
            if len(target) < self.settings.suggest_min_prefix_length:
                return []

            matches = find_fuzzy_matches(target, self.index.vocabulary)
            matches.sort(key=lambda match: (-self.index.term_counts[match[0]], match[0]))
            suggestions = [
                Suggestion(
                    text=term,
                    type=self.index.term_sources[term],
                    count=self.index.term_counts[term],
                )
                for term, _score in matches[:resolved_limit]
            ]

        logger.debug("Suggest %r returned %d entries", prefix, len(suggestions))
        return suggestions

    def related_to(self, item_id: str, limit: int | None = None) -> list[SearchResult]:
        """Return other items most similar to ``item_id`` by tags, category and difficulty.

        Raises:
            NotFoundError: ``item_id`` is not in the index.
            InvalidArgumentError: ``limit`` is negative.
        """
        with track_query("related"):
            resolved_limit = self._resolve_limit(limit, self.settings.related_default_limit)
            source = self.index.get(item_id)
            if source is None:
                raise NotFoundError(item_id)

            scored: list[tuple[tuple[float, int, str], SearchResult]] = []
            for candidate in self.index.items_by_id.values():
                if candidate.id == source.id:
                    continue
                raw_score, matched_fields = relatedness(
                    source,
                    candidate,
                    category_bonus=self.settings.related_category_bonus,
                    difficulty_penalty=self.settings.related_difficulty_penalty,
                )
                score = clamp_unit(raw_score)
                result = SearchResult(item=candidate, score=score, matched_fields=matched_fields)
                scored.append((result_order_key(score, candidate), result))

            scored.sort(key=lambda entry: entry[0])
            return [result for _key, result in scored[:resolved_limit]]

    def stats(self) -> IndexStats:
        """Return item counts grouped by type, category and difficulty."""
        return IndexStats(
            total=len(self.index),
            by_type=facet_counts(self.index.by_type),
            by_category=facet_counts(self.index.by_category),
            by_difficulty=facet_counts(self.index.by_difficulty),
        )

    def categories(self) -> list[str]:
        return sorted(self.index.by_category)

    def tags(self) -> list[str]:
        return sorted(self.index.by_tag)

    def _resolve_limit(self, limit: int | None, default: int) -> int:
        if limit is None:
            return default
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidArgumentError(f"limit must be an integer, got {type(limit).__name__}")
        if limit < 0:
            raise InvalidArgumentError(f"limit must not be negative, got {limit}")
        if limit == 0:
            return default
        return min(limit, self.settings.search_max_limit)


class SearchEngineHandle:
    """Holds the currently published ``ContentSearch`` and rebuilds it atomically.

    Readers take ``current`` without locking; a rebuild constructs the new
    index off to the side and publishes it with a single assignment, so a
    reader sees either the old or the new index, never a mix.
    """

    def __init__(self, search: ContentSearch | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or (search.settings if search else get_settings())
        self._search = search or ContentSearch(ContentIndex.empty(), self.settings)
        self._rebuild_lock = threading.Lock()

    @property
    def current(self) -> ContentSearch:
        return self._search

    def rebuild(self, corpus: Iterable[SearchableItem | Mapping[str, Any]]) -> ContentIndex:
        """Build a new index from ``corpus`` and publish it."""
        with self._rebuild_lock:
            index = build_index(corpus)
            self._search = ContentSearch(index, self.settings)
            INDEX_ITEM_COUNT.set(len(index))
        logger.info("Published rebuilt content index with %d items", len(index))
        return index
