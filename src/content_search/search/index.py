"""Immutable in-memory content index and the builder that produces it.

An index is built once from a full corpus snapshot and never mutated
afterwards. Rebuilding yields a new ``ContentIndex``; queries holding the old
value keep seeing a consistent snapshot.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
import time
from types import MappingProxyType
from typing import Any, TypeVar

from pydantic import ValidationError

from content_search.domain.model import (
    BuildWarning,
    ContentType,
    Difficulty,
    SearchableItem,
    SearchField,
    SearchFilters,
    SuggestionType,
    WarningKind,
)
from content_search.observability.metrics import BUILD_WARNING_COUNT, INDEX_BUILD_LATENCY, track_latency
from content_search.observability.tracing import create_span
from content_search.search.analyzers import normalize
from content_search.search.schema import TEXT_FIELDS


logger = logging.getLogger(__name__)

K = TypeVar("K")

# Preference order when a term has equal support from several sources
_SOURCE_PRECEDENCE: tuple[SuggestionType, ...] = (
    SuggestionType.TAG,
    SuggestionType.CATEGORY,
    SuggestionType.TOPIC,
)

_FIELD_SOURCES: Mapping[SearchField, SuggestionType] = MappingProxyType(
    {
        SearchField.TITLE: SuggestionType.TOPIC,
        SearchField.TAGS: SuggestionType.TAG,
        SearchField.CATEGORY: SuggestionType.CATEGORY,
    }
)


@dataclass(frozen=True, eq=False)
class ContentIndex:
    """Immutable snapshot of a corpus prepared for querying."""

    items_by_id: Mapping[str, SearchableItem]
    field_tokens: Mapping[str, Mapping[SearchField, tuple[str, ...]]]
    field_terms: Mapping[str, Mapping[SearchField, frozenset[str]]]
    vocabulary: frozenset[str]
    term_counts: Mapping[str, int]
    term_sources: Mapping[str, SuggestionType]
    by_category: Mapping[str, frozenset[str]]
    by_tag: Mapping[str, frozenset[str]]
    by_type: Mapping[ContentType, frozenset[str]]
    by_difficulty: Mapping[Difficulty, frozenset[str]]
    warnings: tuple[BuildWarning, ...] = ()
    built_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls) -> ContentIndex:
        return IndexBuilder().build(())

    def __len__(self) -> int:
        return len(self.items_by_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self.items_by_id

    def get(self, item_id: str) -> SearchableItem | None:
        return self.items_by_id.get(item_id)

    def tokens_for(self, item_id: str) -> Mapping[SearchField, tuple[str, ...]]:
        return self.field_tokens[item_id]

    def terms_for(self, item_id: str) -> Mapping[SearchField, frozenset[str]]:
        """Distinct terms per field, for membership checks while ranking."""
        return self.field_terms[item_id]

    def filter_ids(self, filters: SearchFilters) -> frozenset[str]:
        """Return ids of items satisfying every non-empty facet of ``filters``.

        Within a facet any listed value matches; across facets the groupings
        are intersected.
        """
        selected: frozenset[str] = frozenset(self.items_by_id)
        facets: tuple[tuple[frozenset[Any], Mapping[Any, frozenset[str]]], ...] = (
            (filters.types, self.by_type),
            (filters.categories, self.by_category),
            (filters.difficulties, self.by_difficulty),
            (filters.tags, self.by_tag),
        )
        for allowed, grouping in facets:
            if not allowed:
                continue
            matching: set[str] = set()
            for value in allowed:
                matching.update(grouping.get(value, ()))
            selected = selected.intersection(matching)
            if not selected:
                break
        return selected


def _freeze_grouping(grouping: Mapping[K, set[str]]) -> Mapping[K, frozenset[str]]:
    return MappingProxyType({key: frozenset(ids) for key, ids in grouping.items()})


class IndexBuilder:
    """Assemble a ``ContentIndex`` from a corpus snapshot.

    Invalid records and duplicate ids are skipped and reported as
    ``BuildWarning`` values on the returned index; building never raises
    because of bad corpus data.
    """

    def build(self, corpus: Iterable[SearchableItem | Mapping[str, Any]]) -> ContentIndex:
        with create_span("content_search.index.build") as span, track_latency(INDEX_BUILD_LATENCY):
            start = time.perf_counter()
            index = self._build(corpus)
            span.set_attribute("index.items", len(index))
            span.set_attribute("index.warnings", len(index.warnings))

        logger.info(
            "Built content index: %d items, %d vocabulary terms, %d warnings in %.1fms",
            len(index),
            len(index.vocabulary),
            len(index.warnings),
            (time.perf_counter() - start) * 1000,
        )
        return index

    def _build(self, corpus: Iterable[SearchableItem | Mapping[str, Any]]) -> ContentIndex:
        items_by_id: dict[str, SearchableItem] = {}
        field_tokens: dict[str, Mapping[SearchField, tuple[str, ...]]] = {}
        warnings: list[BuildWarning] = []

        by_category: dict[str, set[str]] = defaultdict(set)
        by_tag: dict[str, set[str]] = defaultdict(set)
        by_type: dict[ContentType, set[str]] = defaultdict(set)
        by_difficulty: dict[Difficulty, set[str]] = defaultdict(set)
        term_items: dict[str, set[str]] = defaultdict(set)
        term_source_items: dict[str, dict[SuggestionType, set[str]]] = defaultdict(lambda: defaultdict(set))

        for position, record in enumerate(corpus):
            item, problem = self._coerce(record)
            if item is None:
                warnings.append(self._warn(WarningKind.INVALID_ITEM, position, _record_id(record), problem))
                continue
            if item.id in items_by_id:
                warnings.append(
                    self._warn(
                        WarningKind.DUPLICATE_ID,
                        position,
                        item.id,
                        f"duplicate id '{item.id}'; keeping the first occurrence",
                    )
                )
                continue

            items_by_id[item.id] = item
            tokens = self._tokenize(item)
            field_tokens[item.id] = tokens

            by_category[item.category].add(item.id)
            by_type[item.type].add(item.id)
            if item.difficulty is not None:
                by_difficulty[item.difficulty].add(item.id)
            for tag in item.tags:
                by_tag[tag].add(item.id)

            for search_field, source in _FIELD_SOURCES.items():
                for term in tokens[search_field]:
                    term_items[term].add(item.id)
                    term_source_items[term][source].add(item.id)

        term_sources = {term: _dominant_source(sources) for term, sources in term_source_items.items()}

        return ContentIndex(
            items_by_id=MappingProxyType(items_by_id),
            field_tokens=MappingProxyType(field_tokens),
            field_terms=MappingProxyType(
                {
                    item_id: MappingProxyType({name: frozenset(terms) for name, terms in tokens.items()})
                    for item_id, tokens in field_tokens.items()
                }
            ),
            vocabulary=frozenset(term_items),
            term_counts=MappingProxyType({term: len(ids) for term, ids in term_items.items()}),
            term_sources=MappingProxyType(term_sources),
            by_category=_freeze_grouping(by_category),
            by_tag=_freeze_grouping(by_tag),
            by_type=_freeze_grouping(by_type),
            by_difficulty=_freeze_grouping(by_difficulty),
            warnings=tuple(warnings),
        )

    def _coerce(self, record: object) -> tuple[SearchableItem | None, str]:
        if isinstance(record, SearchableItem):
            item = record
        elif isinstance(record, Mapping):
            try:
                item = SearchableItem.model_validate(dict(record))
            except ValidationError as exc:
                fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
                return None, f"invalid fields: {', '.join(fields)}"
        else:
            return None, f"unsupported record type {type(record).__name__}"

        if not item.id.strip():
            return None, "empty id"
        if not item.title.strip():
            return None, "empty title"
        if not item.category.strip():
            return None, "empty category"
        return item, ""

    def _tokenize(self, item: SearchableItem) -> Mapping[SearchField, tuple[str, ...]]:
        tag_tokens: list[str] = []
        for tag in sorted(item.tags):
            tag_tokens.extend(normalize(tag))
        raw = {
            SearchField.TITLE: normalize(item.title),
            SearchField.TAGS: tag_tokens,
            SearchField.CATEGORY: normalize(item.category),
            SearchField.CONTENT: normalize(item.content),
        }
        return MappingProxyType({search_field: tuple(raw[search_field]) for search_field in TEXT_FIELDS})

    def _warn(self, kind: WarningKind, position: int, item_id: str | None, message: str) -> BuildWarning:
        logger.warning("Skipping corpus record %d (%s): %s", position, item_id or "<no id>", message)
        BUILD_WARNING_COUNT.labels(kind=kind.value).inc()
        return BuildWarning(kind=kind, position=position, item_id=item_id, message=message)


def _dominant_source(sources: Mapping[SuggestionType, set[str]]) -> SuggestionType:
    """Pick the source backing the most items; ties follow tag, category, topic."""
    return max(_SOURCE_PRECEDENCE, key=lambda source: (len(sources.get(source, ())), -_SOURCE_PRECEDENCE.index(source)))


def _record_id(record: object) -> str | None:
    if isinstance(record, SearchableItem):
        return record.id
    if isinstance(record, Mapping):
        value = record.get("id")
        return value if isinstance(value, str) else None
    return None


def build_index(corpus: Iterable[SearchableItem | Mapping[str, Any]]) -> ContentIndex:
    """Build a new immutable index from a full corpus snapshot."""
    return IndexBuilder().build(corpus)
