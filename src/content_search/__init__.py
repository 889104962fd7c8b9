"""In-memory content search and relevance ranking for educational content."""

from content_search.corpus import CorpusBuilder
from content_search.domain.errors import ContentSearchError, InvalidArgumentError, NotFoundError
from content_search.domain.model import (
    BuildWarning,
    ContentType,
    Difficulty,
    IndexStats,
    SearchableItem,
    SearchField,
    SearchFilters,
    SearchResult,
    Suggestion,
    SuggestionType,
    WarningKind,
)
from content_search.search.index import ContentIndex, IndexBuilder, build_index
from content_search.service_layer.search_service import ContentSearch, SearchEngineHandle


__all__ = [
    "BuildWarning",
    "ContentIndex",
    "ContentSearch",
    "ContentSearchError",
    "ContentType",
    "CorpusBuilder",
    "Difficulty",
    "IndexBuilder",
    "IndexStats",
    "InvalidArgumentError",
    "NotFoundError",
    "SearchEngineHandle",
    "SearchField",
    "SearchFilters",
    "SearchResult",
    "SearchableItem",
    "Suggestion",
    "SuggestionType",
    "WarningKind",
    "build_index",
]
