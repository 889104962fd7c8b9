"""Fluent assembly of a searchable corpus from typed content records.

The content layer hands over topics, interview questions, code examples,
and flashcards in their own shapes; ``CorpusBuilder`` maps each onto the
common searchable record and fills in a generated excerpt. Records are kept
as plain mappings so validation happens in the index builder, where bad
records become build warnings instead of exceptions.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from content_search.config import Settings, get_settings
from content_search.domain.model import ContentType, SearchableItem
from content_search.search.index import ContentIndex, build_index
from content_search.search.snippet import generate_excerpt


class CorpusBuilder:
    """Collect content records and build a ``ContentIndex`` from them."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._records: list[SearchableItem | Mapping[str, Any]] = []

    def __len__(self) -> int:
        return len(self._records)

    def add_topic(
        self,
        *,
        id: str,
        title: str,
        content: str,
        category: str,
        difficulty: str | None = None,
        tags: Iterable[str] = (),
        slug: str = "",
        excerpt: str | None = None,
    ) -> CorpusBuilder:
        return self._add(
            ContentType.TOPIC,
            id=id,
            title=title,
            content=content,
            category=category,
            difficulty=difficulty,
            tags=tags,
            slug=slug,
            excerpt=excerpt or self._excerpt(content),
        )

    def add_question(
        self,
        *,
        id: str,
        question: str,
        answer: str,
        category: str,
        difficulty: str | None = None,
        tags: Iterable[str] = (),
        slug: str = "",
    ) -> CorpusBuilder:
        return self._add(
            ContentType.QUESTION,
            id=id,
            title=question,
            content=answer,
            category=category,
            difficulty=difficulty,
            tags=tags,
            slug=slug,
            excerpt=self._excerpt(answer),
        )

    def add_example(
        self,
        *,
        id: str,
        title: str,
        code: str,
        explanation: str,
        category: str,
        tags: Iterable[str] = (),
        slug: str = "",
    ) -> CorpusBuilder:
        """Add a code example; its searchable body is the explanation followed by the code."""
        return self._add(
            ContentType.EXAMPLE,
            id=id,
            title=title,
            content=f"{explanation}\n\n{code}",
            category=category,
            difficulty=None,
            tags=tags,
            slug=slug,
            excerpt=self._excerpt(explanation),
        )

    def add_flashcard(
        self,
        *,
        id: str,
        question: str,
        answer: str,
        category: str,
        difficulty: str | None = None,
        tags: Iterable[str] = (),
        slug: str = "",
    ) -> CorpusBuilder:
        return self._add(
            ContentType.FLASHCARD,
            id=id,
            title=question,
            content=answer,
            category=category,
            difficulty=difficulty,
            tags=tags,
            slug=slug,
            excerpt=self._excerpt(answer),
        )

    def extend(self, records: Iterable[SearchableItem | Mapping[str, Any]]) -> CorpusBuilder:
        """Append already-normalized records as-is."""
        self._records.extend(records)
        return self

    def items(self) -> list[SearchableItem | Mapping[str, Any]]:
        return list(self._records)

    def build(self) -> ContentIndex:
        return build_index(self._records)

    def _excerpt(self, text: str) -> str:
        return generate_excerpt(text, self.settings.excerpt_max_length)

    def _add(self, content_type: ContentType, *, tags: Iterable[str], **fields: Any) -> CorpusBuilder:
        self._records.append({"type": content_type.value, "tags": list(tags), **fields})
        return self
