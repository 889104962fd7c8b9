"""Domain models for the content search engine.

Following the value-object style used across the project:
- Value Objects are immutable (frozen=True)
- Closed vocabularies (content type, difficulty, field names) are enums
- No infrastructure dependencies
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Kinds of content items, listed in tie-break order."""

    TOPIC = "topic"
    QUESTION = "question"
    EXAMPLE = "example"
    FLASHCARD = "flashcard"

    @property
    def rank(self) -> int:
        return _CONTENT_TYPE_ORDER.index(self)


class Difficulty(str, Enum):
    """Ordered difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_ORDER.index(self)


_CONTENT_TYPE_ORDER = tuple(ContentType)
_DIFFICULTY_ORDER = tuple(Difficulty)


class SearchField(str, Enum):
    """Indexed text fields of a searchable item."""

    TITLE = "title"
    TAGS = "tags"
    CATEGORY = "category"
    CONTENT = "content"


class SuggestionType(str, Enum):
    """Origin of an autocomplete suggestion."""

    TOPIC = "topic"
    TAG = "tag"
    CATEGORY = "category"


class WarningKind(str, Enum):
    """Non-fatal problems found while building an index."""

    INVALID_ITEM = "invalid_item"
    DUPLICATE_ID = "duplicate_id"


def _as_collection(value: Any) -> Any:
    if value is None:
        return frozenset()
    if isinstance(value, (str, Enum)):
        return [value]
    return value


class SearchableItem(BaseModel):
    """A normalized content record produced by the content layer.

    Empty titles and categories are accepted here so the index builder can
    report them as invalid items rather than failing construction.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: ContentType
    title: str
    content: str = ""
    excerpt: str | None = None
    category: str
    difficulty: Difficulty | None = None
    tags: frozenset[str] = Field(default_factory=frozenset)
    slug: str = ""

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        return _as_collection(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _blank_difficulty(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class SearchFilters(BaseModel):
    """Conjunctive facet filters; an empty facet places no constraint.

    Accepts both plural and singular facet names (``types`` or ``type``) and
    single values in place of collections. Any other key is rejected.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    types: frozenset[ContentType] = Field(
        default_factory=frozenset, validation_alias=AliasChoices("types", "type")
    )
    categories: frozenset[str] = Field(
        default_factory=frozenset, validation_alias=AliasChoices("categories", "category")
    )
    difficulties: frozenset[Difficulty] = Field(
        default_factory=frozenset, validation_alias=AliasChoices("difficulties", "difficulty")
    )
    tags: frozenset[str] = Field(default_factory=frozenset, validation_alias=AliasChoices("tags", "tag"))

    @field_validator("types", "categories", "difficulties", "tags", mode="before")
    @classmethod
    def _coerce_facet(cls, value: Any) -> Any:
        return _as_collection(value)

    def is_empty(self) -> bool:
        return not (self.types or self.categories or self.difficulties or self.tags)


class SearchResult(BaseModel):
    """A ranked item together with the fields that contributed to its score."""

    model_config = ConfigDict(frozen=True)

    item: SearchableItem
    score: float = Field(ge=0.0, le=1.0)
    matched_fields: frozenset[SearchField] = Field(default_factory=frozenset)


class Suggestion(BaseModel):
    """Autocomplete entry drawn from the index vocabulary."""

    model_config = ConfigDict(frozen=True)

    text: str
    type: SuggestionType
    count: int = Field(ge=1)


class IndexStats(BaseModel):
    """Facet counts used to render filter controls."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    by_category: dict[str, int] = Field(default_factory=dict)
    by_difficulty: dict[str, int] = Field(default_factory=dict)


class BuildWarning(BaseModel):
    """Diagnostic for a corpus record skipped during an index build."""

    model_config = ConfigDict(frozen=True)

    kind: WarningKind
    position: int
    item_id: str | None = None
    message: str

