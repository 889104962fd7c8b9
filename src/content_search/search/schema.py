"""
Indexed fields and their scoring weights.

Every searchable item exposes the same four text fields. Each field carries
a relative weight used by the ranking engine; weights are normalized so
they sum to 1.0, which keeps per-term scores inside [0, 1].
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from content_search.domain.model import SearchField


if TYPE_CHECKING:
    from content_search.config import Settings


# Field order used for tokenization and matched-field reporting
TEXT_FIELDS: tuple[SearchField, ...] = (
    SearchField.TITLE,
    SearchField.TAGS,
    SearchField.CATEGORY,
    SearchField.CONTENT,
)


@dataclass(frozen=True)
class FieldWeights:
    """Relative importance of each indexed field."""

    title: float = 0.45
    tags: float = 0.25
    category: float = 0.15
    content: float = 0.15

    def __post_init__(self) -> None:
        values = self.as_mapping().values()
        if any(value < 0 for value in values):
            raise ValueError("Field weights must be non-negative")
        if not any(values):
            raise ValueError("At least one field weight must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> FieldWeights:
        return cls(
            title=settings.title_weight,
            tags=settings.tags_weight,
            category=settings.category_weight,
            content=settings.content_weight,
        )

    def as_mapping(self) -> Mapping[SearchField, float]:
        return MappingProxyType(
            {
                SearchField.TITLE: self.title,
                SearchField.TAGS: self.tags,
                SearchField.CATEGORY: self.category,
                SearchField.CONTENT: self.content,
            }
        )

    def normalized(self) -> Mapping[SearchField, float]:
        """Return weights scaled so they sum to exactly 1.0."""
        weights = self.as_mapping()
        total = sum(weights.values())
        return MappingProxyType({field: weight / total for field, weight in weights.items()})


DEFAULT_FIELD_WEIGHTS = FieldWeights()
