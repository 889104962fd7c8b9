"""Shared test fixtures and configuration."""

import os

import pytest

from content_search.config import Settings, get_settings
from content_search.search.index import ContentIndex, build_index
from content_search.service_layer.search_service import ContentSearch


# Complete test environment that pins every configurable value
TEST_ENV = {
    "SEARCH_DEFAULT_LIMIT": "20",
    "SEARCH_MAX_LIMIT": "200",
    "SUGGEST_DEFAULT_LIMIT": "8",
    "SUGGEST_MIN_PREFIX_LENGTH": "2",
    "RELATED_DEFAULT_LIMIT": "5",
    "TITLE_WEIGHT": "0.45",
    "TAGS_WEIGHT": "0.25",
    "CATEGORY_WEIGHT": "0.15",
    "CONTENT_WEIGHT": "0.15",
    "RELATED_CATEGORY_BONUS": "0.2",
    "RELATED_DIFFICULTY_PENALTY": "0.05",
    "EXCERPT_MAX_LENGTH": "150",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Pin test defaults and drop any cached settings between tests."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def event_corpus() -> list[dict]:
    """Two-item corpus used by the documented example scenarios."""
    return [
        {
            "id": "a",
            "type": "topic",
            "title": "Event Loop",
            "content": "How the runtime schedules callbacks between phases.",
            "tags": ["nodejs", "async"],
            "category": "core",
            "difficulty": "intermediate",
            "slug": "core/event-loop",
        },
        {
            "id": "b",
            "type": "topic",
            "title": "Event Sourcing",
            "content": "Persisting state as an append-only log of changes.",
            "tags": ["patterns"],
            "category": "architecture",
            "difficulty": "advanced",
            "slug": "architecture/event-sourcing",
        },
    ]


@pytest.fixture
def study_corpus(event_corpus) -> list[dict]:
    """A mixed corpus covering every content type and difficulty."""
    return [
        *event_corpus,
        {
            "id": "c",
            "type": "question",
            "title": "What is the difference between microtasks and macrotasks?",
            "content": "Microtasks such as promise callbacks run before the next macrotask in the event loop.",
            "tags": ["async", "promises"],
            "category": "core",
            "difficulty": "advanced",
        },
        {
            "id": "d",
            "type": "example",
            "title": "Promise chaining",
            "content": "Chain then calls to sequence async work.\n\nfetch(url).then(parse)",
            "tags": ["promises", "async"],
            "category": "core",
        },
        {
            "id": "e",
            "type": "flashcard",
            "title": "What does CQRS stand for?",
            "content": "Command Query Responsibility Segregation, often paired with event sourcing.",
            "tags": ["patterns", "cqrs"],
            "category": "architecture",
            "difficulty": "expert",
        },
        {
            "id": "f",
            "type": "topic",
            "title": "Closures",
            "content": "A closure captures variables from its lexical scope.",
            "tags": ["functions"],
            "category": "language",
            "difficulty": "beginner",
        },
        {
            "id": "g",
            "type": "question",
            "title": "Explain streams and backpressure",
            "content": "Readable streams pause when the writable side buffer is full.",
            "tags": ["nodejs", "streams"],
            "category": "core",
            "difficulty": "expert",
        },
    ]


@pytest.fixture
def event_index(event_corpus) -> ContentIndex:
    return build_index(event_corpus)


@pytest.fixture
def study_index(study_corpus) -> ContentIndex:
    return build_index(study_corpus)


@pytest.fixture
def event_search(event_index, settings) -> ContentSearch:
    return ContentSearch(event_index, settings)


@pytest.fixture
def study_search(study_index, settings) -> ContentSearch:
    return ContentSearch(study_index, settings)
