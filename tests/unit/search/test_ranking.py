"""Unit tests for the weighted multi-field ranking engine."""

from __future__ import annotations

import pytest

from content_search.domain.model import ContentType, SearchableItem, SearchField
from content_search.search.analyzers import normalize
from content_search.search.index import build_index
from content_search.search.ranking import RankingEngine, result_order_key, tie_break_key
from content_search.search.schema import FieldWeights


def _terms(title: str = "", tags=(), category: str = "", content: str = "") -> dict:
    tag_terms: list[str] = []
    for tag in tags:
        tag_terms.extend(normalize(tag))
    return {
        SearchField.TITLE: frozenset(normalize(title)),
        SearchField.TAGS: frozenset(tag_terms),
        SearchField.CATEGORY: frozenset(normalize(category)),
        SearchField.CONTENT: frozenset(normalize(content)),
    }


@pytest.fixture
def engine() -> RankingEngine:
    return RankingEngine()


class TestTokenizeQuery:
    def test_drops_duplicate_terms(self, engine) -> None:
        assert engine.tokenize_query("Loop event LOOP") == ("loop", "event")

    def test_empty_query(self, engine) -> None:
        assert engine.tokenize_query("  ?! ") == ()


class TestScore:
    def test_title_exact_match_scores_title_weight(self, engine) -> None:
        score, fields = engine.score(_terms(title="Event Loop"), ("event",))

        assert score == pytest.approx(0.45)
        assert fields == frozenset({SearchField.TITLE})

    def test_all_fields_exact_match_scores_one(self, engine) -> None:
        terms = _terms(title="async", tags=["async"], category="async", content="async")

        score, fields = engine.score(terms, ("async",))

        assert score == pytest.approx(1.0)
        assert fields == frozenset(SearchField)

    def test_field_weights_order_contributions(self, engine) -> None:
        title_score, _ = engine.score(_terms(title="closure"), ("closure",))
        tag_score, _ = engine.score(_terms(tags=["closure"]), ("closure",))
        content_score, _ = engine.score(_terms(content="closure"), ("closure",))

        assert title_score > tag_score > content_score > 0

    def test_exact_beats_prefix_beats_typo(self, engine) -> None:
        exact, _ = engine.score(_terms(title="event"), ("event",))
        prefix, _ = engine.score(_terms(title="eventual"), ("event",))
        typo, _ = engine.score(_terms(title="evnet"), ("event",))

        assert exact > prefix > typo > 0

    def test_unmatched_term_does_not_penalize(self, engine) -> None:
        terms = _terms(title="Event Loop")

        single, _ = engine.score(terms, ("event",))
        with_noise, _ = engine.score(terms, ("event", "zzzzqqq"))

        assert with_noise == pytest.approx(single)

    def test_additional_matching_term_never_lowers_score(self, engine) -> None:
        terms = _terms(title="Event Loop", content="event driven runtime")

        single, _ = engine.score(terms, ("event",))
        double, _ = engine.score(terms, ("event", "loop"))
        weaker, _ = engine.score(terms, ("event", "runtime"))

        assert double >= single
        assert weaker >= single

    def test_no_match_scores_zero(self, engine) -> None:
        score, fields = engine.score(_terms(title="Closures"), ("streams",))

        assert score == 0
        assert fields == frozenset()

    def test_scores_stay_in_unit_interval_for_long_queries(self, engine) -> None:
        terms = _terms(title="a b c d e f", tags=["a", "b"], category="c", content="d e f")
        score, _ = engine.score(terms, tuple("abcdef"))

        assert 0 <= score <= 1

    def test_zero_weight_field_never_reported(self) -> None:
        engine = RankingEngine(FieldWeights(title=1, tags=0, category=0, content=0))
        score, fields = engine.score(_terms(tags=["async"]), ("async",))

        assert score == 0
        assert fields == frozenset()


class TestRank:
    def test_ranks_by_score_then_type_then_id(self, engine) -> None:
        index = build_index(
            [
                {"id": "z", "type": "topic", "title": "Streams", "category": "core"},
                {"id": "y", "type": "flashcard", "title": "Streams", "category": "core"},
                {"id": "x", "type": "flashcard", "title": "Streams", "category": "core"},
                {"id": "w", "type": "question", "title": "Backpressure", "category": "core", "content": "streams"},
            ]
        )

        ranked = engine.rank(index, ("streams",), index.items_by_id.keys())

        assert [entry.item_id for entry in ranked] == ["z", "x", "y", "w"]

    def test_excludes_zero_scores(self, engine, event_index) -> None:
        ranked = engine.rank(event_index, ("sourcing",), event_index.items_by_id.keys())
        assert [entry.item_id for entry in ranked] == ["b"]

    def test_limit_keeps_best_entries(self, engine, study_index) -> None:
        full = engine.rank(study_index, ("async",), study_index.items_by_id.keys())
        limited = engine.rank(study_index, ("async",), study_index.items_by_id.keys(), limit=2)

        assert limited == full[:2]

    def test_restricts_to_candidates(self, engine, study_index) -> None:
        ranked = engine.rank(study_index, ("async",), ["d"])
        assert [entry.item_id for entry in ranked] == ["d"]

    def test_empty_query_ranks_nothing(self, engine, study_index) -> None:
        assert engine.rank(study_index, (), study_index.items_by_id.keys()) == []


def test_tie_break_key_orders_types_then_ids() -> None:
    items = [
        SearchableItem(id="b", type=ContentType.FLASHCARD, title="t", category="c"),
        SearchableItem(id="a", type=ContentType.EXAMPLE, title="t", category="c"),
        SearchableItem(id="c", type=ContentType.TOPIC, title="t", category="c"),
        SearchableItem(id="a2", type=ContentType.QUESTION, title="t", category="c"),
    ]

    assert [item.id for item in sorted(items, key=tie_break_key)] == ["c", "a2", "a", "b"]
    assert result_order_key(0.9, items[0]) < result_order_key(0.5, items[2])
