"""Tests for query analysis and the field-weighted relevance scorer."""

from __future__ import annotations

import math

import pytest

from truthrank.core.relevance import (
    FieldTexts,
    build_field_texts,
    build_query_context,
    compute_relevance,
    extract_keywords,
    proximity_bonus,
)
from truthrank.models.record import ArchiveRecord


def _fields(title: str = "", description: str = "", metadata: str = "", fulltext: str = "") -> FieldTexts:
    return FieldTexts(title=title, description=description, metadata=metadata, fulltext=fulltext)


class TestQueryContext:
    """Tests for deriving keywords and years from a query."""

    def test_stop_words_and_short_tokens_removed(self) -> None:
        context = build_query_context("  The Apollo 11 mission  ")
        assert context.original == "The Apollo 11 mission"
        assert context.normalized == "the apollo 11 mission"
        assert context.keywords == ("apollo", "mission")

    def test_all_stop_words_keeps_every_token(self) -> None:
        assert extract_keywords("to be or not") == ("to", "be", "or", "not")

    def test_keywords_deduplicated_in_order(self) -> None:
        assert extract_keywords("moon landing moon footage landing") == ("moon", "landing", "footage")

    def test_keyword_cap(self) -> None:
        query = " ".join(f"word{i}" for i in range(40))
        assert len(extract_keywords(query, max_keywords=24)) == 24
        assert len(extract_keywords(query, max_keywords=5)) == 5

    def test_years_extracted(self) -> None:
        context = build_query_context("photos from the 1960s and 1969 or 12345")
        assert context.years == (1960, 1969)

    def test_empty_query(self) -> None:
        context = build_query_context("   ")
        assert context.is_empty
        assert context.keywords == ()

    def test_punctuation_only_query_is_empty(self) -> None:
        assert build_query_context("?!").is_empty

    def test_none_query(self) -> None:
        assert build_query_context(None).is_empty


class TestFieldTexts:
    """Tests for splitting a record into logical text fields."""

    def test_title_falls_back_to_identifier(self) -> None:
        fields = build_field_texts(ArchiveRecord(identifier="untitled-item"))
        assert fields.title == "untitled-item"

    def test_metadata_aggregate(self) -> None:
        record = ArchiveRecord.model_validate(
            {
                "identifier": "item-1",
                "creator": "NASA",
                "collection": ["nasa", "space"],
                "subject": "Moon",
                "publisher": "<b>GPO</b>",
            }
        )
        fields = build_field_texts(record)
        assert fields.metadata == "NASA nasa space Moon GPO item-1"

    def test_fulltext_combines_text_fields(self) -> None:
        record = ArchiveRecord.model_validate({"identifier": "x", "fulltext": "first", "text": ["second"]})
        assert build_field_texts(record).fulltext == "first second"


class TestProximityBonus:
    """Tests for the distinct-keyword proximity tiers."""

    @pytest.mark.parametrize(
        ("gap", "expected"),
        [(0, 0.2), (2, 0.2), (5, 0.12), (9, 0.08), (10, 0.0)],
    )
    def test_tiers(self, gap: int, expected: float) -> None:
        words = ["apollo", *(["filler"] * gap), "mission"]
        assert proximity_bonus(words, ("apollo", "mission"), 1.0) == pytest.approx(expected)

    def test_scaled_by_weight(self) -> None:
        assert proximity_bonus(["apollo", "mission"], ("apollo", "mission"), 0.5) == pytest.approx(0.1)

    def test_same_keyword_twice_does_not_count(self) -> None:
        assert proximity_bonus(["apollo", "apollo"], ("apollo", "mission"), 1.0) == 0.0

    def test_single_keyword(self) -> None:
        assert proximity_bonus(["apollo", "mission"], ("apollo",), 1.0) == 0.0


class TestComputeRelevance:
    """Tests for the saturated relevance score and coverage figures."""

    def test_exact_title_match(self) -> None:
        context = build_query_context("apollo 11 mission")
        analysis = compute_relevance(_fields(title="Apollo 11 Mission Report"), context)
        # substring 1.0 + two keywords at 0.7 + proximity 0.2
        assert analysis.score == pytest.approx(1 - math.exp(-2.6))
        assert analysis.keyword_coverage == 1.0
        assert analysis.title_accuracy == 1.0

    def test_repeat_bonus(self) -> None:
        context = build_query_context("moon")
        analysis = compute_relevance(_fields(description="moon moon"), context)
        # substring 0.85 + 2 * 0.55 * 0.85 + 1 * 0.05 * 0.85
        raw = 0.85 + 2 * 0.55 * 0.85 + 0.05 * 0.85
        assert analysis.score == pytest.approx(1 - math.exp(-raw))

    def test_no_match(self) -> None:
        context = build_query_context("zeppelin")
        analysis = compute_relevance(_fields(title="Apollo 11"), context)
        assert analysis.score == 0.0
        assert analysis.keyword_coverage == 0.0

    def test_partial_coverage(self) -> None:
        context = build_query_context("apollo zeppelin")
        analysis = compute_relevance(_fields(title="Apollo 11"), context)
        assert analysis.keyword_coverage == 0.5
        assert analysis.title_accuracy == 0.5

    def test_fuzzy_only_coverage_is_damped(self) -> None:
        context = build_query_context("apollo")
        direct = compute_relevance(_fields(title="apollo"), context)
        fuzzy = compute_relevance(_fields(title="apolo"), context)
        assert 0 < fuzzy.title_accuracy < direct.title_accuracy
        assert fuzzy.keyword_coverage == direct.keyword_coverage == 1.0
        assert 0 < fuzzy.score < direct.score

    def test_damping_is_tunable(self) -> None:
        context = build_query_context("apollo")
        strong = compute_relevance(_fields(title="apolo"), context, fuzzy_damping=0.9)
        weak = compute_relevance(_fields(title="apolo"), context, fuzzy_damping=0.3)
        assert weak.title_accuracy < strong.title_accuracy
        assert weak.score == strong.score

    def test_metadata_support_uses_best_of_metadata_and_fulltext(self) -> None:
        context = build_query_context("apollo mission")
        analysis = compute_relevance(_fields(metadata="apollo", fulltext="apollo mission"), context)
        assert analysis.metadata_support == 1.0

    def test_title_outweighs_fulltext(self) -> None:
        context = build_query_context("zeppelin")
        in_title = compute_relevance(_fields(title="zeppelin"), context)
        in_fulltext = compute_relevance(_fields(fulltext="zeppelin"), context)
        assert in_title.score > in_fulltext.score

    def test_empty_fields(self) -> None:
        analysis = compute_relevance(_fields(), build_query_context("apollo"))
        assert analysis.score == 0.0
        assert analysis.title_accuracy == 0.0
