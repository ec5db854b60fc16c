"""Tests for the truthrank engine (rank, merge, classify pipelines)."""

from __future__ import annotations

from typing import Any

import pytest

from truthrank.config.settings import Settings
from truthrank.core.engine import TruthRankEngine
from truthrank.exceptions import ConfigurationError
from truthrank.models.classification import ContentPolicyMode, Severity
from truthrank.models.query import MergeRequest, RankRequest, ResultFilters
from truthrank.models.scoring import TrustTier


def _ids(response: Any) -> list[str]:
    return [item.identifier for item in response.results]


# ══════════════════════════════════════════════════════════════════════════════
# Construction
# ══════════════════════════════════════════════════════════════════════════════


class TestEngineInit:
    """Tests for engine construction from settings."""

    def test_default_mode_from_settings(self, keywords: Any) -> None:
        settings = Settings(_env_file=None, content={"default_mode": "Moderate"})  # type: ignore[call-arg]
        engine = TruthRankEngine(settings, keywords=keywords)
        assert engine.default_mode is ContentPolicyMode.MODERATE

    def test_unknown_default_mode_fails_safe(self, keywords: Any) -> None:
        settings = Settings(_env_file=None, content={"default_mode": "lenient"})  # type: ignore[call-arg]
        assert TruthRankEngine(settings, keywords=keywords).default_mode is ContentPolicyMode.SAFE

    def test_bundled_dictionary_by_default(self, settings: Settings) -> None:
        engine = TruthRankEngine(settings)
        assert not engine.classifier.keywords.is_empty

    def test_missing_keywords_file(self, tmp_path: Any) -> None:
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None,
            content={"keywords_path": str(tmp_path / "missing.json")},
        )
        with pytest.raises(ConfigurationError):
            TruthRankEngine(settings)

    def test_keywords_file(self, tmp_path: Any) -> None:
        path = tmp_path / "keywords.json"
        path.write_text('{"categories": {"explicit": ["zeppelin"], "mild": []}}', encoding="utf-8")
        settings = Settings(_env_file=None, content={"keywords_path": str(path)})  # type: ignore[call-arg]
        engine = TruthRankEngine(settings)
        assert engine.classifier.classify_text("Zeppelin over Lakehurst").severity is Severity.EXPLICIT


# ══════════════════════════════════════════════════════════════════════════════
# rank
# ══════════════════════════════════════════════════════════════════════════════


class TestRank:
    """Tests for ranking a single page."""

    def test_apollo_mission_report(self, engine: TruthRankEngine, apollo_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="apollo 11 mission", documents=[apollo_doc]))
        (item,) = response.results
        assert item.identifier == "apollo11-report"
        assert item.score.relevance > 0.9
        assert item.score.combined_score > 0.5
        assert item.score.trust_tier in (TrustTier.MEDIUM, TrustTier.HIGH)
        assert item.classification.flagged is False
        assert item.record.nsfw is False

    def test_explicit_hidden_in_moderate(self, engine: TruthRankEngine, explicit_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="film", documents=[explicit_doc], mode="moderate"))
        assert response.results == []
        assert response.total_count == 1
        assert response.visible_count == 0
        assert response.hidden_count == 1

    def test_explicit_shown_when_unrestricted(self, engine: TruthRankEngine, explicit_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="film", documents=[explicit_doc], mode="unrestricted"))
        (item,) = response.results
        assert item.classification.flagged is True
        assert item.classification.severity is Severity.EXPLICIT
        assert item.record.nsfw is True
        assert item.record.nsfw_level == "explicit"
        assert item.visible is True

    def test_include_hidden_marks_records(
        self,
        engine: TruthRankEngine,
        explicit_doc: dict[str, Any],
        mild_doc: dict[str, Any],
        apollo_doc: dict[str, Any],
    ) -> None:
        response = engine.rank(
            RankRequest(query="", documents=[explicit_doc, mild_doc, apollo_doc], mode="safe", include_hidden=True)
        )
        visibility = {item.identifier: item.visible for item in response.results}
        assert visibility == {"film-reel-77": False, "calendar-1955": False, "apollo11-report": True}
        assert response.visible_count == 1
        assert response.hidden_count == 2

    def test_mode_defaults_to_engine_default(self, engine: TruthRankEngine, mild_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="", documents=[mild_doc]))
        assert response.mode is ContentPolicyMode.SAFE
        assert response.results == []

    def test_unknown_mode_fails_safe(self, engine: TruthRankEngine, mild_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="", documents=[mild_doc], mode="show-me-everything"))
        assert response.mode is ContentPolicyMode.SAFE
        assert response.visible_count == 0

    def test_policy_monotonic(
        self,
        engine: TruthRankEngine,
        explicit_doc: dict[str, Any],
        mild_doc: dict[str, Any],
        clean_doc: dict[str, Any],
    ) -> None:
        documents = [explicit_doc, mild_doc, clean_doc]
        visible = {
            mode: set(_ids(engine.rank(RankRequest(query="letters", documents=documents, mode=mode))))
            for mode in ("safe", "moderate", "unrestricted")
        }
        assert visible["safe"] == {"lincoln-letters"}
        assert visible["moderate"] == {"lincoln-letters", "calendar-1955"}
        assert visible["safe"] <= visible["moderate"] <= visible["unrestricted"]
        assert len(visible["unrestricted"]) == 3

    def test_explicit_only(
        self, engine: TruthRankEngine, explicit_doc: dict[str, Any], clean_doc: dict[str, Any]
    ) -> None:
        response = engine.rank(RankRequest(query="", documents=[explicit_doc, clean_doc], mode="nsfw-only"))
        assert _ids(response) == ["film-reel-77"]

    def test_empty_query_orders_by_identifier(self, engine: TruthRankEngine) -> None:
        documents = [{"identifier": "b-item"}, {"identifier": "a-item"}]
        response = engine.rank(RankRequest(query="", documents=documents))
        assert _ids(response) == ["a-item", "b-item"]
        assert all(item.score.relevance == pytest.approx(0.2) for item in response.results)

    def test_invalid_documents_skipped(self, engine: TruthRankEngine, apollo_doc: dict[str, Any]) -> None:
        documents = [{"title": "no identifier"}, {"identifier": ""}, {"identifier": ["x"]}, apollo_doc]
        response = engine.rank(RankRequest(query="apollo", documents=documents))
        assert response.skipped_count == 3
        assert response.total_count == 1
        assert _ids(response) == ["apollo11-report"]

    def test_duplicates_within_page_merged(self, engine: TruthRankEngine) -> None:
        documents = [{"identifier": "x", "title": "First"}, {"identifier": "x", "creator": "Second"}]
        response = engine.rank(RankRequest(query="", documents=documents))
        (item,) = response.results
        assert item.record.title == "First"
        assert item.record.creator == "Second"

    def test_filters_hide_records(
        self, engine: TruthRankEngine, apollo_doc: dict[str, Any], clean_doc: dict[str, Any]
    ) -> None:
        request = RankRequest(query="", documents=[apollo_doc, clean_doc], filters=ResultFilters(language="eng"))
        response = engine.rank(request)
        assert _ids(response) == ["lincoln-letters"]
        assert response.hidden_count == 1

    def test_annotations(self, engine: TruthRankEngine, clean_doc: dict[str, Any]) -> None:
        (item,) = engine.rank(RankRequest(query="lincoln", documents=[clean_doc])).results
        assert item.availability.value == "online"
        assert item.language == "eng"

    def test_deterministic(
        self,
        engine: TruthRankEngine,
        apollo_doc: dict[str, Any],
        clean_doc: dict[str, Any],
        mild_doc: dict[str, Any],
    ) -> None:
        request = RankRequest(query="letters 1862", documents=[apollo_doc, clean_doc, mild_doc], mode="moderate")
        first = engine.rank(request).model_dump(exclude={"request_id", "processing_time_ms"})
        second = engine.rank(request).model_dump(exclude={"request_id", "processing_time_ms"})
        assert first == second

    def test_request_ids_unique(self, engine: TruthRankEngine) -> None:
        first = engine.rank(RankRequest())
        second = engine.rank(RankRequest())
        assert first.request_id.startswith("rank_")
        assert first.request_id != second.request_id


# ══════════════════════════════════════════════════════════════════════════════
# merge
# ══════════════════════════════════════════════════════════════════════════════


class TestMerge:
    """Tests for merging a new page into an accumulated result set."""

    def test_incoming_fields_override(self, engine: TruthRankEngine) -> None:
        response = engine.merge(
            MergeRequest(
                query="new title",
                existing=[{"identifier": "x", "title": "Old Title", "year": "1950"}],
                incoming=[{"identifier": "x", "title": "New Title", "creator": "Someone"}],
            )
        )
        (item,) = response.results
        assert item.record.title == "New Title"
        assert item.record.creator == "Someone"
        assert item.record.year == "1950"
        assert item.score.title_accuracy == 1.0
        assert response.request_id.startswith("merge_")

    def test_equivalent_to_ranking_union(
        self,
        engine: TruthRankEngine,
        apollo_doc: dict[str, Any],
        clean_doc: dict[str, Any],
        mild_doc: dict[str, Any],
    ) -> None:
        page1 = [apollo_doc, clean_doc]
        page2 = [mild_doc, {**apollo_doc, "description": "Mission report, 1969"}]
        merged = engine.merge(MergeRequest(query="apollo report", existing=page1, incoming=page2, mode="moderate"))
        direct = engine.rank(RankRequest(query="apollo report", documents=page1 + page2, mode="moderate"))
        assert [(item.identifier, item.score) for item in merged.results] == [
            (item.identifier, item.score) for item in direct.results
        ]
        assert merged.total_count == direct.total_count == 3

    def test_skipped_counts_both_sides(self, engine: TruthRankEngine) -> None:
        response = engine.merge(MergeRequest(existing=[{"title": "bad"}], incoming=[{"identifier": ""}]))
        assert response.skipped_count == 2
        assert response.results == []


# ══════════════════════════════════════════════════════════════════════════════
# classify
# ══════════════════════════════════════════════════════════════════════════════


class TestClassify:
    """Tests for classification without scoring."""

    def test_classify_documents(
        self, engine: TruthRankEngine, explicit_doc: dict[str, Any], clean_doc: dict[str, Any]
    ) -> None:
        response = engine.classify([explicit_doc, {"title": "no id"}, clean_doc])
        assert [result.record.identifier for result in response.results] == ["film-reel-77", "lincoln-letters"]
        assert response.flagged_count == 1
        assert response.skipped_count == 1

        flagged, clean = response.results
        assert flagged.classification.severity is Severity.EXPLICIT
        assert flagged.record.nsfw is True
        assert flagged.record.nsfw_matches == ["porn"]
        assert clean.record.nsfw is False
        assert clean.record.nsfw_level is None

    def test_stale_upstream_state_cleared(self, engine: TruthRankEngine) -> None:
        document = {"identifier": "x", "title": "Harbour", "nsfw": "false", "nsfwLevel": "??"}
        (result,) = engine.classify([document]).results
        assert result.classification.flagged is False
        assert result.record.nsfw is False
        assert result.record.nsfw_level is None


# ══════════════════════════════════════════════════════════════════════════════
# Input anomalies
# ══════════════════════════════════════════════════════════════════════════════


class TestInputAnomalies:
    """Tests that malformed input degrades instead of raising."""

    @pytest.mark.parametrize("title", ["Vintage softporn reel", "hardcorexxx compilation", "#freeporn stash"])
    def test_compound_explicit_terms_hidden_in_safe_mode(self, engine: TruthRankEngine, title: str) -> None:
        request = RankRequest(query="reel", documents=[{"identifier": "r1", "title": title}], mode="safe")
        response = engine.rank(request)
        assert response.visible_count == 0
        assert response.hidden_count == 1

    def test_very_long_query(self, engine: TruthRankEngine, apollo_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="apollo " * 400, documents=[apollo_doc]))
        (item,) = response.results
        assert item.score.keyword_coverage == 1.0

    def test_non_object_documents_skipped(self, engine: TruthRankEngine, apollo_doc: dict[str, Any]) -> None:
        response = engine.rank(RankRequest(query="apollo", documents=[apollo_doc, "garbage", None, 42]))
        assert response.skipped_count == 3
        assert _ids(response) == ["apollo11-report"]

    def test_merge_skips_non_object_documents(self, engine: TruthRankEngine, apollo_doc: dict[str, Any]) -> None:
        response = engine.merge(MergeRequest(existing=["garbage"], incoming=[apollo_doc, None]))
        assert response.skipped_count == 2
        assert _ids(response) == ["apollo11-report"]

    def test_classify_skips_non_object_documents(
        self, engine: TruthRankEngine, explicit_doc: dict[str, Any]
    ) -> None:
        response = engine.classify([explicit_doc, ["not", "a", "record"]])
        assert response.skipped_count == 1
        assert response.flagged_count == 1
