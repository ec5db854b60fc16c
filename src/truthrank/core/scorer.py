"""Truth Score Combiner — Blends relevance and trust sub-scores into one ranking signal."""

from __future__ import annotations

from truthrank.config.settings import RankingSettings
from truthrank.core.dates import current_year
from truthrank.core.relevance import build_field_texts, compute_relevance
from truthrank.core.trust import (
    determine_trust_tier,
    score_authenticity,
    score_completeness,
    score_date_relevance,
    score_historical_value,
    score_transparency,
)
from truthrank.models.query import QueryContext
from truthrank.models.record import ArchiveRecord
from truthrank.models.scoring import ScoreBreakdown

SCORE_PRECISION = 3

# Convex blend: the weights sum to 1
COMBINED_WEIGHTS: dict[str, float] = {
    "relevance": 0.32,
    "authenticity": 0.22,
    "historical_value": 0.10,
    "transparency": 0.10,
    "completeness": 0.10,
    "date_relevance": 0.08,
    "keyword_coverage": 0.08,
}


def combine_scores(sub_scores: dict[str, float]) -> float:
    """Weighted blend of the sub-scores, falling back to relevance when it degenerates to 0."""
    combined = sum(sub_scores[name] * weight for name, weight in COMBINED_WEIGHTS.items())
    combined = min(1.0, max(0.0, combined))
    return combined if combined > 0 else sub_scores["relevance"]


class TruthScorer:
    """Scores records against a query context.

    Holds only immutable configuration, so one instance can be shared by
    concurrent callers.
    """

    def __init__(self, settings: RankingSettings | None = None) -> None:
        self._settings = settings or RankingSettings()

    @property
    def settings(self) -> RankingSettings:
        return self._settings

    def score(self, record: ArchiveRecord, context: QueryContext) -> ScoreBreakdown:
        """Compute the full score breakdown for one record.

        Args:
            record: The record to score.
            context: Query context built once per ranking call.

        Returns:
            A ScoreBreakdown with every value rounded to three decimals.
        """
        now = current_year(self._settings.reference_year)
        fields = build_field_texts(record)
        analysis = compute_relevance(fields, context, self._settings.fuzzy_coverage_damping)

        if context.is_empty:
            relevance = self._settings.empty_query_relevance
            keyword_coverage = 0.0
        else:
            relevance = analysis.score
            keyword_coverage = analysis.keyword_coverage

        authenticity = score_authenticity(record, fields)
        sub_scores = {
            "relevance": relevance,
            "authenticity": authenticity,
            "historical_value": score_historical_value(record, fields, now),
            "transparency": score_transparency(record, fields),
            "completeness": score_completeness(record, fields),
            "date_relevance": score_date_relevance(record, context, now),
            "keyword_coverage": keyword_coverage,
        }
        combined = combine_scores(sub_scores)

        return ScoreBreakdown(
            **{name: round(value, SCORE_PRECISION) for name, value in sub_scores.items()},
            combined_score=round(combined, SCORE_PRECISION),
            trust_tier=determine_trust_tier(authenticity),
            title_accuracy=round(analysis.title_accuracy, SCORE_PRECISION),
            description_strength=round(analysis.description_strength, SCORE_PRECISION),
            metadata_support=round(analysis.metadata_support, SCORE_PRECISION),
        )
