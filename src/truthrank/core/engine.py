"""truthrank Engine — Orchestrates classification, policy, scoring and ranking.

The engine runs the full pipeline for one page (``rank``) or for an
accumulated result set plus a newly fetched page (``merge``):
  1. Validation: raw documents become ArchiveRecords (unusable ones are skipped)
  2. Merge: records are de-duplicated by identifier, later fields win
  3. Classification: sensitive-content flag, severity and matches
  4. Policy: the content policy mode decides visibility
  5. Scoring: relevance and trust sub-scores blended into one signal
  6. Ranking: combined score descending, identifier ascending
  7. Advanced filters: language, trust, availability, collection, ...

Everything is synchronous and pure; the only shared state is the
immutable keyword dictionary, so one engine serves concurrent callers.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from truthrank.core.classifier import ContentClassifier, apply_classification
from truthrank.core.filters import determine_availability, matches_filters, record_languages
from truthrank.core.keywords import KeywordDictionary, default_keyword_dictionary, load_keyword_dictionary
from truthrank.core.policy import is_visible, normalize_policy_mode
from truthrank.core.ranker import merge_records, sort_ranked
from truthrank.core.relevance import build_query_context
from truthrank.core.scorer import TruthScorer
from truthrank.models.classification import ContentPolicyMode
from truthrank.models.query import MergeRequest, RankRequest, ResultFilters
from truthrank.models.record import ArchiveRecord
from truthrank.models.response import AnnotatedRecord, ClassifiedRecord, ClassifyResponse, RankResponse
from truthrank.observability.logging import bind_request, clear_request

if TYPE_CHECKING:
    from truthrank.config.settings import Settings

logger = logging.getLogger(__name__)


class TruthRankEngine:
    """Core orchestrator for truth-ranking and content-safety classification.

    Pipeline:
      raw documents → [Validation] → ArchiveRecords
                    → [Merge] → one record per identifier
                    → [Classifier] → flagged / severity / matches
                    → [Policy] → visible / hidden
                    → [Scorer] → ScoreBreakdown
                    → [Ranker] → deterministic order
                    → RankResponse

    Attributes:
        settings: Application configuration.
        classifier: Keyword + upstream-hint content classifier.
        scorer: Relevance and trust scorer.
        default_mode: Policy mode used when a request names none.
    """

    def __init__(self, settings: Settings, keywords: KeywordDictionary | None = None) -> None:
        self.settings = settings
        if keywords is None:
            path = settings.content.keywords_path
            keywords = load_keyword_dictionary(path) if path is not None else default_keyword_dictionary()
        self.classifier = ContentClassifier(keywords)
        self.scorer = TruthScorer(settings.ranking)
        self.default_mode = normalize_policy_mode(settings.content.default_mode)

    # ──────────────────────────────────────────────────────────────────────
    # Public operations
    # ──────────────────────────────────────────────────────────────────────

    def rank(self, request: RankRequest) -> RankResponse:
        """Classify, filter, score and rank one page of raw documents.

        Args:
            request: Query, raw documents, policy mode and filters.

        Returns:
            A RankResponse with the ordered, annotated results.
        """
        start_time = time.monotonic()
        request_id = f"rank_{uuid.uuid4().hex[:12]}"
        mode = normalize_policy_mode(request.mode, self.default_mode)
        bind_request(request_id, mode=mode.value)
        try:
            records, skipped = self.parse_documents(request.documents)
            return self._run(
                request_id=request_id,
                query=request.query,
                records=merge_records(records),
                mode=mode,
                filters=request.filters,
                include_hidden=request.include_hidden,
                skipped=skipped,
                start_time=start_time,
            )
        finally:
            clear_request()

    def merge(self, request: MergeRequest) -> RankResponse:
        """Merge a new page into an accumulated set and re-rank the whole set.

        Incoming fields override accumulated fields for the same identifier,
        and every merged record is rescored against the current query so
        scores stay comparable across pages.
        """
        start_time = time.monotonic()
        request_id = f"merge_{uuid.uuid4().hex[:12]}"
        mode = normalize_policy_mode(request.mode, self.default_mode)
        bind_request(request_id, mode=mode.value)
        try:
            existing, skipped_existing = self.parse_documents(request.existing)
            incoming, skipped_incoming = self.parse_documents(request.incoming)
            return self._run(
                request_id=request_id,
                query=request.query,
                records=merge_records(existing, incoming),
                mode=mode,
                filters=request.filters,
                include_hidden=request.include_hidden,
                skipped=skipped_existing + skipped_incoming,
                start_time=start_time,
            )
        finally:
            clear_request()

    def classify(self, documents: Iterable[Any]) -> ClassifyResponse:
        """Classify raw documents without scoring or filtering them.

        Records come back in input order (de-duplicated by identifier) with
        their hint fields rewritten to match the classification.
        """
        records, skipped = self.parse_documents(documents)
        results: list[ClassifiedRecord] = []
        for record in merge_records(records):
            classification = self.classifier.classify(record)
            results.append(
                ClassifiedRecord(
                    record=apply_classification(record, classification),
                    classification=classification,
                )
            )
        flagged = sum(1 for result in results if result.classification.flagged)
        logger.info("Classified %d records: %d flagged, %d skipped", len(results), flagged, skipped)
        return ClassifyResponse(results=results, flagged_count=flagged, skipped_count=skipped)

    def parse_documents(self, documents: Iterable[Any]) -> tuple[list[ArchiveRecord], int]:
        """Validate raw documents, skipping the unusable ones.

        Returns:
            The valid records in input order and the number skipped.
        """
        records: list[ArchiveRecord] = []
        skipped = 0
        for index, document in enumerate(documents):
            try:
                records.append(ArchiveRecord.model_validate(document))
            except ValidationError as e:
                skipped += 1
                logger.warning("Skipping document %d: %d validation error(s)", index, e.error_count())
        return records, skipped

    # ──────────────────────────────────────────────────────────────────────
    # Pipeline
    # ──────────────────────────────────────────────────────────────────────

    def _run(
        self,
        *,
        request_id: str,
        query: str,
        records: list[ArchiveRecord],
        mode: ContentPolicyMode,
        filters: ResultFilters,
        include_hidden: bool,
        skipped: int,
        start_time: float,
    ) -> RankResponse:
        context = build_query_context(query, self.settings.ranking.max_keywords)

        annotated: list[AnnotatedRecord] = []
        for record in records:
            classification = self.classifier.classify(record)
            visible = is_visible(classification, mode)
            # hidden records are not worth scoring unless the caller wants to see them
            if not visible and not include_hidden:
                continue
            languages = record_languages(record)
            item = AnnotatedRecord(
                record=apply_classification(record, classification),
                score=self.scorer.score(record, context),
                classification=classification,
                availability=determine_availability(record),
                language=languages[0] if languages else None,
                visible=visible,
            )
            if item.visible and not matches_filters(item, filters):
                item.visible = False
            if item.visible or include_hidden:
                annotated.append(item)

        ranked = sort_ranked(annotated)
        visible_count = sum(1 for item in ranked if item.visible)
        processing_time_ms = int((time.monotonic() - start_time) * 1000)

        logger.info(
            "Ranked %d records: %d visible, %d hidden, %d skipped in %d ms",
            len(records),
            visible_count,
            len(records) - visible_count,
            skipped,
            processing_time_ms,
        )

        return RankResponse(
            request_id=request_id,
            query=context.original,
            mode=mode,
            results=ranked,
            total_count=len(records),
            visible_count=visible_count,
            hidden_count=len(records) - visible_count,
            skipped_count=skipped,
            processing_time_ms=processing_time_ms,
        )
