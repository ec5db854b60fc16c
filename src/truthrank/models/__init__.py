"""Data models — Records, score breakdowns, classifications, requests and responses."""

from truthrank.models.classification import Classification, ContentPolicyMode, Severity
from truthrank.models.query import ClassifyRequest, MergeRequest, QueryContext, RankRequest, ResultFilters
from truthrank.models.record import ArchiveRecord
from truthrank.models.response import (
    AnnotatedRecord,
    Availability,
    ClassifiedRecord,
    ClassifyResponse,
    RankResponse,
)
from truthrank.models.scoring import ScoreBreakdown, TrustTier

__all__ = [
    "AnnotatedRecord",
    "ArchiveRecord",
    "Availability",
    "Classification",
    "ClassifiedRecord",
    "ClassifyRequest",
    "ClassifyResponse",
    "ContentPolicyMode",
    "MergeRequest",
    "QueryContext",
    "RankRequest",
    "RankResponse",
    "ResultFilters",
    "ScoreBreakdown",
    "Severity",
    "TrustTier",
]
