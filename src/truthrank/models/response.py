"""Response models — Annotated, ordered output of the ranking pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from truthrank.models.classification import Classification, ContentPolicyMode
from truthrank.models.record import ArchiveRecord
from truthrank.models.scoring import ScoreBreakdown


class Availability(str, Enum):
    """Whether the original source is still linked or only the archived copy exists."""

    ONLINE = "online"
    ARCHIVED_ONLY = "archived-only"


class ClassifiedRecord(BaseModel):
    """A record with its content classification only."""

    record: ArchiveRecord = Field(description="The (merged) raw record")
    classification: Classification = Field(description="Sensitive-content classification")


class AnnotatedRecord(BaseModel):
    """A record with its full score breakdown and classification."""

    record: ArchiveRecord = Field(description="The (merged) raw record")
    score: ScoreBreakdown = Field(description="Truth-ranking breakdown")
    classification: Classification = Field(description="Sensitive-content classification")
    availability: Availability = Field(description="online when an original-source URL is known")
    language: str | None = Field(default=None, description="First declared language, if any")
    visible: bool = Field(default=True, description="Whether the active policy and filters admit this record")

    @property
    def identifier(self) -> str:
        return self.record.identifier


class RankResponse(BaseModel):
    """Ordered, annotated result list plus filter bookkeeping for UI messaging.

    ``hidden_count`` is always ``total_count - visible_count``; it is derived,
    never tracked separately.
    """

    request_id: str = Field(description="Unique request identifier")
    query: str = Field(description="Query the results were scored against")
    mode: ContentPolicyMode = Field(description="Effective (normalised) content policy mode")
    results: list[AnnotatedRecord] = Field(default_factory=list, description="Ranked results")
    total_count: int = Field(default=0, description="Distinct valid records before filtering")
    visible_count: int = Field(default=0, description="Records admitted by policy and filters")
    hidden_count: int = Field(default=0, description="Records hidden by policy or filters")
    skipped_count: int = Field(default=0, description="Raw documents dropped as unusable (e.g. no identifier)")
    processing_time_ms: int = Field(default=0, description="Processing time in ms")


class ClassifyResponse(BaseModel):
    """Classification-only output."""

    results: list[ClassifiedRecord] = Field(default_factory=list, description="Records in input order")
    flagged_count: int = Field(default=0, description="Number of flagged records")
    skipped_count: int = Field(default=0, description="Raw documents dropped as unusable")
