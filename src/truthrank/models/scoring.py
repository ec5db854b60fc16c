"""Score models — Per-record truth-ranking breakdown."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class TrustTier(str, Enum):
    """Coarse provenance confidence, derived from authenticity alone.

    - HIGH: authenticity >= 0.6
    - MEDIUM: authenticity >= 0.4
    - LOW: everything else
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ScoreBreakdown(BaseModel):
    """Independent quality sub-scores plus the blended ranking signal.

    All values are rounded to three decimals so identical inputs serialise
    identically.
    """

    relevance: float = Field(ge=0.0, le=1.0, description="Field-weighted keyword/fuzzy/proximity match")
    authenticity: float = Field(ge=0.0, le=1.0, description="Institutional and collection provenance")
    historical_value: float = Field(ge=0.0, le=1.0, description="Age-based historical value")
    transparency: float = Field(ge=0.0, le=1.0, description="Metadata richness and citability")
    completeness: float = Field(ge=0.0, le=1.0, description="Presentation-relevant field coverage")
    date_relevance: float = Field(ge=0.0, le=1.0, description="Closeness to years named in the query")
    keyword_coverage: float = Field(ge=0.0, le=1.0, description="Share of query keywords matched anywhere")
    combined_score: float = Field(ge=0.0, le=1.0, description="Convex blend of the sub-scores")
    trust_tier: TrustTier = Field(description="Provenance tier derived from authenticity")

    title_accuracy: float = Field(default=0.0, ge=0.0, le=1.0, description="Keyword coverage within the title")
    description_strength: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Keyword coverage within the description"
    )
    metadata_support: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Best keyword coverage within metadata or full text"
    )
