"""Query and ranking request models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class QueryContext(BaseModel):
    """A query string and everything derived from it once per ranking call."""

    model_config = {"frozen": True}

    original: str = Field(default="", description="Trimmed query as supplied by the caller")
    normalized: str = Field(default="", description="Lower-cased, tag- and punctuation-free form")
    keywords: tuple[str, ...] = Field(default=(), description="Ordered, de-duplicated keywords")
    years: tuple[int, ...] = Field(default=(), description="Four-digit years mentioned in the query")

    @property
    def is_empty(self) -> bool:
        """True when the query carries no matchable text at all."""
        return not self.normalized and not self.keywords


class ResultFilters(BaseModel):
    """Optional post-scoring filters (all case-insensitive, all optional)."""

    language: str | None = Field(default=None, description="Language code or name (prefix/substring match)")
    source_trust: str | None = Field(default=None, description="high | medium | low | any (with aliases)")
    availability: str | None = Field(default=None, description="online | archived-only | any")
    collection: str | None = Field(default=None, description="Comma-separated collections (any-of)")
    subject: str | None = Field(default=None, description="Comma-separated subjects (any-of)")
    uploader: str | None = Field(default=None, description="Uploader / submitter / creator substring")


class RankRequest(BaseModel):
    """Rank one page of raw documents for display."""

    query: str = Field(default="", description="Free-text search query")
    documents: list[Any] = Field(
        default_factory=list, description="Raw records from the search index (unusable entries are skipped and counted)"
    )
    mode: str | None = Field(
        default=None,
        description="Content policy mode (safe, moderate, unrestricted, explicit-only). Unknown values mean safe",
    )
    filters: ResultFilters = Field(default_factory=ResultFilters, description="Advanced result filters")
    include_hidden: bool = Field(
        default=False,
        description="Return hidden records too (marked visible=false) so the UI can explain the filter",
    )


class MergeRequest(BaseModel):
    """Merge a newly fetched page into a previously accumulated result set."""

    query: str = Field(default="", description="Current free-text search query")
    existing: list[Any] = Field(
        default_factory=list, description="Previously accumulated raw records (unusable entries are skipped and counted)"
    )
    incoming: list[Any] = Field(
        default_factory=list, description="Newly fetched page of raw records (unusable entries are skipped and counted)"
    )
    mode: str | None = Field(default=None, description="Content policy mode")
    filters: ResultFilters = Field(default_factory=ResultFilters, description="Advanced result filters")
    include_hidden: bool = Field(default=False, description="Return hidden records too")


class ClassifyRequest(BaseModel):
    """Classify raw documents without scoring or filtering them."""

    documents: list[Any] = Field(
        default_factory=list, description="Raw records from the search index (unusable entries are skipped and counted)"
    )
