"""Archive record model — The unit of work handed over by the upstream search index.

Upstream records are loosely typed: most text fields arrive either as a
string or as a list of strings, and some carry nested objects. Every field
the scorers and the classifier read is declared explicitly here; anything
else the index returns is preserved (``extra="allow"``) for display but is
never consulted by the ranking or safety logic.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Raw field values as they arrive from the index (after JSON decoding).
# bool comes first so flags stay booleans instead of being coerced to 1.
FieldValue = bool | str | int | float | list[Any] | dict[str, Any]


class ArchiveRecord(BaseModel):
    """One archival item candidate returned by the upstream search index."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    identifier: str = Field(min_length=1, description="Stable unique key, used for de-duplication")

    # Descriptive text
    title: FieldValue | None = None
    description: FieldValue | None = None
    creator: FieldValue | None = None
    collection: FieldValue | None = None
    subject: FieldValue | None = None
    subjects: FieldValue | None = None
    tags: FieldValue | None = None
    keywords: FieldValue | None = None
    topic: FieldValue | None = None
    topics: FieldValue | None = None
    publisher: FieldValue | None = None
    contributor: FieldValue | None = None
    series: FieldValue | None = None
    source: FieldValue | None = None
    references: FieldValue | None = None
    uploader: FieldValue | None = None
    submitter: FieldValue | None = None
    mediatype: FieldValue | None = None
    fulltext: FieldValue | None = None
    text: FieldValue | None = None
    metadata: FieldValue | None = None

    # Language
    language: FieldValue | None = None
    languages: FieldValue | None = None
    lang: FieldValue | None = None

    # Dates
    year: FieldValue | None = None
    date: FieldValue | None = None
    publicdate: FieldValue | None = None
    public_date: FieldValue | None = Field(
        default=None,
        validation_alias=AliasChoices("public_date", "publicDate"),
    )

    # Media and links
    thumbnail: FieldValue | None = None
    image: FieldValue | None = None
    links: FieldValue | None = None
    original_url: FieldValue | None = Field(
        default=None,
        validation_alias=AliasChoices("original_url", "originalurl", "originalUrl", "original"),
    )
    archive_url: FieldValue | None = Field(
        default=None,
        validation_alias=AliasChoices("archive_url", "archiveUrl"),
    )

    # Size and popularity
    downloads: FieldValue | None = None
    files_count: FieldValue | None = None
    item_size: FieldValue | None = None

    # Classification hints the upstream source may already provide
    nsfw: Any = Field(default=None, description="Upstream flag (bool, 'true', 1) or a severity string")
    nsfw_level: Any = Field(
        default=None,
        validation_alias=AliasChoices("nsfw_level", "nsfwLevel", "nsfw_severity", "nsfwSeverity"),
    )
    nsfw_matches: Any = Field(
        default=None,
        validation_alias=AliasChoices("nsfw_matches", "nsfwMatches", "nsfw_tags", "nsfwTags"),
    )

    @field_validator("identifier", mode="before")
    @classmethod
    def _coerce_identifier(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return v
        if isinstance(v, int | float):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    def to_raw(self) -> dict[str, Any]:
        """Return the fields the upstream source actually supplied (plus preserved extras)."""
        return self.model_dump(exclude_unset=True)
