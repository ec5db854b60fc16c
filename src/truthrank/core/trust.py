"""Trust & Quality Scorer — Provenance, age, transparency, completeness and date fit.

Every sub-score is additive evidence clamped to [0, 1]. Missing or
unparseable fields simply contribute nothing.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import urlsplit

from truthrank.core.dates import gather_year_candidates
from truthrank.core.relevance import FieldTexts
from truthrank.core.text import flatten_text, has_data, has_text, split_list
from truthrank.models.query import QueryContext
from truthrank.models.record import ArchiveRecord
from truthrank.models.scoring import TrustTier

TRUSTED_COLLECTIONS = frozenset(
    {
        "smithsonian",
        "library_of_congress",
        "gutenberg",
        "naropa",
        "prelinger",
        "opensource_audio",
        "americanlibraries",
        "americana",
        "biodiversity",
        "brooklynmuseum",
        "getty",
        "moa",
        "nasa",
        "thomasjeffersonlibrary",
        "universallibrary",
        "usnationalarchives",
        "wellcomelibrary",
    }
)

INSTITUTION_KEYWORDS = (
    "library", "university", "museum", "archives", "archive", "institution", "college", "press",
    "society", "foundation", "historical", "history", "national", "government", "gov", "federal",
    "state", "city", "county", "records", "official", "academy", "research",
)

PRIMARY_SOURCE_HINTS = (
    "manuscript", "manuscripts", "diary", "diaries", "letter", "letters", "journal", "journals",
    "log", "logs", "transcript", "transcripts", "minutes", "primary source", "primary-source",
    "official record", "official records", "official report", "official reports",
    "original publication", "first-hand", "first hand",
)

TRUSTED_TLDS = (".gov", ".mil", ".edu", ".museum", ".int")
ARCHIVE_HOST = "archive.org"

TRUSTED_COLLECTION_BONUS = 0.45
INSTITUTIONAL_COLLECTION_BONUS = 0.12
INSTITUTIONAL_CREATOR_BONUS = 0.18
INSTITUTIONAL_PUBLISHER_BONUS = 0.15
INSTITUTIONAL_METADATA_PUBLISHER_BONUS = 0.12
TRUSTED_TLD_BONUS = 0.3
ARCHIVE_HOST_BONUS = 0.1
PRIMARY_SOURCE_BONUS = 0.1
CITATION_BONUS = 0.1

HISTORICAL_BASELINE = 0.35
# (minimum age in years, score), oldest first
AGE_LADDER: tuple[tuple[int, float], ...] = (
    (150, 1.0),
    (120, 0.9),
    (80, 0.75),
    (50, 0.6),
    (30, 0.45),
    (10, 0.35),
)
YOUNGEST_SCORE = 0.25

TRANSPARENCY_DEFAULT = 0.35
COMPLETENESS_DEFAULT = 0.5

# (max distance in years, score), tightest first
DATE_DISTANCE_TIERS: tuple[tuple[int, float], ...] = (
    (0, 1.0),
    (1, 0.9),
    (3, 0.8),
    (5, 0.7),
    (10, 0.55),
    (25, 0.4),
)
DATE_FLOOR = 0.25
DATE_NO_QUERY_YEAR_WITH_RECORD_YEAR = 0.6
DATE_NO_QUERY_YEAR = 0.5
DATE_MISSING_RECORD_YEAR = 0.2
FUTURE_YEAR_CAP = 0.2

HIGH_TRUST_THRESHOLD = 0.6
MEDIUM_TRUST_THRESHOLD = 0.4


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def _mentions_any(text: str, needles: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(needle in lowered for needle in needles)


def _text_of(value: Any) -> str:
    if isinstance(value, list | tuple):
        return " ".join(entry for entry in value if isinstance(entry, str))
    return value if isinstance(value, str) else ""


def collection_names(record: ArchiveRecord) -> list[str]:
    """Distinct lower-cased collection names, in record order."""
    names: dict[str, None] = {}
    for entry in split_list(record.collection):
        names.setdefault(entry.lower(), None)
    return list(names)


def is_trusted_collection(name: str) -> bool:
    return name.lower() in TRUSTED_COLLECTIONS


def original_source_url(record: ArchiveRecord) -> str | None:
    """The original-source URL, from the record or its links object."""
    if isinstance(record.original_url, str) and record.original_url.strip():
        return record.original_url.strip()
    if isinstance(record.links, dict):
        for key in ("original", "original_url", "originalUrl"):
            value = record.links.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return None


def _url_host(url: str) -> str | None:
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def score_authenticity(record: ArchiveRecord, fields: FieldTexts) -> float:
    """Provenance evidence: curated collections, institutions, trusted hosts, primary sources."""
    score = 0.0
    for name in collection_names(record):
        if name in TRUSTED_COLLECTIONS:
            score += TRUSTED_COLLECTION_BONUS
        if _mentions_any(name, INSTITUTION_KEYWORDS):
            score += INSTITUTIONAL_COLLECTION_BONUS

    if _mentions_any(_text_of(record.creator), INSTITUTION_KEYWORDS):
        score += INSTITUTIONAL_CREATOR_BONUS
    if isinstance(record.publisher, str) and _mentions_any(record.publisher, INSTITUTION_KEYWORDS):
        score += INSTITUTIONAL_PUBLISHER_BONUS
    if isinstance(record.metadata, dict):
        metadata_publisher = record.metadata.get("publisher")
        if isinstance(metadata_publisher, str) and _mentions_any(metadata_publisher, INSTITUTION_KEYWORDS):
            score += INSTITUTIONAL_METADATA_PUBLISHER_BONUS

    url = original_source_url(record)
    host = _url_host(url) if url else None
    if host:
        if host.endswith(TRUSTED_TLDS):
            score += TRUSTED_TLD_BONUS
        if ARCHIVE_HOST in host:
            score += ARCHIVE_HOST_BONUS

    if _mentions_any(f"{fields.title} {fields.metadata}", PRIMARY_SOURCE_HINTS):
        score += PRIMARY_SOURCE_BONUS

    return _clamp(score)


def score_historical_value(record: ArchiveRecord, fields: FieldTexts, now: int) -> float:
    """Age of the earliest known year mapped onto a fixed ladder."""
    candidates = gather_year_candidates(record)
    score = HISTORICAL_BASELINE
    if candidates:
        age = min(1000, max(0, now - min(candidates)))
        score = next((value for minimum, value in AGE_LADDER if age >= minimum), YOUNGEST_SCORE)

    if _mentions_any(f"{fields.description} {fields.metadata}", PRIMARY_SOURCE_HINTS):
        score += PRIMARY_SOURCE_BONUS
    return _clamp(score)


def score_transparency(record: ArchiveRecord, fields: FieldTexts) -> float:
    """Share of provenance metadata present, plus a bonus for citable descriptions."""
    checklist: tuple[tuple[Any, float], ...] = (
        (record.creator, 1.0),
        (record.description, 1.0),
        (record.publisher, 1.0),
        (record.contributor, 1.0),
        (record.language, 1.0),
        (record.subject, 1.0),
        (record.tags, 1.0),
        (record.keywords, 1.0),
        (record.source, 1.0),
        (record.references, 1.0),
    )
    total = sum(weight for _, weight in checklist)
    signals = sum(weight for value, weight in checklist if has_text(value))

    if has_text(fields.metadata):
        signals += 1.0
        total += 1.0
    if isinstance(record.links, dict):
        signals += 0.5
        total += 0.5

    score = signals / total if total > 0 else TRANSPARENCY_DEFAULT
    if _mentions_any(fields.description, ("http", "doi", "isbn")):
        score += CITATION_BONUS
    return _clamp(score)


def _first_present(*values: Any) -> Any:
    return next((value for value in values if value is not None), None)


def score_completeness(record: ArchiveRecord, fields: FieldTexts) -> float:
    """Weighted share of presentation-relevant fields that carry data."""
    checklist: tuple[tuple[Any, float], ...] = (
        (record.title, 1.0),
        (fields.description, 1.0),
        (fields.metadata, 0.8),
        (fields.fulltext, 0.6),
        (record.mediatype, 0.5),
        (record.creator, 0.5),
        (record.collection, 0.4),
        (_first_present(record.subject, record.subjects), 0.4),
        (_first_present(record.language, record.languages, record.lang), 0.35),
        (_first_present(record.publicdate, record.year, record.date), 0.4),
        (record.thumbnail, 0.3),
        (record.links, 0.25),
        (record.original_url, 0.25),
        (record.files_count, 0.2),
        (record.item_size, 0.15),
    )
    total = sum(weight for _, weight in checklist)
    if total <= 0:
        return COMPLETENESS_DEFAULT
    available = sum(weight for value, weight in checklist if has_data(value))
    return _clamp(available / total)


def _distance_score(distance: int) -> float:
    return next((score for limit, score in DATE_DISTANCE_TIERS if distance <= limit), DATE_FLOOR)


def score_date_relevance(record: ArchiveRecord, context: QueryContext, now: int) -> float:
    """How close the record's years are to any year named in the query."""
    candidates = gather_year_candidates(record)
    if not context.years:
        return DATE_NO_QUERY_YEAR_WITH_RECORD_YEAR if candidates else DATE_NO_QUERY_YEAR
    if not candidates:
        return DATE_MISSING_RECORD_YEAR

    scores = []
    for candidate in candidates:
        for target in context.years:
            score = _distance_score(abs(candidate - target))
            # a year after next year is a cataloguing error, not a match
            if candidate > now + 1:
                score = min(score, FUTURE_YEAR_CAP)
            scores.append(score)
    return _clamp(max(scores))


def determine_trust_tier(authenticity: float) -> TrustTier:
    if authenticity >= HIGH_TRUST_THRESHOLD:
        return TrustTier.HIGH
    if authenticity >= MEDIUM_TRUST_THRESHOLD:
        return TrustTier.MEDIUM
    return TrustTier.LOW
