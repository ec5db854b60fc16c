"""Advanced result filters — Language, trust, availability, collection, subject, uploader.

All filters are optional and case-insensitive. Unrecognised trust or
availability values disable that filter instead of hiding everything.
"""

from __future__ import annotations

import re
from typing import Any

from truthrank.core.text import split_list
from truthrank.core.trust import is_trusted_collection, original_source_url
from truthrank.models.query import ResultFilters
from truthrank.models.record import ArchiveRecord
from truthrank.models.response import AnnotatedRecord, Availability
from truthrank.models.scoring import TrustTier

ANY = "any"

TRUST_ALIASES: dict[str, TrustTier | str] = {
    "any": ANY,
    "all": ANY,
    "high": TrustTier.HIGH,
    "trusted": TrustTier.HIGH,
    "curated": TrustTier.HIGH,
    "medium": TrustTier.MEDIUM,
    "standard": TrustTier.MEDIUM,
    "default": TrustTier.MEDIUM,
    "low": TrustTier.LOW,
    "community": TrustTier.LOW,
    "experimental": TrustTier.LOW,
}

AVAILABILITY_ALIASES: dict[str, Availability | str] = {
    "any": ANY,
    "all": ANY,
    "online": Availability.ONLINE,
    "live": Availability.ONLINE,
    "archived-only": Availability.ARCHIVED_ONLY,
    "archived": Availability.ARCHIVED_ONLY,
    "archive": Availability.ARCHIVED_ONLY,
}


def _lookup(aliases: dict[str, Any], value: str | None) -> Any:
    if not value or not value.strip():
        return None
    return aliases.get(value.strip().lower())


def _filter_values(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [entry.strip().lower() for entry in re.split(r"[,\n]+", raw) if entry.strip()]


def _string_values(value: Any) -> list[str]:
    """Lower-cased, trimmed strings of a single string or a list field (no splitting)."""
    if isinstance(value, str):
        return [value.strip().lower()] if value.strip() else []
    if isinstance(value, list):
        return [entry.strip().lower() for entry in value if isinstance(entry, str) and entry.strip()]
    return []


def record_languages(record: ArchiveRecord) -> list[str]:
    """Lower-cased declared languages from ``language``, ``languages`` or ``lang`` (first one present)."""
    for candidate in (record.language, record.languages, record.lang):
        if candidate is not None:
            return _string_values(candidate)
    return []


def determine_availability(record: ArchiveRecord) -> Availability:
    """``online`` when an original-source URL is known, else ``archived-only``."""
    return Availability.ONLINE if original_source_url(record) else Availability.ARCHIVED_ONLY


def matches_filters(item: AnnotatedRecord, filters: ResultFilters) -> bool:
    """Check an annotated record against the advanced filters.

    Args:
        item: Scored and classified record.
        filters: Caller-supplied filters; unset fields do not filter.

    Returns:
        True when the record passes every active filter.
    """
    record = item.record

    language = (filters.language or "").strip().lower()
    if language:
        if not any(language in entry for entry in record_languages(record)):
            return False

    trust = _lookup(TRUST_ALIASES, filters.source_trust)
    if trust is not None and trust != ANY:
        if item.score.trust_tier != trust:
            return False
        if trust == TrustTier.HIGH and not any(is_trusted_collection(name) for name in split_list(record.collection)):
            return False

    availability = _lookup(AVAILABILITY_ALIASES, filters.availability)
    if availability is not None and availability != ANY and item.availability != availability:
        return False

    collections = _filter_values(filters.collection)
    if collections:
        record_collections = _string_values(record.collection)
        if not any(value in record_collections for value in collections):
            return False

    subjects = _filter_values(filters.subject)
    if subjects:
        subject = record.subject if record.subject is not None else record.subjects
        record_subjects = [entry.lower() for entry in split_list(subject)]
        if not any(value in record_subjects for value in subjects):
            return False

    uploader = (filters.uploader or "").strip().lower()
    if uploader:
        candidate = next(
            (value for value in (record.uploader, record.submitter, record.creator) if value is not None),
            None,
        )
        uploaders = _string_values(candidate)
        if not any(uploader in entry for entry in uploaders):
            return False

    return True
