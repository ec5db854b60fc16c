"""Content Classifier — Flags sensitive records and resolves their severity.

Evidence comes from two places:
  - Keyword hits in the record's user-visible text, per dictionary tier.
  - Upstream hints: a truthy ``nsfw`` flag, a severity string, and a list
    of matched terms.

Severity precedence (stricter wins, see ``SEVERITY_RANK``):
  explicit > mild > none

  - explicit if the keyword scan hit the explicit tier or the upstream
    severity reads as explicit
  - mild if the keyword scan hit the mild tier or the upstream severity
    reads as mild
  - mild as a conservative default for records flagged by any other evidence

Classification always recomputes from scratch; stale upstream state for a
record with no evidence is overwritten with the clean classification.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from truthrank.core.keywords import KeywordDictionary, default_keyword_dictionary
from truthrank.core.matcher import detect_keyword_matches
from truthrank.core.text import flatten_strings
from truthrank.models.classification import Classification, Severity
from truthrank.models.record import ArchiveRecord

logger = logging.getLogger(__name__)

SEVERITY_RANK: dict[Severity | None, int] = {
    None: 0,
    Severity.MILD: 1,
    Severity.EXPLICIT: 2,
}

EXPLICIT_SEVERITY_TERMS = (
    "explicit", "hardcore", "xxx", "x-rated", "porn", "pornographic", "adult", "18+", "nsfw-explicit",
)
MILD_SEVERITY_TERMS = (
    "mild", "soft", "softcore", "soft-core", "soft core", "sensitive", "nsfw", "suggestive", "moderate",
)

_TRUTHY_STRINGS = frozenset({"true", "1", "yes", "y"})


def resolve_severity(*candidates: Severity | None) -> Severity | None:
    """Return the strictest of the given severities (None when all are None)."""
    return max(candidates, key=SEVERITY_RANK.__getitem__, default=None)


def normalize_severity(value: Any) -> Severity | None:
    """Read an upstream severity string; unknown or garbled values mean no severity.

    Examples:
        >>> normalize_severity("Explicit")
        <Severity.EXPLICIT: 'explicit'>
        >>> normalize_severity("soft-core") is Severity.MILD
        True
        >>> normalize_severity("banana") is None
        True
    """
    if not isinstance(value, str):
        return None
    normalized = value.strip().lower()
    if not normalized:
        return None
    # explicit vocabulary is checked first: "nsfw-explicit" also contains "nsfw"
    if any(term in normalized for term in EXPLICIT_SEVERITY_TERMS):
        return Severity.EXPLICIT
    if any(term in normalized for term in MILD_SEVERITY_TERMS):
        return Severity.MILD
    return None


def is_truthy_flag(value: Any) -> bool:
    """True for ``True``, ``"true"``/``"1"``/``"yes"``/``"y"`` and positive numbers."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    if isinstance(value, int | float):
        return math.isfinite(value) and value > 0
    return False


def merge_matches(*lists: Iterable[Any]) -> list[str]:
    """Union of match lists, case-insensitively de-duplicated, first spelling kept."""
    seen: set[str] = set()
    merged: list[str] = []
    for entries in lists:
        for entry in entries:
            if not isinstance(entry, str) or not entry.strip():
                continue
            trimmed = entry.strip()
            key = trimmed.lower()
            if key not in seen:
                seen.add(key)
                merged.append(trimmed)
    return merged


def collect_candidate_strings(record: ArchiveRecord) -> list[str]:
    """Every user-visible string of a record, flattened in a fixed field order."""
    return flatten_strings(
        record.title,
        record.description,
        record.identifier,
        record.mediatype,
        record.creator,
        record.collection,
        record.subject,
        record.tags,
        record.keywords,
        record.topic,
        record.topics,
        record.original_url,
        record.archive_url,
        record.metadata,
        record.links,
    )


def apply_classification(record: ArchiveRecord, classification: Classification) -> ArchiveRecord:
    """Copy of ``record`` whose upstream hint fields mirror ``classification``.

    Unflagged records get ``nsfw=False`` with level and matches cleared.
    """
    raw = record.to_raw()
    if classification.flagged:
        raw["nsfw"] = True
        raw["nsfw_level"] = classification.severity.value if classification.severity else None
        raw["nsfw_matches"] = list(classification.matches) or None
    else:
        raw["nsfw"] = False
        raw["nsfw_level"] = None
        raw["nsfw_matches"] = None
    return ArchiveRecord.model_validate(raw)


class ContentClassifier:
    """Classifies records against an immutable keyword dictionary."""

    def __init__(self, keywords: KeywordDictionary | None = None) -> None:
        self._keywords = keywords if keywords is not None else default_keyword_dictionary()

    @property
    def keywords(self) -> KeywordDictionary:
        return self._keywords

    def classify(self, record: ArchiveRecord) -> Classification:
        """Classify a record from its text and its upstream hints.

        Args:
            record: The record to classify.

        Returns:
            The resolved classification; unflagged records get the clean
            classification regardless of any stale upstream flag.
        """
        classification = self._resolve(
            collect_candidate_strings(record),
            flag=record.nsfw,
            severity_hint=record.nsfw_level,
            upstream_matches=record.nsfw_matches,
        )
        if classification.flagged:
            logger.debug(
                "Record %s flagged %s (%d matches)",
                record.identifier,
                classification.severity.value if classification.severity else "-",
                len(classification.matches),
            )
        return classification

    def classify_text(self, text: str | Iterable[str]) -> Classification:
        """Classify free text (a string or a sequence of strings) by keyword evidence only."""
        values = [text] if isinstance(text, str) else [entry for entry in text if isinstance(entry, str)]
        return self._resolve(values)

    def annotate(self, record: ArchiveRecord) -> ArchiveRecord:
        """Return a copy of ``record`` with its classification written into the hint fields."""
        return apply_classification(record, self.classify(record))

    def _resolve(
        self,
        texts: list[str],
        flag: Any = None,
        severity_hint: Any = None,
        upstream_matches: Any = None,
    ) -> Classification:
        explicit_hits = detect_keyword_matches(texts, self._keywords.explicit)
        mild_hits = detect_keyword_matches(texts, self._keywords.mild)

        # a severity string in the flag field counts as a severity hint
        upstream_severity = normalize_severity(flag) or normalize_severity(severity_hint)
        upstream_terms = merge_matches(upstream_matches if isinstance(upstream_matches, list) else [])
        flagged_upstream = is_truthy_flag(flag) or upstream_severity is not None or bool(upstream_terms)

        keyword_severity = Severity.EXPLICIT if explicit_hits else Severity.MILD if mild_hits else None
        if keyword_severity is None and not flagged_upstream:
            return Classification.clean()

        severity = resolve_severity(keyword_severity, upstream_severity) or Severity.MILD
        return Classification(
            flagged=True,
            severity=severity,
            matches=merge_matches(explicit_hits, mild_hits, upstream_terms),
        )
