"""Year extraction from free-form date fields, identifiers, and queries."""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime
from typing import Any

from truthrank.models.record import ArchiveRecord

MIN_YEAR = 1000
MAX_YEAR = 3000

# 1000-1999, 2000-2099 or 2100, not embedded in a longer digit run
_YEAR_RE = re.compile(r"(?<!\d)(1\d{3}|20\d{2}|2100)(?!\d)")


def current_year(reference_year: int | None = None) -> int:
    """The year treated as "now" (fixed when a reference year is configured)."""
    return reference_year if reference_year is not None else datetime.now(UTC).year


def extract_year(value: Any) -> int | None:
    """First plausible four-digit year in a number or string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        year = int(value)
        return year if MIN_YEAR <= year <= MAX_YEAR else None
    if isinstance(value, str):
        match = _YEAR_RE.search(value)
        if match:
            return int(match.group(1))
    return None


def extract_query_years(query: str) -> tuple[int, ...]:
    """Distinct years mentioned in a query, in order (``1960s`` counts as 1960)."""
    if not query:
        return ()
    years: dict[int, None] = {}
    for match in _YEAR_RE.finditer(query):
        years.setdefault(int(match.group(1)), None)
    return tuple(years)


def gather_year_candidates(record: ArchiveRecord) -> list[int]:
    """Years from the record's date fields, falling back to one embedded in the identifier."""
    candidates = [
        year
        for year in (
            extract_year(record.year),
            extract_year(record.date),
            extract_year(record.publicdate),
            extract_year(record.public_date),
        )
        if year is not None
    ]
    if not candidates:
        identifier_year = extract_year(record.identifier)
        if identifier_year is not None:
            candidates.append(identifier_year)
    return candidates
