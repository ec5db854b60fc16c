"""Text normalisation shared by the scorers and the content classifier.

Nothing in here raises: any value that is not text-like degrades to an
empty string or an empty list.
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

MAX_FLATTEN_DEPTH = 6

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
# \W is Unicode-aware; underscore is a word character, so strip it explicitly
_NON_ALNUM_RE = re.compile(r"[\W_]+")


def strip_tags(text: str) -> str:
    """Replace HTML-like tags with a space."""
    return _TAG_RE.sub(" ", text)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_diacritics(text: str) -> str:
    """Remove combining marks after NFD decomposition (``café`` → ``cafe``)."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def clean_display_text(text: str) -> str:
    """Tag-free, whitespace-normalised text that keeps case and punctuation."""
    return normalize_whitespace(strip_tags(text))


def normalize_for_matching(text: Any) -> str:
    """Normalise text for matching: no tags, lower case, no diacritics, letters and digits only.

    Examples:
        >>> normalize_for_matching("<b>Apollo 11:</b>  Mission Report")
        'apollo 11 mission report'
        >>> normalize_for_matching("Café—Société")
        'cafe societe'
    """
    if not isinstance(text, str) or not text:
        return ""
    lowered = strip_diacritics(strip_tags(text).lower())
    return normalize_whitespace(_NON_ALNUM_RE.sub(" ", lowered))


def tokenize(text: Any) -> list[str]:
    """Split normalised text into word tokens."""
    normalized = normalize_for_matching(text)
    return normalized.split(" ") if normalized else []


def _format_number(value: int | float) -> str | None:
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return str(int(value))
    return str(value)


def _flatten(value: Any, out: list[str], seen: set[int], depth: int) -> None:
    if value is None or isinstance(value, bool):
        return
    if isinstance(value, str):
        cleaned = clean_display_text(value)
        if cleaned:
            out.append(cleaned)
        return
    if isinstance(value, int | float):
        formatted = _format_number(value)
        if formatted is not None:
            out.append(formatted)
        return
    if depth >= MAX_FLATTEN_DEPTH:
        return
    if isinstance(value, list | tuple | dict):
        marker = id(value)
        if marker in seen:
            return
        seen.add(marker)
        entries = value.values() if isinstance(value, dict) else value
        for entry in entries:
            _flatten(entry, out, seen, depth + 1)


def flatten_strings(*values: Any) -> list[str]:
    """Flatten field values depth-first into a list of cleaned strings.

    Strings are tag-stripped and whitespace-normalised, numbers are
    stringified, booleans and ``None`` are dropped, and lists / dicts are
    walked up to :data:`MAX_FLATTEN_DEPTH` levels deep. Containers seen
    before are skipped so self-referencing input terminates.
    """
    out: list[str] = []
    seen: set[int] = set()
    for value in values:
        _flatten(value, out, seen, 0)
    return out


def flatten_text(*values: Any) -> str:
    """Space-joined form of :func:`flatten_strings`."""
    return normalize_whitespace(" ".join(flatten_strings(*values)))


def count_occurrences(haystack: str, needle: str) -> int:
    """Count non-overlapping occurrences of ``needle`` in ``haystack``."""
    if not haystack or not needle:
        return 0
    return haystack.count(needle)


def has_text(value: Any) -> bool:
    """True for a non-blank string or a list holding at least one non-blank string."""
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, list | tuple):
        return any(isinstance(entry, str) and entry.strip() for entry in value)
    return False


def has_data(value: Any) -> bool:
    """True for any non-empty structured value (positive numbers, true flags, non-empty containers)."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, int | float):
        return math.isfinite(value) and value > 0
    if isinstance(value, list | tuple):
        return any(has_data(entry) for entry in value)
    if isinstance(value, dict):
        return bool(value)
    return False


def split_list(value: Any) -> list[str]:
    """Turn a list or a ``,``/``;``/newline separated string into trimmed entries."""
    if isinstance(value, list | tuple):
        return [entry.strip() for entry in value if isinstance(entry, str) and entry.strip()]
    if isinstance(value, str):
        return [entry.strip() for entry in re.split(r"[,;\n]+", value) if entry.strip()]
    return []
