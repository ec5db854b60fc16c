"""Fuzzy Matcher — Short-range edit-distance matching for typos and plurals.

Only near misses count: an edit distance of 1 or 2 whose closeness ratio
``1 - distance / max(len(word), len(keyword))`` is above 0.35. Exact
matches are scored elsewhere and are ignored here.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

MAX_EDIT_DISTANCE = 2
MIN_CLOSENESS = 0.35
MIN_FUZZY_BONUS = 0.1


class FieldProfile(NamedTuple):
    """Weighting of one logical text field of a record."""

    weight: float
    keyword_base: float
    fuzzy_base: float


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, each costing 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def closeness(word: str, keyword: str, distance: int) -> float:
    longest = max(len(word), len(keyword)) or 1
    return 1 - distance / longest


def fuzzy_match_bonus(words: Iterable[str], keyword: str, profile: FieldProfile) -> float:
    """Best fuzzy bonus for ``keyword`` among ``words`` of one field.

    Args:
        words: Normalised tokens of the field.
        keyword: Normalised query keyword.
        profile: Weighting of the field the words come from.

    Returns:
        ``max(0.1, closeness * fuzzy_base) * weight`` for the closest
        acceptable word, or 0.0 when no word is a near miss.
    """
    if not keyword:
        return 0.0

    best = 0.0
    for word in words:
        # cheap length pre-check: distance is at least the length difference
        if word == keyword or abs(len(word) - len(keyword)) > MAX_EDIT_DISTANCE:
            continue
        distance = levenshtein_distance(word, keyword)
        if distance == 0 or distance > MAX_EDIT_DISTANCE:
            continue
        ratio = closeness(word, keyword, distance)
        if ratio <= MIN_CLOSENESS:
            continue
        bonus = max(MIN_FUZZY_BONUS, ratio * profile.fuzzy_base) * profile.weight
        if bonus > best:
            best = bonus
    return best
