"""Relevance Scorer — Field-weighted keyword, fuzzy and proximity matching.

A record is reduced to four logical text fields (title, description,
metadata aggregate, full text), each with its own weight. Matches add to a
raw accumulator which is saturated with ``1 - e^-raw`` so strong documents
stay distinguishable without hitting a hard cap.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from truthrank.core.dates import extract_query_years
from truthrank.core.fuzzy import FieldProfile, fuzzy_match_bonus
from truthrank.core.text import count_occurrences, flatten_text, normalize_for_matching
from truthrank.models.query import QueryContext
from truthrank.models.record import ArchiveRecord

DEFAULT_MAX_KEYWORDS = 24
DEFAULT_FUZZY_DAMPING = 0.6
REPEAT_BONUS = 0.05
MIN_KEYWORD_LENGTH = 3

FIELD_PROFILES: dict[str, FieldProfile] = {
    "title": FieldProfile(weight=1.0, keyword_base=0.7, fuzzy_base=0.3),
    "description": FieldProfile(weight=0.85, keyword_base=0.55, fuzzy_base=0.25),
    "metadata": FieldProfile(weight=0.6, keyword_base=0.45, fuzzy_base=0.22),
    "fulltext": FieldProfile(weight=0.4, keyword_base=0.3, fuzzy_base=0.18),
}

# (max token distance, bonus before field weighting), tightest first
PROXIMITY_TIERS: tuple[tuple[int, float], ...] = ((3, 0.2), (6, 0.12), (10, 0.08))

STOP_WORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "am", "an", "and", "any", "are",
        "as", "at", "be", "because", "been", "before", "being", "below", "between", "both", "but",
        "by", "can", "could", "did", "do", "does", "doing", "down", "during", "each", "few", "for",
        "from", "further", "had", "has", "have", "having", "he", "her", "here", "hers", "herself",
        "him", "himself", "his", "how", "i", "if", "in", "into", "is", "it", "its", "itself", "just",
        "me", "more", "most", "my", "myself", "no", "nor", "not", "now", "of", "off", "on", "once",
        "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same", "she",
        "should", "so", "some", "such", "than", "that", "the", "their", "theirs", "them",
        "themselves", "then", "there", "these", "they", "this", "those", "through", "to", "too",
        "under", "until", "up", "very", "was", "we", "were", "what", "when", "where", "which",
        "while", "who", "whom", "why", "with", "would", "you", "your", "yours", "yourself",
        "yourselves",
    }
)


class FieldTexts(NamedTuple):
    """Display-cleaned text of the four logical fields of a record."""

    title: str
    description: str
    metadata: str
    fulltext: str


class RelevanceAnalysis(NamedTuple):
    """Saturated relevance plus the coverage figures reported alongside it."""

    score: float
    keyword_coverage: float
    title_accuracy: float
    description_strength: float
    metadata_support: float


def build_field_texts(record: ArchiveRecord) -> FieldTexts:
    """Collect the four logical text fields of a record.

    The title falls back to the identifier; the metadata aggregate covers
    the descriptive catalogue fields plus the identifier itself.
    """
    title = flatten_text(record.title) or record.identifier
    return FieldTexts(
        title=title,
        description=flatten_text(record.description),
        metadata=flatten_text(
            record.creator,
            record.collection,
            record.language,
            record.subject,
            record.tags,
            record.keywords,
            record.topic,
            record.topics,
            record.publisher,
            record.contributor,
            record.series,
            record.identifier,
        ),
        fulltext=flatten_text(record.fulltext, record.text),
    )


def extract_keywords(normalized_query: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> tuple[str, ...]:
    """Ordered, de-duplicated query keywords.

    Stop-words and tokens shorter than three characters are dropped unless
    that would leave nothing, in which case every token is kept.
    """
    tokens = normalized_query.split(" ") if normalized_query else []
    if not tokens:
        return ()
    filtered = [token for token in tokens if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS]
    keywords: dict[str, None] = {}
    for token in filtered or tokens:
        if len(keywords) >= max_keywords:
            break
        keywords.setdefault(token, None)
    return tuple(keywords)


def build_query_context(query: str | None, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> QueryContext:
    """Derive the normalised form, keywords and years of a query once per call."""
    original = query.strip() if isinstance(query, str) else ""
    normalized = normalize_for_matching(original)
    return QueryContext(
        original=original,
        normalized=normalized,
        keywords=extract_keywords(normalized, max_keywords),
        years=extract_query_years(original),
    )


def proximity_bonus(words: list[str], keywords: tuple[str, ...], weight: float) -> float:
    """Bonus for two distinct keywords appearing close together in one field."""
    if len(keywords) < 2 or not words:
        return 0.0

    positions: list[tuple[str, int]] = [
        (keyword, index) for index, word in enumerate(words) for keyword in keywords if keyword in word
    ]
    best: int | None = None
    for i, (first_keyword, first_index) in enumerate(positions):
        for second_keyword, second_index in positions[i + 1 :]:
            if first_keyword == second_keyword:
                continue
            distance = abs(first_index - second_index)
            if best is None or distance < best:
                best = distance

    if best is None:
        return 0.0
    for max_distance, bonus in PROXIMITY_TIERS:
        if best <= max_distance:
            return bonus * weight
    return 0.0


def compute_relevance(
    fields: FieldTexts,
    context: QueryContext,
    fuzzy_damping: float = DEFAULT_FUZZY_DAMPING,
) -> RelevanceAnalysis:
    """Score how well the record's text fields match the query.

    Args:
        fields: Text of the record's logical fields.
        context: Pre-computed query context.
        fuzzy_damping: Weight (0-1) of fuzzy-only matches in the per-field
            coverage figures; direct matches always count fully.

    Returns:
        The saturated score, overall keyword coverage, and per-field coverage.
    """
    keywords = context.keywords
    keyword_count = len(keywords)
    raw_score = 0.0
    matched: set[str] = set()
    coverage: dict[str, float] = {}

    for name, text in fields._asdict().items():
        normalized = normalize_for_matching(text)
        if not normalized:
            continue
        profile = FIELD_PROFILES[name]
        words = normalized.split(" ")

        if context.normalized and context.normalized in normalized:
            raw_score += profile.weight

        direct_matches = 0
        fuzzy_total = 0.0
        for keyword in keywords:
            occurrences = count_occurrences(normalized, keyword)
            if occurrences:
                raw_score += occurrences * profile.keyword_base * profile.weight
                raw_score += (occurrences - 1) * REPEAT_BONUS * profile.weight
                matched.add(keyword)
                direct_matches += 1
                continue
            bonus = fuzzy_match_bonus(words, keyword, profile)
            if bonus > 0:
                raw_score += bonus
                matched.add(keyword)
                fuzzy_total += bonus

        raw_score += proximity_bonus(words, keywords, profile.weight)

        if keyword_count:
            fuzzy_share = min(1.0, fuzzy_total / (profile.fuzzy_base * profile.weight)) if fuzzy_total else 0.0
            coverage[name] = min(1.0, (direct_matches + fuzzy_share * fuzzy_damping) / keyword_count)

    return RelevanceAnalysis(
        score=min(1.0, max(0.0, 1 - math.exp(-raw_score))),
        keyword_coverage=len(matched) / keyword_count if keyword_count else 0.0,
        title_accuracy=coverage.get("title", 0.0),
        description_strength=coverage.get("description", 0.0),
        metadata_support=max(coverage.get("metadata", 0.0), coverage.get("fulltext", 0.0)),
    )
