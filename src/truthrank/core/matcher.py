"""Token-aware keyword matching for content classification.

Keywords match anywhere in the tokenised text, including inside a
longer token: ``porn`` matches ``pornographic`` and ``softporn``, and
``sex tape`` matches ``sex tapes``. Phrases never match across unrelated
words (``sex education tape`` does not match ``sex tape``).

Two stems are too ambiguous for substring matching and are checked token
by token with dedicated rules: ``anal`` (analysis, analogue, analgesic ...)
and ``cum`` (cumulative, cumin, summa cum laude ...).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from truthrank.core.text import tokenize

_ANAL_SAFE_SUFFIXES = (
    "ysis", "yses", "yse", "yze", "yzed", "yzes", "yzing", "yzer", "yzers",
    "ytic", "ytics", "ytical", "ytically", "yst", "ysts",
    "og", "ogs", "ogue", "ogues", "ogy", "ogies", "ogic", "ogical", "ogist", "ogists", "ogous",
    "emma", "emmas", "ects", "ecta", "ectic",
    "gesic", "gesics", "gesia", "gesias", "gesis", "geses", "ges", "getic", "getics",
    "glyph", "glyphs",
)

_ANAL_EXPLICIT_SUFFIXES = (
    "sex", "play", "plug", "porn", "fuck", "cream", "gape", "gaping", "toy", "vid", "xxx",
    "queen", "whore", "slut", "mania", "maniac", "bead", "fist", "train",
    "penetrat", "lick", "job",
)

_ANAL_EXPLICIT_NEXT = frozenset(
    {
        "sex", "sexual", "sexually", "porn", "porno", "pornography", "video", "videos", "vid", "vids",
        "xxx", "content", "scene", "scenes", "clip", "clips", "toy", "toys", "plug", "plugs",
        "play", "player", "players", "fetish", "material", "photo", "photos", "picture", "pictures",
        "image", "images", "job", "jobs", "creampie", "creampies", "gape", "gaping", "dp",
        "penetration", "penetrations", "penetrate", "penetrating", "penetrative", "fist", "fisting",
        "stories", "story", "act", "acts", "action", "actions", "collection", "collections",
    }
)

_CUM_SAFE_TOKENS = frozenset({"cumin", "cummings", "cumming", "cummer", "cummerbund", "cummerbunds"})

_CUM_SAFE_SUFFIXES = ("ul", "ber", "bia", "brous", "quat")

_CUM_EXPLICIT_SUFFIXES = (
    "shot", "slut", "dump", "tribute", "drip", "soak", "load", "play", "stain", "bath", "bucket",
    "blast", "stream", "swap", "face", "facial", "guzzl", "cover", "coat", "paint", "spray",
)

_CUM_SAFE_NEXT = frozenset({"laude", "grano"})


def _match_anal(token: str, next_token: str | None) -> bool:
    if token == "anal":
        # bare "anal" counts only in explicit context or as the last word
        return next_token is None or next_token in _ANAL_EXPLICIT_NEXT
    if not token.startswith("anal"):
        return False
    remainder = token[4:]
    if remainder.startswith(_ANAL_EXPLICIT_SUFFIXES):
        return True
    if remainder.startswith(_ANAL_SAFE_SUFFIXES):
        return False
    if remainder[0].isdigit():
        return True
    return len(remainder) <= 2


def _match_cum(token: str, next_token: str | None) -> bool:
    if token == "cum":
        return next_token not in _CUM_SAFE_NEXT
    if not token.startswith("cum") or token in _CUM_SAFE_TOKENS:
        return False
    remainder = token[3:]
    if remainder.startswith(_CUM_EXPLICIT_SUFFIXES):
        return True
    if remainder.startswith(_CUM_SAFE_SUFFIXES):
        return False
    if remainder[0].isdigit():
        return True
    return len(remainder) <= 2


_GUARDED_STEMS = {"anal": _match_anal, "cum": _match_cum}


def tokens_match_keyword(tokens: Sequence[str], keyword: str) -> bool:
    """Check whether a keyword occurs in an already tokenised text."""
    keyword_tokens = tokenize(keyword)
    if not keyword_tokens or not tokens:
        return False

    target = " ".join(keyword_tokens)
    guard = _GUARDED_STEMS.get(target)
    if guard is None:
        return target in " ".join(tokens)

    for index, token in enumerate(tokens):
        next_token = tokens[index + 1] if index + 1 < len(tokens) else None
        if guard(token, next_token):
            return True
    return False


def keyword_matches(text: str, keyword: str) -> bool:
    """Check whether ``keyword`` occurs in ``text``."""
    return tokens_match_keyword(tokenize(text), keyword)


def detect_keyword_matches(texts: Iterable[str], keywords: Sequence[str]) -> list[str]:
    """Return the keywords (in dictionary order) found in any of ``texts``."""
    token_lists = [tokens for tokens in (tokenize(text) for text in texts) if tokens]
    if not token_lists or not keywords:
        return []
    return [keyword for keyword in keywords if any(tokens_match_keyword(tokens, keyword) for tokens in token_lists)]
