"""Policy Filter — Content-visibility predicate over classified records.

Unknown mode strings normalise to ``safe``: a safety filter never fails open.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from truthrank.models.classification import Classification, ContentPolicyMode, Severity

T = TypeVar("T")

MODE_ALIASES: dict[str, ContentPolicyMode] = {
    "safe": ContentPolicyMode.SAFE,
    "moderate": ContentPolicyMode.MODERATE,
    "unrestricted": ContentPolicyMode.UNRESTRICTED,
    "off": ContentPolicyMode.UNRESTRICTED,
    "none": ContentPolicyMode.UNRESTRICTED,
    "disabled": ContentPolicyMode.UNRESTRICTED,
    "no_filter": ContentPolicyMode.UNRESTRICTED,
    "explicit-only": ContentPolicyMode.EXPLICIT_ONLY,
    "nsfw-only": ContentPolicyMode.EXPLICIT_ONLY,
    "only-nsfw": ContentPolicyMode.EXPLICIT_ONLY,
    "only_nsfw": ContentPolicyMode.EXPLICIT_ONLY,
    "only": ContentPolicyMode.EXPLICIT_ONLY,
    "nsfw": ContentPolicyMode.EXPLICIT_ONLY,
    "adults": ContentPolicyMode.EXPLICIT_ONLY,
}


def normalize_policy_mode(value: Any, default: ContentPolicyMode = ContentPolicyMode.SAFE) -> ContentPolicyMode:
    """Map a caller-supplied mode (any accepted spelling) to a policy mode.

    Args:
        value: Mode string, ContentPolicyMode, or None.
        default: Mode used when ``value`` is None or blank.

    Returns:
        The matching mode; ``SAFE`` for anything unrecognised.
    """
    if isinstance(value, ContentPolicyMode):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if not isinstance(value, str):
        return ContentPolicyMode.SAFE
    return MODE_ALIASES.get(value.strip().lower(), ContentPolicyMode.SAFE)


def is_visible(classification: Classification, mode: ContentPolicyMode) -> bool:
    """Whether a record with this classification is shown under ``mode``."""
    if mode is ContentPolicyMode.UNRESTRICTED:
        return True
    if mode is ContentPolicyMode.EXPLICIT_ONLY:
        return classification.flagged
    if mode is ContentPolicyMode.MODERATE:
        return classification.severity is not Severity.EXPLICIT
    return not classification.flagged


def filter_visible(
    items: Iterable[T],
    mode: ContentPolicyMode,
    classification_of: Callable[[T], Classification],
) -> list[T]:
    """Keep the items whose classification is visible under ``mode``, in order."""
    return [item for item in items if is_visible(classification_of(item), mode)]
