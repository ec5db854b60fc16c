"""Result Merger/Ranker — Identifier-keyed merging and deterministic ordering."""

from __future__ import annotations

from collections.abc import Iterable

from truthrank.models.record import ArchiveRecord
from truthrank.models.response import AnnotatedRecord


def merge_records(*batches: Iterable[ArchiveRecord]) -> list[ArchiveRecord]:
    """Merge record batches by identifier.

    A later record's fields shallow-override an earlier record's fields for
    the same identifier; fields only the earlier record has are kept. The
    result keeps first-seen order.

    Args:
        *batches: Record batches, oldest first.

    Returns:
        One merged record per distinct identifier.
    """
    merged: dict[str, ArchiveRecord] = {}
    for batch in batches:
        for record in batch:
            previous = merged.get(record.identifier)
            if previous is None:
                merged[record.identifier] = record
            else:
                merged[record.identifier] = ArchiveRecord.model_validate({**previous.to_raw(), **record.to_raw()})
    return list(merged.values())


def sort_ranked(items: Iterable[AnnotatedRecord]) -> list[AnnotatedRecord]:
    """Order scored records by combined score, ties broken by identifier.

    When no record scores above zero the scores carry no signal and the
    order is by identifier alone.
    """
    ranked = list(items)
    if not ranked or max(item.score.combined_score for item in ranked) <= 0:
        return sorted(ranked, key=lambda item: item.identifier)
    return sorted(ranked, key=lambda item: (-item.score.combined_score, item.identifier))
