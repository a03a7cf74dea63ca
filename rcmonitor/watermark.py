"""
High-water mark filtering of classified changes.

Recent change ids and log ids are independent counters, so a user's
changes are compared against each mark separately. The gate is per user:
once any change of a user is new, all of that user's changes in the batch
are reported.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from rcmonitor.models import ChangeRecord, Watermark


log = logging.getLogger(__name__)


def _max_id(values: Iterable[Optional[int]]) -> Optional[int]:
    """Maximum of the non-None values, or None if there are none."""
    present = [value for value in values if value is not None]
    return max(present) if present else None


def _exceeds(value: Optional[int], mark: int) -> bool:
    return value is not None and value > mark


def filter_by_watermark(
    classified: Dict[str, List[ChangeRecord]],
    old_marks: Watermark,
) -> Tuple[Dict[str, List[ChangeRecord]], Watermark]:
    """
    Drop users whose changes have all been seen before, and advance the marks.

    A user is kept if their highest rcid is above old_marks.change_id or
    their highest log id is above old_marks.log_id. Missing ids never count
    as new, so a user with no ids at all is dropped.

    The new marks are taken over every classified user's changes, kept or
    not, and never fall below the old marks.

    Args:
        classified: Map of user -> changes, as returned by classify()
        old_marks: Marks persisted by the previous run

    Returns:
        Tuple of (filtered, new_marks)
    """
    filtered: Dict[str, List[ChangeRecord]] = {}
    new_change_id = old_marks.change_id
    new_log_id = old_marks.log_id

    for user, records in classified.items():
        max_change_id = _max_id(record.rcid for record in records)
        max_log_id = _max_id(record.log_id for record in records)

        if _exceeds(max_change_id, old_marks.change_id) or _exceeds(max_log_id, old_marks.log_id):
            filtered[user] = records
        else:
            log.debug("Skipping %s: nothing newer than %r", user, old_marks)

        if max_change_id is not None:
            new_change_id = max(new_change_id, max_change_id)
        if max_log_id is not None:
            new_log_id = max(new_log_id, max_log_id)

    return filtered, Watermark(change_id=new_change_id, log_id=new_log_id)


__all__ = ['filter_by_watermark']
