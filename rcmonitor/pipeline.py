"""
One monitoring run: classify, filter against the watermark, diff, report.

The run is a pure function of the batch, the old watermark and the
content fetcher. Content pairs are fetched on a bounded thread pool; the
report is assembled afterwards in per-user, per-edit feed order, so the
output does not depend on fetch timing.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple

from rcmonitor.classifier import classify
from rcmonitor.config import UserPolicy
from rcmonitor.diff import render_diff
from rcmonitor.errors import MalformedRecordError, TransportError
from rcmonitor.models import ChangeRecord, DiffOp, Watermark
from rcmonitor.report import format_report
from rcmonitor.watermark import filter_by_watermark


log = logging.getLogger(__name__)

# (title, old_revid, new_revid) -> (before, after)
FetchPair = Callable[[str, int, int], Tuple[str, str]]


@dataclass
class PipelineResult:
    """
    Outcome of a run.

    Attributes:
        report: Text report ("" when there is nothing new)
        marks: Watermark to persist for the next run
        classified: Untrusted users and their changes, before filtering
        filtered: Users retained by the watermark filter
        failed: Qualifying edits whose diff could not be produced
    """
    report: str
    marks: Watermark
    classified: Dict[str, List[ChangeRecord]] = field(default_factory=dict)
    filtered: Dict[str, List[ChangeRecord]] = field(default_factory=dict)
    failed: List[ChangeRecord] = field(default_factory=list)


def qualifying_edits(filtered: Dict[str, List[ChangeRecord]]) -> List[ChangeRecord]:
    """Distinct qualifying edits of the given users, in report order."""
    edits: Dict[ChangeRecord, None] = {}
    for records in filtered.values():
        for record in records:
            if record.is_qualifying:
                edits.setdefault(record, None)
    return list(edits)


def _diff_edit(edit: ChangeRecord, fetch_pair: FetchPair) -> List[DiffOp]:
    before, after = fetch_pair(edit.title, edit.old_revid, edit.revid)
    return render_diff(before, after)


def compute_diffs(
    edits: Sequence[ChangeRecord],
    fetch_pair: FetchPair,
    max_workers: int = 1,
) -> Tuple[Dict[ChangeRecord, List[DiffOp]], List[ChangeRecord]]:
    """
    Fetch and diff every edit, at most max_workers at a time.

    A TransportError or MalformedRecordError only affects its own edit: it
    is logged and the edit is returned in the failed list.

    Returns:
        Tuple of (diffs by edit, failed edits in input order)
    """
    diffs: Dict[ChangeRecord, List[DiffOp]] = {}
    failed: List[ChangeRecord] = []
    if not edits:
        return diffs, failed

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(edits)))) as pool:
        futures = [(edit, pool.submit(_diff_edit, edit, fetch_pair)) for edit in edits]
        for edit, future in futures:
            try:
                diffs[edit] = future.result()
            except (TransportError, MalformedRecordError) as error:
                log.warning("No diff for %s (rev %d -> %d) by %s: %s",
                            edit.title, edit.old_revid, edit.revid, edit.user, error)
                failed.append(edit)
    return diffs, failed


def run_pipeline(
    batch: Sequence[ChangeRecord],
    old_marks: Watermark,
    fetch_pair: FetchPair,
    policy: UserPolicy = UserPolicy.NEW_AND_ANONYMOUS,
    max_workers: int = 1,
) -> PipelineResult:
    """
    Run the whole monitoring pipeline over one batch.

    Args:
        batch: Recent changes in feed order
        old_marks: Watermark from the previous run
        fetch_pair: Returns (before, after) text for a qualifying edit
        policy: Which users are untrusted
        max_workers: Maximum concurrent content fetches

    Returns:
        PipelineResult with the report and the marks to persist
    """
    classified = classify(batch, policy)
    filtered, new_marks = filter_by_watermark(classified, old_marks)
    log.info("%d untrusted user(s) in batch, %d with new activity.", len(classified), len(filtered))

    edits = qualifying_edits(filtered)
    diffs, failed = compute_diffs(edits, fetch_pair, max_workers)

    report = format_report(filtered, diffs.get)
    return PipelineResult(
        report=report,
        marks=new_marks,
        classified=classified,
        filtered=filtered,
        failed=failed,
    )


__all__ = [
    'FetchPair',
    'PipelineResult',
    'qualifying_edits',
    'compute_diffs',
    'run_pipeline',
]
