"""
Report formatting for changes by untrusted users.

Renders the filtered per-user changes as plain text:

    Edits of Alice:
    	2024-05-01T12:00:00Z edit: Some page (+12) fixed typo
    		replace lines 2-2: ['b'] -> ['c']

Diffs are supplied by the caller through a lookup function; nothing here
talks to the wiki.
"""

from typing import Callable, Dict, List, Optional, Sequence

from rcmonitor.models import ChangeRecord, DiffOp

DiffLookup = Callable[[ChangeRecord], Optional[Sequence[DiffOp]]]


def format_log_info(record: ChangeRecord) -> str:
    """Return " (type: action)" for log entries, or "" if either field is missing."""
    if record.log_type is None or record.log_action is None:
        return ""
    return f" ({record.log_type}: {record.log_action})"


def format_change(record: ChangeRecord) -> str:
    """
    Render the one-line summary of a change.

    Format: "<timestamp> <kind>[ (<logtype>: <logaction>)]: <title> (<delta>) <comment>"
    where delta is the signed byte size change, e.g. "+12", "-3" or "+0".
    """
    return (
        f"{record.timestamp} {record.kind.value}{format_log_info(record)}: "
        f"{record.title} ({record.size_delta:+d}) {record.comment}"
    )


def format_diff_op(op: DiffOp) -> str:
    """
    Render a non-equal diff operation on one line.

    Line numbers are 1-based positions in the old revision.
    """
    first = op.before_start + 1
    last = op.before_start + len(op.before_lines)
    if op.tag == "insert":
        return f"insert at line {first}: {list(op.after_lines)!r}"
    if op.tag == "delete":
        return f"delete lines {first}-{last}: {list(op.before_lines)!r}"
    if op.tag == "replace":
        return f"replace lines {first}-{last}: {list(op.before_lines)!r} -> {list(op.after_lines)!r}"
    raise ValueError(f"Cannot format diff op with tag {op.tag!r}")


def format_report(
    filtered: Dict[str, List[ChangeRecord]],
    diff_lookup: DiffLookup,
) -> str:
    """
    Build the text report for the given users.

    Users without changes are skipped. Each change gets a summary line; for
    qualifying edits, the changed runs returned by diff_lookup follow, one
    per line. A lookup returning None leaves the edit with its summary only.

    Args:
        filtered: Map of user -> changes to report
        diff_lookup: Returns the diff of a qualifying edit, or None

    Returns:
        The report text ("" if there is nothing to report)
    """
    result: List[str] = []
    for user, edits in filtered.items():
        if not edits:
            continue
        result.append(f"\nEdits of {user}:\n")
        for edit in edits:
            result.append(f"\t{format_change(edit)}\n")
            if not edit.is_qualifying:
                continue
            ops = diff_lookup(edit)
            if ops is None:
                continue
            for op in ops:
                if op.tag != "equal":
                    result.append(f"\t\t{format_diff_op(op)}\n")
    return "".join(result)


__all__ = [
    'DiffLookup',
    'format_log_info',
    'format_change',
    'format_diff_op',
    'format_report',
]
