"""
Value types for recent changes, revisions, watermarks and diff operations.

All models are frozen dataclasses. ChangeRecord and RevisionContent are
built from MediaWiki API dicts by the transport layer and consumed
read-only by the classifier, the watermark filter and the report.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from rcmonitor.constants import NO_MARK
from rcmonitor.errors import MalformedRecordError
from rcmonitor.timestamp import to_iso8601


class ChangeKind(str, Enum):
    """Value of the "type" field of a recent change."""
    EDIT = "edit"
    EXTERNAL = "external"
    NEW = "new"
    LOG = "log"
    CATEGORIZE = "categorize"


def _optional_int(value) -> Optional[int]:
    if value is None:
        return None
    return int(value)


@dataclass(frozen=True)
class ChangeRecord:
    """
    One entry of the recent changes feed.

    Attributes:
        rcid: Recent change id, or None if the API omitted it
        kind: Change type (edit, external, new, log, categorize)
        namespace: Namespace number of the page
        title: Full page title including namespace prefix
        page_id: Page id
        revid: New revision id (0 for log entries)
        old_revid: Previous revision id (0 when the page was just created)
        user: Acting user name, or an IP address for anonymous edits
        user_id: Acting user id; 0 for anonymous authors, None if hidden
        old_len: Page size in bytes before the change
        new_len: Page size in bytes after the change
        timestamp: ISO 8601 timestamp ("YYYY-MM-DDTHH:MM:SSZ")
        comment: Edit summary or log reason
        log_id: Log id, present only for log entries
        log_type: Log type (e.g. "newusers", "block"), log entries only
        log_action: Log action (e.g. "create"), log entries only
    """
    rcid: Optional[int]
    kind: ChangeKind
    namespace: int
    title: str
    page_id: int
    revid: int
    old_revid: int
    user: str
    user_id: Optional[int]
    old_len: int
    new_len: int
    timestamp: str
    comment: str
    log_id: Optional[int] = None
    log_type: Optional[str] = None
    log_action: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id == 0

    @property
    def is_qualifying(self) -> bool:
        """True if the change has a before and after revision to diff."""
        return self.old_revid > 0 and self.revid > 0

    @property
    def size_delta(self) -> int:
        return self.new_len - self.old_len

    @classmethod
    def from_api(cls, item: dict) -> "ChangeRecord":
        """
        Build a record from a list=recentchanges item.

        Args:
            item: One element of query.recentchanges

        Returns:
            ChangeRecord instance

        Raises:
            MalformedRecordError: If the type is missing or unknown, or a
                numeric/timestamp field cannot be parsed
        """
        raw_kind = item.get("type")
        try:
            kind = ChangeKind(raw_kind)
        except ValueError:
            raise MalformedRecordError(f"Unknown change type {raw_kind!r} in rcid={item.get('rcid')}") from None

        try:
            return cls(
                rcid=_optional_int(item.get("rcid")),
                kind=kind,
                namespace=int(item.get("ns") or 0),
                title=item.get("title") or "",
                page_id=int(item.get("pageid") or 0),
                revid=int(item.get("revid") or 0),
                old_revid=int(item.get("old_revid") or 0),
                user=item.get("user") or "",
                user_id=_optional_int(item.get("userid")),
                old_len=int(item.get("oldlen") or 0),
                new_len=int(item.get("newlen") or 0),
                timestamp=to_iso8601(item.get("timestamp")),
                comment=item.get("comment") or "",
                log_id=_optional_int(item.get("logid")),
                log_type=item.get("logtype"),
                log_action=item.get("logaction"),
            )
        except (TypeError, ValueError) as error:
            raise MalformedRecordError(f"Cannot parse recent change rcid={item.get('rcid')}: {error}") from error


@dataclass(frozen=True)
class RevisionContent:
    """A single revision's text with its metadata."""
    revid: int
    content: str
    user: str = ""
    timestamp: str = ""
    comment: str = ""

    @classmethod
    def from_api(cls, revision: dict) -> "RevisionContent":
        """
        Build from a prop=revisions element (formatversion=2, rvslots=main).

        Raises:
            MalformedRecordError: If the revision text is hidden or missing
        """
        slot = (revision.get("slots") or {}).get("main") or {}
        content = slot.get("content")
        if content is None:
            # Older servers without slots put the text directly on the revision
            content = revision.get("content", revision.get("*"))
        if content is None:
            raise MalformedRecordError(f"Revision {revision.get('revid')} has no readable content")
        return cls(
            revid=int(revision.get("revid") or 0),
            content=content,
            user=revision.get("user") or "",
            timestamp=to_iso8601(revision.get("timestamp")),
            comment=revision.get("comment") or "",
        )


@dataclass(frozen=True)
class Watermark:
    """Highest recent change id and log id already reported for a wiki."""
    change_id: int = NO_MARK
    log_id: int = NO_MARK


@dataclass(frozen=True)
class DiffOp:
    """
    One opcode of a line diff.

    before_start/after_start are 0-based indices into the split line
    sequences; before_lines/after_lines are the lines covered by the op.
    """
    tag: str
    before_start: int
    before_lines: Tuple[str, ...]
    after_start: int
    after_lines: Tuple[str, ...]


__all__ = [
    'ChangeKind',
    'ChangeRecord',
    'RevisionContent',
    'Watermark',
    'DiffOp',
]
