"""
MediaWiki API access for rcmonitor.

Wraps an mwclient.Site to fetch one batch of recent changes and the
before/after text of an edit. All network and API failures surface as
TransportError; responses that break the record invariants surface as
MalformedRecordError.
"""

import logging
from typing import List, Tuple

import mwclient
import requests

from rcmonitor.config import MonitorConfig
from rcmonitor.constants import DEFAULT_BATCH_SIZE, RC_PROPS, REV_PROPS
from rcmonitor.errors import MalformedRecordError, TransportError
from rcmonitor.models import ChangeRecord, RevisionContent


log = logging.getLogger(__name__)

# Failures raised by mwclient itself or by the requests session underneath it
TRANSPORT_EXCEPTIONS = (
    mwclient.errors.MwClientError,
    requests.exceptions.RequestException,
    ValueError,
)


def connect_site(config: MonitorConfig) -> mwclient.Site:
    """
    Open an anonymous connection to the configured wiki.

    Raises:
        TransportError: If the site cannot be reached or initialized
    """
    try:
        return mwclient.Site(
            config.api_host,
            scheme=config.scheme,
            path=config.api_path,
            clients_useragent=config.user_agent,
        )
    except TRANSPORT_EXCEPTIONS as error:
        raise TransportError(f"Cannot connect to {config.api_host}: {error}") from error


class WikiTransport:
    """
    Read-only access to the recent changes feed and revision text of one wiki.

    Args:
        site: Connected mwclient Site
        batch_size: Number of recent changes fetched per call
    """

    def __init__(self, site: mwclient.Site, batch_size: int = DEFAULT_BATCH_SIZE):
        self.site = site
        self.batch_size = batch_size

    def _query(self, **kwargs) -> dict:
        try:
            response = self.site.api("query", **kwargs)
        except TRANSPORT_EXCEPTIONS as error:
            raise TransportError(f"API query failed: {error}") from error
        if not isinstance(response, dict):
            raise TransportError(f"Unexpected API response: {response!r}")
        return response.get("query") or {}

    def fetch_recent_changes(self) -> List[ChangeRecord]:
        """
        Fetch the latest batch of recent changes, newest first as the API returns them.

        Items that cannot be parsed are skipped with a warning.

        Returns:
            List of ChangeRecord in feed order

        Raises:
            TransportError: If the request fails
        """
        log.info("Fetching up to %d recent changes", self.batch_size)
        query = self._query(
            list="recentchanges",
            rclimit=self.batch_size,
            rcprop=RC_PROPS,
        )
        records: List[ChangeRecord] = []
        for item in query.get("recentchanges") or []:
            try:
                records.append(ChangeRecord.from_api(item))
            except MalformedRecordError as error:
                log.warning("Skipping recent change: %s", error)
        log.info("Fetched %d recent change(s).", len(records))
        return records

    def fetch_revisions(self, *revids: int) -> List[RevisionContent]:
        """
        Fetch the given revisions with their content, in ascending revid order.

        Raises:
            TransportError: If the request fails
            MalformedRecordError: If a returned revision has no readable text
        """
        query = self._query(
            prop="revisions",
            revids="|".join(str(revid) for revid in revids),
            rvprop=REV_PROPS,
            rvslots="main",
            formatversion=2,
        )
        revisions: List[RevisionContent] = []
        for page in query.get("pages") or []:
            for revision in page.get("revisions") or []:
                revisions.append(RevisionContent.from_api(revision))
        return sorted(revisions, key=lambda revision: revision.revid)

    def fetch_content_pair(self, title: str, old_revid: int, new_revid: int) -> Tuple[str, str]:
        """
        Fetch the text of a page before and after an edit.

        Args:
            title: Page title, used in messages
            old_revid: Revision id before the edit
            new_revid: Revision id after the edit

        Returns:
            Tuple of (before, after)

        Raises:
            TransportError: If the request fails
            MalformedRecordError: Unless exactly the two revisions come back
        """
        log.debug("Fetching revisions %d and %d of %s", old_revid, new_revid, title)
        revisions = self.fetch_revisions(old_revid, new_revid)
        by_revid = {revision.revid: revision for revision in revisions}
        if len(revisions) != 2 or set(by_revid) != {old_revid, new_revid}:
            raise MalformedRecordError(
                f"Expected revisions {old_revid} and {new_revid} of {title!r}, "
                f"got {[revision.revid for revision in revisions]}"
            )
        return by_revid[old_revid].content, by_revid[new_revid].content


__all__ = [
    'connect_site',
    'WikiTransport',
]
