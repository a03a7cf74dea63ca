#!/usr/bin/env python3
"""
rcmonitor - recent changes monitor for new and anonymous users

This script reads the Recent Changes feed of a MediaWiki site and prints the
edits of untrusted users, with a line diff of each edit. It is meant to run
from cron or a similar scheduler; each run only reports activity that is
newer than what the previous run saw.

System Architecture:
- Fetches one batch of recent changes via the API using the mwclient library
- Flags new accounts (creation of their User: page) and anonymous authors
- Drops users whose changes are all at or below the persisted watermark
- Fetches before/after text of each qualifying edit and renders a line diff
- Prints the report to stdout, then stores the advanced watermark

Key Features:
- Two independent high-water marks (recent change id and log id) per wiki
- Report is printed before the watermark is stored, so a crash in between
  repeats findings on the next run instead of losing them
- A failed content fetch drops only that edit's diff, not the run
- Anonymous connection only; nothing is written to the wiki

Environment variables (all ASCII):

  RCMONITOR_API_HOST          Required. Host for wiki, e.g. "en.wikipedia.org"
  RCMONITOR_API_PATH          Optional. Path (default: "/w/")
  RCMONITOR_SCHEME            Optional. "https" (default) or "http"
  RCMONITOR_USER_AGENT        Optional. Shown in requests
  RCMONITOR_BATCH_SIZE        Optional. Recent changes per run (default: 100)
  RCMONITOR_USER_POLICY       Optional. "new" (new accounts only) or "all"
                              (new accounts and anonymous users, default)
  RCMONITOR_STATE_DIR         Optional. Directory for watermark files (default: ".")
  RCMONITOR_WORKERS           Optional. Concurrent revision fetches (default: 4)
  RCMONITOR_LOG_LEVEL         Optional. Logging level (default: "INFO")

Exit codes: 0 on success, 1 on API error, 2 on configuration error,
3 if the report was printed but the watermark could not be stored.
"""

import logging
import sys

from rcmonitor.config import MonitorConfig
from rcmonitor.errors import PersistenceWarning, TransportError
from rcmonitor.pipeline import run_pipeline
from rcmonitor.storage import JsonFileWatermarkStore
from rcmonitor.transport import WikiTransport, connect_site


log = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    # stdout carries the report; logging goes to stderr
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def main() -> int:
    """
    Main entry point for the recent changes monitor.

    Returns:
        0 on success, 1 on API error, 2 on configuration error,
        3 if the watermark could not be stored
    """
    config = MonitorConfig.from_environment()
    configure_logging(config.log_level)

    site = connect_site(config)
    transport = WikiTransport(site, batch_size=config.batch_size)
    store = JsonFileWatermarkStore(config.state_dir)

    batch = transport.fetch_recent_changes()
    old_marks = store.load(config.wiki_key)

    result = run_pipeline(
        batch,
        old_marks,
        transport.fetch_content_pair,
        policy=config.user_policy,
        max_workers=config.workers,
    )

    if result.report:
        sys.stdout.write(result.report)
        sys.stdout.flush()
    else:
        log.info("Nothing to report: no new activity by untrusted users.")
    if result.failed:
        log.warning("%d edit(s) reported without a diff.", len(result.failed))

    if result.marks == old_marks:
        log.info("Watermark unchanged (rcid=%d, logid=%d).", old_marks.change_id, old_marks.log_id)
        return 0
    try:
        store.store(config.wiki_key, result.marks)
    except PersistenceWarning as warning:
        log.warning("%s; the next run may repeat this report.", warning)
        return 3
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except TransportError as transport_error:
        log.error("MediaWiki API error: %s", transport_error)
        sys.exit(1)
    except Exception as error:
        log.exception("Unhandled exception: %s", error)
        sys.exit(1)
