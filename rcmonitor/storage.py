"""
Persistence of per-wiki watermarks.

A WatermarkStore maps a wiki key (its API host) to the Watermark of the
last run. Loading is forgiving: a missing or unreadable entry means "no
watermark on record". Storing is strict: a failure raises
PersistenceWarning so the caller can tell the operator that the next run
may repeat this one's findings.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Dict

from rcmonitor.errors import PersistenceWarning
from rcmonitor.models import Watermark


log = logging.getLogger(__name__)

# Characters allowed in state file names; anything else becomes "_"
_UNSAFE_KEY_RE = re.compile(r"[^A-Za-z0-9._-]")


class WatermarkStore:
    """Interface of a watermark key-value store."""

    def load(self, wiki_key: str) -> Watermark:
        raise NotImplementedError

    def store(self, wiki_key: str, marks: Watermark) -> None:
        raise NotImplementedError


class MemoryWatermarkStore(WatermarkStore):
    """In-process store, for tests and dry runs."""

    def __init__(self):
        self.marks: Dict[str, Watermark] = {}

    def load(self, wiki_key: str) -> Watermark:
        return self.marks.get(wiki_key, Watermark())

    def store(self, wiki_key: str, marks: Watermark) -> None:
        self.marks[wiki_key] = marks


class JsonFileWatermarkStore(WatermarkStore):
    """
    One JSON file per wiki in a state directory.

    The file for "en.wikipedia.org" is <state_dir>/en.wikipedia.org.json and
    holds {"rcid": <int>, "logid": <int>}. Writes go to a temporary file in
    the same directory which then replaces the old file, so a crash leaves
    either the old or the new watermark, never a partial one.

    Args:
        state_dir: Directory holding the state files (created on first store)
    """

    def __init__(self, state_dir):
        self.state_dir = Path(state_dir)

    def path_for(self, wiki_key: str) -> Path:
        return self.state_dir / f"{_UNSAFE_KEY_RE.sub('_', wiki_key)}.json"

    def load(self, wiki_key: str) -> Watermark:
        path = self.path_for(wiki_key)
        if not path.exists():
            log.info("No watermark on record for %s; reporting everything.", wiki_key)
            return Watermark()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            marks = Watermark(change_id=int(data["rcid"]), log_id=int(data["logid"]))
        except (OSError, ValueError, KeyError, TypeError) as error:
            log.warning("Ignoring unreadable watermark %s: %s", path, error)
            return Watermark()
        log.info("Loaded watermark for %s: rcid=%d logid=%d", wiki_key, marks.change_id, marks.log_id)
        return marks

    def store(self, wiki_key: str, marks: Watermark) -> None:
        path = self.path_for(wiki_key)
        payload = json.dumps({"rcid": marks.change_id, "logid": marks.log_id})
        tmp_name = None
        try:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.state_dir, prefix=path.name, suffix=".tmp", delete=False
            ) as handle:
                tmp_name = handle.name
                handle.write(payload + "\n")
            os.replace(tmp_name, path)
        except OSError as error:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceWarning(f"Could not store watermark for {wiki_key} in {path}: {error}") from error
        log.info("Stored watermark for %s: rcid=%d logid=%d", wiki_key, marks.change_id, marks.log_id)


__all__ = [
    'WatermarkStore',
    'MemoryWatermarkStore',
    'JsonFileWatermarkStore',
]
