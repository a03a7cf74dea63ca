"""Tests for the bot.py entry point."""

import json
import os
from unittest.mock import MagicMock, patch

import mwclient
import pytest

import bot


RECENT_CHANGES = {"query": {"recentchanges": [
    {"type": "edit", "title": "Sandbox", "rcid": 5, "user": "Alice", "userid": 7,
     "revid": 11, "old_revid": 10, "oldlen": 4, "newlen": 4,
     "timestamp": "2024-05-01T12:01:00Z", "comment": "tweak"},
    {"type": "new", "title": "User:Alice", "rcid": 4, "user": "Alice", "userid": 7,
     "revid": 9, "old_revid": 0, "oldlen": 0, "newlen": 12,
     "timestamp": "2024-05-01T12:00:00Z", "comment": "hello"},
]}}

REVISIONS = {"query": {"pages": [{"pageid": 100, "title": "Sandbox", "revisions": [
    {"revid": 10, "slots": {"main": {"content": "a\nb\n"}}},
    {"revid": 11, "slots": {"main": {"content": "a\nc\n"}}},
]}]}}


def fake_api(action, **kwargs):
    if kwargs.get("list") == "recentchanges":
        return RECENT_CHANGES
    if kwargs.get("prop") == "revisions":
        return REVISIONS
    raise AssertionError(f"unexpected API call {kwargs}")


@pytest.fixture
def env(tmp_path):
    values = {
        "RCMONITOR_API_HOST": "test.wikipedia.org",
        "RCMONITOR_STATE_DIR": str(tmp_path),
        "RCMONITOR_WORKERS": "2",
    }
    with patch.dict(os.environ, values, clear=True):
        yield tmp_path


@pytest.fixture
def site():
    site = MagicMock()
    site.api.side_effect = fake_api
    with patch("bot.connect_site", return_value=site):
        yield site


class TestMain:
    """Tests for main()."""

    def test_reports_and_stores_watermark(self, env, site, capsys):
        assert bot.main() == 0
        out = capsys.readouterr().out
        assert out == (
            "\nEdits of Alice:\n"
            "\t2024-05-01T12:01:00Z edit: Sandbox (+0) tweak\n"
            "\t\treplace lines 2-2: ['b'] -> ['c']\n"
            "\t2024-05-01T12:00:00Z new: User:Alice (+12) hello\n"
        )
        state = json.loads((env / "test.wikipedia.org.json").read_text(encoding="utf-8"))
        assert state == {"rcid": 5, "logid": -1}

    def test_second_run_prints_nothing(self, env, site, capsys):
        assert bot.main() == 0
        capsys.readouterr()
        assert bot.main() == 0
        assert capsys.readouterr().out == ""

    def test_store_failure_returns_3(self, env, site, capsys):
        blocker = env / "blocked"
        blocker.write_text("", encoding="utf-8")
        with patch.dict(os.environ, {"RCMONITOR_STATE_DIR": str(blocker)}):
            assert bot.main() == 3
        assert "Edits of Alice:" in capsys.readouterr().out

    def test_api_error_propagates_as_transport_error(self, env, site):
        site.api.side_effect = mwclient.errors.APIError("internal_api_error", "oops", {})
        with pytest.raises(bot.TransportError):
            bot.main()
        assert list(env.iterdir()) == []

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_host_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            bot.main()
        assert exc_info.value.code == 2
