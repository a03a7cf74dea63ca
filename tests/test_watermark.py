"""Tests for watermark.py high-water mark filtering."""

from rcmonitor.models import ChangeKind, Watermark
from rcmonitor.watermark import filter_by_watermark


class TestFilterByWatermark:
    """Tests for per-user retention and mark advancement."""

    def test_empty_input_keeps_old_marks(self):
        old = Watermark(change_id=10, log_id=20)
        filtered, marks = filter_by_watermark({}, old)
        assert filtered == {}
        assert marks == old

    def test_first_run_reports_everything(self, make_change):
        edit = make_change(rcid=5, user="Alice", revid=11, old_revid=10)
        filtered, marks = filter_by_watermark({"Alice": [edit]}, Watermark())
        assert filtered == {"Alice": [edit]}
        assert marks == Watermark(change_id=5, log_id=-1)

    def test_user_with_seen_changes_dropped(self, make_change):
        edit = make_change(rcid=5, user="Alice")
        filtered, marks = filter_by_watermark({"Alice": [edit]}, Watermark(change_id=5, log_id=-1))
        assert filtered == {}
        assert marks == Watermark(change_id=5, log_id=-1)

    def test_gate_is_per_user(self, make_change):
        old_edit = make_change(rcid=3, user="Alice")
        new_edit = make_change(rcid=7, user="Alice")
        filtered, marks = filter_by_watermark({"Alice": [new_edit, old_edit]}, Watermark(change_id=5))
        assert filtered == {"Alice": [new_edit, old_edit]}
        assert marks.change_id == 7

    def test_marks_cover_dropped_users(self, make_change):
        classified = {
            "Alice": [make_change(rcid=3, user="Alice")],
            "Bob": [make_change(rcid=9, user="Bob")],
        }
        filtered, marks = filter_by_watermark(classified, Watermark(change_id=5, log_id=-1))
        assert list(filtered) == ["Bob"]
        assert marks == Watermark(change_id=9, log_id=-1)

    def test_log_id_alone_retains_user(self, make_change):
        log_entry = make_change(
            rcid=None, kind=ChangeKind.LOG, user="203.0.113.5", user_id=0,
            log_id=20, log_type="block", log_action="block",
        )
        old = Watermark(change_id=10, log_id=15)
        filtered, marks = filter_by_watermark({"203.0.113.5": [log_entry]}, old)
        assert filtered == {"203.0.113.5": [log_entry]}
        assert marks == Watermark(change_id=10, log_id=20)

    def test_counters_are_independent(self, make_change):
        # rcid is old, but the log id is new
        record = make_change(rcid=5, kind=ChangeKind.LOG, log_id=3, log_type="move", log_action="move")
        filtered, marks = filter_by_watermark({"Someone": [record]}, Watermark(change_id=10, log_id=2))
        assert filtered == {"Someone": [record]}
        assert marks == Watermark(change_id=10, log_id=3)

    def test_user_without_ids_dropped(self, make_change):
        record = make_change(rcid=None)
        filtered, marks = filter_by_watermark({"Someone": [record], "Nobody": []}, Watermark())
        assert filtered == {}
        assert marks == Watermark()

    def test_missing_ids_do_not_count_as_zero(self, make_change):
        records = [make_change(rcid=None), make_change(rcid=None, log_id=None)]
        filtered, marks = filter_by_watermark({"Someone": records}, Watermark(change_id=-5, log_id=-5))
        assert filtered == {}
        assert marks == Watermark(change_id=-5, log_id=-5)

    def test_marks_never_regress(self, make_change):
        old = Watermark(change_id=100, log_id=100)
        record = make_change(rcid=50, log_id=60)
        filtered, marks = filter_by_watermark({"Someone": [record]}, old)
        assert filtered == {}
        assert marks.change_id >= old.change_id
        assert marks.log_id >= old.log_id

    def test_retained_users_have_new_ids(self, make_change):
        old = Watermark(change_id=10, log_id=10)
        classified = {
            "A": [make_change(rcid=4), make_change(rcid=11)],
            "B": [make_change(rcid=10, log_id=10)],
            "C": [make_change(rcid=None, log_id=12)],
        }
        filtered, marks = filter_by_watermark(classified, old)
        assert list(filtered) == ["A", "C"]
        for records in filtered.values():
            assert any(
                (r.rcid is not None and r.rcid > old.change_id) or (r.log_id is not None and r.log_id > old.log_id)
                for r in records
            )
        assert marks == Watermark(change_id=11, log_id=12)
