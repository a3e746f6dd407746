"""
Unit tests for slot resolution.

resolve() works on plain records, so these tests use SimpleNamespace
stand-ins instead of ORM rows.
"""

from datetime import date, datetime, time
from types import SimpleNamespace

import pytest

from tutorbook.core.exceptions import DataIntegrityError, InvalidDuration
from tutorbook.domain.slot_resolver import overlaps, resolve

MONDAY = date(2026, 10, 26)


def rule(rule_id, day="Mon", start=time(9, 0), end=time(12, 0), active=True):
    return SimpleNamespace(
        id=rule_id, day_of_week=day, start_time=start, end_time=end, is_active=active
    )


def session(session_id, start_at, end_at, status="booked"):
    return SimpleNamespace(id=session_id, start_at=start_at, end_at=end_at, status=status)


class TestOverlaps:
    def test_touching_endpoints_do_not_overlap(self):
        assert not overlaps(
            datetime(2026, 10, 26, 9), datetime(2026, 10, 26, 10),
            datetime(2026, 10, 26, 10), datetime(2026, 10, 26, 11),
        )

    def test_start_inside_busy(self):
        assert overlaps(
            datetime(2026, 10, 26, 9, 30), datetime(2026, 10, 26, 11),
            datetime(2026, 10, 26, 9), datetime(2026, 10, 26, 10),
        )

    def test_window_contains_busy(self):
        assert overlaps(
            datetime(2026, 10, 26, 9), datetime(2026, 10, 26, 12),
            datetime(2026, 10, 26, 10), datetime(2026, 10, 26, 10, 30),
        )


class TestResolve:
    def test_single_rule_yields_rule_start(self):
        windows = resolve([rule("r1")], [], MONDAY, 60)

        assert len(windows) == 1
        assert windows[0].start_time == time(9, 0)
        assert windows[0].end_time == time(10, 0)
        assert windows[0].source_rule_id == "r1"
        assert windows[0].date == MONDAY

    def test_rule_for_other_day_is_ignored(self):
        assert resolve([rule("r1", day="Tue")], [], MONDAY, 60) == []

    def test_inactive_rule_is_ignored(self):
        assert resolve([rule("r1", active=False)], [], MONDAY, 60) == []

    def test_overlapping_session_removes_whole_window(self):
        busy = session("s1", datetime(2026, 10, 26, 10), datetime(2026, 10, 26, 11))

        assert resolve([rule("r1")], [busy], MONDAY, 60) == []

    def test_session_touching_window_end_does_not_block(self):
        after = session("s1", datetime(2026, 10, 26, 12), datetime(2026, 10, 26, 13))

        windows = resolve([rule("r1")], [after], MONDAY, 60)

        assert [w.start_time for w in windows] == [time(9, 0)]

    def test_canceled_session_does_not_block(self):
        canceled = session(
            "s1", datetime(2026, 10, 26, 9), datetime(2026, 10, 26, 10), status="canceled"
        )

        windows = resolve([rule("r1")], [canceled], MONDAY, 60)

        assert len(windows) == 1

    @pytest.mark.parametrize("status", ["booked", "completed", "no_show"])
    def test_non_canceled_statuses_block(self, status):
        busy = session(
            "s1", datetime(2026, 10, 26, 9), datetime(2026, 10, 26, 10), status=status
        )

        assert resolve([rule("r1")], [busy], MONDAY, 60) == []

    def test_duration_longer_than_window_is_filtered(self):
        assert resolve([rule("r1")], [], MONDAY, 240) == []

    def test_duration_exactly_filling_window_is_kept(self):
        windows = resolve([rule("r1")], [], MONDAY, 180)

        assert windows[0].end_time == time(12, 0)

    def test_windows_are_ordered_by_start_then_rule_id(self):
        rules = [
            rule("r3", start=time(14, 0), end=time(16, 0)),
            rule("r2", start=time(9, 0), end=time(10, 0)),
            rule("r1", start=time(9, 0), end=time(11, 0)),
        ]

        windows = resolve(rules, [], MONDAY, 60)

        assert [(w.start_time, w.source_rule_id) for w in windows] == [
            (time(9, 0), "r1"),
            (time(9, 0), "r2"),
            (time(14, 0), "r3"),
        ]

    def test_conflict_only_removes_the_window_it_touches(self):
        rules = [
            rule("am", start=time(9, 0), end=time(12, 0)),
            rule("pm", start=time(14, 0), end=time(17, 0)),
        ]
        busy = session("s1", datetime(2026, 10, 26, 15), datetime(2026, 10, 26, 16))

        windows = resolve(rules, [busy], MONDAY, 60)

        assert [w.source_rule_id for w in windows] == ["am"]

    def test_session_on_previous_day_running_past_midnight_blocks(self):
        late = session("s1", datetime(2026, 10, 25, 23), datetime(2026, 10, 26, 9, 30))

        assert resolve([rule("r1")], [late], MONDAY, 60) == []

    def test_repeated_calls_return_equal_results(self):
        rules = [rule("r1"), rule("r2", start=time(13, 0), end=time(15, 0))]

        first = resolve(rules, [], MONDAY, 30)
        second = resolve(rules, [], MONDAY, 30)

        assert first == second

    def test_does_not_mutate_inputs(self):
        rules = [rule("r1")]
        sessions = [session("s1", datetime(2026, 10, 27, 9), datetime(2026, 10, 27, 10))]

        resolve(rules, sessions, MONDAY, 60)

        assert len(rules) == 1 and len(sessions) == 1
        assert rules[0].start_time == time(9, 0)

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration_is_rejected(self, duration):
        with pytest.raises(InvalidDuration) as exc_info:
            resolve([rule("r1")], [], MONDAY, duration)
        assert exc_info.value.code == "INVALID_DURATION"

    def test_full_day_duration_is_rejected(self):
        with pytest.raises(InvalidDuration):
            resolve([rule("r1")], [], MONDAY, 24 * 60)

    def test_duration_running_past_midnight_is_rejected(self):
        late = rule("late", start=time(23, 0), end=time(23, 59))

        with pytest.raises(InvalidDuration) as exc_info:
            resolve([late], [], MONDAY, 120)
        assert exc_info.value.details["rule_id"] == "late"
        assert exc_info.value.details["start_time"] == "23:00"

    def test_duration_ending_exactly_at_midnight_is_not_rejected(self):
        late = rule("late", start=time(23, 0), end=time(23, 59))

        # 23:00 + 60 reaches midnight without crossing it; the window is too short
        assert resolve([late], [], MONDAY, 60) == []

    def test_late_rule_on_other_day_does_not_trigger_midnight_check(self):
        late = rule("late", day="Tue", start=time(23, 0), end=time(23, 59))

        assert len(resolve([rule("r1"), late], [], MONDAY, 120)) == 1

    def test_malformed_selected_rule_raises_integrity_error(self):
        broken = rule("bad", start=time(12, 0), end=time(9, 0))

        with pytest.raises(DataIntegrityError) as exc_info:
            resolve([broken], [], MONDAY, 60)
        assert exc_info.value.details["rule_id"] == "bad"

    def test_malformed_rule_on_other_day_is_not_inspected(self):
        broken = rule("bad", day="Tue", start=time(12, 0), end=time(9, 0))

        assert len(resolve([rule("r1"), broken], [], MONDAY, 60)) == 1

    def test_malformed_session_raises_integrity_error(self):
        broken = session("s1", datetime(2026, 10, 26, 10), datetime(2026, 10, 26, 10))

        with pytest.raises(DataIntegrityError):
            resolve([rule("r1")], [broken], MONDAY, 60)

    def test_window_exposes_timestamps(self):
        window = resolve([rule("r1")], [], MONDAY, 90)[0]

        assert window.start_at == datetime(2026, 10, 26, 9, 0)
        assert window.end_at == datetime(2026, 10, 26, 10, 30)
