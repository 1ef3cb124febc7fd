"""Tests for countdown phase derivation."""

from datetime import timedelta

import pytest
from conftest import NOW, make_timer, ms

from countdown.shared.countdown import Phase, Snapshot, evaluate, to_epoch_ms


def test_future_start_is_before_with_exact_remaining():
    timer = make_timer(start_time=NOW + ms(10_000))
    snapshot = evaluate(timer, NOW)
    assert snapshot == Snapshot(Phase.BEFORE, 10_000, 0)


def test_future_start_without_end_or_duration_is_still_before():
    timer = make_timer(start_time=NOW + timedelta(days=2))
    snapshot = evaluate(timer, NOW)
    assert snapshot.phase is Phase.BEFORE
    assert snapshot.remaining_ms == 2 * 86_400_000


def test_end_in_future_counts_down():
    timer = make_timer(end_time=NOW + ms(5_000))
    assert evaluate(timer, NOW) == Snapshot(Phase.ACTIVE, 5_000, 0)


def test_started_timer_counts_down_to_end():
    timer = make_timer(start_time=NOW - timedelta(hours=1), end_time=NOW + timedelta(hours=1))
    snapshot = evaluate(timer, NOW)
    assert snapshot.phase is Phase.ACTIVE
    assert snapshot.remaining_ms == 3_600_000


def test_start_equal_to_now_is_active():
    timer = make_timer(start_time=NOW, end_time=NOW + ms(1_000))
    assert evaluate(timer, NOW).phase is Phase.ACTIVE


def test_now_equal_to_end_is_active_with_zero_remaining():
    timer = make_timer(end_time=NOW)
    assert evaluate(timer, NOW) == Snapshot(Phase.ACTIVE, 0, 0)


def test_past_end_without_loop_is_expired():
    timer = make_timer(end_time=NOW - ms(1_000), hide_after_completion=True)
    assert evaluate(timer, NOW) == Snapshot(Phase.EXPIRED, 0, 0)


def test_past_end_loop_without_duration_is_expired():
    timer = make_timer(end_time=NOW - ms(1_000), loop=True)
    assert evaluate(timer, NOW).phase is Phase.EXPIRED


@pytest.mark.parametrize("duration", [0, -5])
def test_non_positive_loop_duration_is_not_loopable(duration):
    timer = make_timer(end_time=NOW - ms(1_000), loop=True, duration=duration)
    assert evaluate(timer, NOW) == Snapshot(Phase.EXPIRED, 0, 0)


def test_first_loop_after_expiry():
    timer = make_timer(end_time=NOW - ms(1_000), loop=True, duration=1)
    assert evaluate(timer, NOW) == Snapshot(Phase.ACTIVE, 59_000, 1)


def test_loop_count_grows_by_one_per_cycle():
    end = NOW - timedelta(hours=5)
    timer = make_timer(end_time=end, loop=True, duration=30)
    cycle = 30 * 60_000

    previous = None
    for minutes in range(1, 240, 7):
        now = end + timedelta(minutes=minutes, milliseconds=250)
        snapshot = evaluate(timer, now)
        elapsed = to_epoch_ms(now) - to_epoch_ms(end)
        assert snapshot.phase is Phase.ACTIVE
        assert snapshot.loop_count == elapsed // cycle + 1
        assert 0 < snapshot.remaining_ms < cycle
        if previous is not None:
            assert snapshot.loop_count - previous in (0, 1)
        previous = snapshot.loop_count


def test_loop_boundary_is_aligned_to_end_time():
    end = NOW - timedelta(minutes=45)
    timer = make_timer(end_time=end, loop=True, duration=30)
    snapshot = evaluate(timer, NOW)
    # 45 minutes past end: one full cycle done, 15 minutes into the second
    assert snapshot.loop_count == 2
    assert snapshot.remaining_ms == 15 * 60_000


def test_duration_only_is_measured_from_now_every_call():
    timer = make_timer(duration=10)
    first = evaluate(timer, NOW)
    later = evaluate(timer, NOW + timedelta(minutes=3))
    assert first == later == Snapshot(Phase.ACTIVE, 600_000, 0)


def test_no_end_and_no_duration_is_indeterminate():
    timer = make_timer()
    assert evaluate(timer, NOW) == Snapshot(Phase.ACTIVE, None, 0)


def test_end_before_start_follows_branches_literally():
    timer = make_timer(start_time=NOW - ms(500), end_time=NOW - ms(2_000))
    assert evaluate(timer, NOW).phase is Phase.EXPIRED

    before_start = evaluate(timer, NOW - ms(1_000))
    assert before_start.phase is Phase.BEFORE
    assert before_start.remaining_ms == 500


def test_evaluate_is_deterministic():
    timer = make_timer(end_time=NOW - ms(12_345), loop=True, duration=7)
    assert evaluate(timer, NOW) == evaluate(timer, NOW)


def test_sub_millisecond_instants_are_floored():
    timer = make_timer(end_time=NOW + ms(5_000))
    snapshot = evaluate(timer, NOW + timedelta(microseconds=400))
    assert snapshot.remaining_ms == 5_000


def test_naive_now_is_treated_as_utc():
    timer = make_timer(end_time=NOW + ms(3_000))
    naive_now = NOW.replace(tzinfo=None)
    assert evaluate(timer, naive_now).remaining_ms == 3_000
