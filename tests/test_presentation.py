"""Tests for turning snapshots into display values."""

import pytest
from conftest import NOW, make_timer, ms

from countdown.shared.countdown import Phase, Snapshot, evaluate
from countdown.shared.models.timer import TimerStyle, UrgencySettings
from countdown.shared.presentation import (
    DEFAULT_ACTIVE_MESSAGE,
    DEFAULT_AFTER_MESSAGE,
    DEFAULT_BEFORE_MESSAGE,
    RemainingTime,
    UrgencyBanner,
    format_remaining,
    present,
    style_declarations,
)


class TestFormatRemaining:
    def test_none_is_zero(self):
        assert format_remaining(None) == RemainingTime(0, 0, 0, 0)

    def test_negative_is_zero(self):
        assert format_remaining(-1_000) == RemainingTime(0, 0, 0, 0)

    def test_splits_into_calendar_units(self):
        value = 2 * 86_400_000 + 3 * 3_600_000 + 4 * 60_000 + 5 * 1_000 + 999
        assert format_remaining(value) == RemainingTime(2, 3, 4, 5)

    @pytest.mark.parametrize(
        "value", [0, 1, 999, 1_000, 59_999, 3_599_999, 86_400_001, 987_654_321]
    )
    def test_decomposition_floors_within_one_second(self, value):
        r = format_remaining(value)
        total = r.days * 86_400_000 + r.hours * 3_600_000 + r.minutes * 60_000 + r.seconds * 1_000
        assert total <= value < total + 1_000
        assert 0 <= r.hours < 24 and 0 <= r.minutes < 60 and 0 <= r.seconds < 60


class TestMessages:
    def test_defaults_per_phase(self):
        timer = make_timer()
        assert present(timer, Snapshot(Phase.BEFORE, 10)).message == DEFAULT_BEFORE_MESSAGE
        assert present(timer, Snapshot(Phase.ACTIVE, 10)).message == DEFAULT_ACTIVE_MESSAGE
        assert present(timer, Snapshot(Phase.EXPIRED, 0)).message == DEFAULT_AFTER_MESSAGE

    def test_before_message_is_used_while_pending_and_running(self):
        timer = make_timer(before_message="Flash sale", after_message="Sale over")
        assert present(timer, Snapshot(Phase.BEFORE, 10)).message == "Flash sale"
        assert present(timer, Snapshot(Phase.ACTIVE, 10)).message == "Flash sale"
        assert present(timer, Snapshot(Phase.EXPIRED, 0)).message == "Sale over"


class TestHide:
    def test_expired_with_hide_flag_is_hidden(self):
        timer = make_timer(end_time=NOW - ms(1_000), hide_after_completion=True)
        view = present(timer, evaluate(timer, NOW))
        assert view.phase is Phase.EXPIRED
        assert view.should_hide is True

    def test_expired_without_hide_flag_is_shown(self):
        timer = make_timer(end_time=NOW - ms(1_000))
        assert present(timer, evaluate(timer, NOW)).should_hide is False

    def test_active_is_never_hidden(self):
        timer = make_timer(end_time=NOW + ms(1_000), hide_after_completion=True)
        assert present(timer, evaluate(timer, NOW)).should_hide is False


class TestUrgency:
    def _timer(self, **urgency):
        settings = {"enabled": True, "trigger_minutes": 5}
        settings.update(urgency)
        return make_timer(urgency_settings=UrgencySettings(**settings))

    def test_four_minutes_left_is_urgent(self):
        view = present(self._timer(), Snapshot(Phase.ACTIVE, 240_000))
        assert view.is_urgent is True

    def test_threshold_is_inclusive_on_whole_minutes(self):
        assert present(self._timer(), Snapshot(Phase.ACTIVE, 5 * 60_000 + 59_999)).is_urgent
        assert not present(self._timer(), Snapshot(Phase.ACTIVE, 6 * 60_000)).is_urgent

    def test_disabled_urgency_is_never_urgent(self):
        view = present(self._timer(enabled=False), Snapshot(Phase.ACTIVE, 1_000))
        assert view.is_urgent is False

    def test_only_active_phase_can_be_urgent(self):
        assert not present(self._timer(), Snapshot(Phase.BEFORE, 1_000)).is_urgent
        assert not present(self._timer(), Snapshot(Phase.EXPIRED, 0)).is_urgent

    def test_indeterminate_countdown_is_not_urgent(self):
        assert not present(self._timer(), Snapshot(Phase.ACTIVE, None)).is_urgent

    def test_banner_requires_show_banner(self):
        assert present(self._timer(), Snapshot(Phase.ACTIVE, 1_000)).urgency_banner is None

        timer = self._timer(show_banner=True, banner_message="Hurry!", pulse_color="#00ff00")
        view = present(timer, Snapshot(Phase.ACTIVE, 1_000))
        assert view.urgency_banner == UrgencyBanner(message="Hurry!", pulse_color="#00ff00")

    def test_no_banner_when_not_urgent(self):
        timer = self._timer(show_banner=True)
        assert present(timer, Snapshot(Phase.ACTIVE, 3_600_000)).urgency_banner is None


def test_active_countdown_scenario():
    timer = make_timer(end_time=NOW + ms(5_000))
    view = present(timer, evaluate(timer, NOW))
    assert view.phase is Phase.ACTIVE
    assert view.remaining == RemainingTime(0, 0, 0, 5)
    assert view.ongoing is False


def test_indeterminate_active_is_ongoing():
    view = present(make_timer(), Snapshot(Phase.ACTIVE, None))
    assert view.ongoing is True
    assert view.remaining == RemainingTime(0, 0, 0, 0)


def test_loop_count_is_carried_through():
    timer = make_timer(end_time=NOW - ms(1_000), loop=True, duration=1)
    assert present(timer, evaluate(timer, NOW)).loop_count == 1


def test_style_declarations_add_pulse_color_only_when_urgent():
    timer = make_timer(
        style=TimerStyle(background_color="#111111", font_size=20),
        urgency_settings=UrgencySettings(enabled=True, trigger_minutes=5, pulse_color="#abcdef"),
    )
    calm = style_declarations(timer, present(timer, Snapshot(Phase.ACTIVE, 3_600_000)))
    assert calm["background"] == "#111111"
    assert calm["font-size"] == "20px"
    assert "--pulse-color" not in calm

    urgent = style_declarations(timer, present(timer, Snapshot(Phase.ACTIVE, 60_000)))
    assert urgent["--pulse-color"] == "#abcdef"
