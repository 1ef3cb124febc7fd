"""Tests for loading timers from rows and JSON."""

import json
from datetime import UTC, datetime, timedelta, timezone

from countdown.shared.models.timer import (
    DEFAULT_BANNER_MESSAGE,
    Timer,
    TimerStyle,
    UrgencySettings,
    parse_instant,
)


def test_parse_instant_handles_z_suffix_and_naive_values():
    assert parse_instant("2025-06-01T12:00:00Z") == datetime(2025, 6, 1, 12, tzinfo=UTC)
    assert parse_instant("2025-06-01T12:00:00") == datetime(2025, 6, 1, 12, tzinfo=UTC)
    assert parse_instant(None) is None
    assert parse_instant("") is None


def test_parse_instant_converts_offsets_to_utc():
    eastern = datetime(2025, 6, 1, 8, tzinfo=timezone(timedelta(hours=-4)))
    assert parse_instant(eastern) == datetime(2025, 6, 1, 12, tzinfo=UTC)


def test_style_defaults_fill_missing_and_empty_values():
    style = TimerStyle.from_dict({"backgroundColor": "#123456", "fontSize": None})
    assert style.background_color == "#123456"
    assert style.text_color == "#ffffff"
    assert style.font_size == 16
    assert style.font_family == "Arial"


def test_urgency_defaults():
    urgency = UrgencySettings.from_dict(None)
    assert urgency.enabled is False
    assert urgency.trigger_minutes == 5
    assert urgency.pulse_color == "#ff0000"
    assert urgency.banner_message == DEFAULT_BANNER_MESSAGE


def test_from_record_decodes_json_columns():
    row = {
        "id": "5f0c1a8e-4a59-4b7e-9d0c-2f6b1f3f7a10",
        "shop_id": "demo.myshopify.com",
        "title": "Summer sale",
        "start_time": None,
        "end_time": datetime(2025, 6, 2, tzinfo=UTC),
        "duration": None,
        "loop": False,
        "hide_after_completion": True,
        "before_message": "",
        "after_message": "Gone",
        "style": json.dumps({"textColor": "#eeeeee"}),
        "urgency_settings": json.dumps({"enabled": True, "triggerMinutes": 10}),
        "product_ids": ["1", "2"],
        "collection_ids": [],
        "active": True,
        "created_at": None,
        "updated_at": None,
    }
    timer = Timer.from_record(row)
    assert timer.style.text_color == "#eeeeee"
    assert timer.urgency_settings.trigger_minutes == 10
    assert timer.before_message is None
    assert timer.after_message == "Gone"
    assert timer.hide_after_completion is True


def test_payload_round_trip_keeps_camel_case_fields():
    timer = Timer.from_payload(
        {
            "id": "t1",
            "title": "Launch",
            "startTime": "2025-06-01T10:00:00.000Z",
            "endTime": None,
            "duration": "15",
            "loop": True,
            "productIds": [101, "102"],
            "urgencySettings": {"enabled": True, "showBanner": True},
        }
    )
    assert timer.start_time == datetime(2025, 6, 1, 10, tzinfo=UTC)
    assert timer.duration == 15
    assert timer.product_ids == ["101", "102"]
    assert timer.urgency_settings.show_banner is True

    payload = timer.to_payload()
    assert payload["startTime"] == "2025-06-01T10:00:00+00:00"
    assert payload["urgencySettings"]["triggerMinutes"] == 5
    assert payload["style"]["backgroundColor"] == "#000000"


def test_applies_to_global_and_targeted_timers():
    assert Timer(id="a").applies_to("123")
    assert Timer(id="a").applies_to(None)

    targeted = Timer(id="b", product_ids=["123"])
    assert targeted.applies_to("123")
    assert targeted.applies_to(123)
    assert not targeted.applies_to("999")
    assert not targeted.applies_to(None)
