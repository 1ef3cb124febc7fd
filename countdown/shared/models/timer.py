"""Countdown timer model."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

DEFAULT_BACKGROUND_COLOR = "#000000"
DEFAULT_TEXT_COLOR = "#ffffff"
DEFAULT_PULSE_COLOR = "#ff0000"
DEFAULT_BANNER_MESSAGE = "Hurry! Time is running out!"


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Naive values are taken to be UTC. Empty values yield None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _load_json(value: Any) -> dict:
    # asyncpg returns jsonb as str unless a codec is registered
    if isinstance(value, str):
        value = json.loads(value)
    return dict(value or {})


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


@dataclass
class TimerStyle:
    """Presentation attributes of a timer; opaque to the countdown logic."""

    background_color: str = DEFAULT_BACKGROUND_COLOR
    text_color: str = DEFAULT_TEXT_COLOR
    font_size: int = 16
    font_family: str = "Arial"
    border_radius: int = 4
    padding: int = 12

    @classmethod
    def from_dict(cls, data: dict | None) -> TimerStyle:
        data = data or {}
        defaults = cls()
        return cls(
            background_color=data.get("backgroundColor") or defaults.background_color,
            text_color=data.get("textColor") or defaults.text_color,
            font_size=int(data.get("fontSize") or defaults.font_size),
            font_family=data.get("fontFamily") or defaults.font_family,
            border_radius=int(data.get("borderRadius") or defaults.border_radius),
            padding=int(data.get("padding") or defaults.padding),
        )

    def to_dict(self) -> dict:
        return {
            "backgroundColor": self.background_color,
            "textColor": self.text_color,
            "fontSize": self.font_size,
            "fontFamily": self.font_family,
            "borderRadius": self.border_radius,
            "padding": self.padding,
        }


@dataclass
class UrgencySettings:
    """Controls when a running countdown is flagged as urgent."""

    enabled: bool = False
    trigger_minutes: int = 5
    pulse_color: str = DEFAULT_PULSE_COLOR
    show_banner: bool = False
    banner_message: str = DEFAULT_BANNER_MESSAGE

    @classmethod
    def from_dict(cls, data: dict | None) -> UrgencySettings:
        data = data or {}
        defaults = cls()
        trigger = data.get("triggerMinutes")
        banner = data.get("bannerMessage")
        return cls(
            enabled=bool(data.get("enabled", defaults.enabled)),
            trigger_minutes=defaults.trigger_minutes if trigger is None else int(trigger),
            pulse_color=data.get("pulseColor") or defaults.pulse_color,
            show_banner=bool(data.get("showBanner", defaults.show_banner)),
            banner_message=defaults.banner_message if banner is None else banner,
        )

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "triggerMinutes": self.trigger_minutes,
            "pulseColor": self.pulse_color,
            "showBanner": self.show_banner,
            "bannerMessage": self.banner_message,
        }


@dataclass
class TimerDraft:
    """Merchant-editable fields of a timer, as submitted for create/update."""

    title: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    loop: bool = False
    hide_after_completion: bool = False
    before_message: str | None = None
    after_message: str | None = None
    style: TimerStyle = field(default_factory=TimerStyle)
    urgency_settings: UrgencySettings = field(default_factory=UrgencySettings)
    product_ids: list[str] = field(default_factory=list)
    collection_ids: list[str] = field(default_factory=list)
    active: bool = True


@dataclass
class Timer:
    """A merchant's countdown timer.

    Style and urgency settings are resolved to typed structs with their
    defaults filled in when the record is loaded, so readers never fall back
    to ad-hoc defaults.
    """

    id: str
    shop_id: str = ""
    title: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None  # minutes
    loop: bool = False
    hide_after_completion: bool = False
    before_message: str | None = None
    after_message: str | None = None
    style: TimerStyle = field(default_factory=TimerStyle)
    urgency_settings: UrgencySettings = field(default_factory=UrgencySettings)
    product_ids: list[str] = field(default_factory=list)
    collection_ids: list[str] = field(default_factory=list)
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: Any) -> Timer:
        """Build a Timer from a ``timers`` table row."""
        d = dict(record)
        return cls(
            id=str(d["id"]),
            shop_id=d.get("shop_id") or "",
            title=d.get("title"),
            start_time=parse_instant(d.get("start_time")),
            end_time=parse_instant(d.get("end_time")),
            duration=d.get("duration"),
            loop=bool(d.get("loop")),
            hide_after_completion=bool(d.get("hide_after_completion")),
            before_message=_blank_to_none(d.get("before_message")),
            after_message=_blank_to_none(d.get("after_message")),
            style=TimerStyle.from_dict(_load_json(d.get("style"))),
            urgency_settings=UrgencySettings.from_dict(_load_json(d.get("urgency_settings"))),
            product_ids=[str(p) for p in d.get("product_ids") or []],
            collection_ids=[str(c) for c in d.get("collection_ids") or []],
            active=bool(d.get("active", True)),
            created_at=parse_instant(d.get("created_at")),
            updated_at=parse_instant(d.get("updated_at")),
        )

    @classmethod
    def from_payload(cls, payload: dict) -> Timer:
        """Build a Timer from its camelCase JSON representation."""
        duration = payload.get("duration")
        return cls(
            id=str(payload["id"]),
            shop_id=payload.get("shopId") or "",
            title=payload.get("title"),
            start_time=parse_instant(payload.get("startTime")),
            end_time=parse_instant(payload.get("endTime")),
            duration=None if duration is None else int(duration),
            loop=bool(payload.get("loop", False)),
            hide_after_completion=bool(payload.get("hideAfterCompletion", False)),
            before_message=_blank_to_none(payload.get("beforeMessage")),
            after_message=_blank_to_none(payload.get("afterMessage")),
            style=TimerStyle.from_dict(payload.get("style")),
            urgency_settings=UrgencySettings.from_dict(payload.get("urgencySettings")),
            product_ids=[str(p) for p in payload.get("productIds") or []],
            collection_ids=[str(c) for c in payload.get("collectionIds") or []],
            active=bool(payload.get("active", True)),
            created_at=parse_instant(payload.get("createdAt")),
            updated_at=parse_instant(payload.get("updatedAt")),
        )

    def to_payload(self) -> dict:
        """Serialize to the camelCase JSON shape used by the REST API."""
        return {
            "id": self.id,
            "shopId": self.shop_id,
            "title": self.title,
            "startTime": _iso(self.start_time),
            "endTime": _iso(self.end_time),
            "duration": self.duration,
            "loop": self.loop,
            "hideAfterCompletion": self.hide_after_completion,
            "beforeMessage": self.before_message,
            "afterMessage": self.after_message,
            "style": self.style.to_dict(),
            "urgencySettings": self.urgency_settings.to_dict(),
            "productIds": list(self.product_ids),
            "collectionIds": list(self.collection_ids),
            "active": self.active,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def applies_to(self, product_id: str | None) -> bool:
        """True when the timer targets the product, or targets every product."""
        if not self.product_ids:
            return True
        return product_id is not None and str(product_id) in self.product_ids


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
