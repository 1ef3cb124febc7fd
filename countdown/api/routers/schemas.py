"""Request / response models shared by the timer routers.

JSON uses camelCase field names; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from countdown.shared.models.timer import (
    Timer,
    TimerDraft,
    TimerStyle,
    UrgencySettings,
    parse_instant,
)
from countdown.shared.presentation import PresentationView, style_declarations


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StyleModel(CamelModel):
    background_color: str | None = None
    text_color: str | None = None
    font_size: int | None = None
    font_family: str | None = None
    border_radius: int | None = None
    padding: int | None = None


class UrgencyModel(CamelModel):
    enabled: bool = False
    trigger_minutes: int | None = None
    pulse_color: str | None = None
    show_banner: bool = False
    banner_message: str | None = None


class TimerBody(CamelModel):
    """Create / update payload from the admin form."""

    title: str | None = None
    product_ids: list[str | int] = []
    collection_ids: list[str | int] = []
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    style: StyleModel | None = None
    urgency_settings: UrgencyModel | None = None
    before_message: str | None = None
    after_message: str | None = None
    loop: bool = False
    hide_after_completion: bool = False
    active: bool = True

    def to_draft(self) -> TimerDraft:
        style = self.style.model_dump(by_alias=True, exclude_none=True) if self.style else None
        urgency = (
            self.urgency_settings.model_dump(by_alias=True, exclude_none=True)
            if self.urgency_settings
            else None
        )
        return TimerDraft(
            title=self.title,
            start_time=parse_instant(self.start_time),
            end_time=parse_instant(self.end_time),
            duration=self.duration,
            loop=self.loop,
            hide_after_completion=self.hide_after_completion,
            before_message=self.before_message or None,
            after_message=self.after_message or None,
            style=TimerStyle.from_dict(style),
            urgency_settings=UrgencySettings.from_dict(urgency),
            product_ids=[str(p) for p in self.product_ids],
            collection_ids=[str(c) for c in self.collection_ids],
            active=self.active,
        )


class ActivateBody(BaseModel):
    active: bool


class ResolvedStyle(CamelModel):
    background_color: str
    text_color: str
    font_size: int
    font_family: str
    border_radius: int
    padding: int


class ResolvedUrgency(CamelModel):
    enabled: bool
    trigger_minutes: int
    pulse_color: str
    show_banner: bool
    banner_message: str


class TimerResponse(CamelModel):
    id: str
    shop_id: str
    title: str | None = None
    product_ids: list[str]
    collection_ids: list[str]
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    style: ResolvedStyle
    urgency_settings: ResolvedUrgency
    before_message: str | None = None
    after_message: str | None = None
    loop: bool
    hide_after_completion: bool
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_timer(cls, timer: Timer) -> TimerResponse:
        return cls.model_validate(timer.to_payload())


class RemainingModel(BaseModel):
    days: int
    hours: int
    minutes: int
    seconds: int


class BannerModel(CamelModel):
    message: str
    pulse_color: str


class PreviewResponse(CamelModel):
    timer_id: str
    evaluated_at: datetime
    phase: str
    remaining_ms: int | None
    loop_count: int
    remaining: RemainingModel
    message: str
    should_hide: bool
    is_urgent: bool
    ongoing: bool
    urgency_banner: BannerModel | None = None
    style: dict[str, str]

    @classmethod
    def build(cls, timer: Timer, evaluated_at: datetime, view: PresentationView) -> PreviewResponse:
        banner = view.urgency_banner
        return cls(
            timer_id=timer.id,
            evaluated_at=evaluated_at,
            phase=view.phase.value,
            remaining_ms=view.remaining_ms,
            loop_count=view.loop_count,
            remaining=RemainingModel(**view.remaining._asdict()),
            message=view.message,
            should_hide=view.should_hide,
            is_urgent=view.is_urgent,
            ongoing=view.ongoing,
            urgency_banner=(
                BannerModel(message=banner.message, pulse_color=banner.pulse_color)
                if banner
                else None
            ),
            style=style_declarations(timer, view),
        )
