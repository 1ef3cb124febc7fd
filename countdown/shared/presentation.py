"""Render-ready values derived from a countdown snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from countdown.shared.countdown import MS_PER_MINUTE, Phase, Snapshot
from countdown.shared.models.timer import Timer

MS_PER_SECOND = 1_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

DEFAULT_BEFORE_MESSAGE = "Coming soon!"
DEFAULT_ACTIVE_MESSAGE = "Limited time offer!"
DEFAULT_AFTER_MESSAGE = "Offer has ended"


class RemainingTime(NamedTuple):
    days: int
    hours: int
    minutes: int
    seconds: int


@dataclass(frozen=True)
class UrgencyBanner:
    message: str
    pulse_color: str


@dataclass(frozen=True)
class PresentationView:
    phase: Phase
    remaining: RemainingTime
    message: str
    should_hide: bool
    is_urgent: bool
    urgency_banner: UrgencyBanner | None
    loop_count: int
    remaining_ms: int | None

    @property
    def ongoing(self) -> bool:
        """Active with no determinate end; hosts show an 'ongoing' state."""
        return self.phase is Phase.ACTIVE and self.remaining_ms is None


def format_remaining(remaining_ms: int | None) -> RemainingTime:
    """Split milliseconds into whole days, hours, minutes and seconds."""
    if remaining_ms is None or remaining_ms <= 0:
        return RemainingTime(0, 0, 0, 0)
    days, rest = divmod(remaining_ms, MS_PER_DAY)
    hours, rest = divmod(rest, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds = rest // MS_PER_SECOND
    return RemainingTime(days, hours, minutes, seconds)


def timer_message(timer: Timer, phase: Phase) -> str:
    if phase is Phase.BEFORE:
        return timer.before_message if timer.before_message is not None else DEFAULT_BEFORE_MESSAGE
    if phase is Phase.ACTIVE:
        return timer.before_message if timer.before_message is not None else DEFAULT_ACTIVE_MESSAGE
    return timer.after_message if timer.after_message is not None else DEFAULT_AFTER_MESSAGE


def is_urgent(timer: Timer, snapshot: Snapshot) -> bool:
    urgency = timer.urgency_settings
    if snapshot.phase is not Phase.ACTIVE or not urgency.enabled:
        return False
    if snapshot.remaining_ms is None:
        return False
    return snapshot.remaining_ms // MS_PER_MINUTE <= urgency.trigger_minutes


def present(timer: Timer, snapshot: Snapshot) -> PresentationView:
    """Turn a snapshot into the values a countdown display needs."""
    urgent = is_urgent(timer, snapshot)
    banner = None
    if urgent and timer.urgency_settings.show_banner:
        banner = UrgencyBanner(
            message=timer.urgency_settings.banner_message,
            pulse_color=timer.urgency_settings.pulse_color,
        )
    return PresentationView(
        phase=snapshot.phase,
        remaining=format_remaining(snapshot.remaining_ms),
        message=timer_message(timer, snapshot.phase),
        should_hide=snapshot.phase is Phase.EXPIRED and timer.hide_after_completion,
        is_urgent=urgent,
        urgency_banner=banner,
        loop_count=snapshot.loop_count,
        remaining_ms=snapshot.remaining_ms,
    )


def style_declarations(timer: Timer, view: PresentationView) -> dict[str, str]:
    """Inline CSS for a rendered timer, with the pulse color while urgent."""
    style = timer.style
    declarations = {
        "background": style.background_color,
        "color": style.text_color,
        "border-radius": f"{style.border_radius}px",
        "font-family": style.font_family,
        "font-size": f"{style.font_size}px",
        "padding": f"{style.padding}px",
    }
    if view.is_urgent:
        declarations["--pulse-color"] = timer.urgency_settings.pulse_color
    return declarations
