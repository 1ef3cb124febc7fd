"""Terminal rendering of countdown frames with rich."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from countdown.shared.countdown import Phase
from countdown.widget.ticker import TickState, TimerFrame

ONGOING_TEXT = "Ongoing promotion!"


def _units(frame: TimerFrame) -> Table:
    remaining = frame.view.remaining
    units = [
        ("Hours", remaining.hours),
        ("Minutes", remaining.minutes),
        ("Seconds", remaining.seconds),
    ]
    if remaining.days > 0:
        units.insert(0, ("Days", remaining.days))

    table = Table.grid(padding=(0, 2))
    for _ in units:
        table.add_column(justify="center")
    table.add_row(*(Text(f"{value:02d}", style="bold") for _, value in units))
    table.add_row(*(Text(label, style="dim") for label, _ in units))
    return table


def render_frame(frame: TimerFrame) -> RenderableType:
    style = frame.timer.style
    view = frame.view
    body: list[RenderableType] = [Text(view.message, style="bold")]

    if view.ongoing:
        body.append(Text(ONGOING_TEXT))
    elif view.phase is not Phase.EXPIRED:
        if view.phase is Phase.BEFORE:
            body.append(Text("Starts in", style="dim"))
        body.append(_units(frame))

    if view.urgency_banner is not None:
        body.append(
            Text(
                view.urgency_banner.message,
                style=Style(bgcolor=view.urgency_banner.pulse_color, bold=True),
            )
        )

    if view.loop_count > 0:
        body.append(Text(f"Loop #{view.loop_count}", style="dim"))

    border = frame.timer.urgency_settings.pulse_color if view.is_urgent else style.text_color
    return Panel(
        Group(*body),
        title=frame.timer.title or "Untitled Timer",
        style=Style(color=style.text_color, bgcolor=style.background_color),
        border_style=border,
    )


def render_state(state: TickState) -> RenderableType:
    if state.loading:
        return Text("Loading countdown timer...")
    if state.error and not state.frames:
        return Text(f"Error loading timer: {state.error}", style="red")
    panels = [render_frame(f) for f in state.visible_frames]
    if state.error:
        panels.append(Text(f"Last refresh failed: {state.error}", style="yellow"))
    return Group(*panels)
