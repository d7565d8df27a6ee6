"""
Escalation table mapping focus duration to suggestion intensity and wording.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from focus_guard.config import EngineConfig, IntensityLevel
from focus_guard.models import BreakIdea, Suggestion, whole_minutes


@dataclass(frozen=True)
class _CopyRow:
    min_minutes: Optional[int]
    level: IntensityLevel
    title: str
    message: Callable[[int, str], str]
    subtitle: Optional[str]
    snooze_label: str
    break_label: str
    show_focus_stats: bool = False


_WELLBEING = _CopyRow(
    min_minutes=90,
    level=IntensityLevel.STRONG,
    title="Your wellbeing matters \U0001F49A",
    message=lambda minutes, name: (
        f"{minutes} minutes of intense focus! Please take a proper break to avoid burnout."
    ),
    subtitle="Extended hyperfocus can be counterproductive and harmful",
    snooze_label="Just 2 min",
    break_label="Yes, I need this",
    show_focus_stats=True,
)
_BRAIN_CARE = _CopyRow(
    min_minutes=60,
    level=IntensityLevel.STRONG,
    title="Your brain needs care \U0001F9E0",
    message=lambda minutes, name: (
        f"An hour of intense focus, {name}! A short break will actually boost your productivity."
    ),
    subtitle="Research shows breaks improve focus and creativity",
    snooze_label="5 more min",
    break_label="Good call",
    show_focus_stats=True,
)
_MODERATE = _CopyRow(
    min_minutes=45,
    level=IntensityLevel.MODERATE,
    title="Time for a break? \U0001F338",
    message=lambda minutes, name: (
        f"You've been focused for {minutes} minutes. Maybe stretch or grab some water?"
    ),
    subtitle="Your body and mind will thank you",
    snooze_label="5 more min",
    break_label="Good idea",
)
# Lower bound comes from EngineConfig.first_break_threshold_minutes.
_GENTLE = _CopyRow(
    min_minutes=None,
    level=IntensityLevel.GENTLE,
    title="Maybe a quick pause? \u2615",
    message=lambda minutes, name: (
        f"{minutes} minutes of good focus! A brief break could refresh your mind."
    ),
    subtitle=None,
    snooze_label="5 more min",
    break_label="Sure thing",
)

ESCALATION_TABLE: Tuple[_CopyRow, ...] = (_WELLBEING, _BRAIN_CARE, _MODERATE)
_ROW_FOR_CAPPED_LEVEL = {
    IntensityLevel.MODERATE: _MODERATE,
    IntensityLevel.GENTLE: _GENTLE,
}

_SHORT_BREAK_IDEAS = (
    BreakIdea("water", "Drink Water", 2),
    BreakIdea("stretch", "Quick Stretch", 3),
    BreakIdea("breathe", "Deep Breaths", 5),
)
_MEDIUM_BREAK_IDEAS = (
    BreakIdea("walk", "Short Walk", 10),
    BreakIdea("snack", "Healthy Snack", 5),
    BreakIdea("nature", "Look Outside", 5),
)
_LONG_BREAK_IDEAS = (
    BreakIdea("meal", "Eat Something", 15),
    BreakIdea("nap", "Power Nap", 20),
    BreakIdea("fresh-air", "Go Outside", 15),
)


def select_intensity(duration_minutes: float, config: EngineConfig) -> Optional[IntensityLevel]:
    """Uncapped intensity for a session duration, or None below the first threshold."""
    row = _select_row(duration_minutes, config)
    return row.level if row else None


def break_ideas_for(duration_minutes: float) -> Tuple[BreakIdea, ...]:
    if duration_minutes < 30:
        return _SHORT_BREAK_IDEAS
    if duration_minutes < 60:
        return _MEDIUM_BREAK_IDEAS
    return _LONG_BREAK_IDEAS


def build_suggestion(duration_minutes: float, config: EngineConfig, *, now: float = 0.0) -> Optional[Suggestion]:
    """
    Build the suggestion for a session duration.

    The row is chosen by descending threshold, then capped to
    ``config.max_intensity``. A capped suggestion uses the wording of the
    level it was capped to.
    """
    row = _select_row(duration_minutes, config)
    if row is None:
        return None

    level = row.level.capped_to(config.max_intensity)
    if level is not row.level:
        row = _ROW_FOR_CAPPED_LEVEL[level]

    minutes = whole_minutes(duration_minutes)
    return Suggestion(
        intensity_level=level,
        focus_duration_minutes=minutes,
        title=row.title,
        message=row.message(minutes, config.user_name),
        subtitle=row.subtitle,
        snooze_label=row.snooze_label,
        break_label=row.break_label,
        show_focus_stats=row.show_focus_stats,
        break_ideas=break_ideas_for(duration_minutes),
        created_at=now,
    )


def _select_row(duration_minutes: float, config: EngineConfig) -> Optional[_CopyRow]:
    if duration_minutes < config.first_break_threshold_minutes:
        return None
    for row in ESCALATION_TABLE:
        if duration_minutes >= row.min_minutes:
            return row
    return _GENTLE
