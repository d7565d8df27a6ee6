"""
Value objects shared by the tracker, the engine and presenters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from focus_guard.config import IntensityLevel


def whole_minutes(minutes: float) -> int:
    """Round half up, so 30.5 minutes reads as 31."""
    return int(math.floor(minutes + 0.5))


@dataclass(slots=True)
class FocusSession:
    """
    A continuous period of tracked activity.

    Times are monotonic clock readings in seconds. ``end_time`` stays ``None``
    while the session occupies the tracker's active slot.
    """

    start_time: float
    end_time: Optional[float] = None
    breaks_taken: int = 0
    total_break_time: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def duration_minutes(self, now: float) -> float:
        reference = now if self.end_time is None else self.end_time
        return max(0.0, reference - self.start_time) / 60.0

    def close(self, now: float) -> None:
        self.end_time = max(now, self.start_time)

    def restart_after_break(self, now: float, break_minutes: float) -> None:
        self.start_time = now
        self.breaks_taken += 1
        self.total_break_time += max(0.0, break_minutes)


@dataclass(frozen=True)
class BreakIdea:
    key: str
    label: str
    duration_minutes: int


@dataclass(frozen=True)
class Suggestion:
    intensity_level: IntensityLevel
    focus_duration_minutes: int
    title: str
    message: str
    snooze_label: str
    break_label: str
    subtitle: Optional[str] = None
    show_focus_stats: bool = False
    break_ideas: Tuple[BreakIdea, ...] = field(default_factory=tuple)
    created_at: float = 0.0

    @property
    def recommended_break_minutes(self) -> int:
        return 15 if self.intensity_level is IntensityLevel.STRONG else 10


@dataclass(frozen=True)
class SessionStats:
    duration_minutes: int
    is_active: bool
    breaks_taken: int
    total_break_minutes: float = 0.0

    def as_dict(self) -> dict:
        return {
            "duration_minutes": self.duration_minutes,
            "is_active": self.is_active,
            "breaks_taken": self.breaks_taken,
            "total_break_minutes": self.total_break_minutes,
        }
