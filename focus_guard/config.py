"""
Engine configuration and the fixed timing contract of the protection engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from focus_guard import logger as app_logger

_LOGGER = app_logger.get_logger()

NATURAL_PAUSE_SECONDS = 8.0
SESSION_CLOSE_SECONDS = 5 * 60.0
SUGGESTION_COOLDOWN_SECONDS = 2 * 60.0
SNOOZE_SECONDS = 5 * 60.0

TRACKER_POLL_SECONDS = 1.0
EVALUATION_TICK_SECONDS = 10.0

DEFAULT_FIRST_BREAK_THRESHOLD_MINUTES = 30
DEFAULT_ESCALATION_INTERVAL_MINUTES = 15
DEFAULT_USER_NAME = "friend"


class IntensityLevel(Enum):
    GENTLE = "gentle"
    MODERATE = "moderate"
    STRONG = "strong"

    @property
    def rank(self) -> int:
        return _INTENSITY_ORDER.index(self)

    def capped_to(self, maximum: "IntensityLevel") -> "IntensityLevel":
        """Return the weaker of this level and ``maximum``."""
        return self if self.rank <= maximum.rank else maximum

    @classmethod
    def parse(cls, value: Any, default: "IntensityLevel") -> "IntensityLevel":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        _LOGGER.warning("Unknown intensity level {!r}; using {}.", value, default.value)
        return default


_INTENSITY_ORDER = (IntensityLevel.GENTLE, IntensityLevel.MODERATE, IntensityLevel.STRONG)


@dataclass(frozen=True)
class EngineConfig:
    enabled: bool = True
    first_break_threshold_minutes: int = DEFAULT_FIRST_BREAK_THRESHOLD_MINUTES
    escalation_interval_minutes: int = DEFAULT_ESCALATION_INTERVAL_MINUTES
    max_intensity: IntensityLevel = IntensityLevel.STRONG
    user_name: str = DEFAULT_USER_NAME

    @classmethod
    def normalized(
        cls,
        *,
        enabled: Any = True,
        first_break_threshold_minutes: Any = DEFAULT_FIRST_BREAK_THRESHOLD_MINUTES,
        escalation_interval_minutes: Any = DEFAULT_ESCALATION_INTERVAL_MINUTES,
        max_intensity: Any = IntensityLevel.STRONG,
        user_name: Any = DEFAULT_USER_NAME,
    ) -> "EngineConfig":
        """
        Build a configuration from loosely typed values.

        Invalid entries fall back to their defaults instead of raising.
        """
        name = user_name.strip() if isinstance(user_name, str) else ""
        return cls(
            enabled=_coerce_bool(enabled, True),
            first_break_threshold_minutes=_coerce_minutes(
                first_break_threshold_minutes,
                "first_break_threshold_minutes",
                DEFAULT_FIRST_BREAK_THRESHOLD_MINUTES,
            ),
            escalation_interval_minutes=_coerce_minutes(
                escalation_interval_minutes,
                "escalation_interval_minutes",
                DEFAULT_ESCALATION_INTERVAL_MINUTES,
            ),
            max_intensity=IntensityLevel.parse(max_intensity, IntensityLevel.STRONG),
            user_name=name or DEFAULT_USER_NAME,
        )

    def sanitized(self) -> "EngineConfig":
        """Return a copy with every field clamped to its valid range."""
        return EngineConfig.normalized(
            enabled=self.enabled,
            first_break_threshold_minutes=self.first_break_threshold_minutes,
            escalation_interval_minutes=self.escalation_interval_minutes,
            max_intensity=self.max_intensity,
            user_name=self.user_name,
        )


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_minutes(value: Any, name: str, default: int) -> int:
    if isinstance(value, bool):
        minutes = None
    else:
        try:
            minutes = int(value)
        except (TypeError, ValueError):
            minutes = None
    if minutes is None or minutes < 1:
        _LOGGER.warning("Invalid {} value {!r}; falling back to {}.", name, value, default)
        return default
    return minutes
