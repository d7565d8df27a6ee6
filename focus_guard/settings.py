"""
QSettings-backed user preferences for the protection engine.
"""

from __future__ import annotations

from typing import Any, Optional

from PySide6.QtCore import QSettings

from focus_guard import logger as app_logger
from focus_guard.config import (
    DEFAULT_ESCALATION_INTERVAL_MINUTES,
    DEFAULT_FIRST_BREAK_THRESHOLD_MINUTES,
    DEFAULT_USER_NAME,
    EngineConfig,
    IntensityLevel,
)

_LOGGER = app_logger.get_logger()

ORGANIZATION_NAME = "FocusGuard"
APPLICATION_NAME = "Engine"


class EngineSettingsManager:
    """Loads persisted preferences and clamps invalid data."""

    def __init__(self, *, settings: Optional[QSettings] = None) -> None:
        self._settings = settings or QSettings(ORGANIZATION_NAME, APPLICATION_NAME)

    def read_config(self) -> EngineConfig:
        self._settings.sync()
        config = EngineConfig.normalized(
            enabled=self._read("IsEnabled", True),
            first_break_threshold_minutes=self._read(
                "FirstBreakThresholdMinutes", DEFAULT_FIRST_BREAK_THRESHOLD_MINUTES
            ),
            escalation_interval_minutes=self._read(
                "EscalationIntervalMinutes", DEFAULT_ESCALATION_INTERVAL_MINUTES
            ),
            max_intensity=self._read("MaxIntensity", IntensityLevel.STRONG.value),
            user_name=self._read("UserName", DEFAULT_USER_NAME),
        )
        _LOGGER.debug("Loaded engine settings from {}: {}", self._settings.fileName(), config)
        return config

    def write_config(self, config: EngineConfig) -> None:
        self._settings.setValue("IsEnabled", config.enabled)
        self._settings.setValue("FirstBreakThresholdMinutes", config.first_break_threshold_minutes)
        self._settings.setValue("EscalationIntervalMinutes", config.escalation_interval_minutes)
        self._settings.setValue("MaxIntensity", config.max_intensity.value)
        self._settings.setValue("UserName", config.user_name)
        self._settings.sync()

    def _read(self, name: str, default: Any) -> Any:
        if not self._settings.contains(name):
            return default
        return self._settings.value(name, default)
