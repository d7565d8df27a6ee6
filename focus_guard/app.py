"""
Application coordinator wiring the protection engine to the tray and popup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from PySide6.QtCore import QObject
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from focus_guard import logger as app_logger
from focus_guard.config import EngineConfig
from focus_guard.event_source import (
    ActivityEventSource,
    QtActivityEventSource,
    SystemIdleEventSource,
    system_idle_supported,
)
from focus_guard.models import SessionStats, Suggestion
from focus_guard.protection import HyperfocusProtection
from focus_guard.settings import EngineSettingsManager
from focus_guard.suggestion_popup import BreakSuggestionPopup

APP_NAME = "Focus Guard"
APP_VERSION = "1.0.0"
APP_PURPOSE = "Suggests breaks at natural pauses during long focus sessions."


def default_event_source() -> ActivityEventSource:
    if system_idle_supported():
        return SystemIdleEventSource()
    app_logger.get_logger().warning(
        "System-wide idle time is unavailable on this platform; only input to {} windows is observed.",
        APP_NAME,
    )
    # The tray app has no main window, so deactivation is not a blur.
    return QtActivityEventSource(close_on_blur=False)


@dataclass
class AppCoordinator(QObject):
    settings_manager: EngineSettingsManager = field(default_factory=EngineSettingsManager)
    event_source: Optional[ActivityEventSource] = None

    def __post_init__(self) -> None:
        super().__init__()
        self._logger = app_logger.get_logger()
        self._manual_shutdown_requested = False

        self._config: EngineConfig = self.settings_manager.read_config()
        self._protection = HyperfocusProtection(
            self._config,
            event_source=self.event_source or default_event_source(),
            parent=self,
        )
        self._popup = BreakSuggestionPopup()

        self._protection.suggestionReady.connect(self._on_suggestion)
        self._protection.breakTaken.connect(self._on_break_taken)
        self._protection.breakSnoozed.connect(self._on_break_snoozed)
        self._protection.statsChanged.connect(self._on_stats_changed)
        self._protection.tracker.sessionEnded.connect(self._on_session_ended)

        self._popup.takeBreak.connect(self._on_take_break)
        self._popup.snooze.connect(self._protection.on_snooze)
        self._popup.dismiss.connect(self._protection.on_dismiss)

        self._tray = QSystemTrayIcon(self)
        tray_icon = QApplication.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)
        self._tray.setIcon(tray_icon)
        self._tray.setToolTip(f"{APP_NAME} v{APP_VERSION}")

        menu = QMenu()
        stats_action = QAction("Focus Stats", menu)
        break_action = QAction("Take a Break Now", menu)
        exit_action = QAction("Exit", menu)
        menu.addAction(stats_action)
        menu.addAction(break_action)
        menu.addSeparator()
        menu.addAction(exit_action)
        self._tray.setContextMenu(menu)
        self._menu = menu

        stats_action.triggered.connect(self._show_stats)
        break_action.triggered.connect(self._request_break_now)
        exit_action.triggered.connect(self.shutdown)

    @property
    def protection(self) -> HyperfocusProtection:
        return self._protection

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def start(self) -> None:
        self._logger.info("Starting {} v{} for {}.", APP_NAME, APP_VERSION, self._config.user_name)
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray.show()
        else:
            self._logger.warning("System tray unavailable; running without a tray icon.")
        self._protection.start()

    def shutdown(self) -> None:
        self._logger.info("Shutting down application on user request.")
        self._manual_shutdown_requested = True
        self._protection.shutdown()
        self._popup.withdraw()
        self._tray.hide()
        QApplication.instance().quit()

    def _on_suggestion(self, suggestion: Suggestion) -> None:
        self._popup.show_for(suggestion)

    def _on_take_break(self) -> None:
        self._protection.on_take_break()

    def _on_break_taken(self, focus_minutes: int, kind: str) -> None:
        self._logger.info("Break taken after {} minutes ({}).", focus_minutes, kind)
        self._tray.showMessage(
            APP_NAME,
            f"Enjoy your break! {self._protection.encouragement_message()}",
            QSystemTrayIcon.MessageIcon.Information,
            5000,
        )

    def _on_break_snoozed(self, focus_minutes: int) -> None:
        self._logger.debug("Break snoozed at {} minutes of focus.", focus_minutes)

    def _on_stats_changed(self, stats: SessionStats) -> None:
        self._tray.setToolTip(
            f"{APP_NAME}: focused {stats.duration_minutes} min, breaks taken {stats.breaks_taken}"
        )

    def _on_session_ended(self, _session) -> None:
        # A suggestion left on screen after the session closed has nothing to act on.
        self._popup.withdraw()

    def _show_stats(self) -> None:
        stats = self._protection.get_stats()
        history = self._protection.history
        self._tray.showMessage(
            APP_NAME,
            (
                f"Focused {stats.duration_minutes} min, breaks taken {stats.breaks_taken}, "
                f"acceptance {history.acceptance_rate:.0%}."
            ),
            QSystemTrayIcon.MessageIcon.Information,
            5000,
        )

    def _request_break_now(self) -> None:
        minutes = max(self._protection.current_duration_minutes(), self._config.first_break_threshold_minutes)
        self._protection.trigger_break_suggestion(minutes)
