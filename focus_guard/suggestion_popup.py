"""
Break suggestion popup presented in the bottom-right corner.
"""

from __future__ import annotations

from PySide6.QtCore import QPoint, Qt, Signal
from PySide6.QtGui import QColor, QKeyEvent
from PySide6.QtWidgets import (
    QApplication,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from focus_guard.config import IntensityLevel
from focus_guard.models import Suggestion

_ACCENT_COLORS = {
    IntensityLevel.GENTLE: "#a8e2bb",
    IntensityLevel.MODERATE: "#f7e98e",
    IntensityLevel.STRONG: "#f4b7ae",
}


class BreakSuggestionPopup(QWidget):
    """
    Renders one Suggestion and reports exactly one decision per display.
    """

    takeBreak = Signal()
    snooze = Signal()
    dismiss = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        flags = Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint
        super().__init__(parent)
        self.setWindowFlags(flags)
        self.setObjectName("BreakSuggestionPopup")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        self.setWindowOpacity(0.95)

        self._container = QWidget(self)
        self._container.setObjectName("PopupCard")
        shadow = QGraphicsDropShadowEffect(self._container)
        shadow.setBlurRadius(24)
        shadow.setColor(QColor(0, 0, 0, 140))
        shadow.setOffset(0, 10)
        self._container.setGraphicsEffect(shadow)

        self._suggestion: Suggestion | None = None

        self._title_label = QLabel()
        self._title_label.setObjectName("SuggestionTitle")
        self._title_label.setStyleSheet("font-weight: bold; font-size: 14px;")

        self._close_button = QToolButton()
        self._close_button.setText("✕")
        self._close_button.setToolTip("Dismiss")
        self._close_button.setAutoRaise(True)

        title_row = QHBoxLayout()
        title_row.addWidget(self._title_label)
        title_row.addStretch()
        title_row.addWidget(self._close_button)

        self._message_label = QLabel()
        self._message_label.setWordWrap(True)
        self._message_label.setObjectName("SuggestionMessage")
        self._message_label.setMaximumWidth(360)

        self._subtitle_label = QLabel()
        self._subtitle_label.setWordWrap(True)
        self._subtitle_label.setObjectName("SuggestionSubtitle")

        self._stats_label = QLabel()
        self._stats_label.setObjectName("SuggestionStats")

        self._ideas_label = QLabel()
        self._ideas_label.setWordWrap(True)
        self._ideas_label.setObjectName("SuggestionIdeas")

        self._snooze_button = QPushButton()
        self._break_button = QPushButton()
        self._break_button.setDefault(True)
        for button in (self._snooze_button, self._break_button):
            button.setCursor(Qt.CursorShape.PointingHandCursor)
            button.setMinimumHeight(32)

        actions_layout = QHBoxLayout()
        actions_layout.setContentsMargins(0, 6, 0, 0)
        actions_layout.setSpacing(10)
        actions_layout.addStretch()
        actions_layout.addWidget(self._snooze_button)
        actions_layout.addWidget(self._break_button)

        layout = QVBoxLayout(self._container)
        layout.setContentsMargins(14, 10, 14, 12)
        layout.setSpacing(4)
        layout.addLayout(title_row)
        layout.addWidget(self._message_label)
        layout.addWidget(self._subtitle_label)
        layout.addWidget(self._stats_label)
        layout.addWidget(self._ideas_label)
        layout.addLayout(actions_layout)

        base_layout = QHBoxLayout(self)
        base_layout.setContentsMargins(0, 0, 0, 0)
        base_layout.addWidget(self._container)
        self.setMinimumWidth(340)
        self.setMaximumWidth(460)

        self._break_button.clicked.connect(lambda: self._decide(self.takeBreak))  # type: ignore[arg-type]
        self._snooze_button.clicked.connect(lambda: self._decide(self.snooze))  # type: ignore[arg-type]
        self._close_button.clicked.connect(lambda: self._decide(self.dismiss))  # type: ignore[arg-type]

    def show_for(self, suggestion: Suggestion) -> None:
        """Populate the popup with suggestion data and display it."""
        self._suggestion = suggestion
        self._title_label.setText(suggestion.title)
        self._message_label.setText(suggestion.message)
        self._subtitle_label.setText(suggestion.subtitle or "")
        self._subtitle_label.setVisible(bool(suggestion.subtitle))
        self._stats_label.setText(f"Focused for {suggestion.focus_duration_minutes} min")
        self._stats_label.setVisible(suggestion.show_focus_stats)
        ideas = ", ".join(f"{idea.label} ({idea.duration_minutes} min)" for idea in suggestion.break_ideas)
        self._ideas_label.setText(f"Ideas: {ideas}" if ideas else "")
        self._ideas_label.setVisible(bool(ideas))
        self._snooze_button.setText(suggestion.snooze_label)
        self._break_button.setText(suggestion.break_label)
        self._apply_style(suggestion.intensity_level)
        self.adjustSize()
        self._position_bottom_right()
        self.show()

    def withdraw(self) -> None:
        """Hide without reporting a decision."""
        self._suggestion = None
        self.hide()

    def _decide(self, signal) -> None:
        if self._suggestion is None:
            return
        self._suggestion = None
        self.hide()
        signal.emit()

    def _apply_style(self, level: IntensityLevel) -> None:
        accent = _ACCENT_COLORS.get(level, "#2847ef")
        self.setStyleSheet(
            f"""
            QWidget#PopupCard {{
                background-color: rgba(24, 24, 28, 0.85);
                color: white;
                border-radius: 12px;
                border-left: 4px solid {accent};
            }}
            QWidget#PopupCard QLabel {{
                color: rgba(255, 255, 255, 0.85);
            }}
            QWidget#PopupCard QLabel#SuggestionTitle {{
                color: white;
            }}
            QWidget#PopupCard QPushButton {{
                background-color: rgba(255, 255, 255, 0.12);
                color: white;
                border-radius: 8px;
                padding: 4px 14px;
            }}
            QWidget#PopupCard QPushButton:default {{
                background-color: {accent};
                color: #18181c;
            }}
            """
        )

    def _position_bottom_right(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.availableGeometry()
        x = geometry.right() - self.width() - 20
        y = geometry.bottom() - self.height() - 20
        self.move(QPoint(x, y))

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if event.key() == Qt.Key.Key_Escape:
            self._decide(self.dismiss)
            return
        super().keyPressEvent(event)

    def closeEvent(self, event) -> None:  # noqa: N802
        # Closing the window counts as a dismissal if nothing was chosen yet.
        if self._suggestion is not None:
            self._suggestion = None
            self.dismiss.emit()
        super().closeEvent(event)
