"""
Hyperfocus protection: activity tracking, focus sessions and break suggestions.
"""

__all__ = [
    "activity_monitor",
    "app",
    "break_engine",
    "config",
    "event_source",
    "history",
    "logger",
    "models",
    "protection",
    "session_tracker",
    "settings",
    "suggestion_copy",
    "suggestion_popup",
    "ticker",
]
