"""
In-memory log of suggestion outcomes for the current process.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional

from focus_guard.config import IntensityLevel

MAX_RECORDS = 50


class BreakOutcome(Enum):
    SUGGESTED = "suggested"
    TAKEN = "taken"
    SNOOZED = "snoozed"
    DISMISSED = "dismissed"


@dataclass(frozen=True)
class BreakRecord:
    outcome: BreakOutcome
    focus_minutes: int
    intensity: IntensityLevel
    recorded_at: float
    break_minutes: Optional[float] = None


class BreakHistory:
    """Bounded record of recent outcomes; older entries fall off the front."""

    def __init__(self, max_records: int = MAX_RECORDS) -> None:
        self._records: Deque[BreakRecord] = deque(maxlen=max_records)
        self._suggested = 0
        self._taken = 0

    def record(self, record: BreakRecord) -> None:
        self._records.append(record)
        if record.outcome is BreakOutcome.SUGGESTED:
            self._suggested += 1
        elif record.outcome is BreakOutcome.TAKEN:
            self._taken += 1

    @property
    def records(self) -> List[BreakRecord]:
        return list(self._records)

    @property
    def breaks_suggested(self) -> int:
        return self._suggested

    @property
    def breaks_accepted(self) -> int:
        return self._taken

    @property
    def acceptance_rate(self) -> float:
        if self._suggested == 0:
            return 0.0
        return self._taken / self._suggested

    def encouragement_message(self) -> str:
        rate = self.acceptance_rate if self._suggested else 1.0
        if rate > 0.7:
            return "You're doing great at taking care of your brain! \U0001F31F"
        if rate > 0.4:
            return "Remember: breaks aren't weakness, they're brain maintenance! \U0001F499"
        return "Your brain is precious. Please consider taking that break. \U0001F4AD"
