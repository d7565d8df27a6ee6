import os
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

os.environ.setdefault("FOCUS_GUARD_HOME", tempfile.mkdtemp(prefix="focus-guard-tests-"))

import pytest
from PySide6.QtCore import QCoreApplication

from focus_guard.config import EngineConfig
from focus_guard.event_source import SimulatedEventSource
from focus_guard.models import Suggestion
from focus_guard.protection import HyperfocusProtection
from focus_guard.ticker import VirtualClock


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@dataclass
class EngineHarness:
    clock: VirtualClock
    source: SimulatedEventSource
    protection: HyperfocusProtection
    suggestions: List[Tuple[float, Suggestion]] = field(default_factory=list)
    taken: List[Tuple[int, str]] = field(default_factory=list)
    snoozed: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.protection.suggestionReady.connect(
            lambda suggestion: self.suggestions.append((self.clock.now(), suggestion))
        )
        self.protection.breakTaken.connect(lambda minutes, kind: self.taken.append((minutes, kind)))
        self.protection.breakSnoozed.connect(self.snoozed.append)

    def work_for(self, seconds: float, pulse_every: float = 5.0) -> None:
        """Emit an activity pulse every ``pulse_every`` seconds, ending with one at the final instant."""
        elapsed = 0.0
        while elapsed < seconds:
            self.source.emit_activity()
            step = min(pulse_every, seconds - elapsed)
            self.clock.advance(step)
            elapsed += step
        self.source.emit_activity()

    def pause(self, seconds: float) -> None:
        self.clock.advance(seconds)

    @property
    def last_suggestion(self) -> Optional[Suggestion]:
        return self.suggestions[-1][1] if self.suggestions else None


@pytest.fixture
def make_harness():
    created: List[EngineHarness] = []

    def factory(config: Optional[EngineConfig] = None, *, start: bool = True) -> EngineHarness:
        clock = VirtualClock()
        source = SimulatedEventSource()
        protection = HyperfocusProtection(
            config or EngineConfig(),
            event_source=source,
            clock=clock,
            ticker_factory=clock.create_ticker,
        )
        harness = EngineHarness(clock=clock, source=source, protection=protection)
        if start:
            protection.start()
        created.append(harness)
        return harness

    yield factory

    for harness in created:
        harness.protection.shutdown()
