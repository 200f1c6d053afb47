import pytest

from gitfit.core.monitor.vibe_monitor import VibeMonitor

from fakes import (
    EventRecorder,
    FakeClock,
    FakeForeground,
    FakeInputSource,
    FakeSampler,
    ImmediateExecutor,
)

# Loop threads wait this long before their first tick, so tests drive
# tick_foreground()/tick_idle() by hand against the fake clock.
NEVER = 3600.0

BASE_CONFIG = {
    "idle_threshold_s": 3.0,
    "grace_period_s": 1.5,
    "workout_trigger_s": 30.0,
    "cpu_threshold_pct": 5.0,
    "cpu_sustained_s": 2.0,
    "cpu_sample_interval_s": 1.0,
}


class Harness:
    def __init__(self, config: dict, executor=None) -> None:
        self.clock = FakeClock()
        self.foreground = FakeForeground()
        self.sampler = FakeSampler()
        self.input = FakeInputSource()
        self.executor = executor or ImmediateExecutor()
        self.recorder = EventRecorder()
        self.monitor = VibeMonitor(
            config={**BASE_CONFIG, **config},
            foreground=self.foreground,
            sampler=self.sampler,
            input_source=self.input,
            clock=self.clock,
            executor=self.executor,
        )
        self.monitor.on_event(self.recorder)

    def start(self, app=None) -> None:
        self.foreground.name = app
        self.monitor.start(poll_interval=NEVER, idle_check_interval=NEVER)

    @property
    def vibe(self):
        return self.monitor.get_state().vibe

    def tick(self) -> None:
        self.monitor.tick_foreground()
        self.monitor.tick_idle()

    def run_until(self, t_end: float, step: float = 0.5) -> list:
        """Advance in `step` increments, ticking both loops; returns (t, vibe) history."""
        history = []
        while self.clock.t < t_end:
            self.clock.advance(step)
            self.tick()
            history.append((self.clock.t, self.vibe))
        return history


@pytest.fixture
def make_harness():
    created = []

    def factory(executor=None, **config) -> Harness:
        h = Harness(config, executor=executor)
        created.append(h)
        return h

    yield factory
    for h in created:
        h.monitor.stop()
