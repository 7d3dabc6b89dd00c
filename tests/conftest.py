from datetime import datetime, timedelta
from typing import Dict, List

import pytest

from watersense.alerts import AlertLog, AlertRecorder
from watersense.engine import CycleScheduler, EngineState
from watersense.models import Station
from watersense.random_source import RandomSource
from watersense.registry import StationRegistry

STATIONS = [
    {"id": "S1", "name": "Upstream"},
    {"id": "S2", "name": "Midstream"},
    {"id": "S3", "name": "Downstream"},
]


class FakeClock:
    """Returns a timestamp that moves forward one period per call."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0), step=timedelta(seconds=5)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


class ScriptedSimulator:
    """Sets each station to the next scripted level instead of drawing one."""

    def __init__(self, levels: Dict[str, List[float]], default: float = 0.9):
        self.levels = {station_id: list(values) for station_id, values in levels.items()}
        self.default = default

    def advance(self, station: Station) -> Station:
        queue = self.levels.get(station.id)
        level = queue.pop(0) if queue else self.default
        return Station(
            id=station.id,
            name=station.name,
            level=level,
            prev_level=station.level,
            online=True,
            status=station.status,
        )


def make_state(levels=None, alert_log_size=200, series_size=60, stations=STATIONS) -> EngineState:
    registry = StationRegistry(rng=RandomSource(7), series_size=series_size)
    registry.initialize(stations)
    for station_id, level in (levels or {}).items():
        station = registry.get(station_id)
        station.level = level
        station.prev_level = level
    return EngineState(registry=registry, recorder=AlertRecorder(AlertLog(alert_log_size)))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def no_wait():
    """Wait function that never blocks and never reports a stop."""
    return lambda seconds: False


@pytest.fixture
def make_scheduler(clock, no_wait):
    def factory(state, simulator, **options):
        options.setdefault("clock", clock)
        options.setdefault("wait", no_wait)
        return CycleScheduler(state, simulator, **options)
    return factory
