import pytest

from watersense.models import Station, Status
from watersense.random_source import RandomSource
from watersense.registry import StationRegistry

from tests.conftest import STATIONS


def test_initialize_sets_levels_in_range():
    registry = StationRegistry(rng=RandomSource(11))
    registry.initialize(STATIONS)

    assert len(registry) == 3
    assert registry.ids() == ["S1", "S2", "S3"]
    for station in registry:
        assert 0.7 <= station.level <= 1.1
        assert station.level == round(station.level, 2)
        assert station.prev_level == station.level
        assert station.status == Status.OK
        assert registry.series.points(station.id) == ()


def test_duplicate_ids_rejected():
    registry = StationRegistry(rng=RandomSource(1))
    with pytest.raises(ValueError):
        registry.initialize([{"id": "S1", "name": "A"}, {"id": "S1", "name": "B"}])


def test_commit_unknown_station():
    registry = StationRegistry(rng=RandomSource(1))
    registry.initialize(STATIONS)
    before = registry.get("S1").level
    with pytest.raises(KeyError):
        registry.commit([Station(id="S1", name="Upstream", level=9.0), Station(id="X", name="Unknown")])
    assert registry.get("S1").level == before


def test_snapshot_is_detached_from_registry():
    registry = StationRegistry(rng=RandomSource(5))
    registry.initialize(STATIONS)
    snapshot = registry.snapshot()
    before = snapshot.station("S1").level

    registry.get("S1").level = 5.0

    assert snapshot.station("S1").level == before
    assert snapshot.station_count == 3
    with pytest.raises(TypeError):
        snapshot.series["S1"] = ()
