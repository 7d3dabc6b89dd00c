from datetime import datetime, timedelta

import pytest

from watersense.models import Station, Status
from watersense.series import SeriesBuffer

T0 = datetime(2024, 1, 1, 12, 0, 0)


def test_append_one_point_per_station():
    buffer = SeriesBuffer(["S1", "S2"])
    stations = [
        Station(id="S1", name="Upstream", level=0.8, status=Status.OK),
        Station(id="S2", name="Midstream", level=1.3, status=Status.ALERT),
    ]
    buffer.push(buffer.points_for(stations, T0))

    assert len(buffer.points("S1")) == 1
    point = buffer.points("S2")[0]
    assert point.value == 1.3
    assert point.status == Status.ALERT
    assert point.timestamp == T0


def test_sliding_window_drops_oldest():
    buffer = SeriesBuffer(["S1"], size=60)
    for index in range(65):
        station = Station(id="S1", name="Upstream", level=index / 100)
        buffer.push(buffer.points_for([station], T0 + timedelta(seconds=5 * index)))

    points = buffer.points("S1")
    assert len(points) == 60
    assert [point.value for point in points] == [index / 100 for index in range(5, 65)]
    assert points[0].timestamp < points[-1].timestamp


def test_frozen_copy_is_detached():
    buffer = SeriesBuffer(["S1"])
    station = Station(id="S1", name="Upstream", level=0.8)
    buffer.push(buffer.points_for([station], T0))
    frozen = buffer.frozen()
    buffer.push(buffer.points_for([station], T0 + timedelta(seconds=5)))

    assert len(frozen["S1"]) == 1
    assert len(buffer.points("S1")) == 2


def test_unknown_station():
    buffer = SeriesBuffer(["S1"])
    with pytest.raises(KeyError):
        buffer.points_for([Station(id="S1", name="Upstream"), Station(id="X", name="Unknown")], T0)
    assert buffer.points("S1") == ()


def test_invalid_size():
    with pytest.raises(ValueError):
        SeriesBuffer(["S1"], size=0)
