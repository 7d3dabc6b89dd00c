import pytest

from watersense.classifier import classify, classify_station
from watersense.models import Station, Status


@pytest.mark.parametrize("level, prev_level, expected", [
    (1.10, 1.10, Status.OK),
    (1.25, 1.10, Status.ALERT),
    (0.95, 0.80, Status.WATCH),
    (1.20, 1.20, Status.ALERT),
    (1.19, 1.10, Status.OK),
    (0.50, 0.90, Status.OK),
    (0.00, 0.00, Status.OK),
])
def test_classify(level, prev_level, expected):
    assert classify(level, prev_level) == expected


def test_alert_wins_over_surge():
    # Rise of 0.4 qualifies as a surge but the absolute level is above the threshold
    assert classify(1.30, 0.90) == Status.ALERT


def test_watch_threshold_is_three_quarters_of_surge_per_tick():
    assert classify(0.92, 0.80) == Status.WATCH
    assert classify(0.91, 0.80) == Status.OK


def test_custom_thresholds():
    assert classify(1.0, 1.0, alert_level=1.0) == Status.ALERT
    assert classify(0.85, 0.80, surge_per_tick=0.05) == Status.WATCH


def test_classification_is_repeatable():
    results = {classify(1.05, 0.90) for _ in range(20)}
    assert results == {Status.WATCH}


def test_classify_station_sets_status():
    station = Station(id="S1", name="Upstream", level=1.25, prev_level=1.10)
    assert classify_station(station).status == Status.ALERT


def test_classify_station_leaves_input_untouched():
    station = Station(id="S1", name="Upstream", level=0.95, prev_level=0.80)
    classified = classify_station(station)

    assert classified.status == Status.WATCH
    assert station.status == Status.OK
