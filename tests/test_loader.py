import json

import pytest

from watersense.config import STATIONS_FILE
from watersense.loader import StationLoadError, load_stations


def write(tmp_path, content):
    path = tmp_path / "stations.json"
    path.write_text(content if isinstance(content, str) else json.dumps(content))
    return path


def test_load_keeps_order_and_ignores_extra_keys(tmp_path):
    path = write(tmp_path, [
        {"id": "B", "name": "Second", "lat": 14.0},
        {"id": "A", "name": "First"},
    ])
    assert load_stations(path) == [
        {"id": "B", "name": "Second"},
        {"id": "A", "name": "First"},
    ]


def test_numeric_ids_become_strings(tmp_path):
    path = write(tmp_path, [{"id": 7, "name": "Seven"}])
    assert load_stations(path)[0]["id"] == "7"


def test_bundled_sample_loads():
    stations = load_stations(STATIONS_FILE)
    assert len(stations) >= 1


@pytest.mark.parametrize("content", [
    "not json",
    [],
    {"id": "A", "name": "Not a list"},
    [{"id": "A"}],
    [{"id": "A", "name": "One"}, {"id": "A", "name": "Two"}],
])
def test_invalid_files(tmp_path, content):
    with pytest.raises(StationLoadError):
        load_stations(write(tmp_path, content))


def test_missing_file(tmp_path):
    with pytest.raises(StationLoadError):
        load_stations(tmp_path / "missing.json")
