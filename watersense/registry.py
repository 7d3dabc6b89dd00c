from dataclasses import replace
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from watersense.config import PARAMETERS, SERIES_SIZE
from watersense.models import AlertEvent, Snapshot, Station, Status
from watersense.random_source import RandomSource
from watersense.series import SeriesBuffer
from watersense.utils import round2, setup_logger

logger = setup_logger("registry")


class StationRegistry:
    """
    Authoritative station records and their series, keyed by station id.

    The fleet is fixed once initialized: stations are replaced in place by
    the running cycle but never added or removed.
    """

    def __init__(self, rng: Optional[RandomSource] = None,
                 initial_range=PARAMETERS['level']['initial_range'],
                 series_size: int = SERIES_SIZE):
        self.rng = rng or RandomSource()
        self.initial_range = initial_range
        self.series_size = series_size
        self._stations: Dict[str, Station] = {}
        self.series = SeriesBuffer([], series_size)

    def initialize(self, descriptors: Sequence[Mapping[str, str]]):
        """Create every station with a random starting level and an empty series."""
        stations: Dict[str, Station] = {}
        for descriptor in descriptors:
            station_id = descriptor['id']
            if station_id in stations:
                raise ValueError(f"Duplicate station id: {station_id}")
            level = round2(self.rng.uniform(*self.initial_range))
            stations[station_id] = Station(
                id=station_id,
                name=descriptor['name'],
                level=level,
                prev_level=level,
                status=Status.OK,
            )
        self._stations = stations
        self.series = SeriesBuffer(stations.keys(), self.series_size)
        logger.info(f"Registry initialized with {len(stations)} stations")

    def __len__(self) -> int:
        return len(self._stations)

    def __iter__(self) -> Iterator[Station]:
        return iter(self._stations.values())

    def get(self, station_id: str) -> Station:
        return self._stations[station_id]

    def ids(self) -> List[str]:
        return list(self._stations)

    def commit(self, stations: Iterable[Station]):
        """Replace station records; nothing is replaced if any id is unknown."""
        stations = list(stations)
        for station in stations:
            if station.id not in self._stations:
                raise KeyError(f"Unknown station: {station.id}")
        for station in stations:
            self._stations[station.id] = station

    def snapshot(self, cycle: int = 0, last_updated: Optional[datetime] = None,
                 alert_count: int = 0, recent_alerts: Iterable[AlertEvent] = ()) -> Snapshot:
        return Snapshot(
            cycle=cycle,
            last_updated=last_updated,
            stations=tuple(replace(station) for station in self._stations.values()),
            series=MappingProxyType(self.series.frozen()),
            alert_count=alert_count,
            recent_alerts=tuple(recent_alerts),
        )
