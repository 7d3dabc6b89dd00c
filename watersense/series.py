from collections import deque
from datetime import datetime
from typing import Deque, Dict, Iterable, Mapping, Tuple

from watersense.config import SERIES_SIZE
from watersense.models import SeriesPoint, Station


class SeriesBuffer:
    """Fixed-length rolling reading history, one window per station."""

    def __init__(self, station_ids: Iterable[str], size: int = SERIES_SIZE):
        if size < 1:
            raise ValueError("Series size must be positive")
        self.size = size
        self._series: Dict[str, Deque[SeriesPoint]] = {
            station_id: deque(maxlen=size) for station_id in station_ids
        }

    def __len__(self) -> int:
        return len(self._series)

    def __contains__(self, station_id: str) -> bool:
        return station_id in self._series

    def points(self, station_id: str) -> Tuple[SeriesPoint, ...]:
        return tuple(self._series[station_id])

    def points_for(self, stations: Iterable[Station], timestamp: datetime) -> Dict[str, SeriesPoint]:
        """Build one point per station without touching the buffer."""
        points = {}
        for station in stations:
            if station.id not in self._series:
                raise KeyError(f"Unknown station: {station.id}")
            points[station.id] = SeriesPoint(
                timestamp=timestamp, value=station.level, status=station.status
            )
        return points

    def push(self, points: Mapping[str, SeriesPoint]):
        """Append staged points; the deque drops the oldest past ``size``."""
        for station_id, point in points.items():
            self._series[station_id].append(point)

    def frozen(self) -> Mapping[str, Tuple[SeriesPoint, ...]]:
        return {station_id: tuple(points) for station_id, points in self._series.items()}
