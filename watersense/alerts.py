from collections import deque
from datetime import datetime
from typing import Deque, Iterable, Iterator, List, Optional, Tuple

from watersense.config import ALERT_LOG_SIZE, RECENT_ALERTS
from watersense.models import AlertEvent, Station, Status
from watersense.utils import round2

ALERTING_STATUSES = (Status.WATCH, Status.ALERT)


class AlertLog:
    """Most-recent-first alert history bounded by count, not by time."""

    def __init__(self, size: int = ALERT_LOG_SIZE):
        if size < 1:
            raise ValueError("Alert log size must be positive")
        self.size = size
        self._events: Deque[AlertEvent] = deque(maxlen=size)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[AlertEvent]:
        return iter(self._events)

    def prepend(self, events: List[AlertEvent]):
        """
        Put ``events`` at the head, keeping their order.

        A full deque drops from the tail on ``appendleft``, so the oldest
        entries are evicted first.
        """
        self._events.extendleft(reversed(events))

    def recent(self, limit: int = RECENT_ALERTS) -> Tuple[AlertEvent, ...]:
        return tuple(event for _, event in zip(range(max(limit, 0)), self._events))


def detect_alerts(stations: Iterable[Station], timestamp: datetime) -> List[AlertEvent]:
    """One event per station currently in watch or alert, in station order."""
    return [
        AlertEvent(
            timestamp=timestamp,
            station_id=station.id,
            station_name=station.name,
            kind=station.status,
            level=station.level,
            delta=round2(station.level - station.prev_level),
        )
        for station in stations
        if station.status in ALERTING_STATUSES
    ]


class AlertRecorder:
    def __init__(self, log: Optional[AlertLog] = None):
        self.log = log if log is not None else AlertLog()

    def detect(self, stations: Iterable[Station], timestamp: datetime,
               bootstrap: bool = False) -> List[AlertEvent]:
        """This cycle's alerts, not yet in the log; the bootstrap cycle has none."""
        if bootstrap:
            return []
        return detect_alerts(stations, timestamp)

    def commit(self, events: List[AlertEvent]):
        if events:
            self.log.prepend(events)
