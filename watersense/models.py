from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class Status(str, Enum):
    OK = "ok"
    WATCH = "watch"
    ALERT = "alert"


@dataclass
class Station:
    """A monitored water-level station and its live fields."""
    id: str
    name: str
    level: float = 0.0
    prev_level: float = 0.0
    online: bool = True
    status: Status = Status.OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "prev_level": self.prev_level,
            "online": self.online,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AlertEvent:
    """A watch or alert condition detected for one station in one cycle."""
    timestamp: datetime
    station_id: str
    station_name: str
    kind: Status
    level: float
    delta: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "station_id": self.station_id,
            "station_name": self.station_name,
            "kind": self.kind.value,
            "level": self.level,
            "delta": self.delta,
        }


@dataclass(frozen=True)
class SeriesPoint:
    timestamp: datetime
    value: float
    status: Status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "value": self.value,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class Snapshot:
    """
    Read-only view of the engine state published after a cycle.

    Stations are copies and series are tuples, so renderers holding a
    snapshot never observe a later cycle's mutations.
    """
    cycle: int
    last_updated: Optional[datetime]
    stations: Tuple[Station, ...]
    series: Mapping[str, Tuple[SeriesPoint, ...]] = field(default_factory=lambda: MappingProxyType({}))
    alert_count: int = 0
    recent_alerts: Tuple[AlertEvent, ...] = ()

    @property
    def station_count(self) -> int:
        return len(self.stations)

    @property
    def online_count(self) -> int:
        return sum(1 for station in self.stations if station.online)

    def station(self, station_id: str) -> Optional[Station]:
        for station in self.stations:
            if station.id == station_id:
                return station
        return None

    def stats(self) -> Dict[str, Any]:
        return {
            "cycle": self.cycle,
            "stations": self.station_count,
            "online": self.online_count,
            "alerts": self.alert_count,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats(),
            "stations": [station.to_dict() for station in self.stations],
            "series": {
                station_id: [point.to_dict() for point in points]
                for station_id, points in self.series.items()
            },
            "recent_alerts": [alert.to_dict() for alert in self.recent_alerts],
        }
