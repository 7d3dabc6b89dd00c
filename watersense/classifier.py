from dataclasses import replace

from watersense.config import ALERT_LEVEL, SURGE_PER_TICK, WATCH_FACTOR
from watersense.models import Station, Status


def classify(level: float, prev_level: float,
             alert_level: float = ALERT_LEVEL,
             surge_per_tick: float = SURGE_PER_TICK) -> Status:
    """
    Status for a reading and the reading one cycle earlier.

    The absolute threshold wins over the surge rule, so a station at or
    above ``alert_level`` is never reported as a watch.
    """
    if level >= alert_level:
        return Status.ALERT
    if (level - prev_level) >= surge_per_tick * WATCH_FACTOR:
        return Status.WATCH
    return Status.OK


def classify_station(station: Station, alert_level: float = ALERT_LEVEL,
                     surge_per_tick: float = SURGE_PER_TICK) -> Station:
    """Return a copy of ``station`` carrying its classified status."""
    return replace(
        station,
        status=classify(station.level, station.prev_level, alert_level, surge_per_tick),
    )
