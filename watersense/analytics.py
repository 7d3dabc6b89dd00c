from typing import Any, Dict, List

import pandas as pd

from watersense.models import Snapshot
from watersense.utils import calculate_moving_stats, round2


def series_frame(snapshot: Snapshot) -> pd.DataFrame:
    """
    Readings of every station as columns, indexed by cycle timestamp.

    Stations without a point at some timestamp get NaN there.
    """
    columns = {
        station_id: pd.Series(
            [point.value for point in points],
            index=pd.DatetimeIndex([point.timestamp for point in points]),
            dtype=float,
        )
        for station_id, points in snapshot.series.items()
        if points
    }
    if not columns:
        return pd.DataFrame()
    return pd.DataFrame(columns).sort_index()


def average_trend(snapshot: Snapshot) -> List[Dict[str, Any]]:
    """
    Fleet-wide mean reading per timestamp.

    Missing readings are excluded from the mean, and a timestamp where no
    station has a reading is dropped rather than reported.
    """
    frame = series_frame(snapshot)
    if frame.empty:
        return []
    mean = frame.mean(axis=1, skipna=True).dropna()
    return [
        {"timestamp": timestamp.isoformat(), "value": round2(float(value))}
        for timestamp, value in mean.items()
    ]


def station_summary(snapshot: Snapshot, window_size: int = 5) -> List[Dict[str, Any]]:
    """Average, maximum, minimum and trend per station over its series window."""
    summaries = []
    for station in snapshot.stations:
        values = [point.value for point in snapshot.series.get(station.id, ())]
        if not values:
            summaries.append({
                "station_id": station.id,
                "data_points": 0,
                "average": None,
                "maximum": None,
                "minimum": None,
                "moving_avg": None,
                "trend": "insufficient_data",
            })
            continue
        readings = pd.Series(values, dtype=float)
        stats = calculate_moving_stats(readings.to_numpy(), window_size)
        summaries.append({
            "station_id": station.id,
            "data_points": len(readings),
            "average": round2(float(readings.mean())),
            "maximum": round2(float(readings.max())),
            "minimum": round2(float(readings.min())),
            "moving_avg": stats['moving_avg'],
            "trend": stats['trend'],
        })
    return summaries
