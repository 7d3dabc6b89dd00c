from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request
from flask_restful import Api, Resource

from watersense.analytics import average_trend, station_summary
from watersense.config import RECENT_ALERTS
from watersense.models import Snapshot

SnapshotSource = Callable[[], Optional[Snapshot]]

NO_DATA = ({
    "success": False,
    "error": "No data available"
}, 503)


class SnapshotResource(Resource):
    """Base for read-only resources over the latest published snapshot."""

    def __init__(self, source: SnapshotSource):
        self.source = source

    def latest(self) -> Optional[Snapshot]:
        return self.source()


class StatsResource(SnapshotResource):
    def get(self):
        """Return station, online and alert counters and the last update time."""
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        return {"success": True, "data": snapshot.stats()}


class StationsResource(SnapshotResource):
    def get(self):
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        return {
            "success": True,
            "data": [station.to_dict() for station in snapshot.stations]
        }


class StationSeriesResource(SnapshotResource):
    def get(self, station_id: str):
        """Return the rolling series of one station, oldest point first."""
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        if station_id not in snapshot.series:
            return {
                "success": False,
                "error": f"Unknown station: {station_id}"
            }, 404
        return {
            "success": True,
            "station_id": station_id,
            "data": [point.to_dict() for point in snapshot.series[station_id]]
        }


class AlertsResource(SnapshotResource):
    def get(self):
        """Return the most recent alerts, newest first."""
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        limit = request.args.get('limit', RECENT_ALERTS, type=int)
        limit = max(1, min(limit, RECENT_ALERTS))
        return {
            "success": True,
            "total": snapshot.alert_count,
            "data": [alert.to_dict() for alert in snapshot.recent_alerts[:limit]]
        }


class TrendResource(SnapshotResource):
    def get(self):
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        return {"success": True, "data": average_trend(snapshot)}


class SummaryResource(SnapshotResource):
    def get(self):
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        return {"success": True, "data": station_summary(snapshot)}


class DashboardResource(SnapshotResource):
    def get(self):
        """Return everything a dashboard needs in one payload."""
        snapshot = self.latest()
        if snapshot is None:
            return NO_DATA
        payload: Dict[str, Any] = snapshot.to_dict()
        payload["trend"] = average_trend(snapshot)
        return {"success": True, "data": payload}


def create_app(source: SnapshotSource) -> Flask:
    """Build the read-only HTTP renderer; ``source`` returns the latest snapshot."""
    app = Flask(__name__)
    api = Api(app)
    kwargs = {"source": source}

    # Register resources
    api.add_resource(DashboardResource, '/snapshot', resource_class_kwargs=kwargs)
    api.add_resource(StatsResource, '/stats', resource_class_kwargs=kwargs)
    api.add_resource(StationsResource, '/stations', resource_class_kwargs=kwargs)
    api.add_resource(StationSeriesResource, '/stations/<string:station_id>/series',
                     resource_class_kwargs=kwargs)
    api.add_resource(AlertsResource, '/alerts', resource_class_kwargs=kwargs)
    api.add_resource(TrendResource, '/trend', resource_class_kwargs=kwargs)
    api.add_resource(SummaryResource, '/summary', resource_class_kwargs=kwargs)

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            "success": False,
            "error": "Resource not found"
        }), 404

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({
            "success": False,
            "error": "Internal server error"
        }), 500

    return app
