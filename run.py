import argparse
import json
import sys
from pathlib import Path

from watersense.api import create_app
from watersense.config import CYCLE_PERIOD_MS, STATIONS_FILE
from watersense.engine import create_scheduler
from watersense.loader import StationLoadError, load_stations
from watersense.models import Snapshot
from watersense.utils import setup_logger

logger = setup_logger("watersense")


def print_stats(snapshot: Snapshot):
    print(json.dumps(snapshot.stats()))


def run_engine(stations_file: Path, period_ms: int, seed, cycles):
    descriptors = load_stations(stations_file)
    scheduler = create_scheduler(descriptors, seed=seed, period_ms=period_ms)
    scheduler.subscribe(print_stats)
    try:
        scheduler.run(max_cycles=cycles)
    except KeyboardInterrupt:
        scheduler.stop()


def run_api(stations_file: Path, period_ms: int, seed, port: int):
    descriptors = load_stations(stations_file)
    scheduler = create_scheduler(descriptors, seed=seed, period_ms=period_ms)
    scheduler.run_in_background()
    app = create_app(lambda: scheduler.snapshot)
    try:
        app.run(port=port)
    finally:
        scheduler.stop()


def main():
    parser = argparse.ArgumentParser(description='Run the water-level monitoring simulation')
    parser.add_argument('--stations', type=Path, default=STATIONS_FILE,
                        help='JSON file listing the stations to monitor')
    parser.add_argument('--period-ms', type=int, default=CYCLE_PERIOD_MS,
                        help='Milliseconds between cycles')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for a reproducible simulation')
    parser.add_argument('--cycles', type=int, default=None,
                        help='Stop after this many cycles (bootstrap not counted)')
    parser.add_argument('--api', action='store_true',
                       help='Serve the latest snapshot over HTTP')
    parser.add_argument('--port', type=int, default=5000)

    args = parser.parse_args()

    try:
        if args.api:
            run_api(args.stations, args.period_ms, args.seed, args.port)
        else:
            run_engine(args.stations, args.period_ms, args.seed, args.cycles)
    except StationLoadError as e:
        logger.error(f"Could not load stations, engine not started: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
