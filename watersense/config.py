import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


# Project structure
PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent
DATA_DIR = PACKAGE_DIR / "data"
LOGS_DIR = Path(os.getenv("WATERSENSE_LOG_DIR", PROJECT_ROOT / "logs"))
STATIONS_FILE = Path(os.getenv("WATERSENSE_STATIONS_FILE", DATA_DIR / "sample_stations.json"))


# Thresholds (meters)
ALERT_LEVEL = float(os.getenv("WATERSENSE_ALERT_LEVEL", "1.20"))
SURGE_PER_TICK = float(os.getenv("WATERSENSE_SURGE_PER_TICK", "0.15"))
WATCH_FACTOR = 0.75  # fraction of SURGE_PER_TICK that counts as a surge

# Buffers
ALERT_LOG_SIZE = 200
SERIES_SIZE = 60  # ~5 minutes at the default period
RECENT_ALERTS = 10

# Scheduling
CYCLE_PERIOD_MS = int(os.getenv("WATERSENSE_CYCLE_PERIOD_MS", "5000"))

# Simulation parameters
PARAMETERS = {
    'level': {
        'initial_range': (0.7, 1.1),
    },
    'simulation': {
        'drift_bias': 0.45,
        'drift_scale': 0.08,
        'surge_probability': 0.08,
        'surge_max': 0.18,
        'online_probability': 0.98,
    }
}
