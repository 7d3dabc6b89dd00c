import json
from pathlib import Path
from typing import Dict, List, Union

from watersense.utils import setup_logger

logger = setup_logger("loader")


class StationLoadError(Exception):
    """The station list could not be loaded; the engine must not start."""


def load_stations(path: Union[str, Path]) -> List[Dict[str, str]]:
    """
    Load the ordered station descriptors from a JSON file.

    The file holds a list of objects with at least ``id`` and ``name``;
    any extra keys are ignored.

    Raises:
        StationLoadError: if the file is missing, unreadable, malformed,
            empty, or lists the same id twice.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError:
        raise StationLoadError(f"Station file not found at: {path}")
    except json.JSONDecodeError as e:
        raise StationLoadError(f"Invalid JSON format in station file: {e}")
    except OSError as e:
        raise StationLoadError(f"Error reading station file: {e}")

    if not isinstance(raw, list) or not raw:
        raise StationLoadError("Station file must contain a non-empty list")

    descriptors = []
    seen = set()
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict) or 'id' not in entry or 'name' not in entry:
            raise StationLoadError(f"Station entry {index} needs 'id' and 'name'")
        station_id = str(entry['id'])
        if station_id in seen:
            raise StationLoadError(f"Duplicate station id: {station_id}")
        seen.add(station_id)
        descriptors.append({'id': station_id, 'name': str(entry['name'])})

    logger.info(f"Loaded {len(descriptors)} stations from {path}")
    return descriptors
