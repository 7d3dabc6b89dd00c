import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Sequence

import numpy as np
from pythonjsonlogger.json import JsonFormatter

from watersense.config import LOGS_DIR


def setup_logger(name: str) -> logging.Logger:
    """Configure JSON logging with rotation."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)

    # Console logs handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(JsonFormatter())
    logger.addHandler(console_handler)

    # File logs handler
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        LOGS_DIR / f"{name}.log",
        maxBytes=1024*1024,
        backupCount=5
    )
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)

    return logger


def round2(value: float) -> float:
    return round(value, 2)


def calculate_moving_stats(values: Sequence[float], window_size: int = 5,
                           stable_threshold: float = 0.01) -> Dict[str, Any]:
    """Moving average and direction of the latest step for a reading window."""
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return {
            "moving_avg": None,
            "trend": "insufficient_data"
        }

    # Pad with edge values so short windows still average over window_size
    padded = np.pad(values, (window_size-1, 0), mode='edge')
    moving_avg = np.convolve(padded, np.ones(window_size)/window_size, mode='valid')[-1]

    if len(values) >= 2:
        slope = values[-1] - values[-2]
        if abs(slope) < stable_threshold:
            trend = "steady"
        elif slope > 0:
            trend = "rising"
        else:
            trend = "falling"
    else:
        trend = "steady"

    return {
        "moving_avg": round2(float(moving_avg)),
        "trend": trend
    }
