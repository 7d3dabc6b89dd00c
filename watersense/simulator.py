from dataclasses import replace
from typing import Optional

from watersense.config import PARAMETERS
from watersense.models import Station
from watersense.random_source import RandomSource
from watersense.utils import round2

SIMULATION = PARAMETERS['simulation']


class ReadingSimulator:
    """
    Biased random walk with occasional one-sided surges.

    Each step drifts the level gently downward on average and, with a small
    probability, adds an upward jump modelling a rainfall event.
    """

    def __init__(self,
                 rng: Optional[RandomSource] = None,
                 drift_bias: float = SIMULATION['drift_bias'],
                 drift_scale: float = SIMULATION['drift_scale'],
                 surge_probability: float = SIMULATION['surge_probability'],
                 surge_max: float = SIMULATION['surge_max'],
                 online_probability: float = SIMULATION['online_probability']):
        self.rng = rng or RandomSource()
        self.drift_bias = drift_bias
        self.drift_scale = drift_scale
        self.surge_probability = surge_probability
        self.surge_max = surge_max
        self.online_probability = online_probability

    def next_delta(self) -> float:
        """Draw one step of the walk."""
        delta = (self.rng.random() - self.drift_bias) * self.drift_scale
        if self.rng.chance(self.surge_probability):
            delta += self.rng.random() * self.surge_max
        return delta

    def advance(self, station: Station) -> Station:
        """Return the station moved forward by one cycle; the input is not modified."""
        delta = self.next_delta()
        return replace(
            station,
            prev_level=station.level,
            level=max(0.0, round2(station.level + delta)),
            online=self.rng.chance(self.online_probability),
        )
