"""
Data models for the results of a bot vs bot simulation.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np


@dataclass
class SimulationSummary:
    """Distribution of match spreads over a batch of simulated games."""
    distribution: List[Tuple[int, int]] = field(default_factory=list)
    games: int = 0
    mean: float = 0.0
    std_dev: float = 0.0

    @classmethod
    def from_spreads(cls, spreads: Dict[int, int]):
        """
        Create a summary from a map of spread to the number of games that ended with it.

        The mean and the population standard deviation are weighted by
        those counts.
        """
        distribution = sorted(spreads.items())
        if not distribution:
            return cls()

        values = np.array([spread for spread, _ in distribution], dtype=float)
        counts = np.array([count for _, count in distribution], dtype=float)
        mean = np.average(values, weights=counts)
        variance = np.average((values - mean) ** 2, weights=counts)

        return cls(
            distribution=distribution,
            games=int(counts.sum()),
            mean=float(mean),
            std_dev=float(np.sqrt(variance))
        )
