# rng.py
"""
Random number policy for the simulation.

Every random draw in the simulation (placement, color, direction) goes
through a RandomSource that is created once and passed to whoever needs it.
Seeding it makes a run fully reproducible.
"""
import logging
import numpy as np
from typing import Optional

# --- Data Contracts ---
#
# class RandomSource:
#   - __init__(self, seed: Optional[int] = None):
#     - Inputs:
#       - seed: Master seed. None draws fresh entropy from the OS.
#     - Side Effects: Creates a dedicated numpy Generator.
#
#   - integer(self, low: int, high: int) -> int:
#     - Outputs: A uniformly distributed int in [low, high).
#     - Invariants: Raises ValueError if low >= high.
#
#   - boolean(self) -> bool:
#     - Outputs: True or False with equal probability.

class RandomSource:
    """
    Supplies uniformly distributed integers and booleans from one seeded RNG.
    """
    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        # All randomness is controlled by a single master seed.
        self.rng = np.random.default_rng(seed)
        logging.debug(f"RandomSource created with seed {seed}.")

    def integer(self, low: int, high: int) -> int:
        """Returns an int drawn uniformly from [low, high)."""
        if low >= high:
            raise ValueError(f"Empty integer range [{low}, {high}).")
        return int(self.rng.integers(low, high))

    def boolean(self) -> bool:
        """Returns a fair coin flip."""
        return bool(self.rng.integers(0, 2))
