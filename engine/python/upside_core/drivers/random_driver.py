"""Random input driver - mashes controls at a configurable rate."""

import random
from typing import Optional

from upside_core.driver import InputDriver
from upside_core.session import InputAction, Snapshot


class RandomInputDriver(InputDriver):
    """Emits a uniformly random action on a fraction of frames.

    Useful for soak-testing the session: it exercises every action, the
    drop timer, line clears and game over without any strategy.
    """

    ACTIONS = list(InputAction)

    def __init__(self, seed: Optional[int] = None, action_probability: float = 0.2):
        """Initialize random driver.

        Args:
            seed: Random seed for reproducibility (optional)
            action_probability: Chance of acting on any given frame
        """
        super().__init__(name="Random")
        self.rng = random.Random(seed)
        self.action_probability = action_probability

    def select_action(self, snapshot: Snapshot) -> Optional[InputAction]:
        if self.rng.random() >= self.action_probability:
            return None
        return self.rng.choice(self.ACTIONS)
