"""Base class for headless input drivers.

A driver stands in for the presentation layer's input source: once per frame
it looks at a snapshot and may emit one InputAction. Drivers are used for
simulations and soak tests of the session state machine.
"""

from abc import ABC, abstractmethod
from typing import Optional

from upside_core.session import GameOverEvent, InputAction, Snapshot


class InputDriver(ABC):
    """Abstract source of per-frame input."""

    def __init__(self, name: str):
        """Initialize driver with a name.

        Args:
            name: Human-readable name for this driver
        """
        self.name = name

    @abstractmethod
    def select_action(self, snapshot: Snapshot) -> Optional[InputAction]:
        """Pick the input for this frame.

        Args:
            snapshot: Current session snapshot

        Returns:
            An action, or None to send nothing this frame
        """
        pass

    def on_episode_start(self, seed: int) -> None:
        """Called when a new episode starts.

        Args:
            seed: Random seed for this episode
        """
        pass

    def on_game_over(self, event: GameOverEvent) -> None:
        """Called when the session reports game over."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"
