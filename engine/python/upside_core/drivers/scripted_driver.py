"""Scripted input driver - replays a fixed action sequence."""

from typing import Iterable, List, Optional, Union

from upside_core.driver import InputDriver
from upside_core.session import InputAction, Snapshot


class ScriptedInputDriver(InputDriver):
    """Plays back one entry per frame; None entries skip a frame.

    Once the script runs out the driver sends nothing, or starts over when
    ``loop`` is set.
    """

    def __init__(self, actions: Iterable[Union[InputAction, str, None]], loop: bool = False):
        super().__init__(name="Scripted")
        self.actions: List[Optional[InputAction]] = [
            InputAction.parse(a) if a is not None else None for a in actions
        ]
        self.loop = loop
        self.position = 0

    def on_episode_start(self, seed: int) -> None:
        super().on_episode_start(seed)
        self.position = 0

    def select_action(self, snapshot: Snapshot) -> Optional[InputAction]:
        if self.position >= len(self.actions):
            if not self.loop or not self.actions:
                return None
            self.position = 0
        action = self.actions[self.position]
        self.position += 1
        return action
