"""Game session: lifecycle state machine and per-frame orchestration.

The session is the single owner of the grid, the piece controller, the line
clear engine and the stats. A presentation layer drives it with
``tick(delta_ms)`` once per frame and ``handle_input(action)`` for player
input, and reads everything it needs to draw from ``snapshot()``.
"""

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from upside_core.controller import TOWARD_LOCK, PieceController
from upside_core.grid import Grid
from upside_core.line_clear import LineClearEngine
from upside_core.piece import Piece
from upside_core.rng import PieceFactory
from upside_core.rules import SessionStats

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Externally visible session states."""
    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    CLEARING = "CLEARING"    # Line clear animation owns the clock
    GAME_OVER = "GAME_OVER"


class InputAction(Enum):
    """Player input actions, already mapped from physical controls."""
    MOVE_LEFT = "MOVE_LEFT"
    MOVE_RIGHT = "MOVE_RIGHT"
    MOVE_TOWARD_LOCK = "MOVE_TOWARD_LOCK"  # The "down" key; moves toward row 0
    ROTATE = "ROTATE"
    HARD_DROP = "HARD_DROP"

    @classmethod
    def parse(cls, value: Union[str, "InputAction"]) -> "InputAction":
        """Look up an action by name.

        Accepts "HARD_DROP", "hard_drop" and "hardDrop" alike.
        """
        if isinstance(value, cls):
            return value
        key = str(value).replace("_", "").lower()
        for action in cls:
            if action.name.replace("_", "").lower() == key:
                return action
        raise ValueError(f"Invalid action: {value}")


@dataclass
class GameOverEvent:
    """Final stats delivered to game over listeners."""
    score: int
    level: int
    lines: int


@dataclass
class Snapshot:
    """Read-only view of a session for rendering."""
    state: SessionState
    grid: Grid
    current: Optional[Piece]
    next_piece: Optional[Piece]
    score: int
    level: int
    lines: int
    drop_interval_ms: int
    animation: Dict[str, Any]
    debug_mode: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for serialization."""
        return {
            "state": self.state.value,
            "grid": {
                "w": self.grid.width,
                "h": self.grid.height,
                "rows": self.grid.rows(),
            },
            "current": self.current.to_dict() if self.current else None,
            "next": self.next_piece.to_dict() if self.next_piece else None,
            "stats": {
                "score": self.score,
                "level": self.level,
                "lines": self.lines,
                "drop_interval_ms": self.drop_interval_ms,
            },
            "animation": self.animation,
            "debug_mode": self.debug_mode,
        }


GameOverListener = Callable[[GameOverEvent], None]


class GameSession:
    """One game of upside-down Tetris."""

    def __init__(
        self,
        seed: Optional[int] = None,
        width: int = Grid.WIDTH,
        height: int = Grid.HEIGHT,
        animation_duration_ms: float = LineClearEngine.DURATION_MS,
        glow_duration_ms: float = LineClearEngine.GLOW_DURATION_MS,
        auto_reset: bool = True,
        on_game_over: Optional[GameOverListener] = None,
    ):
        """Initialize the session in the NOT_STARTED state.

        Args:
            seed: Random seed for pieces and debug patterns (None = random)
            width: Grid columns
            height: Grid rows
            animation_duration_ms: Total line clear animation length
            glow_duration_ms: Glow subphase length (rows removed at its end)
            auto_reset: Reset immediately after reporting game over
            on_game_over: Optional listener for game over events
        """
        self.seed = seed
        self.width = width
        self.height = height
        self.animation_duration_ms = animation_duration_ms
        self.glow_duration_ms = glow_duration_ms
        self.auto_reset = auto_reset

        self.factory = PieceFactory(seed, width, height)
        self.debug_rng = random.Random(seed)
        self.debug_mode = False

        self._listeners: List[GameOverListener] = []
        if on_game_over:
            self._listeners.append(on_game_over)

        self.events: List[str] = []
        self.reset()

    # Lifecycle

    def reset(self) -> None:
        """Discard the current game and prepare a fresh one.

        Any in-flight animation is dropped regardless of its phase.
        """
        self.grid = Grid(self.width, self.height)
        self.line_clear = LineClearEngine(self.animation_duration_ms, self.glow_duration_ms)
        self.controller = PieceController(self.grid, self.factory, self.line_clear)
        self.controller.spawn_initial()
        self.stats = SessionStats()

        self.drop_timer_ms = 0.0
        self.pieces_locked = 0
        self.running = False
        self.paused = False
        self.game_over = False
        logger.info("[Session] Reset")

    def start(self) -> bool:
        """Begin play from NOT_STARTED.

        Returns:
            True if the session started
        """
        if self.running or self.game_over:
            return False
        self.running = True
        self.paused = False
        logger.info("[Session] Started")
        return True

    def pause(self) -> bool:
        if self.paused or self.game_over:
            return False
        if not (self.running or self.line_clear.is_clearing):
            return False
        self.paused = True
        logger.info("[Session] Paused")
        return True

    def resume(self) -> bool:
        if not self.paused:
            return False
        self.paused = False
        logger.info("[Session] Resumed")
        return True

    def toggle_pause(self) -> bool:
        """Pause if active, resume if paused. Returns the new paused flag."""
        if self.paused:
            self.resume()
        else:
            self.pause()
        return self.paused

    @property
    def state(self) -> SessionState:
        if self.game_over:
            return SessionState.GAME_OVER
        if self.paused:
            return SessionState.PAUSED
        if self.line_clear.is_clearing:
            return SessionState.CLEARING
        if self.running:
            return SessionState.RUNNING
        return SessionState.NOT_STARTED

    def add_game_over_listener(self, listener: GameOverListener) -> None:
        self._listeners.append(listener)

    def remove_game_over_listener(self, listener: GameOverListener) -> None:
        self._listeners.remove(listener)

    # Per-frame update

    def tick(self, delta_ms: float) -> List[str]:
        """Advance game and animation state.

        Args:
            delta_ms: Milliseconds since the previous tick; negative and
                non-finite values are treated as 0

        Returns:
            Events raised during this tick ("lock", "clear", "clear_done",
            "game_over")
        """
        self.events = []
        if not math.isfinite(delta_ms) or delta_ms < 0:
            logger.debug(f"[Session] Invalid delta {delta_ms} clamped to 0")
            delta_ms = 0

        if self.paused or self.game_over:
            return self.events

        if self.line_clear.is_clearing:
            cleared = self.line_clear.advance(self.grid, delta_ms)
            if cleared is not None:
                points = self.stats.apply_line_clear(cleared)
                self.events.append("clear_done")
                logger.info(
                    f"[Session] Cleared {cleared} line(s) for {points} points: "
                    f"score={self.stats.score}, level={self.stats.level}, lines={self.stats.lines}"
                )
            return self.events

        if not self.running:
            return self.events

        self.drop_timer_ms += delta_ms
        if self.drop_timer_ms >= self.stats.drop_interval_ms:
            if not self.controller.move(0, TOWARD_LOCK):
                self._after_lock(self.controller.lock())
            self.drop_timer_ms = 0

        return self.events

    # Input

    def handle_input(self, action: Union[InputAction, str]) -> bool:
        """Apply one player action.

        Args:
            action: InputAction or its name

        Returns:
            True if the action changed the piece; False if it was rejected or
            the session is not RUNNING

        Raises:
            ValueError: If a string action is not a known InputAction
        """
        action = InputAction.parse(action)
        self.events = []
        if self.state is not SessionState.RUNNING:
            return False

        if action is InputAction.MOVE_LEFT:
            return self.controller.move(-1, 0)
        elif action is InputAction.MOVE_RIGHT:
            return self.controller.move(1, 0)
        elif action is InputAction.MOVE_TOWARD_LOCK:
            return self.controller.move(0, TOWARD_LOCK)
        elif action is InputAction.ROTATE:
            return self.controller.rotate()
        else:
            steps, placeable = self.controller.hard_drop()
            self.stats.add_hard_drop(steps)
            self.events.append("hard_drop")
            self._after_lock(placeable)
            return True

    def _after_lock(self, placeable: bool) -> None:
        self.pieces_locked += 1
        self.events.append("lock")
        if self.line_clear.is_clearing:
            self.events.append("clear")
        if not placeable:
            self._end_game()

    def _end_game(self) -> None:
        self.game_over = True
        self.running = False
        self.events.append("game_over")
        event = GameOverEvent(self.stats.score, self.stats.level, self.stats.lines)
        logger.info(f"[Session] Game over: score={event.score}, lines={event.lines}")

        for listener in list(self._listeners):
            listener(event)

        if self.auto_reset:
            self.reset()

    # Read-only views

    @property
    def current_piece(self) -> Optional[Piece]:
        return self.controller.current

    @property
    def next_piece(self) -> Optional[Piece]:
        return self.controller.next_piece

    @property
    def score(self) -> int:
        return self.stats.score

    @property
    def level(self) -> int:
        return self.stats.level

    @property
    def lines(self) -> int:
        return self.stats.lines

    def snapshot(self) -> Snapshot:
        """Build a copy of everything a renderer needs."""
        current = self.controller.current
        next_piece = self.controller.next_piece
        return Snapshot(
            state=self.state,
            grid=self.grid.copy(),
            current=current.copy() if current else None,
            next_piece=next_piece.copy() if next_piece else None,
            score=self.stats.score,
            level=self.stats.level,
            lines=self.stats.lines,
            drop_interval_ms=self.stats.drop_interval_ms,
            animation=self.line_clear.to_dict(),
            debug_mode=self.debug_mode,
        )

    # Debug helpers

    def toggle_debug(self) -> bool:
        self.debug_mode = not self.debug_mode
        logger.info(f"[Session] Debug mode {'ON' if self.debug_mode else 'OFF'}")
        return self.debug_mode

    def _random_color(self) -> int:
        return self.debug_rng.randint(1, 7)

    def fill_test_rows(self) -> None:
        """Fill rows 1 and 3 completely and rows 0, 2, 4 up to column 7."""
        for row in range(5):
            for col in range(self.grid.width):
                if row in (1, 3) or col < 8:
                    self.grid.set(row, col, self._random_color())

    def fill_random_test_pattern(self) -> None:
        """Clear the grid, fill rows 2, 4, 6 and scatter blocks in rows 0-7."""
        self.grid.clear()
        for row in range(8):
            for col in range(self.grid.width):
                if row in (2, 4, 6) or self.debug_rng.random() < 0.7:
                    self.grid.set(row, col, self._random_color())

    def trigger_line_clear(self) -> bool:
        """Run completed-row detection on demand.

        Returns:
            True if an animation started
        """
        if self.line_clear.is_clearing:
            return False
        return self.line_clear.detect(self.grid)
