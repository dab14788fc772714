"""Completed-row detection and the two-phase line clear animation.

A clear runs for ``duration_ms``. During the glow subphase the completed rows
pulse and the grid is untouched. The first time elapsed time reaches
``glow_duration_ms`` the rows are removed from the grid, exactly once. The
shift subphase then eases the surviving rows from their old positions to
their compacted ones. When the full duration has elapsed the engine reports
how many rows were cleared and returns to idle.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from upside_core.grid import Grid

logger = logging.getLogger(__name__)


class AnimationPhase(Enum):
    """Line clear animation phases."""
    IDLE = "idle"
    GLOW = "glow"      # Rows pulse, grid unchanged
    SHIFT = "shift"    # Rows removed, survivors ease into place


@dataclass
class MovingRow:
    """A surviving row that slides toward row 0 after the clear."""
    original_row: int
    target_row: int
    data: List[int]  # Snapshot taken before the grid was compacted

    @property
    def distance(self) -> int:
        return self.target_row - self.original_row


@dataclass
class AnimationState:
    """In-flight line clear bookkeeping."""
    phase: AnimationPhase = AnimationPhase.IDLE
    elapsed_ms: float = 0.0
    glowing_rows: List[int] = field(default_factory=list)
    moving_rows: List[MovingRow] = field(default_factory=list)
    rows_removed: bool = False
    cleared_count: int = 0


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out: fast start, gentle landing."""
    return 1 - (1 - t) ** 3


class LineClearEngine:
    """Detects full rows and drives their removal animation."""

    DURATION_MS = 6000
    GLOW_DURATION_MS = 3000

    def __init__(self, duration_ms: float = DURATION_MS, glow_duration_ms: float = GLOW_DURATION_MS):
        """Initialize the engine.

        Args:
            duration_ms: Total animation length
            glow_duration_ms: Length of the glow subphase; rows are removed
                from the grid when it ends
        """
        if duration_ms <= 0:
            raise ValueError(f"duration_ms must be positive, got {duration_ms}")
        if not 0 <= glow_duration_ms <= duration_ms:
            raise ValueError(
                f"glow_duration_ms must be within [0, {duration_ms}], got {glow_duration_ms}"
            )
        self.duration_ms = duration_ms
        self.glow_duration_ms = glow_duration_ms
        self.glow_phase_ratio = glow_duration_ms / duration_ms
        self.state = AnimationState()

    @property
    def phase(self) -> AnimationPhase:
        return self.state.phase

    @property
    def is_clearing(self) -> bool:
        return self.state.phase is not AnimationPhase.IDLE

    def reset(self) -> None:
        """Drop any in-flight animation."""
        self.state = AnimationState()

    def detect(self, grid: Grid) -> bool:
        """Look for completed rows and start the animation if any exist.

        Args:
            grid: Grid to inspect (not modified)

        Returns:
            True if a clear animation was started
        """
        completed = grid.completed_rows()
        if not completed:
            return False
        self.start(grid, completed)
        return True

    def start(self, grid: Grid, completed_rows: List[int]) -> None:
        """Begin clearing the given rows.

        Every surviving row with k cleared rows at lower indices gets a
        MovingRow targeting ``row - k``, with its cells snapshotted because
        the grid is compacted midway through the animation.

        Args:
            grid: Grid holding the rows
            completed_rows: Full rows in ascending order
        """
        cleared = set(completed_rows)
        moving_rows = []
        for row in range(grid.height):
            if row in cleared:
                continue
            rows_below = sum(1 for c in completed_rows if c < row)
            if rows_below > 0:
                moving_rows.append(MovingRow(row, row - rows_below, grid.row(row)))

        self.state = AnimationState(
            phase=AnimationPhase.GLOW,
            glowing_rows=list(completed_rows),
            moving_rows=moving_rows,
            cleared_count=len(completed_rows),
        )
        logger.info(f"[LineClear] Started: rows={completed_rows}, moving={len(moving_rows)}")

    def advance(self, grid: Grid, delta_ms: float) -> Optional[int]:
        """Advance the animation clock.

        Args:
            grid: Grid to compact when the glow subphase ends
            delta_ms: Elapsed milliseconds since the last call

        Returns:
            Number of rows cleared if the animation finished on this call,
            otherwise None
        """
        if not self.is_clearing:
            return None

        state = self.state
        state.elapsed_ms += delta_ms

        if state.elapsed_ms >= self.glow_duration_ms and not state.rows_removed:
            self._remove_rows(grid)

        if state.elapsed_ms >= self.duration_ms:
            cleared = state.cleared_count
            self.reset()
            logger.info(f"[LineClear] Finished: cleared={cleared}")
            return cleared

        return None

    def _remove_rows(self, grid: Grid) -> None:
        state = self.state
        # Highest first so lower indices stay valid
        for row in sorted(state.glowing_rows, reverse=True):
            grid.remove_row(row)
        logger.debug(f"[LineClear] Removed rows {state.glowing_rows} at {state.elapsed_ms:.0f}ms")
        state.glowing_rows = []
        state.rows_removed = True
        state.phase = AnimationPhase.SHIFT

    # Render math. Nothing below touches the grid.

    @property
    def progress(self) -> float:
        """Overall animation progress in [0, 1]."""
        if not self.is_clearing:
            return 0.0
        return min(self.state.elapsed_ms / self.duration_ms, 1.0)

    @property
    def glow_progress(self) -> float:
        if not self.is_clearing:
            return 0.0
        if self.glow_duration_ms == 0:
            return 1.0
        return min(self.state.elapsed_ms / self.glow_duration_ms, 1.0)

    @property
    def shift_progress(self) -> float:
        """Local progress of the shift subphase, 0 until the glow ends."""
        if self.state.phase is not AnimationPhase.SHIFT:
            return 0.0
        if self.glow_phase_ratio >= 1:
            return 1.0
        local = (self.progress - self.glow_phase_ratio) / (1 - self.glow_phase_ratio)
        return min(max(0.0, local), 1.0)

    def glow_intensity(self) -> float:
        """Pulse strength in [0, 1] for glowing rows."""
        return 0.5 + 0.5 * math.sin(self.glow_progress * math.pi * 4)

    def glow_alpha(self) -> float:
        return 0.3 + 0.7 * self.glow_intensity()

    def row_offset(self, moving_row: MovingRow) -> float:
        """Visual offset of a moving row, in rows (negative = toward row 0)."""
        return ease_out_cubic(self.shift_progress) * moving_row.distance

    def row_offsets(self) -> List[Tuple[MovingRow, float]]:
        return [(mr, self.row_offset(mr)) for mr in self.state.moving_rows]

    def to_dict(self) -> dict:
        """Renderer-facing view of the animation."""
        state = self.state
        return {
            "phase": state.phase.value,
            "elapsed_ms": state.elapsed_ms,
            "progress": self.progress,
            "glow_progress": self.glow_progress,
            "glow_intensity": self.glow_intensity() if state.phase is AnimationPhase.GLOW else 0.0,
            "glowing_rows": list(state.glowing_rows),
            "moving_rows": [
                {
                    "original_row": mr.original_row,
                    "target_row": mr.target_row,
                    "offset": offset,
                    "data": list(mr.data),
                }
                for mr, offset in self.row_offsets()
            ],
            "rows_removed": state.rows_removed,
            "cleared_count": state.cleared_count,
        }
