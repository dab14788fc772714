"""Active piece control: movement, rotation, hard drop and locking."""

import logging
from typing import Optional, Tuple

from upside_core.collision import fits
from upside_core.grid import Grid
from upside_core.line_clear import LineClearEngine
from upside_core.piece import Piece
from upside_core.rng import PieceFactory

logger = logging.getLogger(__name__)

# "Down" on the controls moves toward row 0, the lock edge
TOWARD_LOCK = -1


class PieceController:
    """Owns the current and next piece for one grid."""

    def __init__(self, grid: Grid, factory: PieceFactory, line_clear: LineClearEngine):
        """Initialize the controller.

        Args:
            grid: Grid pieces move on and lock into
            factory: Source of new pieces
            line_clear: Engine notified after every lock
        """
        self.grid = grid
        self.factory = factory
        self.line_clear = line_clear
        self.current: Optional[Piece] = None
        self.next_piece: Optional[Piece] = None

    def spawn_initial(self) -> None:
        """Generate a fresh current and next piece."""
        self.current = self.factory.next()
        self.next_piece = self.factory.next()

    def move(self, dx: int, dy: int) -> bool:
        """Try to move the current piece.

        Args:
            dx: Change in x
            dy: Change in y (-1 = toward the lock edge)

        Returns:
            True if move succeeded
        """
        if not self.current:
            return False

        new_piece = self.current.move(dx, dy)
        if fits(self.grid, new_piece):
            self.current = new_piece
            return True
        return False

    def rotate(self) -> bool:
        """Try to rotate the current piece in place (no wall kicks).

        Returns:
            True if rotation succeeded
        """
        if not self.current:
            return False

        rotated = self.current.rotate()
        if fits(self.grid, rotated):
            self.current = rotated
            return True
        return False

    def hard_drop(self) -> Tuple[int, bool]:
        """Move toward the lock edge until blocked, then lock.

        Returns:
            Tuple of (steps travelled, new piece placeable)
        """
        if not self.current:
            return (0, True)

        steps = 0
        while self.move(0, TOWARD_LOCK):
            steps += 1

        return (steps, self.lock())

    def lock(self) -> bool:
        """Merge the current piece into the grid and bring in the next one.

        Cells whose row falls outside the grid are dropped. Line clear
        detection runs on the merged grid before the next piece spawns.

        Returns:
            False if the newly spawned piece cannot be placed (game over)
        """
        if not self.current:
            return True

        piece = self.current
        for x, y in piece.get_cells():
            if 0 <= y < self.grid.height:
                self.grid.set(y, x, piece.color)
        logger.debug(f"[Lock] {piece!r}")

        self.line_clear.detect(self.grid)

        self.current = self.next_piece if self.next_piece else self.factory.next()
        self.next_piece = self.factory.next()

        return fits(self.grid, self.current)
