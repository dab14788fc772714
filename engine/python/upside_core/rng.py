"""Uniform random piece generator.

Every call picks one of the 7 shapes with equal probability; there is no
bag and repeats are allowed.
"""

import random
from typing import Optional

from upside_core.grid import Grid
from upside_core.piece import Piece, SHAPE_NAMES, get_spawn_position


class PieceFactory:
    """Seedable uniform piece generator."""

    PIECES = SHAPE_NAMES

    def __init__(
        self,
        seed: Optional[int] = None,
        grid_width: int = Grid.WIDTH,
        grid_height: int = Grid.HEIGHT,
    ):
        """Initialize with a seed for deterministic replay.

        Args:
            seed: Random seed for reproducibility (None = system entropy)
            grid_width: Width used to center spawned pieces
            grid_height: Height used to place pieces on the spawn edge
        """
        self.seed = seed
        self.rng = random.Random(seed)
        self.grid_width = grid_width
        self.grid_height = grid_height

    def next_name(self) -> str:
        """Draw the next shape name."""
        return self.PIECES[self.rng.randrange(len(self.PIECES))]

    def next(self) -> Piece:
        """Generate the next piece at its spawn position.

        Returns:
            New piece anchored on the spawn edge
        """
        piece = Piece.from_name(self.next_name())
        piece.x, piece.y = get_spawn_position(piece.shape, self.grid_width, self.grid_height)
        return piece
