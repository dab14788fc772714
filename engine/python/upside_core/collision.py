"""Placement validation against the grid."""

from upside_core.grid import Grid
from upside_core.piece import Piece, Shape, shape_cells


def is_valid_placement(grid: Grid, shape: Shape, x: int, y: int) -> bool:
    """Check whether a shape anchored at (x, y) fits on the grid.

    Every occupied cell maps to (x + col, y - row). The placement is invalid
    if any of those cells falls outside the grid or onto a filled cell.

    Args:
        grid: Current grid state
        shape: Shape matrix to test
        x: Anchor column
        y: Anchor row

    Returns:
        True if all occupied cells are in bounds and empty
    """
    for cx, cy in shape_cells(shape, x, y):
        if not grid.in_bounds(cy, cx) or grid.get(cy, cx) != 0:
            return False
    return True


def fits(grid: Grid, piece: Piece) -> bool:
    """Shorthand for is_valid_placement on a piece's own shape and anchor."""
    return is_valid_placement(grid, piece.shape, piece.x, piece.y)
