"""Piece shapes, rotation and coordinate mapping.

Each shape is a square matrix whose nonzero entries carry the piece's color
id. Local row 0 of the matrix sits on the anchor row; increasing local rows
extend toward the spawn edge, i.e. toward LOWER absolute rows:

    abs_x = x + col
    abs_y = y - row
"""

from typing import Dict, List, Tuple

# Type alias for a shape matrix
Shape = List[List[int]]

SHAPE_NAMES = ["I", "O", "T", "S", "Z", "J", "L"]

# Format: {name: matrix}; color id is SHAPE_NAMES.index(name) + 1
SHAPES: Dict[str, Shape] = {
    "I": [
        [0, 0, 0, 0],
        [1, 1, 1, 1],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ],
    "O": [
        [2, 2],
        [2, 2],
    ],
    "T": [
        [0, 3, 0],
        [3, 3, 3],
        [0, 0, 0],
    ],
    "S": [
        [0, 4, 4],
        [4, 4, 0],
        [0, 0, 0],
    ],
    "Z": [
        [5, 5, 0],
        [0, 5, 5],
        [0, 0, 0],
    ],
    "J": [
        [6, 0, 0],
        [6, 6, 6],
        [0, 0, 0],
    ],
    "L": [
        [0, 0, 7],
        [7, 7, 7],
        [0, 0, 0],
    ],
}


def rotate_matrix(matrix: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees (transpose and reverse).

    rotated[col][rows - 1 - row] = matrix[row][col]

    Args:
        matrix: Shape to rotate

    Returns:
        New rotated matrix; the input is left untouched
    """
    rows = len(matrix)
    cols = len(matrix[0])
    rotated = [[0] * rows for _ in range(cols)]
    for r in range(rows):
        for c in range(cols):
            rotated[c][rows - 1 - r] = matrix[r][c]
    return rotated


def shape_cells(shape: Shape, x: int, y: int) -> List[Tuple[int, int]]:
    """Absolute (x, y) of every occupied shape cell anchored at (x, y)."""
    return [
        (x + col, y - row)
        for row, line in enumerate(shape)
        for col, value in enumerate(line)
        if value != 0
    ]


class Piece:
    """A shape matrix anchored at a grid position."""

    def __init__(self, name: str, shape: Shape, x: int, y: int, color: int):
        """Initialize a piece.

        Args:
            name: One of "I", "O", "T", "S", "Z", "J", "L"
            shape: Square shape matrix (copied)
            x: Anchor column
            y: Anchor row (shape extends toward lower rows)
            color: Color id (1-7)
        """
        if name not in SHAPES:
            raise ValueError(f"Invalid piece type: {name}")
        self.name = name
        self.shape = [list(line) for line in shape]
        self.x = x
        self.y = y
        self.color = color

    @classmethod
    def from_name(cls, name: str, x: int = 0, y: int = 0) -> "Piece":
        """Build a piece in its spawn orientation."""
        if name not in SHAPES:
            raise ValueError(f"Invalid piece type: {name}")
        return cls(name, SHAPES[name], x, y, SHAPE_NAMES.index(name) + 1)

    @property
    def width(self) -> int:
        return len(self.shape[0])

    def get_cells(self) -> List[Tuple[int, int]]:
        """Get absolute grid coordinates of all occupied cells.

        Returns:
            List of (x, y) tuples in grid coordinates
        """
        return shape_cells(self.shape, self.x, self.y)

    def copy(self) -> "Piece":
        """Create a copy of this piece."""
        return Piece(self.name, self.shape, self.x, self.y, self.color)

    def move(self, dx: int, dy: int) -> "Piece":
        """Return a new piece moved by the given delta."""
        return Piece(self.name, self.shape, self.x + dx, self.y + dy, self.color)

    def rotate(self) -> "Piece":
        """Return a new piece with the shape rotated 90 degrees."""
        return Piece(self.name, rotate_matrix(self.shape), self.x, self.y, self.color)

    def to_dict(self) -> dict:
        return {
            "type": self.name,
            "shape": [list(line) for line in self.shape],
            "color": self.color,
            "x": self.x,
            "y": self.y,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (self.name, self.shape, self.x, self.y, self.color) == (
            other.name, other.shape, other.x, other.y, other.color
        )

    def __repr__(self) -> str:
        return f"Piece({self.name}, x={self.x}, y={self.y}, color={self.color})"


def get_spawn_position(shape: Shape, grid_width: int, grid_height: int) -> Tuple[int, int]:
    """Get the spawn anchor for a shape.

    Horizontally centered, anchored on the spawn edge (the last row), so the
    piece travels toward row 0 during play.

    Args:
        shape: Shape matrix
        grid_width: Number of grid columns
        grid_height: Number of grid rows

    Returns:
        (x, y) spawn coordinates
    """
    return (grid_width // 2 - len(shape[0]) // 2, grid_height - 1)
