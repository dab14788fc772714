"""Fixed-size playfield grid with row completion and compaction.

Row 0 is the lock edge (pieces travel toward it), row HEIGHT - 1 is the
spawn edge. Occupancy itself does not care about orientation.
"""

from typing import List


class Grid:
    """10x20 cell matrix stored row-major in a flat list."""

    WIDTH = 10
    HEIGHT = 20

    def __init__(self, width: int = WIDTH, height: int = HEIGHT):
        """Initialize an empty grid.

        Args:
            width: Number of columns
            height: Number of rows
        """
        self.width = width
        self.height = height
        # cells[row * width + col]; 0 = empty, 1-7 = piece color id
        self.cells: List[int] = [0] * (width * height)

    def get(self, row: int, col: int) -> int:
        """Get cell value at (row, col).

        Args:
            row: Row (0 = lock edge)
            col: Column

        Returns:
            Cell value (0 = empty, >0 = color id)
        """
        return self.cells[self._index(row, col)]

    def set(self, row: int, col: int, value: int) -> None:
        """Set cell value at (row, col).

        Raises:
            IndexError: If the coordinate is outside the grid
        """
        self.cells[self._index(row, col)] = value

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if coordinates are within grid bounds."""
        return 0 <= row < self.height and 0 <= col < self.width

    def _index(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) outside {self.height}x{self.width} grid")
        return row * self.width + col

    def row(self, row: int) -> List[int]:
        """Return a copy of one row's cell values."""
        start = self._index(row, 0)
        return self.cells[start:start + self.width]

    def rows(self) -> List[List[int]]:
        """Return the grid as a list of row copies, row 0 first."""
        return [self.row(r) for r in range(self.height)]

    def is_row_complete(self, row: int) -> bool:
        """Check if every cell in a row is filled.

        Args:
            row: Row to check

        Returns:
            True if row is full
        """
        return all(value != 0 for value in self.row(row))

    def completed_rows(self) -> List[int]:
        """Scan from row 0 outward and collect full rows in ascending order."""
        return [r for r in range(self.height) if self.is_row_complete(r)]

    def remove_row(self, row: int) -> None:
        """Remove a row and compact everything beyond it toward row 0.

        The last row (spawn edge) becomes empty so the height never changes.

        Args:
            row: Row to remove
        """
        self._index(row, 0)
        w = self.width
        for r in range(row, self.height - 1):
            self.cells[r * w:(r + 1) * w] = self.cells[(r + 1) * w:(r + 2) * w]

        last = (self.height - 1) * w
        self.cells[last:last + w] = [0] * w

    def clear(self) -> None:
        """Empty every cell."""
        self.cells = [0] * (self.width * self.height)

    def is_empty(self) -> bool:
        return not any(self.cells)

    def copy(self) -> "Grid":
        """Create a deep copy of the grid.

        Returns:
            New grid with same state
        """
        new_grid = Grid(self.width, self.height)
        new_grid.cells = self.cells.copy()
        return new_grid

    def to_list(self) -> List[int]:
        """Export grid as flat list (for serialization).

        Returns:
            List of width * height cell values
        """
        return self.cells.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.width, self.height, self.cells) == (other.width, other.height, other.cells)

    def __repr__(self) -> str:
        filled = sum(1 for v in self.cells if v)
        return f"Grid({self.width}x{self.height}, filled={filled})"
