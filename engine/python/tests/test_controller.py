"""Tests for the piece controller."""

import pytest

from upside_core.controller import PieceController
from upside_core.grid import Grid
from upside_core.line_clear import LineClearEngine
from upside_core.piece import Piece, SHAPES, rotate_matrix
from upside_core.rng import PieceFactory


@pytest.fixture
def controller():
    grid = Grid()
    ctrl = PieceController(grid, PieceFactory(seed=5), LineClearEngine())
    ctrl.spawn_initial()
    return ctrl


def test_spawn_initial(controller):
    """Test two pieces exist after spawning."""
    assert controller.current is not None
    assert controller.next_piece is not None
    assert controller.current.y == 19


def test_move_and_reverse_symmetry(controller):
    """Test applying then reversing a valid move restores the anchor."""
    controller.current = Piece.from_name("T", 4, 10)
    for dx, dy in [(1, 0), (-1, 0), (0, -1), (0, 1)]:
        start = (controller.current.x, controller.current.y)
        assert controller.move(dx, dy)
        assert controller.move(-dx, -dy)
        assert (controller.current.x, controller.current.y) == start


def test_move_blocked_by_wall(controller):
    """Test a rejected move leaves the piece unchanged."""
    controller.current = Piece.from_name("T", 0, 10)
    assert not controller.move(-1, 0)
    assert controller.current.x == 0


def test_move_toward_lock_decreases_row(controller):
    """Test the lock edge is row 0."""
    controller.current = Piece.from_name("O", 4, 10)
    assert controller.move(0, -1)
    assert controller.current.y == 9


def test_rotate_in_open_space(controller):
    """Test rotation replaces the shape matrix."""
    controller.current = Piece.from_name("T", 4, 10)
    assert controller.rotate()
    assert controller.current.shape == rotate_matrix(SHAPES["T"])


def test_rotate_rejected_without_kick(controller):
    """Test a rotation that would leave the grid is silently rejected."""
    vertical = rotate_matrix(SHAPES["I"])  # Occupies local column 2
    controller.current = Piece("I", vertical, -2, 19, 1)

    assert not controller.rotate(), "Horizontal I would reach column -2"
    assert controller.current.shape == vertical
    assert controller.current.x == -2, "No wall kick should be applied"


def test_hard_drop(controller):
    """Test hard drop travels to the lock edge and locks."""
    grid = controller.grid
    following = controller.next_piece
    controller.current = Piece.from_name("O", 4, 19)

    steps, placeable = controller.hard_drop()

    assert steps == 18, "O piece travels from row 19 to row 1"
    assert placeable
    for row in (0, 1):
        for col in (4, 5):
            assert grid.get(row, col) == 2
    assert controller.current is following, "Next piece should be promoted"
    assert controller.next_piece is not following


def test_lock_drops_out_of_bounds_cells(controller):
    """Test cells beyond the grid are discarded on lock."""
    controller.current = Piece.from_name("O", 4, 0)  # Second row would be -1

    controller.lock()

    assert controller.grid.get(0, 4) == 2
    assert controller.grid.get(0, 5) == 2
    assert sum(1 for v in controller.grid.cells if v) == 2


def test_lock_triggers_line_detection(controller):
    """Test a lock that completes a row starts the clear animation on that row."""
    grid = controller.grid
    for col in range(grid.width):
        if col not in (4, 5):
            grid.set(0, col, 1)
    controller.current = Piece.from_name("O", 4, 1)

    controller.lock()

    assert controller.line_clear.is_clearing
    assert controller.line_clear.state.glowing_rows == [0]
    assert grid.is_row_complete(0), "Row is removed later, not at lock time"


def test_lock_reports_unplaceable_spawn(controller):
    """Test lock returns False when the spawn area is blocked."""
    grid = controller.grid
    for row in range(12, 20):
        for col in range(1, grid.width):
            grid.set(row, col, 4)
    controller.current = Piece.from_name("O", 0, 5)

    assert not controller.lock()
