"""Tests for piece functionality."""

import pytest

from upside_core.piece import (
    Piece,
    SHAPES,
    SHAPE_NAMES,
    get_spawn_position,
    rotate_matrix,
)


def test_piece_creation():
    """Test creating a piece from its name."""
    piece = Piece.from_name("T", x=4, y=18)
    assert piece.name == "T"
    assert piece.x == 4
    assert piece.y == 18
    assert piece.color == 3


def test_invalid_piece_name():
    """Test unknown shape names are rejected."""
    with pytest.raises(ValueError):
        Piece.from_name("Q")


def test_all_piece_shapes_defined():
    """Test that all 7 shapes exist, are square and carry their color id."""
    assert SHAPE_NAMES == ["I", "O", "T", "S", "Z", "J", "L"]

    for color, name in enumerate(SHAPE_NAMES, start=1):
        shape = SHAPES[name]
        assert all(len(line) == len(shape) for line in shape), f"{name} should be square"
        values = {v for line in shape for v in line if v}
        assert values == {color}, f"{name} cells should all be color {color}"
        assert sum(1 for line in shape for v in line if v) == 4, f"{name} should have 4 cells"


def test_get_cells_inverted_mapping():
    """Test local rows extend toward lower absolute rows."""
    piece = Piece.from_name("O", x=4, y=10)
    assert sorted(piece.get_cells()) == [(4, 9), (4, 10), (5, 9), (5, 10)]

    piece = Piece.from_name("J", x=2, y=7)
    # J: [[6,0,0],[6,6,6],[0,0,0]]
    assert sorted(piece.get_cells()) == [(2, 6), (2, 7), (3, 6), (4, 6)]


def test_rotate_matrix_transpose_and_reverse():
    """Test rotated[col][rows-1-row] = original[row][col]."""
    assert rotate_matrix(SHAPES["T"]) == [
        [0, 3, 0],
        [0, 3, 3],
        [0, 3, 0],
    ]
    assert rotate_matrix(SHAPES["I"]) == [[0, 0, 1, 0]] * 4


def test_four_rotations_identity():
    """Test rotating any shape four times returns the original matrix."""
    for name in SHAPE_NAMES:
        shape = SHAPES[name]
        rotated = shape
        for _ in range(4):
            rotated = rotate_matrix(rotated)
        assert rotated == shape, f"{name} should return to its original orientation"


def test_piece_rotate_and_move_return_new_pieces():
    """Test move/rotate leave the original untouched."""
    piece = Piece.from_name("S", x=3, y=10)
    original_shape = [list(line) for line in piece.shape]

    moved = piece.move(1, -1)
    assert (moved.x, moved.y) == (4, 9)
    assert (piece.x, piece.y) == (3, 10)

    rotated = piece.rotate()
    assert rotated.shape != original_shape
    assert piece.shape == original_shape


def test_spawn_positions():
    """Test spawn is centered and anchored on the last row."""
    assert get_spawn_position(SHAPES["I"], 10, 20) == (3, 19)
    assert get_spawn_position(SHAPES["O"], 10, 20) == (4, 19)
    assert get_spawn_position(SHAPES["T"], 10, 20) == (4, 19)


def test_to_dict():
    """Test serialization for renderers."""
    data = Piece.from_name("L", x=1, y=2).to_dict()
    assert data == {"type": "L", "shape": SHAPES["L"], "color": 7, "x": 1, "y": 2}
