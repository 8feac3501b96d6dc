import pytest

from tilematch.components.grid import Grid
from tilematch.errors import OutOfRange
from tests.helpers import build_grid


def test_get_and_set_use_column_row_order(world):
    grid = build_grid(world, [[1, 2, 3], [4, 5, 6]])
    assert grid.columns == 3 and grid.rows == 2
    assert grid.get(2, 0).color == 3
    assert grid.get(0, 1).color == 4
    grid.set(1, 1, None)
    assert grid.get(1, 1) is None
    assert grid.empty_positions() == [(1, 1)]


@pytest.mark.parametrize("column,row", [(-1, 0), (0, -1), (3, 0), (0, 2), (10, 10)])
def test_out_of_range_is_rejected_not_clamped(world, column, row):
    grid = build_grid(world, [[1, 2, 3], [4, 5, 6]])
    before = grid.snapshot()
    with pytest.raises(OutOfRange):
        grid.get(column, row)
    with pytest.raises(OutOfRange):
        grid.set(column, row, None)
    assert grid.snapshot() == before


def test_out_of_range_is_an_index_error():
    grid = Grid(columns=2, rows=2)
    with pytest.raises(IndexError):
        grid.get(2, 0)


def test_new_grid_is_empty_and_dimensions_must_be_positive():
    grid = Grid(columns=3, rows=2)
    assert len(grid.empty_positions()) == 6
    with pytest.raises(ValueError):
        Grid(columns=0, rows=3)
    with pytest.raises(ValueError):
        Grid.from_rows([[None, None], [None]])


def test_copy_is_independent_but_equal(world):
    grid = build_grid(world, [[1, 2], [3, 4]])
    clone = grid.copy()
    assert clone == grid
    clone.set(0, 0, None)
    assert clone != grid
    assert grid.get(0, 0).color == 1


def test_transposed_colors_and_locate(world):
    grid = build_grid(world, [[1, 2, 3], [4, 5, 6]])
    assert [[cell.color for cell in column] for column in grid.transposed()] == [[1, 4], [2, 5], [3, 6]]
    assert grid.colors() == [[1, 2, 3], [4, 5, 6]]
    token = grid.get(2, 1)
    assert grid.locate(token.entity) == (2, 1)
    assert grid.locate(-1) is None
    assert len(grid.tokens()) == 6
    assert len({token.entity for token in grid.tokens()}) == 6, "Each token should have its own entity"
