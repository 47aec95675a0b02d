import random

import numpy as np
import pytest

from connectfour.game.board import Board, ColumnFullError, InvalidColumnError, PlacementError
from connectfour.utils import ROWS, COLS, Token


def assert_gravity(board):
    for col in range(board.cols):
        filled = board.grid[:, col] != Token.EMPTY.value
        for row in range(board.rows - 1):
            if filled[row]:
                assert filled[row + 1], f"token floating at ({row}, {col})"


def test_new_board_is_empty(board):
    assert board.grid.shape == (ROWS, COLS)
    assert all(board.cell_at(r, c) == Token.EMPTY for r in range(ROWS) for c in range(COLS))
    assert not board.win_mask.any()
    assert board.valid_columns() == list(range(COLS))
    assert not board.is_full()


def test_place_lands_on_lowest_empty_row(board):
    assert board.place(3, Token.ONE) == ROWS - 1
    assert board.place(3, Token.TWO) == ROWS - 2
    assert board.cell_at(ROWS - 1, 3) == Token.ONE
    assert board.cell_at(ROWS - 2, 3) == Token.TWO
    assert board.column_height(3) == 2
    assert board.column_height(0) == 0


def test_place_changes_exactly_one_cell(board):
    before = board.get_state()
    board.place(5, Token.TWO)
    changed = np.argwhere(board.grid != before)
    assert changed.tolist() == [[ROWS - 1, 5]]


def test_gravity_holds_for_random_play():
    rng = random.Random(7)
    for _ in range(20):
        board = Board()
        token = Token.ONE
        for _ in range(60):
            column = rng.randrange(COLS)
            try:
                board.place(column, token)
            except ColumnFullError:
                continue
            assert_gravity(board)
            token = token.other()


def test_full_column_is_rejected_without_change(board):
    for i in range(ROWS):
        board.place(4, Token.ONE if i % 2 == 0 else Token.TWO)
    assert board.is_column_full(4)
    before = board.get_state()

    with pytest.raises(ColumnFullError) as excinfo:
        board.place(4, Token.ONE)

    assert excinfo.value.column == 4
    assert isinstance(excinfo.value, PlacementError)
    assert isinstance(excinfo.value, ValueError)
    assert np.array_equal(board.grid, before)
    assert 4 not in board.valid_columns()


@pytest.mark.parametrize("column", [-1, COLS, 100, "3", 2.0, None, True])
def test_invalid_column_fails_fast(board, column):
    with pytest.raises(InvalidColumnError):
        board.place(column, Token.ONE)
    assert not board.grid.any()


def test_numpy_integer_column_is_accepted(board):
    assert board.place(np.int64(2), Token.ONE) == ROWS - 1


def test_placing_empty_token_is_rejected(board):
    with pytest.raises(ValueError):
        board.place(0, Token.EMPTY)
    assert not board.grid.any()


@pytest.mark.parametrize("row,col", [(-1, 0), (0, -1), (ROWS, 0), (0, COLS)])
def test_reads_reject_out_of_range_cells(board, row, col):
    with pytest.raises(IndexError):
        board.cell_at(row, col)
    with pytest.raises(IndexError):
        board.is_winning_cell(row, col)


def test_reads_do_not_mutate(board):
    board.place(1, Token.ONE)
    board.mark_winning_line([(ROWS - 1, 1)])
    grid_before = board.get_state()
    mask_before = board.win_mask.copy()

    first = [(board.cell_at(r, c), board.is_winning_cell(r, c))
             for r in range(ROWS) for c in range(COLS)]
    second = [(board.cell_at(r, c), board.is_winning_cell(r, c))
              for r in range(ROWS) for c in range(COLS)]

    assert first == second
    assert np.array_equal(board.grid, grid_before)
    assert np.array_equal(board.win_mask, mask_before)


def test_full_board(draw_grid):
    board = Board.from_grid(draw_grid)
    assert board.is_full()
    assert board.valid_columns() == []


def test_from_grid_rejects_floating_tokens():
    grid = [[0] * COLS for _ in range(ROWS)]
    grid[2][0] = 1
    with pytest.raises(ValueError):
        Board.from_grid(grid)


def test_from_grid_rejects_unknown_values():
    grid = [[0] * COLS for _ in range(ROWS)]
    grid[ROWS - 1][0] = 3
    with pytest.raises(ValueError):
        Board.from_grid(grid)


def test_count_tokens(board):
    for col in [0, 0, 1]:
        board.place(col, Token.ONE)
    board.place(1, Token.TWO)

    assert board.count(Token.ONE) == 3
    assert board.count(Token.TWO) == 1
    assert board.count(Token.EMPTY) == ROWS * COLS - 4


def test_render_plain_board(board):
    board.place(0, Token.ONE)
    board.place(1, Token.TWO)
    lines = board.render().splitlines()

    assert lines[0] == "  0 1 2 3 4 5 6"
    assert lines[1] == " --------------- "
    assert lines[2] == "| . . . . . . . |"
    assert lines[ROWS + 1] == "| X O . . . . . |"
    assert lines[-1] == " --------------- "
