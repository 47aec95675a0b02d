import pytest

from connectfour.game.board import Board
from connectfour.game.rules import Player
from connectfour.utils import Token


class ScriptedInput:
    """Input source that replays a fixed list of columns."""

    def __init__(self, columns):
        self.columns = list(columns)
        self.requests = []
        self.rejections = []

    def request_column(self, player_name):
        self.requests.append(player_name)
        if not self.columns:
            raise AssertionError("Scripted input ran out of columns")
        return self.columns.pop(0)

    def column_rejected(self, player_name, error):
        self.rejections.append((player_name, error.column))


class RecordingRenderer:
    """Renderer that keeps a snapshot of every board it is shown."""

    def __init__(self):
        self.snapshots = []
        self.colors = []

    def render(self, board, colors):
        self.snapshots.append((board.get_state(), board.win_mask.copy()))
        self.colors.append(dict(colors))


@pytest.fixture
def board():
    return Board()


@pytest.fixture
def players():
    return [Player("Alice", Token.ONE), Player("Bob", Token.TWO)]


@pytest.fixture
def scripted_input():
    return ScriptedInput


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def draw_grid():
    """A full 6x7 grid, 21 tokens each, with no four in a row anywhere."""
    pattern = [1, 1, 2, 2, 1, 1, 2]
    flipped = [2 if v == 1 else 1 for v in pattern]
    return [list(pattern) if row % 2 == 0 else list(flipped) for row in range(6)]
