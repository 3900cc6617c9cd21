import pytest
from fastapi.testclient import TestClient

from chessboard.config import Settings
from chessboard.game_state import ChessGame
from chessboard.oracle import SandboxOracle
from chessboard.server import create_app


def get_test_client(settings: Settings | None = None) -> TestClient:
    return TestClient(create_app(settings or Settings()))


def count_pieces(game: ChessGame) -> int:
    return sum(1 for line in game.get_board() for piece in line if piece is not None)


def play(game: ChessGame, *moves: tuple[int, int, int, int]) -> None:
    for move in moves:
        assert game.move_piece(*move) is True, move


@pytest.fixture
def game() -> ChessGame:
    return ChessGame()


@pytest.fixture
def sandbox_game() -> ChessGame:
    return ChessGame(SandboxOracle())


@pytest.fixture
def client() -> TestClient:
    return get_test_client()
