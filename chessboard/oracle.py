import logging
from typing import Protocol

import chess

from chessboard.coordinates import BOARD_SIZE, parse_square

logger = logging.getLogger(__name__)

# Square contents as the oracles report them: (kind, colour) short codes,
# e.g. ("n", "w") for a white knight, or None for an empty square.
SquareCode = tuple[str, str] | None

START_LAYOUT = "rnbqkbnr"


class Oracle(Protocol):
    """Whatever decides which moves are legal and owns the position."""

    def squares(self) -> list[list[SquareCode]]: ...

    def move(self, src: str, dst: str, promotion: str | None = None) -> str | None: ...

    def turn(self) -> str: ...

    def is_check(self) -> bool: ...

    def is_checkmate(self) -> bool: ...

    def is_stalemate(self) -> bool: ...

    def is_draw(self) -> bool: ...

    def is_game_over(self) -> bool: ...

    def reset(self) -> None: ...


class PythonChessOracle:
    """Full rules, backed by a python-chess Board."""

    def __init__(self) -> None:
        self.board = chess.Board()

    def reset(self) -> None:
        self.board = chess.Board()

    def fen(self) -> str:
        return self.board.fen()

    def squares(self) -> list[list[SquareCode]]:
        grid: list[list[SquareCode]] = []
        for row in range(BOARD_SIZE):
            rank = BOARD_SIZE - 1 - row
            line: list[SquareCode] = []
            for col in range(BOARD_SIZE):
                piece = self.board.piece_at(chess.square(col, rank))
                if piece is None:
                    line.append(None)
                else:
                    line.append((piece.symbol().lower(), "w" if piece.color else "b"))
            grid.append(line)
        return grid

    def move(self, src: str, dst: str, promotion: str | None = None) -> str | None:
        """
        Play src -> dst if legal and return its SAN, otherwise None.
        A pawn reaching the last rank promotes to `promotion` (default queen).
        Raises ValueError for squares python-chess cannot parse.
        """
        if self.is_game_over():
            return None

        move = chess.Move.from_uci(f"{src}{dst}")
        piece = self.board.piece_at(move.from_square)
        if piece is not None and piece.piece_type == chess.PAWN:
            if chess.square_rank(move.to_square) in (0, 7):
                promote_to = chess.Piece.from_symbol(promotion or "q").piece_type
                move = chess.Move(move.from_square, move.to_square, promotion=promote_to)

        if move not in self.board.legal_moves:
            return None

        san = self.board.san(move)
        self.board.push(move)
        return san

    def turn(self) -> str:
        return "w" if self.board.turn == chess.WHITE else "b"

    def is_check(self) -> bool:
        return self.board.is_check()

    def is_checkmate(self) -> bool:
        return self.board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self.board.is_stalemate()

    def is_draw(self) -> bool:
        # Threefold repetition and the fifty-move rule end the game here,
        # nobody has to claim them.
        board = self.board
        return (
            board.is_stalemate()
            or board.is_insufficient_material()
            or board.is_fifty_moves()
            or board.is_repetition(3)
        )

    def is_game_over(self) -> bool:
        return self.board.is_checkmate() or self.is_draw()


class SandboxOracle:
    """
    Rule-free play: any piece may go to any other square and whatever
    stands there is taken off. Sides still alternate so the turn label
    keeps moving, but nothing ever ends the game.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._grid: list[list[SquareCode]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        for col, kind in enumerate(START_LAYOUT):
            self._grid[0][col] = (kind, "b")
            self._grid[1][col] = ("p", "b")
            self._grid[6][col] = ("p", "w")
            self._grid[7][col] = (kind, "w")
        self._turn = "w"

    def squares(self) -> list[list[SquareCode]]:
        return [list(line) for line in self._grid]

    def move(self, src: str, dst: str, promotion: str | None = None) -> str | None:
        from_row, from_col = parse_square(src)
        to_row, to_col = parse_square(dst)

        piece = self._grid[from_row][from_col]
        if piece is None or (from_row, from_col) == (to_row, to_col):
            return None

        capture = self._grid[to_row][to_col] is not None
        kind = piece[0]
        if kind == "p":
            notation = f"{src[0]}x{dst}" if capture else dst
        else:
            notation = f"{kind.upper()}{'x' if capture else ''}{dst}"

        self._grid[to_row][to_col] = piece
        self._grid[from_row][from_col] = None
        self._turn = "b" if self._turn == "w" else "w"
        return notation

    def turn(self) -> str:
        return self._turn

    def is_check(self) -> bool:
        return False

    def is_checkmate(self) -> bool:
        return False

    def is_stalemate(self) -> bool:
        return False

    def is_draw(self) -> bool:
        return False

    def is_game_over(self) -> bool:
        return False


ORACLES = {
    "standard": PythonChessOracle,
    "sandbox": SandboxOracle,
}


def create_oracle(rules: str = "standard") -> Oracle:
    try:
        factory = ORACLES[rules]
    except KeyError:
        raise ValueError(f"unknown rules {rules!r}, expected one of {sorted(ORACLES)}") from None
    logger.debug("Creating %s oracle", rules)
    return factory()
