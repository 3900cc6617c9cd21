import logging
import threading
from datetime import datetime, timezone

from chessboard import coordinates
from chessboard.models import Board, Color, MoveRecord, Piece
from chessboard.oracle import Oracle, PythonChessOracle

logger = logging.getLogger(__name__)


# Owns the board (through the oracle), the move history and the game status
class ChessGame:
    col_to_letter = staticmethod(coordinates.col_to_letter)
    row_to_number = staticmethod(coordinates.row_to_number)
    format_position = staticmethod(coordinates.format_position)

    def __init__(self, oracle: Oracle | None = None) -> None:
        self.oracle: Oracle = oracle if oracle is not None else PythonChessOracle()
        self._history: list[MoveRecord] = []
        self._lock = threading.RLock()

    def reset(self) -> None:
        """Reset the game to the initial position."""
        with self._lock:
            self.oracle.reset()
            self._history = []
        logger.info("Game reset to the starting position")

    # ---- Board ----
    def get_board(self) -> Board:
        """Fresh 8x8 snapshot; mutating it never touches the game."""
        with self._lock:
            squares = self.oracle.squares()
        return [
            [Piece.from_codes(*code) if code else None for code in line]
            for line in squares
        ]

    def get_piece_at(self, row: int, col: int) -> Piece | None:
        if not coordinates.is_on_board(row, col):
            return None
        return self.get_board()[row][col]

    # ---- Moves ----
    def move_piece(self, from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
        return self._play(from_row, from_col, to_row, to_col, None)

    def make_move(self, src: str, dst: str, promotion: str | None = None) -> bool:
        """
        Same as move_piece but with algebraic squares, e.g. ("e2", "e4").
        `promotion` is a piece letter; pawns promote to a queen without it.
        """
        try:
            from_row, from_col = coordinates.parse_square(src)
            to_row, to_col = coordinates.parse_square(dst)
        except ValueError:
            logger.debug("Rejected move %r -> %r: not a square", src, dst)
            return False

        if promotion is not None and not isinstance(promotion, str):
            logger.debug("Rejected move %r -> %r: bad promotion %r", src, dst, promotion)
            return False

        promo = (promotion or "").strip()[:1].lower() or None
        return self._play(from_row, from_col, to_row, to_col, promo)

    def _play(self, from_row: int, from_col: int, to_row: int, to_col: int,
              promotion: str | None) -> bool:
        """
        Try to play a move.
        Returns True if it was legal and applied, False otherwise.
        Either both the position and the history advance or neither does.
        """
        with self._lock:
            piece = self.get_piece_at(from_row, from_col)
            if piece is None or not coordinates.is_on_board(to_row, to_col):
                return False

            src = coordinates.to_square(from_row, from_col)
            dst = coordinates.to_square(to_row, to_col)
            captured = self.get_piece_at(to_row, to_col)

            try:
                notation = self.oracle.move(src, dst, promotion or "q")
            except Exception:
                logger.debug("Oracle refused %s%s", src, dst, exc_info=True)
                return False

            if not notation:
                logger.debug("Illegal move %s%s", src, dst)
                return False

            record = MoveRecord(
                piece=piece,
                from_square=(from_row, from_col),
                to_square=(to_row, to_col),
                captured=captured,
                notation=notation,
                timestamp=datetime.now(timezone.utc),
            )
            self._history.append(record)

        logger.info("Move %d: %s", len(self._history), notation)
        return True

    def get_move_history(self) -> list[MoveRecord]:
        with self._lock:
            return list(self._history)

    @property
    def last_move(self) -> MoveRecord | None:
        with self._lock:
            return self._history[-1] if self._history else None

    # ---- Status ----
    def turn(self) -> Color:
        with self._lock:
            return Color.WHITE if self.oracle.turn() == "w" else Color.BLACK

    def is_check(self) -> bool:
        with self._lock:
            return self.oracle.is_check()

    def is_checkmate(self) -> bool:
        with self._lock:
            return self.oracle.is_checkmate()

    def is_stalemate(self) -> bool:
        with self._lock:
            return self.oracle.is_stalemate()

    def is_draw(self) -> bool:
        with self._lock:
            return self.oracle.is_draw()

    def is_game_over(self) -> bool:
        with self._lock:
            return self.oracle.is_game_over()

    def get_status(self) -> str:
        with self._lock:
            side = self.turn()
            if self.is_checkmate():
                return f"Checkmate! {side.opponent.capitalize()} wins"
            if self.is_stalemate():
                return "Stalemate! Draw"
            if self.is_draw():
                return "Draw"
            if self.is_check():
                return f"Check! {side.capitalize()}'s turn"
            return f"{side.capitalize()}'s turn"

    def state_payload(self) -> dict:
        """Return the current game state as a JSON-friendly dict."""
        with self._lock:
            board = self.get_board()
            history = self.get_move_history()
            payload = {
                "type": "state",
                "board": [[p.to_dict() if p else None for p in line] for line in board],
                "turn": str(self.turn()),
                "status": self.get_status(),
                "check": self.is_check(),
                "gameOver": self.is_game_over(),
                "lastMove": history[-1].to_dict() if history else None,
                "history": [move.to_dict() for move in history],
            }
            fen = getattr(self.oracle, "fen", None)
            payload["fen"] = fen() if callable(fen) else None
        return payload
