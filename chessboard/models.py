"""
Value types handed out by the game: pieces, boards and recorded moves.
All of them are immutable so snapshots can be shared without copying pieces.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceKind(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


CODE_TO_KIND: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

CODE_TO_COLOR: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    color: Color

    @classmethod
    def from_codes(cls, kind: str, color: str) -> Piece:
        """('n', 'w') -> white knight"""
        return cls(CODE_TO_KIND[kind], CODE_TO_COLOR[color])

    def to_dict(self) -> dict:
        return {"kind": str(self.kind), "color": str(self.color)}


Board = list[list[Piece | None]]


@dataclass(frozen=True)
class MoveRecord:
    piece: Piece
    from_square: tuple[int, int]
    to_square: tuple[int, int]
    captured: Piece | None
    notation: str
    timestamp: datetime

    def to_dict(self) -> dict:
        """JSON-friendly form for the history panel."""
        return {
            "piece": self.piece.to_dict(),
            "from": {"row": self.from_square[0], "col": self.from_square[1]},
            "to": {"row": self.to_square[0], "col": self.to_square[1]},
            "captured": self.captured.to_dict() if self.captured else None,
            "notation": self.notation,
            "timestamp": self.timestamp.isoformat(),
        }
