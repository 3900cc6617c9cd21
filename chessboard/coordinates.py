# Grid <-> algebraic square helpers.
# Row 0 is rank 8 and column 0 is file a, so rows count downwards.

BOARD_SIZE = 8
FILES = "abcdefgh"


def is_on_board(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def column_to_file(col: int) -> str:
    """0 -> 'a', 7 -> 'h'. Callers keep col inside the board."""
    return chr(ord("a") + col)


def row_to_rank(row: int) -> str:
    """0 -> '8', 7 -> '1'."""
    return str(BOARD_SIZE - row)


def to_square(row: int, col: int) -> str:
    return f"{column_to_file(col)}{row_to_rank(row)}"


def parse_square(square: str) -> tuple[int, int]:
    """
    Inverse of to_square: 'e2' -> (6, 4).
    Raises ValueError for anything that is not a square on the board.
    """
    sq = (square or "").strip().lower()
    if len(sq) != 2 or sq[0] not in FILES or not sq[1].isdigit():
        raise ValueError(f"not a square: {square!r}")

    row = BOARD_SIZE - int(sq[1])
    col = FILES.index(sq[0])
    if not is_on_board(row, col):
        raise ValueError(f"not a square: {square!r}")
    return row, col


# Names used by the board UI for file/rank labels and the history panel
col_to_letter = column_to_file
row_to_number = row_to_rank
format_position = to_square
