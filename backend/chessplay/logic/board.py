"""Standard chess starting position and fresh game state construction."""

from chessplay.logic.enums import Color, PieceType
from chessplay.logic.types import BOARD_SIZE, BOARD_WIDTH, Board, GameState, Piece

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# row index of each side's back rank and pawn rank (row 0 is the far rank)
_BLACK_BACK_ROW = 0
_BLACK_PAWN_ROW = 1
_WHITE_PAWN_ROW = 6
_WHITE_BACK_ROW = 7


def square_at(row: int, file: int) -> int:
    return row * BOARD_WIDTH + file


def create_initial_layout() -> Board:
    """Return the standard starting arrangement as a fresh 64-slot board."""
    board: Board = [None] * BOARD_SIZE
    for file, piece_type in enumerate(BACK_RANK):
        board[square_at(_BLACK_BACK_ROW, file)] = Piece(color=Color.BLACK, piece=piece_type)
        board[square_at(_BLACK_PAWN_ROW, file)] = Piece(color=Color.BLACK, piece=PieceType.PAWN)
        board[square_at(_WHITE_PAWN_ROW, file)] = Piece(color=Color.WHITE, piece=PieceType.PAWN)
        board[square_at(_WHITE_BACK_ROW, file)] = Piece(color=Color.WHITE, piece=piece_type)
    return board


def new_game_state() -> GameState:
    """Initial layout, White to move, empty history."""
    return GameState(board=create_initial_layout(), turn=Color.WHITE, move_history=[])
