"""
Pydantic models for chess game data structures.

Board squares are row-major indices 0-63 with square 0 on the far (black)
back rank. Piece and Move are immutable once created; GameState is owned by
a single Room and copied via snapshot() before it leaves the room.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from chessplay.logic.enums import Color, PieceType

BOARD_SIZE = 64
BOARD_WIDTH = 8

Square = int


class Piece(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: Color
    piece: PieceType


class Move(BaseModel):
    """A structural move: source square, target square, optional promotion piece."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: Square = Field(alias="from")
    to: Square
    promotion: PieceType | None = None


Board = list[Piece | None]


class GameState(BaseModel):
    board: Board
    turn: Color = Color.WHITE
    move_history: list[Move] = Field(default_factory=list)

    def snapshot(self) -> GameState:
        """Return a deep copy that is unaffected by later moves."""
        return self.model_copy(deep=True)


def is_valid_square(square: Square) -> bool:
    return 0 <= square < BOARD_SIZE
