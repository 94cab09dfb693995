from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from chessplay.logic.exceptions import SquareOutOfRangeError
from chessplay.logic.types import is_valid_square

if TYPE_CHECKING:
    from chessplay.logic.enums import Color
    from chessplay.logic.types import GameState, Move


class MoveValidator(ABC):
    """
    Abstract interface for move acceptance rules.

    Called by Room.apply_move after turn ownership has been checked and
    before the board is touched. Implementations reject a move by raising
    IllegalMoveError (or a subclass); returning normally accepts it.
    """

    @abstractmethod
    def validate(self, state: GameState, move: Move, color: Color) -> None:
        """
        Raise IllegalMoveError if the move must not be applied.
        """
        ...


class StructuralMoveValidator(MoveValidator):
    """Accept any move whose squares are on the board.

    No chess rules are enforced: moving an empty square, an opponent's
    piece, or onto your own piece is accepted.
    """

    def validate(self, state: GameState, move: Move, color: Color) -> None:  # noqa: ARG002
        for square in (move.from_, move.to):
            if not is_valid_square(square):
                raise SquareOutOfRangeError(square)
