"""
String enum definitions for chess game concepts.

Values match the wire protocol spelling ("White", "Pawn", ...).
"""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    """Side a player controls."""

    WHITE = "White"
    BLACK = "Black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "Pawn"
    KNIGHT = "Knight"
    BISHOP = "Bishop"
    ROOK = "Rook"
    QUEEN = "Queen"
    KING = "King"
