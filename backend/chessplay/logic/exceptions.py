"""Typed domain exceptions for chess move handling.

Rule-level rejections raise subclasses of GameRuleError. The session layer
catches them and turns them into error replies for the offending
connection only.
"""


class GameRuleError(Exception):
    """Base exception for rejected game actions."""


class IllegalMoveError(GameRuleError):
    """Move was rejected by the configured move validator."""


class SquareOutOfRangeError(IllegalMoveError):
    """Move references a square outside the 64-square board.

    Attributes:
        square: The offending square index as sent by the client.

    """

    def __init__(self, square: int) -> None:
        self.square = square
        super().__init__(f"Square out of range: {square}")
