"""Two-player room: seating, color assignment, game lifecycle and fan-out."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from chessplay.logic.board import new_game_state
from chessplay.logic.validator import MoveValidator, StructuralMoveValidator
from chessplay.messaging.types import dump_message
from chessplay.session.types import RoomInfo, RoomStatus

if TYPE_CHECKING:
    from uuid import UUID

    from chessplay.logic.enums import Color
    from chessplay.logic.types import GameState, Move
    from chessplay.messaging.types import ServerMessage
    from chessplay.session.models import Client

logger = structlog.get_logger()

MAX_CLIENTS = 2


@dataclass
class Room:
    """One game session between two connections.

    State machine: empty -> waiting (1 client) -> waiting (2 clients) -> started.
    Dropping below two clients from any state discards the game.

    Invariants:
    - at most MAX_CLIENTS clients are seated
    - the first joiner holds reserved_color, the second its opposite
    - seated clients never share a color
    - started is True iff game_state is not None

    Mutating methods are synchronous and never perform I/O. Callers
    serialize access through RoomRegistry.with_room.
    """

    room_id: UUID
    reserved_color: Color
    validator: MoveValidator = field(default_factory=StructuralMoveValidator)
    clients: list[Client] = field(default_factory=list)
    game_state: GameState | None = None
    started: bool = False
    created_at: float = field(default_factory=time.monotonic)

    @classmethod
    def create(cls, reserved_color: Color, validator: MoveValidator | None = None) -> Room:
        return cls(
            room_id=uuid.uuid4(),
            reserved_color=reserved_color,
            validator=validator or StructuralMoveValidator(),
        )

    # --- Read accessors ---

    @property
    def client_count(self) -> int:
        return len(self.clients)

    @property
    def is_started(self) -> bool:
        return self.started

    @property
    def is_full(self) -> bool:
        return self.client_count >= MAX_CLIENTS

    @property
    def status(self) -> RoomStatus:
        if self.started:
            return RoomStatus.STARTED
        if not self.clients:
            return RoomStatus.EMPTY
        return RoomStatus.WAITING

    def get_client(self, client_id: UUID) -> Client | None:
        return next((c for c in self.clients if c.id == client_id), None)

    def has_client(self, client_id: UUID) -> bool:
        return self.get_client(client_id) is not None

    def snapshot_state(self) -> GameState | None:
        return self.game_state.snapshot() if self.game_state is not None else None

    def get_info(self) -> RoomInfo:
        return RoomInfo(
            room_id=self.room_id,
            reserved_color=self.reserved_color,
            status=self.status,
            client_count=self.client_count,
            moves_played=len(self.game_state.move_history) if self.game_state is not None else 0,
        )

    # --- Seating ---

    def add_client(self, client: Client) -> Color | None:
        """Seat a client and assign its color. Returns None if the room is full."""
        if self.is_full:
            logger.info("room full, join rejected", room_id=str(self.room_id), client_id=str(client.id))
            return None

        # a refilled seat takes whatever color the remaining occupant does not hold
        color = self.reserved_color if not self.clients else self.clients[0].color.opponent
        client.color = color
        self.clients.append(client)
        logger.info("client joined room", room_id=str(self.room_id), client_id=str(client.id), color=color)
        return color

    def remove_client(self, client_id: UUID) -> bool:
        """Remove a client by id. Below two clients the game is discarded."""
        remaining = [c for c in self.clients if c.id != client_id]
        removed = len(remaining) != len(self.clients)
        self.clients = remaining

        if self.client_count < MAX_CLIENTS:
            if self.started:
                logger.info("game discarded, not enough players", room_id=str(self.room_id))
            self.started = False
            self.game_state = None
        return removed

    # --- Game lifecycle ---

    def can_start(self) -> bool:
        return self.client_count == MAX_CLIENTS and not self.started

    def start(self) -> bool:
        """Create a fresh game if can_start(). Returns True only when a game started on this call."""
        if not self.can_start():
            return False
        self.game_state = new_game_state()
        self.started = True
        logger.info("game started", room_id=str(self.room_id))
        return True

    def apply_move(self, client_id: UUID, move: Move) -> tuple[Move, GameState] | None:
        """Apply a move for the client whose turn it is.

        Returns the applied move and a snapshot of the resulting state, or
        None when there is no game, the client is not seated or has no
        color, or it is not the client's turn. Validator rejections
        (IllegalMoveError) propagate to the caller; the board is untouched
        in every failure case.
        """
        state = self.game_state
        if state is None:
            logger.debug("move rejected, no game in progress", room_id=str(self.room_id))
            return None

        client = self.get_client(client_id)
        if client is None or client.color is None:
            logger.debug("move rejected, client not seated", room_id=str(self.room_id), client_id=str(client_id))
            return None

        if state.turn != client.color:
            logger.debug(
                "move rejected, not this client's turn",
                room_id=str(self.room_id),
                client_color=client.color,
                turn=state.turn,
            )
            return None

        self.validator.validate(state, move, client.color)

        state.board[move.to] = state.board[move.from_]
        state.board[move.from_] = None
        state.turn = state.turn.opponent
        state.move_history.append(move)
        logger.info(
            "move applied",
            room_id=str(self.room_id),
            from_square=move.from_,
            to_square=move.to,
            next_turn=state.turn,
        )
        return move, state.snapshot()

    # --- Fan-out ---

    def broadcast(self, message: ServerMessage) -> int:
        """Deliver a message to every seated client. Returns the number of successful deliveries."""
        payload = dump_message(message)
        delivered = 0
        for client in list(self.clients):
            if self._deliver(client, payload):
                delivered += 1
        return delivered

    def send_to(self, client_id: UUID, message: ServerMessage) -> bool:
        client = self.get_client(client_id)
        if client is None:
            return False
        return self._deliver(client, dump_message(message))

    def _deliver(self, client: Client, payload: dict) -> bool:
        try:
            delivered = client.sink.deliver(payload)
        except (RuntimeError, OSError, ConnectionError) as e:
            logger.warning(
                "delivery failed",
                room_id=str(self.room_id),
                client_id=str(client.id),
                error=str(e),
            )
            return False
        if not delivered:
            logger.warning("recipient gone, message dropped", room_id=str(self.room_id), client_id=str(client.id))
        return delivered
