from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from uuid import UUID

    from chessplay.logic.enums import Color


class DeliverySink(ABC):
    """
    Ordered, non-blocking outbound channel for one connection.

    Rooms only ever enqueue onto sinks, so delivering a message never
    performs transport I/O and is safe while a room lock is held.
    """

    @abstractmethod
    def deliver(self, message: dict[str, Any]) -> bool:
        """
        Enqueue a message. Returns False if the recipient is gone.
        """
        ...


@dataclass
class Client:
    """Represent a connection seated in a room.

    Lifecycle:
    - Created by the session layer when a JoinGame request reaches a room
    - color is set by Room.add_client before insertion
    - Removed by Room.remove_client on disconnect
    """

    id: UUID
    sink: DeliverySink
    color: Color | None = None


class SessionState(StrEnum):
    CONNECTED = "connected"
    IDENTIFIED = "identified"
    JOINED = "joined"


@dataclass
class Session:
    """Per-connection protocol state.

    client_id is set by Identify; room_id is set once a join succeeds.
    """

    connection_id: str
    sink: DeliverySink
    client_id: UUID | None = None
    room_id: UUID | None = None

    @property
    def state(self) -> SessionState:
        if self.client_id is None:
            return SessionState.CONNECTED
        if self.room_id is None:
            return SessionState.IDENTIFIED
        return SessionState.JOINED
