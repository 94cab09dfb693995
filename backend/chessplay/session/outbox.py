"""Per-connection outbound queue drained by a dedicated pump task."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

import structlog

from chessplay.session.models import DeliverySink

if TYPE_CHECKING:
    from chessplay.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()

_DRAIN_TIMEOUT = 1.0  # seconds to wait for queued messages before a forced close


class ConnectionOutbox(DeliverySink):
    """Unbounded FIFO between rooms and one connection's transport.

    deliver() never blocks and never touches the socket; the pump task
    started by start() performs the actual sends in order. A send failure
    closes the outbox, after which deliver() reports the recipient as gone.
    """

    def __init__(self, connection: ConnectionProtocol) -> None:
        self._connection = connection
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Start the pump task. Idempotent."""
        if self._task is None and not self._closed:
            self._task = asyncio.create_task(self._pump())

    def deliver(self, message: dict[str, Any]) -> bool:
        if self._closed:
            return False
        self._queue.put_nowait(message)
        return True

    async def _pump(self) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._connection.send_message(message)
            except (ConnectionError, RuntimeError, OSError) as e:
                logger.info(
                    "outbound send failed, closing outbox",
                    connection_id=self._connection.connection_id,
                    error=str(e),
                )
                self._closed = True
                return
            finally:
                self._queue.task_done()

    async def drain(self, timeout: float = _DRAIN_TIMEOUT) -> None:
        """Wait until queued messages have been sent, or the timeout elapses."""
        if self._task is None or self._task.done():
            return
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._queue.join(), timeout)

    async def stop(self) -> None:
        """Close the outbox and cancel the pump; undelivered messages are dropped."""
        self._closed = True
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
