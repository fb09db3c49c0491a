from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from duel.logic.enums import ErrorCode
from duel.logic.exceptions import DuelError
from duel.messaging.events import ErrorEvent, event_payload
from duel.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()

if TYPE_CHECKING:
    from duel.session.manager import SessionManager

# Close code for a channel whose playerId does not match a registered slot.
CLOSE_UNKNOWN_IDENTITY = 4001


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_bytes(self, data: bytes) -> None:
        try:
            await self._websocket.send_bytes(data)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def wait_closed(self) -> None:
        """Drain inbound frames until the client goes away. Clients never send anything we act on."""
        while True:
            message = await self._websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError):
            await self._websocket.close(code=code, reason=reason)


def _parse_player_id(raw: str | None) -> int | None:
    if raw is None or raw not in ("0", "1"):
        return None
    return int(raw)


async def _reject(connection: WebSocketConnection, code: ErrorCode, message: str) -> None:
    logger.info("channel rejected", error_code=code, error_message=message)
    with contextlib.suppress(ConnectionError, RuntimeError):
        await connection.send_message(event_payload(ErrorEvent(code=code, message=message)))
    await connection.close(code=CLOSE_UNKNOWN_IDENTITY, reason=code.value)


async def websocket_endpoint(websocket: WebSocket, session_manager: SessionManager) -> None:
    await websocket.accept()
    connection = WebSocketConnection(websocket)

    player_id = _parse_player_id(websocket.query_params.get("playerId"))
    if player_id is None:
        await _reject(connection, ErrorCode.UNKNOWN_IDENTITY, "Invalid or missing playerId")
        return

    try:
        await session_manager.attach(player_id, connection)
    except DuelError as e:
        await _reject(connection, e.code, e.message)
        return

    logger.info("websocket connected", connection_id=connection.connection_id, slot=player_id)
    try:
        await connection.wait_closed()
    except (WebSocketDisconnect, RuntimeError, ConnectionError):  # fmt: skip
        pass
    finally:
        logger.info("websocket disconnected", connection_id=connection.connection_id)
        await session_manager.detach(connection)
        structlog.contextvars.clear_contextvars()
