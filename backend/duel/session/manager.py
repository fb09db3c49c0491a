from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import structlog

from duel.logic.enums import Phase
from duel.logic.exceptions import SessionActiveError, SessionFullError, UnknownIdentityError
from duel.logic.validation import (
    is_valid_slot,
    normalize_name,
    validate_fire,
    validate_game_over,
    validate_name_available,
)
from duel.messaging.events import (
    BroadcastTarget,
    GameOverEvent,
    GameStartEvent,
    ShotEvent,
    SlotTarget,
    TurnChangeEvent,
)
from duel.session.broadcast import broadcast_to_slots
from duel.session.models import Session

if TYPE_CHECKING:
    from duel.logic.battlefield import BattlefieldConfig
    from duel.logic.types import FireCommand, GameOverCommand
    from duel.messaging.events import EventTarget, ServerEvent
    from duel.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()

# Close codes used when the server drops a channel itself.
CLOSE_SESSION_ENDED = 1000
CLOSE_REPLACED = 4002


class SessionManager:
    """Turn/lifecycle state machine for the single duel session.

    Every public operation runs under one asyncio.Lock, so each request,
    broadcasts included, completes before the next one touches the session.
    Broadcasts are awaited under the lock so events keep their order; each
    send is bounded by broadcast.SEND_TIMEOUT, so a stalled channel cannot
    hold the lock indefinitely. Channels are closed outside the lock: closing
    re-enters detach() through the WebSocket disconnect handler.
    """

    def __init__(self, battlefield: BattlefieldConfig) -> None:
        self._battlefield = battlefield
        self._session = Session()
        self._lock = asyncio.Lock()
        self._next_session_id = 1

    @property
    def session(self) -> Session:
        return self._session

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def player_count(self) -> int:
        return self._session.player_count

    # --- Registration ---

    async def register(self, name: object) -> int:
        """Reserve the first free slot for a trimmed, unique name and return its index."""
        trimmed = normalize_name(name)
        async with self._lock:
            validate_name_available(self._session, trimmed)
            slot = self._session.first_free_slot()
            if slot is None:
                raise SessionFullError
            slot.name = trimmed
            if self._session.phase == Phase.EMPTY:
                self._session.phase = Phase.AWAITING_OPPONENT
            logger.info("player registered", slot=slot.index, player_name=trimmed)
            return slot.index

    # --- Channel attachment ---

    async def attach(self, slot_index: int, connection: ConnectionProtocol) -> None:
        """Attach a live channel to a registered slot; start the session once both are live."""
        replaced: ConnectionProtocol | None = None
        async with self._lock:
            if not is_valid_slot(slot_index) or not self._session.slots[slot_index].is_occupied:
                raise UnknownIdentityError
            if self._session.phase == Phase.ACTIVE:
                raise SessionActiveError
            slot = self._session.slots[slot_index]
            replaced = slot.attach(connection)
            structlog.contextvars.bind_contextvars(slot=slot_index)
            logger.info("channel attached", connection_id=connection.connection_id, replaced=replaced is not None)
            if self._session.is_paired:
                await self._start_session()

        if replaced is not None:
            with contextlib.suppress(RuntimeError, OSError, ConnectionError):
                await replaced.close(code=CLOSE_REPLACED, reason="replaced")

    async def _start_session(self) -> None:
        """AWAITING_OPPONENT -> ACTIVE. Must be called under the lock."""
        session_id = self._next_session_id
        self._next_session_id += 1
        self._session.start(session_id)
        logger.info("session started", session_id=session_id)

        for slot in self._session.slots:
            opponent = self._session.opponent_of(slot.index)
            await self._broadcast(
                GameStartEvent(
                    game_id=session_id,
                    player_id=slot.index,
                    opponent_name=opponent.name or "",
                    battlefield=self._battlefield,
                ),
                SlotTarget(slot=slot.index),
            )
        await self._broadcast(TurnChangeEvent(turn=self._session.turn), BroadcastTarget())

    # --- Actions ---

    async def fire(self, command: FireCommand) -> None:
        """Validate and relay a shot, then hand the turn to the opponent."""
        async with self._lock:
            validate_fire(self._session, command)
            logger.info(
                "shot fired",
                session_id=command.session_id,
                slot=command.player_id,
                angle=command.angle,
                velocity=command.velocity,
            )
            await self._broadcast(
                ShotEvent(player_id=command.player_id, angle=command.angle, velocity=command.velocity),
                BroadcastTarget(),
            )
            turn = self._session.flip_turn()
            await self._broadcast(TurnChangeEvent(turn=turn), BroadcastTarget())

    async def report_game_over(self, command: GameOverCommand) -> None:
        """Broadcast an externally determined winner and terminate the session."""
        async with self._lock:
            validate_game_over(self._session, command)
            logger.info("game over", session_id=command.session_id, winner=command.winner)
            await self._broadcast(GameOverEvent(winner=command.winner), BroadcastTarget())
            to_close = self._terminate("game_over")
        await self._close_all(to_close)

    # --- Disconnection ---

    async def detach(self, connection: ConnectionProtocol) -> None:
        """Handle a closed channel. Fatal to the session if the channel is attached to a slot."""
        async with self._lock:
            slot = self._session.slot_for_connection(connection.connection_id)
            if slot is None:
                return
            slot.detach()
            logger.info("channel closed", slot=slot.index, phase=self._session.phase)
            if self._session.phase not in (Phase.AWAITING_OPPONENT, Phase.ACTIVE):
                return
            to_close = self._terminate("disconnect")
        await self._close_all(to_close)

    def _terminate(self, reason: str) -> list[ConnectionProtocol]:
        """ACTIVE/AWAITING_OPPONENT -> TERMINATED -> EMPTY. Must be called under the lock.

        Returns the channels that were still attached so the caller can close
        them once the lock is released.
        """
        self._session.phase = Phase.TERMINATED
        logger.info("session terminated", reason=reason, session_id=self._session.session_id)
        survivors = self._session.live_connections()
        self._session.reset()
        return survivors

    async def _close_all(self, connections: list[ConnectionProtocol]) -> None:
        for connection in connections:
            with contextlib.suppress(RuntimeError, OSError, ConnectionError):
                await connection.close(code=CLOSE_SESSION_ENDED, reason="session_ended")

    async def close_all_connections(self) -> None:
        """Shut down: reset the session and close every attached channel."""
        async with self._lock:
            to_close = self._session.live_connections()
            self._session.reset()
        await self._close_all(to_close)

    async def _broadcast(self, event: ServerEvent, target: EventTarget) -> None:
        await broadcast_to_slots(self._session.slots, event, target)
