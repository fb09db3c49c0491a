from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from duel.logic.enums import ConnectionStatus, Phase
from duel.logic.types import SLOT_COUNT

if TYPE_CHECKING:
    from duel.messaging.protocol import ConnectionProtocol


@dataclass
class Slot:
    """One of the two fixed participant positions.

    Lifecycle:
    - register: name is set
    - attach: connection is set and status becomes CONNECTED
    - detach (channel closed): connection is cleared and status becomes DISCONNECTED
    - reset: everything is cleared; the Slot object itself is reused
    """

    index: int
    name: str | None = None
    connection: ConnectionProtocol | None = None
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED

    @property
    def is_occupied(self) -> bool:
        return self.name is not None

    @property
    def is_live(self) -> bool:
        return self.connection is not None and self.status == ConnectionStatus.CONNECTED

    @property
    def connection_id(self) -> str | None:
        return self.connection.connection_id if self.connection is not None else None

    def attach(self, connection: ConnectionProtocol) -> ConnectionProtocol | None:
        """Attach a channel, returning the one it replaced (if any)."""
        previous = self.connection
        self.connection = connection
        self.status = ConnectionStatus.CONNECTED
        if previous is connection:
            return None
        return previous

    def detach(self) -> ConnectionProtocol | None:
        connection = self.connection
        self.connection = None
        self.status = ConnectionStatus.DISCONNECTED
        return connection

    def clear(self) -> None:
        self.name = None
        self.detach()


@dataclass
class Session:
    """Authoritative in-memory record of the single duel session.

    Created once and reset in place. Only SessionManager mutates it, always
    under its lock.
    """

    slots: list[Slot] = field(default_factory=lambda: [Slot(index=i) for i in range(SLOT_COUNT)])
    turn: int = 0
    phase: Phase = Phase.EMPTY
    session_id: int | None = None

    @property
    def occupied_names(self) -> list[str]:
        return [s.name for s in self.slots if s.name is not None]

    @property
    def player_count(self) -> int:
        return len(self.occupied_names)

    @property
    def is_paired(self) -> bool:
        return all(s.is_occupied and s.is_live for s in self.slots)

    def first_free_slot(self) -> Slot | None:
        for slot in self.slots:
            if not slot.is_occupied:
                return slot
        return None

    def slot_for_connection(self, connection_id: str) -> Slot | None:
        for slot in self.slots:
            if slot.connection_id == connection_id:
                return slot
        return None

    def opponent_of(self, index: int) -> Slot:
        return self.slots[1 - index]

    def live_connections(self) -> list[ConnectionProtocol]:
        return [s.connection for s in self.slots if s.connection is not None and s.is_live]

    def start(self, session_id: int) -> None:
        self.phase = Phase.ACTIVE
        self.turn = 0
        self.session_id = session_id

    def flip_turn(self) -> int:
        self.turn = 1 - self.turn
        return self.turn

    def reset(self) -> None:
        for slot in self.slots:
            slot.clear()
        self.turn = 0
        self.session_id = None
        self.phase = Phase.EMPTY
