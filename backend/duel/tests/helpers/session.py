"""Helpers that drive a SessionManager through registration and pairing."""

from __future__ import annotations

from typing import TYPE_CHECKING

from duel.logic.types import FireCommand
from duel.tests.mocks import MockConnection

if TYPE_CHECKING:
    from duel.session.manager import SessionManager


async def start_session(
    manager: SessionManager,
    names: tuple[str, str] = ("Alice", "Bob"),
) -> tuple[MockConnection, MockConnection]:
    """Register two players, attach both channels and clear the start-up messages."""
    conns = (MockConnection(), MockConnection())
    for name in names:
        await manager.register(name)
    for slot, conn in enumerate(conns):
        await manager.attach(slot, conn)
    for conn in conns:
        conn.clear()
    return conns


def fire_command(
    manager: SessionManager,
    player_id: int,
    angle: float = 45,
    velocity: float = 250,
) -> FireCommand:
    """Build a command for the current session id."""
    session_id = manager.session.session_id
    assert session_id is not None
    return FireCommand(session_id=session_id, player_id=player_id, angle=angle, velocity=velocity)
