"""Pure validation of registration names and shot commands.

Each check raises the DuelError subclass for its reason. fire checks run in a
fixed order so the first failing condition is the one reported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from duel.logic.enums import Phase
from duel.logic.exceptions import (
    AngleOutOfRangeError,
    DuplicateNameError,
    InvalidInputError,
    InvalidVelocityError,
    NotYourTurnError,
    UnknownParticipantError,
    UnknownSessionError,
)
from duel.logic.types import MAX_ANGLE, MIN_ANGLE, SLOT_COUNT

if TYPE_CHECKING:
    from duel.logic.types import FireCommand, GameOverCommand
    from duel.session.models import Session


def normalize_name(name: object) -> str:
    """Return the trimmed name, or raise InvalidInputError if it is not usable."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Name is required")
    return name.strip()


def validate_name_available(session: Session, name: str) -> None:
    if name in session.occupied_names:
        raise DuplicateNameError(name)


def is_valid_slot(player_id: int) -> bool:
    return 0 <= player_id < SLOT_COUNT


def validate_active_session(session: Session, session_id: int) -> None:
    if session.phase != Phase.ACTIVE or session.session_id != session_id:
        raise UnknownSessionError


def validate_fire(session: Session, command: FireCommand) -> None:
    """Check a fire command against the current session, first failure wins."""
    validate_active_session(session, command.session_id)
    if not is_valid_slot(command.player_id):
        raise UnknownParticipantError
    if command.player_id != session.turn:
        raise NotYourTurnError
    if not (MIN_ANGLE <= command.angle <= MAX_ANGLE):
        raise AngleOutOfRangeError
    if command.velocity <= 0:
        raise InvalidVelocityError


def validate_game_over(session: Session, command: GameOverCommand) -> None:
    validate_active_session(session, command.session_id)
    if not is_valid_slot(command.winner):
        raise UnknownParticipantError("Winner is unknown")
