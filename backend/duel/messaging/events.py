"""Server-pushed channel events and their routing targets.

ServerEvent is a closed discriminated union on ``type``. event_payload()
is the only serializer and parse_server_event() its counterpart, so both
directions accept exactly the same set of variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from duel.logic.battlefield import BattlefieldConfig  # noqa: TC001
from duel.logic.enums import ErrorCode

# ---------------------------------------------------------------------------
# Typed routing targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BroadcastTarget:
    """Event should be sent to both slots."""


@dataclass(frozen=True)
class SlotTarget:
    """Event should be sent to a single slot."""

    slot: int


EventTarget = BroadcastTarget | SlotTarget


# ---------------------------------------------------------------------------
# Event models
# ---------------------------------------------------------------------------


class EventType(StrEnum):
    GAME_START = "game_start"
    SHOT = "shot"
    TURN_CHANGE = "turn_change"
    GAME_OVER = "game_over"
    ERROR = "error"


class ServerEvent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class GameStartEvent(ServerEvent):
    """Sent to each slot individually; carries the *other* participant's name."""

    type: Literal[EventType.GAME_START] = EventType.GAME_START
    game_id: int = Field(alias="gameId")
    player_id: int = Field(alias="playerId")
    opponent_name: str = Field(alias="opponentName")
    battlefield: BattlefieldConfig


class ShotEvent(ServerEvent):
    type: Literal[EventType.SHOT] = EventType.SHOT
    player_id: int = Field(alias="playerId")
    angle: float
    velocity: float


class TurnChangeEvent(ServerEvent):
    type: Literal[EventType.TURN_CHANGE] = EventType.TURN_CHANGE
    turn: int = Field(alias="playerId_turn")


class GameOverEvent(ServerEvent):
    type: Literal[EventType.GAME_OVER] = EventType.GAME_OVER
    winner: int = Field(alias="playerId_winner")


class ErrorEvent(ServerEvent):
    """Sent on a channel that is about to be rejected and closed."""

    type: Literal[EventType.ERROR] = EventType.ERROR
    code: ErrorCode
    message: str


ServerEventVariant = GameStartEvent | ShotEvent | TurnChangeEvent | GameOverEvent | ErrorEvent

AnyServerEvent = Annotated[
    ServerEventVariant,
    Field(discriminator="type"),
]

_server_event_adapter: TypeAdapter[AnyServerEvent] = TypeAdapter(AnyServerEvent)


def event_payload(event: ServerEvent) -> dict[str, Any]:
    """Return the wire-format dict for an event (camelCase aliases, plain enums)."""
    return event.model_dump(mode="json", by_alias=True)


def parse_server_event(data: dict[str, Any]) -> ServerEventVariant:
    """Parse a decoded frame back into its typed event, raising ValidationError otherwise."""
    return _server_event_adapter.validate_python(data)
