"""Static battlefield geometry shared with both participants at game start."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from duel.server.settings import DuelServerSettings


class CastleConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    player_id: int = Field(alias="playerId")
    x: int
    y: int
    width: int
    height: int


class BattlefieldConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    canvas_width: int = Field(alias="canvasWidth")
    canvas_height: int = Field(alias="canvasHeight")
    gravity: float
    castles: tuple[CastleConfig, CastleConfig]


def build_battlefield(settings: DuelServerSettings) -> BattlefieldConfig:
    """Place castle 0 on the left and mirror castle 1 on the right, both on the ground."""
    y = settings.canvas_height - settings.castle_height
    left = CastleConfig(
        player_id=0,
        x=settings.castle_margin,
        y=y,
        width=settings.castle_width,
        height=settings.castle_height,
    )
    right = CastleConfig(
        player_id=1,
        x=settings.canvas_width - settings.castle_margin - settings.castle_width,
        y=y,
        width=settings.castle_width,
        height=settings.castle_height,
    )
    return BattlefieldConfig(
        canvas_width=settings.canvas_width,
        canvas_height=settings.canvas_height,
        gravity=settings.gravity,
        castles=(left, right),
    )
