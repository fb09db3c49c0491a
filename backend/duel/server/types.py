"""HTTP request bodies. Parsing failures surface as InvalidInput before reaching the session."""

from pydantic import BaseModel, ConfigDict, Field

from duel.logic.types import FireCommand, GameOverCommand


class RegisterRequest(BaseModel):
    # Name rules (trim, non-empty) live in the validator so both the HTTP and
    # direct callers share them; here we only require a string.
    model_config = ConfigDict(strict=True)

    name: str


class FireRequest(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    session_id: int = Field(alias="sessionId")
    player_id: int = Field(alias="playerId")
    angle: float = Field(allow_inf_nan=False)
    velocity: float = Field(allow_inf_nan=False)

    def to_command(self) -> FireCommand:
        return FireCommand(
            session_id=self.session_id,
            player_id=self.player_id,
            angle=self.angle,
            velocity=self.velocity,
        )


class GameOverRequest(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    session_id: int = Field(alias="sessionId")
    winner: int

    def to_command(self) -> GameOverCommand:
        return GameOverCommand(session_id=self.session_id, winner=self.winner)
