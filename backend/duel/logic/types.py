from dataclasses import dataclass

SLOT_COUNT = 2
MIN_ANGLE = 0.0
MAX_ANGLE = 360.0


@dataclass(frozen=True)
class FireCommand:
    """A validated-shape shot request, not yet checked against session state."""

    session_id: int
    player_id: int
    angle: float
    velocity: float


@dataclass(frozen=True)
class GameOverCommand:
    """A terminal outcome reported by an external collaborator."""

    session_id: int
    winner: int
