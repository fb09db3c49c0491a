"""
String enum definitions for duel session concepts.
"""

from enum import StrEnum


class Phase(StrEnum):
    """Lifecycle stage of the duel session."""

    EMPTY = "empty"
    AWAITING_OPPONENT = "awaiting_opponent"
    ACTIVE = "active"
    TERMINATED = "terminated"


class ConnectionStatus(StrEnum):
    """Channel state of a slot, tracked independently of the transport."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class ErrorCode(StrEnum):
    """Reason codes reported to the caller of a rejected operation."""

    INVALID_INPUT = "invalid_input"
    DUPLICATE_NAME = "duplicate_name"
    SESSION_FULL = "session_full"
    UNKNOWN_IDENTITY = "unknown_identity"
    SESSION_ACTIVE = "session_active"
    UNKNOWN_SESSION = "unknown_session"
    UNKNOWN_PARTICIPANT = "unknown_participant"
    NOT_YOUR_TURN = "not_your_turn"
    ANGLE_OUT_OF_RANGE = "angle_out_of_range"
    INVALID_VELOCITY = "invalid_velocity"
