"""Typed domain exceptions for duel protocol violations.

Every rejected operation raises a subclass of DuelError carrying an
ErrorCode and a human-readable message. The transport layer converts
them to a status code and a ``{"details": ...}`` body; nothing below
the transport retries.
"""

from duel.logic.enums import ErrorCode


class DuelError(Exception):
    """Base exception for rejected duel operations."""

    code: ErrorCode = ErrorCode.INVALID_INPUT
    default_message = "Invalid request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(DuelError):
    """Malformed or missing request fields."""

    code = ErrorCode.INVALID_INPUT
    default_message = "Invalid request"


class DuplicateNameError(DuelError):
    """The trimmed name already occupies a slot."""

    code = ErrorCode.DUPLICATE_NAME

    def __init__(self, name: str) -> None:
        super().__init__(f"Player {name} already registered")


class SessionFullError(DuelError):
    code = ErrorCode.SESSION_FULL
    default_message = "Server is full"


class UnknownIdentityError(DuelError):
    """Channel attach for a slot that has no registered name."""

    code = ErrorCode.UNKNOWN_IDENTITY
    default_message = "Player not registered"


class SessionActiveError(DuelError):
    """Channel attach after the session has started."""

    code = ErrorCode.SESSION_ACTIVE
    default_message = "Session already in progress"


class UnknownSessionError(DuelError):
    code = ErrorCode.UNKNOWN_SESSION
    default_message = "GameId is unknown"


class UnknownParticipantError(DuelError):
    code = ErrorCode.UNKNOWN_PARTICIPANT
    default_message = "PlayerId is unknown"


class NotYourTurnError(DuelError):
    code = ErrorCode.NOT_YOUR_TURN
    default_message = "Player should wait for its turn to fire"


class AngleOutOfRangeError(DuelError):
    code = ErrorCode.ANGLE_OUT_OF_RANGE
    default_message = "The angle should be within 0-360 degrees"


class InvalidVelocityError(DuelError):
    code = ErrorCode.INVALID_VELOCITY
    default_message = "The velocity should be positive"
