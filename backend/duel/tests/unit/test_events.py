import pytest
from pydantic import ValidationError

from duel.logic.enums import ErrorCode
from duel.messaging.events import (
    ErrorEvent,
    GameOverEvent,
    GameStartEvent,
    ShotEvent,
    TurnChangeEvent,
    event_payload,
    parse_server_event,
)


class TestEventPayload:
    def test_game_start_uses_wire_names(self, battlefield):
        payload = event_payload(GameStartEvent(game_id=3, player_id=1, opponent_name="Alice", battlefield=battlefield))

        assert payload["type"] == "game_start"
        assert payload["gameId"] == 3
        assert payload["playerId"] == 1
        assert payload["opponentName"] == "Alice"
        assert payload["battlefield"]["castles"][1]["playerId"] == 1

    def test_shot(self):
        assert event_payload(ShotEvent(player_id=0, angle=45, velocity=250)) == {
            "type": "shot",
            "playerId": 0,
            "angle": 45.0,
            "velocity": 250.0,
        }

    def test_turn_change(self):
        assert event_payload(TurnChangeEvent(turn=1)) == {"type": "turn_change", "playerId_turn": 1}

    def test_game_over(self):
        assert event_payload(GameOverEvent(winner=0)) == {"type": "game_over", "playerId_winner": 0}

    def test_error_code_is_plain_string(self):
        payload = event_payload(ErrorEvent(code=ErrorCode.UNKNOWN_IDENTITY, message="Player not registered"))
        assert payload == {"type": "error", "code": "unknown_identity", "message": "Player not registered"}


class TestParseServerEvent:
    def test_parses_each_variant(self, battlefield):
        events = [
            GameStartEvent(game_id=1, player_id=0, opponent_name="Bob", battlefield=battlefield),
            ShotEvent(player_id=1, angle=10.5, velocity=99),
            TurnChangeEvent(turn=0),
            GameOverEvent(winner=1),
            ErrorEvent(code=ErrorCode.SESSION_ACTIVE, message="busy"),
        ]
        for event in events:
            assert parse_server_event(event_payload(event)) == event

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_server_event({"type": "chat", "text": "hi"})

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError):
            parse_server_event({"type": "turn_change"})
