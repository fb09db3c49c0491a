"""Shared WebSocket/HTTP test helpers for integration tests."""

from duel.messaging.encoder import decode


def recv_ws(ws) -> dict:
    """Receive and decode a MessagePack frame from a test WebSocket."""
    return decode(ws.receive_bytes())


def register(client, name: str) -> int:
    response = client.post("/api/v1/register", json={"name": name})
    assert response.status_code == 200, response.text
    return response.json()["playerId"]


def recv_start(ws) -> tuple[dict, dict]:
    """Drain the game_start and first turn_change frames sent on pairing."""
    start = recv_ws(ws)
    turn = recv_ws(ws)
    assert start["type"] == "game_start"
    assert turn["type"] == "turn_change"
    return start, turn
