import asyncio

from duel.messaging.events import BroadcastTarget, SlotTarget, TurnChangeEvent
from duel.session.broadcast import broadcast_to_slots
from duel.session.models import Session
from duel.tests.mocks import MockConnection


class _StalledConnection(MockConnection):
    """Channel whose write buffer never drains."""

    async def send_bytes(self, data: bytes) -> None:
        await asyncio.Event().wait()


def _session_with(*connections: MockConnection | None) -> Session:
    session = Session()
    for slot, conn in zip(session.slots, connections, strict=True):
        slot.name = f"P{slot.index}"
        if conn is not None:
            slot.attach(conn)
    return session


class TestBroadcastToSlots:
    async def test_all_target_reaches_both(self):
        a, b = MockConnection(), MockConnection()
        session = _session_with(a, b)

        sent = await broadcast_to_slots(session.slots, TurnChangeEvent(turn=1), BroadcastTarget())

        assert sent == 2
        assert a.sent_messages == b.sent_messages == [{"type": "turn_change", "playerId_turn": 1}]

    async def test_slot_target_reaches_one(self):
        a, b = MockConnection(), MockConnection()
        session = _session_with(a, b)

        await broadcast_to_slots(session.slots, TurnChangeEvent(turn=0), SlotTarget(slot=1))

        assert a.sent_messages == []
        assert len(b.sent_messages) == 1

    async def test_skips_slot_without_channel(self):
        b = MockConnection()
        session = _session_with(None, b)

        sent = await broadcast_to_slots(session.slots, TurnChangeEvent(turn=0), BroadcastTarget())

        assert sent == 1
        assert len(b.sent_messages) == 1

    async def test_skips_detached_slot(self):
        a, b = MockConnection(), MockConnection()
        session = _session_with(a, b)
        session.slots[0].detach()

        await broadcast_to_slots(session.slots, TurnChangeEvent(turn=0), BroadcastTarget())

        assert a.sent_messages == []
        assert len(b.sent_messages) == 1

    async def test_send_failure_is_swallowed(self):
        closed, b = MockConnection(), MockConnection()
        await closed.close()
        session = _session_with(closed, b)

        await broadcast_to_slots(session.slots, TurnChangeEvent(turn=0), BroadcastTarget())

        assert len(b.sent_messages) == 1

    async def test_stalled_channel_does_not_block_delivery(self):
        stalled, b = _StalledConnection(), MockConnection()
        session = _session_with(stalled, b)

        sent = await broadcast_to_slots(
            session.slots,
            TurnChangeEvent(turn=0),
            BroadcastTarget(),
            send_timeout=0.01,
        )

        assert sent == 2
        assert b.sent_messages == [{"type": "turn_change", "playerId_turn": 0}]
