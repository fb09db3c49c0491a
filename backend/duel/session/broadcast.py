"""Best-effort delivery of events to the live channels of one or both slots."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from duel.messaging.encoder import encode
from duel.messaging.events import SlotTarget, event_payload

if TYPE_CHECKING:
    from collections.abc import Sequence

    from duel.messaging.events import EventTarget, ServerEvent
    from duel.session.models import Slot

logger = structlog.get_logger()

# Seconds a single channel may take to accept a frame before it is skipped.
SEND_TIMEOUT = 2.0


def _targeted(slots: Sequence[Slot], target: EventTarget) -> list[Slot]:
    if isinstance(target, SlotTarget):
        return [s for s in slots if s.index == target.slot]
    return list(slots)


async def broadcast_to_slots(
    slots: Sequence[Slot],
    event: ServerEvent,
    target: EventTarget,
    *,
    send_timeout: float = SEND_TIMEOUT,
) -> int:
    """Send an event to every targeted slot that is live. Returns the number of sends attempted.

    Slots without a channel or with a DISCONNECTED status are skipped: a gone
    participant simply misses the event. Send failures and sends that exceed
    send_timeout are logged and dropped, so a stalled socket delays the caller
    by at most send_timeout per slot.
    """
    data = encode(event_payload(event))
    sent = 0
    for slot in _targeted(slots, target):
        connection = slot.connection
        if connection is None or not slot.is_live:
            continue
        sent += 1
        try:
            async with asyncio.timeout(send_timeout):
                await connection.send_bytes(data)
        except TimeoutError:
            logger.warning("event delivery timed out", slot=slot.index, event_type=event.type)
        except (RuntimeError, OSError, ConnectionError) as e:
            logger.debug("event delivery failed", slot=slot.index, event_type=event.type, error=str(e))
    return sent
