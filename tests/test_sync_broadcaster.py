import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

from hints_online.models.game import GameState, Phase
from hints_online.services.sync_broadcaster import SyncBroadcaster


def _engine(phase=Phase.LOBBY):
    return SimpleNamespace(snapshot=lambda: GameState(phase=phase))


def test_compose_wraps_snapshot_with_sent_at():
    broadcaster = SyncBroadcaster(_engine(Phase.SPINNING), AsyncMock(), clock=lambda: 12.5)

    message = broadcaster.compose()

    assert message["type"] == "STATE_UPDATE"
    assert message["sentAt"] == 12500
    assert message["state"]["phase"] == "SPINNING"
    assert "sentAt" not in message["state"]


def test_push_uses_transport_broadcast_all():
    transport = AsyncMock()
    transport.broadcast_all.return_value = 3
    broadcaster = SyncBroadcaster(_engine(), transport)

    delivered = asyncio.run(broadcaster.push())

    assert delivered == 3
    transport.broadcast_all.assert_awaited_once()
    assert broadcaster.sent == 1


def test_notify_wakes_the_loop_early():
    transport = AsyncMock()
    transport.broadcast_all.return_value = 0
    broadcaster = SyncBroadcaster(_engine(), transport, interval=60)

    async def scenario():
        task = asyncio.create_task(broadcaster.run())
        await asyncio.sleep(0.01)
        broadcaster.notify()
        await asyncio.sleep(0.01)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    asyncio.run(scenario())

    assert transport.broadcast_all.await_count == 2


def test_failed_push_does_not_stop_the_loop():
    calls = []

    async def flaky(payload):
        calls.append(payload)
        if len(calls) == 1:
            raise RuntimeError("socket gone")
        return 1

    transport = AsyncMock()
    transport.broadcast_all.side_effect = flaky
    broadcaster = SyncBroadcaster(_engine(), transport, interval=0.005)

    async def scenario():
        task = asyncio.create_task(broadcaster.run())
        await asyncio.sleep(0.05)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    asyncio.run(scenario())

    assert transport.broadcast_all.await_count >= 2
