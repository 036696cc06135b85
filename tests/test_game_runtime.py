import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

from hints_online.models.game import GameState
from hints_online.services.game_runtime import ROOM_CODE_ALPHABET, GameRuntime, generate_room_code
from hints_online.services.scheduler import TimerScheduler


def _fake_engine():
    listeners = []
    ticks = []
    engine = SimpleNamespace(
        rules=SimpleNamespace(broadcast_interval_sec=60),
        scheduler=TimerScheduler(),
        add_listener=listeners.append,
        tick=lambda: ticks.append(1),
        snapshot=GameState,
    )
    return engine, listeners, ticks


def test_room_code_uses_unambiguous_alphabet():
    code = generate_room_code(6)

    assert len(code) == 6
    assert set(code) <= set(ROOM_CODE_ALPHABET)


def test_room_code_match_ignores_case():
    engine, _, _ = _fake_engine()
    runtime = GameRuntime(engine, AsyncMock(), room_code="AB2C")

    assert runtime.matches_room(" ab2c ")
    assert not runtime.matches_room("AB2D")


def test_countdown_restarts_a_full_period_when_a_card_starts():
    engine, listeners, ticks = _fake_engine()
    runtime = GameRuntime(engine, AsyncMock(), room_code="AB2C", tick_interval=0.2)

    async def scenario():
        await runtime.start()
        await asyncio.sleep(0.1)
        for listener in listeners:
            listener(SimpleNamespace(kind="round_started"))
        # un cycle fixe aurait tické à 0.2 s
        await asyncio.sleep(0.15)
        before_rearmed_tick = len(ticks)
        await asyncio.sleep(0.1)
        after_rearmed_tick = len(ticks)
        await runtime.stop()
        return before_rearmed_tick, after_rearmed_tick

    before, after = asyncio.run(scenario())

    assert before == 0
    assert after == 1
    assert not runtime.running


def test_other_events_do_not_shift_the_countdown():
    engine, listeners, ticks = _fake_engine()
    runtime = GameRuntime(engine, AsyncMock(), room_code="AB2C", tick_interval=0.2)

    async def scenario():
        await runtime.start()
        await asyncio.sleep(0.1)
        for listener in listeners:
            listener(SimpleNamespace(kind="correct_guess"))
        await asyncio.sleep(0.15)
        count = len(ticks)
        await runtime.stop()
        return count

    assert asyncio.run(scenario()) == 1
