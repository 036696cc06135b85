import asyncio
import random

import pytest

from hints_online.config.settings import GameRules
from hints_online.models.player import Player
from hints_online.services.game_engine import GameEngine
from hints_online.services.word_supply import WordSupply

FALLBACK = {
    "standard": ["Fiets", "Kat", "Tafel", "Paraplu", "Vliegtuig", "Boek"],
    "christmas": ["Kerstboom", "Slee", "Sneeuwpop"],
}


class ManualScheduler:
    """Enregistre les rappels différés ; les tests les déclenchent explicitement."""

    def __init__(self):
        self.calls = []

    def call_later(self, delay, callback, *args):
        self.calls.append((delay, callback, args))

    def fire_next(self):
        _, callback, args = self.calls.pop(0)
        result = callback(*args)
        if asyncio.iscoroutine(result):
            asyncio.run(result)

    def fire_all(self):
        while self.calls:
            self.fire_next()

    async def cancel_all(self):
        self.calls.clear()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def supply():
    return WordSupply(generator=None, fallback_words={k: list(v) for k, v in FALLBACK.items()})


@pytest.fixture
def engine(scheduler, supply):
    return GameEngine(
        rules=GameRules(card_duration_sec=3, total_cards_per_turn=2, max_rounds=2),
        word_supply=supply,
        scheduler=scheduler,
        clock=lambda: 1000.0,
        rng=random.Random(7),
    )


def join_players(engine, *names):
    for name in names:
        engine.join(Player(id=name.lower(), name=name))


@pytest.fixture
def ready_engine(engine, scheduler):
    """Partie lancée : tour 1 en ROUND_INTRO, mots chargés."""
    join_players(engine, "Anna", "Bram", "Cor")
    assert engine.start_game()["ok"]
    scheduler.fire_next()
    return engine
