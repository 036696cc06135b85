"""
Service: game_runtime.py
Rôle:
- Assembler la partie en mémoire : moteur, transport WebSocket, diffuseur et code de salle.
- Porter les boucles de fond du host : décompte 1 s (`engine.tick`) et diffusion 500 ms.
- Le décompte est recalé sur le début de chaque carte (`round_started`, `card_advanced`) :
  la première seconde d'une carte dure toujours une seconde pleine.

Cycle de vie:
- `start()` au démarrage FastAPI (lance les tâches), `stop()` à l'arrêt
  (annule tâches et timers différés, ferme les sockets).
- Une seule salle par processus : `RUNTIME`.
"""
from __future__ import annotations

import asyncio
import logging
import secrets
from typing import Any, List, Optional

from hints_online.config.settings import GameRules, settings
from .game_engine import GameEngine
from .message_router import MessageRouter
from .scheduler import TimerScheduler
from .sync_broadcaster import SyncBroadcaster
from .word_generator import build_word_generator
from .word_supply import WordSupply
from .ws_manager import WS, WSManager

logger = logging.getLogger(__name__)

# Sans I/O/1/0 pour la lecture à voix haute
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
# Événements qui ouvrent une nouvelle carte
REARM_EVENTS = frozenset({"round_started", "card_advanced"})


def generate_room_code(length: int = 4) -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


class GameRuntime:
    def __init__(
        self,
        engine: GameEngine,
        transport: WSManager,
        *,
        room_code: Optional[str] = None,
        tick_interval: float = 1.0,
    ) -> None:
        self.engine = engine
        self.transport = transport
        self.room_code = room_code or generate_room_code(settings.ROOM_CODE_LENGTH)
        self.tick_interval = tick_interval
        self.router = MessageRouter(engine)
        self.broadcaster = SyncBroadcaster(
            engine, transport, interval=engine.rules.broadcast_interval_sec
        )
        engine.add_listener(self.broadcaster.notify)
        engine.add_listener(self._on_engine_event)
        self._rearm: Optional[asyncio.Event] = None
        self._tasks: List[asyncio.Task] = []

    def matches_room(self, code: str) -> bool:
        return (code or "").strip().upper() == self.room_code

    def _on_engine_event(self, event: Any) -> None:
        # Une carte qui démarre repart sur une seconde pleine
        if event.kind in REARM_EVENTS and self._rearm is not None:
            self._rearm.set()

    async def _countdown_loop(self) -> None:
        self._rearm = asyncio.Event()
        try:
            while True:
                try:
                    await asyncio.wait_for(self._rearm.wait(), timeout=self.tick_interval)
                except asyncio.TimeoutError:
                    try:
                        self.engine.tick()
                    except Exception:
                        logger.exception("Countdown tick failed")
                    continue
                self._rearm.clear()
        finally:
            self._rearm = None

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    async def start(self) -> None:
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._tasks = [
            loop.create_task(self._countdown_loop()),
            loop.create_task(self.broadcaster.run()),
        ]
        logger.info("Game runtime started", extra={"room_code": self.room_code})

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        await self.engine.scheduler.cancel_all()
        await self.transport.close_all()
        logger.info("Game runtime stopped", extra={"room_code": self.room_code})


def build_runtime() -> GameRuntime:
    engine = GameEngine(
        rules=GameRules.from_settings(settings),
        word_supply=WordSupply(generator=build_word_generator()),
        scheduler=TimerScheduler(),
        theme_id=settings.DEFAULT_THEME,
        difficulty=settings.DEFAULT_DIFFICULTY,
    )
    return GameRuntime(engine, WS)


RUNTIME = build_runtime()
