"""
Service: scheduler.py
Rôle:
- Programmer les rappels différés du moteur (révélation du tirage, fin de l'annonce
  du gagnant) sur la boucle asyncio du host.

Notes:
- Un rappel qui renvoie une coroutine est lancé comme tâche (ex: la révélation,
  qui attend la Word Supply).
- Aucune annulation "métier" ici : le moteur étiquette chaque rappel avec sa
  génération et ignore les rappels périmés. `cancel_all()` ne sert qu'à l'arrêt.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Set

logger = logging.getLogger(__name__)


class TimerScheduler:
    def __init__(self) -> None:
        self._handles: Set[asyncio.TimerHandle] = set()
        self._tasks: Set[asyncio.Task] = set()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """Programme `callback(*args)` dans `delay` secondes (boucle courante)."""
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def _fire() -> None:
            self._handles.discard(handle)
            result = callback(*args)
            if asyncio.iscoroutine(result):
                self.spawn(result)

        handle = loop.call_later(max(0.0, delay), _fire)
        self._handles.add(handle)
        return handle

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Lance une tâche suivie (référence forte + log des exceptions)."""
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Deferred task failed", exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._handles) + len(self._tasks)

    async def cancel_all(self) -> None:
        """Annule timers et tâches en cours (arrêt du host)."""
        for handle in list(self._handles):
            handle.cancel()
        self._handles.clear()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
