"""
Service: sync_broadcaster.py
Rôle:
- Pousser le snapshot du moteur (STATE_UPDATE) à tous les téléphones connectés.
- Cadence fixe (500 ms par défaut) + réveil anticipé sur événement moteur (`notify`).

Notes:
- Aucune logique métier : le contenu est `engine.snapshot()` plus l'enveloppe `sentAt`.
- Une perte de message est couverte par la diffusion suivante (état complet à chaque fois).
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional, Protocol

from hints_online.models.messages import StateUpdate

logger = logging.getLogger(__name__)


class BroadcastTransport(Protocol):
    async def broadcast_all(self, payload: Any) -> int: ...


class SyncBroadcaster:
    def __init__(
        self,
        engine: Any,
        transport: BroadcastTransport,
        *,
        interval: float = 0.5,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.engine = engine
        self.transport = transport
        self.interval = interval
        self._clock = clock
        self._wake: Optional[asyncio.Event] = None
        self.sent = 0

    def compose(self) -> Dict[str, Any]:
        """Message STATE_UPDATE prêt à sérialiser (clés camelCase)."""
        update = StateUpdate(state=self.engine.snapshot(), sent_at=int(self._clock() * 1000))
        return update.to_wire()

    async def push(self) -> int:
        """Diffuse l'état courant ; renvoie le nombre de sockets atteintes."""
        delivered = await self.transport.broadcast_all(self.compose())
        self.sent += 1
        return delivered

    def notify(self, *_: Any) -> None:
        """Demande une diffusion immédiate (abonné aux événements du moteur)."""
        if self._wake is not None:
            self._wake.set()

    async def run(self) -> None:
        """Boucle de diffusion ; s'arrête à l'annulation de la tâche."""
        self._wake = asyncio.Event()
        logger.info("Broadcast loop started", extra={"interval_s": self.interval})
        try:
            while True:
                try:
                    await self.push()
                except Exception:
                    logger.exception("State broadcast failed")
                try:
                    await asyncio.wait_for(self._wake.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
                self._wake.clear()
        finally:
            self._wake = None
