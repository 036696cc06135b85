"""
Service: ws_manager.py
- Transport host → téléphones : une WebSocket par invité.
- Sockets anonymes (`pending`) jusqu'au JOIN_LOBBY, puis liées au player_id.
- Snapshots des sockets avant envoi pour éviter "set changed size during iteration".
- Une socket morte (échec d'envoi) est retirée des registres.
- Admin: stats(), connection_count(), close_all().
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from starlette.websockets import WebSocket, WebSocketState

logger = logging.getLogger(__name__)


@dataclass
class WSManager:
    # player_id -> set(WebSocket)
    clients_by_player: Dict[str, Set[WebSocket]] = field(default_factory=dict)
    # sockets connectées avant JOIN_LOBBY
    pending: Set[WebSocket] = field(default_factory=set)
    # reverse map: socket -> player_id
    ws_to_player: Dict[WebSocket, str] = field(default_factory=dict)

    async def connect(self, ws: WebSocket) -> None:
        """Accepte la connexion WS et la place dans 'pending'."""
        await ws.accept()
        self.pending.add(ws)

    def _unlink(self, ws: WebSocket) -> None:
        """Retire 'ws' de pending et/ou du bucket de son joueur."""
        self.pending.discard(ws)
        prev_pid = self.ws_to_player.pop(ws, None)
        if prev_pid:
            bucket = self.clients_by_player.get(prev_pid)
            if bucket is not None:
                bucket.discard(ws)
                if not bucket:
                    self.clients_by_player.pop(prev_pid, None)

    async def disconnect(self, ws: WebSocket) -> None:
        """Ferme la connexion (si encore ouverte) et nettoie les registres."""
        self._unlink(ws)
        if ws.client_state == WebSocketState.DISCONNECTED:
            return
        try:
            await ws.close()
        except Exception:
            pass

    def identify(self, ws: WebSocket, player_id: str) -> None:
        """
        Associe une WebSocket à un player_id (idempotent).
        Si elle était liée à un autre joueur, elle est déplacée.
        """
        if self.ws_to_player.get(ws) == player_id:
            return
        self._unlink(ws)
        self.clients_by_player.setdefault(player_id, set()).add(ws)
        self.ws_to_player[ws] = player_id
        logger.debug("Socket identified", extra={"player_id": player_id})

    async def _send_json_one(self, ws: WebSocket, payload: Any) -> bool:
        """Envoie à une WS ; False (et WS retirée) si l'envoi échoue."""
        try:
            data = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
            await ws.send_text(data)
            return True
        except Exception:
            logger.debug("Dropping dead socket", extra={"player_id": self.ws_to_player.get(ws)})
            self._unlink(ws)
            return False

    async def send_json(self, ws: WebSocket, payload: Any) -> bool:
        return await self._send_json_one(ws, payload)

    # ---------- snapshots ----------
    def _snapshot_all(self) -> List[WebSocket]:
        result: List[WebSocket] = []
        for bucket in self.clients_by_player.values():
            result.extend(bucket)
        result.extend(self.pending)
        return result

    # ---------- envois ----------
    async def broadcast_all(self, payload: Any) -> int:
        """Diffuse à toutes les sockets (identifiées + pending)."""
        success = 0
        for ws in self._snapshot_all():
            if await self._send_json_one(ws, payload):
                success += 1
        return success

    # ---------- admin ----------
    def connection_count(self) -> int:
        return len(self.pending) + sum(len(b) for b in self.clients_by_player.values())

    def stats(self) -> dict:
        identified = {pid: len(conns) for pid, conns in self.clients_by_player.items()}
        return {
            "identified": identified,
            "identified_total": sum(identified.values()),
            "pending_total": len(self.pending),
        }

    async def close_all(self) -> dict:
        """Ferme TOUTES les sockets (identifiées + pending)."""
        for ws in self._snapshot_all():
            await self.disconnect(ws)
        return self.stats()


WS = WSManager()
