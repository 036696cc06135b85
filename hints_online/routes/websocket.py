"""
WebSocket endpoint des téléphones.

- /ws/{room_code} : un code de salle inconnu est refusé (close 4404).
- {"type": "ping"} → {"type": "pong"} (heartbeat).
- Tout autre message passe par le MessageRouter ; un JOIN_LOBBY lie la socket au joueur.
- Le STATE_UPDATE courant est envoyé dès la connexion puis par le diffuseur.
"""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from hints_online.models.messages import JoinLobby
from hints_online.services.game_runtime import RUNTIME

router = APIRouter()
logger = logging.getLogger(__name__)

UNKNOWN_ROOM_CLOSE_CODE = 4404


@router.websocket("/ws/{room_code}")
async def websocket_endpoint(ws: WebSocket, room_code: str):
    if not RUNTIME.matches_room(room_code):
        logger.debug("Rejecting socket for unknown room", extra={"room_code": room_code})
        await ws.close(code=UNKNOWN_ROOM_CLOSE_CODE)
        return

    transport = RUNTIME.transport
    await transport.connect(ws)
    await transport.send_json(ws, RUNTIME.broadcaster.compose())
    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except ValueError:
                # Message non JSON -> ignore
                continue

            if isinstance(msg, dict) and msg.get("type") == "ping":
                await transport.send_json(ws, {"type": "pong"})
                continue

            parsed = RUNTIME.router.dispatch(msg)
            if isinstance(parsed, JoinLobby):
                transport.identify(ws, parsed.player.id)
    except WebSocketDisconnect:
        pass
    finally:
        await transport.disconnect(ws)
