"""
Routes de l'écran host (scope host).

Objectifs :
- Lecture de l'état complet (snapshot diffusé + infos host : code de salle, tour…).
- Réglages du lobby (thème, difficulté).
- Pilotage : lancer la partie, clore le résumé d'un tour, retour au lobby.

Les refus du moteur (`{"ok": False, "error": ...}`) deviennent des 409 (400 pour les
réglages invalides) avec le code d'erreur en `detail`.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from hints_online.deps.auth import host_required
from hints_online.models.wire import WireModel
from hints_online.services.game_runtime import RUNTIME

router = APIRouter(prefix="/host", tags=["host"], dependencies=[Depends(host_required)])


class SettingsPayload(WireModel):
    theme_id: Optional[str] = None
    difficulty: Optional[str] = None


def _raise_if_rejected(result: Dict[str, Any], status_code: int = 409) -> Dict[str, Any]:
    if not result.get("ok"):
        raise HTTPException(status_code=status_code, detail=result.get("error", "rejected"))
    return result


@router.get("/state")
async def host_state():
    """Snapshot + infos réservées à l'écran host."""
    engine = RUNTIME.engine
    status = engine.status()
    payload = engine.snapshot().to_wire()
    payload.update(
        {
            "roomCode": RUNTIME.room_code,
            "connectionCount": RUNTIME.transport.connection_count(),
            "turnIndex": status["turn_index"],
            "maxRounds": status["max_rounds"],
            "roundScore": status["round_score"],
            "difficulty": status["difficulty"],
            "selectedPlayerId": status["selected_player_id"],
        }
    )
    return payload


@router.post("/settings")
async def host_settings(body: SettingsPayload):
    engine = RUNTIME.engine
    if body.theme_id is not None:
        _raise_if_rejected(engine.set_theme(body.theme_id), 400)
    if body.difficulty is not None:
        _raise_if_rejected(engine.set_difficulty(body.difficulty), 400)
    return {"ok": True, "themeId": engine.theme_id, "difficulty": engine.difficulty}


@router.post("/start")
async def host_start():
    """LOBBY → SPINNING (tirage du premier joueur)."""
    return _raise_if_rejected(RUNTIME.engine.start_game())


@router.post("/finish-turn")
async def host_finish_turn():
    """Clôt le résumé : tour suivant ou retour au lobby après le dernier tour."""
    return _raise_if_rejected(RUNTIME.engine.finish_turn())


@router.post("/reset")
async def host_reset():
    return RUNTIME.engine.reset_to_lobby()
