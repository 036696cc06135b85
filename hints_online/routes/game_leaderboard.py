"""
Module routes/game_leaderboard.py
Rôle:
- Expose le classement des joueurs par score décroissant (égalité → ordre d'arrivée).
"""
from fastapi import APIRouter

from hints_online.services.game_runtime import RUNTIME

router = APIRouter(prefix="/game", tags=["game"])


@router.get("/leaderboard")
async def leaderboard():
    """Retourne le classement courant (public, lecture seule)."""
    players = RUNTIME.engine.registry.list_sorted_by_score()
    return {"leaderboard": [p.to_wire() for p in players]}
