"""
Module routes/health.py
Rôle:
- Endpoint de santé : service OK, code de salle, nombre de téléphones connectés.
"""
from fastapi import APIRouter

from hints_online.config.settings import settings
from hints_online.services.game_runtime import RUNTIME

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    return {
        "ok": True,
        "service": settings.APP_NAME,
        "room_code": RUNTIME.room_code,
        "connections": RUNTIME.transport.connection_count(),
        "word_provider": settings.LLM_PROVIDER,
    }
