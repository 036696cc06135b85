"""
Application FastAPI : point d'entrée
====================================

Rôle
----
- Instancie l'app FastAPI, configure le CORS pour l'écran host et les téléphones,
- Monte les routeurs (REST host + WebSocket invités),
- Démarre / arrête le runtime de jeu (décompte + diffusion) avec l'application,
- Affiche la configuration, le code de salle et la liste des routes au démarrage.

Notes
-----
- Le middleware CORS doit être ajouté AVANT les include_router.
- Lancement : `uvicorn hints_online.main:app --host 0.0.0.0 --port 8000`
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hints_online.config.settings import settings
from hints_online.routes.game_leaderboard import router as leaderboard_router
from hints_online.routes.health import router as health_router
from hints_online.routes.host import router as host_router
from hints_online.routes.websocket import router as ws_router
from hints_online.services.game_runtime import RUNTIME

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Hints Online Host")

# ===========================
# CORS (soirée en LAN)
# ===========================
# Les téléphones arrivent depuis des IP du réseau local : on reste permissif.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],             # ← dont Authorization pour /host/*
)

# ===========================
# Montage des routers
# ===========================
app.include_router(host_router)
app.include_router(ws_router)                  # WebSocket endpoint (/ws/{room_code})
app.include_router(leaderboard_router)
app.include_router(health_router)


# --- Racine utile pour "ping" simple (sans /health) ---
@app.get("/")
async def root():
    return {"ok": True, "service": "hints-online-host"}


@app.on_event("startup")
async def startup():
    """
    Au démarrage:
    - lance les boucles du runtime (décompte 1 s, diffusion),
    - affiche la config du générateur de mots et le code de salle,
    - liste les routes (path + méthodes) dans la console (diagnostic).
    """
    await RUNTIME.start()
    print("== Word provider ==", settings.LLM_PROVIDER, settings.LLM_MODEL, settings.LLM_ENDPOINT)
    print("== Room code ==", RUNTIME.room_code)
    print("== Registered routes ==")
    for r in app.routes:
        print(r.path, getattr(r, "methods", None) or "WS")


@app.on_event("shutdown")
async def shutdown():
    await RUNTIME.stop()
