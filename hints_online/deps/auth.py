"""
Dépendance d'authentification de l'écran host
=============================================

Objectif
--------
Fournir une *dependency* FastAPI `host_required` qui réserve les routes `/host/*`
à l'écran host via un **Bearer token** (`settings.HOST_TOKEN`).

Portée
------
Confiance "soirée entre amis" : le jeton évite qu'un téléphone pilote la partie par
erreur, ce n'est pas une protection contre la triche.

Et le préflight CORS ?
----------------------
Le navigateur envoie une requête **OPTIONS** sans header `Authorization`. Elle est
répondue par `CORSMiddleware` avant le routage : la dépendance peut donc être posée
sur le router `/host` entier (`dependencies=[Depends(host_required)]`).

Comportement & codes retour
---------------------------
- 401 si aucun Bearer n'est fourni.
- 403 si le Bearer ne correspond pas à `HOST_TOKEN`.
- True sinon.
"""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hints_online.config.settings import settings

# Schéma Bearer (désactive l'erreur auto pour qu'on rende nos 401/403)
bearer = HTTPBearer(auto_error=False)


def host_required(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)):
    """Autorise si `Authorization: Bearer <settings.HOST_TOKEN>`."""
    if credentials and (credentials.scheme or "").lower() == "bearer":
        if secrets.compare_digest(credentials.credentials, settings.HOST_TOKEN):
            return True
        raise HTTPException(status_code=403, detail="Invalid token")

    raise HTTPException(status_code=401, detail="Host authentication required")
