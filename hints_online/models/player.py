"""
Models / player.py
Rôle:
- Définir la structure d'un joueur telle qu'annoncée par son téléphone (JOIN_LOBBY).

Champs:
- id: identifiant opaque choisi par le client (unique par session).
- name: nom affiché.
- avatar_seed: graine d'avatar (l'écran host en déduit un emoji).
- score: score cumulé, modifié uniquement par le moteur.
"""
from pydantic import Field

from .wire import WireModel


class Player(WireModel):
    """Profil joueur minimal (sérialisé en camelCase)."""
    id: str  # player_id choisi par le téléphone
    name: str = ""  # nom affiché
    avatar_seed: int = 0  # graine d'avatar
    score: int = Field(default=0, ge=0)  # jamais négatif
