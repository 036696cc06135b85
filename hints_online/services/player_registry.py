"""
Service: player_registry.py
Rôle:
- Tenir la liste des joueurs inscrits (ordre d'arrivée) et leurs scores cumulés.

Règles:
- `join` est idempotent : un id déjà présent ne change rien (ni nom, ni score).
- Le score d'un nouveau joueur démarre à 0, quoi qu'annonce le téléphone.
- Aucun retrait en cours de session (une déconnexion n'est pas un départ).
"""
from __future__ import annotations

from typing import Dict, List, Optional

from hints_online.models.player import Player


class PlayerRegistry:
    def __init__(self) -> None:
        # dict ordonné : l'ordre d'insertion sert de départage au classement
        self._players: Dict[str, Player] = {}

    def join(self, player: Player) -> bool:
        """Ajoute le joueur (score 0) s'il est inconnu. Renvoie True si ajouté."""
        if player.id in self._players:
            return False
        self._players[player.id] = player.model_copy(update={"score": 0})
        return True

    def award(self, player_id: str, delta: int) -> None:
        """Incrémente le score ; id inconnu → no-op silencieux."""
        player = self._players.get(player_id)
        if player is None:
            return
        player.score += delta

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def players(self) -> List[Player]:
        """Copie des joueurs dans l'ordre d'inscription."""
        return [p.model_copy() for p in self._players.values()]

    def ids(self) -> List[str]:
        return list(self._players.keys())

    def list_sorted_by_score(self) -> List[Player]:
        """Classement par score décroissant ; égalité → ordre d'inscription (tri stable)."""
        return sorted(self.players(), key=lambda p: p.score, reverse=True)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)
