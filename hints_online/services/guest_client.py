"""
Service: guest_client.py
Rôle:
- Côté téléphone : construire les intentions (JOIN_LOBBY, START_ROUND, SEND_GUESS)
  et garder le dernier GameState reçu du host.

Notes:
- Le téléphone ne modifie jamais l'état partagé ; il affiche ce qu'il reçoit.
- Last-write-wins sur `sentAt` : un STATE_UPDATE plus ancien que le dernier appliqué
  est ignoré (ordre de livraison non garanti).
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from hints_online.models.game import GameState, Phase
from hints_online.models.guess import Guess
from hints_online.models.messages import JoinLobby, SendGuess, StartRound, StateUpdate
from hints_online.models.player import Player
from .message_router import MessageRouter


class GuestClient:
    def __init__(
        self,
        player_id: str,
        name: str,
        avatar_seed: int = 0,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.player = Player(id=player_id, name=name, avatar_seed=avatar_seed)
        self._clock = clock
        self.state: Optional[GameState] = None
        self.last_sent_at = -1
        self.applied = 0
        # pas de moteur local : seuls les STATE_UPDATE sont consommés
        self.router = MessageRouter(on_state_update=self._accept)

    # ---------- intentions ----------
    def join_message(self) -> Dict[str, Any]:
        return JoinLobby(player=self.player).to_wire()

    def start_message(self) -> Dict[str, Any]:
        return StartRound(player_id=self.player.id).to_wire()

    def guess_message(self, text: str) -> Optional[Dict[str, Any]]:
        """Proposition avec id unique ; None si le texte est vide."""
        text = (text or "").strip()
        if not text:
            return None
        guess = Guess(
            id=uuid4().hex,
            player_id=self.player.id,
            player_name=self.player.name,
            text=text,
            timestamp=int(self._clock() * 1000),
        )
        return SendGuess(guess=guess).to_wire()

    # ---------- réception ----------
    def apply(self, raw: Any) -> bool:
        """Applique un STATE_UPDATE s'il est plus récent ; renvoie True si appliqué."""
        before = self.applied
        self.router.dispatch(raw)
        return self.applied > before

    def _accept(self, update: StateUpdate) -> None:
        if update.sent_at < self.last_sent_at:
            return
        self.last_sent_at = update.sent_at
        self.state = update.state
        self.applied += 1

    @property
    def phase(self) -> Phase:
        return self.state.phase if self.state else Phase.LOBBY

    @property
    def is_my_turn(self) -> bool:
        current = self.state.current_round if self.state else None
        return current is not None and current.player_id == self.player.id

    @property
    def secret_word(self) -> Optional[str]:
        """Le mot n'est affiché qu'au joueur qui le fait deviner."""
        if not self.is_my_turn:
            return None
        return self.state.current_round.secret_word
