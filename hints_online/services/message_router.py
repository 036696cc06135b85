"""
Service: message_router.py
Rôle:
- Point d'entrée unique des messages pairs : validation puis routage vers le moteur.

Routage:
- JOIN_LOBBY   → engine.join(player)
- START_ROUND  → engine.signal_ready(player_id)
- SEND_GUESS   → engine.submit_guess(guess)
- STATE_UPDATE → `on_state_update` (côté invité), sinon ignoré

Les intentions rejetées par le moteur sont simplement abandonnées (log debug).
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, assert_never

from hints_online.models.messages import (
    JoinLobby,
    NetworkMessage,
    SendGuess,
    StartRound,
    StateUpdate,
    parse_message,
)

logger = logging.getLogger(__name__)


class MessageRouter:
    def __init__(
        self,
        engine: Any = None,
        *,
        on_state_update: Optional[Callable[[StateUpdate], Any]] = None,
    ) -> None:
        self.engine = engine
        self.on_state_update = on_state_update

    def dispatch(self, raw: Any) -> Optional[NetworkMessage]:
        """Valide et route `raw` ; renvoie le message typé (None si illisible)."""
        msg = parse_message(raw)
        if msg is None:
            return None
        if self.engine is None and not isinstance(msg, StateUpdate):
            # routeur côté invité : pas de moteur local
            logger.debug("Intent dropped, no engine bound", extra={"msg_type": msg.type})
            return msg

        result = None
        match msg:
            case JoinLobby():
                result = self.engine.join(msg.player)
            case StartRound():
                result = self.engine.signal_ready(msg.player_id)
            case SendGuess():
                result = self.engine.submit_guess(msg.guess)
            case StateUpdate():
                if self.on_state_update is not None:
                    self.on_state_update(msg)
            case _:
                assert_never(msg)

        if result is not None and not result.get("ok"):
            logger.debug("Intent dropped", extra={"msg_type": msg.type, "error": result.get("error")})
        return msg
