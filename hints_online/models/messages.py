"""
Models / messages.py
Rôle:
- Protocole logique host ↔ téléphones, sous forme d'union étiquetée sur `type`.

Messages:
- JOIN_LOBBY   { player }          (invité → host)
- START_ROUND  { playerId }        (invité → host)
- SEND_GUESS   { guess }           (invité → host)
- STATE_UPDATE { state, sentAt }   (host → invités)

Notes:
- `parse_message()` ne lève jamais : une forme inconnue renvoie None.
- `sent_at` est un champ d'enveloppe (ms epoch) posé par le diffuseur ; il ne fait
  pas partie du `GameState`.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Optional, Union

import orjson
from pydantic import Field, TypeAdapter, ValidationError

from .game import GameState
from .guess import Guess
from .player import Player
from .wire import WireModel

logger = logging.getLogger(__name__)


class JoinLobby(WireModel):
    type: Literal["JOIN_LOBBY"] = "JOIN_LOBBY"
    player: Player


class StartRound(WireModel):
    type: Literal["START_ROUND"] = "START_ROUND"
    player_id: str


class SendGuess(WireModel):
    type: Literal["SEND_GUESS"] = "SEND_GUESS"
    guess: Guess


class StateUpdate(WireModel):
    type: Literal["STATE_UPDATE"] = "STATE_UPDATE"
    state: GameState
    sent_at: int = 0


NetworkMessage = Annotated[
    Union[JoinLobby, StartRound, SendGuess, StateUpdate],
    Field(discriminator="type"),
]

_ADAPTER: TypeAdapter[NetworkMessage] = TypeAdapter(NetworkMessage)


def parse_message(raw: Any) -> Optional[NetworkMessage]:
    """
    Valide un message entrant (dict, str ou bytes JSON).
    Renvoie None pour tout message illisible ou de type inconnu.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.debug("Dropping non-JSON message")
            return None
    if not isinstance(raw, dict):
        return None
    try:
        return _ADAPTER.validate_python(raw)
    except ValidationError as exc:
        logger.debug(
            "Dropping unknown message shape",
            extra={"msg_type": raw.get("type"), "errors": exc.error_count()},
        )
        return None
