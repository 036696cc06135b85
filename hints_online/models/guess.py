"""
Models / guess.py
Rôle:
- Proposition tapée sur un téléphone (SEND_GUESS). Immuable une fois créée.

Notes:
- `player_name` est un instantané du nom au moment de l'envoi.
- `timestamp` en millisecondes epoch (horloge du téléphone, informatif).
"""
from pydantic import ConfigDict

from .wire import WireModel


class Guess(WireModel):
    """Une proposition ; `id` sert à la déduplication côté host."""

    model_config = ConfigDict(frozen=True)

    id: str
    player_id: str
    player_name: str = ""
    text: str = ""
    timestamp: int = 0
