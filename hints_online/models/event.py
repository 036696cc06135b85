"""
Models / event.py
Rôle:
- Définir l'événement émis par le moteur vers ses collaborateurs (son, UI host,
  diffusion anticipée du snapshot).

Notes:
- `kind` restreint à un jeu de valeurs (Literal) pour éviter les fautes de frappe.
- `payload` est libre (clé/valeur) afin d'embarquer le contexte spécifique.
"""
from pydantic import BaseModel, Field
from typing import Literal, Dict, Any
import time

# Typage strict des catégories d'événements émises par le moteur
EventKind = Literal[
    "player_joined",
    "settings_changed",
    "spin_started",
    "player_selected",
    "words_ready",
    "round_started",
    "correct_guess",
    "time_up",
    "card_advanced",
    "round_summary",
    "turn_finished",
    "game_over",
    "game_reset",
]


class EngineEvent(BaseModel):
    """Notification émise après une mutation significative de l'état."""
    kind: EventKind
    payload: Dict[str, Any] = Field(default_factory=dict)
    ts: float = Field(default_factory=time.time)  # moment de l'émission (epoch s)
