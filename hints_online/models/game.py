"""
Models / game.py
Rôle:
- Définir les phases du jeu et le snapshot `GameState` diffusé aux téléphones.

Notes:
- `GameState` est une pure projection de l'état du moteur (`GameEngine.snapshot()`) :
  aucun cycle de vie propre, reconstructible à tout instant.
- `guesses` n'est rempli que pendant une carte en cours (ROUND_ACTIVE / ROUND_FEEDBACK).
- `current_round.secret_word` n'est présent qu'en ROUND_INTRO / ROUND_ACTIVE / ROUND_FEEDBACK.
  ⚠️ Le mot est diffusé à tous les invités (pas de projection par destinataire).
"""
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .guess import Guess
from .player import Player
from .wire import WireModel


class Phase(str, Enum):
    LOBBY = "LOBBY"
    SPINNING = "SPINNING"
    ROUND_INTRO = "ROUND_INTRO"  # le joueur tiré au sort s'avance
    ROUND_ACTIVE = "ROUND_ACTIVE"  # chrono en cours, propositions évaluées
    ROUND_FEEDBACK = "ROUND_FEEDBACK"  # réservé (pause entre cartes), rendu comme ROUND_ACTIVE
    ROUND_SUMMARY = "ROUND_SUMMARY"


# Phases où une carte est "vivante" (propositions visibles)
CARD_LIVE_PHASES = frozenset({Phase.ROUND_ACTIVE, Phase.ROUND_FEEDBACK})
# Phases où le mot secret figure dans le snapshot
SECRET_VISIBLE_PHASES = frozenset({Phase.ROUND_INTRO, Phase.ROUND_ACTIVE, Phase.ROUND_FEEDBACK})


class CurrentRound(WireModel):
    player_id: str
    time_left: int
    card_index: int  # 1-based pour l'affichage
    total_cards: int
    secret_word: Optional[str] = None


class WinnerNotification(WireModel):
    guesser_name: str
    timestamp: int  # ms epoch


class GameState(WireModel):
    """Snapshot diffusé via STATE_UPDATE."""
    phase: Phase = Phase.LOBBY
    players: List[Player] = Field(default_factory=list)
    active_theme: str = "standard"
    guesses: List[Guess] = Field(default_factory=list)
    current_round: Optional[CurrentRound] = None
    winner_notification: Optional[WinnerNotification] = None
