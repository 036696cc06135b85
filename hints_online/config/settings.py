"""
Configuration de l'application (Settings)
=========================================

Rôle
----
- Centraliser les paramètres du host (nom, host/port, jeton host, règles du jeu, LLM…).
- Les valeurs par défaut conviennent pour une soirée jeu en local.
- Les variables peuvent être surchargées via un fichier `.env` ou l'environnement.

Intégrations
------------
- `pydantic-settings` charge automatiquement les variables d'env et `.env`.
- Le moteur ne lit jamais `settings` directement : il reçoit un `GameRules`
  (voir `GameRules.from_settings`), ce qui permet aux tests de raccourcir les délais.

Exemples de `.env`
------------------
APP_NAME="Hints Online (Salon)"
PORT=8080
HOST_TOKEN="mettre-une-valeur-secrète"
CARD_DURATION_SEC=30
LLM_PROVIDER="ollama"
LLM_MODEL="llama3"
LLM_ENDPOINT="http://localhost:11434/api/chat"
"""
from dataclasses import dataclass
from pydantic_settings import BaseSettings, SettingsConfigDict
import os


class Settings(BaseSettings):
    # Nom du service (apparaît dans /health)
    APP_NAME: str = "Hints Online Host"
    # Bind réseau (FastAPI / Uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Jeton de l'écran host utilisé par la dépendance `host_required`
    # ⚠️ Confiance "soirée entre amis" uniquement, remplacez via .env
    HOST_TOKEN: str = "changeme-host-token"

    # Règles du jeu
    CARD_DURATION_SEC: int = 20
    TOTAL_CARDS_PER_TURN: int = 3
    MAX_ROUNDS: int = 5
    MIN_PLAYERS: int = 2
    WINNER_ANNOUNCEMENT_MS: int = 3000
    SELECTION_REVEAL_MS: int = 8000
    BROADCAST_INTERVAL_MS: int = 500
    GUESS_DEDUP_CAPACITY: int = 100
    ROOM_CODE_LENGTH: int = 4

    # Réglages de lobby par défaut
    DEFAULT_THEME: str = "standard"
    DEFAULT_DIFFICULTY: str = "medium"

    # Générateur de mots : "none" = listes hors-ligne uniquement
    LLM_PROVIDER: str = "none"
    LLM_MODEL: str = "llama3"
    # Endpoint /api/chat (Ollama) ; le client en déduit /api/generate
    LLM_ENDPOINT: str = "http://localhost:11434/api/chat"

    # Répertoire des données statiques (listes de mots de secours)
    # Par défaut: <repo>/hints_online/data
    DATA_DIR: str = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@dataclass(frozen=True)
class GameRules:
    """Constantes de jeu injectées dans le moteur (durées en secondes)."""
    card_duration_sec: int = 20
    total_cards_per_turn: int = 3
    max_rounds: int = 5
    min_players: int = 2
    winner_announcement_sec: float = 3.0
    selection_reveal_sec: float = 8.0
    broadcast_interval_sec: float = 0.5
    guess_dedup_capacity: int = 100

    @classmethod
    def from_settings(cls, cfg: "Settings") -> "GameRules":
        return cls(
            card_duration_sec=cfg.CARD_DURATION_SEC,
            total_cards_per_turn=cfg.TOTAL_CARDS_PER_TURN,
            max_rounds=cfg.MAX_ROUNDS,
            min_players=cfg.MIN_PLAYERS,
            winner_announcement_sec=cfg.WINNER_ANNOUNCEMENT_MS / 1000,
            selection_reveal_sec=cfg.SELECTION_REVEAL_MS / 1000,
            broadcast_interval_sec=cfg.BROADCAST_INTERVAL_MS / 1000,
            guess_dedup_capacity=cfg.GUESS_DEDUP_CAPACITY,
        )


# Instance unique importable partout : `settings`
settings = Settings()
