"""
Service: game_engine.py
Rôle:
- Moteur autoritaire du host : machine à phases, cycle tour/carte, évaluation des
  propositions et scores. Seul chemin d'écriture de l'état partagé.
- Expose un snapshot en lecture seule (`snapshot()`) pour le diffuseur.

Phases:
  LOBBY → SPINNING → ROUND_INTRO → ROUND_ACTIVE (cartes 1..N) → ROUND_SUMMARY
  → SPINNING (tour suivant) ou LOBBY (après MAX_ROUNDS tours).

Timers:
- Révélation du tirage (8 s) et annonce du gagnant (3 s) passent par le scheduler,
  étiquetés avec la génération courante ; un rappel dont la génération ne correspond
  plus est ignoré (changement de phase ou de carte entre-temps).
- Le décompte (1 s) est piloté de l'extérieur via `tick()`.

API interne exposée aux routes / au routeur:
- ENGINE.join(player), set_theme(), set_difficulty()
- ENGINE.start_game(), signal_ready(player_id), start_round(player_id)
- ENGINE.submit_guess(guess), tick()
- ENGINE.finish_turn(actor_id=None), reset_to_lobby()
- ENGINE.snapshot(), status()

Convention de retour (opérations mutantes): {"ok": True, ...} ou {"ok": False, "error": "<code>"}.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from hints_online.config.settings import GameRules
from hints_online.config.themes import DEFAULT_THEME_ID, DIFFICULTIES, THEMES
from hints_online.engine.guess_evaluator import MatchOutcome, SeenGuessIds, evaluate
from hints_online.models.event import EngineEvent, EventKind
from hints_online.models.game import (
    CARD_LIVE_PHASES,
    SECRET_VISIBLE_PHASES,
    CurrentRound,
    GameState,
    Phase,
    WinnerNotification,
)
from hints_online.models.guess import Guess
from hints_online.models.player import Player
from .player_registry import PlayerRegistry
from .scheduler import TimerScheduler
from .word_supply import WordSupply

logger = logging.getLogger(__name__)

Listener = Callable[[EngineEvent], Any]


@dataclass
class Turn:
    """Période pendant laquelle un joueur fait deviner ses cartes."""
    active_player_id: str
    turn_index: int
    time_left: int
    turn_id: str = field(default_factory=lambda: uuid4().hex)
    secret_words: List[str] = field(default_factory=list)
    card_index: int = 0  # 0-based
    round_score: int = 0

    @property
    def words_ready(self) -> bool:
        return bool(self.secret_words)

    def current_word(self) -> Optional[str]:
        if 0 <= self.card_index < len(self.secret_words):
            return self.secret_words[self.card_index]
        return None


def _reject(error: str, **extra: Any) -> Dict[str, Any]:
    return {"ok": False, "error": error, **extra}


class GameEngine:
    def __init__(
        self,
        *,
        rules: Optional[GameRules] = None,
        registry: Optional[PlayerRegistry] = None,
        word_supply: Optional[WordSupply] = None,
        scheduler: Optional[TimerScheduler] = None,
        theme_id: str = DEFAULT_THEME_ID,
        difficulty: str = "medium",
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rules = rules or GameRules()
        self.registry = registry or PlayerRegistry()
        self.word_supply = word_supply or WordSupply()
        self.scheduler = scheduler or TimerScheduler()
        self.theme_id = theme_id if theme_id in THEMES else DEFAULT_THEME_ID
        self.difficulty = difficulty if difficulty in DIFFICULTIES else "medium"
        self._clock = clock
        self._rng = rng or random.Random()

        self.phase: Phase = Phase.LOBBY
        self.generation = 0
        self.turn_index = 1
        self.turn: Optional[Turn] = None
        self.selected_player_id: Optional[str] = None
        self.guesses: List[Guess] = []  # plus récente en tête
        self.winner_notification: Optional[WinnerNotification] = None

        self._seen_guesses = SeenGuessIds(self.rules.guess_dedup_capacity)
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, kind: EventKind, **payload: Any) -> None:
        event = EngineEvent(kind=kind, payload=payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Engine listener failed", extra={"event_kind": kind})

    def _set_phase(self, phase: Phase) -> None:
        previous = self.phase
        self.phase = phase
        self.generation += 1
        logger.info(
            "Phase change",
            extra={"phase_from": previous.value, "phase_to": phase.value, "generation": self.generation},
        )

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------
    def join(self, player: Player) -> Dict[str, Any]:
        """Inscription idempotente ; un re-join du même id ne change rien."""
        added = self.registry.join(player)
        if added:
            logger.info("Player joined", extra={"player_id": player.id})
            self._emit("player_joined", player_id=player.id, name=player.name)
        return {"ok": True, "added": added}

    def set_theme(self, theme_id: str) -> Dict[str, Any]:
        if self.phase != Phase.LOBBY:
            return _reject("wrong_phase")
        if theme_id not in THEMES:
            return _reject("unknown_theme")
        self.theme_id = theme_id
        self._emit("settings_changed", theme_id=theme_id, difficulty=self.difficulty)
        return {"ok": True, "theme_id": theme_id}

    def set_difficulty(self, difficulty: str) -> Dict[str, Any]:
        if self.phase != Phase.LOBBY:
            return _reject("wrong_phase")
        if difficulty not in DIFFICULTIES:
            return _reject("unknown_difficulty")
        self.difficulty = difficulty
        self._emit("settings_changed", theme_id=self.theme_id, difficulty=difficulty)
        return {"ok": True, "difficulty": difficulty}

    def start_game(self) -> Dict[str, Any]:
        """LOBBY → SPINNING ; exige au moins `min_players` joueurs."""
        if self.phase != Phase.LOBBY:
            return _reject("wrong_phase")
        if len(self.registry) < self.rules.min_players:
            logger.info("Start rejected", extra={"players": len(self.registry)})
            return _reject("not_enough_players", players=len(self.registry), required=self.rules.min_players)
        return self._spin()

    def _spin(self) -> Dict[str, Any]:
        # Le tirage est figé ici ; la roue ne fait que retarder la révélation
        self.selected_player_id = self._rng.choice(self.registry.ids())
        self._set_phase(Phase.SPINNING)
        self.scheduler.call_later(self.rules.selection_reveal_sec, self.complete_reveal, self.generation)
        self._emit("spin_started", selected_player_id=self.selected_player_id, turn_index=self.turn_index)
        return {
            "ok": True,
            "phase": self.phase.value,
            "selected_player_id": self.selected_player_id,
            "turn_index": self.turn_index,
        }

    # ------------------------------------------------------------------
    # Tour
    # ------------------------------------------------------------------
    async def complete_reveal(self, generation: int) -> None:
        """SPINNING → ROUND_INTRO puis chargement des mots du tour."""
        if generation != self.generation or self.phase != Phase.SPINNING or self.selected_player_id is None:
            return

        turn = Turn(
            active_player_id=self.selected_player_id,
            turn_index=self.turn_index,
            time_left=self.rules.card_duration_sec,
        )
        self.turn = turn
        self.guesses = []
        self.winner_notification = None
        self._set_phase(Phase.ROUND_INTRO)
        self._emit("player_selected", player_id=turn.active_player_id, turn_index=turn.turn_index)

        words = await self.word_supply.next_batch(
            self.rules.total_cards_per_turn,
            self.theme_id,
            self.difficulty,
            list(self.word_supply.history),
        )
        if self.turn is None or self.turn.turn_id != turn.turn_id:
            logger.info("Discarding words for an abandoned turn", extra={"turn_id": turn.turn_id})
            return
        turn.secret_words = list(words)
        self.word_supply.remember(turn.secret_words)
        self._emit("words_ready", turn_id=turn.turn_id, count=len(words))

    def signal_ready(self, player_id: str) -> Dict[str, Any]:
        """Intention START_ROUND d'un téléphone : démarrer la carte ou clore le résumé."""
        if self.phase == Phase.ROUND_INTRO:
            return self.start_round(player_id)
        if self.phase == Phase.ROUND_SUMMARY:
            return self.finish_turn(actor_id=player_id)
        return _reject("wrong_phase")

    def start_round(self, player_id: str) -> Dict[str, Any]:
        """ROUND_INTRO → ROUND_ACTIVE, uniquement pour le joueur actif."""
        turn = self.turn
        if self.phase != Phase.ROUND_INTRO or turn is None:
            return _reject("wrong_phase")
        if player_id != turn.active_player_id:
            logger.debug("Ready ignored from non-active player", extra={"player_id": player_id})
            return _reject("not_active_player")
        if not turn.words_ready:
            return _reject("words_not_ready")

        turn.time_left = self.rules.card_duration_sec
        self.guesses = []
        self._set_phase(Phase.ROUND_ACTIVE)
        self._emit("round_started", player_id=player_id, card_index=turn.card_index)
        return {"ok": True, "phase": self.phase.value}

    def tick(self) -> None:
        """Décompte d'une seconde ; en pause pendant l'annonce du gagnant."""
        turn = self.turn
        if self.phase != Phase.ROUND_ACTIVE or turn is None or self.winner_notification is not None:
            return
        turn.time_left = max(0, turn.time_left - 1)
        if turn.time_left == 0:
            self._emit("time_up", card_index=turn.card_index)
            self._advance_or_summarize()

    def _advance_or_summarize(self) -> None:
        turn = self.turn
        if turn is None:
            return
        if turn.card_index < self.rules.total_cards_per_turn - 1:
            turn.card_index += 1
            turn.time_left = self.rules.card_duration_sec
            self.guesses = []
            self.generation += 1
            self._emit("card_advanced", card_index=turn.card_index)
        else:
            self._set_phase(Phase.ROUND_SUMMARY)
            self._emit("round_summary", player_id=turn.active_player_id, round_score=turn.round_score)

    # ------------------------------------------------------------------
    # Propositions
    # ------------------------------------------------------------------
    def submit_guess(self, guess: Guess) -> Dict[str, Any]:
        """
        Enregistre et évalue une proposition.
        - Un même `guess.id` n'est traité qu'une fois (renvoi = no-op).
        - Hors carte vivante → ignorée ; pendant l'annonce du gagnant → journalisée sans score.
        - Le joueur actif ne peut pas marquer sur son propre mot.
        """
        if not self._seen_guesses.check_and_add(guess.id):
            return _reject("duplicate_guess")
        turn = self.turn
        if self.phase not in CARD_LIVE_PHASES or turn is None:
            return _reject("no_live_card")

        self.guesses.insert(0, guess)
        if self.phase != Phase.ROUND_ACTIVE or self.winner_notification is not None:
            return {"ok": True, "matched": False, "evaluated": False}

        secret = turn.current_word()
        if secret is None or evaluate(guess.text, secret) is MatchOutcome.NO_MATCH:
            return {"ok": True, "matched": False, "evaluated": True}

        if guess.player_id == turn.active_player_id:
            logger.info("Describer guessed own word, not scored", extra={"player_id": guess.player_id})
            return _reject("describer_guess")

        return self._award_win(turn, guess)

    def _award_win(self, turn: Turn, guess: Guess) -> Dict[str, Any]:
        self.registry.award(guess.player_id, 1)
        self.registry.award(turn.active_player_id, 1)
        turn.round_score += 1

        guesser = self.registry.get(guess.player_id)
        name = guess.player_name or (guesser.name if guesser else guess.player_id)
        self.winner_notification = WinnerNotification(guesser_name=name, timestamp=int(self._clock() * 1000))
        self.scheduler.call_later(self.rules.winner_announcement_sec, self.close_winner_window, self.generation)

        logger.info(
            "Correct guess",
            extra={"player_id": guess.player_id, "card_index": turn.card_index, "round_score": turn.round_score},
        )
        self._emit("correct_guess", player_id=guess.player_id, guesser_name=name, card_index=turn.card_index)
        return {"ok": True, "matched": True, "evaluated": True}

    def close_winner_window(self, generation: int) -> None:
        """Fin de l'annonce du gagnant : carte suivante ou résumé."""
        if generation != self.generation or self.winner_notification is None:
            return
        self.winner_notification = None
        self._advance_or_summarize()

    # ------------------------------------------------------------------
    # Fin de tour / reset
    # ------------------------------------------------------------------
    def finish_turn(self, actor_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Acquittement du résumé (host si `actor_id` est None, sinon le joueur actif).
        Après MAX_ROUNDS tours → retour au lobby (tour 1, historique de mots vidé).
        """
        if self.phase != Phase.ROUND_SUMMARY:
            return _reject("wrong_phase")
        if actor_id is not None and (self.turn is None or actor_id != self.turn.active_player_id):
            return _reject("not_active_player")

        finished = self.turn_index
        self._clear_turn()
        if finished >= self.rules.max_rounds:
            self.turn_index = 1
            self.word_supply.reset_history()
            self._set_phase(Phase.LOBBY)
            self._emit("game_over", leaderboard=[p.to_wire() for p in self.registry.list_sorted_by_score()])
            return {"ok": True, "phase": self.phase.value, "game_over": True}

        self.turn_index += 1
        self._emit("turn_finished", turn_index=finished)
        return self._spin()

    def reset_to_lobby(self) -> Dict[str, Any]:
        """Abandonne le tour en cours (timers et mots en vol invalidés), scores conservés."""
        self._clear_turn()
        self.turn_index = 1
        self.word_supply.reset_history()
        self._set_phase(Phase.LOBBY)
        self._emit("game_reset")
        return {"ok": True, "phase": self.phase.value}

    def _clear_turn(self) -> None:
        self.turn = None
        self.selected_player_id = None
        self.guesses = []
        self.winner_notification = None

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------
    def snapshot(self) -> GameState:
        """Projection pure de l'état courant (contenu de STATE_UPDATE)."""
        current_round = None
        turn = self.turn
        if turn is not None:
            current_round = CurrentRound(
                player_id=turn.active_player_id,
                time_left=turn.time_left,
                card_index=turn.card_index + 1,
                total_cards=self.rules.total_cards_per_turn,
                secret_word=turn.current_word() if self.phase in SECRET_VISIBLE_PHASES else None,
            )
        return GameState(
            phase=self.phase,
            players=self.registry.players(),
            active_theme=self.theme_id,
            guesses=list(self.guesses) if self.phase in CARD_LIVE_PHASES else [],
            current_round=current_round,
            winner_notification=self.winner_notification,
        )

    def status(self) -> Dict[str, Any]:
        """Vue synthétique pour l'écran host (hors snapshot diffusé)."""
        return {
            "phase": self.phase.value,
            "turn_index": self.turn_index,
            "max_rounds": self.rules.max_rounds,
            "round_score": self.turn.round_score if self.turn else 0,
            "theme_id": self.theme_id,
            "difficulty": self.difficulty,
            "selected_player_id": self.selected_player_id,
            "words_ready": bool(self.turn and self.turn.words_ready),
            "players": len(self.registry),
        }
