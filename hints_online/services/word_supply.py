"""
Service: word_supply.py
Rôle:
- Fournir, pour chaque tour, un lot de mots secrets distincts (ordre = ordre des cartes).
- Tenir l'historique des mots déjà joués (anti-répétition) jusqu'au retour au lobby.

Stratégie:
1) Générateur (LLM) si configuré : sortie nettoyée (trim, dédoublonnage insensible
   à la casse, mots récents retirés), complétée par la liste de secours si trop courte.
2) Sinon / en cas d'échec : liste statique du thème, filtrée des mots récents, sauf
   si le reste est plus petit que `count` → liste complète (répétitions inévitables).

`next_batch` ne lève jamais : l'indisponibilité du générateur est absorbée ici.
L'historique n'est alimenté que par l'appelant (`remember`), une fois le lot accepté.
"""
from __future__ import annotations

import logging
import random
from functools import partial
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from anyio import to_thread

from hints_online.config.settings import settings
from hints_online.config.themes import DEFAULT_THEME_ID, theme_label
from .io_utils import read_json
from .word_generator import WordGenerator

logger = logging.getLogger(__name__)

FALLBACK_WORDS_PATH = Path(settings.DATA_DIR) / "fallback_words.json"


def load_fallback_words(path: Path = FALLBACK_WORDS_PATH) -> Dict[str, List[str]]:
    """Lecture des listes de secours par thème ({theme_id: [mots]})."""
    data = read_json(path) or {}
    return {str(k): [str(w) for w in v] for k, v in data.items() if isinstance(v, list)}


def _key(word: str) -> str:
    return word.strip().lower()


class WordSupply:
    def __init__(
        self,
        generator: Optional[WordGenerator] = None,
        fallback_words: Optional[Dict[str, List[str]]] = None,
    ) -> None:
        self.generator = generator
        self.fallback_words = fallback_words if fallback_words is not None else load_fallback_words()
        self.history: List[str] = []

    # ---------- historique ----------
    def remember(self, words: Iterable[str]) -> None:
        self.history.extend(words)

    def reset_history(self) -> None:
        self.history.clear()

    # ---------- tirage ----------
    def _themed_list(self, theme_id: str) -> List[str]:
        return (
            self.fallback_words.get(theme_id)
            or self.fallback_words.get(DEFAULT_THEME_ID)
            or []
        )

    def fallback_batch(
        self,
        count: int,
        theme_id: str,
        exclude: Sequence[str] = (),
        already_chosen: Sequence[str] = (),
    ) -> List[str]:
        """Tirage aléatoire dans la liste du thème en évitant les mots récents si possible."""
        taken = {_key(w) for w in already_chosen}
        themed = [w for w in self._themed_list(theme_id) if _key(w) not in taken]
        excluded = {_key(w) for w in exclude}
        available = [w for w in themed if _key(w) not in excluded]
        if len(available) < count:
            available = themed
        return random.sample(available, min(count, len(available)))

    async def next_batch(
        self,
        count: int,
        theme_id: str,
        difficulty: str,
        exclude_recent_words: Sequence[str] = (),
    ) -> List[str]:
        """Renvoie `count` mots distincts ; ne lève jamais (repli hors-ligne)."""
        words: List[str] = []
        if self.generator is not None:
            try:
                raw = await to_thread.run_sync(
                    partial(self.generator, count, theme_label(theme_id), difficulty, list(exclude_recent_words))
                )
                words = self._clean(raw, exclude_recent_words)[:count]
            except Exception:
                logger.warning(
                    "Word generator failed, using fallback list",
                    exc_info=True,
                    extra={"theme_id": theme_id, "difficulty": difficulty},
                )
                words = []

        if len(words) < count:
            words += self.fallback_batch(count - len(words), theme_id, exclude_recent_words, words)

        logger.info("Word batch ready", extra={"theme_id": theme_id, "count": len(words)})
        return words

    @staticmethod
    def _clean(raw: Iterable[str], exclude: Sequence[str]) -> List[str]:
        excluded = {_key(w) for w in exclude}
        seen: set[str] = set()
        result: List[str] = []
        for word in raw or []:
            if not isinstance(word, str):
                continue
            text = word.strip()
            k = _key(text)
            if not k or k in excluded or k in seen:
                continue
            seen.add(k)
            result.append(text)
        return result
