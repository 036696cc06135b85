"""
Service: word_generator.py
- Client HTTP vers le LLM (Ollama par défaut) qui propose des mots secrets pour un tour.
- Utilisé par la Word Supply ; toute erreur remonte en `WordGeneratorError` et la
  supply bascule alors sur les listes hors-ligne.

Fonctions principales:
- generate_words(count, theme_label, difficulty, exclude_words): appel /api/generate,
  attend un tableau JSON de chaînes.
- build_word_generator(): renvoie `generate_words` si un provider est configuré, sinon None.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

import orjson
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from hints_online.config.settings import settings
from hints_online.config.themes import DIFFICULTIES

logger = logging.getLogger(__name__)

DEFAULT_GENERATE_TIMEOUT: Tuple[float, float] = (3.0, 20.0)  # connect, read
# Nombre de mots récents rappelés au modèle
PROMPT_EXCLUDE_TAIL = 20

WordGenerator = Callable[[int, str, str, Sequence[str]], List[str]]


class WordGeneratorError(RuntimeError):
    """Erreur encapsulant un échec de génération de mots (réseau, JSON, contenu)."""


class LLMClient:
    """
    Client HTTP centralisé pour communiquer avec le LLM.
    - Configure retries avec backoff exponentiel.
    - Journalise chaque requête avec un identifiant de corrélation.
    """

    def __init__(
        self,
        chat_endpoint: str,
        *,
        session: Optional[requests.Session] = None,
        generate_timeout: Tuple[float, float] = DEFAULT_GENERATE_TIMEOUT,
    ) -> None:
        self.chat_endpoint = chat_endpoint
        self.generate_endpoint = self._resolve_generate_endpoint(chat_endpoint)
        self.session = session or self._build_session()
        self.generate_timeout = generate_timeout

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=2,
            backoff_factor=0.3,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"POST"}),
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @staticmethod
    def _resolve_generate_endpoint(chat_endpoint: str) -> str:
        if chat_endpoint.endswith("/api/chat"):
            return chat_endpoint[:-9] + "/api/generate"
        if chat_endpoint.endswith("/api/chat/"):
            return chat_endpoint[:-10] + "/api/generate"
        return chat_endpoint.replace("/api/chat", "/api/generate")

    def generate(self, payload: Dict[str, Any], *, request_id: str) -> str:
        """POST non streamé sur /api/generate ; renvoie le champ `response`."""
        url = self.generate_endpoint
        try:
            logger.debug(
                "LLM request start",
                extra={"llm_url": url, "llm_request_id": request_id},
            )
            response = self.session.post(url, json=payload, timeout=self.generate_timeout)
            response.raise_for_status()
        except requests.Timeout as exc:
            logger.warning(
                "LLM request timeout",
                extra={"llm_url": url, "llm_request_id": request_id},
            )
            raise WordGeneratorError("LLM request timed out") from exc
        except requests.RequestException as exc:
            logger.warning(
                "LLM request failed",
                exc_info=True,
                extra={"llm_url": url, "llm_request_id": request_id},
            )
            raise WordGeneratorError("LLM request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise WordGeneratorError("Invalid JSON payload from LLM generate") from exc

        text = (data.get("response") or "").strip() if isinstance(data, dict) else ""
        if not text:
            raise WordGeneratorError("Empty response from LLM generate")
        return text


CLIENT = LLMClient(settings.LLM_ENDPOINT)


def _build_prompt(count: int, theme_label: str, difficulty: str, exclude_words: Sequence[str]) -> str:
    level = DIFFICULTIES.get(difficulty, DIFFICULTIES["medium"])["prompt"]
    recent = list(exclude_words)[-PROMPT_EXCLUDE_TAIL:]
    return (
        f"Genereer {count} unieke, creatieve Nederlandse zelfstandige naamwoorden "
        "voor het spel '30 Seconds'.\n\n"
        "Context:\n"
        f"- Thema: {theme_label}\n"
        f"- Niveau: {difficulty} ({level})\n"
        f"- Random Seed: {uuid4().hex[:8]}\n\n"
        "Regels:\n"
        "1. Het woord moet in het Nederlands zijn.\n"
        f"2. Geen woorden uit deze lijst: {orjson.dumps(recent).decode()}.\n"
        "3. Geef ALLEEN een JSON array van strings terug."
    )


def _parse_words(text: str) -> List[str]:
    """Accepte `["a", "b"]` ou `{"words": ["a", "b"]}`."""
    try:
        data = orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise WordGeneratorError("LLM output is not JSON") from exc
    if isinstance(data, dict):
        data = data.get("words")
    if not isinstance(data, list):
        raise WordGeneratorError("LLM output is not a JSON array")
    words = [w.strip() for w in data if isinstance(w, str) and w.strip()]
    if not words:
        raise WordGeneratorError("LLM output holds no usable word")
    return words


def generate_words(count: int, theme_label: str, difficulty: str, exclude_words: Sequence[str] = ()) -> List[str]:
    """
    Demande `count` mots au LLM. Lève `WordGeneratorError` en cas d'échec.
    Appel bloquant (requests) : la supply l'exécute dans un thread worker.
    """
    request_id = f"words-{uuid4().hex}"
    text = CLIENT.generate(
        {
            "model": settings.LLM_MODEL,
            "prompt": _build_prompt(count, theme_label, difficulty, exclude_words),
            "format": "json",
            "stream": False,
            "options": {"temperature": 1.0},
        },
        request_id=request_id,
    )
    words = _parse_words(text)
    logger.info(
        "LLM words generated",
        extra={"llm_request_id": request_id, "count": len(words)},
    )
    return words


def build_word_generator() -> Optional[WordGenerator]:
    """Générateur configuré, ou None (listes hors-ligne uniquement)."""
    if settings.LLM_PROVIDER == "ollama":
        return generate_words
    return None
