"""
Utilitaires IO JSON (rapides) basés sur orjson.
- read_json(Path) → Any | None (None si fichier manquant)

Attention:
- orjson renvoie/attend des bytes; on lit en mode binaire.
"""
import orjson as json
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    """Lit un fichier JSON (ou None s'il n'existe pas)."""
    if not path.exists():
        return None
    with path.open("rb") as f:
        return json.loads(f.read())
