"""
Models / wire.py
Rôle:
- Base Pydantic commune aux modèles échangés avec les téléphones.

Notes:
- Les clés JSON sont en camelCase (`avatarSeed`, `playerId`…), les attributs Python
  en snake_case ; les deux formes sont acceptées en entrée.
- Toujours sérialiser avec `to_wire()` pour obtenir les alias camelCase.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Modèle sérialisé en camelCase sur le canal host ↔ invités."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump JSON-compatible avec les alias camelCase."""
        return self.model_dump(mode="json", by_alias=True)
