"""
Tables statiques des thèmes et niveaux de difficulté.

Le moteur ne lit que l'identifiant du thème ; le libellé sert au prompt du
générateur de mots et l'icône à l'affichage côté host.
"""
from typing import Dict

THEMES: Dict[str, Dict[str, str]] = {
    "standard": {"id": "standard", "label": "Standaard", "icon": "🎲"},
    "christmas": {"id": "christmas", "label": "Kerst", "icon": "🎄"},
    "summer": {"id": "summer", "label": "Zomer", "icon": "☀️"},
    "winter": {"id": "winter", "label": "Winter", "icon": "❄️"},
    "autumn": {"id": "autumn", "label": "Herfst", "icon": "🍂"},
}

DIFFICULTIES: Dict[str, Dict[str, str]] = {
    "easy": {
        "label": "Makkelijk",
        "prompt": "Zeer eenvoudige, concrete voorwerpen.",
    },
    "medium": {
        "label": "Gemiddeld",
        "prompt": "Alledaagse begrippen en voorwerpen.",
    },
    "hard": {
        "label": "Moeilijk",
        "prompt": "Abstracte concepten, spreekwoorden of specifieke voorwerpen.",
    },
}

DEFAULT_THEME_ID = "standard"


def theme_label(theme_id: str) -> str:
    """Libellé d'affichage d'un thème (thème standard si inconnu)."""
    theme = THEMES.get(theme_id) or THEMES[DEFAULT_THEME_ID]
    return theme["label"]
