"""Built-in sample deck loaded from embedded JSON data."""

import json
from functools import cache
from importlib import resources
from pathlib import Path

from lingodrill.domain.entities.card import Card


@cache
def _read_deck_data() -> dict:
    """Read the embedded deck file.

    Uses importlib.resources for reliable package data access.
    Falls back to file path if running outside package context.
    """
    try:
        data_path = resources.files("lingodrill.adapters.data").joinpath("sample_deck.json")
        with data_path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (ModuleNotFoundError, FileNotFoundError, TypeError):
        file_path = Path(__file__).parent / "data" / "sample_deck.json"
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)


def load_sample_cards() -> list[Card]:
    """Build fresh Card instances for the built-in deck.

    Ids are stable so re-seeding the store is idempotent.
    """
    data = _read_deck_data()
    return [
        Card(
            id=card_data["id"],
            content=card_data["content"],
            source_language=data["source_language"],
            user_translation=card_data.get("user_translation", ""),
            comment=card_data.get("comment", ""),
            tags=list(data.get("tags", [])),
        )
        for card_data in data["cards"]
    ]


def sample_deck_target_language() -> str:
    """Language the bundled reference translations are written in."""
    return _read_deck_data()["target_language"]
