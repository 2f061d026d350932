from __future__ import annotations

from typing import Iterable

from unbox.cases.items import Item
from unbox.cases.rarity import COMMON, LEGENDARY, RARE, UNCOMMON


def _placeholder(color: str, label: str) -> str:
    return f"https://placehold.co/80x80/{color}/ffffff?text={label}"


# Built-in table referenced by legacy cases that list `games` ids instead of items.
DEFAULT_GAMES: tuple[Item, ...] = (
    Item("Stardew Farm", COMMON, _placeholder("4b5563", "C1"), "A simple, relaxing farming simulator.", 1),
    Item("Pixel Runner", COMMON, _placeholder("4b5563", "C2"), "An endless runner game with retro graphics.", 2),
    Item("Block Tower Defense", COMMON, _placeholder("4b5563", "C3"), "Protect your base from blocky invaders.", 3),
    Item("Galactic Drifter", UNCOMMON, _placeholder("3b82f6", "U1"), "Space exploration with trading and combat.", 4),
    Item("Medieval Craft", UNCOMMON, _placeholder("3b82f6", "U2"), "Build and manage a medieval settlement.", 5),
    Item("Cyberpunk Shadow", RARE, _placeholder("8b5cf6", "R1"), "An action RPG set in a neon-drenched future.", 6),
    Item("Zombie Survival 4", RARE, _placeholder("8b5cf6", "R2"), "Third-person shooter in a post-apocalyptic world.", 7),
    Item("Elden Scroll VI", LEGENDARY, _placeholder("f59e0b", "L1"), "The highly anticipated open-world fantasy RPG.", 8),
)
DEFAULT_GAME_INDEX = {game.item_id: game for game in DEFAULT_GAMES}


def resolve_game_ids(game_ids: Iterable[object]) -> list[Item]:
    """Map legacy game ids onto the built-in table, dropping unknown ids."""
    out: list[Item] = []
    for raw in game_ids:
        try:
            game = DEFAULT_GAME_INDEX.get(int(raw))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            continue
        if game is not None:
            out.append(game)
    return out
