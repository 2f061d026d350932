from __future__ import annotations

import random
from typing import Sequence

from unbox.cases.items import Item
from unbox.errors import InvalidPool


def pool_weight(pool: Sequence[Item]) -> int:
    return sum(item.rarity.weight for item in pool)


def select_item(pool: Sequence[Item], rng: random.Random) -> Item:
    """Draw one item with probability weight / total pool weight.

    Duplicate tiers split their mass: N rare items in a pool each carry
    rare.weight / total, not the tier's global share.
    """
    if not pool:
        raise InvalidPool("cannot select from an empty pool")
    total = pool_weight(pool)
    if total <= 0:
        raise InvalidPool("pool has no weight")
    remainder = rng.random() * total
    for item in pool:
        remainder -= item.rarity.weight
        if remainder <= 0:
            return item
    # Float rounding can leave a sliver past the last item.
    return pool[-1]


def item_odds(pool: Sequence[Item]) -> list[tuple[Item, float]]:
    """Per-item chance, merged by name, in first-seen order."""
    total = pool_weight(pool)
    if total <= 0:
        return []
    order: list[str] = []
    first: dict[str, Item] = {}
    mass: dict[str, int] = {}
    for item in pool:
        if item.name not in first:
            order.append(item.name)
            first[item.name] = item
            mass[item.name] = 0
        mass[item.name] += item.rarity.weight
    return [(first[name], mass[name] / total) for name in order]


def unique_items(pool: Sequence[Item]) -> list[Item]:
    """First occurrence of each name, rarest tier first."""
    seen: set[str] = set()
    out: list[Item] = []
    for item in pool:
        if item.name in seen:
            continue
        seen.add(item.name)
        out.append(item)
    out.sort(key=lambda i: i.rarity.weight)
    return out
