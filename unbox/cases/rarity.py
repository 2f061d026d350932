from __future__ import annotations

from dataclasses import dataclass

from unbox.config import RARITY_WEIGHTS


@dataclass(frozen=True)
class RarityTier:
    key: str
    name: str
    weight: int
    color: tuple[int, int, int]


COMMON = RarityTier("COMMON", "Common", RARITY_WEIGHTS.common, (128, 128, 128))
UNCOMMON = RarityTier("UNCOMMON", "Uncommon", RARITY_WEIGHTS.uncommon, (59, 130, 246))
RARE = RarityTier("RARE", "Rare", RARITY_WEIGHTS.rare, (139, 92, 246))
LEGENDARY = RarityTier("LEGENDARY", "Legendary", RARITY_WEIGHTS.legendary, (245, 158, 11))

RARITIES: tuple[RarityTier, ...] = (COMMON, UNCOMMON, RARE, LEGENDARY)
RARITY_INDEX = {tier.key: tier for tier in RARITIES}


def get_rarity(key: object) -> RarityTier:
    """Resolve an authored rarity key; unknown keys read as COMMON."""
    if isinstance(key, RarityTier):
        return key
    return RARITY_INDEX.get(str(key or "").strip().upper(), COMMON)
