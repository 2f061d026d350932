from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from unbox.cases.rarity import RarityTier, get_rarity


@dataclass(frozen=True)
class Item:
    name: str
    rarity: RarityTier
    image: str = ""
    description: str = ""
    item_id: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "rarity": self.rarity.key,
            "image": self.image,
            "description": self.description,
        }
        if self.item_id is not None:
            data["id"] = self.item_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValueError("item has no name")
        rarity = data.get("rarity")
        # Snapshots written by older clients embed the whole tier object.
        if isinstance(rarity, dict):
            rarity = rarity.get("key") or rarity.get("name")
        return cls(
            name=name,
            rarity=get_rarity(rarity),
            image=str(data.get("image") or ""),
            description=str(data.get("description") or ""),
            item_id=data.get("id"),
        )


@dataclass
class Case:
    case_id: str
    name: str
    description: str = ""
    image: str = ""
    items: list[Item] = field(default_factory=list)

    def total_weight(self) -> int:
        return sum(item.rarity.weight for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, case_id: str, data: dict[str, Any]) -> "Case":
        from unbox.cases.defaults import resolve_game_ids

        raw_items = data.get("items")
        if raw_items is None and data.get("games") is not None:
            items = resolve_game_ids(data.get("games") or [])
        else:
            items = []
            for raw in raw_items or []:
                if isinstance(raw, dict):
                    items.append(Item.from_dict(raw))
        return cls(
            case_id=str(case_id),
            name=str(data.get("name") or case_id),
            description=str(data.get("description") or ""),
            image=str(data.get("image") or ""),
            items=items,
        )
