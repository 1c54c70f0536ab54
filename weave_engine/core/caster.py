# ABOUTME: Caster record and owned items as held by the host platform
# ABOUTME: Tracks exhaustion, persistent flags, spell slot pools, and inventory items

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from weave_engine.systems.resources import ResourcePool


MAX_EXHAUSTION = 6

FOCUS_PROPERTY = "focus"


@dataclass
class CasterItem:
    """
    An item owned by a caster.

    Attributes:
        name: Display name (e.g., "Staff of the Magi")
        item_type: Host item type ("equipment", "weapon", "feat", "consumable", ...)
        equipped: Whether the item is currently equipped
        properties: Capability tags; "focus" marks a spellcasting focus
        focus_type: Declared focus type ("wand", "staff", ...), if the host records one
        spell: Name of the spell a consumable item casts, if any
    """
    name: str
    item_type: str = "equipment"
    equipped: bool = False
    properties: FrozenSet[str] = frozenset()
    focus_type: Optional[str] = None
    spell: Optional[str] = None

    @property
    def is_focus(self) -> bool:
        """True if the item is tagged as a spellcasting focus."""
        return FOCUS_PROPERTY in self.properties

    @property
    def is_feat(self) -> bool:
        return self.item_type == "feat"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "item_type": self.item_type,
            "equipped": self.equipped,
            "properties": sorted(self.properties),
        }
        if self.focus_type is not None:
            data["focus_type"] = self.focus_type
        if self.spell is not None:
            data["spell"] = self.spell
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CasterItem":
        return cls(
            name=data["name"],
            item_type=data.get("item_type", "equipment"),
            equipped=bool(data.get("equipped", False)),
            properties=frozenset(data.get("properties", [])),
            focus_type=data.get("focus_type"),
            spell=data.get("spell")
        )


@dataclass
class Caster:
    """
    A character that can attempt to cast spells.

    Only the fields the resolver reads or writes are modelled. The record is
    owned by an ActorStore; the resolver never mutates it directly.

    Attributes:
        id: Unique identifier
        name: Display name
        player_owned: Whether a player controls this caster
        exhaustion: Current exhaustion level (0-6, 6 is death)
        flags: Persistent key/value flags (e.g., the stored spell success bonus)
        items: Owned items, including feats
        slot_pools: Spell slot pools keyed by pool id
    """
    id: str
    name: str
    player_owned: bool = True
    exhaustion: int = 0
    flags: Dict[str, Any] = field(default_factory=dict)
    items: List[CasterItem] = field(default_factory=list)
    slot_pools: Dict[str, ResourcePool] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0 <= self.exhaustion <= MAX_EXHAUSTION:
            raise ValueError(
                f"Exhaustion must be between 0 and {MAX_EXHAUSTION}, got {self.exhaustion}"
            )

    def add_slot_pool(self, pool: ResourcePool) -> None:
        """Add or replace a slot pool, keyed by the pool name."""
        self.slot_pools[pool.name] = pool

    def get_slot_pool(self, pool_id: str) -> Optional[ResourcePool]:
        return self.slot_pools.get(pool_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible data."""
        return {
            "id": self.id,
            "name": self.name,
            "player_owned": self.player_owned,
            "exhaustion": self.exhaustion,
            "flags": dict(self.flags),
            "items": [item.to_dict() for item in self.items],
            "slot_pools": {
                name: {
                    "current": pool.current,
                    "maximum": pool.maximum,
                    "recovery_type": pool.recovery_type
                }
                for name, pool in self.slot_pools.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Caster":
        """
        Deserialize from JSON-compatible data.

        Raises:
            KeyError: If id or name is missing
            ValueError: If exhaustion or a pool is out of range
        """
        caster = cls(
            id=data["id"],
            name=data["name"],
            player_owned=bool(data.get("player_owned", True)),
            exhaustion=int(data.get("exhaustion", 0)),
            flags=dict(data.get("flags", {})),
            items=[CasterItem.from_dict(item) for item in data.get("items", [])]
        )
        for name, pool_data in data.get("slot_pools", {}).items():
            maximum = int(pool_data.get("maximum", pool_data.get("current", 0)))
            pool = ResourcePool(
                name=name,
                current=int(pool_data.get("current", maximum)),
                maximum=maximum,
                recovery_type=pool_data.get("recovery_type", "long_rest")
            )
            caster.add_slot_pool(pool)
        return caster

    def __str__(self) -> str:
        return f"{self.name} (exhaustion {self.exhaustion})"
