# ABOUTME: Spell and casting-context data for spell success checks
# ABOUTME: Describes what is being cast, how it was prepared, and where the cast came from

from dataclasses import dataclass
from typing import Optional
from enum import Enum


class PreparationMode(str, Enum):
    """How a spell is made available to its caster."""
    PREPARED = "prepared"
    ALWAYS = "always"
    INNATE = "innate"
    PACT = "pact"
    AT_WILL = "atwill"
    OTHER = "other"


class CastSource(str, Enum):
    """Where a cast attempt originates."""
    SPELLBOOK = "spellbook"
    CONSUMABLE = "consumable"
    RUNESTONE = "runestone"


@dataclass(frozen=True)
class Spell:
    """
    A spell being cast.

    Attributes:
        id: Unique identifier (lowercase_snake_case)
        name: Display name of the spell
        level: Spell level (0 for cantrips, 1-9 for leveled spells)
        preparation_mode: Decides which slot pool a fizzle draws from
    """
    id: str
    name: str
    level: int
    preparation_mode: PreparationMode = PreparationMode.PREPARED

    def is_cantrip(self) -> bool:
        """Return True if this is a cantrip (level 0 spell)."""
        return self.level == 0


@dataclass(frozen=True)
class CastContext:
    """
    Flags supplied by the calling workflow for one cast attempt.

    Attributes:
        source: Where the cast came from
        runestone: Marker set when success was already settled elsewhere
        consume_slot: False when the caller suppresses slot consumption
        source_item: Name of the item the cast came from, if any
    """
    source: CastSource = CastSource.SPELLBOOK
    runestone: bool = False
    consume_slot: bool = True
    source_item: Optional[str] = None

    @property
    def bypasses_check(self) -> bool:
        """True when the cast skips the success check entirely."""
        return self.runestone or self.source == CastSource.RUNESTONE
