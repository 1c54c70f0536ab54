# ABOUTME: Maps a spell's preparation mode to the slot pool a fizzle draws from
# ABOUTME: One rule per mode: standard leveled slots, pact slots, or no slot at all

from abc import ABC, abstractmethod
from typing import Dict, Optional

from weave_engine.core.spell import PreparationMode, Spell


PACT_POOL_ID = "pact_slots"


def standard_pool_id(level: int) -> str:
    """Pool id for standard slots of a spell level (e.g., "spell_slots_level_3")."""
    return f"spell_slots_level_{level}"


class SlotPoolRule(ABC):
    """How spells of one preparation mode spend slots."""

    label: str = ""

    @abstractmethod
    def pool_id(self, level: int) -> Optional[str]:
        """Pool to spend from for a spell of this level, or None if none applies."""
        pass

    @property
    def consumed_note(self) -> str:
        return "A spell slot was consumed."


class StandardSlotRule(SlotPoolRule):
    label = "Spells"

    def pool_id(self, level: int) -> Optional[str]:
        if level < 1:
            return None
        return standard_pool_id(level)


class PactSlotRule(SlotPoolRule):
    """Pact magic slots are a single pool shared by every level."""

    label = "Pact Magic"

    def pool_id(self, level: int) -> Optional[str]:
        if level < 1:
            return None
        return PACT_POOL_ID

    @property
    def consumed_note(self) -> str:
        return "A pact magic spell slot was consumed."


class NoSlotRule(SlotPoolRule):
    """At-will and other castings never spend slots."""

    label = "No Slots"

    def pool_id(self, level: int) -> Optional[str]:
        return None


SLOT_POOL_RULES: Dict[PreparationMode, SlotPoolRule] = {
    PreparationMode.PREPARED: StandardSlotRule(),
    PreparationMode.ALWAYS: StandardSlotRule(),
    PreparationMode.INNATE: StandardSlotRule(),
    PreparationMode.PACT: PactSlotRule(),
    PreparationMode.AT_WILL: NoSlotRule(),
    PreparationMode.OTHER: NoSlotRule(),
}


def slot_rule_for(spell: Spell) -> SlotPoolRule:
    """The slot rule for a spell's preparation mode."""
    return SLOT_POOL_RULES[spell.preparation_mode]
