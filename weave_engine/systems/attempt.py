# ABOUTME: Transient state of a single cast attempt
# ABOUTME: Carries bonuses, target, and the Grit/Desperation choices through the resolution stages

from dataclasses import dataclass, field
from typing import List

from weave_engine.core.dice import format_signed


@dataclass(frozen=True)
class BonusContribution:
    """One labelled source of the spell success bonus."""
    label: str
    value: int

    def __str__(self) -> str:
        return f"{self.label} ({format_signed(self.value)})"


@dataclass
class CastAttempt:
    """
    Everything one resolution run knows about its cast.

    Created when resolution starts and discarded when it ends. Grit's bonus
    is kept apart from base_bonus so a Desperation reroll can never include
    it.

    Attributes:
        caster_id: Id of the caster record
        spell_name: Display name of the spell
        spell_level: Spell level (0-9)
        base_bonus: Sum of the persistent, focus, and feat bonuses
        breakdown: Labelled contributions to base_bonus, in order
        threshold: d100 target (1-100)
        exhaustion_at_start: Caster exhaustion before any cost was paid
        grit_used: Whether a Grit tier was accepted
        grit_bonus: Bonus bought with Grit
        grit_exhaustion_cost: Exhaustion owed for Grit (0-2)
        desperation_used: Whether the caster rerolled with Desperation
    """
    caster_id: str
    spell_name: str
    spell_level: int
    base_bonus: int
    breakdown: List[BonusContribution] = field(default_factory=list)
    threshold: int = 0
    exhaustion_at_start: int = 0
    grit_used: bool = False
    grit_bonus: int = 0
    grit_exhaustion_cost: int = 0
    desperation_used: bool = False

    @property
    def total_bonus(self) -> int:
        """Bonus applied to the first roll, Grit included."""
        return self.base_bonus + self.grit_bonus

    def describe_bonuses(self, include_grit: bool = True) -> str:
        parts = [str(contribution) for contribution in self.breakdown]
        if include_grit and self.grit_used:
            parts.append(
                f"Grit ({format_signed(self.grit_bonus)}, {self.grit_exhaustion_cost} Exhaustion)"
            )
        return ", ".join(parts) or "None"
