# ABOUTME: Pre-roll Grit negotiation: trade exhaustion for a flat roll bonus
# ABOUTME: Offers the tiers the caster can afford and validates the choice against the exhaustion ceiling

import logging
from typing import List, Optional

from weave_engine.core.caster import Caster
from weave_engine.core.dice import format_signed
from weave_engine.core.spell import Spell
from weave_engine.host.base import NarrationSink, PromptChoice, PromptProvider
from weave_engine.rules.config import GritTier, WeaveConfig
from weave_engine.systems.attempt import CastAttempt
from weave_engine.utils.events import Event, EventBus, EventType


logger = logging.getLogger(__name__)

NO_GRIT_KEY = "none"


def tier_key(index: int) -> str:
    """Prompt key for the Grit tier at a 0-based index ("tier1", "tier2", ...)."""
    return f"tier{index + 1}"


class GritNegotiator:
    """
    Asks the caster whether to push the weave with Grit before rolling.

    A tier is offered only if paying its exhaustion keeps the caster at or
    below config.max_safe_exhaustion. The exhaustion itself is not paid
    here; the outcome engine charges it together with the result.
    """

    def __init__(
        self,
        config: WeaveConfig,
        prompts: PromptProvider,
        narration: NarrationSink,
        event_bus: Optional[EventBus] = None
    ):
        self.config = config
        self.prompts = prompts
        self.narration = narration
        self.event_bus = event_bus

    def affordable(self, exhaustion: int, tier: GritTier) -> bool:
        """
        Check whether a tier keeps the caster at or below the exhaustion ceiling.

        Args:
            exhaustion: Caster's current exhaustion
            tier: Grit tier being considered

        Returns:
            True if paying the tier's cost is safe
        """
        return exhaustion + tier.exhaustion <= self.config.max_safe_exhaustion

    def available_tiers(self, exhaustion: int) -> List[GritTier]:
        """Tiers the caster can take at the given exhaustion level."""
        return [tier for tier in self.config.grit_tiers if self.affordable(exhaustion, tier)]

    def build_choices(self, exhaustion: int) -> List[PromptChoice]:
        """
        Build the Grit prompt options.

        Args:
            exhaustion: Caster's current exhaustion

        Returns:
            "No Grit" first, then each affordable tier with the tier as payload
        """
        choices = [PromptChoice(NO_GRIT_KEY, "No Grit", None)]
        for index, tier in enumerate(self.config.grit_tiers):
            if self.affordable(exhaustion, tier):
                choices.append(PromptChoice(tier_key(index), tier.label, tier))
        return choices

    async def negotiate(self, caster: Caster, spell: Spell, attempt: CastAttempt) -> bool:
        """
        Offer Grit and record an accepted tier on the attempt.

        Returns:
            True if Grit was accepted
        """
        exhaustion = attempt.exhaustion_at_start
        if not self.available_tiers(exhaustion):
            logger.debug(f"{caster.name} is too exhausted for Grit ({exhaustion})")
            return False

        message = (
            f"You are attempting to cast {spell.name} (Level {spell.level}).\n"
            f"The d100 target is {attempt.threshold} (roll >=). "
            f"Your current bonus is {format_signed(attempt.base_bonus)}.\n"
            f"Use Grit to improve your chances? (Current Exhaustion: {exhaustion})"
        )
        choice = await self.prompts.choose(
            "Push the Weave: Grit",
            message,
            self.build_choices(exhaustion),
            default=NO_GRIT_KEY
        )

        if not isinstance(choice, GritTier):
            return False

        if not self.affordable(exhaustion, choice):
            logger.warning(
                f"Rejected Grit for {caster.name}: exhaustion {exhaustion} + "
                f"{choice.exhaustion} exceeds {self.config.max_safe_exhaustion}"
            )
            self.narration.warn(caster, "Cannot use Grit: resulting exhaustion would be too high.")
            self._emit(EventType.GRIT_REJECTED, caster, spell, choice)
            return False

        attempt.grit_used = True
        attempt.grit_bonus = choice.bonus
        attempt.grit_exhaustion_cost = choice.exhaustion
        self._emit(EventType.GRIT_ACCEPTED, caster, spell, choice)
        return True

    def _emit(self, event_type: EventType, caster: Caster, spell: Spell, tier: GritTier) -> None:
        if self.event_bus:
            self.event_bus.emit(Event(
                type=event_type,
                data={
                    "caster": caster.name,
                    "spell": spell.name,
                    "bonus": tier.bonus,
                    "exhaustion": tier.exhaustion
                }
            ))
