# ABOUTME: Outcome engine for the spell success check
# ABOUTME: Rolls d100, charges slots and exhaustion, and runs the one-time Desperation reroll

import logging
from enum import Enum
from typing import Optional

from rich.markup import escape
from rich.text import Text

from weave_engine.core.caster import Caster
from weave_engine.core.dice import DiceRoller, format_signed
from weave_engine.core.spell import CastContext, Spell
from weave_engine.host.base import ActorStore, ActorUpdate, NarrationSink, PromptProvider
from weave_engine.rules.config import WeaveConfig
from weave_engine.systems.attempt import CastAttempt
from weave_engine.systems.cast_report import CastReport
from weave_engine.systems.slot_pools import slot_rule_for
from weave_engine.utils.events import Event, EventBus, EventType


logger = logging.getLogger(__name__)


class CastState(str, Enum):
    """
    States of a cast attempt.

    AWAITING_ROLL is the start state. ROLLED_SUCCESS, ROLLED_FAIL,
    REROLLED_SUCCESS and REROLLED_FAIL end the attempt; ROLLED_FAIL moves on
    to AWAITING_DESPERATION only while the caster is still choosing.
    BYPASSED, NOT_GATED and UNSUPPORTED_LEVEL are reported by the resolver
    when the check never runs.
    """
    AWAITING_ROLL = "awaiting_roll"
    ROLLED_SUCCESS = "rolled_success"
    ROLLED_FAIL = "rolled_fail"
    AWAITING_DESPERATION = "awaiting_desperation"
    REROLLED_SUCCESS = "rerolled_success"
    REROLLED_FAIL = "rerolled_fail"
    BYPASSED = "bypassed"
    NOT_GATED = "not_gated"
    UNSUPPORTED_LEVEL = "unsupported_level"

    @property
    def allows_cast(self) -> bool:
        return self not in (
            CastState.ROLLED_FAIL,
            CastState.REROLLED_FAIL,
            CastState.AWAITING_ROLL,
            CastState.AWAITING_DESPERATION,
        )


class OutcomeEngine:
    """
    Resolves the roll for a prepared CastAttempt.

    Flow:
    1. Roll d100 + total bonus against the threshold.
    2. Success: charge Grit exhaustion if any, allow.
    3. Fizzle: spend one slot if the spell has one to lose, charge Grit
       exhaustion if any. With Grit the attempt ends here.
    4. Without Grit, and with exhaustion room left, offer Desperation: pay
       exhaustion immediately, reroll once with the base bonus.
    """

    def __init__(
        self,
        config: WeaveConfig,
        store: ActorStore,
        dice_roller: DiceRoller,
        prompts: PromptProvider,
        narration: NarrationSink,
        event_bus: Optional[EventBus] = None
    ):
        self.config = config
        self.store = store
        self.dice_roller = dice_roller
        self.prompts = prompts
        self.narration = narration
        self.event_bus = event_bus

    async def run(
        self,
        caster: Caster,
        spell: Spell,
        context: CastContext,
        attempt: CastAttempt,
        report: CastReport
    ) -> CastState:
        """
        Drive the attempt to a terminal state.

        Returns:
            ROLLED_SUCCESS, ROLLED_FAIL, REROLLED_SUCCESS or REROLLED_FAIL
        """
        roll = await self.dice_roller.roll_percentile()
        report.add_roll(roll)
        final = roll.total + attempt.total_bonus

        report.add(
            f"[bold]{escape(caster.name)}[/bold] attempts to cast "
            f"[bold]{escape(spell.name)}[/bold] (Level {spell.level})."
        )
        report.add(f"d100 Target: [bold]{attempt.threshold}[/bold] or higher.")
        report.add(
            f"Bonuses: {escape(attempt.describe_bonuses())} "
            f"(Total: {format_signed(attempt.total_bonus)})."
        )
        report.add(f"d100 Roll: {roll.total} + {attempt.total_bonus} = [bold]{final}[/bold].")
        self._emit(EventType.SPELL_CHECK_ROLLED, caster, spell, roll=roll.total, final=final,
                   threshold=attempt.threshold, reroll=False)

        if final >= attempt.threshold:
            success = "[bold green]Success![/bold green] The spell manifests!"
            if attempt.grit_used and await self._gain_exhaustion(
                caster, attempt.grit_exhaustion_cost, "Grit", report
            ):
                success += f" (Gained {attempt.grit_exhaustion_cost} exhaustion from Grit)."
            report.add(success)
            return CastState.ROLLED_SUCCESS

        report.add("[bold red]Fizzled![/bold red] The magic fails to coalesce.")
        self._emit(EventType.SPELL_FIZZLED, caster, spell, final=final, threshold=attempt.threshold)

        await self._consume_slot(caster, spell, context, report)

        if attempt.grit_used:
            if await self._gain_exhaustion(caster, attempt.grit_exhaustion_cost, "Grit", report):
                report.add(f"(Gained {attempt.grit_exhaustion_cost} exhaustion from Grit).")
            return CastState.ROLLED_FAIL

        return await self._offer_desperation(caster, spell, attempt, report)

    async def _offer_desperation(
        self,
        caster: Caster,
        spell: Spell,
        attempt: CastAttempt,
        report: CastReport
    ) -> CastState:
        cost = self.config.desperation_exhaustion_cost
        exhaustion = await self.store.get_exhaustion(caster)
        if exhaustion + cost > self.config.max_safe_exhaustion:
            return CastState.ROLLED_FAIL

        message = (
            f"{Text.from_markup(report.render()).plain}\n\n"
            f"Use Desperation to reroll the Spell Success Check? (This will inflict "
            f"{cost} Exhaustion. Current Exhaustion: {exhaustion})"
        )
        accepted = await self.prompts.confirm("Push the Weave: Desperation", message, default=False)
        if not accepted:
            return CastState.ROLLED_FAIL

        # Exhaustion can rise while the prompt is open.
        if not await self._gain_exhaustion(caster, cost, "Desperation", report):
            return CastState.ROLLED_FAIL

        attempt.desperation_used = True
        self._emit(EventType.DESPERATION_USED, caster, spell, cost=cost)

        reroll = await self.dice_roller.roll_percentile()
        report.add_roll(reroll)
        final = reroll.total + attempt.base_bonus

        report.add(
            f"[bold]{escape(caster.name)} uses Desperation![/bold] (Gained {cost} Exhaustion)."
        )
        report.add(f"Rerolling d100 Target: {attempt.threshold} or higher.")
        report.add(
            f"Bonuses: {escape(attempt.describe_bonuses(include_grit=False))} "
            f"(Total: {format_signed(attempt.base_bonus)})."
        )
        report.add(
            f"d100 Reroll: {reroll.total} + {attempt.base_bonus} = [bold]{final}[/bold]."
        )
        self._emit(EventType.SPELL_CHECK_ROLLED, caster, spell, roll=reroll.total, final=final,
                   threshold=attempt.threshold, reroll=True)

        if final >= attempt.threshold:
            report.add("[bold green]Success on Reroll![/bold green] The spell manifests!")
            return CastState.REROLLED_SUCCESS

        report.add("[bold red]Fizzled Again![/bold red] The magic dissipates completely.")
        self._emit(EventType.SPELL_FIZZLED, caster, spell, final=final, threshold=attempt.threshold)
        return CastState.REROLLED_FAIL

    async def _consume_slot(
        self,
        caster: Caster,
        spell: Spell,
        context: CastContext,
        report: CastReport
    ) -> bool:
        """
        Spend one slot for a fizzled leveled spell.

        Returns:
            True if a slot was spent; False if none applied or none remained
        """
        if spell.level <= 0 or not context.consume_slot:
            return False

        rule = slot_rule_for(spell)
        pool_id = rule.pool_id(spell.level)
        if pool_id is None:
            return False

        remaining = await self.store.get_slots(caster, pool_id)
        if remaining < 1:
            logger.debug(f"{caster.name} has no '{pool_id}' slots left to lose")
            return False

        await self.store.update(caster, ActorUpdate(slots={pool_id: remaining - 1}))
        report.add(f"[italic]{rule.consumed_note}[/italic]")
        self._emit(EventType.SPELL_SLOT_CONSUMED, caster, spell, pool=pool_id, remaining=remaining - 1)
        return True

    async def _gain_exhaustion(
        self,
        caster: Caster,
        amount: int,
        reason: str,
        report: CastReport
    ) -> bool:
        """
        Add exhaustion, refusing any increase past the safe ceiling.

        Returns:
            True if the exhaustion was applied
        """
        current = await self.store.get_exhaustion(caster)
        new_level = current + amount
        if new_level > self.config.max_safe_exhaustion:
            logger.warning(
                f"Refused {reason} exhaustion for {caster.name}: {current} + {amount} "
                f"would exceed {self.config.max_safe_exhaustion}"
            )
            self.narration.warn(caster, f"{reason} exhaustion not applied: it would be fatal.")
            report.add(f"[dim]{reason} exhaustion was not applied.[/dim]")
            return False

        await self.store.update(caster, ActorUpdate(exhaustion=new_level))
        self._emit(EventType.EXHAUSTION_GAINED, caster, None, reason=reason,
                   amount=amount, exhaustion=new_level)
        return True

    def _emit(self, event_type: EventType, caster: Caster, spell: Optional[Spell], **data) -> None:
        if not self.event_bus:
            return
        payload = {"caster": caster.name}
        if spell is not None:
            payload["spell"] = spell.name
        payload.update(data)
        self.event_bus.emit(Event(type=event_type, data=payload))
