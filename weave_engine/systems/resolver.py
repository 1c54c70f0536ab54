# ABOUTME: Entry point that decides whether a spell cast goes ahead
# ABOUTME: Runs bonus aggregation, threshold lookup, Grit, and the outcome engine in order

import logging
from dataclasses import dataclass, field
from typing import Optional

from rich.markup import escape

from weave_engine.core.caster import Caster
from weave_engine.core.dice import DiceRoller
from weave_engine.core.spell import CastContext, CastSource, Spell
from weave_engine.host.base import ActorStore, NarrationSink, PromptProvider
from weave_engine.rules.config import WeaveConfig
from weave_engine.systems.attempt import CastAttempt
from weave_engine.systems.bonuses import BonusAggregator
from weave_engine.systems.cast_report import CastReport
from weave_engine.systems.grit import GritNegotiator
from weave_engine.systems.outcome import CastState, OutcomeEngine
from weave_engine.systems.threshold import ThresholdResolver, UnknownSpellLevelError
from weave_engine.utils.events import Event, EventBus, EventType
from weave_engine.utils.logging_config import get_logging_config


logger = logging.getLogger(__name__)


@dataclass
class CastResult:
    """
    What a resolution run decided.

    Attributes:
        allowed: Whether the calling workflow should let the spell take effect
        state: Terminal state of the attempt
        attempt: The attempt's working state (None when the check never ran)
        report: Narrative record shown to the table
    """
    allowed: bool
    state: CastState
    attempt: Optional[CastAttempt] = None
    report: CastReport = field(default_factory=CastReport)


class SpellSuccessResolver:
    """
    Resolves spell success checks for cast attempts.

    Holds no per-attempt state, so one resolver can serve many casters.
    Failures raised by the store, prompts or dice propagate to the caller.
    """

    def __init__(
        self,
        config: WeaveConfig,
        store: ActorStore,
        prompts: PromptProvider,
        narration: NarrationSink,
        dice_roller: Optional[DiceRoller] = None,
        event_bus: Optional[EventBus] = None
    ):
        self.config = config
        self.store = store
        self.narration = narration
        self.event_bus = event_bus
        self.dice_roller = dice_roller or DiceRoller()

        self.bonuses = BonusAggregator(config, store)
        self.thresholds = ThresholdResolver(config)
        self.grit = GritNegotiator(config, prompts, narration, event_bus)
        self.engine = OutcomeEngine(config, store, self.dice_roller, prompts, narration, event_bus)

    async def resolve(
        self,
        caster: Caster,
        spell: Spell,
        context: Optional[CastContext] = None
    ) -> bool:
        """
        Decide whether a cast goes ahead.

        Returns:
            True to let the spell take effect, False if it fizzled
        """
        result = await self.resolve_cast(caster, spell, context)
        return result.allowed

    async def resolve_cast(
        self,
        caster: Caster,
        spell: Spell,
        context: Optional[CastContext] = None
    ) -> CastResult:
        """Run a full resolution and return its details."""
        context = context or CastContext()

        if not caster.player_owned and not self.config.gate_non_player_casters:
            logger.debug(f"{caster.name} is not player-owned; skipping spell success check")
            self._emit(EventType.SPELL_CHECK_SKIPPED, caster, spell)
            return CastResult(allowed=True, state=CastState.NOT_GATED)

        if self._bypasses(context):
            return self._bypass(caster, spell, context)

        bonus = await self.bonuses.aggregate(caster)

        try:
            threshold = self.thresholds.threshold_for(spell.level)
        except UnknownSpellLevelError as e:
            logger.warning(f"{e} ({spell.name}). Allowing cast.")
            return CastResult(allowed=True, state=CastState.UNSUPPORTED_LEVEL)

        attempt = CastAttempt(
            caster_id=caster.id,
            spell_name=spell.name,
            spell_level=spell.level,
            base_bonus=bonus.total,
            breakdown=list(bonus.breakdown),
            threshold=threshold,
            exhaustion_at_start=await self.store.get_exhaustion(caster)
        )

        await self.grit.negotiate(caster, spell, attempt)

        report = CastReport()
        state = await self.engine.run(caster, spell, context, attempt, report)

        self.narration.narrate(caster, report.render(), report.last_roll)
        result = CastResult(allowed=state.allows_cast, state=state, attempt=attempt, report=report)
        self._finish(caster, spell, result)
        return result

    def _bypasses(self, context: CastContext) -> bool:
        if context.bypasses_check:
            return True
        return self.config.bypass_consumable_casts and context.source == CastSource.CONSUMABLE

    def _bypass(self, caster: Caster, spell: Spell, context: CastContext) -> CastResult:
        """Allow a cast whose success was settled elsewhere, with no roll and no cost."""
        assumed = not context.bypasses_check
        source = context.source_item or spell.name
        if assumed:
            logger.info(f"Consumable spell item {source} used. Assuming Runestone.")
            message = (
                f"{escape(caster.name)} casts {escape(spell.name)} from a Runestone (assumed). "
                "Spell is automatically successful."
            )
        else:
            logger.info(f"Spell {spell.name} flagged as Runestone cast. Bypassing success check.")
            message = (
                f"{escape(caster.name)} casts {escape(spell.name)} from a Runestone. "
                "Spell is automatically successful."
            )

        report = CastReport()
        report.add(message)
        self.narration.narrate(caster, message)
        self._emit(EventType.SPELL_CHECK_BYPASSED, caster, spell, assumed=assumed)
        return CastResult(allowed=True, state=CastState.BYPASSED, report=report)

    def _finish(self, caster: Caster, spell: Spell, result: CastResult) -> None:
        attempt = result.attempt
        details = ""
        if attempt:
            details = (
                f"bonus {attempt.total_bonus}, target {attempt.threshold}, "
                f"grit {attempt.grit_used}, desperation {attempt.desperation_used}"
            )

        logging_config = get_logging_config()
        if logging_config:
            logging_config.log_cast_check(caster.name, spell.name, result.state.value, details)

        self._emit(
            EventType.SPELL_CHECK_RESOLVED,
            caster,
            spell,
            state=result.state.value,
            allowed=result.allowed
        )

    def _emit(self, event_type: EventType, caster: Caster, spell: Spell, **data) -> None:
        if self.event_bus:
            self.event_bus.emit(Event(
                type=event_type,
                data={"caster": caster.name, "spell": spell.name, **data}
            ))
