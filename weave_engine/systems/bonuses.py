# ABOUTME: Collects the bonuses that apply to a caster's spell success roll
# ABOUTME: Sums the persistent flag bonus, best equipped focus, and the configured feat

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from weave_engine.core.caster import Caster, CasterItem
from weave_engine.host.base import ActorStore
from weave_engine.rules.config import FocusRule, WeaveConfig, classify_focus
from weave_engine.systems.attempt import BonusContribution


logger = logging.getLogger(__name__)


@dataclass
class BonusTotal:
    """Signed total and its labelled breakdown."""
    total: int = 0
    breakdown: List[BonusContribution] = field(default_factory=list)

    def add(self, label: str, value: int) -> None:
        if value == 0:
            return
        self.total += value
        self.breakdown.append(BonusContribution(label, value))


def coerce_bonus(value: Any) -> int:
    """
    Read a stored bonus as an int.

    Numbers and numeric strings are accepted; anything else counts as 0.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            try:
                return coerce_bonus(float(value))
            except ValueError:
                return 0
    return 0


class BonusAggregator:
    """
    Works out the spell success bonus for a caster.

    Sources, each optional:
    - Persistent bonus stored on the caster under config.bonus_flag
    - The single best equipped spellcasting focus (foci never stack)
    - The configured feat, matched by exact case-insensitive name
    """

    def __init__(self, config: WeaveConfig, store: ActorStore):
        self.config = config
        self.store = store

    async def aggregate(self, caster: Caster) -> BonusTotal:
        """
        Read the caster's bonus sources from the store and sum them.

        Args:
            caster: Caster about to roll

        Returns:
            BonusTotal with one breakdown entry per non-zero source, in the
            order stored bonus, focus, feat
        """
        result = BonusTotal()

        stored = await self.store.get_flag(caster, self.config.bonus_flag, 0)
        result.add("Base Spell Success Bonus", coerce_bonus(stored))

        items = await self.store.get_items(caster)

        focus = self.best_focus(items)
        if focus:
            result.add(f"Spellcasting Focus ({focus.label})", focus.bonus)

        if self.has_feat(items):
            result.add(self.config.feat_name, self.config.feat_bonus)

        logger.debug(f"Spell success bonus for {caster.name}: {result.total}")
        return result

    def best_focus(self, items: List[CasterItem]) -> Optional[FocusRule]:
        """
        Classify each equipped focus, then keep the highest bonus.

        Args:
            items: The caster's items

        Returns:
            The winning focus rule, or None if no equipped focus is recognised
        """
        best: Optional[FocusRule] = None
        for item in items:
            if not (item.equipped and item.is_focus):
                continue
            rule = classify_focus(item, self.config.focus_rules)
            if rule and (best is None or rule.bonus > best.bonus):
                best = rule
        return best

    def has_feat(self, items: List[CasterItem]) -> bool:
        feat_name = self.config.feat_name.lower()
        return any(item.is_feat and item.name.lower() == feat_name for item in items)
