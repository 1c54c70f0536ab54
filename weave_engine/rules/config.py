# ABOUTME: Immutable house-rule configuration for spell success checks
# ABOUTME: Holds level thresholds, focus and feat bonuses, Grit tiers, and exhaustion limits

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from weave_engine.core.caster import MAX_EXHAUSTION, CasterItem


SPELL_LEVELS = range(0, 10)


@dataclass(frozen=True)
class FocusRule:
    """
    Classifies an equipped spellcasting focus into a bonus tier.

    An item's declared focus type is checked against item_types. Only an
    item whose type no rule claims falls back to name_keywords, matched
    case-insensitively against its name.
    """
    label: str
    bonus: int
    item_types: Tuple[str, ...] = ()
    name_keywords: Tuple[str, ...] = ()

    def matches_type(self, item: CasterItem) -> bool:
        focus_type = (item.focus_type or "").lower()
        return bool(focus_type) and focus_type in self.item_types

    def matches_name(self, item: CasterItem) -> bool:
        name = item.name.lower()
        return any(keyword in name for keyword in self.name_keywords)


def classify_focus(item: CasterItem, rules: Tuple[FocusRule, ...]) -> Optional[FocusRule]:
    """
    Pick the focus rule for one item.

    Args:
        item: An equipped focus
        rules: Focus rules to classify against

    Returns:
        The best rule matching the item's declared type, else the best rule
        matching its name, or None if neither matches
    """
    candidates = [rule for rule in rules if rule.matches_type(item)]
    if not candidates:
        candidates = [rule for rule in rules if rule.matches_name(item)]
    if not candidates:
        return None
    return max(candidates, key=lambda rule: rule.bonus)


@dataclass(frozen=True)
class GritTier:
    """A Grit option: a flat roll bonus bought with exhaustion."""
    bonus: int
    exhaustion: int

    @property
    def label(self) -> str:
        return f"+{self.bonus} ({self.exhaustion} Exhaustion)"


DEFAULT_THRESHOLDS = {
    0: 5,   # Cantrip (95% success)
    1: 10,
    2: 20,
    3: 30,
    4: 40,
    5: 50,
    6: 60,
    7: 70,
    8: 80,
    9: 90,  # 10% success
}

DEFAULT_FOCUS_RULES = (
    FocusRule(label="Wand", bonus=3, item_types=("wand",), name_keywords=("wand",)),
    FocusRule(label="Orb", bonus=5, item_types=("orb",), name_keywords=("orb",)),
    FocusRule(label="Staff", bonus=7, item_types=("staff",), name_keywords=("staff",)),
)

DEFAULT_GRIT_TIERS = (
    GritTier(bonus=10, exhaustion=1),
    GritTier(bonus=20, exhaustion=2),
)


@dataclass(frozen=True)
class WeaveConfig:
    """
    Read-only rules for the spell success check.

    Attributes:
        thresholds: Spell level -> d100 target (roll + bonus must meet or exceed)
        focus_rules: Ordered focus classification rules; the best match applies
        feat_name: Feat that grants a flat bonus (matched case-insensitively)
        feat_bonus: Bonus granted by that feat
        bonus_flag: Caster flag key holding a persistent signed bonus
        grit_tiers: Grit options offered before the roll
        max_safe_exhaustion: Highest exhaustion this system may leave a caster at
        desperation_exhaustion_cost: Exhaustion paid for a Desperation reroll
        gate_non_player_casters: Whether NPC casters are subject to the check
        bypass_consumable_casts: Treat spells cast from consumables as runestones

    Raises:
        ValueError: On construction if the rules are inconsistent
    """
    thresholds: Mapping[int, int] = field(default_factory=lambda: dict(DEFAULT_THRESHOLDS))
    focus_rules: Tuple[FocusRule, ...] = DEFAULT_FOCUS_RULES
    feat_name: str = "Wellspring of Power"
    feat_bonus: int = 5
    bonus_flag: str = "weave.spell_success_bonus"
    grit_tiers: Tuple[GritTier, ...] = DEFAULT_GRIT_TIERS
    max_safe_exhaustion: int = 5
    desperation_exhaustion_cost: int = 1
    gate_non_player_casters: bool = False
    bypass_consumable_casts: bool = True

    def __post_init__(self) -> None:
        thresholds = {int(level): int(value) for level, value in self.thresholds.items()}
        missing = [level for level in SPELL_LEVELS if level not in thresholds]
        if missing:
            raise ValueError(f"No threshold configured for spell levels {missing}")

        previous = 0
        for level in sorted(thresholds):
            value = thresholds[level]
            if not 1 <= value <= 100:
                raise ValueError(f"Threshold for level {level} must be 1-100, got {value}")
            if value < previous:
                raise ValueError(f"Threshold for level {level} is lower than the level below it")
            previous = value

        for rule in self.focus_rules:
            if rule.bonus <= 0:
                raise ValueError(f"Focus rule '{rule.label}' must grant a positive bonus")
        for tier in self.grit_tiers:
            if tier.exhaustion <= 0 or tier.bonus <= 0:
                raise ValueError("Grit tiers need a positive bonus and exhaustion cost")
        if self.desperation_exhaustion_cost <= 0:
            raise ValueError("Desperation must cost at least 1 exhaustion")
        if not 0 <= self.max_safe_exhaustion < MAX_EXHAUSTION:
            raise ValueError(
                f"max_safe_exhaustion must be between 0 and {MAX_EXHAUSTION - 1}, "
                f"got {self.max_safe_exhaustion}"
            )

        object.__setattr__(self, "thresholds", MappingProxyType(thresholds))
        object.__setattr__(self, "focus_rules", tuple(self.focus_rules))
        object.__setattr__(self, "grit_tiers", tuple(self.grit_tiers))

    def threshold(self, level: int) -> Optional[int]:
        """Configured target for a level, or None if there is none."""
        return self.thresholds.get(level)

    @classmethod
    def default(cls) -> "WeaveConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeaveConfig":
        """
        Build a configuration from JSON-shaped data.

        Keys that are absent fall back to the default house rules.
        """
        kwargs: Dict[str, Any] = {}
        if "thresholds" in data:
            kwargs["thresholds"] = {int(k): int(v) for k, v in data["thresholds"].items()}
        if "focus_rules" in data:
            kwargs["focus_rules"] = tuple(
                FocusRule(
                    label=rule["label"],
                    bonus=int(rule["bonus"]),
                    item_types=tuple(t.lower() for t in rule.get("item_types", [])),
                    name_keywords=tuple(k.lower() for k in rule.get("name_keywords", []))
                )
                for rule in data["focus_rules"]
            )
        if "grit_tiers" in data:
            kwargs["grit_tiers"] = tuple(
                GritTier(bonus=int(t["bonus"]), exhaustion=int(t["exhaustion"]))
                for t in data["grit_tiers"]
            )
        feat = data.get("feat", {})
        if "name" in feat:
            kwargs["feat_name"] = feat["name"]
        if "bonus" in feat:
            kwargs["feat_bonus"] = int(feat["bonus"])
        for key in (
            "bonus_flag",
            "max_safe_exhaustion",
            "desperation_exhaustion_cost",
            "gate_non_player_casters",
            "bypass_consumable_casts",
        ):
            if key in data:
                kwargs[key] = data[key]
        return cls(**kwargs)
