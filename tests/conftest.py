# ABOUTME: Shared fixtures for spell success check tests
# ABOUTME: Scripted dice, caster records, stores, prompts, and a resolver builder

from typing import Iterable, List, Optional

import pytest

from weave_engine.core.caster import Caster, CasterItem
from weave_engine.core.dice import DiceRoller
from weave_engine.core.spell import PreparationMode, Spell
from weave_engine.host.memory_store import InMemoryActorStore
from weave_engine.host.narration import RecordingNarrationSink
from weave_engine.host.scripted_prompts import ScriptedPromptProvider
from weave_engine.rules.config import WeaveConfig
from weave_engine.systems.resolver import SpellSuccessResolver
from weave_engine.systems.resources import ResourcePool
from weave_engine.systems.slot_pools import PACT_POOL_ID, standard_pool_id
from weave_engine.utils.events import EventBus


class FixedDiceRoller(DiceRoller):
    """DiceRoller that returns scripted die faces, in order."""

    def __init__(self, values: Iterable[int]):
        super().__init__(seed=0)
        self.values: List[int] = list(values)
        self.calls = 0

    def _roll_die(self, sides: int) -> int:
        self.calls += 1
        if not self.values:
            raise AssertionError("Dice rolled more times than scripted")
        return self.values.pop(0)


def make_caster(
    exhaustion: int = 0,
    slots: Optional[dict] = None,
    pact_slots: Optional[int] = None,
    items: Optional[List[CasterItem]] = None,
    flags: Optional[dict] = None,
    player_owned: bool = True
) -> Caster:
    """Build a caster with standard slot pools given as {level: count}."""
    caster = Caster(
        id="elara",
        name="Elara",
        player_owned=player_owned,
        exhaustion=exhaustion,
        flags=flags or {},
        items=items or []
    )
    for level, count in (slots if slots is not None else {1: 4, 2: 3, 3: 2}).items():
        caster.add_slot_pool(ResourcePool(standard_pool_id(level), count, max(count, 1)))
    if pact_slots is not None:
        caster.add_slot_pool(ResourcePool(PACT_POOL_ID, pact_slots, max(pact_slots, 2), "short_rest"))
    return caster


def make_spell(level: int = 3, mode: PreparationMode = PreparationMode.PREPARED) -> Spell:
    return Spell(id="fireball", name="Fireball", level=level, preparation_mode=mode)


@pytest.fixture
def config():
    return WeaveConfig.default()


@pytest.fixture
def caster():
    return make_caster()


@pytest.fixture
def store(caster):
    return InMemoryActorStore([caster])


@pytest.fixture
def narration():
    return RecordingNarrationSink()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def build_resolver(config, store, narration, event_bus):
    """Returns a function building a resolver with scripted dice and prompts."""

    def _build(rolls, grit=None, desperation=None, prompts=None):
        prompts = prompts or ScriptedPromptProvider(
            choices=[grit] if grit is not None else [],
            confirms=[desperation] if desperation is not None else []
        )
        resolver = SpellSuccessResolver(
            config=config,
            store=store,
            prompts=prompts,
            narration=narration,
            dice_roller=FixedDiceRoller(rolls),
            event_bus=event_bus
        )
        return resolver, prompts

    return _build
