# ABOUTME: Tests for the in-memory and JSON-file actor stores
# ABOUTME: Covers reads, all-or-nothing updates, and persistence across reopen

import json

import pytest

from weave_engine.core.caster import CasterItem
from weave_engine.host.base import ActorUpdate
from weave_engine.host.json_store import JsonActorStore
from weave_engine.host.memory_store import InMemoryActorStore
from weave_engine.systems.slot_pools import standard_pool_id

from conftest import make_caster


LEVEL_1 = standard_pool_id(1)
LEVEL_3 = standard_pool_id(3)


class TestInMemoryActorStore:

    def setup_method(self):
        self.caster = make_caster(
            exhaustion=1,
            flags={"weave.spell_success_bonus": 3},
            items=[CasterItem("Wand of Sparks", equipped=True, properties=frozenset({"focus"}))]
        )
        self.store = InMemoryActorStore([self.caster])

    @pytest.mark.asyncio
    async def test_reads(self):
        assert await self.store.get_exhaustion(self.caster) == 1
        assert await self.store.get_flag(self.caster, "weave.spell_success_bonus") == 3
        assert await self.store.get_flag(self.caster, "missing", 0) == 0
        assert await self.store.get_slots(self.caster, LEVEL_3) == 2
        assert [item.name for item in await self.store.get_items(self.caster)] == ["Wand of Sparks"]

    @pytest.mark.asyncio
    async def test_missing_pool_reads_zero(self):
        assert await self.store.get_slots(self.caster, standard_pool_id(9)) == 0

    @pytest.mark.asyncio
    async def test_update_applies_all_fields(self):
        await self.store.update(self.caster, ActorUpdate(exhaustion=2, slots={LEVEL_3: 1, LEVEL_1: 0}))

        assert self.caster.exhaustion == 2
        assert self.caster.get_slot_pool(LEVEL_3).current == 1
        assert self.caster.get_slot_pool(LEVEL_1).current == 0

    @pytest.mark.asyncio
    async def test_invalid_slot_value_changes_nothing(self):
        with pytest.raises(ValueError):
            await self.store.update(self.caster, ActorUpdate(exhaustion=3, slots={LEVEL_3: -1}))

        assert self.caster.exhaustion == 1
        assert self.caster.get_slot_pool(LEVEL_3).current == 2

    @pytest.mark.asyncio
    async def test_unknown_pool_changes_nothing(self):
        with pytest.raises(KeyError):
            await self.store.update(self.caster, ActorUpdate(exhaustion=3, slots={"pact_slots": 0}))

        assert self.caster.exhaustion == 1

    @pytest.mark.asyncio
    async def test_exhaustion_out_of_range(self):
        with pytest.raises(ValueError):
            await self.store.update(self.caster, ActorUpdate(exhaustion=7))

    @pytest.mark.asyncio
    async def test_unknown_caster(self):
        stranger = make_caster()
        stranger.id = "stranger"

        with pytest.raises(KeyError):
            await self.store.get_exhaustion(stranger)

    def test_get_by_id(self):
        assert self.store.get("elara") is self.caster
        with pytest.raises(KeyError):
            self.store.get("nobody")


class TestJsonActorStore:

    def write_store(self, path, casters):
        path.write_text(json.dumps({"version": "1.0.0", "casters": casters}), encoding="utf-8")

    def test_load(self, tmp_path):
        path = tmp_path / "casters.json"
        self.write_store(path, [make_caster(exhaustion=2).to_dict()])

        store = JsonActorStore(path)

        caster = store.get("elara")
        assert caster.exhaustion == 2
        assert caster.get_slot_pool(LEVEL_3).current == 2

    @pytest.mark.asyncio
    async def test_update_persists(self, tmp_path):
        path = tmp_path / "casters.json"
        self.write_store(path, [make_caster().to_dict()])
        store = JsonActorStore(path)
        caster = store.get("elara")

        await store.update(caster, ActorUpdate(exhaustion=1, slots={LEVEL_3: 1}))

        reopened = JsonActorStore(path).get("elara")
        assert reopened.exhaustion == 1
        assert reopened.get_slot_pool(LEVEL_3).current == 1

    @pytest.mark.asyncio
    async def test_rejected_update_not_written(self, tmp_path):
        path = tmp_path / "casters.json"
        self.write_store(path, [make_caster().to_dict()])
        store = JsonActorStore(path)
        before = path.read_text(encoding="utf-8")

        with pytest.raises(ValueError):
            await store.update(store.get("elara"), ActorUpdate(exhaustion=9))

        assert path.read_text(encoding="utf-8") == before

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonActorStore(tmp_path / "nope.json")

    def test_corrupted_file(self, tmp_path):
        path = tmp_path / "casters.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Corrupted"):
            JsonActorStore(path)

    def test_missing_casters_list(self, tmp_path):
        path = tmp_path / "casters.json"
        path.write_text(json.dumps({"version": "1.0.0"}), encoding="utf-8")

        with pytest.raises(ValueError, match="casters"):
            JsonActorStore(path)

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "casters.json"
        self.write_store(path, [{"name": "No Id"}])

        with pytest.raises(ValueError, match="Invalid caster record"):
            JsonActorStore(path)
