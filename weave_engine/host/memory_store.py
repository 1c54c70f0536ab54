# ABOUTME: In-memory actor store holding Caster records
# ABOUTME: Applies validated all-or-nothing updates to exhaustion and spell slot pools

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from weave_engine.core.caster import Caster, CasterItem, MAX_EXHAUSTION
from weave_engine.host.base import ActorStore, ActorUpdate


logger = logging.getLogger(__name__)


class InMemoryActorStore(ActorStore):
    """
    ActorStore backed by Caster objects kept in a dictionary.

    Updates are validated in full before any field changes, so a rejected
    update leaves the record untouched.
    """

    def __init__(self, casters: Optional[Iterable[Caster]] = None):
        """
        Initialize the store.

        Args:
            casters: Initial caster records
        """
        self.casters: Dict[str, Caster] = {}
        self._lock = asyncio.Lock()
        for caster in casters or []:
            self.add(caster)

    def add(self, caster: Caster) -> None:
        """Register a caster record, replacing any with the same id."""
        self.casters[caster.id] = caster

    def get(self, caster_id: str) -> Caster:
        """
        Look up a stored caster by id.

        Raises:
            KeyError: If no caster has that id
        """
        if caster_id not in self.casters:
            raise KeyError(f"Unknown caster: {caster_id}")
        return self.casters[caster_id]

    def _record(self, caster: Caster) -> Caster:
        return self.get(caster.id)

    async def get_flag(self, caster: Caster, key: str, default: Any = None) -> Any:
        return self._record(caster).flags.get(key, default)

    async def get_exhaustion(self, caster: Caster) -> int:
        return self._record(caster).exhaustion

    async def get_slots(self, caster: Caster, pool_id: str) -> int:
        pool = self._record(caster).get_slot_pool(pool_id)
        return pool.current if pool else 0

    async def get_items(self, caster: Caster) -> List[CasterItem]:
        return list(self._record(caster).items)

    async def update(self, caster: Caster, update: ActorUpdate) -> None:
        async with self._lock:
            record = self._record(caster)
            self._validate(record, update)

            if update.exhaustion is not None:
                record.exhaustion = update.exhaustion
            for pool_id, value in update.slots.items():
                record.slot_pools[pool_id].set_current(value)

            logger.debug(f"Updated {record.name}: {update}")
            await self._after_update(record)

    def _validate(self, record: Caster, update: ActorUpdate) -> None:
        if update.exhaustion is not None and not 0 <= update.exhaustion <= MAX_EXHAUSTION:
            raise ValueError(
                f"Exhaustion must be between 0 and {MAX_EXHAUSTION}, got {update.exhaustion}"
            )
        for pool_id, value in update.slots.items():
            pool = record.get_slot_pool(pool_id)
            if pool is None:
                raise KeyError(f"{record.name} has no slot pool '{pool_id}'")
            pool.check(value)

    async def _after_update(self, record: Caster) -> None:
        """Hook for subclasses that persist records after a change."""
        pass
