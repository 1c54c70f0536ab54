# ABOUTME: Unit tests for ResourcePool
# ABOUTME: Tests slot counts, overwriting, and range validation

import pytest
from weave_engine.systems.resources import ResourcePool


class TestResourcePool:

    def test_pool_creation(self):
        pool = ResourcePool(name="spell_slots_level_3", current=2, maximum=3)
        assert pool.current == 2
        assert pool.recovery_type == "long_rest"

    def test_string_representation(self):
        pool = ResourcePool(name="pact_slots", current=1, maximum=2, recovery_type="short_rest")
        assert str(pool) == "pact_slots 1/2"

    @pytest.mark.parametrize("current,maximum", [(5, 4), (-1, 4), (0, -1)])
    def test_out_of_range_rejected(self, current, maximum):
        with pytest.raises(ValueError):
            ResourcePool(name="spell_slots_level_1", current=current, maximum=maximum)

    def test_set_current(self):
        pool = ResourcePool(name="spell_slots_level_2", current=3, maximum=3)
        pool.set_current(0)
        assert pool.current == 0

    def test_set_current_out_of_range_leaves_count(self):
        pool = ResourcePool(name="spell_slots_level_2", current=3, maximum=3)
        with pytest.raises(ValueError):
            pool.set_current(4)
        assert pool.current == 3
