# ABOUTME: Unit tests for WeaveConfig and the JSON rules loader
# ABOUTME: Tests default thresholds, validation of inconsistent rules, and file loading

import json

import pytest

from weave_engine.core.caster import CasterItem
from weave_engine.rules.config import DEFAULT_FOCUS_RULES, FocusRule, GritTier, WeaveConfig, classify_focus
from weave_engine.rules.loader import RulesLoader


class TestDefaultRules:
    """Test the built-in house rules"""

    def test_every_level_has_a_threshold(self):
        config = WeaveConfig.default()
        for level in range(10):
            assert config.threshold(level) is not None

    def test_thresholds_non_decreasing(self):
        config = WeaveConfig.default()
        values = [config.threshold(level) for level in range(10)]
        assert values == sorted(values)

    def test_known_thresholds(self):
        config = WeaveConfig.default()
        assert config.threshold(0) == 5
        assert config.threshold(5) == 50
        assert config.threshold(9) == 90

    def test_unknown_level_is_none(self):
        assert WeaveConfig.default().threshold(10) is None

    def test_thresholds_are_read_only(self):
        config = WeaveConfig.default()
        with pytest.raises(TypeError):
            config.thresholds[3] = 1

    def test_config_is_frozen(self):
        config = WeaveConfig.default()
        with pytest.raises(AttributeError):
            config.feat_bonus = 10

    def test_grit_tier_label(self):
        assert GritTier(bonus=10, exhaustion=1).label == "+10 (1 Exhaustion)"


class TestValidation:
    """Test that inconsistent rules are refused"""

    def test_missing_level_rejected(self):
        thresholds = {level: level * 10 + 5 for level in range(9)}
        with pytest.raises(ValueError, match="spell levels"):
            WeaveConfig(thresholds=thresholds)

    def test_decreasing_threshold_rejected(self):
        thresholds = {level: 10 * level + 5 for level in range(10)}
        thresholds[4] = 1
        with pytest.raises(ValueError):
            WeaveConfig(thresholds=thresholds)

    def test_threshold_out_of_range_rejected(self):
        thresholds = {level: 10 * level + 5 for level in range(10)}
        thresholds[9] = 101
        with pytest.raises(ValueError):
            WeaveConfig(thresholds=thresholds)

    def test_non_positive_focus_bonus_rejected(self):
        with pytest.raises(ValueError):
            WeaveConfig(focus_rules=(FocusRule(label="Rod", bonus=0, name_keywords=("rod",)),))

    def test_free_grit_rejected(self):
        with pytest.raises(ValueError):
            WeaveConfig(grit_tiers=(GritTier(bonus=10, exhaustion=0),))

    @pytest.mark.parametrize("ceiling", [-1, 6, 7])
    def test_fatal_or_negative_exhaustion_ceiling_rejected(self, ceiling):
        with pytest.raises(ValueError, match="max_safe_exhaustion"):
            WeaveConfig(max_safe_exhaustion=ceiling)

    @pytest.mark.parametrize("ceiling", [0, 3, 5])
    def test_exhaustion_ceiling_accepted(self, ceiling):
        assert WeaveConfig(max_safe_exhaustion=ceiling).max_safe_exhaustion == ceiling


class TestFocusRule:
    """Test focus classification"""

    def setup_method(self):
        self.rule = FocusRule(label="Staff", bonus=7, item_types=("staff",), name_keywords=("staff",))

    def test_matches_declared_type(self):
        item = CasterItem(name="Gnarled Branch", focus_type="staff")
        assert self.rule.matches_type(item)

    def test_matches_name_case_insensitively(self):
        item = CasterItem(name="Quarterstaff of Embers")
        assert self.rule.matches_name(item)
        assert not self.rule.matches_type(item)

    def test_no_match(self):
        item = CasterItem(name="Crystal", focus_type="crystal")
        assert not self.rule.matches_type(item)
        assert not self.rule.matches_name(item)

    def test_declared_type_wins_over_name(self):
        item = CasterItem(name="Staff-shaped Wand", focus_type="wand")
        assert classify_focus(item, DEFAULT_FOCUS_RULES).label == "Wand"

    def test_name_used_when_type_unclaimed(self):
        item = CasterItem(name="Crystal Orb", focus_type="crystal")
        assert classify_focus(item, DEFAULT_FOCUS_RULES).label == "Orb"

    def test_unrecognised_item(self):
        assert classify_focus(CasterItem(name="Crystal"), DEFAULT_FOCUS_RULES) is None


class TestRulesLoader:
    """Test loading rules from JSON"""

    def test_packaged_rules_match_defaults(self):
        config = RulesLoader().load_config()
        default = WeaveConfig.default()
        assert dict(config.thresholds) == dict(default.thresholds)
        assert config.focus_rules == default.focus_rules
        assert config.grit_tiers == default.grit_tiers
        assert config.feat_name == "Wellspring of Power"
        assert config.feat_bonus == 5

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"feat": {"bonus": 8}, "gate_non_player_casters": True}))

        config = RulesLoader().load_config(path)

        assert config.feat_bonus == 8
        assert config.feat_name == "Wellspring of Power"
        assert config.gate_non_player_casters is True
        assert config.threshold(3) == 30

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RulesLoader().load_config(tmp_path / "nope.json")

    def test_corrupted_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Corrupted"):
            RulesLoader().load_config(path)

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError):
            RulesLoader().load_config(path)

    def test_incomplete_focus_rule(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"focus_rules": [{"bonus": 3}]}))
        with pytest.raises(ValueError, match="Invalid rules file"):
            RulesLoader().load_config(path)

    def test_inconsistent_thresholds(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"thresholds": {"0": 5, "1": 10}}))
        with pytest.raises(ValueError):
            RulesLoader().load_config(path)
