"""
Unit tests for debug logging configuration.

Tests cover:
- LoggingConfig initialization
- Log file creation and rotation
- Console creation with dual output
- Event, dice, and cast-check logging
"""

import logging

import pytest

from weave_engine.utils.logging_config import (
    LoggingConfig,
    TeeFile,
    get_logging_config,
    init_logging,
    reset_logging,
)


@pytest.fixture
def debug_config(tmp_path):
    config = LoggingConfig(debug_enabled=True, log_dir=tmp_path / "logs")
    yield config
    config.close()


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_init_without_debug(self, tmp_path):
        config = LoggingConfig(debug_enabled=False, log_dir=tmp_path / "logs")

        assert config.debug_enabled is False
        assert config.log_file_path is None
        assert config.log_file is None
        assert not (tmp_path / "logs").exists()

    def test_log_file_creation(self, debug_config):
        path = debug_config.get_log_file_path()

        assert path is not None
        assert path.exists()
        assert path.name.startswith("weave_")
        assert path.name.endswith(".log")

    def test_log_rotation(self, tmp_path):
        log_dir = tmp_path / "logs"
        log_dir.mkdir()
        for i in range(15):
            (log_dir / f"weave_202501{i:02d}_120000.log").touch()

        config = LoggingConfig(debug_enabled=True, log_dir=log_dir)
        try:
            assert len(list(log_dir.glob("weave_*.log"))) == 10
        finally:
            config.close()

    def test_dice_roll_logged(self, debug_config):
        debug_config.log_dice_roll("1d100", [42], 42)

        content = debug_config.get_log_file_path().read_text(encoding="utf-8")
        assert "[DICE] 1d100 -> [42] = 42" in content

    def test_cast_check_logged(self, debug_config):
        debug_config.log_cast_check("Elara", "Fireball", "rolled_fail", "bonus 5, target 30")

        content = debug_config.get_log_file_path().read_text(encoding="utf-8")
        assert "[CHECK] Elara casting Fireball: rolled_fail (bonus 5, target 30)" in content

    def test_events_numbered(self, debug_config):
        debug_config.log_event("SPELL_FIZZLED", {"caster": "Elara"})
        debug_config.log_event("SPELL_SLOT_CONSUMED", {"pool": "spell_slots_level_3"})

        content = debug_config.get_log_file_path().read_text(encoding="utf-8")
        assert "[EVENT #001] SPELL_FIZZLED: {caster=Elara}" in content
        assert "[EVENT #002] SPELL_SLOT_CONSUMED" in content

    def test_logging_disabled_writes_nothing(self, caplog):
        config = LoggingConfig(debug_enabled=False)

        with caplog.at_level(logging.DEBUG):
            config.log_dice_roll("1d100", [5], 5)
            config.log_cast_check("Elara", "Shield", "bypassed")

        assert caplog.text == ""

    def test_close_detaches_handler(self, tmp_path):
        config = LoggingConfig(debug_enabled=True, log_dir=tmp_path)
        handler = config._file_handler

        config.close()

        assert handler not in logging.getLogger().handlers
        assert config.log_file is None

    def test_console_without_debug(self):
        config = LoggingConfig(debug_enabled=False)
        console = config.create_console()

        assert console is not None
        assert config.tee_console is None

    def test_console_with_debug_tees_output(self, debug_config):
        console = debug_config.create_console()

        assert isinstance(console.file, TeeFile)


class TestGlobalLogging:
    """Tests for the module-level logging configuration."""

    def teardown_method(self):
        reset_logging()

    def test_init_and_get(self, tmp_path):
        config = init_logging(debug_enabled=False, log_dir=tmp_path)
        assert get_logging_config() is config

    def test_reset(self, tmp_path):
        init_logging(debug_enabled=True, log_dir=tmp_path)
        reset_logging()
        assert get_logging_config() is None
