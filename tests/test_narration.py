# ABOUTME: Tests for the recording and logging narration sinks
# ABOUTME: Checks message order, warning separation, and log output

import logging

from weave_engine.core.dice import DiceRoll
from weave_engine.host.narration import LoggingNarrationSink, RecordingNarrationSink

from conftest import make_caster


class TestRecordingNarrationSink:

    def test_keeps_order_and_separates_warnings(self):
        sink = RecordingNarrationSink()
        caster = make_caster()
        roll = DiceRoll((35,))

        sink.warn(caster, "Cannot use Grit: resulting exhaustion would be too high.")
        sink.narrate(caster, "Success! The spell manifests!", roll)

        assert [m.warning for m in sink.messages] == [True, False]
        assert sink.narrations[0].roll is roll
        assert sink.narrations[0].caster == "Elara"
        assert sink.warnings[0].message.startswith("Cannot use Grit")


class TestLoggingNarrationSink:

    def test_narrate_logs_info_with_roll(self, caplog):
        with caplog.at_level(logging.INFO, logger="weave_engine.host.narration"):
            LoggingNarrationSink().narrate(make_caster(), "Fizzled!", DiceRoll((9,)))

        assert "Elara: Fizzled! (1d100 [9] = 9)" in caplog.text

    def test_warn_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            LoggingNarrationSink().warn(make_caster(), "exhaustion not applied")

        assert caplog.records[-1].levelname == "WARNING"
