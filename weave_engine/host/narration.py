# ABOUTME: Narration sinks that keep or log cast results instead of drawing them
# ABOUTME: RecordingNarrationSink for tests and embedding hosts, LoggingNarrationSink for headless runs

import logging
from dataclasses import dataclass
from typing import List, Optional

from weave_engine.core.caster import Caster
from weave_engine.core.dice import DiceRoll
from weave_engine.host.base import NarrationSink


logger = logging.getLogger(__name__)


@dataclass
class NarratedMessage:
    caster: str
    message: str
    roll: Optional[DiceRoll] = None
    warning: bool = False


class RecordingNarrationSink(NarrationSink):
    """Keeps every narrated message in memory, in order."""

    def __init__(self) -> None:
        self.messages: List[NarratedMessage] = []

    def narrate(self, caster: Caster, message: str, roll: Optional[DiceRoll] = None) -> None:
        self.messages.append(NarratedMessage(caster.name, message, roll))

    def warn(self, caster: Caster, message: str) -> None:
        self.messages.append(NarratedMessage(caster.name, message, warning=True))

    @property
    def narrations(self) -> List[NarratedMessage]:
        return [m for m in self.messages if not m.warning]

    @property
    def warnings(self) -> List[NarratedMessage]:
        return [m for m in self.messages if m.warning]


class LoggingNarrationSink(NarrationSink):
    """Sends narration to the Python log."""

    def narrate(self, caster: Caster, message: str, roll: Optional[DiceRoll] = None) -> None:
        if roll is not None:
            logger.info(f"{caster.name}: {message} ({roll})")
        else:
            logger.info(f"{caster.name}: {message}")

    def warn(self, caster: Caster, message: str) -> None:
        logger.warning(f"{caster.name}: {message}")
