# ABOUTME: Narrative record of a cast attempt, built up message by message
# ABOUTME: Keeps every intermediate line and roll so a rerolled attempt shows both rolls

from dataclasses import dataclass, field
from typing import List, Optional

from weave_engine.core.dice import DiceRoll


@dataclass
class CastReport:
    """
    Accumulating narration for one attempt.

    Lines use Rich console markup. Nothing is ever removed, so the final
    record contains the detail of every roll made.
    """
    lines: List[str] = field(default_factory=list)
    rolls: List[DiceRoll] = field(default_factory=list)

    def add(self, line: str) -> None:
        """
        Append one narrative line.

        Args:
            line: Rich markup text, already escaped where it holds names
        """
        self.lines.append(line)

    def add_roll(self, roll: DiceRoll) -> None:
        self.rolls.append(roll)

    @property
    def last_roll(self) -> Optional[DiceRoll]:
        return self.rolls[-1] if self.rolls else None

    def render(self) -> str:
        return "\n".join(self.lines)

    def __str__(self) -> str:
        return self.render()
