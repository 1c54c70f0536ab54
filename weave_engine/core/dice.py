# ABOUTME: Percentile dice for spell success checks
# ABOUTME: Draws seedable d100 rolls and reports each one to the debug log

import random
from dataclasses import dataclass
from typing import Optional, Tuple


PERCENTILE_SIDES = 100


@dataclass(frozen=True)
class DiceRoll:
    """
    Faces drawn for one roll.

    Attributes:
        rolls: Face shown by each die, in draw order
        sides: Number of sides on each die
    """
    rolls: Tuple[int, ...]
    sides: int = PERCENTILE_SIDES

    @property
    def notation(self) -> str:
        return f"{len(self.rolls)}d{self.sides}"

    @property
    def total(self) -> int:
        return sum(self.rolls)

    def __str__(self) -> str:
        faces = ", ".join(str(face) for face in self.rolls)
        return f"{self.notation} [{faces}] = {self.total}"


class DiceRoller:
    """
    Source of random draws for the resolver.

    Pass a seed for reproducible runs. Subclasses can override _roll_die to
    script faces, which is how the tests pin outcomes.
    """

    def __init__(self, seed: Optional[int] = None):
        self.random = random.Random(seed)

    def roll(self, sides: int = PERCENTILE_SIDES, count: int = 1) -> DiceRoll:
        """
        Roll count dice of the given size.

        Raises:
            ValueError: If sides or count is below 1
        """
        if sides < 1 or count < 1:
            raise ValueError(f"Cannot roll {count}d{sides}")

        result = DiceRoll(tuple(self._roll_die(sides) for _ in range(count)), sides)

        from weave_engine.utils.logging_config import get_logging_config
        logging_config = get_logging_config()
        if logging_config:
            logging_config.log_dice_roll(result.notation, list(result.rolls), result.total)

        return result

    async def roll_percentile(self) -> DiceRoll:
        """
        Draw one uniformly distributed integer in [1, 100].

        A coroutine so a host backed by a remote dice service can stand in
        without changing the resolver.
        """
        return self.roll(PERCENTILE_SIDES)

    def _roll_die(self, sides: int) -> int:
        return self.random.randint(1, sides)


def format_signed(value: int) -> str:
    """
    Format a bonus with an explicit sign.

    Examples:
        >>> format_signed(5)
        '+5'
        >>> format_signed(-2)
        '-2'
        >>> format_signed(0)
        '0'
    """
    if value > 0:
        return f"+{value}"
    return str(value)
