# ABOUTME: Looks up the d100 target for a spell level
# ABOUTME: Raises UnknownSpellLevelError rather than guessing when a level has no entry

from weave_engine.rules.config import WeaveConfig


class UnknownSpellLevelError(LookupError):
    """Raised when a spell level has no configured threshold."""

    def __init__(self, level: int):
        super().__init__(f"No spell success threshold for spell level {level}")
        self.level = level


class ThresholdResolver:
    """Maps spell level to the value roll + bonus must meet or exceed."""

    def __init__(self, config: WeaveConfig):
        self.config = config

    def threshold_for(self, level: int) -> int:
        """
        Get the target for a spell level.

        Raises:
            UnknownSpellLevelError: If the level has no configured threshold
        """
        threshold = self.config.threshold(level)
        if threshold is None:
            raise UnknownSpellLevelError(level)
        return threshold
