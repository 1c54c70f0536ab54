# ABOUTME: Spell slot pools held on a caster record
# ABOUTME: A bounded count of remaining slots that only accepts in-range values

from dataclasses import dataclass


@dataclass
class ResourcePool:
    """
    Remaining uses of a limited resource, such as one level's spell slots.

    Examples:
    - Standard slots: name="spell_slots_level_3", current=2, maximum=3
    - Pact slots: name="pact_slots", current=1, maximum=2, recovery_type="short_rest"
    """
    name: str
    current: int
    maximum: int
    recovery_type: str = "long_rest"

    def __post_init__(self) -> None:
        if self.maximum < 0:
            raise ValueError(f"Pool '{self.name}' maximum cannot be negative")
        self.check(self.current)

    def check(self, value: int) -> None:
        """
        Raises:
            ValueError: If value is outside 0..maximum
        """
        if not 0 <= value <= self.maximum:
            raise ValueError(
                f"Pool '{self.name}' value must be between 0 and {self.maximum}, got {value}"
            )

    def set_current(self, value: int) -> None:
        """Overwrite the remaining count, as a host update does."""
        self.check(value)
        self.current = value

    def __str__(self) -> str:
        return f"{self.name} {self.current}/{self.maximum}"
