# ABOUTME: Abstract host capabilities the spell resolver depends on
# ABOUTME: Defines actor storage, human prompts, and narration as async/sync boundaries

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from weave_engine.core.caster import Caster, CasterItem
from weave_engine.core.dice import DiceRoll


@dataclass
class ActorUpdate:
    """
    A set of changes applied to a caster record in one all-or-nothing call.

    Attributes:
        exhaustion: New exhaustion level, or None to leave it unchanged
        slots: Pool id -> new remaining count
    """
    exhaustion: Optional[int] = None
    slots: Dict[str, int] = field(default_factory=dict)


class ActorStore(ABC):
    """
    Access to caster records owned by the host platform.

    Reads return the current persisted value. Every update is awaited to
    completion before the next read of the same field. Failures are raised
    to the caller; nothing here retries.
    """

    @abstractmethod
    async def get_flag(self, caster: Caster, key: str, default: Any = None) -> Any:
        """Read a persistent flag; default when the flag is absent."""
        pass

    @abstractmethod
    async def get_exhaustion(self, caster: Caster) -> int:
        """Read the caster's current exhaustion level."""
        pass

    @abstractmethod
    async def get_slots(self, caster: Caster, pool_id: str) -> int:
        """Remaining slots in a pool; 0 when the caster has no such pool."""
        pass

    @abstractmethod
    async def get_items(self, caster: Caster) -> List[CasterItem]:
        """Every item the caster owns, feats included."""
        pass

    @abstractmethod
    async def update(self, caster: Caster, update: ActorUpdate) -> None:
        """
        Apply an update atomically.

        Raises:
            KeyError: If the caster or a pool is unknown to the store
            ValueError: If the update would break a record invariant
        """
        pass


@dataclass(frozen=True)
class PromptChoice:
    """One labelled option of a choice prompt and the payload it returns."""
    key: str
    label: str
    payload: Any = None


class PromptProvider(ABC):
    """
    Asks the human controlling a caster to decide something.

    Each call suspends the attempt until answered. Dismissing a prompt is a
    normal answer, never an error.
    """

    @abstractmethod
    async def choose(
        self,
        title: str,
        message: str,
        choices: Sequence[PromptChoice],
        default: Optional[str] = None
    ) -> Optional[Any]:
        """
        Present labelled choices.

        Returns:
            The chosen choice's payload, or None if dismissed
        """
        pass

    @abstractmethod
    async def confirm(self, title: str, message: str, default: bool = False) -> bool:
        """
        Present a yes/no question.

        Returns:
            The answer; False if dismissed
        """
        pass


class NarrationSink(ABC):
    """Displays cast results to the table. Calls are fire-and-forget."""

    @abstractmethod
    def narrate(self, caster: Caster, message: str, roll: Optional[DiceRoll] = None) -> None:
        """Show a formatted message, optionally with the roll behind it."""
        pass

    @abstractmethod
    def warn(self, caster: Caster, message: str) -> None:
        """Show a warning to the user controlling the caster."""
        pass
