# ABOUTME: Prompt provider that answers from a script instead of a human
# ABOUTME: Used by tests and the non-interactive CLI; records every prompt it was shown

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence

from weave_engine.host.base import PromptChoice, PromptProvider


@dataclass
class PromptRecord:
    """A prompt that was presented, kept for inspection."""
    kind: str  # "choose" or "confirm"
    title: str
    message: str
    choices: List[PromptChoice] = field(default_factory=list)
    answer: Any = None


class ScriptedPromptProvider(PromptProvider):
    """
    Answers prompts from queued responses.

    choose() takes the next queued choice key and returns the payload of the
    matching choice; an unknown key, None, or an empty queue is a dismissal.
    confirm() takes the next queued boolean; an empty queue uses the default.
    """

    def __init__(
        self,
        choices: Optional[Iterable[Optional[str]]] = None,
        confirms: Optional[Iterable[Optional[bool]]] = None
    ) -> None:
        self._choices = deque(choices or [])
        self._confirms = deque(confirms or [])
        self.history: List[PromptRecord] = []

    def queue_choice(self, key: Optional[str]) -> None:
        self._choices.append(key)

    def queue_confirm(self, answer: Optional[bool]) -> None:
        self._confirms.append(answer)

    async def choose(
        self,
        title: str,
        message: str,
        choices: Sequence[PromptChoice],
        default: Optional[str] = None
    ) -> Optional[Any]:
        key = self._choices.popleft() if self._choices else None
        payload = None
        for choice in choices:
            if choice.key == key:
                payload = choice.payload
                break

        self.history.append(PromptRecord("choose", title, message, list(choices), payload))
        return payload

    async def confirm(self, title: str, message: str, default: bool = False) -> bool:
        answer = self._confirms.popleft() if self._confirms else default
        answer = bool(answer) if answer is not None else False

        self.history.append(PromptRecord("confirm", title, message, answer=answer))
        return answer

    def prompts_of(self, kind: str) -> List[PromptRecord]:
        """Prompts of one kind, in the order they were shown."""
        return [record for record in self.history if record.kind == kind]
