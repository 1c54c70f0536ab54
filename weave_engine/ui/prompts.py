# ABOUTME: Interactive terminal prompts for Grit and Desperation choices
# ABOUTME: Uses questionary's async prompts; cancelling or closing a prompt counts as declining

import logging
from typing import Any, Optional, Sequence

import questionary

from weave_engine.host.base import PromptChoice, PromptProvider


logger = logging.getLogger(__name__)


class QuestionaryPromptProvider(PromptProvider):
    """PromptProvider that asks the player in the terminal."""

    async def choose(
        self,
        title: str,
        message: str,
        choices: Sequence[PromptChoice],
        default: Optional[str] = None
    ) -> Optional[Any]:
        q_choices = [questionary.Choice(title=choice.label, value=choice.key) for choice in choices]
        default_choice = next((c for c in q_choices if c.value == default), None)

        try:
            result = await questionary.select(
                f"{title}\n{message}",
                choices=q_choices,
                default=default_choice,
                use_arrow_keys=True
            ).ask_async()
        except (EOFError, KeyboardInterrupt):
            logger.debug(f"Prompt '{title}' dismissed")
            return None

        for choice in choices:
            if choice.key == result:
                return choice.payload
        return None

    async def confirm(self, title: str, message: str, default: bool = False) -> bool:
        try:
            result = await questionary.confirm(
                f"{title}\n{message}",
                default=default
            ).ask_async()
        except (EOFError, KeyboardInterrupt):
            logger.debug(f"Prompt '{title}' dismissed")
            return False

        return bool(result)
