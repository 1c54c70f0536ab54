# ABOUTME: Factory for choosing the prompt provider from configuration
# ABOUTME: Picks interactive or scripted prompts from arguments or the WEAVE_PROMPTS environment variable

import os
from typing import Optional

from weave_engine.host.base import PromptProvider
from weave_engine.host.scripted_prompts import ScriptedPromptProvider
from weave_engine.systems.grit import NO_GRIT_KEY, tier_key


def create_prompt_provider(
    provider_name: Optional[str] = None,
    grit_tier: int = 0,
    desperation: bool = False
) -> PromptProvider:
    """
    Create the prompt provider for a run.

    Args:
        provider_name: "questionary" or "scripted"; None reads WEAVE_PROMPTS
        grit_tier: Scripted Grit answer (0 for none, 1 for the first tier, ...)
        desperation: Scripted Desperation answer

    Returns:
        PromptProvider instance

    Raises:
        ValueError: If the provider name is unknown

    Example:
        >>> provider = create_prompt_provider()  # From environment, default questionary
        >>> provider = create_prompt_provider("scripted", grit_tier=1)
    """
    if provider_name is None:
        provider_name = os.getenv("WEAVE_PROMPTS", "questionary")
    provider_name = provider_name.strip().lower()

    if provider_name == "questionary":
        from weave_engine.ui.prompts import QuestionaryPromptProvider
        return QuestionaryPromptProvider()

    if provider_name == "scripted":
        grit_key = tier_key(grit_tier - 1) if grit_tier > 0 else NO_GRIT_KEY
        return ScriptedPromptProvider(choices=[grit_key], confirms=[desperation])

    raise ValueError(f"Unknown prompt provider '{provider_name}'")
