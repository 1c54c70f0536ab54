# ABOUTME: Command-line entry point for resolving a single spell cast
# ABOUTME: Loads rules and casters, runs the success check with prompts, and reports the result

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from weave_engine.core.dice import DiceRoller
from weave_engine.core.spell import CastContext, CastSource, PreparationMode, Spell
from weave_engine.host.factory import create_prompt_provider
from weave_engine.host.json_store import JsonActorStore
from weave_engine.rules.config import WeaveConfig
from weave_engine.rules.loader import RulesLoader
from weave_engine.systems.resolver import CastResult, SpellSuccessResolver
from weave_engine.ui import rich_ui
from weave_engine.ui.rich_ui import (
    RichNarrationSink,
    create_caster_status_table,
    init_console,
    print_banner,
    print_error,
    print_status_message,
)
from weave_engine.utils.events import EventBus
from weave_engine.utils.logging_config import get_logging_config


EXIT_ALLOWED = 0
EXIT_ERROR = 1
EXIT_FIZZLED = 2


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Resolve a spell success check",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  weave-cast --caster elara --spell Fireball --level 3
  weave-cast --caster elara --spell "Hex" --level 1 --mode pact
  weave-cast --caster elara --spell Fireball --level 3 --prompts scripted --grit 1
  weave-cast --caster elara --spell Fireball --level 3 --runestone
        """
    )

    parser.add_argument("--caster", required=True, help="Id of the caster record")
    parser.add_argument("--spell", required=True, help="Name of the spell being cast")
    parser.add_argument("--level", required=True, type=int, help="Spell level (0-9)")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in PreparationMode],
        default=PreparationMode.PREPARED.value,
        help="Spell preparation mode (default: prepared)"
    )
    parser.add_argument(
        "--runestone",
        action="store_true",
        help="The cast comes from a Runestone and always succeeds"
    )
    parser.add_argument(
        "--from-consumable",
        metavar="ITEM",
        help="The cast comes from a consumable item"
    )
    parser.add_argument(
        "--no-slot",
        action="store_true",
        help="Do not spend a spell slot if the spell fizzles"
    )
    parser.add_argument(
        "--casters-file",
        type=Path,
        help="JSON file with caster records (default: WEAVE_CASTERS_FILE or casters.json)"
    )
    parser.add_argument(
        "--rules-file",
        type=Path,
        help="JSON rules file (default: WEAVE_RULES_FILE or packaged rules)"
    )
    parser.add_argument(
        "--prompts",
        choices=["questionary", "scripted"],
        help="Prompt provider (default: from WEAVE_PROMPTS env var)"
    )
    parser.add_argument(
        "--grit",
        type=int,
        choices=[0, 1, 2],
        default=0,
        help="Scripted Grit tier (with --prompts scripted)"
    )
    parser.add_argument(
        "--desperation",
        action="store_true",
        help="Scripted Desperation answer (with --prompts scripted)"
    )
    parser.add_argument("--seed", type=int, help="Seed the dice for a reproducible run")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with file logging and detailed error traces"
    )
    parser.add_argument("--version", action="version", version="weave-engine v0.1.0")

    return parser.parse_args(argv)


def load_config(rules_file: Optional[Path]) -> WeaveConfig:
    """
    Load the house rules.

    Raises:
        FileNotFoundError: If an explicit rules file is missing
        ValueError: If the rules file is malformed
    """
    if rules_file is None and os.getenv("WEAVE_RULES_FILE"):
        rules_file = Path(os.getenv("WEAVE_RULES_FILE"))
    return RulesLoader().load_config(rules_file)


def build_spell(args: argparse.Namespace) -> Spell:
    return Spell(
        id=args.spell.lower().replace(" ", "_"),
        name=args.spell,
        level=args.level,
        preparation_mode=PreparationMode(args.mode)
    )


def build_context(args: argparse.Namespace) -> CastContext:
    if args.runestone:
        return CastContext(source=CastSource.RUNESTONE, runestone=True, consume_slot=not args.no_slot)
    if args.from_consumable:
        return CastContext(
            source=CastSource.CONSUMABLE,
            consume_slot=not args.no_slot,
            source_item=args.from_consumable
        )
    return CastContext(consume_slot=not args.no_slot)


async def run_cast(
    args: argparse.Namespace,
    config: WeaveConfig,
    store: JsonActorStore
) -> CastResult:
    """Resolve one cast attempt described by the arguments."""
    caster = store.get(args.caster)
    resolver = SpellSuccessResolver(
        config=config,
        store=store,
        prompts=create_prompt_provider(args.prompts, args.grit, args.desperation),
        narration=RichNarrationSink(),
        dice_roller=DiceRoller(seed=args.seed),
        event_bus=EventBus()
    )
    return await resolver.resolve_cast(caster, build_spell(args), build_context(args))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Flow:
        1. Load environment variables
        2. Parse command-line arguments
        3. Initialize debug logging (if enabled)
        4. Load rules and caster records
        5. Resolve the cast
        6. Show the caster's resources afterwards

    Returns:
        Exit code: 0 if the spell goes ahead, 2 if it fizzled, 1 on error
    """
    load_dotenv()

    args = parse_arguments(argv)

    init_console(debug_mode=args.debug or os.getenv("WEAVE_DEBUG", "") == "1")

    if args.debug:
        logging_config = get_logging_config()
        if logging_config and logging_config.get_log_file_path():
            print_status_message(
                f"Debug mode enabled. Logging to: {logging_config.get_log_file_path()}",
                "info"
            )

    print_banner()

    casters_file = args.casters_file or Path(os.getenv("WEAVE_CASTERS_FILE", "casters.json"))
    try:
        config = load_config(args.rules_file)
        store = JsonActorStore(casters_file)
        store.get(args.caster)
    except (FileNotFoundError, ValueError, KeyError) as e:
        print_error("Could not start", e)
        return EXIT_ERROR

    try:
        result = asyncio.run(run_cast(args, config, store))
    except KeyboardInterrupt:
        print_status_message("Cast cancelled.", "info")
        return EXIT_ERROR
    except Exception as e:
        if args.debug:
            raise
        print_error(str(e))
        print_status_message("Use --debug flag for detailed error information.", "info")
        return EXIT_ERROR

    rich_ui.console.print(create_caster_status_table(store.get(args.caster)))

    if result.allowed:
        print_status_message(f"{args.spell} takes effect.", "success")
        return EXIT_ALLOWED
    print_status_message(f"{args.spell} fizzled.", "warning")
    return EXIT_FIZZLED


if __name__ == "__main__":
    sys.exit(main())
