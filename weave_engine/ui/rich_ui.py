# ABOUTME: Rich UI utilities for terminal display of spell success checks
# ABOUTME: Styled status messages, cast result panels, caster status table, and a Rich narration sink

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.align import Align
from rich.style import Style
from rich.markup import escape
from rich import box

from weave_engine.core.caster import Caster
from weave_engine.core.dice import DiceRoll
from weave_engine.host.base import NarrationSink


console = Console()


def init_console(debug_mode: bool = False) -> Console:
    """
    Replace the module console, teeing to the debug log when requested.

    Args:
        debug_mode: Whether to enable debug logging to a file

    Returns:
        The console now in use
    """
    global console
    from weave_engine.utils.logging_config import init_logging

    logging_config = init_logging(debug_enabled=debug_mode)
    console = logging_config.create_console()
    return console


BANNER_STYLE = Style(color="magenta", bold=True)

STATUS_STYLES = {
    "info": ("blue", "ℹ"),
    "success": ("green", "✓"),
    "warning": ("yellow", "⚠"),
    "error": ("red", "✗"),
}


def print_banner(title: str = "Weave Engine", version: str = "0.1.0") -> None:
    """Show the program title, and version when given, in a double-ruled box."""
    lines = [title, f"Version {version}"] if version else [title]
    console.print(Panel(
        Align.center("\n".join(lines)),
        style=BANNER_STYLE,
        box=box.DOUBLE,
        padding=(1, 3),
        expand=False
    ))


def print_status_message(message: str, message_type: str = "info") -> None:
    """Print one status line prefixed by a coloured symbol.

    Args:
        message: Message text (Rich markup allowed)
        message_type: One of info, success, warning, error
    """
    color, symbol = STATUS_STYLES.get(message_type, STATUS_STYLES["info"])
    console.print(
        f"[{color}]{symbol}[/{color}] {message}",
        style=Style(color=color, bold=message_type == "error")
    )


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print an error message with optional exception details."""
    console.print(f"[bold red]✗ ERROR:[/bold red] {message}")
    if error:
        console.print(f"[dim red]{escape(str(error))}[/dim red]")


def print_cast_panel(caster_name: str, content: str, roll: Optional[DiceRoll] = None) -> None:
    """Display a cast result in its own panel.

    Args:
        caster_name: Name shown in the panel title
        content: Narrative record (Rich markup)
        roll: Last roll of the attempt, shown as a subtitle
    """
    subtitle = f"[dim]{escape(str(roll))}[/dim]" if roll else None
    panel = Panel(
        content,
        title=f"✨ {escape(caster_name)}",
        subtitle=subtitle,
        border_style="magenta",
        padding=(0, 1),
        expand=False
    )
    console.print(panel)


def create_caster_status_table(caster: Caster) -> Table:
    """Create a styled table showing a caster's exhaustion and slots.

    Args:
        caster: Caster record to display

    Returns:
        Formatted Rich Table
    """
    table = Table(title=f"{caster.name.upper()}", style="cyan", show_header=True, header_style="bold magenta")
    table.add_column("Resource", style="bold")
    table.add_column("Value", justify="center")

    if caster.exhaustion >= 5:
        color = "red"
    elif caster.exhaustion >= 3:
        color = "yellow"
    else:
        color = "green"
    table.add_row("Exhaustion", f"[{color}]{caster.exhaustion}/6[/{color}]")

    for name in sorted(caster.slot_pools):
        pool = caster.slot_pools[name]
        table.add_row(name.replace("_", " ").title(), f"{pool.current}/{pool.maximum}")

    return table


class RichNarrationSink(NarrationSink):
    """Shows cast narration in Rich panels on the console."""

    def narrate(self, caster: Caster, message: str, roll: Optional[DiceRoll] = None) -> None:
        print_cast_panel(caster.name, message, roll)

    def warn(self, caster: Caster, message: str) -> None:
        print_status_message(f"{escape(caster.name)}: {escape(message)}", "warning")
