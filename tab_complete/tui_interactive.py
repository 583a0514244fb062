"""Interactive shell driving tab-complete with prompt_toolkit and rich"""

import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .autocomplete import Autocomplete
from .commands import CommandRef, CommandRegistry, get_command_suggestion
from .config import TabCompleteConfig
from .input_state import PIPE
from .tui import ShellCompleter, completed_cursor, render_candidates

logger = logging.getLogger(__name__)

EXIT_WORDS = ("exit", "quit")


def resolve_line(registry: CommandRegistry, line: str) -> list[tuple[str, CommandRef | None]]:
    """Find the command each pipe stage of a submitted line runs"""
    stages = []
    for segment in line.split(PIPE):
        words = segment.split()
        if not words:
            continue
        stages.append((segment.strip(), registry.lookup(words[0]) or registry.catch_all))
    return stages


async def apply_tab(engine: Autocomplete, buffer, console: Console, bell=None):
    """Run one tab press against a prompt_toolkit buffer"""
    line = buffer.text
    cursor = buffer.cursor_position
    result = await engine.exec(line, cursor)

    if isinstance(result, str):
        buffer.text = result
        buffer.cursor_position = completed_cursor(line, cursor, result)
    elif isinstance(result, list):
        await run_in_terminal(lambda: render_candidates(console, result))
    elif bell is not None:
        bell()


def create_key_bindings(engine: Autocomplete, console: Console, config: TabCompleteConfig) -> KeyBindings:
    kb = KeyBindings()

    @kb.add("tab")
    def _(event):
        bell = event.app.output.bell if config.bell else None
        event.app.create_background_task(apply_tab(engine, event.current_buffer, console, bell))

    return kb


async def handle_line(line: str, registry: CommandRegistry, console: Console):
    """Report what a submitted line would run"""
    stages = resolve_line(registry, line)
    for index, (text, command) in enumerate(stages, start=1):
        if command is None:
            console.print(get_command_suggestion(text, registry) + "\n", style="yellow", markup=False)
            return
        label = f"stage {index}: " if len(stages) > 1 else ""
        console.print(f"[dim]{label}[/dim][cyan]{escape(command.name)}[/cyan] [dim]<- {escape(text)}[/dim]")
    console.print()


async def handle_help_command(registry: CommandRegistry, console: Console):
    """Handle the help command"""
    table = Table(title="Available Commands")
    table.add_column("Command", style="cyan")
    table.add_column("Aliases", style="green")
    table.add_column("Options", style="yellow")
    table.add_column("Description", style="white")

    for command in registry:
        name = f"{command.name} (catch-all)" if command.catch_all else command.name
        table.add_row(
            escape(name),
            escape(", ".join(command.aliases)) or "-",
            escape("\n".join(command.option_flags)) or "-",
            escape(command.description),
        )

    console.print(table)
    console.print("[dim]Tab completes, Tab twice lists candidates, exit or quit leaves[/dim]\n")


async def tui_interactive_mode(registry: CommandRegistry, config: TabCompleteConfig, console: Console | None = None):
    """Run the interactive shell until the user leaves"""
    console = console or Console()
    engine = Autocomplete(registry)

    if config.history_file is not None:
        config.history_file.parent.mkdir(parents=True, exist_ok=True)
        history = FileHistory(str(config.history_file))
    else:
        history = InMemoryHistory()

    session = PromptSession(
        message=config.prompt,
        completer=ShellCompleter(engine),
        complete_while_typing=False,
        history=history,
        key_bindings=create_key_bindings(engine, console, config),
    )

    console.print(f"[bold cyan]tab-complete[/bold cyan] [dim]{len(registry)} command(s) loaded, type help[/dim]\n")

    while True:
        try:
            line = await session.prompt_async()
        except (EOFError, KeyboardInterrupt):
            break

        line = line.strip()
        if not line:
            continue
        if line.lower() in EXIT_WORDS:
            break
        if line.lower() == "help":
            await handle_help_command(registry, console)
            continue

        try:
            await handle_line(line, registry, console)
        except Exception as e:
            logger.exception("Error handling %r", line)
            console.print(f"[red]Error: {e}[/red]\n")

    console.print("Goodbye!")
