"""Main entry point for tab-complete"""

import asyncio
import json
import logging
import sys

from .autocomplete import Autocomplete
from .commands import CommandRegistry
from .config import TabCompleteConfig, get_config, load_commands_from_yaml

CLI_COMMANDS = [
    "/interactive",
    "/complete",
    "/commands",
    "/help",
]


def is_valid_cli_command(command: str) -> bool:
    """Check if a CLI command (without leading /) is valid"""
    return f"/{command}" in CLI_COMMANDS


def setup_logging(config: TabCompleteConfig):
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def complete_command(registry: CommandRegistry, line: str, cursor: int | None = None, tabs: int = 1):
    """Print what `tabs` consecutive tab presses on `line` produce"""
    engine = Autocomplete(registry)
    result = None
    for _ in range(max(1, tabs)):
        result = await engine.exec(line, cursor)
        if isinstance(result, str):
            break
    print(json.dumps(result))


def commands_command(registry: CommandRegistry):
    if not len(registry):
        print("No commands configured")
        return

    for command in registry:
        line = f"  {command.name}"
        if command.aliases:
            line += f" ({', '.join(command.aliases)})"
        if command.catch_all:
            line += " [catch-all]"
        if command.options:
            line += f"  {' '.join(command.option_flags)}"
        print(line)


def print_help():
    print("\ntab-complete - Tab completion for command shells")
    print("=" * 60)
    print("\nAvailable commands:")
    print("  /interactive                  - Interactive shell with tab completion")
    print("  /complete '<line>' [cursor]   - Complete a line (as if Tab was pressed twice)")
    print("  /commands                     - List configured commands")
    print("  /help                         - Show this help")
    print("\nCommands are read from $TAB_COMPLETE_COMMANDS_FILE or ~/.tab-complete/commands.yaml")
    print("Run without arguments for interactive mode\n")


async def main_async():
    """Async main function"""
    config = get_config()
    setup_logging(config)

    command = sys.argv[1] if len(sys.argv) > 1 else None

    if command and not command.startswith("/"):
        print("Error: Commands must start with /")
        print(f"Did you mean: /{command}?")
        print("\nRun 'tab-complete /help' to see available commands")
        sys.exit(1)

    if command:
        command = command[1:]

    if command and not is_valid_cli_command(command):
        print(f"Unknown command '/{command}'\n")
        print("Run 'tab-complete /help' to see available commands")
        sys.exit(1)

    if command == "help":
        print_help()
        return

    registry = load_commands_from_yaml(config.commands_file)

    if command == "complete":
        if len(sys.argv) < 3:
            print("Usage: tab-complete /complete '<line>' [cursor]")
            sys.exit(1)
        line = sys.argv[2]
        try:
            cursor = int(sys.argv[3]) if len(sys.argv) > 3 else None
        except ValueError:
            print(f"Error: cursor must be an integer, got '{sys.argv[3]}'")
            sys.exit(1)
        await complete_command(registry, line, cursor, tabs=2)
    elif command == "commands":
        commands_command(registry)
    else:
        from .tui_interactive import tui_interactive_mode

        await tui_interactive_mode(registry, config)


def main():
    """Main entry point"""
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
