"""Command registry for tab-complete"""

import logging
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .matcher import sort_candidates
from .providers import DataProvider, make_provider

logger = logging.getLogger(__name__)

_FLAG = re.compile(r"^-{1,2}[^\s,<>\[\]]+$")


class OptionRef(BaseModel):
    """An option a command accepts, e.g. ``-f, --force``"""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    short: str | None = None
    long: str | None = None
    description: str = ""
    autocomplete: DataProvider | None = None

    @field_validator("autocomplete", mode="before")
    @classmethod
    def build_provider(cls, value: Any) -> DataProvider | None:
        return make_provider(value)

    @model_validator(mode="after")
    def check_flags(self) -> "OptionRef":
        if not self.short and not self.long:
            raise ValueError("Option needs a short or a long flag")
        return self

    @property
    def flag(self) -> str:
        """Flag offered when completing option names (long form preferred)"""
        return self.long or self.short or ""

    @classmethod
    def from_flags(cls, flags: str, **kwargs) -> "OptionRef":
        """Create an option from a spelling like ``"-f, --force <mode>"``

        Raises:
            ValueError: If no flag can be found in the spelling
        """
        short = None
        long = None
        for part in re.split(r"[\s,|]+", flags.strip()):
            if not _FLAG.match(part):
                continue
            if part.startswith("--"):
                long = long or part
            else:
                short = short or part

        if short is None and long is None:
            raise ValueError(f"No flag found in option spelling '{flags}'")
        return cls(short=short, long=long, **kwargs)


class CommandRef(BaseModel):
    """A command known to the shell"""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    aliases: list[str] = Field(default_factory=list)
    options: list[OptionRef] = Field(default_factory=list)
    catch_all: bool = False
    description: str = ""
    autocomplete: DataProvider | None = None

    @field_validator("autocomplete", mode="before")
    @classmethod
    def build_provider(cls, value: Any) -> DataProvider | None:
        return make_provider(value)

    @field_validator("aliases", mode="before")
    @classmethod
    def default_aliases(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, value: Any) -> Any:
        return [] if value is None else value

    def find_option(self, flag: str) -> OptionRef | None:
        """Find an option by flag, preferring a long-form match"""
        for option in self.options:
            if option.long == flag:
                return option
        for option in self.options:
            if option.short == flag:
                return option
        return None

    @property
    def option_flags(self) -> list[str]:
        return [option.flag for option in self.options]


class CommandRegistry:
    """Ordered collection of commands, with at most one catch-all"""

    def __init__(self, commands: list[CommandRef] | None = None):
        self._commands: list[CommandRef] = []
        for command in commands or []:
            self.add(command)

    def __iter__(self):
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def commands(self) -> list[CommandRef]:
        return list(self._commands)

    @property
    def catch_all(self) -> CommandRef | None:
        for command in self._commands:
            if command.catch_all:
                return command
        return None

    def add(self, command: CommandRef) -> CommandRef:
        """Register a command

        Raises:
            ValueError: If a second catch-all command is registered
        """
        if command.catch_all and self.catch_all is not None:
            raise ValueError(
                f"Cannot register catch-all '{command.name}': '{self.catch_all.name}' already catches all input"
            )
        if self.find(command.name) is not None:
            logger.warning("Command '%s' registered twice, the first one wins", command.name)
        self._commands.append(command)
        return command

    def command(self, name: str, **kwargs) -> CommandRef:
        """Create and register a command in one step"""
        return self.add(CommandRef(name=name, **kwargs))

    def find(self, name: str) -> CommandRef | None:
        """Find a command by its primary name"""
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def find_by_alias(self, alias: str) -> CommandRef | None:
        for command in self._commands:
            if alias in command.aliases:
                return command
        return None

    def lookup(self, name: str) -> CommandRef | None:
        """Find a command by primary name, then by alias"""
        return self.find(name) or self.find_by_alias(name)

    def names(self) -> list[str]:
        """Command names then aliases, deduplicated and sorted

        Blank names and the catch-all command are left out, since they can
        never be typed as a command token.
        """
        commands = [command for command in self._commands if not command.catch_all]
        names = [command.name for command in commands]
        for command in commands:
            names.extend(command.aliases)
        return sort_candidates(sorted({name for name in names if name.strip()}))


def get_command_suggestion(user_input: str, registry: CommandRegistry) -> str:
    """Get a helpful message for a line that matches no command

    Args:
        user_input: User's input line
        registry: Known commands

    Returns:
        Message string
    """
    msg = f"Unknown command '{user_input}'\n\n"

    names = registry.names()
    if names:
        msg += "Available commands:\n"
        for name in names:
            msg += f"  {name}\n"
        msg += "\nPress Tab to complete a command name."
    else:
        msg += "No commands are configured."

    return msg
