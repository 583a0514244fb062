"""Configuration management for tab-complete"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .commands import CommandRef, CommandRegistry, OptionRef

load_dotenv()

logger = logging.getLogger(__name__)


def get_config_dir(override: str | None = None) -> Path:
    """Get the tab-complete configuration directory

    Priority (highest to lowest):
    1. override parameter
    2. TAB_COMPLETE_CONFIG_DIR environment variable
    3. Default: ~/.tab-complete

    Args:
        override: Optional path to override config directory

    Returns:
        Path to configuration directory (created if it doesn't exist)
    """
    if override:
        config_dir = Path(os.path.expanduser(override))
    else:
        config_dir_str = os.getenv("TAB_COMPLETE_CONFIG_DIR")
        if config_dir_str:
            config_dir = Path(os.path.expanduser(config_dir_str))
        else:
            config_dir = Path.home() / ".tab-complete"

    config_dir.mkdir(parents=True, exist_ok=True)

    return config_dir


class TabCompleteConfig(BaseModel):
    """Main tab-complete configuration"""

    commands_file: Path | None = None
    history_file: Path | None = None

    log_level: str = Field(default="WARNING", description="DEBUG, INFO, WARNING, ERROR")

    prompt: str = Field(default="$ ")

    # Ring the terminal bell when a first ambiguous tab press shows nothing
    bell: bool = Field(default=True)

    @classmethod
    def from_env(cls, config_dir: Path | None = None) -> "TabCompleteConfig":
        """Load configuration from environment variables

        Args:
            config_dir: Optional config directory (defaults to get_config_dir())
        """
        if config_dir is None:
            config_dir = get_config_dir()

        commands_file = os.getenv("TAB_COMPLETE_COMMANDS_FILE")

        return cls(
            commands_file=Path(os.path.expanduser(commands_file)) if commands_file else config_dir / "commands.yaml",
            history_file=config_dir / "history.txt",
            log_level=os.getenv("TAB_COMPLETE_LOG_LEVEL", "WARNING").upper(),
            prompt=os.getenv("TAB_COMPLETE_PROMPT", "$ "),
            bell=os.getenv("TAB_COMPLETE_BELL", "true").lower() == "true",
        )


def _load_option(data: Any) -> OptionRef:
    if isinstance(data, str):
        return OptionRef.from_flags(data)

    data = dict(data)
    flags = data.pop("flags", None)
    if flags:
        return OptionRef.from_flags(flags, **data)
    return OptionRef(**data)


def load_command(name: str, data: dict[str, Any] | None) -> CommandRef:
    """Build a command from its YAML definition

    Raises:
        ValueError: If the definition is invalid
    """
    data = dict(data or {})
    options = [_load_option(option) for option in data.pop("options", None) or []]
    return CommandRef(name=str(name), options=options, **data)


def load_commands_from_yaml(path: Path) -> CommandRegistry:
    """Load the command registry from a YAML file

    Commands that cannot be loaded are skipped with an error logged.

    Args:
        path: Path to commands.yaml

    Returns:
        The registry (empty if the file is missing or unreadable)
    """
    registry = CommandRegistry()
    if path is None or not path.exists():
        return registry

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("Error parsing commands YAML %s: %s", path, e)
        return registry

    if not data or "commands" not in data:
        return registry

    for name, config in (data.get("commands") or {}).items():
        try:
            registry.add(load_command(name, config))
        except (ValidationError, ValueError, TypeError) as e:
            logger.error("Skipping command '%s' from %s: %s", name, path, e)

    return registry


def get_config() -> TabCompleteConfig:
    """Get the current configuration"""
    return TabCompleteConfig.from_env()
