"""Pytest configuration and fixtures"""

import pytest

from tab_complete.commands import CommandRef, CommandRegistry, OptionRef


async def environments(text):
    return ["staging", "production"]


def services(text, deliver):
    deliver(["billing", "api"])


@pytest.fixture
def registry():
    """A small shell with static, async and callback providers"""
    return CommandRegistry(
        [
            CommandRef(
                name="git",
                aliases=["g"],
                description="Version control",
                autocomplete=["push", "pull", "status"],
                options=[
                    OptionRef(short="-p", long="--paginate", description="Pipe output into a pager"),
                    OptionRef(short="-C"),
                ],
            ),
            CommandRef(name="help", description="Show help"),
            CommandRef(name="history"),
            CommandRef(
                name="deploy",
                autocomplete=services,
                options=[
                    OptionRef(short="-e", long="--env", autocomplete=environments),
                    OptionRef(short="-f", long="--force"),
                ],
            ),
        ]
    )


@pytest.fixture
def catch_all_registry():
    """A shell where unknown input goes to a catch-all command"""
    return CommandRegistry(
        [
            CommandRef(name="help"),
            CommandRef(name="say", catch_all=True, autocomplete={"data": ["hello", "goodbye"]}),
        ]
    )
