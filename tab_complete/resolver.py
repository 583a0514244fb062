"""Command and option resolution for tab-complete"""

import logging
import re

from .commands import CommandRegistry
from .formatting import strip_formatting
from .input_state import InputState
from .matcher import SEPARATOR
from .providers import fetch_candidates

logger = logging.getLogger(__name__)

_LAST_TOKEN = re.compile(r"\S*$")


def get_match_object(state: InputState, registry: CommandRegistry, names: list[str] | None = None) -> InputState:
    """Resolve the command the context belongs to

    Every name that literally prefixes the context replaces the previous
    one, so the last hit in sorted order wins. The name is then looked up
    as a command, then as an alias, then the catch-all takes the whole
    context. When nothing resolves the state is left untouched.
    """
    if names is None:
        names = registry.names()

    context = state.context
    trimmed = context.lstrip()
    leading = context[: len(context) - len(trimmed)]

    found = None
    for name in names:
        if trimmed.startswith(name) and name.strip():
            found = name

    command = registry.lookup(found.strip()) if found else None
    if command is not None:
        state.match = command
        state.prefix += leading + trimmed[: len(found)]
        state.context = trimmed[len(found) :]
        logger.debug("Context %r resolved to command '%s'", context, command.name)
        return state

    command = registry.catch_all
    if command is not None:
        state.match = command
        logger.debug("Context %r caught by '%s'", context, command.name)

    return state


def parse_match_section(state: InputState) -> InputState:
    """Work out what is being typed after a matched command

    The last whitespace-delimited token becomes the context and the text
    before it joins the prefix. A dash-led token right before it is
    recorded as the option whose value is being typed. When nothing
    separates a consumed command name from the context, a separator is
    added after the name.
    """
    context = state.context or ""
    start = _LAST_TOKEN.search(context).start()
    before = context[:start]

    previous = before.split()
    if previous:
        candidate = strip_formatting(previous[-1]).strip()
        if candidate.startswith("-"):
            state.option = candidate

    prefix = (state.prefix or "") + before
    consumed = state.match is not None and not state.match.catch_all
    if consumed and prefix and not prefix[-1].isspace():
        prefix += SEPARATOR

    state.context = context[start:]
    state.prefix = prefix
    return state


async def get_match_data(state: InputState) -> list[str]:
    """Collect the candidates for the matched command's current context"""
    command = state.match
    if command is None:
        return []

    text = state.context
    if strip_formatting(text).strip().startswith("-"):
        return command.option_flags

    if state.option is not None:
        option = command.find_option(state.option)
        if option is not None:
            return await fetch_candidates(option.autocomplete, text)

    return await fetch_candidates(command.autocomplete, text)
