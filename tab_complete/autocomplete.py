"""Tab completion engine for tab-complete

Handles tabbed autocompletion of a shell input line:

- tabbing on an empty line lists all registered commands
- completes a half-typed command name or alias
- recognizes options and lists a command's option flags
- recognizes option arguments and lists their values
- supports any cursor position within the line
- supports piped command chains
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from .commands import CommandRegistry
from .input_state import InputState, assemble_input, filter_data, parse_input
from .matcher import get_match, match, sort_candidates
from .resolver import get_match_data, get_match_object, parse_match_section
from .session import TabSession

logger = logging.getLogger(__name__)

CompletionResult = str | list[str] | None
CompletionCallback = Callable[[Exception | None, CompletionResult], Any]


class Autocomplete:
    """Completion engine bound to a command registry and a tab session

    Requests against one session must not overlap: the caller waits for a
    request to finish before issuing the next one.
    """

    match = staticmethod(match)

    def __init__(self, registry: CommandRegistry, session: TabSession | None = None):
        self.registry = registry
        self.session = session or TabSession()

    async def exec(self, line: str, cursor: int | None = None) -> CompletionResult:
        """Complete the line at the cursor

        Args:
            line: Current input line
            cursor: Cursor index in the line (defaults to the end)

        Returns:
            The line to replace the input with, a list of candidates to
            display, or None when there is nothing to show
        """
        if cursor is None:
            cursor = len(line or "")
        try:
            result = await self._complete(parse_input(line, cursor))
        except Exception:
            logger.exception("Completion failed for %r at %d", line, cursor)
            return self.session.handle(None)
        return self.session.handle(result)

    async def _complete(self, state: InputState) -> str | list[str]:
        names = self.registry.names()

        command_match = get_match(state.context, names)
        if command_match:
            state.context = command_match
            return assemble_input(state)

        state = get_match_object(state, self.registry, names)
        if state.match is None:
            return filter_data(state.context, names)

        state = parse_match_section(state)
        data = sort_candidates(await get_match_data(state))
        data_match = get_match(state.context, data)
        if data_match:
            state.context = data_match
            return assemble_input(state)
        return filter_data(state.context, data)

    def complete(self, line: str, cursor: int | None, callback: CompletionCallback) -> asyncio.Task | None:
        """Callback flavour of `exec`

        `callback(error, result)` is called exactly once, with `error`
        always None. Inside a running event loop the completion is scheduled
        and its task returned; otherwise it runs to completion first.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            callback(None, asyncio.run(self.exec(line, cursor)))
            return None

        def _done(task: asyncio.Task):
            callback(None, None if task.cancelled() else task.result())

        task = loop.create_task(self.exec(line, cursor))
        task.add_done_callback(_done)
        return task

    async def suggest(self, line: str, cursor: int | None = None) -> tuple[str, list[str]]:
        """List the candidates for the text under the cursor

        Unlike `exec` this neither completes nor counts tab presses.

        Returns:
            The context being completed and the matching candidates
        """
        if cursor is None:
            cursor = len(line or "")
        state = parse_input(line, cursor)
        names = self.registry.names()
        try:
            if not any(ch.isspace() for ch in state.context):
                typed = filter_data(state.context, names)
                if typed:
                    return state.context, typed

            state = get_match_object(state, self.registry, names)
            if state.match is None:
                return state.context, filter_data(state.context, names)

            state = parse_match_section(state)
            data = sort_candidates(await get_match_data(state))
        except Exception:
            logger.exception("Listing candidates failed for %r at %d", line, cursor)
            return state.context, []
        return state.context, filter_data(state.context, data)
