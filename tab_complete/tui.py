"""TUI components for tab-complete"""

import asyncio

from prompt_toolkit.completion import Completer, Completion
from rich.columns import Columns
from rich.console import Console
from rich.text import Text

from .autocomplete import Autocomplete
from .formatting import strip_formatting
from .input_state import get_suffix


def render_candidates(console: Console, candidates: list[str]):
    """Print a candidate list in columns, keeping any ANSI styling"""
    console.print(Columns([Text.from_ansi(item) for item in candidates], padding=(0, 2)))


def completed_cursor(line: str, cursor: int, result: str) -> int:
    """Cursor position after replacing `line` with a completed `result`

    The cursor lands right before the text that was kept after it.
    """
    kept = strip_formatting(get_suffix(line[cursor:]))
    return max(0, len(result) - len(kept))


class ShellCompleter(Completer):
    """prompt_toolkit completer listing candidates from the engine"""

    def __init__(self, engine: Autocomplete):
        self.engine = engine

    def get_completions(self, document, complete_event):
        """Get completions for the current input

        Runs the engine on a private event loop, which is what
        prompt_toolkit provides when completing in a thread.
        """
        context, candidates = asyncio.run(self.engine.suggest(document.text, document.cursor_position))
        yield from self._completions(context, candidates)

    async def get_completions_async(self, document, complete_event):
        context, candidates = await self.engine.suggest(document.text, document.cursor_position)
        for completion in self._completions(context, candidates):
            yield completion

    def _completions(self, context: str, candidates: list[str]):
        for item in candidates:
            text = strip_formatting(item)
            yield Completion(
                text,
                start_position=-len(context),
                display=text,
                display_meta=self._get_description(text),
            )

    def _get_description(self, text: str) -> str:
        """Get description for a command name or option flag"""
        command = self.engine.registry.lookup(text)
        if command is not None:
            return command.description

        for command in self.engine.registry:
            option = command.find_option(text)
            if option is not None:
                return option.description
        return ""
