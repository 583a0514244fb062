"""Input line splitting and reassembly for tab-complete"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .formatting import strip_formatting

if TYPE_CHECKING:
    from .commands import CommandRef

PIPE = "|"

_NEXT_BOUNDARY = re.compile(r"\s")


@dataclass
class InputState:
    """The input line broken into the parts completion works on

    `context` is the region under analysis. It shrinks as resolution
    proceeds, with the consumed text moving into `prefix`.
    """

    raw: str = ""
    prefix: str = ""
    context: str = ""
    suffix: str = ""
    match: "CommandRef | None" = None
    option: str | None = None


def parse_input(line: str | None, cursor: int) -> InputState:
    """Split a line around the cursor, honouring pipes

    Segments before the one holding the cursor become the prefix, the text
    of the current segment up to the cursor becomes the context and the
    text after the cursor becomes the suffix.
    """
    raw = str(line or "")
    cursor = max(0, min(cursor, len(raw)))

    sections = raw[:cursor].split(PIPE)
    prefix = PIPE.join(sections[:-1] + [""])
    current = sections[-1]
    context = current.lstrip()
    prefix += current[: len(current) - len(context)]

    return InputState(
        raw=raw,
        prefix=prefix,
        context=context,
        suffix=get_suffix(raw[cursor:]),
    )


def get_suffix(text: str) -> str:
    """Trim the text to the right of the cursor

    The rest of the word under the cursor is dropped, along with the
    whitespace character that ends it.
    """
    if not text:
        return ""
    if not text[0].isspace():
        boundary = _NEXT_BOUNDARY.search(text)
        if boundary is None:
            return ""
        text = text[boundary.start() :]
    return text[1:]


def assemble_input(state: InputState) -> str:
    """Build the line to show once a completion has been applied"""
    return strip_formatting((state.prefix or "") + (state.context or "") + (state.suffix or ""))


def filter_data(context: str | None, data: list[str] | None) -> list[str]:
    """Keep the candidates starting with the trimmed context"""
    ctx = str(context or "").strip().lower()
    return [item for item in data or [] if strip_formatting(item)[: len(ctx)].lower() == ctx]
