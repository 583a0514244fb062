"""Terminal formatting helpers for tab-complete"""

from rich.text import Text


def strip_formatting(text: str) -> str:
    """Remove ANSI formatting codes from text.

    Only the escape sequences are dropped; the visible characters, spaces
    included, are kept as they are so prefix comparisons stay meaningful.
    """
    if not text:
        return ""
    if "\x1b" not in text:
        return text
    return Text.from_ansi(text).plain
