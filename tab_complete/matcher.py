"""Stateless candidate matching for tab-complete"""

from .formatting import strip_formatting

SEPARATOR = " "


def sort_candidates(candidates: list[str] | None) -> list[str]:
    """Sort candidates ascending on their plain, lower-cased text

    The order also decides which candidate lends its casing to a shared
    extension.
    """
    return sorted(candidates or [], key=lambda item: strip_formatting(item).lower())


def match(probe: str, candidates: list[str] | None) -> str | None:
    """Find the best completion for a probe among candidates

    Candidates are compared on their stripped, lower-cased text.

    Args:
        probe: Text typed so far
        candidates: Possible completions

    Returns:
        The single matching candidate followed by a separator, the longest
        prefix shared by all matching candidates when it extends the probe,
        or None
    """
    probe = str(probe)
    lowered = probe.lower()
    size = len(probe)

    matches = [
        item for item in sort_candidates(candidates) if strip_formatting(item)[:size].lower() == lowered
    ]

    if len(matches) == 1:
        return matches[0] + SEPARATOR
    if not matches:
        return None

    stripped = [strip_formatting(item) for item in matches]
    first = stripped[0]
    furthest = size
    for k in range(size + 1, len(first) + 1):
        current = first[:k].lower()
        if all(item[:k].lower() == current for item in stripped):
            furthest = k
        else:
            break

    if furthest > size:
        return first[:furthest]
    return None


def get_match(context: str, candidates: list[str] | None) -> str | None:
    """Match on the context without its leading whitespace, then restore it"""
    trimmed = context.lstrip()
    leading = context[: len(context) - len(trimmed)]
    result = match(trimmed, candidates)
    if result:
        return leading + result
    return None
