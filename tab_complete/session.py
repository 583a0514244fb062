"""Tab press tracking for tab-complete"""

from dataclasses import dataclass


@dataclass
class TabSession:
    """Counts consecutive ambiguous tab presses within a shell session

    The first ambiguous press shows nothing (the shell may ring a bell),
    the following ones reveal the candidate list. Producing a completion
    resets the count.
    """

    tab_count: int = 0

    def handle(self, result: str | list[str] | None) -> str | list[str] | None:
        """Decide what a completion attempt shows to the user"""
        if isinstance(result, list):
            self.tab_count += 1
            if self.tab_count > 1:
                return result or None
            return None

        self.tab_count = 0
        return result

    def reset(self):
        self.tab_count = 0
