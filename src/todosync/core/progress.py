"""
Progress bar rendering for batch operations.

``render_progress`` is a pure function producing a fixed-width bar; the
reporters decide how the bar reaches the screen.

Both the filled width and the percentage use Python's built-in ``round``
(round-half-to-even), so 1 of 8 renders as 4 cells and 12%.

Example:
    >>> render_progress(3, 10)
    '[█████████                     ] 3/10 (30%)'
"""

from typing import Protocol

from rich.console import Console

BAR_WIDTH = 30
FILL_CHAR = "█"
EMPTY_CHAR = " "
PROGRESS_LABEL = "⏳ Progress: "


def render_progress(completed: int, total: int) -> str:
    """
    Render a 30-cell progress bar followed by ``completed/total (pct%)``.

    Args:
        completed: Items finished so far (0 <= completed <= total)
        total: Total number of items (> 0)

    Raises:
        ValueError: If total is not positive or completed is out of range
    """
    if total <= 0:
        raise ValueError(f"total must be positive (got {total})")
    if not 0 <= completed <= total:
        raise ValueError(f"completed must be between 0 and {total} (got {completed})")

    ratio = completed / total
    filled = round(BAR_WIDTH * ratio)
    percentage = round(100 * ratio)
    bar = FILL_CHAR * filled + EMPTY_CHAR * (BAR_WIDTH - filled)
    return f"[{bar}] {completed}/{total} ({percentage}%)"


class ProgressReporter(Protocol):
    """Protocol for progress displays driven by the sync orchestrator."""

    def initialize(self, total: int) -> None:
        """Show the bar at 0 of ``total``."""
        ...

    def update(self, completed: int, total: int) -> None:
        """Replace the bar with the current state."""
        ...

    def finish(self) -> None:
        """Terminate the progress line if it is still open."""
        ...


class TerminalProgressReporter:
    """
    Progress bar written to a console.

    On a terminal the bar is redrawn in place using a carriage return and the
    line is terminated once ``completed == total``. On any other stream one
    line is printed per update.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._line_open = False

    @property
    def line_open(self) -> bool:
        """Whether an unterminated progress line is on screen."""
        return self._line_open

    def _emit(self, completed: int, total: int) -> None:
        line = PROGRESS_LABEL + render_progress(completed, total)
        if self.console.is_terminal:
            prefix = "\r" if self._line_open else ""
            self.console.file.write(prefix + line)
            self.console.file.flush()
            self._line_open = True
        else:
            self.console.print(line, markup=False, highlight=False)

    def initialize(self, total: int) -> None:
        self._line_open = False
        self._emit(0, total)

    def update(self, completed: int, total: int) -> None:
        self._emit(completed, total)
        if completed >= total:
            self.finish()

    def finish(self) -> None:
        if self._line_open:
            self.console.file.write("\n")
            self.console.file.flush()
            self._line_open = False


class NullProgressReporter:
    """Reporter that displays nothing."""

    def initialize(self, total: int) -> None:
        pass

    def update(self, completed: int, total: int) -> None:
        pass

    def finish(self) -> None:
        pass


__all__ = [
    "BAR_WIDTH",
    "FILL_CHAR",
    "EMPTY_CHAR",
    "render_progress",
    "ProgressReporter",
    "TerminalProgressReporter",
    "NullProgressReporter",
]
