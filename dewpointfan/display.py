"""Character displays: the common interface and a terminal-backed implementation."""

from __future__ import annotations

import abc
import logging

logger = logging.getLogger(__name__)

CHARS_PER_LINE = 20
NUM_ROWS = 4


class Display(abc.ABC):
    """A line-oriented character display."""

    @abc.abstractmethod
    def set_backlight(self, on: bool) -> None:
        """Switch the backlight on or off."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Remove all content from the display."""

    @abc.abstractmethod
    def clear_line(self, line: int) -> None:
        """Clear the content of one line."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the resources held by the display."""

    @property
    @abc.abstractmethod
    def chars_per_line(self) -> int:
        """Number of characters that fit on one line."""

    @property
    @abc.abstractmethod
    def row_range(self) -> tuple[int, int]:
        """Lowest and highest row index, both inclusive."""

    @abc.abstractmethod
    def print_line(self, line: int, text: str, scroll: bool = False) -> None:
        """Show ``text`` on ``line``, scrolling it if asked to."""


class TerminalDisplay(Display):
    """A display that keeps its rows in memory and logs what it shows."""

    def __init__(self) -> None:
        self._backlight = False
        self._closed = False
        self._chars_per_line = CHARS_PER_LINE
        self._min_row = 0
        self._max_row = NUM_ROWS - 1
        self._rows = [""] * NUM_ROWS

    @property
    def backlight(self) -> bool:
        """Whether the backlight is on."""
        return self._backlight

    @property
    def closed(self) -> bool:
        """Whether the display has been closed."""
        return self._closed

    def set_backlight(self, on: bool) -> None:
        self._backlight = on
        logger.info("Backlight set to: %s", on)

    def _in_range(self, line: int) -> bool:
        if self._min_row <= line <= self._max_row:
            return True
        logger.warning(
            "Line %d is out of range [%d-%d]", line, self._min_row, self._max_row
        )
        return False

    def clear(self) -> None:
        self._rows = [" " * self._chars_per_line for _ in self._rows]
        logger.info("Display cleared")

    def clear_line(self, line: int) -> None:
        if not self._in_range(line):
            return
        self._rows[line] = " " * self._chars_per_line
        logger.info("Line %d cleared", line)

    def close(self) -> None:
        self._closed = True
        logger.info("Display closed")

    @property
    def chars_per_line(self) -> int:
        return self._chars_per_line

    @property
    def row_range(self) -> tuple[int, int]:
        return self._min_row, self._max_row

    @property
    def rows(self) -> tuple[str, ...]:
        """The current content of every row."""
        return tuple(self._rows)

    def print_line(self, line: int, text: str, scroll: bool = False) -> None:
        """Show ``text`` on ``line``, padded or cut to the line width.

        Scrolling is not animated: a too-long text keeps its tail when
        ``scroll`` is set and its head otherwise.
        """
        if not self._in_range(line):
            return
        width = self._chars_per_line
        if len(text) > width:
            text = text[-width:] if scroll else text[:width]
        else:
            text = text.ljust(width)
        self._rows[line] = text
        logger.info("Line %d: %s", line, text)