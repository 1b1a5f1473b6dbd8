"""In-memory character grid that the renderer writes rows into."""

from typing import Protocol

from rich.text import Text


class LineSink(Protocol):
    """Anything rows of styled text can be written to."""

    @property
    def cursor_top(self) -> int: ...

    def write_line(self, y: int, line: Text) -> None: ...

    def writeln(self, line: Text) -> None: ...


class ScreenBuffer:
    """
    A fixed-size grid of styled rows with a write cursor.

    Each write replaces one whole row. Rows outside the grid are ignored,
    which is how a terminal that shrank mid-run behaves.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._lines: dict[int, Text] = {}
        self._cursor_top = 0

    @property
    def cursor_top(self) -> int:
        """Row the next writeln() lands on."""
        return self._cursor_top

    def write_line(self, y: int, line: Text) -> None:
        """Overwrite row y with the given text."""
        if 0 <= y < self.height:
            self._lines[y] = line

    def writeln(self, line: Text) -> None:
        """Write at the cursor row and advance the cursor."""
        self.write_line(self._cursor_top, line)
        self._cursor_top += 1

    def line(self, y: int) -> Text:
        """Row y, blank if never written."""
        return self._lines.get(y) or Text()

    def plain_lines(self) -> list[str]:
        """All rows as plain strings with trailing spaces stripped."""
        return [self.line(y).plain.rstrip() for y in range(self.height)]
