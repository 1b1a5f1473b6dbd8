"""In-place rendering of the process table."""

from collections.abc import Sequence
from dataclasses import dataclass

from rich.cells import set_cell_size
from rich.text import Text

from proctop.config import MonitorConfig
from proctop.models import ProcessRecord
from proctop.terminal import LineSink
from proctop.thresholds import Color, colorize

PID_WIDTH = 8
NAME_WIDTH = 40
CPU_WIDTH = 10
MEMORY_WIDTH = 15

COMMAND_HELP = (
    "Press 'Q' to quit, 'C' to sort by CPU, 'M' to sort by Memory.",
    "Press 'A' for ascending, 'D' for descending.",
)

COLUMN_TITLES = (
    f"{'PID':<{PID_WIDTH}}{'Process Name':<{NAME_WIDTH}}"
    f"{'CPU %':<{CPU_WIDTH}}{'Memory (MB)':<{MEMORY_WIDTH}}"
)


def write_header(sink: LineSink, width: int, diagnostic: str | None = None) -> int:
    """
    Write the static header once, above the table region.

    Returns:
        The first row below the header, where the region starts.
    """
    separator = "-" * (width if width >= 25 else 80)
    if diagnostic:
        sink.writeln(Text(diagnostic))
    for line in (separator, *COMMAND_HELP, separator, COLUMN_TITLES, separator):
        sink.writeln(Text(line))
    return sink.cursor_top


@dataclass(slots=True, frozen=True)
class RegionGeometry:
    """Rows of the screen owned by the table. Fixed for the whole run."""

    top: int
    height: int
    width: int

    @classmethod
    def below(cls, top: int, screen_width: int, screen_height: int) -> "RegionGeometry":
        """Region from `top` to one row above the bottom of the screen."""
        return cls(top=top, height=max(screen_height - top - 1, 0), width=screen_width)


class Renderer:
    """
    Writes ranked records into a fixed region, row by row.

    Nothing is cleared up front. Each frame overwrites populated rows and
    blanks only the rows the previous frame left populated, so stale
    content disappears without the flicker of a full clear.
    """

    def __init__(
        self,
        sink: LineSink,
        geometry: RegionGeometry,
        config: MonitorConfig,
        total_memory_mb: int,
    ) -> None:
        if total_memory_mb <= 0:
            raise ValueError(f"total_memory_mb must be positive, got {total_memory_mb}")
        self._sink = sink
        self._geometry = geometry
        self._config = config
        self._total_memory_mb = total_memory_mb
        self._default_style = config.default_foreground.style(Color.BLACK)
        # Rows that may still show content; unknown on the first frame
        self._stale_rows = geometry.height

    @property
    def geometry(self) -> RegionGeometry:
        return self._geometry

    def format_row(self, record: ProcessRecord) -> Text:
        """Build one coloured table row, padded to the region width."""
        config = self._config
        cpu_bg, cpu_fg = colorize(
            record.cpu_percent, config.cpu_rules, config.default_foreground
        )
        memory_percent = 100.0 * record.memory_mb / self._total_memory_mb
        mem_bg, mem_fg = colorize(
            memory_percent, config.memory_rules, config.default_foreground
        )

        line = Text(no_wrap=True, overflow="crop")
        line.append(f"{record.pid:<{PID_WIDTH}}", style=self._default_style)
        line.append(
            set_cell_size(record.name, NAME_WIDTH), style=self._default_style
        )
        line.append(f"{record.cpu_percent:.2f}%".ljust(CPU_WIDTH), style=cpu_fg.style(cpu_bg))
        line.append(f"{record.memory_mb} MB".ljust(MEMORY_WIDTH), style=mem_fg.style(mem_bg))
        # Unstyled tail: back to the terminal's default colours
        line.append(" " * max(self._geometry.width - line.cell_len, 0))
        return line

    def _blank(self) -> Text:
        return Text(" " * self._geometry.width)

    def render(self, records: Sequence[ProcessRecord]) -> int:
        """
        Draw one frame.

        Returns:
            The number of table rows written.
        """
        top, height = self._geometry.top, self._geometry.height
        visible = records[:height]

        for offset, record in enumerate(visible):
            self._sink.write_line(top + offset, self.format_row(record))
        for offset in range(len(visible), self._stale_rows):
            self._sink.write_line(top + offset, self._blank())

        self._stale_rows = len(visible)
        return len(visible)

    def render_error(self, message: str) -> None:
        """Show a loop failure on the first row of the region."""
        if self._geometry.height == 0:
            return
        # One row only: a newline would move the cursor out of the region
        line = Text(" ".join(message.splitlines()), no_wrap=True, overflow="crop")
        line.append(" " * max(self._geometry.width - line.cell_len, 0))
        self._sink.write_line(self._geometry.top, line)
        self._stale_rows = max(self._stale_rows, 1)
