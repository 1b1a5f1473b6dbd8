"""proctop - Main Textual application."""

import argparse
import logging
from pathlib import Path
from queue import Queue

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.geometry import Region
from textual.logging import TextualHandler
from textual.strip import Strip
from textual.widget import Widget

from proctop.config import DEFAULT_CONFIG_PATH, MonitorConfig, load_config
from proctop.models import ProcessRecord
from proctop.monitor import MonitorContext, ProcessMonitor, Sampler
from proctop.render import RegionGeometry, Renderer, write_header
from proctop.sampler import resolve_total_memory_mb
from proctop.terminal import ScreenBuffer


class TerminalView(Widget, can_focus=True):
    """
    Character grid covering the screen.

    Rows are stored in a ScreenBuffer and only the rows that are written
    get repainted.
    """

    DEFAULT_CSS = """
    TerminalView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize TerminalView."""
        super().__init__(*args, **kwargs)
        self._buffer = ScreenBuffer(0, 0)

    @property
    def buffer(self) -> ScreenBuffer:
        return self._buffer

    @property
    def cursor_top(self) -> int:
        return self._buffer.cursor_top

    def reset(self, width: int, height: int) -> None:
        """Start over with an empty grid of the given size."""
        self._buffer = ScreenBuffer(width, height)
        self.refresh()

    def write_line(self, y: int, line: Text) -> None:
        """Overwrite one row and repaint just that row."""
        self._buffer.write_line(y, line)
        self.refresh(Region(0, y, self.size.width, 1))

    def writeln(self, line: Text) -> None:
        y = self._buffer.cursor_top
        self._buffer.writeln(line)
        self.refresh(Region(0, y, self.size.width, 1))

    def render_line(self, y: int) -> Strip:
        """Render one row of the grid."""
        segments = self._buffer.line(y).render(self.app.console)
        return Strip(segments).adjust_cell_length(self.size.width)


class _ThreadedView:
    """Forwards monitor output from its thread to the app's event loop."""

    def __init__(self, app: "ProcessMonitorApp") -> None:
        self._app = app

    def show(self, records: list[ProcessRecord]) -> None:
        self._app.call_from_thread(self._app.show_records, records)

    def show_error(self, message: str) -> None:
        self._app.call_from_thread(self._app.show_error, message)

    def close(self, notice: str) -> None:
        self._app.call_from_thread(self._app.exit, notice)


class ProcessMonitorApp(App[str]):
    """Main proctop application."""

    TITLE = "Process Monitor"

    CSS = """
    Screen {
        layout: vertical;
        overflow: hidden;
    }
    """

    def __init__(
        self,
        config_path: Path = DEFAULT_CONFIG_PATH,
        *,
        sampler: Sampler | None = None,
        error_pause: float = 2.0,
    ) -> None:
        """
        Initialize the ProcessMonitorApp.

        Args:
            config_path: JSON file with the colour thresholds.
            sampler: Record source; psutil sampling when None.
            error_pause: Seconds to pause after a failed cycle.
        """
        super().__init__()
        self._config_path = config_path
        self._sampler = sampler
        self._error_pause = error_pause
        self._keys: Queue[str] = Queue()
        self._renderer: Renderer | None = None
        self._monitor: ProcessMonitor | None = None
        self.config: MonitorConfig | None = None
        self.config_diagnostic: str | None = None

    @property
    def monitor(self) -> ProcessMonitor | None:
        return self._monitor

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield TerminalView(id="terminal")

    def on_mount(self) -> None:
        """Run the one-time setup, then start the monitor thread."""
        view = self.query_one(TerminalView)
        total_memory_mb = resolve_total_memory_mb()
        self.config, self.config_diagnostic = load_config(self._config_path)

        width, height = self.size
        view.reset(width, height)
        region_top = write_header(view, width, self.config_diagnostic)
        self._renderer = Renderer(
            view,
            RegionGeometry.below(region_top, width, height),
            self.config,
            total_memory_mb,
        )

        self._monitor = ProcessMonitor(
            _ThreadedView(self),
            MonitorContext(config=self.config, total_memory_mb=total_memory_mb),
            self._keys,
            sampler=self._sampler,
            error_pause=self._error_pause,
        )
        view.focus()
        self._monitor.start()

    def on_key(self, event: events.Key) -> None:
        """Queue printable keys for the monitor's next input poll."""
        if event.character:
            self._keys.put(event.character)

    def on_unmount(self) -> None:
        """Stop the monitor without waiting on a thread that may be calling in."""
        if self._monitor is not None:
            self._monitor.stop(timeout=0)

    def show_records(self, records: list[ProcessRecord]) -> None:
        if self._renderer is not None:
            self._renderer.render(records)

    def show_error(self, message: str) -> None:
        if self._renderer is not None:
            self._renderer.render_error(message)


def main(argv: list[str] | None = None) -> None:
    """Entry point for proctop application."""
    parser = argparse.ArgumentParser(
        prog="proctop",
        description="Live, colour-coded process monitor.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="JSON file with CPU and memory colour thresholds (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for the Textual devtools console (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, handlers=[TextualHandler()])

    app = ProcessMonitorApp(config_path=args.config)
    notice = app.run()
    if notice:
        print(notice)


if __name__ == "__main__":
    main()
