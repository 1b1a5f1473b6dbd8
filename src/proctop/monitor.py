"""Sampling loop driver for proctop."""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from queue import Queue
from typing import Protocol

from proctop.config import MonitorConfig
from proctop.controls import CommandController
from proctop.models import ProcessRecord, SortState
from proctop.ranking import rank
from proctop.sampler import UsageSampler

logger = logging.getLogger(__name__)

EXIT_NOTICE = "Exiting application..."


class LoopState(Enum):
    """States of one monitoring cycle."""

    SAMPLING = "sampling"
    RANKING = "ranking"
    RENDERING = "rendering"
    POLLING_INPUT = "polling_input"
    TERMINATED = "terminated"


class MonitorView(Protocol):
    """Where the loop sends its output."""

    def show(self, records: list[ProcessRecord]) -> None: ...

    def show_error(self, message: str) -> None: ...

    def close(self, notice: str) -> None: ...


class Sampler(Protocol):
    """Source of one cycle's process records."""

    def sample(self) -> list[ProcessRecord]: ...


@dataclass(slots=True)
class MonitorContext:
    """State owned by the loop driver for the whole run."""

    config: MonitorConfig
    total_memory_mb: int
    sort_state: SortState = field(default_factory=SortState)


class ProcessMonitor:
    """
    Drives the sample -> rank -> render -> poll input cycle.

    Runs in a separate daemon thread. Failures while sampling, ranking or
    rendering are reported to the view and the loop resumes after a pause;
    only the quit command or stop() ends it.
    """

    def __init__(
        self,
        view: MonitorView,
        context: MonitorContext,
        keys: Queue[str],
        *,
        sampler: Sampler | None = None,
        error_pause: float = 2.0,
    ) -> None:
        """
        Initialize the ProcessMonitor.

        Args:
            view: Receives rendered frames, error messages and the exit notice.
            context: Configuration, total memory and sort state.
            keys: Thread-safe queue of pending key presses.
            sampler: Source of per-cycle records. Default samples with psutil,
                waiting on this monitor's stop event between snapshots.
            error_pause: Seconds to pause after a failed cycle.
        """
        self._view = view
        self._context = context
        self._controller = CommandController(keys)
        self._stop_event = threading.Event()
        self._sampler = sampler or UsageSampler(wait=self._stop_event.wait)
        self._error_pause = error_pause
        self._thread: threading.Thread | None = None
        self._state = LoopState.SAMPLING
        self._records: list[ProcessRecord] = []

    @property
    def state(self) -> LoopState:
        """The state the next step() will execute."""
        return self._state

    @property
    def context(self) -> MonitorContext:
        return self._context

    @property
    def sort_state(self) -> SortState:
        return self._context.sort_state

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            daemon=True,
            name="ProcessMonitor",
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join(timeout=timeout)
            self._thread = None

    def run(self) -> None:
        """Step until the user quits or stop() is called."""
        while not self._stop_event.is_set():
            if self.step() is LoopState.TERMINATED:
                break

    def step(self) -> LoopState:
        """Execute the current state and move to the next one."""
        state = self._state
        if state is LoopState.TERMINATED:
            return state

        try:
            next_state = self._advance(state)
        except Exception as exc:
            if self._stop_event.is_set():
                # Shutting down; the view may already be gone
                logger.debug("Cycle aborted during shutdown", exc_info=True)
                self._state = LoopState.TERMINATED
                return self._state
            logger.exception("Error in monitoring loop")
            self._view.show_error(f"Error in monitoring loop: {exc}")
            self._stop_event.wait(timeout=self._error_pause)
            next_state = LoopState.SAMPLING

        self._state = next_state
        if next_state is LoopState.TERMINATED:
            self._view.close(EXIT_NOTICE)
        return next_state

    def _advance(self, state: LoopState) -> LoopState:
        if state is LoopState.SAMPLING:
            self._records = self._sampler.sample()
            return LoopState.RANKING

        if state is LoopState.RANKING:
            self._records = rank(self._records, self._context.sort_state)
            return LoopState.RENDERING

        if state is LoopState.RENDERING:
            self._view.show(self._records)
            self._records = []
            return LoopState.POLLING_INPUT

        if self._controller.poll_and_apply(self._context.sort_state):
            return LoopState.SAMPLING
        return LoopState.TERMINATED
