"""Two-snapshot CPU and memory sampling for proctop."""

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

import psutil

from proctop.models import BYTES_PER_MB, ProcessRecord, ProcessSample

logger = logging.getLogger(__name__)

# Used when the machine's physical memory cannot be determined
FALLBACK_TOTAL_MEMORY_MB = 8192

# Errors that mean "this one process cannot be sampled right now"
_PROCESS_ERRORS = (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess)


def resolve_total_memory_mb() -> int:
    """Return total physical memory in MB, or the fallback if unavailable."""
    try:
        total_mb = psutil.virtual_memory().total // BYTES_PER_MB
    except (OSError, psutil.Error):
        logger.warning(
            "Could not read total memory, assuming %d MB", FALLBACK_TOTAL_MEMORY_MB,
            exc_info=True,
        )
        return FALLBACK_TOTAL_MEMORY_MB

    if total_mb <= 0:
        logger.warning("Total memory reported as %d MB, assuming %d MB",
                       total_mb, FALLBACK_TOTAL_MEMORY_MB)
        return FALLBACK_TOTAL_MEMORY_MB
    return total_mb


def _read_cpu_time(proc: Any) -> float | None:
    """Cumulative user + system CPU seconds, or None if unreadable."""
    try:
        with proc.oneshot():
            times = proc.cpu_times()
    except _PROCESS_ERRORS:
        return None
    return times.user + times.system


def _resample(proc: Any, cpu_time_1: float) -> ProcessSample | None:
    """Take the second reading of a process, or None if it is gone."""
    try:
        if not proc.is_running():
            return None
        with proc.oneshot():
            times = proc.cpu_times()
            memory = proc.memory_info()
    except _PROCESS_ERRORS:
        return None

    return ProcessSample(
        pid=proc.pid,
        name=proc.info.get("name") or "",
        cpu_time_1=cpu_time_1,
        cpu_time_2=times.user + times.system,
        memory_rss=memory.rss,
    )


class UsageSampler:
    """
    Estimates per-process CPU usage from two snapshots taken one interval apart.

    The wait between the snapshots is the only intentional block in a cycle.
    Processes that exit or deny access between the snapshots are left out of
    the result.
    """

    def __init__(
        self,
        interval: float = 1.0,
        *,
        core_count: int | None = None,
        wait: Callable[[float], Any] = time.sleep,
        process_iter: Callable[..., Iterable[Any]] = psutil.process_iter,
    ) -> None:
        """
        Initialize the UsageSampler.

        Args:
            interval: Seconds between the two CPU time snapshots.
            core_count: Logical CPU count; detected with psutil when None.
            wait: Blocking wait used between the snapshots.
            process_iter: Process enumeration function (psutil.process_iter).
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._core_count = core_count or psutil.cpu_count(logical=True) or 1
        self._wait = wait
        self._process_iter = process_iter

    @property
    def interval(self) -> float:
        """Seconds between the two snapshots."""
        return self._interval

    @property
    def core_count(self) -> int:
        """Logical CPU count used to normalise usage."""
        return self._core_count

    def sample(self) -> list[ProcessRecord]:
        """
        Run one sampling cycle.

        Returns:
            One record per process readable in both snapshots, in
            enumeration order. Empty if the process list cannot be read.
        """
        try:
            processes = list(self._process_iter(attrs=["pid", "name"]))
        except (OSError, psutil.Error):
            logger.warning("Process enumeration failed", exc_info=True)
            return []

        first: list[tuple[Any, float]] = []
        for proc in processes:
            cpu_time = _read_cpu_time(proc)
            if cpu_time is not None:
                first.append((proc, cpu_time))

        self._wait(self._interval)

        samples = [_resample(proc, cpu_time) for proc, cpu_time in first]
        return [
            sample.to_record(self._interval, self._core_count)
            for sample in samples
            if sample is not None
        ]
