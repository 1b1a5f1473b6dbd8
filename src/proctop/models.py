"""Data models for proctop."""

from dataclasses import dataclass
from enum import Enum

BYTES_PER_MB = 1024 * 1024


def cpu_usage_percent(cpu_delta: float, interval: float, core_count: int) -> float:
    """
    Convert a cumulative CPU time delta into a percentage of machine capacity.

    Args:
        cpu_delta: CPU seconds consumed between the two snapshots.
        interval: Wall-clock seconds between the snapshots.
        core_count: Number of logical CPUs.

    Returns:
        The usage percentage, clamped to 0.0 - 100.0.
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    if core_count < 1:
        raise ValueError(f"core_count must be at least 1, got {core_count}")

    percent = 100.0 * max(cpu_delta, 0.0) / (interval * core_count)
    return min(max(percent, 0.0), 100.0)


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Per-cycle usage figures for one process."""

    pid: int
    name: str
    cpu_percent: float  # 0.0 - 100.0 of total machine capacity
    memory_mb: int


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Two CPU time readings and the resident memory of one process."""

    pid: int
    name: str
    cpu_time_1: float  # Seconds (user + system)
    cpu_time_2: float
    memory_rss: int  # Bytes

    def to_record(self, interval: float, core_count: int) -> ProcessRecord:
        """Derive the displayed record from the raw readings."""
        return ProcessRecord(
            pid=self.pid,
            name=self.name,
            cpu_percent=cpu_usage_percent(
                self.cpu_time_2 - self.cpu_time_1, interval, core_count
            ),
            memory_mb=self.memory_rss // BYTES_PER_MB,
        )


class SortField(Enum):
    """Fields the process table can be sorted by."""

    CPU = "cpu"
    MEMORY = "memory"


class SortDirection(Enum):
    """Sort order of the process table."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


@dataclass(slots=True)
class SortState:
    """Current sort mode. Written by the command controller only."""

    field: SortField = SortField.CPU
    direction: SortDirection = SortDirection.DESCENDING
