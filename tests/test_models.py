"""Tests for proctop data models."""

import pytest

from proctop.models import (
    ProcessRecord,
    ProcessSample,
    SortDirection,
    SortField,
    SortState,
    cpu_usage_percent,
)


def test_process_record_creation():
    """Test ProcessRecord dataclass creation."""
    record = ProcessRecord(pid=123, name="test_process", cpu_percent=50.0, memory_mb=256)

    assert record.pid == 123
    assert record.name == "test_process"
    assert record.cpu_percent == 50.0
    assert record.memory_mb == 256


def test_process_record_is_frozen():
    """Test that ProcessRecord is immutable (frozen)."""
    record = ProcessRecord(pid=1, name="init", cpu_percent=0.1, memory_mb=10)

    with pytest.raises(AttributeError):
        record.pid = 999


def test_process_sample_uses_slots():
    """Test that ProcessSample uses __slots__ for memory efficiency."""
    sample = ProcessSample(pid=1, name="init", cpu_time_1=0.0, cpu_time_2=0.1, memory_rss=0)

    # Slots-based dataclasses don't have __dict__
    assert not hasattr(sample, "__dict__")


def test_sample_to_record_four_cores():
    """500ms of CPU over a 1s interval on 4 cores is 12.5%."""
    sample = ProcessSample(
        pid=42,
        name="worker",
        cpu_time_1=10.0,
        cpu_time_2=10.5,
        memory_rss=300 * 1024 * 1024,
    )

    record = sample.to_record(interval=1.0, core_count=4)

    assert record == ProcessRecord(pid=42, name="worker", cpu_percent=12.5, memory_mb=300)


def test_sample_to_record_truncates_memory_to_whole_megabytes():
    """Test memory is converted to integer megabytes, rounding down."""
    sample = ProcessSample(
        pid=1, name="p", cpu_time_1=0.0, cpu_time_2=0.0, memory_rss=2 * 1024 * 1024 - 1
    )

    assert sample.to_record(1.0, 1).memory_mb == 1


class TestCpuUsagePercent:
    """Tests for the CPU time delta estimator."""

    def test_single_core_full_load(self):
        assert cpu_usage_percent(1.0, 1.0, 1) == 100.0

    def test_negative_delta_floored_to_zero(self):
        """Test a backwards clock reading never produces negative usage."""
        assert cpu_usage_percent(-0.3, 1.0, 2) == 0.0

    def test_clamped_to_hundred(self):
        """Test deltas larger than the interval allows are clamped."""
        assert cpu_usage_percent(9.0, 1.0, 4) == 100.0

    @pytest.mark.parametrize("delta", [0.0, 0.001, 0.25, 0.999, 1.0, 3.7, 64.0, 1e6])
    @pytest.mark.parametrize("interval", [0.5, 1.0, 2.0])
    @pytest.mark.parametrize("cores", [1, 2, 8, 128])
    def test_always_within_bounds(self, delta, interval, cores):
        """Test the result never leaves [0, 100]."""
        assert 0.0 <= cpu_usage_percent(delta, interval, cores) <= 100.0

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            cpu_usage_percent(0.5, 0.0, 1)

    def test_rejects_zero_cores(self):
        with pytest.raises(ValueError):
            cpu_usage_percent(0.5, 1.0, 0)


def test_sort_state_defaults():
    """Test the table starts sorted by CPU, descending."""
    state = SortState()

    assert state.field is SortField.CPU
    assert state.direction is SortDirection.DESCENDING
