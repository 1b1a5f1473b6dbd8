"""Ordering of process records for display."""

from collections.abc import Iterable

from proctop.models import ProcessRecord, SortDirection, SortField, SortState

_SORT_KEYS = {
    SortField.CPU: lambda record: record.cpu_percent,
    SortField.MEMORY: lambda record: record.memory_mb,
}


def rank(records: Iterable[ProcessRecord], sort_state: SortState) -> list[ProcessRecord]:
    """
    Sort records by the current field and direction.

    The sort is stable in both directions: records with equal keys keep
    their enumeration order.
    """
    return sorted(
        records,
        key=_SORT_KEYS[sort_state.field],
        reverse=sort_state.direction is SortDirection.DESCENDING,
    )
