"""Single-key command handling."""

from queue import Empty, Queue

from proctop.models import SortDirection, SortField, SortState


def apply_key(key: str, sort_state: SortState) -> bool:
    """
    Apply one command key to the sort state.

    Returns:
        False if the key requests termination, True otherwise.
    """
    command = key.upper()
    if command == "Q":
        return False
    if command == "C":
        sort_state.field = SortField.CPU
    elif command == "M":
        sort_state.field = SortField.MEMORY
    elif command == "D":
        sort_state.direction = SortDirection.DESCENDING
    elif command == "A":
        sort_state.direction = SortDirection.ASCENDING
    return True


class CommandController:
    """Consumes pending key presses without ever blocking."""

    def __init__(self, keys: Queue[str]) -> None:
        self._keys = keys

    def poll_and_apply(self, sort_state: SortState) -> bool:
        """
        Apply at most one pending key.

        Returns:
            False when the user asked to quit, True otherwise.
        """
        try:
            key = self._keys.get_nowait()
        except Empty:
            return True
        return apply_key(key, sort_state)
