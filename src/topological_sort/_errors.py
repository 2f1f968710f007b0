"""Exceptions raised by topological_sort."""

from collections.abc import Hashable, Iterable


class CycleError(ValueError):
    """Extraction stalled while elements remain in the graph.

    The stuck elements are available as ``remaining``. They include every
    element on a cycle as well as everything downstream of one.
    """

    def __init__(self, remaining: Iterable[Hashable]) -> None:
        self.remaining = frozenset(remaining)
        msg = f"Cycle detected in graph: {len(self.remaining)} element(s) can never become ready"
        super().__init__(msg)


class InputFormatError(ValueError):
    """Malformed dependency input."""
