"""Incrementally maintained dependency graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from topological_sort._errors import CycleError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def _partial_cmp(a: Any, b: Any) -> int | None:
    """Compare two values under a partial order.

    Returns -1, 1 or 0 for less, greater or equal, and None when neither
    ``a < b``, ``a > b`` nor ``a == b`` holds.
    """
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        return None
    if a == b:
        return 0
    return None


@dataclass(slots=True)
class _Dependency[T]:
    """Bookkeeping for a single tracked element.

    Attributes:
        num_prec: Number of direct predecessors that have not been extracted yet.
        succ: Elements that directly depend on this one.

    """

    num_prec: int = 0
    succ: set[T] = field(default_factory=set)


class TopologicalSort[T]:
    """A mutable dependency graph that yields its elements in topological order.

    Every tracked element carries the number of predecessors that are still in
    the graph. An element is *ready* once that count drops to zero. Extracting
    a ready element removes it and decrements the count of each of its
    successors.

    The instance is its own iterator: ``next(ts)`` extracts one ready element
    and stops when nothing is ready. Iteration consumes the graph, so it cannot
    be restarted. If the graph is still non-empty after extraction stops, the
    remaining elements are stuck behind a cycle.

    Example:
        >>> ts = TopologicalSort()
        >>> ts.add_dependency("hello_world.o", "hello_world")
        >>> ts.add_dependency("hello_world.c", "hello_world")
        >>> ts.add_dependency("stdio.h", "hello_world.o")
        >>> ts.add_dependency("glibc.so", "hello_world")
        >>> sorted(ts.pop_all())
        ['glibc.so', 'hello_world.c', 'stdio.h']
        >>> ts.pop_all()
        ['hello_world.o']
        >>> ts.pop_all()
        ['hello_world']
        >>> ts.pop_all()
        []

    Instances are not thread-safe. Callers sharing one across threads must
    serialize access themselves.

    """

    __slots__ = ("_top",)

    def __init__(self) -> None:
        self._top: dict[T, _Dependency[T]] = {}

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[T, T]],
        elements: Iterable[T] = (),
    ) -> TopologicalSort[T]:
        """Build a graph from ``(predecessor, successor)`` pairs.

        Args:
            edges: Pairs where the first element must be extracted before the second.
            elements: Additional elements to track, with or without edges.

        Returns:
            A new TopologicalSort instance.

        """
        ts: TopologicalSort[T] = cls()
        for elt in elements:
            ts.insert(elt)
        for prec, succ in edges:
            ts.add_dependency(prec, succ)
        return ts

    @classmethod
    def from_iterable(cls, items: Iterable[T]) -> TopologicalSort[T]:
        """Build a graph from partially ordered items.

        Each new item is compared with every item seen before it. A strictly
        smaller item must come first, a strictly greater one must come later.
        Equal or incomparable pairs get no edge, and equal items collapse into
        a single tracked element. Pairs whose comparison raises TypeError
        (e.g. ``1`` and ``"a"``) count as incomparable.

        Example:
            >>> list(TopologicalSort.from_iterable([4, 3, 3, 5]))
            [3, 4, 5]

        """
        ts: TopologicalSort[T] = cls()
        seen: list[T] = []
        for item in items:
            ts.insert(item)
            for seen_item in seen:
                match _partial_cmp(seen_item, item):
                    case -1:
                        ts.add_dependency(seen_item, item)
                    case 1:
                        ts.add_dependency(item, seen_item)
            seen.append(item)
        logger.debug(f"Built graph of {len(ts)} elements from {len(seen)} items")
        return ts

    def __len__(self) -> int:
        """Return the number of tracked elements."""
        return len(self._top)

    def __contains__(self, elt: object) -> bool:
        return elt in self._top

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<{len(self._top)} elements>)"

    def is_empty(self) -> bool:
        """Return True if no elements are tracked."""
        return not self._top

    def insert(self, elt: T) -> bool:
        """Track an element without adding any dependencies from or to it.

        Returns:
            True if the element was newly added, False if it was already tracked.

        """
        if elt in self._top:
            return False
        self._top[elt] = _Dependency()
        return True

    def add_dependency(self, prec: T, succ: T) -> None:
        """Register that ``prec`` must be extracted before ``succ``.

        Both elements are tracked if they were not already. Registering the
        same pair again has no effect. ``add_dependency(x, x)`` is accepted
        and leaves ``x`` permanently unready.

        Args:
            prec: The element that comes first. ``succ`` depends on it.
            succ: The element that comes after ``prec``.

        """
        dep = self._top.get(prec)
        if dep is None:
            dep = self._top[prec] = _Dependency()
        elif succ in dep.succ:
            return
        dep.succ.add(succ)

        succ_dep = self._top.get(succ)
        if succ_dep is None:
            succ_dep = self._top[succ] = _Dependency()
        succ_dep.num_prec += 1

    def successors(self, elt: T) -> frozenset[T]:
        """Get the elements that directly depend on ``elt``.

        Successors that were already extracted may still be listed.
        Unknown elements have no successors.
        """
        dep = self._top.get(elt)
        if dep is None:
            return frozenset()
        return frozenset(dep.succ)

    def pending_predecessors(self, elt: T) -> int:
        """Get the number of direct predecessors of ``elt`` still in the graph.

        Raises:
            KeyError: If ``elt`` is not tracked.

        """
        return self._top[elt].num_prec

    def ready(self) -> frozenset[T]:
        """Get all elements whose predecessors have all been extracted."""
        return frozenset(k for k, v in self._top.items() if v.num_prec == 0)

    def remaining(self) -> frozenset[T]:
        """Get all tracked elements."""
        return frozenset(self._top)

    def pop(self) -> T | None:
        """Remove an element that no remaining element precedes and return it.

        Which ready element is chosen is unspecified.

        Returns:
            The removed element, or None if no element is ready. None with a
            non-empty graph means the remaining elements form or follow a cycle.

        """
        return next(self, None)

    def pop_all(self) -> list[T]:
        """Remove every currently ready element and return them, in no particular order.

        The ready set is taken before anything is removed, so elements that
        become ready during this call are left for the next one.

        Returns:
            The removed elements. An empty list with a non-empty graph means
            the remaining elements form or follow a cycle.

        """
        keys = [k for k, v in self._top.items() if v.num_prec == 0]
        for k in keys:
            self._remove(k)
        logger.debug(f"Extracted {len(keys)} ready element(s), {len(self._top)} remaining")
        return keys

    def static_order(self) -> list[T]:
        """Extract every element one at a time and return them in order.

        Raises:
            CycleError: If extraction stalls before the graph is empty. The
                elements extracted so far are gone from the graph.

        """
        order = list(self)
        self._raise_if_stalled()
        return order

    def batches(self) -> list[list[T]]:
        """Extract every element in rounds of simultaneously ready elements.

        Every element appears in a later round than all of its predecessors.

        Raises:
            CycleError: If extraction stalls before the graph is empty.

        """
        rounds: list[list[T]] = []
        while batch := self.pop_all():
            rounds.append(batch)
        self._raise_if_stalled()
        return rounds

    def __iter__(self) -> TopologicalSort[T]:
        return self

    def __next__(self) -> T:
        for key, dep in self._top.items():
            if dep.num_prec == 0:
                break
        else:
            raise StopIteration
        self._remove(key)
        return key

    def _remove(self, prec: T) -> _Dependency[T] | None:
        dep = self._top.pop(prec, None)
        if dep is not None:
            for s in dep.succ:
                # Already-extracted successors are skipped
                succ_dep = self._top.get(s)
                if succ_dep is not None:
                    succ_dep.num_prec -= 1
        return dep

    def _raise_if_stalled(self) -> None:
        if self._top:
            logger.debug(f"Extraction stalled with {len(self._top)} element(s) left")
            raise CycleError(self._top)
