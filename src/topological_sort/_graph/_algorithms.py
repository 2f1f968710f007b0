"""One-shot topological sorting over successor mappings."""

from collections.abc import Collection, Hashable, Mapping

from ._topological_sort import TopologicalSort


def _build[T: Hashable](successors: Mapping[T, Collection[T]]) -> TopologicalSort[T]:
    ts: TopologicalSort[T] = TopologicalSort()
    for node, deps in successors.items():
        ts.insert(node)
        for dep in deps:
            ts.add_dependency(node, dep)
    return ts


def topological_sort[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[T]:
    """Sort a graph topologically (dependencies before dependents).

    Given a graph represented as a mapping from nodes to their successors
    (nodes that depend on them), return nodes in an order where each node
    appears before all nodes that depend on it.

    Args:
        successors: Mapping from node to collection of nodes that depend on it.
            An edge (a -> b) means "b depends on a". Nodes that only appear
            as successors do not need their own key.

    Returns:
        List of nodes in topological order.

    Raises:
        CycleError: If the graph contains a cycle.

    Example:
        >>> # a -> b -> c means c depends on b, b depends on a
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']

    """
    return _build(successors).static_order()


def topological_batches[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[list[T]]:
    """Group a graph into rounds of nodes that can be processed together.

    Every node of a round depends only on nodes of earlier rounds.
    Order within a round is unspecified.

    Raises:
        CycleError: If the graph contains a cycle.

    """
    return _build(successors).batches()
