"""Graph module providing the topological sorting engine.

This module contains:
- TopologicalSort[T]: A mutable dependency graph with incremental extraction
- topological_sort / topological_batches: One-shot helpers over successor mappings
"""

from ._algorithms import topological_batches, topological_sort
from ._topological_sort import TopologicalSort

__all__ = ["TopologicalSort", "topological_batches", "topological_sort"]
