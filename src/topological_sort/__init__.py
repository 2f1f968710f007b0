"""Incremental topological sorting."""

__all__ = [
    "CycleError",
    "DependencyFile",
    "InputFormatError",
    "TopologicalSort",
    "load_topological_sort",
    "load_topological_sort_from_toml",
    "parse_pairs",
    "parse_toml",
    "toml_to_topological_sort",
    "topological_batches",
    "topological_sort",
]

from ._errors import CycleError, InputFormatError
from ._graph import TopologicalSort, topological_batches, topological_sort
from ._io import (
    DependencyFile,
    load_topological_sort,
    load_topological_sort_from_toml,
    parse_pairs,
    parse_toml,
    toml_to_topological_sort,
)
