"""Build order for a small C program.

Run with ``python examples/build_order.py``. Every round only needs the
outputs of earlier rounds, so its members could be built in parallel.
"""

from topological_sort import CycleError, TopologicalSort

ts: TopologicalSort[str] = TopologicalSort()

# The object file needs its source and headers
ts.add_dependency("hello_world.c", "hello_world.o")
ts.add_dependency("stdio.h", "hello_world.o")

# Linking needs the object file and the C library
ts.add_dependency("hello_world.o", "hello_world")
ts.add_dependency("glibc.so", "hello_world")

ts.insert("README.md")

try:
    for i, batch in enumerate(ts.batches(), start=1):
        print(f"round {i}: {', '.join(sorted(batch))}")  # noqa: T201
except CycleError as e:
    print(f"cannot build: {sorted(e.remaining)} are stuck")  # noqa: T201
