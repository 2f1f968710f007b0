"""Tests for loading dependency graphs from files."""

from pathlib import Path

import pytest

from topological_sort import (
    DependencyFile,
    InputFormatError,
    load_topological_sort,
    load_topological_sort_from_toml,
    parse_pairs,
    parse_toml,
    toml_to_topological_sort,
)

HELLO_WORLD_TOML = """
elements = ["README"]

[dependencies]
hello_world = ["hello_world.o", "hello_world.c", "glibc.so"]
"hello_world.o" = ["stdio.h"]
"""


class TestDependencyFile:
    def test_defaults_are_empty(self) -> None:
        dependency_file = DependencyFile()
        assert dependency_file.elements == []
        assert dependency_file.dependencies == {}
        assert dependency_file.to_topological_sort().is_empty()

    def test_successor_without_predecessors_is_tracked(self) -> None:
        ts = toml_to_topological_sort({"dependencies": {"alone": []}})
        assert ts.remaining() == frozenset({"alone"})

    def test_builds_graph(self) -> None:
        ts = toml_to_topological_sort(
            {"dependencies": {"b": ["a"], "c": ["a", "b"]}},
        )
        assert ts.pending_predecessors("c") == 2
        assert ts.static_order() == ["a", "b", "c"]

    def test_unknown_key_is_rejected(self) -> None:
        with pytest.raises(InputFormatError, match="Invalid dependency file"):
            toml_to_topological_sort({"depends": {"b": ["a"]}})

    def test_wrong_value_type_is_rejected(self) -> None:
        with pytest.raises(InputFormatError):
            toml_to_topological_sort({"dependencies": {"b": "a"}})


class TestParseToml:
    def test_builds_graph(self) -> None:
        ts = parse_toml('[dependencies]\nb = ["a"]\n')
        assert ts.static_order() == ["a", "b"]

    def test_invalid_toml(self) -> None:
        with pytest.raises(InputFormatError, match="Invalid TOML"):
            parse_toml("dependencies = [")


class TestParsePairs:
    def test_pairs(self) -> None:
        ts = parse_pairs("a b\nb c\n")
        assert list(ts) == ["a", "b", "c"]

    def test_pairs_may_span_lines(self) -> None:
        ts = parse_pairs("a\nb b\nc")
        assert ts.successors("a") == frozenset({"b"})
        assert ts.successors("b") == frozenset({"c"})

    def test_identical_pair_only_inserts(self) -> None:
        ts = parse_pairs("x x\na b")
        assert ts.remaining() == frozenset({"x", "a", "b"})
        assert ts.pending_predecessors("x") == 0

    def test_empty_input(self) -> None:
        assert parse_pairs("   \n").is_empty()

    def test_odd_token_count(self) -> None:
        with pytest.raises(InputFormatError, match="odd number of tokens"):
            parse_pairs("a b c")


class TestLoadFromFile:
    def test_load_toml(self, tmp_path: Path) -> None:
        input_path = tmp_path / "deps.toml"
        input_path.write_text(HELLO_WORLD_TOML)

        ts = load_topological_sort_from_toml(input_path)

        assert len(ts) == 6
        assert [sorted(batch) for batch in ts.batches()] == [
            ["README", "glibc.so", "hello_world.c", "stdio.h"],
            ["hello_world.o"],
            ["hello_world"],
        ]

    def test_load_invalid_toml(self, tmp_path: Path) -> None:
        input_path = tmp_path / "deps.toml"
        input_path.write_text("dependencies = [")

        with pytest.raises(InputFormatError, match="Invalid TOML"):
            load_topological_sort_from_toml(input_path)

    def test_auto_format_by_suffix(self, tmp_path: Path) -> None:
        toml_path = tmp_path / "deps.toml"
        toml_path.write_text(HELLO_WORLD_TOML)
        pairs_path = tmp_path / "deps.txt"
        pairs_path.write_text("a b\n")

        assert "hello_world" in load_topological_sort(toml_path)
        assert load_topological_sort(pairs_path).remaining() == frozenset({"a", "b"})

    def test_explicit_format_overrides_suffix(self, tmp_path: Path) -> None:
        input_path = tmp_path / "deps.toml"
        input_path.write_text("a b\n")

        ts = load_topological_sort(input_path, "pairs")

        assert ts.successors("a") == frozenset({"b"})

    def test_invalid_utf8_pairs(self, tmp_path: Path) -> None:
        input_path = tmp_path / "deps.txt"
        input_path.write_bytes(b"a \xff\n")

        with pytest.raises(InputFormatError, match="not valid UTF-8"):
            load_topological_sort(input_path)

    def test_invalid_utf8_toml(self, tmp_path: Path) -> None:
        input_path = tmp_path / "deps.toml"
        input_path.write_bytes(b'elements = ["\xff"]\n')

        with pytest.raises(InputFormatError, match="Invalid TOML"):
            load_topological_sort_from_toml(input_path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_topological_sort(tmp_path / "missing.txt")
