import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._errors import InputFormatError
from ._graph import TopologicalSort

logger = logging.getLogger(__name__)

InputFormat = Literal["auto", "toml", "pairs"]


class DependencyFile(BaseModel):
    """Schema of a TOML dependency file.

    Example:
        elements = ["standalone"]

        [dependencies]
        hello_world = ["hello_world.o", "hello_world.c"]
        "hello_world.o" = ["stdio.h"]

    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    elements: list[str] = Field(default_factory=list, description="Elements tracked with or without edges")
    dependencies: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Mapping from an element to the elements that must come before it",
    )

    def to_topological_sort(self) -> TopologicalSort[str]:
        """Build a graph from this file's contents."""
        ts: TopologicalSort[str] = TopologicalSort()
        for elt in self.elements:
            ts.insert(elt)
        for succ, precs in self.dependencies.items():
            ts.insert(succ)
            for prec in precs:
                ts.add_dependency(prec, succ)
        return ts


def toml_to_topological_sort(toml_contents: dict[str, Any]) -> TopologicalSort[str]:
    """Validate parsed TOML contents and build a graph from them.

    Raises:
        InputFormatError: If the contents do not match DependencyFile.

    """
    try:
        dependency_file = DependencyFile.model_validate(toml_contents)
    except ValidationError as e:
        msg = f"Invalid dependency file: {e}"
        raise InputFormatError(msg) from e
    return dependency_file.to_topological_sort()


def parse_pairs(text: str) -> TopologicalSort[str]:
    """Build a graph from whitespace-separated ``predecessor successor`` pairs.

    This is the input format of ``tsort(1)``. A pair naming the same token
    twice only tracks that element.

    Raises:
        InputFormatError: If the number of tokens is odd.

    """
    tokens = text.split()
    if len(tokens) % 2:
        msg = f"Input contains an odd number of tokens ({len(tokens)}); expected predecessor/successor pairs"
        raise InputFormatError(msg)

    ts: TopologicalSort[str] = TopologicalSort()
    for prec, succ in zip(tokens[::2], tokens[1::2], strict=True):
        if prec == succ:
            ts.insert(prec)
        else:
            ts.add_dependency(prec, succ)
    logger.debug(f"Parsed {len(tokens) // 2} pairs into {len(ts)} elements")
    return ts


def load_topological_sort_from_toml(input_path: Path | str) -> TopologicalSort[str]:
    """Load a graph from a TOML dependency file.

    Raises:
        InputFormatError: If the file is not valid TOML or does not match DependencyFile.

    """
    input_path = Path(input_path)
    with input_path.open("rb") as f:
        try:
            toml_contents = tomllib.load(f)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            msg = f"Invalid TOML in {input_path}: {e}"
            raise InputFormatError(msg) from e

    ts = toml_to_topological_sort(toml_contents)
    logger.debug(f"Loaded {len(ts)} elements from {input_path}")
    return ts


def parse_toml(text: str) -> TopologicalSort[str]:
    """Build a graph from the text of a TOML dependency file.

    Raises:
        InputFormatError: If the text is not valid TOML or does not match DependencyFile.

    """
    try:
        toml_contents = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML: {e}"
        raise InputFormatError(msg) from e
    return toml_to_topological_sort(toml_contents)


def load_topological_sort(input_path: Path | str, input_format: InputFormat = "auto") -> TopologicalSort[str]:
    """Load a graph from a file in either supported format.

    With ``input_format="auto"`` files ending in ``.toml`` are read as TOML
    and everything else as pairs.

    Raises:
        InputFormatError: If the file is not valid UTF-8 or not valid in its format.

    """
    input_path = Path(input_path)
    if input_format == "toml" or (input_format == "auto" and input_path.suffix == ".toml"):
        return load_topological_sort_from_toml(input_path)

    try:
        text = input_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        msg = f"Input {input_path} is not valid UTF-8: {e}"
        raise InputFormatError(msg) from e
    ts = parse_pairs(text)
    logger.debug(f"Loaded {len(ts)} elements from {input_path}")
    return ts
