"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import get_args

from topological_sort._io import InputFormat


class ConfigError(Exception):
    """Error in toposort configuration."""


@dataclass(slots=True, frozen=True)
class ToposortConfig:
    """Configuration loaded from the [tool.toposort] table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    input: Path | None = None
    format: InputFormat = "auto"
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(pyproject_path: Path) -> ToposortConfig:
    """Load and validate [tool.toposort] config from pyproject.toml.

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("toposort", {})
    if not section:
        return ToposortConfig(project_root=project_root)

    input_path: Path | None = None
    if "input" in section:
        input_value = section["input"]
        if not isinstance(input_value, str):
            msg = "Invalid [tool.toposort].input: expected string path"
            raise ConfigError(msg)
        input_path = Path(input_value)
        if not input_path.is_absolute():
            input_path = project_root / input_path

    input_format = section.get("format", "auto")
    if input_format not in get_args(InputFormat):
        choices = ", ".join(repr(c) for c in get_args(InputFormat))
        msg = f"Invalid [tool.toposort].format {input_format!r}: expected one of {choices}"
        raise ConfigError(msg)

    return ToposortConfig(input=input_path, format=input_format, project_root=project_root)


def get_config() -> ToposortConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ToposortConfig (may be empty if no pyproject.toml or no [tool.toposort] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ToposortConfig()
    return load_config(pyproject_path)
