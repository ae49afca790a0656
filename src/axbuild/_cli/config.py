"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from axbuild._errors import ConfigError

__all__ = ["AxbuildConfig", "ConfigError", "find_pyproject_toml", "get_config", "load_config"]


@dataclass(slots=True, frozen=True)
class AxbuildConfig:
    """Configuration loaded from the [tool.axbuild] section of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    ``circuit`` is either a script path or a module path ('pkg.module:symbol').
    """

    circuit: str | None = None
    function: str | None = None
    inputs: Path | None = None
    output: Path | None = None
    provider: str | None = None
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
            # Reached filesystem root
            return None
        current = parent


def _resolve_path(value: object, key: str, project_root: Path) -> Path:
    if not isinstance(value, str):
        msg = f"Invalid [tool.axbuild].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def _parse_circuit_source(value: object, project_root: Path) -> tuple[str, str | None]:
    """Parse the circuit field from config.

    Args:
        value: The raw value from TOML (string or dict)
        project_root: Project root directory for resolving relative paths

    Returns:
        Tuple of (circuit path or module path, function name)

    Raises:
        ConfigError: If the value format is invalid

    """
    if isinstance(value, str):
        # Module path format: "module.path:function"
        if ":" not in value:
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:function_name'"
            raise ConfigError(msg)
        return value, None

    if isinstance(value, dict):
        # Script path format: { script = "path.py", function = "circuit" }
        value_dict = cast("dict[str, object]", value)
        if "script" not in value_dict:
            msg = "Invalid [tool.axbuild].circuit configuration. Expected string or table with 'script' key."
            raise ConfigError(msg)

        script_path = _resolve_path(value_dict["script"], "circuit.script", project_root)

        function = value_dict.get("function")
        if function is not None and not isinstance(function, str):
            msg = "Invalid [tool.axbuild].circuit.function: expected string"
            raise ConfigError(msg)

        return str(script_path), function

    msg = "Invalid [tool.axbuild].circuit configuration. Expected string or table with 'script' key."
    raise ConfigError(msg)


def load_config(pyproject_path: Path) -> AxbuildConfig:
    """Load and validate [tool.axbuild] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed AxbuildConfig

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

    section = data.get("tool", {}).get("axbuild", {})

    if not section:
        # No [tool.axbuild] section - return empty config
        return AxbuildConfig(project_root=project_root)

    circuit: str | None = None
    function: str | None = None
    if "circuit" in section:
        circuit, function = _parse_circuit_source(section["circuit"], project_root)

    inputs = _resolve_path(section["inputs"], "inputs", project_root) if "inputs" in section else None
    output = _resolve_path(section["output"], "output", project_root) if "output" in section else None

    provider = section.get("provider")
    if provider is not None and not isinstance(provider, str):
        msg = "Invalid [tool.axbuild].provider: expected string"
        raise ConfigError(msg)

    return AxbuildConfig(
        circuit=circuit,
        function=function,
        inputs=inputs,
        output=output,
        provider=provider,
        project_root=project_root,
    )


def get_config() -> AxbuildConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        AxbuildConfig (may be empty if no pyproject.toml or no [tool.axbuild] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return AxbuildConfig()
    return load_config(pyproject_path)
