"""Utilities to discover circuit functions in scripts and modules.

This module was adapted from `fastapi_cli.discover` of package `fastapi-cli` version 0.0.8 (77e6d1f).
"""

from __future__ import annotations

import importlib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ._errors import ResolutionError
from ._models import CircuitFunction

if TYPE_CHECKING:
    from types import ModuleType

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_NAME = "circuit"
DEFAULT_INPUTS_NAME = "inputs"
INPUT_SCHEMA_NAME = "input_schema"
IMPORT_NAME_NAME = "IMPORT_NAME"


@dataclass
class ModuleData:
    """Module data for a Python module."""

    module_import_str: str
    extra_sys_path: Path
    module_paths: list[Path]


def get_module_data_from_path(path: Path) -> ModuleData:
    """Get module data from a file path.

    Args:
        path: Path to a Python file or package

    Returns:
        ModuleData containing module import information

    """
    use_path = path.resolve()
    module_path = use_path
    if use_path.is_file() and use_path.stem == "__init__":
        module_path = use_path.parent
    module_paths = [module_path]
    extra_sys_path = module_path.parent
    for parent in module_path.parents:
        init_path = parent / "__init__.py"
        if init_path.is_file():
            module_paths.insert(0, parent)
            extra_sys_path = parent.parent
        else:
            break

    module_str = ".".join(p.stem for p in module_paths)
    return ModuleData(
        module_import_str=module_str,
        extra_sys_path=extra_sys_path.resolve(),
        module_paths=module_paths,
    )


def _import_module(module_name: str) -> ModuleType:
    try:
        return importlib.import_module(module_name)
    except Exception as e:  # noqa: BLE001 - user code may raise anything at import time
        msg = f"Could not import circuit module '{module_name}': {e}"
        raise ResolutionError(msg) from e


def import_script_module(script_path: Path) -> ModuleType:
    """Import a Python script, putting its package root on ``sys.path``."""
    if not script_path.is_file():
        msg = f"Circuit file not found: {script_path}"
        raise ResolutionError(msg)

    module_data = get_module_data_from_path(script_path)
    extra = str(module_data.extra_sys_path)
    if extra in sys.path:
        sys.path.remove(extra)
    sys.path.insert(0, extra)

    # A cached module of the same name from another file would shadow this script
    cached = sys.modules.get(module_data.module_import_str)
    cached_file = getattr(cached, "__file__", None)
    if cached is not None and (cached_file is None or Path(cached_file).resolve() != script_path.resolve()):
        logger.debug(f"Dropping cached module {module_data.module_import_str} loaded from {cached_file}")
        del sys.modules[module_data.module_import_str]
        importlib.invalidate_caches()

    logger.debug(f"Importing {module_data.module_import_str} from {module_data.extra_sys_path}")
    try:
        return _import_module(module_data.module_import_str)
    except ResolutionError:
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise


def circuit_function_from_module(module: ModuleType, function_name: str) -> CircuitFunction:
    """Build a CircuitFunction from a symbol exported by a module.

    A ``CircuitFunction`` export is used as is. A plain callable is combined
    with the module's ``inputs``, ``input_schema`` and ``IMPORT_NAME``
    exports; the import name defaults to the symbol name.
    """
    if not hasattr(module, function_name):
        msg = f"Could not find circuit function '{function_name}' in {module.__name__}"
        raise ResolutionError(msg)

    obj = getattr(module, function_name)
    if isinstance(obj, CircuitFunction):
        return obj
    if not callable(obj):
        msg = f"'{function_name}' in {module.__name__} is not callable"
        raise ResolutionError(msg)

    input_schema: Any = getattr(module, INPUT_SCHEMA_NAME, None)
    if input_schema is not None and not (isinstance(input_schema, type) and issubclass(input_schema, BaseModel)):
        msg = f"'{INPUT_SCHEMA_NAME}' in {module.__name__} must be a pydantic BaseModel subclass"
        raise ResolutionError(msg)

    inputs = getattr(module, DEFAULT_INPUTS_NAME, None)
    if isinstance(inputs, BaseModel):
        inputs = inputs.model_dump(mode="json")

    import_name = getattr(module, IMPORT_NAME_NAME, function_name)
    if not isinstance(import_name, str):
        msg = f"'{IMPORT_NAME_NAME}' in {module.__name__} must be a string, got {type(import_name).__name__}"
        raise ResolutionError(msg)

    try:
        return CircuitFunction(
            circuit=obj,
            import_name=import_name,
            input_schema=input_schema,
            inputs=inputs,
        )
    except ValueError as e:
        msg = f"Invalid circuit function '{function_name}' in {module.__name__}: {e}"
        raise ResolutionError(msg) from e


def load_circuit_function(path: str | Path, function_name: str | None = None) -> CircuitFunction:
    """Load a circuit function from a script path or a module path.

    Args:
        path: Path to a Python script, or module path (e.g., 'examples.double:circuit').
            A symbol given after ':' takes precedence over ``function_name``.
        function_name: Name of the exported circuit function. Defaults to 'circuit'

    Returns:
        The loaded CircuitFunction

    Raises:
        ResolutionError: If the module cannot be imported or the function cannot be found

    """
    path_str = str(path)
    if ":" in path_str and not Path(path_str).exists():
        module_name, symbol = path_str.split(":", 1)
        module = _import_module(module_name)
        return circuit_function_from_module(module, symbol or function_name or DEFAULT_FUNCTION_NAME)

    module = import_script_module(Path(path_str))
    return circuit_function_from_module(module, function_name or DEFAULT_FUNCTION_NAME)
