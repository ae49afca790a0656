from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ._errors import InputsFileError, MissingInputsError

if TYPE_CHECKING:
    from ._models import CircuitFunction, CircuitInputs

logger = logging.getLogger(__name__)


def load_inputs_from_json(input_path: Path | str) -> dict[str, Any]:
    """Load circuit inputs from a JSON file.

    Args:
        input_path: Path to a JSON file whose top-level value is an object

    Returns:
        The parsed object, unchanged

    Raises:
        InputsFileError: If the file cannot be read, is not valid JSON, or does not hold an object

    """
    input_path = Path(input_path)

    try:
        with input_path.open("r", encoding="utf-8") as f:
            contents = json.load(f)
    except OSError as e:
        msg = f"Could not read inputs file {input_path}: {e}"
        raise InputsFileError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in inputs file {input_path}: {e}"
        raise InputsFileError(msg) from e

    if not isinstance(contents, dict):
        msg = f"Inputs file {input_path} must contain a JSON object, got {type(contents).__name__}"
        raise InputsFileError(msg)

    logger.debug(f"Loaded circuit inputs from {input_path}")
    return contents


def resolve_inputs(fn: CircuitFunction, inputs_path: Path | str | None = None) -> CircuitInputs:
    """Determine the inputs to compile a circuit with.

    An inputs file, when given, is the only source: its content is used as is,
    even if the circuit declares default inputs. Otherwise the declared
    defaults are used.

    Raises:
        MissingInputsError: If there is no inputs file and no default inputs

    """
    if inputs_path is not None:
        return load_inputs_from_json(inputs_path)

    if fn.inputs is None:
        raise MissingInputsError(fn.import_name)

    logger.debug(f"Using default inputs declared by '{fn.import_name}'")
    # Copy so the compiler cannot mutate the circuit's declared defaults
    return copy.deepcopy(dict(fn.inputs))
