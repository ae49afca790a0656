from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ._errors import ArtifactFormatError, WriteError

if TYPE_CHECKING:
    from ._models import BuildArtifact

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_NAME = "build.json"


def resolve_output_path(destination: Path | str | None = None) -> Path:
    """Resolve where an artifact is written.

    - ``None``: ``build.json`` in the current working directory
    - an existing directory, or a path without a suffix: ``build.json`` inside it
    - anything else: the path itself
    """
    if destination is None:
        return Path.cwd() / DEFAULT_ARTIFACT_NAME

    destination = Path(destination)
    if destination.is_dir() or not destination.suffix:
        return destination / DEFAULT_ARTIFACT_NAME
    return destination


def write_artifact(artifact: BuildArtifact, destination: Path | str | None = None) -> Path:
    """Serialize a build artifact to JSON and write it.

    Args:
        artifact: The artifact to persist
        destination: Output file or directory (see ``resolve_output_path``)

    Returns:
        The path the artifact was written to

    Raises:
        WriteError: If the artifact cannot be serialized or written. Not retried.

    """
    output_path = resolve_output_path(destination)
    creates_directory = destination is not None and output_path.parent == Path(destination)

    try:
        text = json.dumps(artifact.to_dict(), indent=2, allow_nan=False)
    except (TypeError, ValueError) as e:
        msg = f"Build artifact is not JSON serializable: {e}"
        raise WriteError(msg, path=output_path) from e

    try:
        if creates_directory:
            # Directory targets are created, but only one level deep
            output_path.parent.mkdir(exist_ok=True)
        _replace_atomically(output_path, text + "\n")
    except OSError as e:
        msg = f"Could not write build artifact to {output_path}: {e}"
        raise WriteError(msg, path=output_path) from e

    logger.debug(f"Wrote build artifact to {output_path}")
    return output_path


def _replace_atomically(path: Path, text: str) -> None:
    # Write next to the target so the final rename stays on one filesystem
    fd, name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(name)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(text)
        tmp_path.chmod(0o644)
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def read_artifact(path: Path | str) -> dict[str, Any]:
    """Read a build artifact written by ``write_artifact``.

    Raises:
        ArtifactFormatError: If the file cannot be read, or is not a JSON object with a string ``circuit`` field

    """
    path = resolve_output_path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        msg = f"Could not read build artifact {path}: {e}"
        raise ArtifactFormatError(msg) from e
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in build artifact {path}: {e}"
        raise ArtifactFormatError(msg) from e

    if not isinstance(data, dict) or not isinstance(data.get("circuit"), str):
        msg = f"Build artifact {path} has no encoded 'circuit' field"
        raise ArtifactFormatError(msg)
    return data
