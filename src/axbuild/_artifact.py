"""Assemble build artifacts from compilation results and circuit source.

The circuit source is stored as a self-contained snippet: an import-binding
header line followed by the function source. Consumers substitute
``AXIOM_CLIENT_IMPORT`` with a real module reference before loading it.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ._errors import ArtifactFormatError
from ._models import BuildArtifact, EncodedSource

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

    from ._models import CircuitFunction

logger = logging.getLogger(__name__)

CLIENT_IMPORT_TOKEN = "AXIOM_CLIENT_IMPORT"

_HEADER_RE = re.compile(rf"^const (?P<name>\S+) = {CLIENT_IMPORT_TOKEN}$")


def import_binding_line(import_name: str) -> str:
    return f"const {import_name} = {CLIENT_IMPORT_TOKEN}"


def build_source_snippet(fn: CircuitFunction) -> str:
    """Return the import-binding header and the circuit source, joined by a newline."""
    return f"{import_binding_line(fn.import_name)}\n{fn.source}"


def build_artifact(result: Mapping[str, Any], fn: CircuitFunction) -> BuildArtifact:
    """Combine a compilation result with the encoded circuit source.

    The result mapping is copied, never mutated. A ``circuit`` field in the
    result is replaced by the encoded source.
    """
    snippet = build_source_snippet(fn)
    encoded = EncodedSource.from_source(snippet)
    if BuildArtifact.CIRCUIT_FIELD in result:
        logger.debug(f"Compilation result field '{BuildArtifact.CIRCUIT_FIELD}' is replaced by the encoded source")
    return BuildArtifact(result=dict(result), circuit=encoded)


def decode_circuit_source(encoded: str) -> tuple[str, str]:
    """Decode an artifact's ``circuit`` field.

    Args:
        encoded: The base64 text stored in the artifact

    Returns:
        Tuple of (import name, circuit source without the header line)

    Raises:
        ArtifactFormatError: If the text is not base64, not UTF-8, or lacks the header line

    """
    snippet = EncodedSource.from_text(encoded).decode()
    header, sep, source = snippet.partition("\n")
    match = _HEADER_RE.match(header)
    if match is None or not sep or not match.group("name").isidentifier():
        msg = f"Circuit source does not start with an import binding for {CLIENT_IMPORT_TOKEN}"
        raise ArtifactFormatError(msg)
    return match.group("name"), source
