"""Build orchestration: resolve, compile, assemble, and persist a circuit build.

Errors before compilation (resolving the function, provider, or inputs) and
while persisting propagate to the caller. A compilation failure is logged and
reported through ``BuildOutcome`` without writing an artifact.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from ._artifact import build_artifact
from ._circuit import CircuitHandle
from ._discover import load_circuit_function
from ._errors import CompilationError
from ._inputs import resolve_inputs
from ._models import CircuitConfig
from ._provider import resolve_provider
from ._writer import write_artifact

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._circuit import CircuitCompiler
    from ._models import BuildArtifact, CircuitFunction

    CircuitLoader = Callable[[str | Path, str | None], CircuitFunction]

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CompileOptions:
    """Options for a single build.

    Attributes:
        function: Name of the exported circuit function (defaults to 'circuit')
        inputs: Path to a JSON file with circuit inputs. Overrides default inputs
        output: Output file or directory for the artifact (defaults to ./build.json)
        provider: Provider URI (defaults to the PROVIDER_URI environment variable)

    """

    function: str | None = None
    inputs: Path | None = None
    output: Path | None = None
    provider: str | None = None


class OutcomeKind(StrEnum):
    """Terminal outcome of a build."""

    ARTIFACT_WRITTEN = "artifact_written"
    COMPILATION_FAILED = "compilation_failed"


@dataclass(slots=True, frozen=True)
class BuildOutcome:
    """Result of a build that did not fail fatally."""

    kind: OutcomeKind
    artifact: BuildArtifact | None = None
    output_path: Path | None = None
    error: CompilationError | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.ARTIFACT_WRITTEN


async def build_circuit(
    fn: CircuitFunction,
    options: CompileOptions,
    *,
    compiler: CircuitCompiler | None = None,
) -> BuildOutcome:
    """Build an already loaded circuit function.

    Raises:
        ResolutionError: If the provider or the inputs file cannot be resolved
        MissingInputsError: If no inputs are available; nothing is compiled
        WriteError: If the artifact cannot be written

    """
    provider = resolve_provider(options.provider)
    inputs = await asyncio.to_thread(resolve_inputs, fn, options.inputs)

    config = CircuitConfig.from_options(provider=provider, mock=True, should_time=True)
    handle = CircuitHandle(fn, config, compiler=compiler)

    try:
        result = await handle.compile(inputs)
    except CompilationError as e:
        logger.error(f"Compilation of '{fn.name}' failed: {e}", exc_info=e)
        return BuildOutcome(kind=OutcomeKind.COMPILATION_FAILED, error=e)

    artifact = build_artifact(result, fn)
    output_path = await asyncio.to_thread(write_artifact, artifact, options.output)
    return BuildOutcome(kind=OutcomeKind.ARTIFACT_WRITTEN, artifact=artifact, output_path=output_path)


async def compile_circuit(
    path: str | Path,
    options: CompileOptions | None = None,
    *,
    loader: CircuitLoader | None = None,
    compiler: CircuitCompiler | None = None,
) -> BuildOutcome:
    """Compile the circuit function at ``path`` and write its build artifact.

    Args:
        path: Path to a Python script or module path (e.g., 'examples.double:circuit')
        options: Build options
        loader: Function loader. Defaults to ``load_circuit_function``
        compiler: Compilation engine. Defaults to ``MockCompiler``

    Returns:
        BuildOutcome with kind ARTIFACT_WRITTEN, or COMPILATION_FAILED if the
        compile step failed (in which case no artifact is written)

    Raises:
        ResolutionError: If the function, provider, or inputs file cannot be resolved
        MissingInputsError: If no inputs are available
        WriteError: If the artifact cannot be written

    """
    if options is None:
        options = CompileOptions()
    if loader is None:
        loader = load_circuit_function

    fn = await asyncio.to_thread(loader, path, options.function)
    logger.debug(f"Loaded circuit function '{fn.name}' (import name '{fn.import_name}')")
    return await build_circuit(fn, options, compiler=compiler)


def compile_circuit_sync(
    path: str | Path,
    options: CompileOptions | None = None,
    *,
    loader: CircuitLoader | None = None,
    compiler: CircuitCompiler | None = None,
) -> BuildOutcome:
    """Run ``compile_circuit`` to completion in a new event loop."""
    return asyncio.run(compile_circuit(path, options, loader=loader, compiler=compiler))
