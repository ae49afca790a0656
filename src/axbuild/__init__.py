"""Build pipeline for circuit functions."""

__all__ = [
    "CLIENT_IMPORT_TOKEN",
    "DEFAULT_ARTIFACT_NAME",
    "ArtifactFormatError",
    "AxbuildError",
    "BuildArtifact",
    "BuildOutcome",
    "CircuitCompiler",
    "CircuitConfig",
    "CircuitFunction",
    "CircuitHandle",
    "CompilationError",
    "CompileOptions",
    "ConfigError",
    "EncodedSource",
    "InputsFileError",
    "MissingInputsError",
    "MockCompiler",
    "OutcomeKind",
    "Provider",
    "ResolutionError",
    "WriteError",
    "build_artifact",
    "build_circuit",
    "build_source_snippet",
    "compile_circuit",
    "compile_circuit_sync",
    "decode_circuit_source",
    "load_circuit_function",
    "load_inputs_from_json",
    "read_artifact",
    "resolve_inputs",
    "resolve_output_path",
    "resolve_provider",
    "write_artifact",
]

from ._artifact import CLIENT_IMPORT_TOKEN, build_artifact, build_source_snippet, decode_circuit_source
from ._build import BuildOutcome, CompileOptions, OutcomeKind, build_circuit, compile_circuit, compile_circuit_sync
from ._circuit import CircuitCompiler, CircuitHandle, MockCompiler
from ._discover import load_circuit_function
from ._errors import (
    ArtifactFormatError,
    AxbuildError,
    CompilationError,
    ConfigError,
    InputsFileError,
    MissingInputsError,
    ResolutionError,
    WriteError,
)
from ._inputs import load_inputs_from_json, resolve_inputs
from ._models import BuildArtifact, CircuitConfig, CircuitFunction, EncodedSource
from ._provider import Provider, resolve_provider
from ._writer import DEFAULT_ARTIFACT_NAME, read_artifact, resolve_output_path, write_artifact
