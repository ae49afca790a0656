"""Error taxonomy for the build pipeline.

Errors raised before compilation (resolution, missing inputs) and after it
(writing) are fatal and propagate to the caller. ``CompilationError`` is the
only recoverable kind: the orchestrator reports it through ``BuildOutcome``
instead of raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class AxbuildError(Exception):
    """Base class for all pipeline errors."""


class ResolutionError(AxbuildError):
    """A circuit function, provider, or inputs source could not be resolved."""


class InputsFileError(ResolutionError):
    """The inputs JSON file could not be read or does not hold an object."""


class MissingInputsError(AxbuildError):
    """Neither an inputs file nor default inputs are available."""

    def __init__(self, import_name: str | None = None) -> None:
        self.import_name = import_name
        msg = (
            "No inputs provided. Either export `inputs` from your circuit file "
            "or provide a path to a json file with inputs."
        )
        super().__init__(msg)


class CompilationError(AxbuildError):
    """The compile step failed (schema mismatch, provider or compiler failure)."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class WriteError(AxbuildError):
    """The build artifact could not be persisted."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ArtifactFormatError(AxbuildError):
    """A build artifact or its encoded circuit source is malformed."""


class ConfigError(AxbuildError):
    """Error in axbuild configuration."""
