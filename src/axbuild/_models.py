from __future__ import annotations

import base64
import binascii
import inspect
import textwrap
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from ._errors import ArtifactFormatError, ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from typing import Self

    from pydantic import BaseModel

    from ._provider import Provider

CompilationResult = dict[str, Any]
CircuitInputs = dict[str, Any]


def _read_source(func: Callable[..., Any]) -> str:
    try:
        return textwrap.dedent(inspect.getsource(func))
    except (OSError, TypeError) as e:
        msg = f"Could not read the source of circuit function {getattr(func, '__name__', func)!r}"
        raise ValueError(msg) from e


@dataclass(slots=True, frozen=True)
class CircuitFunction:
    """A circuit function together with its input schema and default inputs.

    Example:
        class DoubleInputs(BaseModel):
            x: int

        def double(x: int) -> int:
            return 2 * x

        fn = CircuitFunction(double, import_name="double", input_schema=DoubleInputs, inputs={"x": 3})

    When ``source`` is omitted it is read from the function definition with
    ``inspect.getsource`` and dedented, so nested definitions stay loadable.
    """

    circuit: Callable[..., Any]
    import_name: str
    input_schema: type[BaseModel] | None = None
    inputs: Mapping[str, Any] | None = None
    source: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.import_name, str) or not self.import_name.isidentifier():
            msg = f"Invalid import name {self.import_name!r}: must be a valid identifier"
            raise ValueError(msg)
        if not self.source:
            # Use object.__setattr__ since the dataclass is frozen
            object.__setattr__(self, "source", _read_source(self.circuit))

    @property
    def name(self) -> str:
        return getattr(self.circuit, "__name__", self.import_name)


@dataclass(slots=True, frozen=True)
class CircuitConfig:
    """Options a circuit handle is constructed with.

    Only the names in ``RECOGNIZED_OPTIONS`` are accepted.
    """

    RECOGNIZED_OPTIONS: ClassVar[frozenset[str]] = frozenset({"provider", "mock", "should_time"})

    provider: Provider
    mock: bool = True
    should_time: bool = True

    @classmethod
    def from_options(cls, **options: Any) -> Self:
        """Build a config from keyword options, rejecting unrecognized names."""
        unknown = sorted(set(options) - cls.RECOGNIZED_OPTIONS)
        if unknown:
            msg = f"Unrecognized circuit option(s): {', '.join(unknown)}"
            raise ConfigError(msg)
        if "provider" not in options:
            msg = "Circuit option 'provider' is required"
            raise ConfigError(msg)
        return cls(**options)


@dataclass(slots=True, frozen=True)
class EncodedSource:
    """Raw circuit source bytes tagged with the text encoding used in artifacts."""

    ENCODING: ClassVar[str] = "base64"

    raw: bytes
    encoding: str = ENCODING

    def __post_init__(self) -> None:
        if self.encoding != self.ENCODING:
            msg = f"Unsupported source encoding: {self.encoding!r}"
            raise ArtifactFormatError(msg)

    @classmethod
    def from_source(cls, text: str) -> Self:
        return cls(raw=text.encode("utf-8"))

    @classmethod
    def from_text(cls, encoded: str) -> Self:
        """Decode the base64 text stored in an artifact's ``circuit`` field."""
        try:
            raw = base64.b64decode(encoded.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            msg = "Circuit field is not valid base64 text"
            raise ArtifactFormatError(msg) from e
        return cls(raw=raw)

    def to_text(self) -> str:
        return base64.b64encode(self.raw).decode("ascii")

    def decode(self) -> str:
        try:
            return self.raw.decode("utf-8")
        except UnicodeDecodeError as e:
            msg = "Circuit source is not valid UTF-8"
            raise ArtifactFormatError(msg) from e


@dataclass(slots=True, frozen=True)
class BuildArtifact:
    """Compilation result fields plus the encoded circuit source."""

    CIRCUIT_FIELD: ClassVar[str] = "circuit"

    result: CompilationResult
    circuit: EncodedSource

    def to_dict(self) -> dict[str, Any]:
        # The encoded source is written last so it replaces any `circuit` key in the result
        return {**self.result, self.CIRCUIT_FIELD: self.circuit.to_text()}
