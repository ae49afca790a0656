from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

from pydantic_core import to_jsonable_python

from ._errors import CompilationError

if TYPE_CHECKING:
    from ._models import CircuitConfig, CircuitFunction, CircuitInputs, CompilationResult

logger = logging.getLogger(__name__)


class CircuitCompiler(Protocol):
    """Compilation engine that turns a circuit and its inputs into a result record."""

    async def compile(
        self,
        fn: CircuitFunction,
        inputs: CircuitInputs,
        config: CircuitConfig,
    ) -> Mapping[str, Any]: ...


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


class MockCompiler:
    """Compiler that runs the circuit in mock mode.

    Inputs are validated against the circuit's input schema (if any) and the
    circuit is called with the validated fields as keyword arguments.
    """

    async def compile(
        self,
        fn: CircuitFunction,
        inputs: CircuitInputs,
        config: CircuitConfig,
    ) -> Mapping[str, Any]:
        if not config.mock:
            msg = "MockCompiler only supports mock mode"
            raise ValueError(msg)

        start = time.perf_counter()

        input_schema: dict[str, Any] | None = None
        if fn.input_schema is not None:
            validated = fn.input_schema.model_validate(inputs)
            kwargs = {name: getattr(validated, name) for name in type(validated).model_fields}
            input_schema = fn.input_schema.model_json_schema()
            normalized_inputs = validated.model_dump(mode="json")
        else:
            kwargs = dict(inputs)
            normalized_inputs = to_jsonable_python(inputs)
        validate_ms = _elapsed_ms(start)

        execute_start = time.perf_counter()
        output = fn.circuit(**kwargs)
        if inspect.isawaitable(output):
            output = await output
        execute_ms = _elapsed_ms(execute_start)

        result: dict[str, Any] = {
            "circuit_name": fn.name,
            "import_name": fn.import_name,
            "mock": config.mock,
            "input_schema": input_schema,
            "inputs": normalized_inputs,
            "output": to_jsonable_python(output),
        }
        if config.should_time:
            result["timings"] = {
                "validate_ms": validate_ms,
                "execute_ms": execute_ms,
                "total_ms": _elapsed_ms(start),
            }
        return result


class CircuitHandle:
    """A circuit bound to its schema, provider and compile options.

    Example:
        handle = CircuitHandle(fn, CircuitConfig(provider=provider))
        result = await handle.compile({"x": 3})

    """

    def __init__(
        self,
        fn: CircuitFunction,
        config: CircuitConfig,
        compiler: CircuitCompiler | None = None,
    ) -> None:
        self.fn = fn
        self.config = config
        self.compiler: CircuitCompiler = compiler if compiler is not None else MockCompiler()

    @property
    def input_schema(self) -> Any:
        return self.fn.input_schema

    async def compile(self, inputs: CircuitInputs) -> CompilationResult:
        """Compile the circuit against the given inputs.

        Raises:
            CompilationError: If the compiler fails for any reason; the
                original exception is available as ``cause``

        """
        logger.debug(
            f"Compiling '{self.fn.name}' (provider={self.config.provider}, mock={self.config.mock}, "
            f"should_time={self.config.should_time})",
        )
        try:
            result = await self.compiler.compile(self.fn, inputs, self.config)
        except CompilationError:
            raise
        except Exception as e:  # noqa: BLE001 - any compiler failure is a compilation error
            msg = f"Failed to compile circuit '{self.fn.name}': {e}"
            raise CompilationError(msg, cause=e) from e

        if not isinstance(result, Mapping):
            msg = f"Compiler returned {type(result).__name__}, expected a mapping"
            raise CompilationError(msg)

        return dict(result)
