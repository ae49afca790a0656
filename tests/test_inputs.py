"""Tests for input resolution in axbuild._inputs."""

import json
from pathlib import Path

import pytest

from axbuild import CircuitFunction, InputsFileError, MissingInputsError, ResolutionError
from axbuild._inputs import load_inputs_from_json, resolve_inputs


def double(x: int) -> int:
    return 2 * x


def _fn(inputs: dict | None) -> CircuitFunction:
    return CircuitFunction(double, import_name="double", inputs=inputs)


class TestLoadInputsFromJson:
    def test_loads_object(self, tmp_path: Path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"x": 5, "nested": {"values": [1, 2]}}))

        assert load_inputs_from_json(path) == {"x": 5, "nested": {"values": [1, 2]}}

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(InputsFileError, match="Could not read inputs file"):
            load_inputs_from_json(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text("{not json")

        with pytest.raises(InputsFileError, match="Invalid JSON"):
            load_inputs_from_json(path)

    def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(InputsFileError, match="must contain a JSON object"):
            load_inputs_from_json(path)

    def test_inputs_file_error_is_resolution_error(self) -> None:
        assert issubclass(InputsFileError, ResolutionError)


class TestResolveInputs:
    def test_uses_default_inputs_without_file(self) -> None:
        assert resolve_inputs(_fn({"x": 3})) == {"x": 3}

    def test_file_overrides_default_inputs(self, tmp_path: Path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"x": 10}))

        assert resolve_inputs(_fn({"x": 3}), path) == {"x": 10}

    def test_file_content_is_used_verbatim(self, tmp_path: Path) -> None:
        """Keys missing from the file are not filled in from the defaults."""
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"y": 1}))

        assert resolve_inputs(_fn({"x": 3}), path) == {"y": 1}

    def test_file_used_when_no_default_inputs(self, tmp_path: Path) -> None:
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"x": 7}))

        assert resolve_inputs(_fn(None), str(path)) == {"x": 7}

    def test_missing_inputs_raises(self) -> None:
        with pytest.raises(MissingInputsError, match="No inputs provided"):
            resolve_inputs(_fn(None))

    def test_empty_default_inputs_are_used(self) -> None:
        assert resolve_inputs(_fn({})) == {}

    def test_defaults_are_copied(self) -> None:
        defaults = {"x": 3, "nested": {"y": [1]}}
        fn = _fn(defaults)

        resolved = resolve_inputs(fn)
        resolved["nested"]["y"].append(2)

        assert defaults == {"x": 3, "nested": {"y": [1]}}
