"""Tests for the axbuild command line interface."""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

from axbuild import ArtifactFormatError, MissingInputsError, read_artifact
from axbuild._cli.main import app

runner = CliRunner()

DOUBLE_CIRCUIT = """\
inputs = {"x": 3}


def double(x):
    return 2 * x
"""


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


class TestCompileCommand:
    def test_writes_build_json(self, tmp_path: Path, write_circuit: Callable[[str], Path]) -> None:
        script = write_circuit(DOUBLE_CIRCUIT)

        result = runner.invoke(app, ["compile", str(script), "-f", "double", "-p", "http://localhost:8545"])

        assert result.exit_code == 0, result.output
        assert read_artifact(tmp_path / "build.json")["output"] == 6

    def test_output_directory_and_inputs_file(self, tmp_path: Path, write_circuit: Callable[[str], Path]) -> None:
        script = write_circuit(DOUBLE_CIRCUIT)
        inputs = tmp_path / "inputs.json"
        inputs.write_text(json.dumps({"x": 10}))

        result = runner.invoke(
            app,
            [
                "compile",
                str(script),
                "--function",
                "double",
                "--inputs",
                str(inputs),
                "--output",
                str(tmp_path / "out"),
                "--provider",
                "http://localhost:8545",
                "--stats",
            ],
        )

        assert result.exit_code == 0, result.output
        assert read_artifact(tmp_path / "out" / "build.json")["output"] == 20

    def test_compile_failure_exits_normally_without_artifact(
        self,
        tmp_path: Path,
        write_circuit: Callable[[str], Path],
    ) -> None:
        script = write_circuit('inputs = {"x": 1}\n\n\ndef circuit(x):\n    raise ValueError("boom")\n')

        result = runner.invoke(app, ["compile", str(script), "-p", "http://localhost:8545"])

        assert result.exit_code == 0
        assert "no build artifact was written" in result.output
        assert not (tmp_path / "build.json").exists()

    def test_missing_inputs_fails(self, tmp_path: Path, write_circuit: Callable[[str], Path]) -> None:
        script = write_circuit("def circuit(x):\n    return x\n")

        result = runner.invoke(app, ["compile", str(script), "-p", "http://localhost:8545"])

        assert result.exit_code != 0
        assert isinstance(result.exception, MissingInputsError)
        assert not (tmp_path / "build.json").exists()

    def test_uses_pyproject_config(self, tmp_path: Path, write_circuit: Callable[[str], Path]) -> None:
        script = write_circuit(DOUBLE_CIRCUIT)
        (tmp_path / "pyproject.toml").write_text(
            f"""
[tool.axbuild]
circuit = {{ script = "{script.name}", function = "double" }}
output = "dist"
provider = "http://localhost:8545"
""",
        )

        result = runner.invoke(app, ["compile"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "dist" / "build.json").is_file()

    def test_no_circuit_fails(self) -> None:
        result = runner.invoke(app, ["compile"])

        assert result.exit_code == 1
        assert "No circuit given" in result.output


class TestDecodeCommand:
    def test_writes_source_to_file(self, tmp_path: Path, write_circuit: Callable[[str], Path]) -> None:
        script = write_circuit(DOUBLE_CIRCUIT)
        runner.invoke(app, ["compile", str(script), "-f", "double", "-p", "http://localhost:8545"])

        result = runner.invoke(app, ["decode", str(tmp_path / "build.json"), "-o", str(tmp_path / "double.py")])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "double.py").read_text() == "def double(x):\n    return 2 * x\n"

    def test_prints_source(self, tmp_path: Path, write_circuit: Callable[[str], Path]) -> None:
        script = write_circuit(DOUBLE_CIRCUIT)
        runner.invoke(app, ["compile", str(script), "-f", "double", "-p", "http://localhost:8545"])

        result = runner.invoke(app, ["decode", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "def double(x):" in result.output

    def test_missing_build_file_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["decode", str(tmp_path / "missing.json")])

        assert result.exit_code != 0
        assert isinstance(result.exception, ArtifactFormatError)
