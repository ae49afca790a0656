import uuid
from collections.abc import Callable
from pathlib import Path

import pytest

from axbuild import Provider

PROVIDER_URI = "http://localhost:8545"


@pytest.fixture
def provider() -> Provider:
    return Provider(uri=PROVIDER_URI)


@pytest.fixture(autouse=True)
def _clear_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PROVIDER_URI", raising=False)


@pytest.fixture
def write_circuit(tmp_path: Path) -> Callable[[str], Path]:
    """Write a circuit script under a unique module name and return its path."""

    def _write(code: str) -> Path:
        script = tmp_path / f"circuit_{uuid.uuid4().hex}.py"
        script.write_text(code)
        return script

    return _write
