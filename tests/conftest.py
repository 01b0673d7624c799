from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for entry in (SRC, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point config to a temp path and drop IANITOR_* overrides from the environment."""
    cfg_path = tmp_path / "ianitorlint.toml"
    monkeypatch.setenv("IANITORLINT_CONFIG", str(cfg_path))
    for key in list(os.environ):
        if key.startswith("IANITOR_"):
            monkeypatch.delenv(key, raising=False)
    return cfg_path


@pytest.fixture(autouse=True)
def capture_console(monkeypatch: Any) -> Console:
    """Use an in-memory Rich console during tests."""
    test_console = Console(record=True, width=200)
    import ianitorlint.core.console as core_console
    import ianitorlint.main as main_module

    monkeypatch.setattr(core_console, "console", test_console)
    monkeypatch.setattr(main_module, "console", test_console)
    monkeypatch.setattr(main_module, "stderr_console", test_console)
    return test_console
