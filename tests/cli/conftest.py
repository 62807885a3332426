"""Shared fixtures for CLI tests."""

import json
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from loguru import logger
from rich.console import Console
from typer.testing import CliRunner

import cli.cli as cli_module


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> Iterator[CliRunner]:
    """CliRunner with a wide console; restores loguru's default sink afterwards."""
    monkeypatch.setattr(cli_module, "console", Console(width=200))
    yield CliRunner()
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def write_events(tmp_path: Path) -> Callable[[list[dict]], Path]:
    def _write(events: list[dict]) -> Path:
        path = tmp_path / "events.json"
        path.write_text(json.dumps(events), encoding="utf-8")
        return path

    return _write
