"""
Pytest configuration and fixtures for MCP Router testing.

Every test gets an isolated project directory with an empty ``.claude``
folder and an isolated output directory for generated configs.
"""

import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest
from rich.console import Console

from mcp_router.core.models import DisplayItem
from mcp_router.core.selector import SelectionPrompt
from mcp_router.utils.config import Config


class ScriptedPrompt(SelectionPrompt):
    """Selection prompt that returns a preset answer and records what it was shown."""

    def __init__(self, answer: Optional[List[str]]):
        self.answer = answer
        self.calls: List[List[DisplayItem]] = []

    def choose(self, items: Sequence[DisplayItem]) -> Optional[List[str]]:
        self.calls.append(list(items))
        return self.answer


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """Project root with an empty .claude directory."""
    root = tmp_path / "project"
    (root / ".claude").mkdir(parents=True)
    return root


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Directory for generated configs."""
    return tmp_path / "output"


@pytest.fixture
def write_source(project_dir):
    """Write a source file into the project's .claude directory."""

    def _write(name: str, servers: Optional[Dict[str, Any]] = None, raw: Optional[str] = None) -> Path:
        path = project_dir / ".claude" / name
        if raw is None:
            raw = json.dumps({"mcpServers": servers or {}}, indent=2)
        path.write_text(raw, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config(output_dir) -> Config:
    """Configuration writing into the isolated output directory."""
    return Config(output={"directory": str(output_dir)})


@pytest.fixture
def console() -> Console:
    """Console that records output in memory."""
    return Console(file=io.StringIO(), width=200, force_terminal=False)


def console_text(console: Console) -> str:
    """Text written to a console created by the console fixture."""
    return console.file.getvalue()
