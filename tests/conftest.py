"""Shared pytest fixtures for the create-mvc-app test suite.

Provides reusable fixtures for:
- Generation requests covering every language/architecture combination
- Settings pointed at a temporary output directory
- Mock subprocess helpers for the external action runner
"""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from create_mvc_app.config import Settings
from create_mvc_app.scaffolder.models import (
    Architecture,
    GenerationRequest,
    LanguageVariant,
)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@pytest.fixture
def every_request() -> list[GenerationRequest]:
    """Every language x architecture x code-affecting toggle combination."""
    return [
        GenerationRequest(
            project_name="demo",
            language=language,
            architecture=architecture,
            dev_reload=dev_reload,
            starter_resource=starter,
            init_git=False,
            install_deps=False,
        )
        for language, architecture, dev_reload, starter in itertools.product(
            LanguageVariant, Architecture, (True, False), (True, False)
        )
    ]


@pytest.fixture
def make_request() -> Callable[..., GenerationRequest]:
    """Factory for requests with no external actions unless asked for."""
    def factory(**overrides: Any) -> GenerationRequest:
        values: dict[str, Any] = {
            "project_name": "demo",
            "language": LanguageVariant.UNTYPED,
            "architecture": Architecture.SIMPLE,
            "dev_reload": True,
            "starter_resource": False,
            "init_git": False,
            "install_deps": False,
        }
        values.update(overrides)
        return GenerationRequest(**values)

    return factory


@pytest.fixture
def demo_request(make_request) -> GenerationRequest:
    """The untyped, simple, nodemon-only request used in the walkthrough."""
    return make_request()


@pytest.fixture
def typed_layered_request(make_request) -> GenerationRequest:
    return make_request(
        language=LanguageVariant.TYPED,
        architecture=Architecture.LAYERED,
        starter_resource=True,
    )


# ---------------------------------------------------------------------------
# Settings & directories
# ---------------------------------------------------------------------------

@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory for generated projects (auto-cleanup)."""
    out = tmp_path / "output"
    out.mkdir()
    return out


@pytest.fixture
def settings(output_dir: Path) -> Settings:
    return Settings(output_dir=output_dir, interactive=False, stream_output=False)


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
