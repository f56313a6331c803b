"""Unit tests for utility functions (create_mvc_app.utils).

Tests cover:
- run_command (success, failure, timeout, capture=False, missing binary)
- Rich output helpers
"""

from __future__ import annotations

import asyncio
import sys
from unittest.mock import AsyncMock, patch

import pytest

from create_mvc_app.utils import (
    create_progress,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "print('hello')"]
        )
        assert returncode == 0
        assert stdout == "hello"
        assert stderr == ""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_exit_code(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"]
        )
        assert returncode == 3
        assert stderr == "bad"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cwd(self, tmp_path):
        _, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert stdout == str(tmp_path)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_capture(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "pass"], capture=False
        )
        assert (returncode, stdout, stderr) == (0, "", "")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, mock_subprocess):
        proc = mock_subprocess()
        proc.communicate = AsyncMock(side_effect=asyncio.TimeoutError)
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
            returncode, _, stderr = await run_command(["sleep", "100"], timeout=1)
        assert returncode == -1
        assert "timed out after 1s" in stderr
        proc.kill.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_binary_raises(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["definitely-not-a-real-binary-cma"])


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_messages(self, capsys):
        print_info("info line")
        print_success("done")
        print_warning("careful")
        print_error("broken")
        out = capsys.readouterr().out
        for text in ("info line", "done", "careful", "broken"):
            assert text in out

    @pytest.mark.unit
    def test_summary_table(self, capsys):
        print_summary_table({"Language": "JavaScript"}, title="demo")
        out = capsys.readouterr().out
        assert "Language" in out
        assert "JavaScript" in out

    @pytest.mark.unit
    def test_create_progress(self):
        progress = create_progress()
        with progress:
            task = progress.add_task("Scaffolding project...", total=None)
            assert task is not None
