"""Post-generation external actions: version control init and installs.

Every action is best-effort.  A failing action is recorded in the returned
``ActionReport`` and the next action still runs; nothing here undoes the
generated files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..config import Settings
from ..utils import run_command
from .exceptions import ExternalActionFailure
from .models import GenerationPlan

GIT_INIT = "git-init"
INSTALL = "install"
INSTALL_DEV = "install-dev"


@dataclass
class ActionResult:
    """Outcome of one external action."""

    action: str
    command: list[str]
    error: ExternalActionFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class ActionReport:
    """Everything the runner did, in execution order."""

    results: list[ActionResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    manual_commands: list[list[str]] = field(default_factory=list)

    @property
    def failures(self) -> list[ExternalActionFailure]:
        return [r.error for r in self.results if r.error is not None]

    @property
    def ok(self) -> bool:
        return not self.failures

    def ran(self, action: str) -> bool:
        return any(r.action == action for r in self.results)


class ExternalActionRunner:
    """Runs version control init and dependency installation for a plan."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    async def run(self, plan: GenerationPlan) -> ActionReport:
        """Run the plan's enabled actions strictly one after another.

        Order: repository init, runtime install, development install.  The
        development install only starts once the runtime install has
        finished, whatever its outcome.
        """
        report = ActionReport()
        target = plan.target_dir
        actions = plan.actions

        if actions.init_git:
            cmd = [self.settings.vcs_binary, "init"]
            report.results.append(await self._attempt(GIT_INIT, cmd, target, capture=True))
        else:
            report.skipped.append(GIT_INIT)

        commands = actions.install_commands(self.settings.package_manager)
        if actions.install_deps:
            for action, cmd in zip((INSTALL, INSTALL_DEV), commands):
                result = await self._attempt(
                    action, cmd, target, capture=not self.settings.stream_output
                )
                report.results.append(result)
        else:
            report.skipped.append(INSTALL)
            report.manual_commands.extend(commands)

        return report

    async def _attempt(
        self, action: str, cmd: list[str], cwd: Path, capture: bool
    ) -> ActionResult:
        try:
            await self.invoke(action, cmd, cwd, capture=capture)
        except ExternalActionFailure as exc:
            return ActionResult(action=action, command=cmd, error=exc)
        return ActionResult(action=action, command=cmd)

    async def invoke(
        self, action: str, cmd: list[str], cwd: Path, capture: bool = True
    ) -> str:
        """Run a single command in *cwd* and return its stdout.

        Raises:
            ExternalActionFailure: If the binary is missing, the command
                times out or it exits non-zero.
        """
        cmd_str = " ".join(cmd)
        try:
            returncode, stdout, stderr = await run_command(
                cmd, cwd=cwd, timeout=self.settings.command_timeout, capture=capture
            )
        except OSError as exc:
            raise ExternalActionFailure(
                action, cwd, f"could not run {cmd[0]!r}: {exc}", command=cmd_str
            ) from exc

        if returncode != 0:
            detail = stderr or f"exit code {returncode}"
            raise ExternalActionFailure(
                action,
                cwd,
                f"`{cmd_str}` failed: {detail}",
                command=cmd_str,
                returncode=returncode,
                stderr=stderr,
            )
        return stdout
