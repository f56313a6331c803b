"""Exception hierarchy for the scaffolder.

Every error raised by the generation engine derives from ``ScaffoldError``.
``fatal`` tells the CLI whether the run must stop with a non-zero exit code
(bad name, occupied target, failed write) or whether the error is a warning
about a best-effort post-generation step.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base exception for all scaffolding errors.

    Attributes:
        message: Human-readable error description
        target: Project directory the error relates to, when known
        fatal: Whether the run must abort
    """

    fatal: bool = True

    def __init__(self, message: str, target: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.target = target


class InvalidProjectName(ScaffoldError):
    """The project name is empty or not a safe single directory name."""

    def __init__(self, name: str, reason: str, target: Path | None = None) -> None:
        self.name = name
        self.reason = reason
        where = f" for {target}" if target is not None else ""
        super().__init__(f"Invalid project name {name!r}{where}: {reason}", target=target)


class TargetAlreadyExists(ScaffoldError):
    """The target directory exists and already has entries in it."""

    def __init__(self, target: Path, entries: list[str]) -> None:
        self.entries = entries
        shown = ", ".join(entries[:5])
        if len(entries) > 5:
            shown += f", ... ({len(entries)} entries)"
        super().__init__(
            f"Target directory {target} already exists and is not empty ({shown})",
            target=target,
        )


class FilesystemWriteFailure(ScaffoldError):
    """Creating a directory or writing a file failed mid-generation.

    Nothing is rolled back: whatever was created before the failure stays on
    disk and the message says so.
    """

    def __init__(self, target: Path, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(
            f"Failed to write {path}: {cause}. "
            f"Partially generated files were left in {target}; remove it manually "
            "before retrying.",
            target=target,
        )


class ExternalActionFailure(ScaffoldError):
    """Version control init or a dependency install did not succeed."""

    fatal = False

    def __init__(
        self,
        action: str,
        target: Path,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.action = action
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{action} failed in {target}: {message}", target=target)
