"""Writes a ``GenerationPlan`` to disk.

Directories are created first, in plan order, then every file is written
through a temporary sibling that is renamed into place, so a failure never
leaves a half-written file behind.  There is no rollback: if a step fails the
error says what was left on disk.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

from .exceptions import FilesystemWriteFailure, TargetAlreadyExists
from .models import GenerationPlan


class FilesystemMaterializer:
    """Realises generation plans on the local filesystem."""

    async def materialize(self, plan: GenerationPlan) -> list[Path]:
        """Create the target tree described by *plan*.

        Returns:
            Absolute paths of the written files, in plan order.

        Raises:
            TargetAlreadyExists: If the target exists and is not an empty
                directory.  Raised before anything is created.
            FilesystemWriteFailure: If any directory or file step fails.
        """
        root = plan.target_dir
        try:
            await asyncio.to_thread(check_target, root)
        except OSError as exc:
            raise FilesystemWriteFailure(root, root, exc) from exc

        await self._mkdir(root, root, parents=True)
        for directory in plan.directories:
            await self._mkdir(root, root / directory)

        written: list[Path] = []
        for planned in plan.files:
            path = root / planned.path
            try:
                await asyncio.to_thread(atomic_write, path, planned.content)
            except OSError as exc:
                raise FilesystemWriteFailure(root, path, exc) from exc
            written.append(path)
        return written

    @staticmethod
    async def _mkdir(root: Path, path: Path, parents: bool = False) -> None:
        try:
            await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=True)
        except OSError as exc:
            raise FilesystemWriteFailure(root, path, exc) from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def check_target(target: Path) -> None:
    """Refuse any target that is a file or a directory with entries in it."""
    if not target.exists():
        return
    if not target.is_dir():
        raise TargetAlreadyExists(target, [target.name])
    entries = sorted(entry.name for entry in target.iterdir())
    if entries:
        raise TargetAlreadyExists(target, entries)


def atomic_write(path: Path, content: str) -> None:
    """Write *content* to *path* via a temp file in the same directory.

    The temp file is flushed and fsynced before ``os.replace`` so the final
    name only ever points at complete content.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
