"""Turns a ``GenerationRequest`` into a ``GenerationPlan``.

Validation happens first; once the project name is accepted the rest is a
pure computation over the registry, so a plan is either returned complete or
not at all.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from .exceptions import InvalidProjectName
from .models import (
    ActionPlan,
    GenerationPlan,
    GenerationRequest,
    PlanMetadata,
    PlannedFile,
)
from .registry import TemplateRegistry

# Characters that are not portable in a directory name.
_FORBIDDEN_CHARS = set('<>:"|?*\0')


class ConfigurationResolver:
    """Validates requests and assembles generation plans."""

    def __init__(self, registry: TemplateRegistry | None = None) -> None:
        self.registry = registry or TemplateRegistry()

    def resolve(
        self, request: GenerationRequest, cwd: str | Path | None = None
    ) -> GenerationPlan:
        """Build the plan for *request* rooted at ``<cwd>/<project_name>``.

        Args:
            request: The user's answers.
            cwd: Parent directory for the project.  Defaults to the process's
                current working directory.

        Raises:
            InvalidProjectName: If the name is empty or not a single safe
                path segment.
        """
        base = (Path(cwd) if cwd is not None else Path.cwd()).resolve()
        validate_project_name(request.project_name, base)
        target_dir = base / request.project_name

        prefix = "src/" if request.uses_src_root else ""
        directories: list[str] = ["src"] if request.uses_src_root else []
        directories.extend(
            f"{prefix}{folder}"
            for folder in self.registry.folders_for(request.architecture)
        )

        metadata = self.registry.metadata_templates(request)
        files = _metadata_files(metadata)

        code_templates = [
            *self.registry.core_file_templates(request),
            *self.registry.starter_resource_templates(request),
        ]
        for spec in code_templates:
            files.append(
                PlannedFile(
                    path=f"{prefix}{spec.path}",
                    content=self.registry.render(spec, request),
                )
            )

        runtime, dev = self.registry.dependencies_for(request)
        actions = ActionPlan(
            init_git=request.init_git,
            install_deps=request.install_deps,
            dependencies=runtime,
            dev_dependencies=dev,
        )

        return GenerationPlan(
            target_dir=target_dir,
            directories=tuple(directories),
            files=tuple(files),
            metadata=metadata,
            actions=actions,
        )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_project_name(name: str, parent: str | Path | None = None) -> str:
    """Return *name* unchanged if it is usable as a single directory name.

    Args:
        name: The requested project name.
        parent: Directory the project would be created in.  When given, the
            error names the intended target path.

    Raises:
        InvalidProjectName: With a reason describing the first problem found.
    """
    target = Path(parent) / name if parent is not None else None

    def reject(reason: str) -> InvalidProjectName:
        return InvalidProjectName(name, reason, target=target)

    if not name or not name.strip():
        raise reject("name must not be empty")
    if name != name.strip():
        raise reject("name must not start or end with whitespace")
    if name in (".", ".."):
        raise reject("name must not be a relative directory reference")
    separators = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())
    if any(sep in name for sep in separators):
        raise reject("name must not contain path separators")
    bad = sorted(c for c in set(name) if c in _FORBIDDEN_CHARS or ord(c) < 32)
    if bad:
        raise reject(f"name contains forbidden characters: {', '.join(map(repr, bad))}")
    return name


# ---------------------------------------------------------------------------
# Metadata serialisation
# ---------------------------------------------------------------------------

def _to_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


def _metadata_files(metadata: PlanMetadata) -> list[PlannedFile]:
    """Serialise the metadata bundle in the documented output order."""
    files = [
        PlannedFile(path=".gitignore", content=metadata.gitignore),
        PlannedFile(path=".env", content=metadata.env),
        PlannedFile(path="package.json", content=_to_json(metadata.package)),
    ]
    if metadata.tsconfig is not None:
        files.append(PlannedFile(path="tsconfig.json", content=_to_json(metadata.tsconfig)))
    if metadata.nodemon is not None:
        files.append(PlannedFile(path="nodemon.json", content=_to_json(metadata.nodemon)))
    files.append(PlannedFile(path="README.md", content=metadata.readme))
    return files
