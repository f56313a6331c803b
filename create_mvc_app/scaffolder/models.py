"""Pydantic v2 models for the create-mvc-app generation engine.

Defines the request built from the user's answers, the template entries the
registry hands out, and the fully resolved generation plan the materializer
writes to disk.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class LanguageVariant(str, Enum):
    """Whether generated sources carry static type annotations."""
    TYPED = "typed"
    UNTYPED = "untyped"

    @property
    def extension(self) -> str:
        """Source file extension without the dot."""
        return "ts" if self is LanguageVariant.TYPED else "js"

    @property
    def import_suffix(self) -> str:
        """Suffix appended to relative imports.

        The ESM loader used by untyped output needs the explicit ``.js``;
        TypeScript resolves extensionless paths itself.
        """
        return "" if self is LanguageVariant.TYPED else ".js"

    @property
    def watch_extensions(self) -> str:
        """Extensions that trigger a dev-reload restart."""
        return "ts,js,json" if self is LanguageVariant.TYPED else "js,json"


class Architecture(str, Enum):
    """Folder / separation-of-concerns convention."""
    SIMPLE = "simple"
    LAYERED = "layered"


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    """Immutable answers collected for a single invocation."""

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Name of the directory to create")
    language: LanguageVariant = Field(default=LanguageVariant.UNTYPED)
    architecture: Architecture = Field(default=Architecture.SIMPLE)
    dev_reload: bool = Field(default=True, description="Generate nodemon config and script")
    starter_resource: bool = Field(default=False, description="Generate the user CRUD slice")
    init_git: bool = Field(default=True, description="Run version control init afterwards")
    install_deps: bool = Field(default=True, description="Install packages afterwards")

    @property
    def typed(self) -> bool:
        return self.language is LanguageVariant.TYPED

    @property
    def uses_src_root(self) -> bool:
        """Whether code lives under ``src/`` instead of the project root.

        Typed output always uses ``src/`` because the compiler's ``rootDir``
        points there.
        """
        return (
            self.architecture is Architecture.LAYERED
            or self.starter_resource
            or self.typed
        )

    @property
    def code_root(self) -> str:
        return "src" if self.uses_src_root else "."


# ---------------------------------------------------------------------------
# Template entries
# ---------------------------------------------------------------------------

class TemplateSpec(BaseModel):
    """A registry entry: where a file goes and which template renders it."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the code root")
    template: str = Field(..., description="Jinja2 template name")


class PlannedFile(BaseModel):
    """A rendered file ready to be written."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="POSIX path relative to the target directory")
    content: str


class PlanMetadata(BaseModel):
    """Project metadata files, kept structured until they are serialised."""

    model_config = ConfigDict(frozen=True)

    package: dict[str, Any]
    nodemon: Optional[dict[str, Any]] = None
    tsconfig: Optional[dict[str, Any]] = None
    readme: str
    gitignore: str
    env: str


class ActionPlan(BaseModel):
    """Post-generation external actions and their parameters."""

    model_config = ConfigDict(frozen=True)

    init_git: bool = False
    install_deps: bool = False
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()

    def install_commands(self, package_manager: str = "npm") -> list[list[str]]:
        """Return the runtime install argv, then the dev install argv if any."""
        commands = [[package_manager, "install", *self.dependencies]]
        if self.dev_dependencies:
            commands.append([package_manager, "install", "-D", *self.dev_dependencies])
        return commands


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------

class GenerationPlan(BaseModel):
    """Fully resolved description of everything that will be written."""

    model_config = ConfigDict(frozen=True)

    target_dir: Path
    directories: tuple[str, ...] = ()
    files: tuple[PlannedFile, ...] = ()
    metadata: PlanMetadata
    actions: ActionPlan = Field(default_factory=ActionPlan)

    @model_validator(mode="after")
    def _check_layout(self) -> "GenerationPlan":
        if not self.target_dir.is_absolute():
            raise ValueError(f"target_dir must be absolute: {self.target_dir}")

        created: set[PurePosixPath] = {PurePosixPath(".")}
        for directory in self.directories:
            rel = _contained(directory)
            if rel.parent not in created:
                raise ValueError(f"directory {directory!r} is planned before its parent")
            created.add(rel)

        for planned in self.files:
            rel = _contained(planned.path)
            if rel.parent not in created:
                raise ValueError(
                    f"file {planned.path!r} has no planned parent directory"
                )
        return self

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]


def _contained(path: str) -> PurePosixPath:
    """Return *path* as a relative POSIX path, rejecting escapes."""
    rel = PurePosixPath(path)
    if rel.is_absolute() or ".." in rel.parts or str(rel) in ("", "."):
        raise ValueError(f"path escapes the target directory: {path!r}")
    return rel
