"""create-mvc-app configuration.

Typed settings for a single CLI invocation.  Everything here is supplied by
command-line flags; the tool reads no environment variables of its own.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Runtime settings that are not part of the generated project itself.

    Instances are created once by the CLI and passed to the scaffolder
    components that need them.
    """

    output_dir: Path = Field(
        default_factory=Path.cwd,
        description="Directory in which the project folder is created",
    )
    package_manager: str = Field(default="npm", min_length=1)
    vcs_binary: str = Field(default="git", min_length=1)
    command_timeout: int = Field(
        default=600, ge=10, description="Per external command timeout in seconds"
    )
    stream_output: bool = Field(
        default=True,
        description="Let the package manager write straight to the terminal",
    )
    interactive: bool = Field(default=True, description="Prompt for unanswered choices")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return its path."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load previously saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)
