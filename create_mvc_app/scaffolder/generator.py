"""Main scaffolding orchestrator.

Runs the four stages in order: resolve the request into a plan, write the
plan to disk, then run the optional external actions.  Resolution and
materialisation errors propagate; external action failures come back inside
the report.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from .actions import ActionReport, ExternalActionRunner
from .materializer import FilesystemMaterializer
from .models import GenerationPlan, GenerationRequest
from .registry import TemplateRegistry
from .resolver import ConfigurationResolver


@dataclass
class GenerationResult:
    """What a successful run produced."""

    plan: GenerationPlan
    written: list[Path]
    report: ActionReport

    @property
    def project_root(self) -> Path:
        return self.plan.target_dir


class ProjectGenerator:
    """Wires registry, resolver, materializer and action runner together."""

    def __init__(
        self,
        settings: Settings | None = None,
        registry: TemplateRegistry | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry or TemplateRegistry()
        self.resolver = ConfigurationResolver(self.registry)
        self.materializer = FilesystemMaterializer()
        self.runner = ExternalActionRunner(self.settings)

    def plan(self, request: GenerationRequest) -> GenerationPlan:
        """Resolve *request* against the configured output directory."""
        return self.resolver.resolve(request, cwd=self.settings.output_dir)

    async def write(self, plan: GenerationPlan) -> list[Path]:
        return await self.materializer.materialize(plan)

    async def run_actions(self, plan: GenerationPlan) -> ActionReport:
        return await self.runner.run(plan)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Plan, write and post-process a project in one call.

        Raises:
            InvalidProjectName: Before anything touches the disk.
            TargetAlreadyExists: Before anything touches the disk.
            FilesystemWriteFailure: With partial output left in place.
        """
        plan = self.plan(request)
        written = await self.write(plan)
        report = await self.run_actions(plan)
        return GenerationResult(plan=plan, written=written, report=report)
