"""create-mvc-app scaffolder -- generates Express MVC starter projects.

The engine is a four-stage pipeline: the ``TemplateRegistry`` knows which
folders, files and metadata each (language, architecture, toggles)
combination needs, the ``ConfigurationResolver`` turns a request into an
immutable ``GenerationPlan``, the ``FilesystemMaterializer`` writes it, and
the ``ExternalActionRunner`` optionally runs ``git init`` and the installs.

Quick usage::

    from create_mvc_app.scaffolder import GenerationRequest, ProjectGenerator

    request = GenerationRequest(project_name="demo", install_deps=False)
    result = await ProjectGenerator().generate(request)
"""

from create_mvc_app.scaffolder.actions import ActionReport, ExternalActionRunner
from create_mvc_app.scaffolder.exceptions import (
    ExternalActionFailure,
    FilesystemWriteFailure,
    InvalidProjectName,
    ScaffoldError,
    TargetAlreadyExists,
)
from create_mvc_app.scaffolder.generator import GenerationResult, ProjectGenerator
from create_mvc_app.scaffolder.materializer import FilesystemMaterializer
from create_mvc_app.scaffolder.models import (
    Architecture,
    GenerationPlan,
    GenerationRequest,
    LanguageVariant,
)
from create_mvc_app.scaffolder.registry import TemplateRegistry
from create_mvc_app.scaffolder.resolver import ConfigurationResolver
from create_mvc_app.scaffolder.templates import TemplateRenderer

__all__ = [
    "ActionReport",
    "Architecture",
    "ConfigurationResolver",
    "ExternalActionFailure",
    "ExternalActionRunner",
    "FilesystemMaterializer",
    "FilesystemWriteFailure",
    "GenerationPlan",
    "GenerationRequest",
    "GenerationResult",
    "InvalidProjectName",
    "LanguageVariant",
    "ProjectGenerator",
    "ScaffoldError",
    "TargetAlreadyExists",
    "TemplateRegistry",
    "TemplateRenderer",
]
