"""Template registry: which folders, files and metadata a request needs.

Pure lookups keyed on the request's language variant, architecture style and
feature toggles.  Nothing here touches the filesystem (apart from Jinja2
loading its template files) and nothing depends on the clock, the
environment or randomness, so identical requests always render identical
text.
"""

from __future__ import annotations

from typing import Any

from .models import (
    Architecture,
    GenerationRequest,
    LanguageVariant,
    PlanMetadata,
    TemplateSpec,
)
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Fixed tables
# ---------------------------------------------------------------------------

# Creation order is observable in some tooling output, so these stay in
# insertion order rather than sorted.
FOLDERS: dict[Architecture, tuple[str, ...]] = {
    Architecture.SIMPLE: ("controllers", "models", "routes", "views"),
    Architecture.LAYERED: (
        "controllers",
        "services",
        "models",
        "routes",
        "config",
        "validation",
        "utils",
        "templates",
    ),
}

# Entity generated by the starter resource toggle.
STARTER_RESOURCE = "user"

# Where the starter resource's data-access module lives per architecture.
DATA_ACCESS_MODULES: dict[Architecture, str] = {
    Architecture.SIMPLE: f"models/{STARTER_RESOURCE}.model",
    Architecture.LAYERED: f"services/{STARTER_RESOURCE}.service",
}

RUNTIME_DEPENDENCIES: tuple[str, ...] = ("express", "dotenv", "bcrypt", "cors", "morgan")

TYPED_DEV_DEPENDENCIES: tuple[str, ...] = (
    "typescript",
    "ts-node",
    "nodemon",
    "@types/node",
    "@types/express",
    "@types/cors",
    "@types/morgan",
    "@types/bcrypt",
)

DEV_RELOAD_DEPENDENCIES: tuple[str, ...] = ("nodemon",)

BUILD_DIR = "dist"
ENV_FILE = ".env"
DEFAULT_PORT = 5000

TS_RUNNER = "node -r ts-node/register/transpile-only"


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TemplateRegistry:
    """Maps a ``GenerationRequest`` to the templates and metadata it needs.

    Code paths returned here are relative to the code root (``src/`` or the
    project root); the resolver is responsible for prefixing them.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    # -- Folders -----------------------------------------------------------

    @staticmethod
    def folders_for(architecture: Architecture) -> tuple[str, ...]:
        """Return the code folders for *architecture*, in creation order."""
        return FOLDERS[Architecture(architecture)]

    # -- Code templates ----------------------------------------------------

    def core_file_templates(self, request: GenerationRequest) -> list[TemplateSpec]:
        """Return the entry-point application file."""
        ext = request.language.extension
        return [TemplateSpec(path=f"app.{ext}", template="app.j2")]

    def starter_resource_templates(self, request: GenerationRequest) -> list[TemplateSpec]:
        """Return the data-access, request-handling and route-binding modules.

        Empty unless the starter-resource toggle is set.
        """
        if not request.starter_resource:
            return []
        ext = request.language.extension
        data_access = DATA_ACCESS_MODULES[request.architecture]
        return [
            TemplateSpec(path=f"{data_access}.{ext}", template="starter/user.store.j2"),
            TemplateSpec(
                path=f"controllers/user.controller.{ext}",
                template="starter/user.controller.j2",
            ),
            TemplateSpec(
                path=f"routes/user.routes.{ext}",
                template="starter/user.routes.j2",
            ),
        ]

    def render(self, spec: TemplateSpec, request: GenerationRequest) -> str:
        """Render one code template for *request*."""
        return self.renderer.render(spec.template, self.context_for(request))

    # -- Metadata ----------------------------------------------------------

    def metadata_templates(self, request: GenerationRequest) -> PlanMetadata:
        """Build package descriptor, dev-reload and compiler config, readme and dotfiles."""
        return PlanMetadata(
            package=self.package_descriptor(request),
            nodemon=self.nodemon_config(request),
            tsconfig=self.tsconfig(request),
            readme=self.renderer.render("README.md.j2", self.context_for(request)),
            gitignore="".join(f"{line}\n" for line in ("node_modules", BUILD_DIR, ENV_FILE)),
            env=f"PORT={DEFAULT_PORT}\n",
        )

    def package_descriptor(self, request: GenerationRequest) -> dict[str, Any]:
        run = run_command(request)
        scripts: dict[str, str] = {"dev": "nodemon" if request.dev_reload else run}
        if request.typed:
            scripts["build"] = "tsc"
            scripts["start"] = f"node {BUILD_DIR}/app.js"
            main = f"{BUILD_DIR}/app.js"
        else:
            scripts["start"] = run
            main = _entry_point(request)

        package: dict[str, Any] = {
            "name": request.project_name,
            "version": "1.0.0",
            "description": "",
            "main": main,
            "scripts": scripts,
        }
        # Typed output compiles to CommonJS; untyped output is native ESM.
        if not request.typed:
            package["type"] = "module"
        return package

    def nodemon_config(self, request: GenerationRequest) -> dict[str, Any] | None:
        if not request.dev_reload:
            return None
        return {
            "watch": [request.code_root],
            "ext": request.language.watch_extensions,
            "ignore": [BUILD_DIR],
            "exec": run_command(request),
        }

    def tsconfig(self, request: GenerationRequest) -> dict[str, Any] | None:
        if not request.typed:
            return None
        return {
            "compilerOptions": {
                "target": "ES2020",
                "module": "CommonJS",
                "moduleResolution": "node",
                "rootDir": "src",
                "outDir": BUILD_DIR,
                "resolveJsonModule": True,
                "esModuleInterop": True,
                "forceConsistentCasingInFileNames": True,
                "strict": True,
                "skipLibCheck": True,
                "baseUrl": "src",
                "paths": {"*": ["*"]},
            },
            "include": ["src/**/*.ts"],
            "exclude": ["node_modules", BUILD_DIR],
        }

    # -- Dependencies ------------------------------------------------------

    @staticmethod
    def dependencies_for(request: GenerationRequest) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Return ``(runtime, development)`` package lists for *request*."""
        if request.typed:
            dev = TYPED_DEV_DEPENDENCIES
        elif request.dev_reload:
            dev = DEV_RELOAD_DEPENDENCIES
        else:
            dev = ()
        return RUNTIME_DEPENDENCIES, dev

    # -- Context -----------------------------------------------------------

    def context_for(self, request: GenerationRequest) -> dict[str, Any]:
        """Build the Jinja2 template context from the request."""
        runtime, dev = self.dependencies_for(request)
        install_commands = [" ".join(["npm", "install", *runtime])]
        if dev:
            install_commands.append(" ".join(["npm", "install", "-D", *dev]))

        return {
            "project_name": request.project_name,
            "typed": request.typed,
            "layered": request.architecture is Architecture.LAYERED,
            "ext": request.language.extension,
            "import_suffix": request.language.import_suffix,
            "watch_extensions": request.language.watch_extensions,
            "code_root": request.code_root,
            "dev_reload": request.dev_reload,
            "starter": request.starter_resource,
            "resource": STARTER_RESOURCE,
            "data_access_module": DATA_ACCESS_MODULES[request.architecture],
            "run_command": run_command(request),
            "install_commands": install_commands,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _entry_point(request: GenerationRequest) -> str:
    """Path of the entry-point file relative to the project root."""
    name = f"app.{request.language.extension}"
    return f"{request.code_root}/{name}" if request.uses_src_root else name


def run_command(request: GenerationRequest) -> str:
    """Command that starts the app straight from source, without reloading."""
    if request.language is LanguageVariant.TYPED:
        return f"{TS_RUNNER} {_entry_point(request)}"
    return f"node {_entry_point(request)}"
