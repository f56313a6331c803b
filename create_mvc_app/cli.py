"""Command-line entry point for create-mvc-app.

Usage::

    create-mvc-app my-api
    create-mvc-app my-api --language typed --architecture layered --starter
    python -m create_mvc_app my-api --yes --no-install
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.prompt import Confirm, Prompt

from create_mvc_app import __version__
from create_mvc_app.config import Settings
from create_mvc_app.scaffolder import (
    Architecture,
    GenerationRequest,
    LanguageVariant,
    ProjectGenerator,
    ScaffoldError,
)
from create_mvc_app.scaffolder.actions import GIT_INIT, INSTALL, INSTALL_DEV, ActionReport
from create_mvc_app.scaffolder.resolver import validate_project_name
from create_mvc_app.utils import (
    console,
    create_progress,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_ABORTED = 130

# Prompt label -> value, in the order the choices are offered.
LANGUAGE_CHOICES: dict[str, LanguageVariant] = {
    "JavaScript": LanguageVariant.UNTYPED,
    "TypeScript": LanguageVariant.TYPED,
}
ARCHITECTURE_CHOICES: dict[str, Architecture] = {
    "Simple MVC": Architecture.SIMPLE,
    "3-Layer MVC": Architecture.LAYERED,
}

DEFAULTS: dict[str, object] = {
    "language": LanguageVariant.UNTYPED,
    "architecture": Architecture.SIMPLE,
    "dev_reload": True,
    "starter_resource": False,
    "init_git": True,
    "install_deps": True,
}

_ACTION_MESSAGES: dict[str, str] = {
    GIT_INIT: "Git repository initialized",
    INSTALL: "Dependencies installed",
    INSTALL_DEV: "Dev dependencies installed",
}

# Settings field -> the flag that sets it, for validation messages.
_FLAGS: dict[str, str] = {
    "package_manager": "--package-manager",
    "command_timeout": "--timeout",
    "output_dir": "--output-dir",
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-mvc-app",
        description="Generate an Express MVC / 3-layer starter project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-mvc-app my-api\n"
            "  create-mvc-app my-api --language typed --architecture layered\n"
            "  create-mvc-app my-api --yes --starter --no-install\n"
        ),
    )
    parser.add_argument("project_name", help="Name of the project directory to create")
    parser.add_argument(
        "--language",
        choices=[v.value for v in LanguageVariant],
        default=None,
        help="typed (TypeScript) or untyped (JavaScript)",
    )
    parser.add_argument(
        "--architecture",
        choices=[a.value for a in Architecture],
        default=None,
        help="simple MVC or layered (3-layer) MVC",
    )
    parser.add_argument(
        "--dev-reload",
        dest="dev_reload",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="use nodemon for development",
    )
    parser.add_argument(
        "--starter",
        dest="starter_resource",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="generate an example users CRUD resource",
    )
    parser.add_argument(
        "--git",
        dest="init_git",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="initialize a git repository",
    )
    parser.add_argument(
        "--install",
        dest="install_deps",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="install dependencies after generation",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="accept defaults for every question not answered by a flag",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="directory to create the project in (default: current directory)",
    )
    parser.add_argument(
        "--package-manager",
        default="npm",
        help="package manager binary used for installs (default: npm)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=600,
        help="seconds before an external command is killed (default: 600)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    kwargs: dict[str, object] = {
        "package_manager": args.package_manager,
        "command_timeout": args.timeout,
        "interactive": not args.yes,
    }
    if args.output_dir:
        kwargs["output_dir"] = Path(args.output_dir)
    return Settings(**kwargs)


# ---------------------------------------------------------------------------
# Interactive questions
# ---------------------------------------------------------------------------


def _choose(question: str, choices: dict[str, object], default: object) -> object:
    default_label = next(label for label, value in choices.items() if value == default)
    answer = Prompt.ask(
        question, choices=list(choices), default=default_label, console=console
    )
    return choices[answer]


def collect_request(args: argparse.Namespace, settings: Settings) -> GenerationRequest:
    """Merge flag answers with prompted (or default) answers.

    Questions are asked in a fixed order and only for options that no flag
    answered.  With ``settings.interactive`` off every gap takes its default.
    """
    answers: dict[str, object] = {}
    if args.language is not None:
        answers["language"] = LanguageVariant(args.language)
    if args.architecture is not None:
        answers["architecture"] = Architecture(args.architecture)
    for key in ("dev_reload", "starter_resource", "init_git", "install_deps"):
        value = getattr(args, key)
        if value is not None:
            answers[key] = value

    questions = [
        ("language", lambda d: _choose("Which language do you want?", LANGUAGE_CHOICES, d)),
        ("architecture", lambda d: _choose(
            "Which architecture do you want?", ARCHITECTURE_CHOICES, d
        )),
        ("dev_reload", lambda d: Confirm.ask("Use Nodemon for dev?", default=d, console=console)),
        ("starter_resource", lambda d: Confirm.ask(
            "Generate an example users resource?", default=d, console=console
        )),
        ("init_git", lambda d: Confirm.ask(
            "Initialize Git repository?", default=d, console=console
        )),
        ("install_deps", lambda d: Confirm.ask(
            "Install dependencies now?", default=d, console=console
        )),
    ]
    for key, ask in questions:
        if key in answers:
            continue
        answers[key] = ask(DEFAULTS[key]) if settings.interactive else DEFAULTS[key]

    return GenerationRequest(project_name=args.project_name, **answers)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


def _summary(request: GenerationRequest) -> dict[str, str]:
    language = next(k for k, v in LANGUAGE_CHOICES.items() if v is request.language)
    architecture = next(k for k, v in ARCHITECTURE_CHOICES.items() if v is request.architecture)
    yes_no = {True: "yes", False: "no"}
    return {
        "Language": language,
        "Architecture": architecture,
        "Nodemon": yes_no[request.dev_reload],
        "Users resource": yes_no[request.starter_resource],
        "Git init": yes_no[request.init_git],
        "Install dependencies": yes_no[request.install_deps],
    }


def render_report(report: ActionReport) -> None:
    """Print one line per external action outcome."""
    for result in report.results:
        if result.succeeded:
            print_success(_ACTION_MESSAGES.get(result.action, result.action))
        else:
            print_warning(f"Warning: {result.error}")
    if INSTALL in report.skipped:
        print_warning("Skipped dependency installation")


def next_steps(request: GenerationRequest, report: ActionReport) -> str:
    lines = ["Next steps:", f"  cd {request.project_name}"]
    lines.extend(f"  {' '.join(cmd)}" for cmd in report.manual_commands)
    lines.append("  npm run dev")
    return "\n".join(lines)


async def scaffold(request: GenerationRequest, settings: Settings) -> int:
    """Generate the project and run post-generation actions.

    Returns the process exit code.  Fatal scaffolding errors map to 1;
    failed external actions are warnings and keep the exit code at 0.
    """
    generator = ProjectGenerator(settings)
    try:
        plan = generator.plan(request)
        with create_progress() as progress:
            progress.add_task("Scaffolding project...", total=None)
            written = await generator.write(plan)
    except ScaffoldError as exc:
        print_error("Failed to scaffold project.")
        print_error(str(exc))
        return EXIT_FAILURE

    print_success(f"Created {len(written)} files in {plan.target_dir}")

    if plan.actions.install_deps:
        print_info("Installing dependencies...")
    report = await generator.run_actions(plan)
    render_report(report)

    print_success("All setup completed!")
    console.print()
    console.print(f"[green]{next_steps(request, report)}[/green]", highlight=False)
    return EXIT_OK


def run(argv: list[str] | None = None) -> int:
    """Parse *argv*, ask the questions and scaffold.  Returns the exit code."""
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValidationError as exc:
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            flag = _FLAGS.get(field, field)
            print_error(f"Error: invalid value for {flag}: {error['msg']}")
        return EXIT_FAILURE

    try:
        validate_project_name(args.project_name, settings.output_dir.resolve())
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        return EXIT_FAILURE

    print_info(f"\nCreating new project: {args.project_name}\n")
    try:
        request = collect_request(args, settings)
    except (KeyboardInterrupt, EOFError):
        console.print()
        print_error("Aborted.")
        return EXIT_ABORTED

    print_summary_table(_summary(request), title=request.project_name)
    return asyncio.run(scaffold(request, settings))


def main() -> None:
    """CLI entry point for ``create-mvc-app``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
