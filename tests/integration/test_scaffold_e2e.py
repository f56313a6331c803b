"""Integration tests for end-to-end project generation.

These tests run the real resolver and materializer for every combination of
answers and check the generated tree on disk.  External actions are turned
off; the starter store test additionally needs ``node`` on ``PATH``.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from create_mvc_app.config import Settings
from create_mvc_app.scaffolder import ProjectGenerator
from create_mvc_app.scaffolder.models import Architecture, GenerationRequest
from create_mvc_app.scaffolder.registry import FOLDERS


pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _generate(request: GenerationRequest, output_dir: Path) -> Path:
    generator = ProjectGenerator(Settings(output_dir=output_dir, interactive=False))
    result = await generator.generate(request)
    return result.project_root


def _tree(root: Path) -> dict[str, bytes | None]:
    """Relative path -> file bytes (``None`` for directories)."""
    return {
        path.relative_to(root).as_posix(): (path.read_bytes() if path.is_file() else None)
        for path in sorted(root.rglob("*"))
    }


def _read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Every combination
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_every_combination_layout(every_request, tmp_path):
    for index, request in enumerate(every_request):
        root = await _generate(request, tmp_path / f"run{index}")
        code_root = root / request.code_root if request.uses_src_root else root
        ext = request.language.extension

        for folder in FOLDERS[request.architecture]:
            assert (code_root / folder).is_dir(), (request, folder)
        assert (code_root / f"app.{ext}").is_file()

        assert (root / ".gitignore").read_text(encoding="utf-8").split() == [
            "node_modules", "dist", ".env"
        ]
        assert (root / ".env").read_text(encoding="utf-8") == "PORT=5000\n"
        assert (root / "README.md").is_file()
        assert (root / "nodemon.json").exists() is request.dev_reload
        assert (root / "tsconfig.json").exists() is request.typed

        package = _read_json(root / "package.json")
        assert package["name"] == "demo"
        assert ("build" in package["scripts"]) is request.typed
        assert (package.get("type") == "module") is (not request.typed)

        starter_files = list(code_root.rglob(f"user.*.{ext}"))
        assert len(starter_files) == (3 if request.starter_resource else 0)

        # Nothing foreign to the chosen language.
        other = "js" if request.typed else "ts"
        assert not list(root.rglob(f"*.{other}"))


@pytest.mark.asyncio
async def test_identical_requests_identical_bytes(typed_layered_request, tmp_path):
    first = await _generate(typed_layered_request, tmp_path / "a")
    second = await _generate(typed_layered_request, tmp_path / "b")
    assert _tree(first) == _tree(second)


@pytest.mark.asyncio
async def test_typed_layered_starter(typed_layered_request, output_dir):
    root = await _generate(typed_layered_request, output_dir)

    tsconfig = _read_json(root / "tsconfig.json")
    assert tsconfig["compilerOptions"]["strict"] is True
    assert tsconfig["compilerOptions"]["rootDir"] == "src"

    nodemon = _read_json(root / "nodemon.json")
    assert nodemon["ext"] == "ts,js,json"
    assert nodemon["watch"] == ["src"]

    assert (root / "src" / "services" / "user.service.ts").is_file()
    assert (root / "src" / "controllers" / "user.controller.ts").is_file()
    assert (root / "src" / "routes" / "user.routes.ts").is_file()
    assert not (root / "src" / "models" / "user.model.ts").exists()

    app = (root / "src" / "app.ts").read_text(encoding="utf-8")
    assert "./services/user.service" in app
    assert 'app.use("/users"' in app


@pytest.mark.asyncio
async def test_untyped_simple_nodemon(demo_request, output_dir):
    root = await _generate(demo_request, output_dir)
    nodemon = _read_json(root / "nodemon.json")
    assert nodemon["ext"] == "js,json"
    assert nodemon["exec"] == "node app.js"
    assert not (root / "tsconfig.json").exists()
    assert "build" not in _read_json(root / "package.json")["scripts"]


# ---------------------------------------------------------------------------
# Generated code actually runs
# ---------------------------------------------------------------------------

_STORE_CHECK = """\
import { createUserStore } from "./src/models/user.model.js";

const store = createUserStore();
const results = { removedMissing: store.remove("nope") };
const user = store.create({ name: "Ada", email: "ada@example.com" });
results.hasId = typeof user.id === "string" && user.id.length > 0;
results.found = store.getById(user.id)?.email === "ada@example.com";
results.updated = store.update(user.id, { name: "Grace" })?.name === "Grace";
results.updateMissing = store.update("nope", { name: "x" }) === undefined;
results.removedExisting = store.remove(user.id);
results.empty = store.list().length === 0;
results.isolated = createUserStore().list().length === 0;
console.log(JSON.stringify(results));
"""


@pytest.mark.asyncio
@pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")
async def test_untyped_starter_store_behaviour(make_request, output_dir):
    root = await _generate(
        make_request(architecture=Architecture.SIMPLE, starter_resource=True), output_dir
    )
    (root / "check.mjs").write_text(_STORE_CHECK, encoding="utf-8")

    completed = subprocess.run(
        ["node", "check.mjs"], cwd=root, capture_output=True, text=True, timeout=60
    )
    assert completed.returncode == 0, completed.stderr
    results = json.loads(completed.stdout)
    assert results == {
        "removedMissing": False,
        "hasId": True,
        "found": True,
        "updated": True,
        "updateMissing": True,
        "removedExisting": True,
        "empty": True,
        "isolated": True,
    }
