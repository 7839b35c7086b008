"""Project scaffolding tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from agentdocs.config import load_config
from agentdocs.orchestrator import Pipeline
from agentdocs.scaffold import ScaffoldError, detect_project, scaffold_project
from agentdocs.scanner import DocsScanner


def test_detect_project_prefers_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "acme-tools"\ndescription = "Handy tools"\n', encoding="utf-8"
    )
    (tmp_path / "package.json").write_text(json.dumps({"name": "ignored"}), encoding="utf-8")

    assert detect_project(tmp_path) == ("acme-tools", "Handy tools")


def test_detect_project_strips_npm_scope(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "@acme/widget", "description": "Widgets"}), encoding="utf-8"
    )

    assert detect_project(tmp_path) == ("widget", "Widgets")


def test_detect_project_falls_back_to_directory_name(tmp_path: Path) -> None:
    root = tmp_path / "fallback-name"
    root.mkdir()
    (root / "pyproject.toml").write_text("not [valid toml", encoding="utf-8")

    assert detect_project(root) == ("fallback-name", None)


def test_skeleton_pages_carry_order_hints(tmp_path: Path) -> None:
    result = scaffold_project(tmp_path, name="demo", required=["overview", "api.md", "guides/setup"])

    pages = {page.id: page for page in DocsScanner().scan(tmp_path / "docs").pages}
    assert sorted(pages) == ["api", "guides/setup", "overview"]
    assert (pages["overview"].order, pages["api"].order) == (1, 3)
    assert pages["guides/setup"].title == "Setup"
    assert load_config(tmp_path).docs.required == ["overview", "api", "guides/setup"]
    assert len(result.created) == 4


def test_existing_pages_are_kept(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "overview.md").write_text("# Hand written\n", encoding="utf-8")

    result = scaffold_project(tmp_path, name="demo")

    assert result.skipped == [docs / "overview.md"]
    assert (docs / "overview.md").read_text(encoding="utf-8") == "# Hand written\n"
    assert (docs / "quickstart.md").is_file()


def test_existing_config_needs_force(tmp_path: Path) -> None:
    scaffold_project(tmp_path, name="demo")

    with pytest.raises(ScaffoldError):
        scaffold_project(tmp_path, name="other")


def test_generic_scaffold_generates_every_artifact(tmp_path: Path) -> None:
    scaffold_project(tmp_path, name="Demo Project")

    report = Pipeline(load_config(tmp_path)).run()

    assert report.ok
    install = (tmp_path / "install.md").read_text(encoding="utf-8")
    assert "`demo-project --version`" in install
    assert report.audit is not None
    assert [result.id for result in report.audit.results] == ["overview", "quickstart"]
