"""Tests for agentdocs.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from agentdocs.config import (
    AgentDocsConfig,
    ConfigError,
    ConfigValidationError,
    config_from_mapping,
    find_config,
    load_config,
    normalise_project_type,
)


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    (tmp_path / "agentdocs.yml").write_text("project:\n  name: demo\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert isinstance(config, AgentDocsConfig)
    assert config.root == tmp_path.resolve()
    assert config.source == (tmp_path / "agentdocs.yml").resolve()
    assert config.project.type == "generic"
    assert config.docs.path == "./docs"
    assert config.docs.required == ["overview", "quickstart"]
    assert config.agent.sections == ["overview", "quickstart"]
    assert config.audit.min_words == 50
    assert config.audit.pass_threshold == 100.0
    assert config.docs_root == (tmp_path / "docs").resolve()
    assert config.output_dir == tmp_path.resolve()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".agentdocs.yml"
    config_file.write_text(
        """
project:
  name: mycli
  tagline: A tiny CLI
  type: cli
agent:
  criticalContext:
    - Never edit generated files
  entryPoints:
    cli: src/cli.py
  rules:
    - pattern: "*.py"
      instruction: Use type hints
  sections: [overview]
docs:
  path: documentation
  output: dist
  required: [overview, api]
  navigation:
    - overview
    - separator: Reference
    - title: API
      items:
        - id: api
          title: API Reference
audit:
  minWords: 20
  passThreshold: 80
install:
  objective: Install mycli
  doneWhen:
    command: mycli --version
  prerequisites: [Node 18+]
  steps:
    - description: Install
      command: npm i -g mycli
      alternatives:
        - condition: pnpm
          command: pnpm add -g mycli
    - Verify it works
  placeholders:
    brew-formula: acme/tap/mycli
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.project.type == "cli-tool"
    assert config.agent.critical_context == ["Never edit generated files"]
    assert config.agent.entry_points == {"cli": "src/cli.py"}
    assert config.agent.rules[0].pattern == "*.py"
    assert config.agent.sections == ["overview"]
    assert config.docs.required == ["overview", "api"]
    assert [entry.kind for entry in config.docs.navigation or []] == ["page", "separator", "folder"]
    folder = (config.docs.navigation or [])[2]
    assert folder.items[0].id == "api" and folder.items[0].title == "API Reference"
    assert config.audit.min_words == 20
    assert config.audit.pass_threshold == 80.0
    assert config.install.done_when.command == "mycli --version"
    assert config.install.done_when.expected_output is None
    assert config.install.steps[0].alternatives[0].condition == "pnpm"
    assert config.install.steps[1].description == "Verify it works"
    assert config.install.steps[1].command is None
    assert config.install.placeholders == {"brew-formula": "acme/tap/mycli"}
    assert config.docs_root == (tmp_path / "documentation").resolve()
    assert config.output_dir == (tmp_path / "dist").resolve()


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_invalid_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / "agentdocs.yml").write_text("project: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert not isinstance(excinfo.value, ConfigValidationError)


@pytest.mark.parametrize(
    "data, message",
    [
        ([], "mapping at the root"),
        ({"project": {}}, "project.name is required"),
        ({"project": {"name": "x"}, "docs": "nope"}, "docs must be a mapping"),
        ({"project": {"name": "x"}, "audit": {"min_words": "many"}}, "audit.min_words"),
        ({"project": {"name": "x"}, "agent": {"rules": [{"pattern": "*"}]}}, "pattern and instruction"),
        ({"project": {"name": "x"}, "install": {"steps": [{"command": "x"}]}}, "needs a description"),
        ({"project": {"name": "x"}, "docs": {"navigation": [{"title": "T"}]}}, "docs.navigation[0]"),
    ],
)
def test_config_validation_errors(tmp_path: Path, data: object, message: str) -> None:
    with pytest.raises(ConfigValidationError) as excinfo:
        config_from_mapping(data, root=tmp_path)

    assert message in str(excinfo.value)


def test_find_config_prefers_visible_file(tmp_path: Path) -> None:
    (tmp_path / "agentdocs.yml").write_text("project: {name: a}\n", encoding="utf-8")
    (tmp_path / ".agentdocs.yml").write_text("project: {name: b}\n", encoding="utf-8")

    assert find_config(tmp_path) == (tmp_path / "agentdocs.yml").resolve()
    assert find_config(tmp_path / "missing") is None


@pytest.mark.parametrize(
    "declared, expected",
    [
        (None, "generic"),
        ("npm-package", "package"),
        ("CLI", "cli-tool"),
        ("macos-app", "desktop-app"),
        ("something-else", "generic"),
    ],
)
def test_normalise_project_type(declared: str | None, expected: str) -> None:
    assert normalise_project_type(declared) == expected
