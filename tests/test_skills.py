"""Prompt skill tests."""

from __future__ import annotations

import pytest

from agentdocs.config import config_from_mapping
from agentdocs.skills import SKILLS, UnknownSkillError, get_skill, render_prompt
from agentdocs.templating import TemplateMissingPlaceholder


def test_every_skill_declares_placeholders() -> None:
    for skill in SKILLS.values():
        assert skill.placeholders, skill.name
        assert skill.summary


def test_render_prompt_uses_config_defaults(tmp_path) -> None:
    config = config_from_mapping({"project": {"name": "demo", "type": "cli"}}, root=tmp_path)

    text = render_prompt(
        "docs-review",
        {"doc-file": "docs/api.md", "source-files": "src/api.py", "output-file": "docs/reviews/api.md"},
        config=config,
    )

    assert "for demo." in text
    assert "- Doc file: docs/api.md" in text
    assert "{" not in text


def test_explicit_values_override_defaults(tmp_path) -> None:
    config = config_from_mapping({"project": {"name": "demo"}}, root=tmp_path)

    text = render_prompt("install-md-review", {"install-md-path": "custom/install.md"}, config=config)

    assert "File to review: custom/install.md" in text


def test_missing_values_raise() -> None:
    with pytest.raises(TemplateMissingPlaceholder) as excinfo:
        render_prompt("drift-check", {"doc-file": "docs/api.md"})

    assert excinfo.value.placeholder == "source-files"
    assert excinfo.value.template == "drift-check"


def test_unknown_skill() -> None:
    with pytest.raises(UnknownSkillError) as excinfo:
        get_skill("nope")

    assert "docs-review" in str(excinfo.value)
