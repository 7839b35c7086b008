"""Project scaffolding: a starter agentdocs.yml plus skeleton pages for the required sections."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .config import CONFIG_FILENAMES, DEFAULT_MIN_WORDS, DEFAULT_SECTIONS, find_config, normalise_project_type
from .logging import get_logger
from .markdown import page_id_from_path, slugify
from .templating import render_placeholders

DEFAULT_PROJECT_NAME = "my-project"
DEFAULT_TAGLINE = "A great project"
AGENT_SECTIONS: tuple[str, ...] = ("overview", "quickstart", "api")

_CONFIG_HEADER = (
    "# agentdocs configuration.\n"
    "# agent.critical_context: rules agents must follow, highest priority first.\n"
    "# agent.entry_points: where to start reading, e.g. `cli: src/cli.py`.\n"
    "# agent.rules: `{pattern: database, instruction: Check src/db/ first}` hints.\n"
)

_INSTALL_SNIPPETS: Mapping[str, str] = MappingProxyType(
    {
        "package": "npm install {package-name}",
        "cli-tool": "npm install -g {package-name}\n{package-name} --version",
        "desktop-app": "brew install --cask {package-name}",
        "generic": "git clone <repository-url>\ncd {package-name}",
    }
)

PAGE_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "overview": """---
title: Overview
description: Introduction to {project-name}
order: 1
---

# Overview

Welcome to **{project-name}**.

{project-tagline}

## What is {project-name}?

Describe what the project does, who it is for and why it exists.

## Key Features

- Feature 1
- Feature 2

## Quick Links

- [Quickstart](./quickstart.md)
- [API Reference](./api.md)
""",
        "quickstart": """---
title: Quickstart
description: Get started in five minutes
order: 2
---

# Quickstart

Get up and running with **{project-name}** in under five minutes.

## Prerequisites

List anything that must be installed first.

## Installation

```bash
{install-snippet}
```

## Basic Usage

Show the smallest useful example here.

## Next Steps

- Read the [API Reference](./api.md)
""",
        "api": """---
title: API Reference
description: Full API documentation
order: 3
---

# API Reference

Complete API documentation for **{project-name}**.

## Functions

### `function_name()`

Describe what the function does, its parameters and its return value.

```text
function_name("hello", 42)
```
""",
        "configuration": """---
title: Configuration
description: Setup and configuration options
order: 4
---

# Configuration

Configure **{project-name}** to fit your needs.

## Options

| Option | Default | Description |
|--------|---------|-------------|
| `option1` | `default` | Description |

## Environment Variables

| Variable | Description |
|----------|-------------|
| `ENV_VAR` | Description |
""",
        "troubleshooting": """---
title: Troubleshooting
description: Common issues and solutions
order: 5
---

# Troubleshooting

Solutions to common issues with **{project-name}**.

## Common Issues

### Issue: description

**Symptoms:** what the user sees.

**Solution:**

```bash
# fix command
```
""",
    }
)


class ScaffoldError(RuntimeError):
    """Raised when scaffolding would overwrite an existing configuration."""


@dataclass
class ScaffoldResult:
    """Files written and skipped by one scaffold run."""

    root: Path
    created: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def detect_project(root: Path) -> tuple[str, Optional[str]]:
    """Best-effort project name and description from pyproject.toml or package.json."""
    logger = get_logger("scaffold")
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        try:
            project = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {})
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.debug("Ignoring unreadable %s: %s", pyproject, exc)
        else:
            if project.get("name"):
                return str(project["name"]), project.get("description")

    package_json = root / "package.json"
    if package_json.is_file():
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.debug("Ignoring unreadable %s: %s", package_json, exc)
        else:
            name = data.get("name") if isinstance(data, dict) else None
            if name:
                return str(name).rpartition("/")[2], data.get("description")

    return root.resolve().name or DEFAULT_PROJECT_NAME, None


def build_config_data(
    name: str,
    tagline: str,
    project_type: str,
    required: List[str],
) -> Dict[str, Any]:
    """Starter configuration mapping in the shape ``load_config`` reads."""
    data: Dict[str, Any] = {
        "project": {"name": name, "tagline": tagline, "type": project_type},
        "agent": {
            "critical_context": [],
            "entry_points": {},
            "rules": [],
            "sections": list(AGENT_SECTIONS),
        },
        "docs": {"path": "./docs", "output": "./", "required": list(required)},
        "audit": {"min_words": DEFAULT_MIN_WORDS, "pass_threshold": 100},
        "install": {"prerequisites": [], "steps": []},
    }
    if project_type == "generic":
        # the generic install template has no verification or step defaults
        command = slugify(name) or name
        data["install"]["done_when"] = {"command": f"{command} --version", "expected_output": "a version number"}
        data["install"]["steps"] = [
            {"description": "Clone the repository", "command": "git clone <repository-url>"},
            {"description": "Verify the installation", "command": f"{command} --version"},
        ]
    return data


def scaffold_project(
    root: Path,
    *,
    project_type: Optional[str] = None,
    name: Optional[str] = None,
    tagline: Optional[str] = None,
    required: Optional[List[str]] = None,
    force: bool = False,
) -> ScaffoldResult:
    """Write ``agentdocs.yml`` and skeleton pages for the required sections under ``root``."""
    logger = get_logger("scaffold")
    root = root.expanduser()
    existing = find_config(root) if root.is_dir() else None
    if existing is not None and not force:
        raise ScaffoldError(f"{existing.name} already exists in {root}; use --force to overwrite")

    detected_name, detected_tagline = detect_project(root)
    name = name or detected_name
    tagline = tagline or detected_tagline or DEFAULT_TAGLINE
    kind = normalise_project_type(project_type)
    sections = [page_id_from_path(item) for item in required] if required else list(DEFAULT_SECTIONS)
    result = ScaffoldResult(root=root)

    docs_root = root / "docs"
    docs_root.mkdir(parents=True, exist_ok=True)
    values = {
        "project-name": name,
        "project-tagline": tagline,
        "package-name": slugify(name) or name,
    }
    values["install-snippet"] = render_placeholders(_INSTALL_SNIPPETS[kind], values, template_name=kind)

    for section in sections:
        template = PAGE_TEMPLATES.get(section)
        if template is None:
            title = section.rpartition("/")[2].replace("-", " ").title()
            template = f"---\ntitle: {title}\n---\n\n# {title}\n\nDocument {title.lower()} for **{{project-name}}** here.\n"
        path = docs_root / f"{section}.md"
        if path.exists() and not force:
            logger.info("Skipped docs/%s.md (already exists)", section)
            result.skipped.append(path)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_placeholders(template, values, template_name=f"{section}.md"), encoding="utf-8")
        logger.debug("Wrote %s", path)
        result.created.append(path)

    config_path = existing if existing is not None else root / CONFIG_FILENAMES[0]
    body = yaml.safe_dump(build_config_data(name, tagline, kind, sections), sort_keys=False, allow_unicode=True)
    config_path.write_text(_CONFIG_HEADER + body, encoding="utf-8")
    result.created.append(config_path)
    logger.info("Initialised %s with %d page(s)", config_path.name, len(result.created) - 1)
    return result


__all__ = [
    "PAGE_TEMPLATES",
    "ScaffoldError",
    "ScaffoldResult",
    "build_config_data",
    "detect_project",
    "scaffold_project",
]
