"""Prompt skills: opaque task briefs for an external coding agent.

Skills are plain text with ``{placeholder}`` slots filled by the same
substituter as the install guide. Nothing here grades output; the prompts are
handed to an agent verbatim.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from .config import AgentDocsConfig
from .markdown import slugify
from .templating import find_placeholders, render_placeholders

@dataclass(frozen=True)
class PromptSkill:
    """A named prompt template."""

    name: str
    summary: str
    template: str

    @property
    def placeholders(self) -> List[str]:
        return find_placeholders(self.template)


_REVIEW_PAGE = """You are a documentation review agent for {project-name}.

Review one documentation page:
- Doc file: {doc-file}
- Source files to validate against: {source-files}
- Write the review to: {output-file}

Instructions:

1. Read the documentation page.
2. Read the source files and collect the real valid values, types and signatures.
3. Cross-reference the page against the source. Note every value that has drifted.
4. Score each criterion from 1 to 5:
   - Grounding: the first paragraph says what the page covers.
   - Completeness: every option and valid value is documented and matches the source.
   - Clarity: the writing is concise, scannable and technical.
   - Examples: code samples can be copied and run as-is.
   - Agent-Friendliness: an agent can act on the page without prior knowledge.
5. Write the review with a score table, the issues found (with file:line references),
   a drift section, numbered recommendations and a verdict.

Verdict: PASS at 18/25 or above, NEEDS_WORK below 18.
"""

_REVIEW_ALL = """You are a documentation review agent for {project-name}.

Docs directory: {docs-dir}
Source directory: {src-dir}
Review output directory: {output-dir}

Instructions:

1. List every markdown page under {docs-dir}.
2. For each page, pick the source files it describes, review it against them,
   and write the review to {output-dir}/[page-id].md.
3. Summarise all scores in {output-dir}/README.md: a table of pages and totals,
   the critical drift issues, which pages PASS and which NEED_WORK, and the
   fixes to make first.

PASS is 18/25 (72%) or above.

Focus the cross-referencing on enums and valid values, function signatures,
configuration options and data shapes.
"""

_DRIFT_CHECK = """Check whether documented values still match the code.

Doc file: {doc-file}
Source files: {source-files}

1. Extract every enum, valid value and option listed in the doc.
2. Find the actual values in the source files.
3. Report a table with columns Concept, Documented, Actual and Status (OK or DRIFT),
   then the number of matching values, the number drifted and whether action is needed.

Do not score the page; only report drift.
"""

_INSTALL_MD_GENERATE = """You are an install.md author following the installmd.org format.

Project:
- Name: {project-name}
- Type: {project-type}
- Description: {description}

1. Work out the supported package managers, the environment requirements,
   any configuration steps and the command that proves the install worked.
2. Write install.md with, in order: an H1 with the lowercase hyphenated product
   name, a one-line blockquote description, an instruction paragraph telling the
   agent to act autonomously and ask before running install commands, then the
   OBJECTIVE, DONE WHEN, TODO, numbered Step N and EXECUTE NOW sections.
3. Describe outcomes rather than only commands, and give alternatives for other
   platforms or package managers.
4. Keep the file self-contained: no links the agent must fetch to proceed.
"""

_INSTALL_MD_REVIEW = """You are an install.md reviewer checking the installmd.org format.

File to review: {install-md-path}

Score each criterion from 1 to 5:

1. Structure: H1 product name, blockquote, OBJECTIVE, DONE WHEN with a command,
   TODO checklist, Step sections and a closing EXECUTE NOW.
2. Outcome orientation: steps say what to achieve and offer alternatives.
3. Verification: DONE WHEN names a testable command and a clear expected output.
4. Self-containment: everything needed is in the file.
5. Agent-friendliness: autonomous execution is requested, destructive commands
   need approval and the step order is logical.

Report the score table, the issues found and the concrete edits to make.
"""

SKILLS: Mapping[str, PromptSkill] = MappingProxyType(
    {
        skill.name: skill
        for skill in (
            PromptSkill("docs-review", "Review one page against the source it documents.", _REVIEW_PAGE),
            PromptSkill("docs-review-all", "Review every page and write a summary.", _REVIEW_ALL),
            PromptSkill("drift-check", "Compare documented values with the code.", _DRIFT_CHECK),
            PromptSkill("install-md", "Draft an installmd.org-style install guide.", _INSTALL_MD_GENERATE),
            PromptSkill("install-md-review", "Review an existing install guide.", _INSTALL_MD_REVIEW),
        )
    }
)


class UnknownSkillError(KeyError):
    """Raised when a prompt skill name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        available = ", ".join(sorted(SKILLS))
        return f"Unknown prompt {self.name!r} (available: {available})"


def get_skill(name: str) -> PromptSkill:
    try:
        return SKILLS[name]
    except KeyError:
        raise UnknownSkillError(name) from None


def skill_defaults(config: Optional[AgentDocsConfig]) -> Dict[str, str]:
    """Placeholder values derivable from the project configuration."""
    if config is None:
        return {}
    project = config.project
    output = config.output_dir
    defaults = {
        "project-name": project.name,
        "project-type": project.type,
        "docs-dir": config.docs.path,
        "output-dir": f"{config.docs.path.rstrip('/')}/reviews",
        "install-md-path": str(output / "install.md"),
        "product-name": slugify(project.name),
    }
    if project.tagline:
        defaults["description"] = project.tagline
    return defaults


def render_prompt(
    name: str,
    values: Mapping[str, str] | None = None,
    *,
    config: Optional[AgentDocsConfig] = None,
) -> str:
    """Fill a skill's placeholders; explicit ``values`` override config defaults."""
    skill = get_skill(name)
    merged: Dict[str, str] = skill_defaults(config)
    merged.update(values or {})
    return render_placeholders(skill.template, merged, template_name=skill.name)


__all__ = [
    "PromptSkill",
    "SKILLS",
    "UnknownSkillError",
    "get_skill",
    "render_prompt",
    "skill_defaults",
]
