"""install.md: LLM-executable installation guide in the installmd.org shape.

One template variant exists per project type (package, CLI tool, desktop
app) plus a generic fallback. Each variant names the placeholder used for the
product heading and supplies defaults for the objective, the DONE WHEN check
and the steps; configuration values always win over variant defaults. Any
``{placeholder}`` left without a value raises ``TemplateMissingPlaceholder``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ..config import AgentDocsConfig, InstallStep, StepAlternative
from ..markdown import slugify
from ..templating import TemplateMissingPlaceholder, render_placeholders
from .base import INSTALL_MD, ArtifactRenderer, GenerationContext

AGENT_PREAMBLE = (
    "You are an expert at installing {name}. Execute these steps autonomously\n"
    "and inform the user of any decisions made. Request approval before running\n"
    "installation commands."
)
EXECUTE_NOW = "Proceed with installation following the TODO checklist above."


@dataclass(frozen=True)
class InstallTemplate:
    """Defaults for one project type."""

    project_type: str
    name_placeholder: str
    objective: str
    done_when_command: Optional[str]
    expected_output: Optional[str]
    steps: Tuple[InstallStep, ...] = ()


INSTALL_TEMPLATES: Mapping[str, InstallTemplate] = MappingProxyType(
    {
        "package": InstallTemplate(
            project_type="package",
            name_placeholder="package-name",
            objective="Install {package-name} as a dependency in the current project.",
            done_when_command="npm list {package-name}",
            expected_output="the package installed at the expected version",
            steps=(
                InstallStep(
                    description="Install the package",
                    command="npm install {package-name}",
                    alternatives=[
                        StepAlternative(condition="pnpm", command="pnpm add {package-name}"),
                        StepAlternative(condition="yarn", command="yarn add {package-name}"),
                        StepAlternative(condition="bun", command="bun add {package-name}"),
                    ],
                ),
                InstallStep(description="Verify the installation", command="npm list {package-name}"),
            ),
        ),
        "cli-tool": InstallTemplate(
            project_type="cli-tool",
            name_placeholder="cli-name",
            objective="Install {cli-name} globally and verify it is accessible from the command line.",
            done_when_command="{cli-name} --version",
            expected_output="a version number",
            steps=(
                InstallStep(description="Check for an existing installation", command="{cli-name} --version"),
                InstallStep(
                    description="Install globally",
                    command="npm install -g {package-name}",
                    alternatives=[
                        StepAlternative(condition="pnpm", command="pnpm add -g {package-name}"),
                        StepAlternative(condition="Homebrew (macOS)", command="brew install {brew-formula}"),
                    ],
                ),
                InstallStep(description="Verify the CLI is on PATH", command="{cli-name} --version"),
            ),
        ),
        "desktop-app": InstallTemplate(
            project_type="desktop-app",
            name_placeholder="app-name",
            objective="Install and configure {app-name} on the desktop.",
            done_when_command='open -a "{app-name}"',
            expected_output="without errors and the app launches",
            steps=(
                InstallStep(
                    description="Install the application",
                    command="brew install --cask {cask-name}",
                    alternatives=[
                        StepAlternative(condition="direct download", command="open {download-url}"),
                    ],
                ),
                InstallStep(description="Launch the app", command='open -a "{app-name}"'),
            ),
        ),
        "generic": InstallTemplate(
            project_type="generic",
            name_placeholder="product-name",
            objective="Install and configure {product-name}.",
            done_when_command=None,
            expected_output="successfully",
        ),
    }
)


def select_template(project_type: str) -> InstallTemplate:
    return INSTALL_TEMPLATES.get(project_type, INSTALL_TEMPLATES["generic"])


def build_placeholder_values(config: AgentDocsConfig) -> Dict[str, Optional[str]]:
    """Name placeholders derived from project and install configuration."""
    install = config.install
    project = config.project
    package_name = install.package_name or install.placeholders.get("package-name") or project.name
    product_name = slugify(project.name) or package_name
    values: Dict[str, Optional[str]] = {
        "product-name": product_name,
        "package-name": package_name,
        "cli-name": install.cli_name or package_name,
        "app-name": install.app_name or project.name,
        "brew-formula": package_name,
        "cask-name": product_name,
        "version": project.version,
    }
    values.update(install.placeholders)
    return values


class InstallMdRenderer(ArtifactRenderer):
    """Fills the project-type template from the install configuration."""

    kind = INSTALL_MD

    def render(self, context: GenerationContext) -> str:
        config = context.config
        install = config.install
        template = select_template(config.project.type)
        name = template.project_type
        values = build_placeholder_values(config)

        def fill(text: str) -> str:
            return render_placeholders(text, values, template_name=name)

        values["objective"] = fill(install.objective or template.objective)
        values["description"] = fill(config.project.tagline) if config.project.tagline else values["objective"]
        done_command = install.done_when.command or template.done_when_command
        if done_command is None:
            raise TemplateMissingPlaceholder("done-when-command", name)
        values["done-when-command"] = fill(done_command)
        expected = install.done_when.expected_output or template.expected_output
        if expected is None:
            raise TemplateMissingPlaceholder("expected-output", name)
        values["expected-output"] = fill(expected)

        steps = list(install.steps) or list(template.steps)
        if not steps:
            raise TemplateMissingPlaceholder("steps", name)

        sections: List[Tuple[str, List[str]]] = []
        if install.prerequisites:
            sections.append(
                ("Verify prerequisites", [f"- {fill(item)}" for item in install.prerequisites])
            )
        for step in steps:
            sections.append((fill(step.description), self._step_body(step, fill)))

        heading = "{" + template.name_placeholder + "}"
        lines: List[str] = [
            fill(f"# {heading}"),
            "",
            f"> {values['description']}",
            "",
            fill(AGENT_PREAMBLE.replace("{name}", heading)),
            "",
            "## OBJECTIVE",
            "",
            str(values["objective"]),
            "",
            "## DONE WHEN",
            "",
            f"`{values['done-when-command']}` returns {values['expected-output']}.",
            "",
            "## TODO",
            "",
        ]
        lines.extend(f"- [ ] Step {index}: {title}" for index, (title, _) in enumerate(sections, start=1))
        lines.append("")
        for index, (title, body) in enumerate(sections, start=1):
            lines.append(f"## Step {index}: {title}")
            lines.append("")
            if body:
                lines.extend(body)
                lines.append("")
        lines.extend(["## EXECUTE NOW", "", EXECUTE_NOW])
        return "\n".join(lines) + "\n"

    @staticmethod
    def _step_body(step: InstallStep, fill) -> List[str]:
        body: List[str] = []
        if step.command:
            body.extend(["```bash", fill(step.command), "```"])
        for alternative in step.alternatives:
            if body:
                body.append("")
            body.extend(
                [
                    f"**Alternative for {fill(alternative.condition)}:**",
                    "",
                    "```bash",
                    fill(alternative.command),
                    "```",
                ]
            )
        return body


__all__ = [
    "INSTALL_TEMPLATES",
    "InstallMdRenderer",
    "InstallTemplate",
    "build_placeholder_values",
    "select_template",
]
