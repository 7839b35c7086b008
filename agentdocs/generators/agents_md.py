"""AGENTS.md: critical context header followed by selected page sources."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..logging import get_logger
from ..markdown import page_id_from_path
from .base import AGENTS_MD, ArtifactRenderer, GenerationContext

_TEMPLATE_NAME = "agents.md.j2"


class AgentsMdRenderer(ArtifactRenderer):
    """Renders the agent-context document through a Jinja2 template."""

    kind = AGENTS_MD

    def __init__(self, templates_dir: Path | None = None) -> None:
        directories = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        self._env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.logger = get_logger("generators.agents_md")

    def render(self, context: GenerationContext) -> str:
        config = context.config
        template = self._env.get_template(_TEMPLATE_NAME)
        text = template.render(
            project=config.project,
            critical_context=list(config.agent.critical_context),
            entry_points=list(config.agent.entry_points.items()),
            rules=list(config.agent.rules),
            sections=self._select_sections(context),
        )
        return text.rstrip() + "\n"

    def _select_sections(self, context: GenerationContext) -> List[Dict[str, str]]:
        wanted = {page_id_from_path(section) for section in context.config.agent.sections}
        sections: List[Dict[str, str]] = []
        found = set()
        for entry in context.flat:
            if entry.id not in wanted:
                continue
            page = context.page(entry.id)
            if page is None:
                continue
            found.add(entry.id)
            sections.append(
                {
                    "title": entry.title,
                    "path": page.path,
                    "content": page.raw_content.strip(),
                }
            )
        for missing in sorted(wanted - found):
            self.logger.warning("Agent section %s has no page in the tree; skipped", missing)
        return sections


__all__ = ["AgentsMdRenderer"]
