"""llms.txt: compact plain-text summary, one paragraph per page."""

from __future__ import annotations

from typing import List

from ..markdown import first_paragraph, strip_inline_markdown, truncate_words
from .base import LLMS_TXT, ArtifactRenderer, GenerationContext

MAX_PARAGRAPH_WORDS = 50


class LlmsTxtRenderer(ArtifactRenderer):
    """Heading-free distillation that fits a small context budget; no code."""

    kind = LLMS_TXT

    def __init__(self, max_paragraph_words: int = MAX_PARAGRAPH_WORDS) -> None:
        self.max_paragraph_words = max_paragraph_words

    def render(self, context: GenerationContext) -> str:
        project = context.config.project
        header = project.name
        if project.tagline:
            header = f"{project.name} - {project.tagline}"
        blocks: List[str] = [header]

        for entry in context.flat:
            page = context.page(entry.id)
            if page is None:
                continue
            paragraph = first_paragraph(page.body) or strip_inline_markdown(page.description or "")
            if not paragraph:
                continue
            label = " / ".join(entry.breadcrumb + (entry.title,))
            blocks.append(f"{label}: {truncate_words(paragraph, self.max_paragraph_words)}")

        return "\n\n".join(blocks) + "\n"


__all__ = ["LlmsTxtRenderer", "MAX_PARAGRAPH_WORDS"]
