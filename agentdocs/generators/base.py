"""Shared types for artifact renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import AgentDocsConfig
from ..models import FlatPage, Page, PageTree

AGENTS_MD = "agents-md"
LLMS_TXT = "llms-txt"
DOCS_JSON = "docs-json"
INSTALL_MD = "install-md"

ARTIFACT_KINDS: tuple[str, ...] = (AGENTS_MD, LLMS_TXT, DOCS_JSON, INSTALL_MD)

ARTIFACT_FILENAMES: Dict[str, str] = {
    AGENTS_MD: "AGENTS.md",
    LLMS_TXT: "llms.txt",
    DOCS_JSON: "docs.json",
    INSTALL_MD: "install.md",
}


@dataclass(frozen=True)
class GenerationContext:
    """Read-only inputs every renderer draws from."""

    config: AgentDocsConfig
    tree: PageTree
    flat: List[FlatPage]
    pages: Dict[str, Page] = field(default_factory=dict)

    def page(self, page_id: str) -> Optional[Page]:
        return self.pages.get(page_id)


@dataclass(frozen=True)
class GeneratedArtifact:
    """Rendered output for one artifact kind."""

    kind: str
    filename: str
    content: str


class ArtifactRenderer(ABC):
    """Contract for a renderer producing one artifact from the shared model."""

    kind: str = ""

    @property
    def filename(self) -> str:
        return ARTIFACT_FILENAMES[self.kind]

    @abstractmethod
    def render(self, context: GenerationContext) -> str:
        """Return the artifact text; must be a pure function of ``context``."""


__all__ = [
    "AGENTS_MD",
    "ARTIFACT_FILENAMES",
    "ARTIFACT_KINDS",
    "ArtifactRenderer",
    "DOCS_JSON",
    "GeneratedArtifact",
    "GenerationContext",
    "INSTALL_MD",
    "LLMS_TXT",
]
