"""docs.json: the page tree serialised for navigation tooling."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ..models import PageFolder, PageItem, PageNode, PageSeparator
from .base import DOCS_JSON, ArtifactRenderer, GenerationContext

SCHEMA_VERSION = 1


def serialise_nodes(nodes: Sequence[PageNode]) -> List[Dict[str, Any]]:
    """Mirror the tree node for node; pruned folders are already gone."""
    serialised: List[Dict[str, Any]] = []
    for node in nodes:
        if isinstance(node, PageItem):
            page = node.page
            serialised.append(
                {
                    "type": "page",
                    "id": node.id,
                    "title": node.title,
                    "status": node.status,
                    "path": page.path if page is not None else None,
                    "description": page.description if page is not None else None,
                    "headings": [heading.to_dict() for heading in page.headings] if page is not None else [],
                }
            )
        elif isinstance(node, PageFolder):
            serialised.append(
                {
                    "type": "folder",
                    "title": node.title,
                    "children": serialise_nodes(node.children),
                }
            )
        elif isinstance(node, PageSeparator):
            serialised.append({"type": "separator", "label": node.label})
    return serialised


class DocsJsonRenderer(ArtifactRenderer):
    """Canonical machine-readable index: tree plus flattened order."""

    kind = DOCS_JSON

    def render(self, context: GenerationContext) -> str:
        project = context.config.project
        payload = {
            "version": SCHEMA_VERSION,
            "name": project.name,
            "tagline": project.tagline,
            "type": project.type,
            "tree": serialise_nodes(context.tree.children),
            "pages": [entry.to_dict() for entry in context.flat],
        }
        return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


__all__ = ["DocsJsonRenderer", "SCHEMA_VERSION", "serialise_nodes"]
