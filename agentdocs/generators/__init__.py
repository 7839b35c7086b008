"""Artifact renderers derived from the page tree and configuration."""

from .agents_md import AgentsMdRenderer
from .base import (
    AGENTS_MD,
    ARTIFACT_FILENAMES,
    ARTIFACT_KINDS,
    DOCS_JSON,
    INSTALL_MD,
    LLMS_TXT,
    ArtifactRenderer,
    GeneratedArtifact,
    GenerationContext,
)
from .docs_json import DocsJsonRenderer
from .engine import (
    ArtifactFailure,
    GenerationResult,
    GeneratorEngine,
    default_renderers,
    select_kinds,
    write_artifacts,
)
from .install_md import InstallMdRenderer
from .llms_txt import LlmsTxtRenderer

__all__ = [
    "AGENTS_MD",
    "ARTIFACT_FILENAMES",
    "ARTIFACT_KINDS",
    "AgentsMdRenderer",
    "ArtifactFailure",
    "ArtifactRenderer",
    "DOCS_JSON",
    "DocsJsonRenderer",
    "GeneratedArtifact",
    "GenerationContext",
    "GenerationResult",
    "GeneratorEngine",
    "INSTALL_MD",
    "InstallMdRenderer",
    "LLMS_TXT",
    "LlmsTxtRenderer",
    "default_renderers",
    "select_kinds",
    "write_artifacts",
]
