"""Render and write the derived artifacts, isolating failures per artifact."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import AgentDocsConfig
from ..logging import get_logger
from ..models import FlatPage, Page, PageTree
from .agents_md import AgentsMdRenderer
from .base import ARTIFACT_KINDS, ArtifactRenderer, GeneratedArtifact, GenerationContext
from .docs_json import DocsJsonRenderer
from .install_md import InstallMdRenderer
from .llms_txt import LlmsTxtRenderer

_MAX_WORKERS = 4


@dataclass
class ArtifactFailure:
    """An artifact that could not be rendered or written."""

    kind: str
    error: str


@dataclass
class GenerationResult:
    """Outcome of one generation run."""

    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    failures: List[ArtifactFailure] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def artifact(self, kind: str) -> Optional[GeneratedArtifact]:
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None


def default_renderers() -> Dict[str, ArtifactRenderer]:
    renderers: List[ArtifactRenderer] = [
        AgentsMdRenderer(),
        LlmsTxtRenderer(),
        DocsJsonRenderer(),
        InstallMdRenderer(),
    ]
    return {renderer.kind: renderer for renderer in renderers}


def select_kinds(selected: Iterable[str] | None) -> List[str]:
    """Resolve selector flags to artifact kinds; no selection means all of them."""
    wanted = set(selected or ())
    unknown = wanted.difference(ARTIFACT_KINDS)
    if unknown:
        raise ValueError(f"Unknown artifact kind(s): {', '.join(sorted(unknown))}")
    if not wanted:
        return list(ARTIFACT_KINDS)
    return [kind for kind in ARTIFACT_KINDS if kind in wanted]


class GeneratorEngine:
    """Runs the selected renderers over one shared generation context."""

    def __init__(
        self,
        config: AgentDocsConfig,
        renderers: Mapping[str, ArtifactRenderer] | None = None,
    ) -> None:
        self.config = config
        self.renderers = dict(renderers) if renderers is not None else default_renderers()
        self.logger = get_logger("generators")

    def render(
        self,
        tree: PageTree,
        flat: Sequence[FlatPage],
        pages: Mapping[str, Page],
        kinds: Iterable[str] | None = None,
    ) -> GenerationResult:
        context = GenerationContext(config=self.config, tree=tree, flat=list(flat), pages=dict(pages))
        result = GenerationResult()
        for kind in select_kinds(kinds):
            renderer = self.renderers.get(kind)
            if renderer is None:
                result.failures.append(ArtifactFailure(kind, "no renderer registered"))
                self.logger.error("No renderer registered for %s", kind)
                continue
            try:
                content = renderer.render(context)
            except Exception as exc:  # isolated per artifact
                result.failures.append(ArtifactFailure(kind, str(exc)))
                self.logger.error("Failed to render %s: %s", renderer.filename, exc)
                self.logger.debug("Render failure for %s", kind, exc_info=True)
                continue
            result.artifacts.append(GeneratedArtifact(kind=kind, filename=renderer.filename, content=content))
            self.logger.debug("Rendered %s (%d chars)", renderer.filename, len(content))
        return result


def write_artifacts(
    result: GenerationResult,
    output_dir: Path,
    *,
    max_workers: int = _MAX_WORKERS,
) -> GenerationResult:
    """Write rendered artifacts under ``output_dir``; write errors become failures."""
    logger = get_logger("generators")
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        for artifact in result.artifacts:
            result.failures.append(ArtifactFailure(artifact.kind, f"cannot create {output_dir}: {exc}"))
        logger.error("Cannot create output directory %s: %s", output_dir, exc)
        return result

    def _write(artifact: GeneratedArtifact) -> Optional[str]:
        target = output_dir / artifact.filename
        try:
            target.write_bytes(artifact.content.encode("utf-8"))
        except OSError as exc:
            return str(exc)
        return None

    with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
        errors = list(pool.map(_write, result.artifacts))

    for artifact, error in zip(result.artifacts, errors):
        if error is None:
            path = output_dir / artifact.filename
            result.written.append(path)
            logger.info("Wrote %s", path)
        else:
            result.failures.append(ArtifactFailure(artifact.kind, error))
            logger.error("Failed to write %s: %s", artifact.filename, error)
    return result


__all__ = [
    "ArtifactFailure",
    "GenerationResult",
    "GeneratorEngine",
    "default_renderers",
    "select_kinds",
    "write_artifacts",
]
