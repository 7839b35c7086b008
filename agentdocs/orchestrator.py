"""Pipeline orchestration: scan, build the tree, then audit and generate."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .audit import AuditEngine, AuditReport
from .config import AgentDocsConfig, find_config, load_config
from .generators import ARTIFACT_FILENAMES, GenerationResult, GeneratorEngine, write_artifacts
from .generators.engine import ArtifactFailure
from .logging import get_logger
from .models import FlatPage, PageTree, PageWarning, ScanResult
from .readiness import ReadinessCoach, ReadinessReport
from .scanner import DocsScanner
from .tree import PageTreeBuilder, flatten

STAGE_SCANNED = "scanned"
STAGE_TREE_BUILT = "tree-built"
STAGE_SCORED = "scored"
STAGE_RENDERED = "rendered"


@dataclass
class RunReport:
    """What one pipeline run produced, stage by stage."""

    config: AgentDocsConfig
    stages: List[str] = field(default_factory=list)
    scan: Optional[ScanResult] = None
    tree: Optional[PageTree] = None
    flat: List[FlatPage] = field(default_factory=list)
    audit: Optional[AuditReport] = None
    generation: Optional[GenerationResult] = None
    failures: List[str] = field(default_factory=list)

    @property
    def warnings(self) -> List[PageWarning]:
        collected: List[PageWarning] = []
        if self.scan is not None:
            collected.extend(self.scan.warnings)
        if self.tree is not None:
            collected.extend(self.tree.warnings)
        return collected

    @property
    def artifact_failures(self) -> List[ArtifactFailure]:
        return list(self.generation.failures) if self.generation is not None else []

    @property
    def ok(self) -> bool:
        return not self.failures and not self.artifact_failures


class Pipeline:
    """Runs the agentdocs stages over one configured project.

    ``Scanned -> TreeBuilt`` always run in order; scoring and rendering are
    independent branches over the same tree, so a failure in one is recorded
    on the report without preventing the other.
    """

    def __init__(
        self,
        config: AgentDocsConfig,
        *,
        scanner: DocsScanner | None = None,
        generator: GeneratorEngine | None = None,
    ) -> None:
        self.config = config
        self.scanner = scanner or DocsScanner(
            include=config.docs.include,
            exclude=list(config.docs.exclude) + self._artifact_excludes(config),
        )
        self.generator = generator or GeneratorEngine(config)
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_path(cls, path: str | Path = ".") -> "Pipeline":
        """Load configuration from ``path`` (file or directory) and build a pipeline."""
        return cls(load_config(Path(path).expanduser()))

    def run(
        self,
        *,
        audit: bool = True,
        generate: bool = True,
        kinds: Iterable[str] | None = None,
        output_dir: Path | None = None,
        write: bool = True,
    ) -> RunReport:
        """Execute the pipeline; ``ScanError`` propagates before any output is written."""
        report = RunReport(config=self.config)
        docs_root = self.config.docs_root
        self.logger.info("Scanning %s", docs_root)
        scan = self.scanner.scan(docs_root)
        report.scan = scan
        report.stages.append(STAGE_SCANNED)

        builder = PageTreeBuilder(navigation=self.config.docs.navigation, required=self.config.docs.required)
        tree = builder.build(scan, self.config.project.name)
        report.tree = tree
        report.flat = flatten(tree)
        report.stages.append(STAGE_TREE_BUILT)

        if audit:
            self._score(report, scan)
        if generate:
            self._render(report, scan, tree, kinds=kinds, output_dir=output_dir, write=write)
        return report

    def audit(self) -> RunReport:
        return self.run(audit=True, generate=False)

    def generate(
        self,
        kinds: Iterable[str] | None = None,
        *,
        output_dir: Path | None = None,
        write: bool = True,
    ) -> RunReport:
        return self.run(audit=False, generate=True, kinds=kinds, output_dir=output_dir, write=write)

    def readiness(self) -> ReadinessReport:
        """Agent-readiness checklist over the scanned docs and project files."""
        docs_root = self.config.docs_root
        pages = self.scanner.scan(docs_root).pages if docs_root.is_dir() else []
        coach = ReadinessCoach(
            self.config.root,
            docs_root,
            output_dir=self.config.output_dir,
            config_found=self.config.source is not None or find_config(self.config.root) is not None,
        )
        return coach.assess(pages)

    def _score(self, report: RunReport, scan: ScanResult) -> None:
        engine = AuditEngine(
            self.config.docs.required,
            min_words=self.config.audit.min_words,
            pass_threshold=self.config.audit.pass_threshold,
        )
        try:
            report.audit = engine.audit(scan, report.flat, agent=self.config.agent)
        except Exception as exc:  # recorded on the report; rendering still runs
            report.failures.append(f"audit: {exc}")
            self.logger.error("Audit failed: %s", exc)
            self.logger.debug("Audit failure", exc_info=True)
            return
        report.stages.append(STAGE_SCORED)

    def _render(
        self,
        report: RunReport,
        scan: ScanResult,
        tree: PageTree,
        *,
        kinds: Iterable[str] | None,
        output_dir: Path | None,
        write: bool,
    ) -> None:
        try:
            result = self.generator.render(tree, report.flat, scan.by_id(), kinds)
        except ValueError as exc:
            report.failures.append(f"generate: {exc}")
            self.logger.error("Generation failed: %s", exc)
            return
        if write:
            write_artifacts(result, output_dir or self.config.output_dir)
        report.generation = result
        report.stages.append(STAGE_RENDERED)

    @staticmethod
    def _artifact_excludes(config: AgentDocsConfig) -> List[str]:
        """Generated files inside the docs root must not feed back into the scan."""
        docs_root = config.docs_root
        try:
            relative = config.output_dir.relative_to(docs_root)
        except ValueError:
            return []
        prefix = "" if str(relative) == "." else f"{relative.as_posix()}/"
        return [f"/{prefix}{filename}" for filename in ARTIFACT_FILENAMES.values() if filename.endswith(".md")]


__all__ = [
    "Pipeline",
    "RunReport",
    "STAGE_RENDERED",
    "STAGE_SCANNED",
    "STAGE_SCORED",
    "STAGE_TREE_BUILT",
]
