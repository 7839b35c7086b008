"""Documentation completeness audit."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .config import DEFAULT_MIN_WORDS, DEFAULT_PASS_THRESHOLD, AgentConfig
from .logging import get_logger
from .markdown import page_id_from_path
from .models import FlatPage, Page, ScanResult

STATUS_COMPLETE = "complete"
STATUS_PARTIAL = "partial"
STATUS_MISSING = "missing"

CHECK_NAMES: tuple[str, ...] = ("presence", "substance", "structure", "examples")
TOTAL_POINTS = 100.0
_EPSILON = 1e-9

_STATUS_ICONS = {
    STATUS_COMPLETE: "✓",
    STATUS_PARTIAL: "⚠",
    STATUS_MISSING: "✗",
}


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one of the four per-section checks."""

    name: str
    passed: bool
    points: float
    max_points: float
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "points": self.points,
            "max": self.max_points,
            "message": self.message,
        }


@dataclass
class AuditResult:
    """Score for one required section."""

    id: str
    label: str
    status: str
    score: float
    max: float
    checks: List[CheckResult] = field(default_factory=list)
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "path": self.path,
            "status": self.status,
            "score": self.score,
            "max": self.max,
            "checks": [check.to_dict() for check in self.checks],
        }


@dataclass
class AuditReport:
    """Aggregate of all section results plus advisory output."""

    results: List[AuditResult]
    pass_threshold: float = DEFAULT_PASS_THRESHOLD
    optional: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def total_score(self) -> float:
        return sum(result.score for result in self.results)

    @property
    def total_max(self) -> float:
        return sum(result.max for result in self.results)

    @property
    def percentage(self) -> float:
        if self.total_max <= 0:
            return 100.0
        return self.total_score / self.total_max * 100.0

    @property
    def passed(self) -> bool:
        return self.percentage + _EPSILON >= self.pass_threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "totalScore": self.total_score,
            "totalMax": self.total_max,
            "percentage": round(self.percentage, 2),
            "passThreshold": self.pass_threshold,
            "passed": self.passed,
            "optional": list(self.optional),
            "recommendations": list(self.recommendations),
        }


class AuditEngine:
    """Scores required sections with four equally weighted checks.

    Every required section is worth ``100 / len(required)`` points regardless
    of optional pages; each check contributes a quarter of that. Absence is a
    scored outcome, never an exception.
    """

    def __init__(
        self,
        required: Sequence[str],
        *,
        min_words: int = DEFAULT_MIN_WORDS,
        pass_threshold: float = DEFAULT_PASS_THRESHOLD,
    ) -> None:
        self.required = list(dict.fromkeys(required))
        self.min_words = min_words
        self.pass_threshold = pass_threshold
        self.logger = get_logger("audit")

    def audit(
        self,
        pages: Union[ScanResult, Mapping[str, Page], Sequence[Page]],
        flat: Sequence[FlatPage] = (),
        *,
        agent: Optional[AgentConfig] = None,
    ) -> AuditReport:
        by_id = _index_pages(pages)
        section_max = TOTAL_POINTS / len(self.required) if self.required else 0.0

        results: List[AuditResult] = []
        recommendations: List[str] = []
        for entry in self.required:
            result = self.audit_section(entry, by_id.get(page_id_from_path(entry)), section_max)
            results.append(result)
            self.logger.debug("%s: %s (%.2f/%.2f)", result.label, result.status, result.score, result.max)
            if result.status == STATUS_MISSING:
                recommendations.append(f"Create required {result.label}")
            else:
                recommendations.extend(
                    f"{result.label}: {check.message}" for check in result.checks if not check.passed
                )

        required_ids = {result.id for result in results}
        ordered_ids = [entry.id for entry in flat] or list(by_id)
        optional = [page_id for page_id in ordered_ids if page_id in by_id and page_id not in required_ids]

        if agent is not None:
            if not agent.critical_context:
                recommendations.append("Add agent.critical_context entries so generated agent context has rules")
            if not agent.entry_points:
                recommendations.append("Add agent.entry_points to help agents navigate the codebase")

        report = AuditReport(
            results=results,
            pass_threshold=self.pass_threshold,
            optional=optional,
            recommendations=recommendations,
        )
        self.logger.info(
            "Audit score %s/%s (%.1f%%)",
            format_points(report.total_score),
            format_points(report.total_max),
            report.percentage,
        )
        return report

    def audit_section(self, entry: str, page: Optional[Page], section_max: float) -> AuditResult:
        """Score one required section; ``page`` is None when it does not exist."""
        share = section_max / len(CHECK_NAMES)
        present = page is not None and not page.is_empty
        words = page.word_count if page is not None else 0
        has_h2 = page is not None and bool(page.headings_at(2))
        has_code = page is not None and page.code_block_count > 0

        outcomes = [
            ("presence", present, "page exists" if present else "page is missing or empty"),
            (
                "substance",
                present and words >= self.min_words,
                f"{words} words (minimum {self.min_words})",
            ),
            (
                "structure",
                present and has_h2,
                "has a second-level heading" if has_h2 else "no second-level (##) heading",
            ),
            (
                "examples",
                present and has_code,
                "has a fenced code block" if has_code else "no fenced code block",
            ),
        ]
        checks = [
            CheckResult(name=name, passed=passed, points=share if passed else 0.0, max_points=share, message=message)
            for name, passed, message in outcomes
        ]

        if not present:
            status = STATUS_MISSING
        elif all(check.passed for check in checks):
            status = STATUS_COMPLETE
        else:
            status = STATUS_PARTIAL

        page_id = page_id_from_path(entry)
        return AuditResult(
            id=page_id,
            label=_label(entry),
            status=status,
            score=sum(check.points for check in checks),
            max=section_max,
            checks=checks,
            path=page.path if page is not None else None,
        )


def _index_pages(pages: Union[ScanResult, Mapping[str, Page], Sequence[Page]]) -> Dict[str, Page]:
    if isinstance(pages, ScanResult):
        return pages.by_id()
    if isinstance(pages, Mapping):
        return dict(pages)
    return {page.id: page for page in pages}


def _label(entry: str) -> str:
    cleaned = entry.strip().lstrip("./")
    return cleaned if cleaned.lower().endswith(".md") else f"{cleaned}.md"


def format_points(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_report(report: AuditReport, *, verbose: bool = False, project_name: str | None = None) -> str:
    """Render the human-readable audit summary."""
    lines: List[str] = []
    if project_name:
        lines.append(f"Auditing {project_name} documentation")
        lines.append("")
    for result in report.results:
        icon = _STATUS_ICONS.get(result.status, "?")
        lines.append(
            f"{icon} {result.label} - {result.status} "
            f"({format_points(result.score)}/{format_points(result.max)})"
        )
        if verbose:
            for check in result.checks:
                marker = "+" if check.passed else "-"
                lines.append(f"    {marker} {check.name}: {check.message}")

    if verbose and report.optional:
        lines.append("")
        lines.append("Optional pages (not scored): " + ", ".join(report.optional))

    lines.append("")
    lines.append(
        f"Score: {format_points(report.total_score)}/{format_points(report.total_max)} "
        f"({report.percentage:.1f}%, threshold {format_points(report.pass_threshold)}%)"
    )
    lines.append("Result: PASS" if report.passed else "Result: FAIL")

    if report.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        lines.extend(f"  - {item}" for item in report.recommendations)
    return "\n".join(lines) + "\n"


def report_to_json(report: AuditReport) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"


__all__ = [
    "AuditEngine",
    "AuditReport",
    "AuditResult",
    "CHECK_NAMES",
    "CheckResult",
    "STATUS_COMPLETE",
    "STATUS_MISSING",
    "STATUS_PARTIAL",
    "format_points",
    "format_report",
    "report_to_json",
]
