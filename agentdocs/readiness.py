"""Agent-readiness coaching: how well a project briefs coding agents."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .logging import get_logger
from .models import Page

STATUS_EXCELLENT = "excellent"
STATUS_GOOD = "good"
STATUS_NEEDS_WORK = "needs-work"
STATUS_MISSING = "missing"

_STATUS_ICONS = {
    STATUS_EXCELLENT: "★",
    STATUS_GOOD: "●",
    STATUS_NEEDS_WORK: "○",
    STATUS_MISSING: "✗",
}

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

_GRADE_BANDS = ((0.9, "A"), (0.8, "B"), (0.7, "C"), (0.6, "D"))

QUICK_WINS: tuple[str, ...] = (
    "`agentdocs generate` - write AGENTS.md, llms.txt, docs.json and install.md",
    "Create docs/agent/ with dense versions of the key pages",
    "Create docs/prompts/ with task templates",
)

_CODE_WITH_IMPORT = re.compile(r"```\w+\n.*?\b(?:import|require|from)\s", re.DOTALL)
_FENCE_WITH_LANGUAGE = re.compile(r"```\w+")
_TYPE_DEFINITION = re.compile(
    r"interface\s+\w+\s*\{|type\s+\w+\s*=|class\s+\w+[\s(:]|def\s+\w+\(.*\)\s*->|@dataclass"
)
_FILE_PATH = re.compile(r"`(?:src|lib|packages|tests?)/|`\./")
_VALID_VALUES = re.compile(r"valid\s+(?:values|options)|one\s+of|enum|'[^']+'\s*\|\s*'[^']+'", re.IGNORECASE)
_AGENT_BRIEFING = re.compile(r"copy.*agent|agent.*copy|brief.*agent|\bllms?\b|ai assistant", re.IGNORECASE)


@dataclass(frozen=True)
class ReadinessCheck:
    name: str
    passed: bool
    points: int
    max_points: int
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "passed": self.passed,
            "points": self.points,
            "maxPoints": self.max_points,
        }
        if self.hint:
            data["hint"] = self.hint
        return data


@dataclass
class ReadinessCategory:
    name: str
    checks: List[ReadinessCheck] = field(default_factory=list)

    @property
    def score(self) -> int:
        return sum(check.points for check in self.checks)

    @property
    def max_score(self) -> int:
        return sum(check.max_points for check in self.checks)

    @property
    def status(self) -> str:
        return category_status(self.score, self.max_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": self.score,
            "maxScore": self.max_score,
            "status": self.status,
            "checks": [check.to_dict() for check in self.checks],
        }


@dataclass(frozen=True)
class Recommendation:
    priority: str
    category: str
    action: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priority": self.priority,
            "category": self.category,
            "action": self.action,
            "reason": self.reason,
        }


@dataclass
class ReadinessReport:
    """Scored checklist plus prioritised advice."""

    categories: List[ReadinessCategory]
    recommendations: List[Recommendation] = field(default_factory=list)
    quick_wins: List[str] = field(default_factory=list)

    @property
    def score(self) -> int:
        return sum(category.score for category in self.categories)

    @property
    def max_score(self) -> int:
        return sum(category.max_score for category in self.categories)

    @property
    def grade(self) -> str:
        return letter_grade(self.score, self.max_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "maxScore": self.max_score,
            "grade": self.grade,
            "categories": [category.to_dict() for category in self.categories],
            "recommendations": [item.to_dict() for item in self.recommendations],
            "quickWins": list(self.quick_wins),
        }


def category_status(score: int, max_score: int) -> str:
    if max_score <= 0:
        return STATUS_MISSING
    ratio = score / max_score
    if ratio >= 0.9:
        return STATUS_EXCELLENT
    if ratio >= 0.6:
        return STATUS_GOOD
    if ratio > 0:
        return STATUS_NEEDS_WORK
    return STATUS_MISSING


def letter_grade(score: int, max_score: int) -> str:
    ratio = score / max_score if max_score > 0 else 0.0
    for floor, grade in _GRADE_BANDS:
        if ratio >= floor:
            return grade
    return "F"


def _check(name: str, passed: bool, points: int, hint: str) -> ReadinessCheck:
    return ReadinessCheck(
        name=name,
        passed=passed,
        points=points if passed else 0,
        max_points=points,
        hint=None if passed else hint,
    )


class ReadinessCoach:
    """Evaluates the agent-readiness checklist for one project.

    Page checks run against scanned pages; file checks (generated artifacts,
    ``CLAUDE.md``, ``agent/`` and ``prompts/`` folders) look at the project
    and docs directories directly.
    """

    def __init__(
        self,
        root: Path,
        docs_root: Path,
        *,
        output_dir: Path | None = None,
        config_found: bool = False,
    ) -> None:
        self.root = Path(root)
        self.docs_root = Path(docs_root)
        self.output_dir = Path(output_dir) if output_dir is not None else self.root
        self.config_found = config_found
        self.logger = get_logger("readiness")

    def assess(self, pages: Sequence[Page]) -> ReadinessReport:
        by_id = {page.id: page for page in pages}
        categories = [
            self._project_context(by_id),
            self._agent_files(),
            self._handoff(pages),
            self._content_quality(pages),
        ]
        recommendations = build_recommendations(categories)
        report = ReadinessReport(
            categories=categories,
            recommendations=recommendations,
            quick_wins=list(QUICK_WINS),
        )
        self.logger.info("Agent readiness %d/%d (grade %s)", report.score, report.max_score, report.grade)
        return report

    def _project_context(self, by_id: Dict[str, Page]) -> ReadinessCategory:
        overview = _first_page(by_id, ("overview", "intro", "introduction", "readme", "index"))
        quickstart = _first_page(by_id, ("quickstart", "getting-started", "quick-start"))
        architecture = _first_page(by_id, ("architecture", "structure", "design"))
        api = _first_page(by_id, ("api", "api-reference", "reference"))
        return ReadinessCategory(
            name="Project Context",
            checks=[
                _check(
                    "Has overview documentation",
                    overview is not None,
                    5,
                    "Create docs/overview.md with a project introduction",
                ),
                _check(
                    "Has quickstart with code examples",
                    quickstart is not None and bool(_FENCE_WITH_LANGUAGE.search(quickstart.raw_content)),
                    5,
                    "Create docs/quickstart.md with working code examples",
                ),
                _check(
                    "Has architecture documentation",
                    architecture is not None,
                    5,
                    "Create docs/architecture.md explaining the project structure",
                ),
                _check(
                    "Has API reference with types",
                    api is not None and bool(_TYPE_DEFINITION.search(api.raw_content)),
                    5,
                    "Create docs/api.md documenting public types and signatures",
                ),
                _check(
                    "Has agentdocs.yml",
                    self.config_found,
                    5,
                    "Add an agentdocs.yml describing the project",
                ),
            ],
        )

    def _agent_files(self) -> ReadinessCategory:
        search = _unique_dirs((self.output_dir, self.root, self.docs_root))
        agents_md = _any_file(search, ("AGENTS.md",))
        llms_txt = _any_file(search, ("llms.txt", "llm.txt")) or _any_file(
            [self.root / "public"], ("llms.txt", "llm.txt")
        )
        claude_md = _any_file([self.root, self.root / ".claude"], ("CLAUDE.md",))
        agent_dir = (self.docs_root / "agent").is_dir()
        return ReadinessCategory(
            name="Agent-Optimized Files",
            checks=[
                _check("Has AGENTS.md", agents_md, 10, "Run `agentdocs generate --agents-md` to create AGENTS.md"),
                _check("Has llms.txt", llms_txt, 10, "Run `agentdocs generate --llms-txt` to create llms.txt"),
                _check("Has CLAUDE.md", claude_md, 5, "Create CLAUDE.md with project-specific agent rules"),
                _check(
                    "Has agent/ folder",
                    agent_dir,
                    5,
                    "Create docs/agent/ with dense, structured versions of the docs",
                ),
            ],
        )

    def _handoff(self, pages: Sequence[Page]) -> ReadinessCategory:
        prompts_dir = (self.docs_root / "prompts").is_dir()
        skills = _any_file([self.docs_root], ("skill.md", "skills.md"))
        briefing = _any_page_matches(pages, _AGENT_BRIEFING.search)
        return ReadinessCategory(
            name="Human-to-Agent Handoff",
            checks=[
                _check(
                    "Has prompts/ folder",
                    prompts_dir,
                    10,
                    "Create docs/prompts/ with task templates for common operations",
                ),
                _check("Has skill.md", skills, 10, "Create docs/skill.md with reusable skill definitions"),
                _check(
                    "Docs explain how to brief agents",
                    briefing,
                    5,
                    "Add a section explaining how to use the docs with AI assistants",
                ),
            ],
        )

    def _content_quality(self, pages: Sequence[Page]) -> ReadinessCategory:
        return ReadinessCategory(
            name="Content Quality",
            checks=[
                _check(
                    "Code examples are complete",
                    _any_page_matches(pages, _CODE_WITH_IMPORT.search),
                    5,
                    "Include full, runnable code examples with their imports",
                ),
                _check(
                    "Type definitions documented",
                    _any_page_matches(pages, _TYPE_DEFINITION.search),
                    5,
                    "Document the public types and signatures",
                ),
                _check(
                    "File paths reference actual code",
                    _any_page_matches(pages, _FILE_PATH.search),
                    5,
                    "Reference real file paths such as `src/cli.py`",
                ),
                _check(
                    "Valid values are listed",
                    _any_page_matches(pages, _VALID_VALUES.search),
                    5,
                    "List the valid values for options (for example `size: 's' | 'm' | 'l'`)",
                ),
            ],
        )


def build_recommendations(categories: Iterable[ReadinessCategory]) -> List[Recommendation]:
    """One recommendation per failing check, highest value first."""
    recommendations: List[Recommendation] = []
    for category in categories:
        for check in category.checks:
            if check.passed or not check.hint:
                continue
            if check.max_points >= 10:
                priority = "high"
            elif check.max_points >= 5:
                priority = "medium"
            else:
                priority = "low"
            recommendations.append(
                Recommendation(
                    priority=priority,
                    category=category.name,
                    action=check.hint,
                    reason=f"Adds {check.max_points} points to the agent-readiness score",
                )
            )
    recommendations.sort(key=lambda item: _PRIORITY_ORDER[item.priority])
    return recommendations


def _first_page(by_id: Dict[str, Page], candidates: Sequence[str]) -> Optional[Page]:
    for candidate in candidates:
        page = by_id.get(candidate)
        if page is not None:
            return page
    return None


def _any_page_matches(pages: Sequence[Page], search: Callable[[str], Any]) -> bool:
    return any(search(page.raw_content) for page in pages)


def _unique_dirs(paths: Iterable[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    for path in paths:
        seen.setdefault(path.resolve(), None)
    return list(seen)


def _any_file(directories: Iterable[Path], names: Sequence[str]) -> bool:
    return any((directory / name).is_file() for directory in directories for name in names)


def format_readiness(report: ReadinessReport, *, verbose: bool = False) -> str:
    """Render the human-readable readiness summary."""
    lines: List[str] = ["Agent Readiness Report", ""]
    percent = round(report.score / report.max_score * 100) if report.max_score else 0
    lines.append(f"Overall score: {report.score}/{report.max_score} ({percent}%, grade {report.grade})")
    lines.append("")
    lines.append("Categories:")
    for category in report.categories:
        icon = _STATUS_ICONS.get(category.status, "?")
        lines.append(f"  {icon} {category.name}: {category.score}/{category.max_score} ({category.status})")
        if verbose:
            for check in category.checks:
                marker = "✓" if check.passed else "✗"
                lines.append(f"      {marker} {check.name}")
    if not verbose:
        lines.append("")
        lines.append("Run with --verbose to see individual checks.")

    if report.recommendations:
        lines.append("")
        lines.append("Top recommendations:")
        for item in report.recommendations[:5]:
            lines.append(f"  [{item.priority}] {item.action}")
            lines.append(f"      {item.reason}")

    if report.quick_wins:
        lines.append("")
        lines.append("Quick wins:")
        lines.extend(f"  - {win}" for win in report.quick_wins)
    return "\n".join(lines) + "\n"


def readiness_to_json(report: ReadinessReport) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"


__all__ = [
    "QUICK_WINS",
    "ReadinessCategory",
    "ReadinessCheck",
    "ReadinessCoach",
    "ReadinessReport",
    "Recommendation",
    "STATUS_EXCELLENT",
    "STATUS_GOOD",
    "STATUS_MISSING",
    "STATUS_NEEDS_WORK",
    "build_recommendations",
    "category_status",
    "format_readiness",
    "letter_grade",
    "readiness_to_json",
]
