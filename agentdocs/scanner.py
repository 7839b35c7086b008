"""Docs tree scanning: turns markdown files into normalised Page records."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from .logging import get_logger, log_warnings
from .markdown import (
    HeadingSlugger,
    count_code_blocks,
    count_words,
    page_id_from_path,
    parse_headings,
    split_front_matter,
)
from .models import Heading, Page, PageWarning, ScanResult

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".agentdocs",
}

_MAX_WORKERS = 8


class ScanError(RuntimeError):
    """Raised when the docs root cannot be scanned at all."""


class DuplicatePageIdError(ScanError):
    """Raised when two source files normalise to the same page id."""

    def __init__(self, page_id: str, first: str, second: str) -> None:
        super().__init__(f"Pages {first!r} and {second!r} both normalise to id {page_id!r}")
        self.page_id = page_id
        self.paths = (first, second)


@dataclass
class PathRule:
    """Gitignore-style pattern used for include/exclude filtering."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    @classmethod
    def parse(cls, raw: str) -> Optional["PathRule"]:
        pattern = raw.strip().replace("\\", "/")
        if not pattern:
            return None
        directory_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        anchored = pattern.startswith("/")
        pattern = pattern.lstrip("/")
        if pattern.startswith("**/"):
            pattern = pattern[3:]
            anchored = False
        return cls(
            pattern=pattern,
            directory_only=directory_only,
            anchored=anchored,
            has_slash="/" in pattern,
        )

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        candidates = list(_parents(rel_path))
        if is_dir or not self.directory_only:
            candidates.append(rel_path)
        if self.anchored or self.has_slash:
            return any(fnmatchcase(candidate, self.pattern) for candidate in candidates)
        return any(
            fnmatchcase(candidate.rsplit("/", 1)[-1], self.pattern) for candidate in candidates
        )


def _parents(rel_path: str) -> Iterator[str]:
    parts = rel_path.split("/")
    for index in range(1, len(parts)):
        yield "/".join(parts[:index])


def _compile(patterns: Sequence[str]) -> List[PathRule]:
    rules: List[PathRule] = []
    for pattern in patterns:
        rule = PathRule.parse(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def build_page(relative_path: str, text: str) -> Tuple[Page, List[PageWarning]]:
    """Derive a Page record from one file's text."""
    warnings: List[PageWarning] = []
    metadata, body, error = split_front_matter(text)
    if error:
        warnings.append(PageWarning(relative_path, error))

    page_id = page_id_from_path(relative_path)
    slugger = HeadingSlugger()
    title: Optional[str] = None
    headings: List[Heading] = []
    for depth, heading_text in parse_headings(body):
        if depth == 1 and title is None:
            title = heading_text
            continue
        slug = slugger.slug(heading_text)
        if depth in (2, 3):
            headings.append(Heading(depth=depth, slug=slug, text=heading_text))

    if title is None:
        fm_title = metadata.get("title")
        title = str(fm_title).strip() if fm_title else page_id

    description = metadata.get("description")
    order = metadata.get("order")
    if order is not None and (isinstance(order, bool) or not isinstance(order, (int, float))):
        warnings.append(PageWarning(relative_path, f"ignoring non-numeric order {order!r}"))
        order = None

    page = Page(
        id=page_id,
        title=title,
        path=relative_path,
        headings=tuple(headings),
        word_count=count_words(body),
        code_block_count=count_code_blocks(body),
        raw_content=text,
        body=body,
        description=str(description).strip() if description else None,
        order=float(order) if order is not None else None,
        metadata=dict(metadata),
    )
    return page, warnings


class DocsScanner:
    """Walks a docs root and produces one Page per markdown file."""

    def __init__(
        self,
        include: Sequence[str] | None = None,
        exclude: Sequence[str] | None = None,
        *,
        max_workers: int = _MAX_WORKERS,
    ) -> None:
        self._include = _compile(include or ())
        self._exclude = _compile(exclude or ())
        self._max_workers = max(1, max_workers)
        self.logger = get_logger("scanner")

    def scan(self, root: Union[str, Path]) -> ScanResult:
        """Return the pages under ``root`` in deterministic listing order."""
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise ScanError(f"Docs root not found: {root}")
        if not root_path.is_dir():
            raise ScanError(f"Docs root is not a directory: {root}")
        root_path = root_path.resolve()

        directories: List[str] = []
        files = list(self._iter_files(root_path, directories))
        self.logger.debug("Found %d markdown files under %s", len(files), root_path)

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            outcomes = list(pool.map(lambda rel: self._read(root_path, rel), files))

        pages: List[Page] = []
        warnings: List[PageWarning] = []
        owners: Dict[str, str] = {}
        for page, page_warnings in outcomes:
            warnings.extend(page_warnings)
            if page is None:
                continue
            if page.id in owners:
                raise DuplicatePageIdError(page.id, owners[page.id], page.path)
            owners[page.id] = page.path
            pages.append(page)

        log_warnings(self.logger, warnings)
        self.logger.info("Scanned %d pages (%d warnings)", len(pages), len(warnings))
        return ScanResult(root=str(root_path), pages=pages, warnings=warnings, directories=directories)

    def _read(self, root: Path, rel_path: str) -> Tuple[Optional[Page], List[PageWarning]]:
        try:
            text = (root / rel_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return None, [PageWarning(rel_path, f"unreadable, skipped ({exc})")]
        page, warnings = build_page(rel_path, text)
        if not page.id:
            return None, warnings + [PageWarning(rel_path, "file name does not yield a page id")]
        return page, warnings

    def _iter_files(self, root: Path, directories: List[str]) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix() if current != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS or name.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._excluded(rel_path, True):
                    continue
                kept_dirs.append(name)
                directories.append(rel_path)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if not filename.lower().endswith(".md"):
                    continue
                if self._include and not any(rule.matches(rel_path, False) for rule in self._include):
                    continue
                if self._excluded(rel_path, False):
                    self.logger.debug("Excluded %s", rel_path)
                    continue
                yield rel_path

    def _excluded(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self._exclude)


__all__ = ["DocsScanner", "DuplicatePageIdError", "PathRule", "ScanError", "build_page"]
