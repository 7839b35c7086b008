"""Core document model shared by the scanner, tree builder, auditor and generators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

PAGE_PRESENT = "present"
PAGE_MISSING = "missing"


@dataclass(frozen=True)
class Heading:
    """A second- or third-level heading inside a page."""

    depth: int
    slug: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"depth": self.depth, "slug": self.slug, "text": self.text}


@dataclass(frozen=True)
class Page:
    """One scanned markdown source file."""

    id: str
    title: str
    path: str
    headings: Tuple[Heading, ...]
    word_count: int
    code_block_count: int
    raw_content: str
    body: str = ""
    description: Optional[str] = None
    order: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def is_empty(self) -> bool:
        return not self.body.strip()

    def headings_at(self, depth: int) -> List[Heading]:
        return [heading for heading in self.headings if heading.depth == depth]


@dataclass(frozen=True)
class PageWarning:
    """A non-fatal problem recorded while scanning or building the tree."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class PageItem:
    """Tree leaf wrapping a scanned page, or a placeholder for a missing one."""

    id: str
    title: str
    page: Optional[Page] = None

    @property
    def status(self) -> str:
        return PAGE_PRESENT if self.page is not None else PAGE_MISSING


@dataclass
class PageFolder:
    """Ordered group of child nodes with its own title."""

    title: str
    children: List["PageNode"] = field(default_factory=list)
    path: Optional[str] = None


@dataclass
class PageSeparator:
    """Label-only divider between navigation groups."""

    label: str = ""


PageNode = Union[PageItem, PageFolder, PageSeparator]


@dataclass
class PageTree:
    """Root of the page hierarchy."""

    name: str
    children: List[PageNode] = field(default_factory=list)
    warnings: List[PageWarning] = field(default_factory=list)


@dataclass(frozen=True)
class FlatPage:
    """One entry of the linearised page sequence.

    Neighbours are held as ids, never as node references.
    """

    id: str
    title: str
    status: str
    breadcrumb: Tuple[str, ...] = ()
    prev: Optional[str] = None
    next: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "breadcrumb": list(self.breadcrumb),
            "prev": self.prev,
            "next": self.next,
        }


@dataclass
class ScanResult:
    """Pages produced by a scan plus the warnings collected on the way."""

    root: str
    pages: List[Page]
    warnings: List[PageWarning] = field(default_factory=list)
    directories: List[str] = field(default_factory=list)

    def by_id(self) -> Dict[str, Page]:
        return {page.id: page for page in self.pages}


__all__ = [
    "FlatPage",
    "Heading",
    "PAGE_MISSING",
    "PAGE_PRESENT",
    "Page",
    "PageFolder",
    "PageItem",
    "PageNode",
    "PageSeparator",
    "PageTree",
    "PageWarning",
    "ScanResult",
]
