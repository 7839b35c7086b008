"""Page tree construction and linearisation for sequential navigation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .config import NavEntry
from .logging import get_logger, log_warnings
from .markdown import page_id_from_path
from .models import (
    FlatPage,
    Page,
    PageFolder,
    PageItem,
    PageNode,
    PageSeparator,
    PageTree,
    PageWarning,
    ScanResult,
)

_INDEX_NAMES = {"index", "readme"}


@dataclass
class _Entry:
    """Sortable wrapper used while ordering the children of one directory."""

    node: PageNode
    name: str
    order: Optional[float]
    is_index: bool

    def sort_key(self) -> Tuple[float, str]:
        if self.order is not None:
            return (self.order, self.name)
        if self.is_index:
            return (-math.inf, self.name)
        return (math.inf, self.name)


class PageTreeBuilder:
    """Builds the ordered page hierarchy from scanned pages.

    With an explicit ``navigation`` list the tree follows it exactly; otherwise
    folders mirror directories and siblings follow front-matter ``order`` hints,
    then listing order. Required pages that do not exist become missing items.
    """

    def __init__(
        self,
        navigation: Optional[Sequence[NavEntry]] = None,
        required: Sequence[str] = (),
    ) -> None:
        self.navigation = list(navigation) if navigation is not None else None
        self.required = [page_id_from_path(item) for item in required]
        self.logger = get_logger("tree")

    def build(self, scan: ScanResult, name: str) -> PageTree:
        pages = scan.by_id()
        warnings: List[PageWarning] = []
        if self.navigation is not None:
            children = self._from_navigation(self.navigation, pages, warnings, set())
            listed = {item.id for item in iter_items(children)}
            required = set(self.required)
            for page in scan.pages:
                if page.id in listed:
                    continue
                if page.id in required:
                    warnings.append(PageWarning(page.path, "required page not listed in navigation; appended"))
                else:
                    warnings.append(PageWarning(page.path, "not listed in navigation; omitted from tree"))
        else:
            children = self._from_directories(scan, warnings)

        children = _prune(children, warnings)

        placed = {item.id for item in iter_items(children)}
        for required_id in self.required:
            if not required_id or required_id in placed:
                continue
            page = pages.get(required_id)
            item = PageItem(id=required_id, title=page.title if page else required_id, page=page)
            _parent_children(children, required_id).append(item)
            placed.add(required_id)
            if page is None:
                warnings.append(PageWarning(f"{required_id}.md", "required page not found"))

        log_warnings(self.logger, warnings)
        tree = PageTree(name=name, children=children, warnings=warnings)
        self.logger.debug("Built tree with %d pages", count_items(tree.children))
        return tree

    def _from_navigation(
        self,
        entries: Sequence[NavEntry],
        pages: Dict[str, Page],
        warnings: List[PageWarning],
        seen: Set[str],
    ) -> List[PageNode]:
        nodes: List[PageNode] = []
        for entry in entries:
            if entry.kind == "separator":
                nodes.append(PageSeparator(label=entry.title or ""))
            elif entry.kind == "folder":
                children = self._from_navigation(entry.items, pages, warnings, seen)
                nodes.append(PageFolder(title=entry.title or "", children=children))
            else:
                page_id = page_id_from_path(entry.id or "")
                if not page_id or page_id in seen:
                    warnings.append(PageWarning(entry.id or "", "duplicate navigation entry skipped"))
                    continue
                seen.add(page_id)
                page = pages.get(page_id)
                if page is None:
                    warnings.append(PageWarning(f"{page_id}.md", "listed in navigation but not found"))
                    nodes.append(PageItem(id=page_id, title=entry.title or page_id, page=None))
                else:
                    nodes.append(PageItem(id=page_id, title=entry.title or page.title, page=page))
        return nodes

    def _from_directories(self, scan: ScanResult, warnings: List[PageWarning]) -> List[PageNode]:
        folders: Dict[str, PageFolder] = {"": PageFolder(title="", path="")}
        entries: Dict[str, List[_Entry]] = {"": []}

        def ensure_folder(path: str) -> None:
            if path in folders:
                return
            parent, _, leaf = path.rpartition("/")
            ensure_folder(parent)
            folder = PageFolder(title=_humanise(leaf), path=path)
            folders[path] = folder
            entries[path] = []
            entries[parent].append(_Entry(node=folder, name=leaf, order=None, is_index=False))

        for directory in scan.directories:
            ensure_folder(directory)

        for page in scan.pages:
            parent, _, filename = page.path.rpartition("/")
            ensure_folder(parent)
            stem = filename[:-3] if filename.lower().endswith(".md") else filename
            is_index = stem.lower() in _INDEX_NAMES
            item = PageItem(id=page.id, title=page.title, page=page)
            entries[parent].append(_Entry(node=item, name=filename, order=page.order, is_index=is_index))
            if is_index and parent:
                folder = folders[parent]
                folder.title = page.title
                if page.order is not None:
                    _set_folder_order(entries, parent, page.order)

        for path, folder in folders.items():
            folder.children = [entry.node for entry in sorted(entries[path], key=_Entry.sort_key)]
        return folders[""].children


def _set_folder_order(entries: Dict[str, List[_Entry]], path: str, order: float) -> None:
    parent, _, leaf = path.rpartition("/")
    for entry in entries[parent]:
        if isinstance(entry.node, PageFolder) and entry.name == leaf:
            entry.order = order


def _prune(nodes: List[PageNode], warnings: List[PageWarning]) -> List[PageNode]:
    kept: List[PageNode] = []
    for node in nodes:
        if isinstance(node, PageFolder):
            node.children = _prune(node.children, warnings)
            if count_items(node.children) == 0:
                warnings.append(PageWarning(node.path or node.title, "folder has no pages; dropped from tree"))
                continue
        kept.append(node)
    return kept


def _parent_children(nodes: List[PageNode], page_id: str) -> List[PageNode]:
    """Children list of the folder that owns ``page_id``, else the root list."""
    parent = page_id.rpartition("/")[0]
    if not parent:
        return nodes
    for node in nodes:
        if not isinstance(node, PageFolder):
            continue
        if node.path == parent or any(
            isinstance(child, PageItem) and child.id.rpartition("/")[0] == parent for child in node.children
        ):
            return node.children
        found = _parent_children(node.children, page_id)
        if found is not node.children:
            return found
    return nodes


def _humanise(segment: str) -> str:
    words = segment.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words) or segment


def iter_items(nodes: Sequence[PageNode]) -> Iterator[PageItem]:
    """Yield PageItems depth-first, pre-order."""
    for node in nodes:
        if isinstance(node, PageItem):
            yield node
        elif isinstance(node, PageFolder):
            yield from iter_items(node.children)


def count_items(nodes: Sequence[PageNode]) -> int:
    return sum(1 for _ in iter_items(nodes))


def flatten(tree: PageTree) -> List[FlatPage]:
    """Linearise the tree into display order with prev/next ids filled in."""
    collected: List[Tuple[PageItem, Tuple[str, ...]]] = []

    def walk(nodes: Sequence[PageNode], breadcrumb: Tuple[str, ...]) -> None:
        for node in nodes:
            if isinstance(node, PageItem):
                collected.append((node, breadcrumb))
            elif isinstance(node, PageFolder):
                walk(node.children, breadcrumb + (node.title,))

    walk(tree.children, ())
    flat: List[FlatPage] = []
    for index, (item, breadcrumb) in enumerate(collected):
        flat.append(
            FlatPage(
                id=item.id,
                title=item.title,
                status=item.status,
                breadcrumb=breadcrumb,
                prev=collected[index - 1][0].id if index > 0 else None,
                next=collected[index + 1][0].id if index + 1 < len(collected) else None,
            )
        )
    return flat


def neighbours(flat: Sequence[FlatPage], page_id: str) -> Tuple[Optional[FlatPage], Optional[FlatPage]]:
    """Return the previous and next entries around ``page_id``."""
    for index, entry in enumerate(flat):
        if entry.id == page_id:
            prev = flat[index - 1] if index > 0 else None
            nxt = flat[index + 1] if index + 1 < len(flat) else None
            return prev, nxt
    raise KeyError(page_id)


__all__ = ["PageTreeBuilder", "count_items", "flatten", "iter_items", "neighbours"]
