"""Markdown inspection helpers: front matter, headings, slugs and text metrics."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

_HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
_FENCE_PATTERN = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
_SLUG_STRIP = re.compile(r"[^\w\s-]", re.UNICODE)
_ID_SEPARATORS = re.compile(r"[^a-z0-9]+")
_LINK_PATTERN = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_EMPHASIS_PATTERN = re.compile(r"(\*\*|\*|~~)(.+?)\1")
_INLINE_CODE_PATTERN = re.compile(r"`([^`]*)`")
_HTML_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)
_BLOCK_PREFIXES = ("#", ">", "|", "<", "---", "***", "===")


@dataclass
class MarkdownLine:
    """A source line annotated with whether it sits inside a fenced block."""

    text: str
    in_code: bool
    is_fence: bool


def iter_lines(markdown: str) -> Iterator[MarkdownLine]:
    """Yield lines tagged with fenced-code state; fence markers themselves are flagged."""
    fence: Optional[str] = None
    for line in markdown.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        match = _FENCE_PATTERN.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                fence = marker
                yield MarkdownLine(line, in_code=True, is_fence=True)
                continue
            if marker[0] == fence[0] and len(marker) >= len(fence) and not line.strip()[len(marker):].strip():
                fence = None
                yield MarkdownLine(line, in_code=True, is_fence=True)
                continue
        yield MarkdownLine(line, in_code=fence is not None, is_fence=False)


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str, Optional[str]]:
    """Split a leading ``---`` YAML block from the body.

    Returns ``(metadata, body, error)``; on invalid YAML the metadata is empty,
    the block is still removed from the body and ``error`` describes the problem.
    """
    normalised = text.lstrip("\ufeff")
    if not normalised.startswith("---"):
        return {}, text, None
    lines = normalised.split("\n")
    if lines[0].strip() != "---":
        return {}, text, None
    for index in range(1, len(lines)):
        if lines[index].strip() in {"---", "..."}:
            block = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1:])
            try:
                loaded = yaml.safe_load(block) if block.strip() else {}
            except yaml.YAMLError as exc:
                return {}, body, f"invalid front matter: {exc}"
            if loaded is None:
                return {}, body, None
            if not isinstance(loaded, dict):
                return {}, body, "front matter is not a mapping"
            return loaded, body, None
    return {}, text, None


def slugify(text: str) -> str:
    """Lowercase, drop punctuation and join words with hyphens."""
    slug = _SLUG_STRIP.sub("", text.strip().lower()).replace("_", "")
    slug = re.sub(r"\s+", "-", slug)
    return slug.strip("-")


class HeadingSlugger:
    """Hands out slugs unique within one page (``setup``, ``setup-2``, ...)."""

    def __init__(self) -> None:
        self._seen: Dict[str, int] = {}

    def slug(self, text: str) -> str:
        base = slugify(text) or "section"
        count = self._seen.get(base, 0) + 1
        self._seen[base] = count
        if count == 1:
            return base
        candidate = f"{base}-{count}"
        while candidate in self._seen:
            count += 1
            candidate = f"{base}-{count}"
        self._seen[base] = count
        self._seen[candidate] = 1
        return candidate


def parse_headings(markdown: str) -> List[Tuple[int, str]]:
    """Return ``(depth, text)`` for every ATX heading outside fenced code."""
    headings: List[Tuple[int, str]] = []
    for line in iter_lines(markdown):
        if line.in_code:
            continue
        match = _HEADING_PATTERN.match(line.text)
        if match:
            text = match.group(2).strip()
            if text:
                headings.append((len(match.group(1)), text))
    return headings


def count_code_blocks(markdown: str) -> int:
    opened = 0
    inside = False
    for line in iter_lines(markdown):
        if line.is_fence:
            if not inside:
                opened += 1
            inside = not inside
    return opened


def count_words(markdown: str) -> int:
    """Count whitespace-separated words of prose, ignoring fenced code and comments."""
    prose = "\n".join(line.text for line in iter_lines(markdown) if not line.in_code)
    prose = _HTML_COMMENT_PATTERN.sub(" ", prose)
    return sum(1 for token in prose.split() if any(char.isalnum() for char in token))


def first_paragraph(markdown: str) -> str:
    """Return the first prose paragraph, flattened to one line of plain text."""
    collected: List[str] = []
    for line in iter_lines(_HTML_COMMENT_PATTERN.sub("", markdown)):
        stripped = line.text.strip()
        if line.in_code or not stripped:
            if collected:
                break
            continue
        if stripped.startswith(_BLOCK_PREFIXES) or _is_list_item(stripped):
            if collected:
                break
            continue
        collected.append(stripped)
    return strip_inline_markdown(" ".join(collected))


def strip_inline_markdown(text: str) -> str:
    text = _LINK_PATTERN.sub(r"\1", text)
    text = _INLINE_CODE_PATTERN.sub(r"\1", text)
    previous = None
    while previous != text:
        previous = text
        text = _EMPHASIS_PATTERN.sub(r"\2", text)
    return re.sub(r"\s+", " ", text).strip()


def truncate_words(text: str, limit: int) -> str:
    """Keep the first ``limit`` words, marking the cut with an ellipsis."""
    words = text.split()
    if len(words) <= limit:
        return text
    cut = " ".join(words[:limit]).rstrip(",;:.")
    return f"{cut}..."


def page_id_from_path(relative_path: str) -> str:
    """Turn ``Guides/Getting Started.md`` into ``guides/getting-started``."""
    path = relative_path.replace("\\", "/").strip("/")
    if path.lower().endswith(".md"):
        path = path[:-3]
    segments = []
    for segment in path.split("/"):
        cleaned = _ID_SEPARATORS.sub("-", segment.lower()).strip("-")
        if cleaned:
            segments.append(cleaned)
    return "/".join(segments)


def _is_list_item(stripped: str) -> bool:
    if stripped[:2] in {"- ", "* ", "+ "}:
        return True
    return bool(re.match(r"^\d+[.)]\s", stripped))


__all__ = [
    "HeadingSlugger",
    "MarkdownLine",
    "count_code_blocks",
    "count_words",
    "first_paragraph",
    "iter_lines",
    "page_id_from_path",
    "parse_headings",
    "slugify",
    "split_front_matter",
    "strip_inline_markdown",
    "truncate_words",
]
