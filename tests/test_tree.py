"""Tests for page tree construction and flattening."""

from __future__ import annotations

import pytest

from agentdocs.audit import AuditEngine
from agentdocs.config import NavEntry
from agentdocs.models import PAGE_MISSING, PAGE_PRESENT, PageFolder, PageItem, PageSeparator
from agentdocs.tree import PageTreeBuilder, count_items, flatten, neighbours
from tests._fixtures.docs_builder import DocsBuilder, long_prose


def test_directory_tree_orders_index_then_hints_then_names(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "zeta.md": "# Zeta\n",
            "alpha.md": "# Alpha\n",
            "first.md": "---\norder: 1\n---\n# First\n",
            "index.md": "# Home\n",
            "guides/index.md": "# All Guides\n",
            "guides/setup.md": "# Setup\n",
        }
    )

    tree = PageTreeBuilder().build(docs_builder.scan(), "demo")

    titles = [node.title for node in tree.children]
    assert titles == ["Home", "First", "Alpha", "All Guides", "Zeta"]
    folder = tree.children[3]
    assert isinstance(folder, PageFolder)
    assert [child.title for child in folder.children] == ["All Guides", "Setup"]


def test_empty_folders_are_pruned_with_warning(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"overview.md": "# Overview\n", "empty/nested/notes.txt": "not markdown"})

    tree = PageTreeBuilder().build(docs_builder.scan(), "demo")

    assert [type(node) for node in tree.children] == [PageItem]
    assert any("folder has no pages" in warning.message for warning in tree.warnings)


def test_missing_required_pages_become_missing_items(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"overview.md": "# Overview\n"})

    tree = PageTreeBuilder(required=["overview", "api.md"]).build(docs_builder.scan(), "demo")
    flat = flatten(tree)

    assert [(entry.id, entry.status) for entry in flat] == [("overview", PAGE_PRESENT), ("api", PAGE_MISSING)]
    assert any(warning.message == "required page not found" for warning in tree.warnings)


def test_navigation_mode_follows_config(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "overview.md": "# Overview\n",
            "guides/setup.md": "# Setup\n",
            "stray.md": "# Stray\n",
        }
    )
    navigation = [
        NavEntry(kind="page", id="overview"),
        NavEntry(kind="separator", title="Guides"),
        NavEntry(
            kind="folder",
            title="How-to",
            items=[NavEntry(kind="page", id="guides/setup", title="Set it up"), NavEntry(kind="page", id="ghost")],
        ),
        NavEntry(kind="page", id="overview"),
    ]

    tree = PageTreeBuilder(navigation=navigation).build(docs_builder.scan(), "demo")

    assert isinstance(tree.children[1], PageSeparator)
    folder = tree.children[2]
    assert isinstance(folder, PageFolder)
    assert [(item.id, item.title, item.status) for item in folder.children] == [
        ("guides/setup", "Set it up", PAGE_PRESENT),
        ("ghost", "ghost", PAGE_MISSING),
    ]
    messages = [str(warning) for warning in tree.warnings]
    assert "stray.md: not listed in navigation; omitted from tree" in messages
    assert any("duplicate navigation entry" in message for message in messages)
    assert count_items(tree.children) == 3


def test_flatten_links_neighbours_and_breadcrumbs(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "index.md": "# Home\n",
            "guides/install.md": "# Install\n",
            "guides/usage.md": "# Usage\n",
            "reference/api.md": "# API\n",
        }
    )

    tree = PageTreeBuilder().build(docs_builder.scan(), "demo")
    flat = flatten(tree)

    assert [entry.id for entry in flat] == ["index", "guides/install", "guides/usage", "reference/api"]
    assert flat[0].prev is None and flat[-1].next is None
    for left, right in zip(flat, flat[1:]):
        assert left.next == right.id
        assert right.prev == left.id
    assert flat[1].breadcrumb == ("Guides",)
    assert len(flat) == count_items(tree.children)


def test_flatten_is_stable_across_builds(docs_builder: DocsBuilder) -> None:
    docs_builder.write({f"page-{index}.md": f"# Page {index}\n" for index in range(6)})
    scan = docs_builder.scan()

    first = flatten(PageTreeBuilder().build(scan, "demo"))
    second = flatten(PageTreeBuilder().build(docs_builder.scan(), "demo"))

    assert first == second


def test_neighbours_lookup(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"a.md": "# A\n", "b.md": "# B\n", "c.md": "# C\n"})
    flat = flatten(PageTreeBuilder().build(docs_builder.scan(), "demo"))

    prev, nxt = neighbours(flat, "b")

    assert prev is not None and prev.id == "a"
    assert nxt is not None and nxt.id == "c"
    with pytest.raises(KeyError):
        neighbours(flat, "zzz")


def test_unlisted_required_page_keeps_its_content(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "overview.md": "# Overview\n",
            "api.md": f"# API\n\n{long_prose(60)}\n\n## Calls\n\n```python\nrun()\n```\n",
        }
    )
    builder = PageTreeBuilder(navigation=[NavEntry(kind="page", id="overview")], required=["overview", "api"])
    scan = docs_builder.scan()

    tree = builder.build(scan, "demo")
    flat = flatten(tree)
    audit = AuditEngine(["overview", "api"]).audit(scan, flat)

    assert [(entry.id, entry.title, entry.status) for entry in flat] == [
        ("overview", "Overview", PAGE_PRESENT),
        ("api", "API", PAGE_PRESENT),
    ]
    assert [result.status for result in audit.results] == ["partial", "complete"]
    messages = [str(warning) for warning in tree.warnings]
    assert "api.md: required page not listed in navigation; appended" in messages
    assert not any(warning.message == "required page not found" for warning in tree.warnings)


def test_missing_nested_required_page_lands_in_its_folder(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"overview.md": "# Overview\n", "guides/setup.md": "# Setup\n"})

    tree = PageTreeBuilder(required=["guides/upgrade"]).build(docs_builder.scan(), "demo")

    folder = tree.children[0]
    assert isinstance(folder, PageFolder)
    assert [(item.id, item.status) for item in folder.children] == [
        ("guides/setup", PAGE_PRESENT),
        ("guides/upgrade", PAGE_MISSING),
    ]
    assert [entry.id for entry in flatten(tree)] == ["guides/setup", "guides/upgrade", "overview"]
