"""Tests for the docs scanner."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from agentdocs.scanner import DocsScanner, DuplicatePageIdError, PathRule, ScanError, build_page
from tests._fixtures.docs_builder import DocsBuilder


def test_scan_normalises_ids_and_titles(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "Overview.md": "# Project Overview\n\nIntro text.\n",
            "Guides/Getting Started.md": "Plain body without a heading.\n",
            "notes.txt": "ignored",
        }
    )

    result = docs_builder.scan()
    pages = result.by_id()

    assert sorted(pages) == ["guides/getting-started", "overview"]
    assert pages["overview"].title == "Project Overview"
    assert pages["overview"].path == "Overview.md"
    assert pages["guides/getting-started"].title == "guides/getting-started"
    assert result.directories == ["Guides"]


def test_scan_records_h2_and_h3_headings_with_unique_slugs(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "api.md": """
            # API

            ## Usage
            ### Options
            ## Usage
            #### Too deep
            """,
        }
    )

    page = docs_builder.scan().by_id()["api"]

    assert [(h.depth, h.slug, h.text) for h in page.headings] == [
        (2, "usage", "Usage"),
        (3, "options", "Options"),
        (2, "usage-2", "Usage"),
    ]


def test_scan_reads_front_matter_hints(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "intro.md": """
            ---
            title: Welcome
            description: Start here.
            order: 1
            ---
            Body text only.
            """,
        }
    )

    page = docs_builder.scan().by_id()["intro"]

    assert page.title == "Welcome"
    assert page.description == "Start here."
    assert page.order == 1.0
    assert page.body.strip() == "Body text only."
    assert page.word_count == 3


def test_scan_rejects_duplicate_ids(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"Quick Start.md": "# A\n", "quick-start.md": "# B\n"})

    with pytest.raises(DuplicatePageIdError) as excinfo:
        docs_builder.scan()

    assert excinfo.value.page_id == "quick-start"


def test_scan_missing_root_raises_scan_error(tmp_path: Path) -> None:
    with pytest.raises(ScanError):
        DocsScanner().scan(tmp_path / "nope")


def test_scan_file_root_raises_scan_error(tmp_path: Path) -> None:
    target = tmp_path / "file.md"
    target.write_text("# x\n", encoding="utf-8")
    with pytest.raises(ScanError):
        DocsScanner().scan(target)


def test_scan_skips_undecodable_file_with_warning(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"good.md": "# Good\n"})
    (docs_builder.docs / "bad.md").write_bytes(b"\xff\xfe\xfa not utf-8")

    result = docs_builder.scan()

    assert [page.id for page in result.pages] == ["good"]
    assert len(result.warnings) == 1
    assert result.warnings[0].path == "bad.md"
    assert "unreadable" in result.warnings[0].message


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="permission bits not enforced")
def test_scan_skips_permission_denied_file(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"good.md": "# Good\n", "secret.md": "# Secret\n"})
    secret = docs_builder.docs / "secret.md"
    secret.chmod(0)
    try:
        result = docs_builder.scan()
    finally:
        secret.chmod(0o644)

    assert [page.id for page in result.pages] == ["good"]
    assert [warning.path for warning in result.warnings] == ["secret.md"]


def test_scan_honours_exclude_and_hidden_dirs(docs_builder: DocsBuilder) -> None:
    docs_builder.write(
        {
            "keep.md": "# Keep\n",
            "drafts/wip.md": "# WIP\n",
            ".cache/hidden.md": "# Hidden\n",
            "node_modules/pkg/readme.md": "# Vendor\n",
        }
    )

    result = DocsScanner(exclude=["drafts/"]).scan(docs_builder.docs)

    assert [page.id for page in result.pages] == ["keep"]


def test_scan_include_restricts_files(docs_builder: DocsBuilder) -> None:
    docs_builder.write({"guide/a.md": "# A\n", "other.md": "# Other\n"})

    result = DocsScanner(include=["guide/*.md"]).scan(docs_builder.docs)

    assert [page.id for page in result.pages] == ["guide/a"]


def test_scan_order_is_stable(docs_builder: DocsBuilder) -> None:
    docs_builder.write({name: f"# {name}\n" for name in ("c.md", "a.md", "b/z.md", "b/y.md")})

    first = [page.id for page in docs_builder.scan().pages]
    second = [page.id for page in docs_builder.scan().pages]

    assert first == second == ["a", "c", "b/y", "b/z"]


def test_build_page_warns_on_non_numeric_order() -> None:
    page, warnings = build_page("x.md", "---\norder: first\n---\n# X\n")

    assert page.order is None
    assert warnings and "non-numeric order" in warnings[0].message


def test_path_rule_matches_directories_and_basenames() -> None:
    rule = PathRule.parse("drafts/")
    assert rule is not None
    assert rule.matches("drafts", True)
    assert rule.matches("drafts/wip.md", False)
    assert not rule.matches("drafts.md", False)

    anchored = PathRule.parse("/AGENTS.md")
    assert anchored is not None
    assert anchored.matches("AGENTS.md", False)
    assert not anchored.matches("nested/AGENTS.md", False)
