"""docs.json renderer tests."""

from __future__ import annotations

import json

from agentdocs.generators import DocsJsonRenderer
from tests._fixtures.docs_builder import DocsBuilder


def test_docs_json_mirrors_tree_and_flat_order(docs_builder: DocsBuilder) -> None:
    docs_builder.write_config(
        """
        project:
          name: demo
          type: package
        docs:
          required: [overview, api]
          navigation:
            - overview
            - separator: Reference
            - title: Reference
              items: [api]
        """
    )
    docs_builder.write({"overview.md": "# Overview\n\n## Install\n\n## Install\n"})

    payload = json.loads(DocsJsonRenderer().render(docs_builder.context()))

    assert payload["version"] == 1
    assert payload["name"] == "demo"
    assert payload["type"] == "package"
    overview, separator, folder = payload["tree"]
    assert overview["type"] == "page"
    assert overview["status"] == "present"
    assert overview["path"] == "overview.md"
    assert [heading["slug"] for heading in overview["headings"]] == ["install", "install-2"]
    assert separator == {"type": "separator", "label": "Reference"}
    assert folder["type"] == "folder"
    assert folder["children"][0]["id"] == "api"
    assert folder["children"][0]["status"] == "missing"
    assert folder["children"][0]["path"] is None
    assert [page["id"] for page in payload["pages"]] == ["overview", "api"]
    assert payload["pages"][0]["next"] == "api"
    assert payload["pages"][1]["breadcrumb"] == ["Reference"]


def test_docs_json_is_byte_identical_across_runs(docs_builder: DocsBuilder) -> None:
    docs_builder.write_config("project:\n  name: demo\n")
    docs_builder.write({"overview.md": "# Überblick\n", "quickstart.md": "# Quickstart\n"})
    renderer = DocsJsonRenderer()

    first = renderer.render(docs_builder.context())
    second = renderer.render(docs_builder.context())

    assert first == second
    assert "Überblick" in first
    assert first.endswith("}\n")


def test_docs_json_keys_are_sorted_and_tree_order_kept(docs_builder: DocsBuilder) -> None:
    docs_builder.write_config("project:\n  name: demo\n")
    docs_builder.write({"zeta.md": "# Zeta\n\n## Use\n", "alpha.md": "# Alpha\n"})

    text = DocsJsonRenderer().render(docs_builder.context())
    payload = json.loads(text)

    assert text == json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n"
    assert [node["id"] for node in payload["tree"]] == ["alpha", "zeta"]
