"""llms.txt renderer tests."""

from __future__ import annotations

from agentdocs.generators import LlmsTxtRenderer
from tests._fixtures.docs_builder import DocsBuilder


def test_llms_txt_one_paragraph_per_page_in_flat_order(docs_builder: DocsBuilder) -> None:
    docs_builder.write_config("project:\n  name: demo\n  tagline: Docs for agents\n")
    docs_builder.write(
        {
            "overview.md": "# Overview\n\nDemo turns **docs** into context.\n\nSecond paragraph.\n",
            "quickstart.md": "# Quickstart\n\n```bash\ndemo init\n```\n\nRun `demo init` first.\n",
            "guides/setup.md": "---\ndescription: Configure the tool.\n---\n# Setup\n\n- only a list\n",
        }
    )

    text = LlmsTxtRenderer().render(docs_builder.context())

    assert text == (
        "demo - Docs for agents\n"
        "\n"
        "Guides / Setup: Configure the tool.\n"
        "\n"
        "Overview: Demo turns docs into context.\n"
        "\n"
        "Quickstart: Run demo init first.\n"
    )


def test_llms_txt_skips_missing_pages_and_truncates(docs_builder: DocsBuilder) -> None:
    docs_builder.write_config("project:\n  name: demo\ndocs:\n  required: [overview, api]\n")
    docs_builder.write({"overview.md": "# Overview\n\n" + " ".join(["lorem"] * 200) + "\n"})

    text = LlmsTxtRenderer(max_paragraph_words=6).render(docs_builder.context())

    lines = text.strip().split("\n\n")
    assert lines[0] == "demo"
    assert len(lines) == 2
    assert lines[1].startswith("Overview: lorem")
    assert lines[1] == "Overview: lorem lorem lorem lorem lorem lorem..."
    assert "```" not in text
