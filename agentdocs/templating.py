"""Named ``{placeholder}`` substitution for install guides and prompt skills."""

from __future__ import annotations

import re
from typing import List, Mapping, Optional

# ``${VAR}`` (shell) and ``{{ var }}`` (jinja) are left untouched.
PLACEHOLDER_PATTERN = re.compile(r"(?<![$\w{])\{([A-Za-z][A-Za-z0-9_-]*)\}(?!\})")


class TemplateMissingPlaceholder(KeyError):
    """Raised when a template names a placeholder that has no value."""

    def __init__(self, placeholder: str, template: Optional[str] = None) -> None:
        super().__init__(placeholder)
        self.placeholder = placeholder
        self.template = template

    def __str__(self) -> str:
        where = f" in template {self.template!r}" if self.template else ""
        return f"No value for placeholder {{{self.placeholder}}}{where}"


def find_placeholders(template: str) -> List[str]:
    """Return placeholder names in first-appearance order, without duplicates."""
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(template)))


def render_placeholders(
    template: str,
    values: Mapping[str, Optional[str]],
    *,
    template_name: Optional[str] = None,
) -> str:
    """Substitute every placeholder in one pass; substituted text is not rescanned."""

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        value = values.get(name)
        if value is None:
            raise TemplateMissingPlaceholder(name, template_name)
        return str(value)

    return PLACEHOLDER_PATTERN.sub(_replace, template)


__all__ = [
    "PLACEHOLDER_PATTERN",
    "TemplateMissingPlaceholder",
    "find_placeholders",
    "render_placeholders",
]
