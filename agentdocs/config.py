"""Configuration loading for agentdocs (agentdocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAMES: tuple[str, ...] = ("agentdocs.yml", ".agentdocs.yml")

PROJECT_TYPES: tuple[str, ...] = ("package", "cli-tool", "desktop-app", "generic")

_PROJECT_TYPE_ALIASES: Dict[str, str] = {
    "package": "package",
    "npm-package": "package",
    "python-package": "package",
    "react-library": "package",
    "library": "package",
    "cli-tool": "cli-tool",
    "cli": "cli-tool",
    "desktop-app": "desktop-app",
    "macos-app": "desktop-app",
    "app": "desktop-app",
    "generic": "generic",
    "monorepo": "generic",
}

DEFAULT_SECTIONS: tuple[str, ...] = ("overview", "quickstart")
DEFAULT_MIN_WORDS = 50
DEFAULT_PASS_THRESHOLD = 100.0


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be found or parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration parses but has the wrong shape."""


@dataclass
class ProjectConfig:
    """Project metadata."""

    name: str
    tagline: Optional[str] = None
    type: str = "generic"
    version: Optional[str] = None


@dataclass
class AgentRule:
    """Pattern-keyed instruction rendered into the agent context."""

    pattern: str
    instruction: str


@dataclass
class AgentConfig:
    """What the agent-context document should carry."""

    critical_context: List[str] = field(default_factory=list)
    entry_points: Dict[str, str] = field(default_factory=dict)
    rules: List[AgentRule] = field(default_factory=list)
    sections: List[str] = field(default_factory=lambda: list(DEFAULT_SECTIONS))


@dataclass
class NavEntry:
    """One entry of an explicit navigation list: page, folder or separator."""

    kind: str
    id: Optional[str] = None
    title: Optional[str] = None
    items: List["NavEntry"] = field(default_factory=list)


@dataclass
class DocsConfig:
    """Docs tree location, output location and required sections."""

    path: str = "./docs"
    output: str = "./"
    required: List[str] = field(default_factory=lambda: list(DEFAULT_SECTIONS))
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    navigation: Optional[List[NavEntry]] = None


@dataclass
class AuditConfig:
    """Tunables for the completeness audit."""

    min_words: int = DEFAULT_MIN_WORDS
    pass_threshold: float = DEFAULT_PASS_THRESHOLD


@dataclass
class DoneWhen:
    """Verification command that proves an installation succeeded."""

    command: Optional[str] = None
    expected_output: Optional[str] = None


@dataclass
class StepAlternative:
    """Platform or package-manager specific variant of a step command."""

    condition: str
    command: str


@dataclass
class InstallStep:
    """One ordered installation step."""

    description: str
    command: Optional[str] = None
    alternatives: List[StepAlternative] = field(default_factory=list)


@dataclass
class InstallConfig:
    """Inputs for the LLM-executable install guide."""

    objective: Optional[str] = None
    done_when: DoneWhen = field(default_factory=DoneWhen)
    prerequisites: List[str] = field(default_factory=list)
    steps: List[InstallStep] = field(default_factory=list)
    package_name: Optional[str] = None
    cli_name: Optional[str] = None
    app_name: Optional[str] = None
    placeholders: Dict[str, str] = field(default_factory=dict)


@dataclass
class AgentDocsConfig:
    """Validated project description consumed by every pipeline stage."""

    root: Path
    project: ProjectConfig
    agent: AgentConfig = field(default_factory=AgentConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    install: InstallConfig = field(default_factory=InstallConfig)
    source: Optional[Path] = None

    @property
    def docs_root(self) -> Path:
        return (self.root / self.docs.path).resolve()

    @property
    def output_dir(self) -> Path:
        return (self.root / self.docs.output).resolve()


def find_config(start: Path) -> Optional[Path]:
    """Return the first config file found in ``start`` (a directory or file path)."""
    start = start.expanduser()
    if start.is_file():
        return start.resolve()
    for name in CONFIG_FILENAMES:
        candidate = start / name
        if candidate.is_file():
            return candidate.resolve()
    return None


def load_config(path: Path) -> AgentDocsConfig:
    """Load and validate configuration from a file or the directory containing it."""
    config_file = find_config(path)
    if config_file is None:
        names = ", ".join(CONFIG_FILENAMES)
        raise ConfigError(f"No configuration found in {path} (looked for {names})")

    try:
        text = config_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {config_file}: {exc}") from exc

    try:
        data = yaml.safe_load(text) if text.strip() else {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {config_file.name}: {exc}") from exc

    config = config_from_mapping(data or {}, root=config_file.parent)
    config.source = config_file
    return config


def config_from_mapping(data: Any, *, root: Path) -> AgentDocsConfig:
    """Build a validated configuration from already-parsed data."""
    if not isinstance(data, Mapping):
        raise ConfigValidationError("Configuration must contain a mapping at the root")

    project_data = _section(data, "project")
    name = _as_str(project_data.get("name"))
    if not name:
        raise ConfigValidationError("project.name is required")
    project = ProjectConfig(
        name=name,
        tagline=_as_str(project_data.get("tagline")),
        type=normalise_project_type(_as_str(project_data.get("type"))),
        version=_as_str(project_data.get("version")),
    )

    agent_data = _section(data, "agent")
    agent = AgentConfig(
        critical_context=_str_list(agent_data, "agent", "critical_context", "criticalContext"),
        entry_points=_str_mapping(agent_data, "agent", "entry_points", "entryPoints"),
        rules=_parse_rules(_pick(agent_data, "rules")),
    )
    if _pick(agent_data, "sections") is not None:
        agent.sections = _str_list(agent_data, "agent", "sections")

    docs_data = _section(data, "docs")
    docs = DocsConfig(
        include=_str_list(docs_data, "docs", "include"),
        exclude=_str_list(docs_data, "docs", "exclude", "exclude_paths"),
    )
    if _as_str(docs_data.get("path")):
        docs.path = str(docs_data["path"])
    if _as_str(docs_data.get("output")):
        docs.output = str(docs_data["output"])
    if docs_data.get("required") is not None:
        docs.required = _str_list(docs_data, "docs", "required")
    navigation = docs_data.get("navigation")
    if navigation is not None:
        docs.navigation = _parse_navigation(navigation, "docs.navigation")

    audit_data = _section(data, "audit")
    audit = AuditConfig()
    min_words = _pick(audit_data, "min_words", "minWords")
    if min_words is not None:
        audit.min_words = _as_int(min_words, "audit.min_words")
    threshold = _pick(audit_data, "pass_threshold", "passThreshold")
    if threshold is not None:
        audit.pass_threshold = _as_float(threshold, "audit.pass_threshold")

    install = _parse_install(_section(data, "install"))

    return AgentDocsConfig(
        root=Path(root).expanduser().resolve(),
        project=project,
        agent=agent,
        docs=docs,
        audit=audit,
        install=install,
    )


def normalise_project_type(value: Optional[str]) -> str:
    """Map a declared project type onto the closed set in ``PROJECT_TYPES``."""
    if not value:
        return "generic"
    return _PROJECT_TYPE_ALIASES.get(value.strip().lower(), "generic")


def _parse_install(data: Mapping[str, Any]) -> InstallConfig:
    done_data = _pick(data, "done_when", "doneWhen")
    if done_data is not None and not isinstance(done_data, Mapping):
        raise ConfigValidationError("install.done_when must be a mapping")
    done_data = done_data or {}
    done_when = DoneWhen(
        command=_as_str(done_data.get("command")),
        expected_output=_as_str(_pick(done_data, "expected_output", "expectedOutput")),
    )

    raw_steps = data.get("steps") or []
    if not isinstance(raw_steps, list):
        raise ConfigValidationError("install.steps must be a list")
    steps = [_parse_step(item, index) for index, item in enumerate(raw_steps, start=1)]

    placeholders = _str_mapping(data, "install", "placeholders")
    return InstallConfig(
        objective=_as_str(data.get("objective")),
        done_when=done_when,
        prerequisites=_str_list(data, "install", "prerequisites"),
        steps=steps,
        package_name=_as_str(_pick(data, "package_name", "packageName")),
        cli_name=_as_str(_pick(data, "cli_name", "cliName")),
        app_name=_as_str(_pick(data, "app_name", "appName")),
        placeholders=placeholders,
    )


def _parse_step(item: Any, index: int) -> InstallStep:
    if isinstance(item, str):
        return InstallStep(description=item)
    if not isinstance(item, Mapping) or not _as_str(item.get("description")):
        raise ConfigValidationError(f"install.steps[{index}] needs a description")
    alternatives: List[StepAlternative] = []
    for alt in item.get("alternatives") or []:
        if not isinstance(alt, Mapping) or not alt.get("condition") or not alt.get("command"):
            raise ConfigValidationError(
                f"install.steps[{index}].alternatives entries need condition and command"
            )
        alternatives.append(StepAlternative(condition=str(alt["condition"]), command=str(alt["command"])))
    return InstallStep(
        description=str(item["description"]),
        command=_as_str(item.get("command")),
        alternatives=alternatives,
    )


def _parse_rules(value: Any) -> List[AgentRule]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigValidationError("agent.rules must be a list")
    rules: List[AgentRule] = []
    for item in value:
        if not isinstance(item, Mapping) or "pattern" not in item or "instruction" not in item:
            raise ConfigValidationError("agent.rules entries need pattern and instruction")
        rules.append(AgentRule(pattern=str(item["pattern"]), instruction=str(item["instruction"])))
    return rules


def _parse_navigation(value: Any, where: str) -> List[NavEntry]:
    if not isinstance(value, list):
        raise ConfigValidationError(f"{where} must be a list")
    entries: List[NavEntry] = []
    for index, item in enumerate(value):
        label = f"{where}[{index}]"
        if isinstance(item, str):
            entries.append(NavEntry(kind="page", id=item))
        elif isinstance(item, Mapping) and "separator" in item:
            entries.append(NavEntry(kind="separator", title=_as_str(item.get("separator")) or ""))
        elif isinstance(item, Mapping) and "items" in item:
            title = _as_str(item.get("title"))
            if not title:
                raise ConfigValidationError(f"{label} folder needs a title")
            entries.append(
                NavEntry(kind="folder", title=title, items=_parse_navigation(item["items"], f"{label}.items"))
            )
        elif isinstance(item, Mapping) and _as_str(item.get("id")):
            entries.append(NavEntry(kind="page", id=str(item["id"]), title=_as_str(item.get("title"))))
        else:
            raise ConfigValidationError(f"{label} must be a page id, page, folder or separator")
    return entries


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigValidationError(f"{key} must be a mapping")
    return value


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _as_int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigValidationError(f"{where} must be an integer")
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigValidationError(f"{where} must be an integer") from exc


def _as_float(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ConfigValidationError(f"{where} must be a number")
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigValidationError(f"{where} must be a number") from exc


def _str_list(data: Mapping[str, Any], section: str, *keys: str) -> List[str]:
    value = _pick(data, *keys)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, Sequence):
        raise ConfigValidationError(f"{section}.{keys[0]} must be a list")
    return [str(item) for item in value if isinstance(item, (str, int, float))]


def _str_mapping(data: Mapping[str, Any], section: str, *keys: str) -> Dict[str, str]:
    value = _pick(data, *keys)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigValidationError(f"{section}.{keys[0]} must be a mapping")
    return {str(key): str(item) for key, item in value.items() if item is not None}


__all__ = [
    "AgentConfig",
    "AgentDocsConfig",
    "AgentRule",
    "AuditConfig",
    "CONFIG_FILENAMES",
    "ConfigError",
    "ConfigValidationError",
    "DocsConfig",
    "DoneWhen",
    "InstallConfig",
    "InstallStep",
    "NavEntry",
    "PROJECT_TYPES",
    "ProjectConfig",
    "StepAlternative",
    "config_from_mapping",
    "find_config",
    "load_config",
    "normalise_project_type",
]
