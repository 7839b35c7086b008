"""agentdocs: audit hand-written docs and derive agent-ready artifacts from them."""

from .audit import AuditEngine, AuditReport
from .config import AgentDocsConfig, ConfigError, ConfigValidationError, load_config
from .orchestrator import Pipeline, RunReport
from .scanner import DocsScanner, DuplicatePageIdError, ScanError
from .templating import TemplateMissingPlaceholder
from .tree import PageTreeBuilder, flatten

__version__ = "0.1.0"

__all__ = [
    "AgentDocsConfig",
    "AuditEngine",
    "AuditReport",
    "ConfigError",
    "ConfigValidationError",
    "DocsScanner",
    "DuplicatePageIdError",
    "PageTreeBuilder",
    "Pipeline",
    "RunReport",
    "ScanError",
    "TemplateMissingPlaceholder",
    "flatten",
    "load_config",
]
