"""CLI entrypoints for agentdocs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List

from .audit import format_report, report_to_json
from .config import ConfigError, find_config, load_config
from .generators import AGENTS_MD, DOCS_JSON, INSTALL_MD, LLMS_TXT
from .logging import configure_logging
from .orchestrator import Pipeline
from .readiness import format_readiness, readiness_to_json
from .scaffold import ScaffoldError, scaffold_project
from .scanner import ScanError
from .skills import SKILLS, UnknownSkillError, render_prompt
from .templating import TemplateMissingPlaceholder

_SELECTOR_FLAGS = (
    ("--agents-md", "agents_md", AGENTS_MD, "Generate AGENTS.md."),
    ("--llms-txt", "llms_txt", LLMS_TXT, "Generate llms.txt."),
    ("--docs-json", "docs_json", DOCS_JSON, "Generate docs.json."),
    ("--install-md", "install_md", INSTALL_MD, "Generate install.md."),
)


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Show per-check detail and debug logging.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a machine-readable JSON report on stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentdocs",
        description="Audit hand-written docs and generate agent-ready artifacts from them.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-c",
        "--config",
        default=".",
        help="Path to agentdocs.yml or the directory containing it (defaults to current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Write a starter agentdocs.yml and skeleton pages for the required sections.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    init_parser.add_argument(
        "--type",
        dest="project_type",
        default="generic",
        help="Project type: package, cli-tool, desktop-app or generic.",
    )
    init_parser.add_argument(
        "--name",
        default=None,
        help="Project name (defaults to pyproject.toml, package.json or the directory name).",
    )
    init_parser.add_argument("--tagline", default=None, help="One-line project description.")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration and skeleton pages.",
    )

    audit_parser = subparsers.add_parser(
        "audit",
        help="Score documentation completeness against the required sections.",
    )
    _add_verbose_option(audit_parser, suppress_default=True)
    _add_json_option(audit_parser)
    audit_parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Pass threshold as a percentage (overrides audit.pass_threshold).",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write AGENTS.md, llms.txt, docs.json and install.md.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    for flag, dest, _, help_text in _SELECTOR_FLAGS:
        generate_parser.add_argument(flag, dest=dest, action="store_true", help=help_text)
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory to write artifacts to (overrides docs.output).",
    )

    agent_parser = subparsers.add_parser(
        "agent",
        help="Check how ready the project is for coding agents.",
    )
    _add_verbose_option(agent_parser, suppress_default=True)
    _add_json_option(agent_parser)

    prompt_parser = subparsers.add_parser(
        "prompt",
        help="Render a prompt skill for an external agent.",
    )
    _add_verbose_option(prompt_parser, suppress_default=True)
    prompt_parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Skill name; omit to list the available skills.",
    )
    prompt_parser.add_argument(
        "--set",
        dest="values",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Placeholder value; may be repeated.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for agentdocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    verbose = bool(args.verbose)
    configure_logging(verbose=verbose, quiet=bool(getattr(args, "json", False)))

    if args.command == "prompt":
        _run_prompt(parser, args)
        return
    if args.command == "init":
        _run_init(parser, args)
        return

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"agentdocs: {exc}\n")

    if args.command == "audit":
        if args.threshold is not None:
            if not 0 <= args.threshold <= 100:
                parser.exit(2, "agentdocs: --threshold must be between 0 and 100\n")
            config.audit.pass_threshold = args.threshold
        try:
            run = Pipeline(config).audit()
        except ScanError as exc:
            parser.exit(1, f"agentdocs: {exc}\n")
        if run.audit is None:
            parser.exit(1, "agentdocs audit failed: " + "; ".join(run.failures) + "\n")
        if args.json:
            sys.stdout.write(report_to_json(run.audit))
        else:
            sys.stdout.write(format_report(run.audit, verbose=verbose, project_name=config.project.name))
        if not run.audit.passed:
            parser.exit(1)
    elif args.command == "generate":
        kinds = [kind for _, dest, kind, _ in _SELECTOR_FLAGS if getattr(args, dest)]
        output_dir = Path(args.output).expanduser().resolve() if args.output else None
        try:
            run = Pipeline(config).generate(kinds, output_dir=output_dir)
        except ScanError as exc:
            parser.exit(1, f"agentdocs: {exc}\n")
        generation = run.generation
        if generation is not None:
            for path in generation.written:
                print(f"Generated {_relativize(path)}")
        failures = [f"{failure.kind}: {failure.error}" for failure in run.artifact_failures] + run.failures
        if failures:
            parser.exit(1, "agentdocs generate failed for:\n" + "".join(f"  {item}\n" for item in failures))
    elif args.command == "agent":
        try:
            readiness = Pipeline(config).readiness()
        except ScanError as exc:
            parser.exit(1, f"agentdocs: {exc}\n")
        if args.json:
            sys.stdout.write(readiness_to_json(readiness))
        else:
            sys.stdout.write(format_readiness(readiness, verbose=verbose))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_init(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    root = Path(args.config).expanduser()
    if root.suffix in {".yml", ".yaml"}:
        root = root.parent
    try:
        result = scaffold_project(
            root,
            project_type=args.project_type,
            name=args.name,
            tagline=args.tagline,
            force=args.force,
        )
    except (ScaffoldError, OSError) as exc:
        parser.exit(1, f"agentdocs init failed: {exc}\n")
    for path in result.created:
        print(f"Created {_relativize(path)}")
    for path in result.skipped:
        print(f"Skipped {_relativize(path)} (already exists)")
    print("Next: fill in the pages, then run `agentdocs audit` and `agentdocs generate`.")


def _run_prompt(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.name is None:
        for name in sorted(SKILLS):
            print(f"{name}: {SKILLS[name].summary}")
        return
    try:
        values = _parse_assignments(args.values)
    except ValueError as exc:
        parser.exit(2, f"agentdocs: {exc}\n")

    # Prompts render without a project; a config only supplies defaults.
    config = None
    if find_config(Path(args.config)) is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as exc:
            parser.exit(1, f"agentdocs: {exc}\n")

    try:
        text = render_prompt(args.name, values, config=config)
    except UnknownSkillError as exc:
        parser.exit(1, f"agentdocs: {exc}\n")
    except TemplateMissingPlaceholder as exc:
        parser.exit(1, f"agentdocs: {exc}; pass it with --set {exc.placeholder}=VALUE\n")
    sys.stdout.write(text)


def _parse_assignments(items: List[str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"expected KEY=VALUE, got {item!r}")
        values[key.strip()] = value
    return values


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
