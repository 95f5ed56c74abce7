"""CLI entrypoints for fsct commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .ai import AIClient, AIError, load_ai_config
from .cert import build_certificate
from .checklist import generate_checklist
from .checks import CATEGORY_PREFIXES, build_registry, catalog, select_checks
from .checks.reviewer import generate_reviewer_instructions
from .config import ConfigError, FsctConfig, load_config
from .diff import diff_reports
from .executor import run_checks
from .filters import FindingFilter
from .formatters import FORMAT_NAMES, get_formatter, write_report
from .hook import HookExistsError, install_hook
from .logging import configure_logging, get_logger
from .models import SEVERITY_HIGH, Summary
from .project import build_project

_LOGGER = get_logger("cli")

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2

_SEVERITY_CHOICES = ("info", "warning", "high")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
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


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the Flutter project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsct",
        description="Check a Flutter project against App Store and Play Store requirements.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Run compliance checks against a Flutter project.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_path_argument(check_parser)
    check_parser.add_argument(
        "--platform",
        choices=("both", "android", "ios"),
        default="both",
        help="Restrict checks to one platform.",
    )
    check_parser.add_argument(
        "--format",
        choices=FORMAT_NAMES,
        default="console",
        help="Report format.",
    )
    check_parser.add_argument(
        "--severity",
        choices=_SEVERITY_CHOICES,
        default="info",
        help="Minimum severity to report.",
    )
    check_parser.add_argument(
        "--output",
        help="Write the report to <OUTPUT>.<extension> instead of stdout.",
    )
    check_parser.add_argument(
        "--offline",
        action="store_true",
        help="Never contact an AI provider, even when configured.",
    )
    check_parser.add_argument(
        "--ai",
        action="store_true",
        help="Run the AI-assisted checks (requires an API key).",
    )
    check_parser.add_argument("--ai-key", help="API key for the AI provider.")
    check_parser.add_argument(
        "--ai-provider",
        help="AI provider: minimax, openai or custom.",
    )
    check_parser.add_argument("--ai-url", help="Base URL of the chat-completions API.")
    check_parser.add_argument("--ai-model", help="Model name to request.")

    checks_parser = subparsers.add_parser("checks", help="List every available check.")
    _add_verbose_option(checks_parser, suppress_default=True)
    checks_parser.add_argument(
        "--category",
        choices=CATEGORY_PREFIXES,
        help="Only list checks with this id prefix.",
    )

    checklist_parser = subparsers.add_parser(
        "checklist",
        help="Show the reviewer-account readiness checklist.",
    )
    _add_verbose_option(checklist_parser, suppress_default=True)
    _add_path_argument(checklist_parser)
    checklist_parser.add_argument(
        "--format",
        choices=("console", "markdown", "html"),
        default="console",
        help="Checklist output format.",
    )
    checklist_parser.add_argument(
        "--instructions",
        action="store_true",
        help="Print reviewer instructions instead of the checklist.",
    )
    checklist_parser.add_argument("--output", help="Write to this file instead of stdout.")

    hook_parser = subparsers.add_parser(
        "hook",
        help="Install a git pre-commit hook that runs fsct.",
    )
    _add_verbose_option(hook_parser, suppress_default=True)
    hook_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the git repository root (defaults to current directory).",
    )
    hook_parser.add_argument(
        "--severity",
        choices=_SEVERITY_CHOICES,
        default="warning",
        help="Minimum severity the hook reports.",
    )
    hook_parser.add_argument(
        "--force",
        action="store_true",
        help="Replace an existing pre-commit hook.",
    )

    cert_parser = subparsers.add_parser(
        "cert",
        help="Generate a Markdown compliance certificate.",
    )
    _add_verbose_option(cert_parser, suppress_default=True)
    _add_path_argument(cert_parser)
    cert_parser.add_argument("--output", help="Write to this file instead of stdout.")

    diff_parser = subparsers.add_parser(
        "diff",
        help="Compare two JSON reports.",
    )
    _add_verbose_option(diff_parser, suppress_default=True)
    diff_parser.add_argument("old", help="Baseline JSON report.")
    diff_parser.add_argument("new", help="Current JSON report.")
    diff_parser.add_argument(
        "--format",
        choices=("console", "json"),
        default="console",
        help="Diff output format.",
    )
    diff_parser.add_argument("--output", help="Write to this file instead of stdout.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for fsct commands; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        if args.command == "check":
            return _run_check(args)
        if args.command == "checks":
            return _run_list(args)
        if args.command == "checklist":
            return _run_checklist(args)
        if args.command == "hook":
            return _run_hook(args)
        if args.command == "cert":
            return _run_cert(args)
        if args.command == "diff":
            return _run_diff(args)
    except (ConfigError, FileNotFoundError, NotADirectoryError, ValueError) as exc:
        parser.exit(EXIT_USAGE, f"fsct {args.command} failed: {exc}\n")
    except HookExistsError as exc:
        parser.exit(EXIT_USAGE, f"{exc}\n")
    parser.exit(EXIT_USAGE, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return EXIT_USAGE  # pragma: no cover


def _run_check(args: argparse.Namespace) -> int:
    root = _project_root(args.path)
    config = load_config(root)
    android = args.platform in ("both", "android") and config.platforms.android
    ios = args.platform in ("both", "ios") and config.platforms.ios

    ai_client = _ai_client(args, config)
    registry = build_registry(config, ai_client)
    checks = select_checks(
        registry,
        android=android,
        ios=ios,
        include=config.checks.include,
        skip=config.checks.skip,
    )

    project = build_project(root, android=android, ios=ios)
    result = run_checks(project, checks)

    finding_filter = FindingFilter.from_options(
        severity=args.severity,
        allowed=config.checks.include,
        skipped=config.checks.skip,
        ignore=config.ignore,
    )
    findings = finding_filter.apply(result.findings)
    summary = Summary.from_findings(findings, result.checks_run)

    formatter = get_formatter(args.format, project=project, reviewer=config.reviewer)
    content = formatter.format(findings, summary)
    if args.output:
        path = write_report(content, args.output, formatter.extension)
        print(f"Report written to {_relativize(path)}")
    else:
        sys.stdout.write(content)

    has_high = any(finding.severity == SEVERITY_HIGH for finding in findings)
    return EXIT_FINDINGS if has_high else EXIT_OK


def _ai_client(args: argparse.Namespace, config: FsctConfig) -> Optional[AIClient]:
    """Build the AI client when requested; a misconfiguration only disables the AI checks."""
    wants_ai = bool(args.ai) or config.ai.enabled
    if not wants_ai or args.offline or config.ai.offline:
        return None
    ai_config = load_ai_config(
        config.ai,
        api_key=args.ai_key,
        provider=args.ai_provider,
        base_url=args.ai_url,
        model=args.ai_model,
    )
    try:
        client = ai_config.new_client()
    except AIError as exc:
        _LOGGER.warning("AI checks disabled: %s", exc)
        return None
    _LOGGER.debug(
        "AI checks enabled with provider %s (key %s)",
        ai_config.provider_name,
        ai_config.masked_api_key(),
    )
    return client


def _run_list(args: argparse.Namespace) -> int:
    rows = [
        row for row in catalog() if not args.category or row[0].startswith(f"{args.category}-")
    ]
    width = max((len(check_id) for check_id, _, _ in rows), default=0)
    for check_id, name, category in rows:
        print(f"{check_id.ljust(width)}  {category:<14}  {name}")
    print(f"\n{len(rows)} checks")
    return EXIT_OK


def _run_checklist(args: argparse.Namespace) -> int:
    root = _project_root(args.path)
    config = load_config(root)
    if args.instructions:
        content = generate_reviewer_instructions(config.reviewer)
        ready = True
    else:
        checklist = generate_checklist(config.reviewer)
        if args.format == "markdown":
            content = checklist.to_markdown()
        elif args.format == "html":
            content = checklist.to_html()
        else:
            content = checklist.to_console()
        ready = checklist.is_ready()
    _emit(content, args.output)
    return EXIT_OK if ready else EXIT_FINDINGS


def _run_hook(args: argparse.Namespace) -> int:
    hook_path = install_hook(Path(args.path), severity=args.severity, force=bool(args.force))
    print(f"Pre-commit hook installed at {_relativize(hook_path)}")
    return EXIT_OK


def _run_cert(args: argparse.Namespace) -> int:
    root = _project_root(args.path)
    config = load_config(root)
    registry = build_registry(config)
    checks = select_checks(
        registry,
        android=config.platforms.android,
        ios=config.platforms.ios,
        include=config.checks.include,
        skip=config.checks.skip,
    )
    project = build_project(root, android=config.platforms.android, ios=config.platforms.ios)
    result = run_checks(project, checks)
    certificate = build_certificate(project, result.findings, result.summary)
    _emit(certificate.render(), args.output)
    return EXIT_OK if certificate.passed else EXIT_FINDINGS


def _run_diff(args: argparse.Namespace) -> int:
    result = diff_reports(Path(args.old), Path(args.new))
    _emit(result.format(args.format), args.output)
    return EXIT_OK


def _project_root(raw: str) -> Path:
    root = Path(raw).expanduser()
    if not root.exists():
        raise FileNotFoundError(f"Project path {raw} does not exist")
    if not root.is_dir():
        raise NotADirectoryError(f"Project path {raw} is not a directory")
    return root


def _emit(content: str, output: Optional[str]) -> None:
    if output:
        path = Path(output)
        path.write_text(content, encoding="utf-8")
        print(f"Written to {_relativize(path)}")
    else:
        sys.stdout.write(content)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
