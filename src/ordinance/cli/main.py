"""CLI entrypoint for Ordinance."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ordinance import __version__
from ordinance.cli.handlers import handle_check, handle_list_rules, handle_validate_rules
from ordinance.constants.branding import CLI_DESCRIPTION
from ordinance.constants.rules import SEVERITY_ERROR, VALID_SEVERITIES


def _precedence(value: str) -> tuple[str, ...]:
    names = tuple(name.strip() for name in value.split(","))
    if not names or any(not name for name in names):
        raise argparse.ArgumentTypeError("precedence must be a comma-separated list of rule-set names")
    return names


def _workers(value: str) -> int:
    try:
        workers = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid worker count: {value!r}") from exc
    if workers < 1:
        raise argparse.ArgumentTypeError("workers must be at least 1")
    return workers


def _add_rule_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-R",
        "--rules-dir",
        type=Path,
        action="append",
        default=[],
        help="Additional rule-set directory (repeat for multiple); bundled rule sets always load",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="ordinance",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check a workspace against the coding-convention rules")
    check.add_argument("-r", "--root", type=Path, required=True, help="Workspace root path")
    check.add_argument("-c", "--config", type=Path, help="Explicit config file")
    _add_rule_source_arguments(check)
    check.add_argument(
        "-P",
        "--precedence",
        type=_precedence,
        default=None,
        help="Comma-separated rule-set names, lowest precedence first",
    )
    check.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for report.json and the findings cache (no files written if omitted)",
    )
    check.add_argument("-w", "--workers", type=_workers, default=None, help="Number of worker threads")
    check.add_argument("-n", "--no-cache", action="store_true", help="Disable cache reads/writes")
    check.add_argument(
        "--fail-on",
        choices=sorted(VALID_SEVERITIES),
        default=None,
        help=f"Lowest severity that fails the run (default: config or {SEVERITY_ERROR})",
    )
    check.add_argument("--no-color", action="store_true", help="Disable colored output")
    check.add_argument("-v", "--verbose", action="store_true", help="Show messages, cache stats and diagnostics")

    validate = subparsers.add_parser("validate-rules", help="Validate rule-set documents without checking code")
    _add_rule_source_arguments(validate)

    list_rules = subparsers.add_parser("list-rules", help="Show the effective policy per language")
    _add_rule_source_arguments(list_rules)
    list_rules.add_argument("-r", "--root", type=Path, default=Path("."), help="Workspace root for config lookup")
    list_rules.add_argument("-c", "--config", type=Path, help="Explicit config file")
    list_rules.add_argument("-P", "--precedence", type=_precedence, default=None, help="Rule-set precedence")
    list_rules.add_argument("-l", "--language", default=None, help="Only show this language")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s")

    if args.command == "check":
        return handle_check(args)
    if args.command == "validate-rules":
        return handle_validate_rules(args)
    if args.command == "list-rules":
        return handle_list_rules(args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
