"""Subcommand handlers for the Ordinance CLI.

Each handler returns the process exit code: 0 clean, 1 findings at or
above the failure threshold, 2 configuration or rule-loading errors.
"""

from __future__ import annotations

import argparse
import sys

from ordinance.config import load_config
from ordinance.exceptions import ConfigError, OrdinanceError, RuleLoadError
from ordinance.exceptions.validation import format_errors
from ordinance.reporting import StdoutReporter
from ordinance.rulesets import validate_rule_sources
from ordinance.session import build_policy, check_workspace


def handle_check(args: argparse.Namespace) -> int:
    """Run a workspace check and print the summary."""
    if not args.root.is_dir():
        print(f"Configuration error: root directory does not exist: {args.root}", file=sys.stderr)
        return 2

    try:
        result = check_workspace(
            root=args.root,
            out=args.output_dir,
            config_path=args.config,
            rules_dirs=tuple(args.rules_dir),
            precedence=args.precedence,
            workers=args.workers,
            fail_on=args.fail_on,
            no_cache=args.no_cache,
        )
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except RuleLoadError as exc:
        print(f"Rule loading error: {exc}", file=sys.stderr)
        return 2
    except OrdinanceError as exc:
        print(f"Ordinance error: {exc}", file=sys.stderr)
        return 1

    fail_on = args.fail_on or result.config.fail_on
    use_color = not args.no_color and sys.stdout.isatty()
    print(StdoutReporter(result.report, color=use_color, verbose=args.verbose, fail_on=fail_on).render())
    if result.report_path is not None:
        print(f"  Report      {result.report_path}")
    return result.report.exit_code(fail_on)


def handle_validate_rules(args: argparse.Namespace) -> int:
    """Validate bundled and custom rule sets, reporting every problem."""
    errors = validate_rule_sources(tuple(args.rules_dir))
    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 2
    print("Rule sets are valid.")
    return 0


def handle_list_rules(args: argparse.Namespace) -> int:
    """Print the effective policy for each language."""
    try:
        config = load_config(args.root, args.config)
        bundle, _ = build_policy(config, rules_dirs=tuple(args.rules_dir), precedence=args.precedence)
    except (ConfigError, RuleLoadError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    languages = bundle.languages
    if args.language is not None:
        if args.language not in languages:
            print(f"Configuration error: unknown language '{args.language}'", file=sys.stderr)
            return 2
        languages = (args.language,)

    for language in languages:
        policy = bundle.policies[language]
        print(f"{language} (policy v{policy.version}, {len(policy.rules)} rules)")
        for rule in policy.rules:
            print(f"  {rule.id:<12} {rule.severity:<8} {rule.category:<22} [{rule.rule_set}] {rule.message}")
        for rejection in bundle.rejections:
            if rejection.language == language:
                print(f"  ! {rejection.describe()}")
    return 0
