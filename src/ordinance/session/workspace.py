"""End-to-end workspace check: config, rule sets, discovery, evaluation, output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

from ordinance.adapters import AdapterRegistry, default_adapters
from ordinance.config import OrdinanceConfig, config_fingerprint, load_config
from ordinance.constants.cache import CACHE_FILENAME
from ordinance.model import EvaluationReport, FileReport
from ordinance.registry import PolicyBundle, RuleRegistry
from ordinance.reporting import write_report
from ordinance.rulesets import load_rule_sources

from .cache import FindingCache, load_finding_cache, save_finding_cache
from .cancellation import CancellationToken
from .discovery import SkippedFile, collect_source_files
from .session import EvaluationSession, unreadable_file_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckResult:
    """Everything a caller needs to report on one workspace check."""

    report: EvaluationReport
    bundle: PolicyBundle
    config: OrdinanceConfig
    report_path: Path | None = None


def build_policy(
    config: OrdinanceConfig,
    *,
    rules_dirs: tuple[Path, ...] = (),
    precedence: tuple[str, ...] | None = None,
) -> tuple[PolicyBundle, RuleRegistry]:
    """Load bundled plus configured rule sets and build the policy bundle."""
    rule_sets = load_rule_sources((*config.rules_dirs, *rules_dirs))
    registry = RuleRegistry(default_adapters(first_party=config.first_party))
    resolved = precedence if precedence is not None else config.effective_precedence(rs.name for rs in rule_sets)
    logger.debug("Rule-set precedence: %s", ", ".join(resolved))
    return registry.build(rule_sets, resolved), registry


def check_workspace(
    *,
    root: Path,
    out: Path | None = None,
    config_path: Path | None = None,
    rules_dirs: tuple[Path, ...] = (),
    precedence: tuple[str, ...] | None = None,
    workers: int | None = None,
    fail_on: str | None = None,
    no_cache: bool = False,
    token: CancellationToken | None = None,
) -> CheckResult:
    """Check every source file under *root* and optionally write ``report.json``.

    Raises ``ConfigError`` or ``RuleLoadError`` before any file is evaluated.
    """
    config = load_config(root, config_path)
    bundle, registry = build_policy(config, rules_dirs=rules_dirs, precedence=precedence)
    discovered = collect_source_files(
        root,
        include=config.include,
        exclude=config.exclude,
        max_file_mb=config.max_file_mb,
    )
    logger.info("Checking %d files against policy v%d", len(discovered.sources), bundle.version)

    cache_path = (out / CACHE_FILENAME) if out is not None else None
    if cache_path is not None and not no_cache:
        cache = load_finding_cache(cache_path, bundle, max_entries=config.cache_size)
    else:
        cache = FindingCache(config.cache_size)

    session = EvaluationSession(
        bundle,
        cache=cache,
        workers=workers if workers is not None else config.workers,
        token=token,
        adapters=registry.adapters,
    )
    report = _with_skipped(session.evaluate(discovered.sources), discovered.skipped, registry.adapters)

    report_path: Path | None = None
    if out is not None:
        report_path = write_report(
            out,
            report,
            fail_on=fail_on if fail_on is not None else config.fail_on,
            config_fingerprint=config_fingerprint(config),
            policy_fingerprint=bundle.fingerprint,
        )
        if cache_path is not None and not no_cache:
            save_finding_cache(cache_path, cache, bundle)

    return CheckResult(report=report, bundle=bundle, config=config, report_path=report_path)


def _with_skipped(
    report: EvaluationReport,
    skipped: tuple[SkippedFile, ...],
    adapters: AdapterRegistry,
) -> EvaluationReport:
    """Add a parse-failed entry per skipped file, keeping the files sorted by path."""
    if not skipped:
        return report
    unreadable: list[FileReport] = []
    for item in skipped:
        adapter = adapters.adapter_for_path(item.path)
        unreadable.append(unreadable_file_report(item.path, adapter.language if adapter else None, item.reason))
    files = sorted((*report.files, *unreadable), key=lambda file_report: file_report.file)
    return replace(report, files=tuple(files))
