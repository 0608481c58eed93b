"""Evaluation session: batch and incremental evaluation of source files."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from ordinance.adapters import AdapterRegistry, default_adapters
from ordinance.constants.rules import (
    ERROR_KIND_CANCELLED,
    ERROR_KIND_PARSE,
    MARKER_PARSE_ERROR,
    PARSE_ERROR_RULE_ID,
    SEVERITY_ERROR,
)
from ordinance.engine import MatcherEngine, uses_placeholder
from ordinance.exceptions import ParseError
from ordinance.model import ErrorRecord, EvaluationReport, FileReport, Finding, SourceFile, Span
from ordinance.registry import EffectivePolicy, PolicyBundle

from .cache import FindingCache, content_key, rebind_findings
from .cancellation import CancellationToken
from .states import (
    STATE_CACHE_HIT,
    STATE_CANCELLED,
    STATE_DONE,
    STATE_MATCHING,
    STATE_PARSE_FAILED,
    STATE_PARSING,
    FileStateMachine,
)

logger = logging.getLogger(__name__)


class EvaluationSession:
    """Evaluates source files against a policy bundle.

    The session tracks the files of its last run so ``reevaluate`` only has
    to be given what changed; unchanged files are served from the cache.
    """

    def __init__(
        self,
        bundle: PolicyBundle,
        *,
        cache: FindingCache | None = None,
        workers: int = 1,
        token: CancellationToken | None = None,
        adapters: AdapterRegistry | None = None,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._bundle = bundle
        self._cache = cache if cache is not None else FindingCache()
        self._workers = workers
        self._token = token if token is not None else CancellationToken()
        self._adapters = adapters if adapters is not None else default_adapters()
        self._matcher = MatcherEngine()
        self._tracked: dict[str, SourceFile] = {}
        self._lock = threading.Lock()

    @property
    def bundle(self) -> PolicyBundle:
        return self._bundle

    @property
    def cache(self) -> FindingCache:
        return self._cache

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def tracked_files(self) -> tuple[SourceFile, ...]:
        with self._lock:
            return tuple(self._tracked.values())

    def evaluate(self, files: Iterable[SourceFile]) -> EvaluationReport:
        """Evaluate *files* and make them the session's tracked set."""
        batch = list(files)
        with self._lock:
            self._tracked = {source.path: source for source in batch}
        return self._run(batch)

    def reevaluate(self, changed_files: Iterable[SourceFile]) -> EvaluationReport:
        """Merge *changed_files* into the tracked set by path and evaluate it."""
        with self._lock:
            for source in changed_files:
                self._tracked[source.path] = source
            batch = list(self._tracked.values())
        return self._run(batch)

    def update_policy(self, bundle: PolicyBundle) -> None:
        """Swap in a rebuilt bundle; the next run re-matches against it."""
        with self._lock:
            previous = self._bundle.version
            self._bundle = bundle
        logger.info("Policy updated: version %d -> %d", previous, bundle.version)

    def _run(self, batch: list[SourceFile]) -> EvaluationReport:
        with self._lock:
            bundle = self._bundle
        started = time.perf_counter()

        if self._workers == 1 or len(batch) <= 1:
            reports = [self._evaluate_file(source, bundle) for source in batch]
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                reports = list(pool.map(lambda source: self._evaluate_file(source, bundle), batch))

        cache_hits = sum(1 for report in reports if report.from_cache)
        cancelled = sum(1 for report in reports if report.state == STATE_CANCELLED)
        if cancelled:
            logger.warning("Evaluation cancelled: %d of %d files not evaluated", cancelled, len(reports))
        return EvaluationReport(
            policy_version=bundle.version,
            files=tuple(reports),
            rejections=bundle.rejections,
            cache_hits=cache_hits,
            cache_misses=len(reports) - cache_hits - cancelled,
            cancelled=cancelled > 0,
            duration_seconds=time.perf_counter() - started,
        )

    def _evaluate_file(self, source: SourceFile, bundle: PolicyBundle) -> FileReport:
        machine = FileStateMachine(source.path)
        if self._token.is_cancelled:
            machine.advance(STATE_CANCELLED)
            return FileReport(
                file=source.path,
                language=source.language,
                state=machine.state,
                errors=(ErrorRecord(kind=ERROR_KIND_CANCELLED, file=source.path, reason="evaluation cancelled"),),
            )

        adapter = self._adapters.resolve(source)
        policy = bundle.policy_for(adapter.language) if adapter is not None else None
        if adapter is None or policy is None:
            machine.advance(STATE_PARSING)
            machine.advance(STATE_PARSE_FAILED)
            if source.language is not None:
                reason = f"no adapter registered for language '{source.language}'"
            else:
                reason = "cannot determine the language from the file extension"
            return parse_failure_report(
                source.path, source.language, machine.state, reason, line_count=_line_count(source.text)
            )

        digest = content_key(source.text, source.path, path_in_messages=_messages_name_file(policy))
        key = (digest, bundle.version, adapter.language)
        cached = self._cache.get(key)
        if cached is not None:
            machine.advance(STATE_CACHE_HIT)
            machine.advance(STATE_DONE)
            return FileReport(
                file=source.path,
                language=adapter.language,
                state=machine.state,
                findings=rebind_findings(cached, source.path),
                from_cache=True,
            )

        machine.advance(STATE_PARSING)
        try:
            unit = adapter.parse(source.path, source.text)
        except ParseError as exc:
            machine.advance(STATE_PARSE_FAILED)
            return parse_failure_report(
                source.path, adapter.language, machine.state, exc.reason, line_count=_line_count(source.text)
            )

        machine.advance(STATE_MATCHING)
        match = self._matcher.evaluate(unit, policy)
        machine.advance(STATE_DONE)
        # Files with rule errors are re-matched next time so the errors are reported again.
        if not match.errors:
            self._cache.put(key, match.findings)
        return FileReport(
            file=source.path,
            language=adapter.language,
            state=machine.state,
            findings=match.findings,
            errors=match.errors,
        )


def parse_failure_report(
    path: str,
    language: str | None,
    state: str,
    reason: str,
    *,
    line_count: int = 1,
) -> FileReport:
    """Report for a file that never reached matching: one parse-error finding spanning the file."""
    logger.warning("Could not parse %s: %s", path, reason)
    finding = Finding(
        rule_id=PARSE_ERROR_RULE_ID,
        file=path,
        span=Span(file=path, start_line=1, start_column=1, end_line=max(1, line_count), end_column=1),
        severity=SEVERITY_ERROR,
        message=f"File could not be parsed: {reason}",
        category="parse",
        marker=MARKER_PARSE_ERROR,
    )
    return FileReport(
        file=path,
        language=language,
        state=state,
        findings=(finding,),
        errors=(ErrorRecord(kind=ERROR_KIND_PARSE, file=path, reason=reason),),
    )


def unreadable_file_report(path: str, language: str | None, reason: str) -> FileReport:
    """Report for a file whose text could not be read, so it never reached an adapter."""
    machine = FileStateMachine(path)
    machine.advance(STATE_PARSING)
    machine.advance(STATE_PARSE_FAILED)
    return parse_failure_report(path, language, machine.state, reason)


def _messages_name_file(policy: EffectivePolicy) -> bool:
    return any(uses_placeholder(rule.message, "file") for rule in policy.rules)


def _line_count(text: str) -> int:
    return len(text.splitlines())
