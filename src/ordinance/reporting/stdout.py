"""Human-readable stdout reporter for evaluation results."""

from __future__ import annotations

from ordinance.constants.branding import ASCII_LOGO_LINES, CHECK_SUMMARY_TITLE
from ordinance.constants.reporting import ANSI_DIM, ANSI_GREEN, ANSI_RED, ANSI_RESET, SEVERITY_COLORS
from ordinance.constants.rules import SEVERITY_RANK
from ordinance.model import EvaluationReport, Finding


def _colorize(text: str, color: str) -> str:
    return f"{color}{text}{ANSI_RESET}"


class StdoutReporter:
    """Formats an ``EvaluationReport`` as a summary block plus a findings table."""

    def __init__(
        self,
        report: EvaluationReport,
        *,
        color: bool = True,
        verbose: bool = False,
        fail_on: str = "error",
    ) -> None:
        self._report = report
        self._color = color
        self._verbose = verbose
        self._fail_on = fail_on

    def render(self) -> str:
        """Render the full stdout report as a single string."""
        sections = [self._render_header(), self._render_findings_table(), self._render_problems()]
        return "\n".join(section for section in sections if section)

    def _paint(self, text: str, color: str) -> str:
        return _colorize(text, color) if self._color and color else text

    def _render_header(self) -> str:
        r = self._report
        sep = "  " + "─" * 38
        files_with_findings = len({finding.file for finding in r.findings if finding.is_violation})
        counts = r.counts_by_severity
        severities = ", ".join(
            f"{self._paint(str(counts[severity]), SEVERITY_COLORS.get(severity, ''))} {severity}"
            for severity in ("error", "warning", "info")
        )

        lines = [
            "",
            f"  {ASCII_LOGO_LINES[0]}",
            f"  {ASCII_LOGO_LINES[1]}",
            f"  {CHECK_SUMMARY_TITLE}",
            sep,
            "",
            f"  Policy      v{r.policy_version}",
            f"  Files       {len(r.files)} checked / {files_with_findings} with findings",
            f"  Findings    {len(r.findings)} ({severities})",
        ]
        if r.counts_by_rule:
            top = sorted(r.counts_by_rule.items(), key=lambda item: (-item[1], item[0]))[:5]
            lines.append(f"  Top rules   {', '.join(f'{rule_id} ({count})' for rule_id, count in top)}")
        if r.rejections:
            lines.append(f"  Rejected    {len(r.rejections)} rule(s) not evaluated")
        if r.cancelled:
            lines.append(f"  Cancelled   {self._paint('yes', ANSI_RED)}")

        passed = r.exit_code(self._fail_on) == 0  # type: ignore[arg-type]
        verdict = self._paint("PASS", ANSI_GREEN) if passed else self._paint("FAIL", ANSI_RED)
        lines.append(f"  Verdict     {verdict} (fail on {self._fail_on})")
        lines.append(f"  Duration    {r.duration_seconds:.3f}s")
        if self._verbose:
            lines.append(f"  Cache       {r.cache_hits} hits / {r.cache_misses} misses")
        lines.append("")
        return "\n".join(lines)

    def _render_findings_table(self) -> str:
        findings = sorted(
            self._report.findings,
            key=lambda f: (-SEVERITY_RANK[f.severity], f.file, f.span.start_line, f.span.start_column, f.rule_id),
        )
        if not findings:
            return ""

        w_loc = max(len("Location"), *(len(self._location(f)) for f in findings))
        w_rule = max(len("Rule"), *(len(f.rule_id) for f in findings))
        w_sev = len("Severity")

        def _hline(left: str, mid: str, right: str) -> str:
            return f"  {left}{'─' * (w_loc + 2)}{mid}{'─' * (w_rule + 2)}{mid}{'─' * (w_sev + 2)}{right}"

        lines = [
            "  Findings",
            _hline("┌", "┬", "┐"),
            f"  │ {'Location':<{w_loc}} │ {'Rule':<{w_rule}} │ {'Severity':<{w_sev}} │",
            _hline("├", "┼", "┤"),
        ]
        for finding in findings:
            severity = self._paint(f"{finding.severity:<{w_sev}}", SEVERITY_COLORS.get(finding.severity, ""))
            lines.append(f"  │ {self._location(finding):<{w_loc}} │ {finding.rule_id:<{w_rule}} │ {severity} │")
            if self._verbose:
                lines.append(f"  │   {self._paint(finding.message, ANSI_DIM)}")
        lines.append(_hline("└", "┴", "┘"))
        return "\n".join(lines)

    def _render_problems(self) -> str:
        r = self._report
        lines: list[str] = []
        for rejection in r.rejections:
            lines.append(f"  ! {rejection.describe()}")
        for error in r.errors:
            subject = f"{error.file} [{error.rule_id}]" if error.rule_id else error.file
            lines.append(f"  ! {error.kind}: {subject}: {error.reason}")
        if not lines:
            return ""
        return "\n".join(["", "  Problems", *lines, ""])

    @staticmethod
    def _location(finding: Finding) -> str:
        return f"{finding.file}:{finding.span.start_line}:{finding.span.start_column}"
