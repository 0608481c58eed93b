"""Report output: JSON artifact and terminal summary."""

from ordinance.reporting.stdout import StdoutReporter
from ordinance.reporting.writer import build_report_payload, write_report

__all__ = ["StdoutReporter", "build_report_payload", "write_report"]
