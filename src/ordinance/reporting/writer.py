"""JSON report writer."""

from __future__ import annotations

from pathlib import Path

from ordinance import __version__
from ordinance.constants.reporting import REPORT_FILENAME, REPORT_TEMP_PREFIX, REPORT_TEMP_SUFFIX, SCHEMA_VERSION
from ordinance.io import write_json_atomic
from ordinance.model import EvaluationReport
from ordinance.types import JsonObject


def build_report_payload(
    report: EvaluationReport,
    *,
    fail_on: str,
    config_fingerprint: str | None = None,
    policy_fingerprint: str | None = None,
    include_stats: bool = True,
) -> JsonObject:
    """Return the JSON-serialisable form of *report* with run metadata.

    ``include_stats=False`` leaves out timing and cache counters, so the same
    input and policy always produce the same payload.
    """
    payload: JsonObject = {
        "schema_version": SCHEMA_VERSION,
        "tool_version": __version__,
        "fail_on": fail_on,
        "exit_code": report.exit_code(fail_on),  # type: ignore[arg-type]
        "config_fingerprint": config_fingerprint,
        "policy_fingerprint": policy_fingerprint,
    }
    payload.update(report.to_dict(include_stats=include_stats))
    return payload


def write_report(
    out_dir: Path,
    report: EvaluationReport,
    *,
    fail_on: str,
    config_fingerprint: str | None = None,
    policy_fingerprint: str | None = None,
    include_stats: bool = False,
) -> Path:
    """Write ``report.json`` into *out_dir* atomically and return its path.

    Run statistics are left out unless asked for, so an unchanged workspace
    rewrites a byte-identical report.
    """
    path = out_dir / REPORT_FILENAME
    write_json_atomic(
        path=path,
        payload=build_report_payload(
            report,
            fail_on=fail_on,
            config_fingerprint=config_fingerprint,
            policy_fingerprint=policy_fingerprint,
            include_stats=include_stats,
        ),
        temp_prefix=REPORT_TEMP_PREFIX,
        temp_suffix=REPORT_TEMP_SUFFIX,
    )
    return path
