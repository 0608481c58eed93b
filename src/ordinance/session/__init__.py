"""Evaluation sessions, findings cache, cancellation, and discovery."""

from .cache import FindingCache, load_finding_cache, save_finding_cache
from .cancellation import CancellationToken
from .discovery import DiscoveredFiles, SkippedFile, collect_source_files, discover_source_files
from .session import EvaluationSession
from .states import FileStateMachine
from .workspace import CheckResult, build_policy, check_workspace

__all__ = [
    "CancellationToken",
    "CheckResult",
    "DiscoveredFiles",
    "EvaluationSession",
    "FileStateMachine",
    "FindingCache",
    "SkippedFile",
    "build_policy",
    "check_workspace",
    "collect_source_files",
    "discover_source_files",
    "load_finding_cache",
    "save_finding_cache",
]
