"""Source file discovery."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path

from ordinance.constants.config import DEFAULT_EXCLUDE_GLOBS, DEFAULT_INCLUDE_GLOBS, DEFAULT_MAX_FILE_MB
from ordinance.io import read_source_text
from ordinance.model import SourceFile

logger = logging.getLogger(__name__)


def _is_excluded(relative: Path, exclude: tuple[str, ...]) -> bool:
    # fnmatch lets ``*`` cross ``/``; the ``./`` prefix lets ``**/x/**`` match a top-level ``x/``.
    posix = relative.as_posix()
    return any(fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(f"./{posix}", pattern) for pattern in exclude)


@dataclass(frozen=True)
class SkippedFile:
    """A matched file that discovery could not turn into a ``SourceFile``."""

    path: str
    reason: str


@dataclass(frozen=True)
class DiscoveredFiles:
    sources: tuple[SourceFile, ...]
    skipped: tuple[SkippedFile, ...] = ()


def collect_source_files(
    root: Path,
    *,
    include: tuple[str, ...] = DEFAULT_INCLUDE_GLOBS,
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE_GLOBS,
    max_file_mb: int = DEFAULT_MAX_FILE_MB,
) -> DiscoveredFiles:
    """Collect source files under *root*, keeping the ones that could not be read.

    Paths are relative to *root* in POSIX form and sorted, so the result does
    not depend on filesystem enumeration order. Files over the size cap or not
    decodable as UTF-8 land in ``skipped`` with the reason.
    """
    resolved_root = root.resolve()
    size_limit_bytes = max_file_mb * 1024 * 1024
    discovered: set[Path] = set()

    for pattern in include:
        for path in resolved_root.glob(pattern):
            if not path.is_file():
                continue
            relative = path.relative_to(resolved_root)
            if not _is_excluded(relative, exclude):
                discovered.add(relative)

    sources: list[SourceFile] = []
    skipped: list[SkippedFile] = []
    for relative in sorted(discovered, key=lambda item: item.as_posix()):
        posix = relative.as_posix()
        path = resolved_root / relative
        try:
            if path.stat().st_size > size_limit_bytes:
                reason = f"larger than {max_file_mb} MB"
            else:
                sources.append(SourceFile(path=posix, text=read_source_text(path)))
                continue
        except UnicodeDecodeError:
            reason = "not valid UTF-8"
        except OSError as exc:
            reason = f"unreadable: {exc.strerror or exc}"
        logger.warning("Skipping %s: %s", posix, reason)
        skipped.append(SkippedFile(path=posix, reason=reason))
    return DiscoveredFiles(sources=tuple(sources), skipped=tuple(skipped))


def discover_source_files(
    root: Path,
    *,
    include: tuple[str, ...] = DEFAULT_INCLUDE_GLOBS,
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE_GLOBS,
    max_file_mb: int = DEFAULT_MAX_FILE_MB,
) -> list[SourceFile]:
    """Readable source files under *root*; see ``collect_source_files`` for the skipped ones."""
    return list(collect_source_files(root, include=include, exclude=exclude, max_file_mb=max_file_mb).sources)
