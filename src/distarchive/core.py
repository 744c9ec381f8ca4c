"""
Core logic for distarchive package.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from .archive import ArchiveCommand, ArchiveResult, build_archive_command, run_archive_command
from .ignore import build_ignore_spec, read_ignore_entries, translate_entries
from .models import ArchiveFormat, ArchiveJob
from .version import RevisionLookup, git_short_hash, resolve_version

log = logging.getLogger(__name__)

# Exceptions
class DistArchiveError(Exception): ...
class InvalidPathError(DistArchiveError): ...
class MissingManifestError(DistArchiveError): ...
class ArchiverError(DistArchiveError): ...

IGNORE_FILE_NAME = ".distignore"


# Path helpers
def resolve_source_path(path: Union[str, Path]) -> Path:
    try:
        root = Path(os.path.realpath(path))
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(f"Could not resolve path '{path}': {e}")
    try:
        is_dir = root.is_dir()
    except OSError as e:
        log.debug("Could not stat %s: %s", root, e)
        is_dir = False
    if not is_dir:
        raise InvalidPathError("Provided path is not a directory.")
    return root


def read_ignore_manifest(root: Path) -> str:
    manifest = root / IGNORE_FILE_NAME
    if not manifest.is_file():
        raise MissingManifestError(f"No {IGNORE_FILE_NAME} file found.")
    try:
        return manifest.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MissingManifestError(f"Could not read '{manifest}': {e}")


def default_output_path(root: Path, version: str, fmt: ArchiveFormat) -> Path:
    """``<parent>/<basename><version>.<ext>``, next to the project directory."""
    return root.parent / f"{root.name}{version}.{fmt.extension}"


# Job preparation
def prepare_job(
    path: Union[str, Path],
    target: Optional[Union[str, Path]] = None,
    fmt: ArchiveFormat = ArchiveFormat.ZIP,
    revision_lookup: RevisionLookup = git_short_hash,
) -> ArchiveJob:
    """Validate *path* and resolve patterns, version and output path."""
    fmt = ArchiveFormat(fmt)
    root = resolve_source_path(path)
    manifest_text = read_ignore_manifest(root)

    entries = read_ignore_entries(root, manifest_text)
    patterns = translate_entries(entries, fmt)
    log.debug("%d exclude patterns from %s", len(patterns), IGNORE_FILE_NAME)

    version = resolve_version(root, revision_lookup=revision_lookup)
    log.debug("Resolved version: %r", version)

    if target is not None:
        output_path = Path(os.path.abspath(target))
    else:
        output_path = default_output_path(root, version, fmt)

    return ArchiveJob(
        source_path=root,
        archive_format=fmt,
        output_path=output_path,
        exclude_patterns=patterns,
        version=version,
        ignore_entries=entries,
    )


# Archive creation
def archive_command(job: ArchiveJob) -> ArchiveCommand:
    # Run from the parent so members are rooted at the project folder name.
    return build_archive_command(
        job.archive_format,
        job.exclude_patterns,
        job.root_folder,
        job.output_path,
        cwd=job.source_path.parent,
    )


def create_archive(job: ArchiveJob) -> Path:
    """Run the archiver for *job* and return the archive path."""
    result: ArchiveResult = run_archive_command(archive_command(job))
    if not result.ok:
        raise ArchiverError(result.error_output.strip() or f"Archiver exited with {result.returncode}")
    return job.output_path


# Preview
def preview_files(job: ArchiveJob) -> List[Path]:
    """Files under the project that the ignore entries keep, relative to its root.

    Matching uses gitignore semantics, so it approximates rather than mirrors
    the archiver's own pattern handling.
    """
    root = job.source_path
    spec = build_ignore_spec(job.ignore_entries)
    try:
        paths = sorted(p for p in root.rglob("*") if p.is_file())
    except OSError as e:
        raise InvalidPathError(f"Could not scan directory '{root}': {e}")

    kept: List[Path] = []
    for p in paths:
        rel = p.relative_to(root)
        if spec.match_file(rel.as_posix()):
            continue
        kept.append(rel)
    return kept
