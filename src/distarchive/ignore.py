"""
Translation of ``.distignore`` entries into archiver exclude patterns.

Directory entries become ``name/*``. For zip every pattern is prefixed with
``*/`` so it matches below the archive's root folder; tar patterns are left
unprefixed. The ``/*`` suffix is only a hint: whether it covers nested
content depends on the archiver's own pattern semantics.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterable, List, Tuple

from .models import ArchiveFormat, IgnoreEntry

# Third-party dependency
try:
    import pathspec  # type: ignore
except ImportError:  # pragma: no cover
    sys.stderr.write(
        "Error: 'pathspec' library is required. Install via 'pip install pathspec'.\n"
    )
    sys.exit(1)


def read_ignore_entries(root: Path, manifest_text: str) -> List[IgnoreEntry]:
    """Turn the manifest into entries, one per non-blank line, in file order."""
    entries: List[IgnoreEntry] = []
    for line in manifest_text.splitlines():
        pattern = line.strip()
        if not pattern:
            continue
        if pattern.startswith("#"):
            entries.append(IgnoreEntry(pattern, is_comment=True))
            continue
        # os.path.isdir reports unstattable names (too long, no access) as False.
        is_dir = os.path.isdir(f"{root}/{pattern}")
        entries.append(IgnoreEntry(pattern, is_directory=is_dir))
    return entries


def translate_entry(entry: IgnoreEntry, fmt: ArchiveFormat) -> str:
    pattern = entry.pattern
    if entry.is_directory:
        pattern = pattern.rstrip("/") + "/*"
    if fmt is ArchiveFormat.ZIP:
        return "*/" + pattern
    return pattern


def translate_entries(entries: Iterable[IgnoreEntry], fmt: ArchiveFormat) -> List[str]:
    """Exclude patterns for the non-comment *entries*, order preserved."""
    return [translate_entry(e, fmt) for e in entries if not e.is_comment]


def translate_ignore_file(
    root: Path, manifest_text: str, fmt: ArchiveFormat
) -> Tuple[List[str], str]:
    """Return ``(exclude_patterns, root_folder)`` for *root*."""
    entries = read_ignore_entries(root, manifest_text)
    return translate_entries(entries, fmt), root.name


def build_ignore_spec(entries: Iterable[IgnoreEntry]) -> "pathspec.PathSpec":
    """Compile the raw entries as gitwildmatch patterns for local matching."""
    lines = [e.pattern for e in entries if not e.is_comment]
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)
