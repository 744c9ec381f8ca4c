"""
Version discovery for archive file names.

The version comes from the first docblock ``version`` tag found in the
project's top-level source files, falling back to ``composer.json``. Alpha
versions of git checkouts get the short hash of the latest commit appended.
Every step degrades to "no contribution" instead of raising.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

from .docblock import find_version_in_code

log = logging.getLogger(__name__)

SOURCE_GLOB = "*.php"
VERSION_SCAN_BYTES = 5000
MANIFEST_FILE_NAME = "composer.json"
VCS_DIR_NAME = ".git"
REVISION_HASH_LENGTH = 7
ALPHA_MARKER = "-alpha"

RevisionLookup = Callable[[Path], Optional[str]]


def _read_head(path: Path, max_bytes: int = VERSION_SCAN_BYTES) -> Optional[str]:
    try:
        with path.open("rb") as fh:
            raw = fh.read(max_bytes)
    except OSError as e:
        log.debug("Could not read %s: %s", path, e)
        return None
    return raw.decode("utf-8", errors="replace")


def version_from_sources(root: Path) -> Optional[str]:
    """Scan top-level source files for a docblock version.

    Files are visited in directory-listing order, which is not guaranteed to be
    stable across filesystems.
    """
    for source in root.glob(SOURCE_GLOB):
        # Hidden files (tool configs such as .php-cs-fixer.dist.php) are not sources.
        if source.name.startswith(".") or not os.path.isfile(source):
            continue
        code = _read_head(source)
        if code is None:
            continue
        version = find_version_in_code(code)
        if version:
            log.debug("Found version %s in %s", version, source.name)
            return version
    return None


def version_from_manifest(root: Path) -> Optional[str]:
    """Read ``version`` from ``composer.json``, prefixed with a ``.`` separator."""
    manifest = root / MANIFEST_FILE_NAME
    if not manifest.is_file():
        return None
    try:
        with manifest.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        log.debug("Ignoring unreadable %s: %s", manifest.name, e)
        return None

    if not isinstance(data, dict):
        return None
    value = data.get("version")
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    value = str(value).strip()
    if not value:
        return None
    log.debug("Found version %s in %s", value, manifest.name)
    return "." + value


def git_short_hash(root: Path) -> Optional[str]:
    """Return the abbreviated hash of the latest commit in *root*, if any."""
    exe = shutil.which("git")
    if not exe:
        return None
    try:
        res = subprocess.run(
            [exe, "log", "--pretty=format:%h", "-n", "1"],
            cwd=root,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        log.debug("git lookup failed: %s", e)
        return None
    if res.returncode != 0:
        log.debug("git log exited with %s", res.returncode)
        return None
    return res.stdout.strip() or None


def with_revision_suffix(
    version: str,
    root: Path,
    revision_lookup: RevisionLookup = git_short_hash,
) -> str:
    """Append ``-<hash>`` to alpha versions of projects under git."""
    if ALPHA_MARKER not in version.lower():
        return version
    if not (root / VCS_DIR_NAME).is_dir():
        return version
    maybe_hash = (revision_lookup(root) or "").strip()
    if len(maybe_hash) != REVISION_HASH_LENGTH:
        log.debug("No usable revision hash for %s", root)
        return version
    return f"{version}-{maybe_hash}"


def _first_found(root: Path, steps: Iterable[Callable[[Path], Optional[str]]]) -> str:
    for step in steps:
        found = step(root)
        if found:
            return found
    return ""


def resolve_version(root: Path, revision_lookup: RevisionLookup = git_short_hash) -> str:
    """Best available version string for *root*; may be empty."""
    version = _first_found(root, (version_from_sources, version_from_manifest))
    return with_revision_suffix(version, root, revision_lookup)
