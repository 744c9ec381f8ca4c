"""
Archiver command construction and execution.

Commands are built as argument lists and run without a shell, so patterns
reach ``zip`` and ``tar`` verbatim. ``ArchiveCommand.display`` gives the
shell-quoted form used in log output.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from .models import ArchiveFormat

log = logging.getLogger(__name__)

# Shell conventions for "command not found" and "not executable".
MISSING_EXECUTABLE_CODE = 127
NOT_EXECUTABLE_CODE = 126


@dataclass(frozen=True)
class ArchiveCommand:
    argv: List[str]
    cwd: Path

    def display(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class ArchiveResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def error_output(self) -> str:
        return self.stderr if self.stderr else self.stdout


def _tar_exclude(pattern: str) -> str:
    # tar's --exclude already descends into directories.
    if pattern.endswith("/*"):
        pattern = pattern[:-2]
    return f"--exclude={pattern}"


def build_archive_command(
    fmt: ArchiveFormat,
    patterns: Sequence[str],
    root_folder: str,
    output_path: Path,
    cwd: Path,
) -> ArchiveCommand:
    """Build the zip or tar invocation that archives *root_folder* from *cwd*."""
    if fmt is ArchiveFormat.ZIP:
        argv = ["zip", "-r", str(output_path), root_folder]
        for pattern in patterns:
            argv += ["--exclude", pattern]
    elif fmt is ArchiveFormat.TARGZ:
        argv = ["tar"]
        argv += [_tar_exclude(p) for p in patterns]
        argv += ["-zcvf", str(output_path), root_folder]
    else:  # pragma: no cover
        raise ValueError(f"Unsupported archive format: {fmt!r}")
    return ArchiveCommand(argv=argv, cwd=cwd)


def run_archive_command(command: ArchiveCommand) -> ArchiveResult:
    """Run *command* to completion, capturing both output streams."""
    log.debug("Running: %s", command.display())
    try:
        res = subprocess.run(
            command.argv,
            cwd=command.cwd,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        code = MISSING_EXECUTABLE_CODE if isinstance(e, FileNotFoundError) else NOT_EXECUTABLE_CODE
        return ArchiveResult(code, stderr=f"{command.argv[0]}: {e.strerror or e}")
    return ArchiveResult(res.returncode, res.stdout or "", res.stderr or "")
