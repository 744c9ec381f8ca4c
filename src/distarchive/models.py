"""Shared data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List


class ArchiveFormat(str, Enum):
    ZIP = "zip"
    TARGZ = "targz"

    @property
    def extension(self) -> str:
        return "zip" if self is ArchiveFormat.ZIP else "tar.gz"


@dataclass(frozen=True)
class IgnoreEntry:
    """One non-empty line of a ``.distignore`` file."""

    pattern: str
    is_comment: bool = False
    is_directory: bool = False


@dataclass
class ArchiveJob:
    """Everything needed to run the archiver once."""

    source_path: Path
    archive_format: ArchiveFormat
    output_path: Path
    exclude_patterns: List[str] = field(default_factory=list)
    version: str = ""
    ignore_entries: List[IgnoreEntry] = field(default_factory=list)

    @property
    def root_folder(self) -> str:
        return self.source_path.name
