"""
CLI entrypoint for distarchive package.
"""
import argparse
import logging
import sys
from pathlib import Path

from colorama import Fore, Style, init as colorama_init

from .core import (
    DistArchiveError,
    archive_command,
    create_archive,
    prepare_job,
    preview_files,
)
from .models import ArchiveFormat

colorama_init()

log = logging.getLogger("distarchive")

SUCCESS = logging.INFO + 5
logging.addLevelName(SUCCESS, "SUCCESS")


class ColorFormatter(logging.Formatter):
    """Prefix records with ``[dist-archive]`` and colour them by level."""

    COLORS = {
        logging.DEBUG: Style.DIM,
        SUCCESS: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        message = f"[dist-archive] {super().format(record)}"
        color = self.COLORS.get(record.levelno, "")
        return f"{color}{message}{Style.RESET_ALL}" if color else message


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter("%(message)s"))
    log.handlers[:] = [handler]
    log.setLevel(logging.DEBUG if verbose else logging.INFO)
    log.propagate = False


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="dist-archive",
        description="Create a distribution archive based on a project's .distignore file.",
    )
    p.add_argument("path", type=Path, help="Path to the project that includes a .distignore file")
    p.add_argument(
        "target",
        nargs="?",
        type=Path,
        help="Archive path (default: project directory name plus version, next to the project)",
    )
    p.add_argument(
        "--format",
        choices=[f.value for f in ArchiveFormat],
        default=ArchiveFormat.ZIP.value,
        help="Archive format (default: zip)",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the archiver command and the files that would be kept, create nothing",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def main(argv=None) -> None:
    ns = _parse_args(argv)
    setup_logging(ns.verbose)
    try:
        job = prepare_job(ns.path, ns.target, ArchiveFormat(ns.format))

        if ns.dry_run:
            kept = preview_files(job)
            log.info("Would run: %s", archive_command(job).display())
            log.info("Would create %s", job.output_path)
            for rel in kept:
                log.info("  %s", rel.as_posix())
            log.info("%d files kept, %d exclude patterns.", len(kept), len(job.exclude_patterns))
            return

        archive = create_archive(job)
        log.log(SUCCESS, "Created %s", archive.name)

    except DistArchiveError as e:
        log.error("Error: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        log.error("Cancelled.")
        sys.exit(130)
    except Exception as e:
        log.error("Unexpected error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
