"""
proompt: concatenate a directory full of files into a single prompt for LLMs.

Overview
--------
Every selected file becomes a four-line block on the output:

    path/to/file.py
    ---
    <file content>
    ---

Directories are walked recursively. Hidden entries and files matched by
``.gitignore``/``.ignore`` rules are skipped unless told otherwise, and the
selection can be narrowed with extension allow-lists and ignore globs. Files
that are not valid UTF-8, or larger than ``--max-file-size``, are reported on
stderr and skipped.

Defaults for ``--max-file-size``, ``--max-lines`` and ``--log-file`` can be set
with ``PROOMPT_MAX_FILE_SIZE``, ``PROOMPT_MAX_LINES`` and ``PROOMPT_LOG_FILE``,
in the environment or in a ``.env`` file.

Usage
-----
    - A project, Python and Markdown only:
        proompt src docs -e py -e md

    - Everything, including dotfiles and git-ignored files, into a file:
        proompt . --include-hidden --ignore-gitignore --output prompt.txt

    - Cap file size and length, with metadata headers:
        proompt . --max-file-size 100KB --max-lines 300 --add-metadata
"""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

from proompt import __version__
from proompt.logging import logger, setup_logging
from proompt.runner import run
from proompt.settings import Settings, env_defaults

if TYPE_CHECKING:
    from collections.abc import Sequence


def non_negative_int(value: str) -> int:
    """Argparse type for line counts: a base-10 integer, zero or more."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or more, got {value!r}")
    return number


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    defaults = env_defaults()
    p = argparse.ArgumentParser(
        prog="proompt",
        description="Concatenate a directory full of files into a single prompt for use with LLMs",
    )
    p.add_argument("paths", nargs="*", help="Paths to files or directories to process.")
    p.add_argument(
        "-e",
        "--extension",
        action="append",
        default=[],
        help="Only include files with the specified extension (repeatable).",
    )
    p.add_argument("--include-hidden", action="store_true", help="Include hidden files and directories.")
    p.add_argument("--ignore-gitignore", action="store_true", help="Ignore .gitignore files.")
    p.add_argument(
        "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Pattern to ignore (repeatable).",
    )
    p.add_argument("-o", "--output", type=str, default=None, metavar="FILE", help="Write output to a file.")
    p.add_argument(
        "--max-file-size",
        type=str,
        default=defaults.get("max_file_size"),
        metavar="SIZE",
        help="Skip files larger than SIZE (e.g. 512, 10KB, 2MB).",
    )
    p.add_argument(
        "--max-lines",
        type=non_negative_int,
        default=defaults.get("max_lines"),
        metavar="N",
        help="Truncate each file after N lines.",
    )
    p.add_argument("--add-metadata", action="store_true", help="Add size, line count and date to file headers.")
    p.add_argument("--log-file", type=str, default=defaults.get("log_file", ""), help="Log file path.")
    p.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    args = p.parse_args(argv)
    return Settings(**vars(args))


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    logger.info("run_started", paths=list(settings.paths), output=str(settings.output or "<stdout>"))
    return run(settings)


if __name__ == "__main__":
    raise SystemExit(main())
