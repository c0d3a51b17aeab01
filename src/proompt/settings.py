from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "PROOMPT_"


def env_defaults(
    env_file: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Collect ``PROOMPT_*`` defaults from a ``.env`` file and the environment.

    The process environment wins over the file. Keys are returned without the
    prefix and lower-cased, so ``PROOMPT_MAX_LINES`` becomes ``max_lines``.

    Args:
        env_file: the dotenv file to read; defaults to the one found from the cwd.
        environ: the environment mapping; defaults to ``os.environ``.

    Returns:
        dict[str, str]: the defaults keyed by setting name.
    """
    path = ENV_FILE if env_file is None else env_file
    values: dict[str, str | None] = dict(dotenv_values(path)) if path else {}
    values.update(os.environ if environ is None else environ)
    return {
        key.removeprefix(ENV_PREFIX).lower(): value
        for key, value in values.items()
        if key.startswith(ENV_PREFIX) and value is not None
    }


class Settings(BaseModel):
    """Run configuration for proompt, built once from the command line."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    paths: tuple[str, ...] = Field(default=(), description="Files or directories to process.")
    extension: tuple[str, ...] = Field(
        default=(),
        description="Only include files with these extensions (case-sensitive).",
    )
    include_hidden: bool = Field(default=False, description="Include hidden files and directories.")
    ignore_gitignore: bool = Field(default=False, description="Ignore .gitignore and related files.")
    ignore: tuple[str, ...] = Field(default=(), description="Glob patterns to ignore.")
    output: Path | None = Field(default=None, description="Write output to a file.")
    max_file_size: str | None = Field(
        default=None,
        description="Skip files larger than this size (e.g. 512, 10KB, 2MB).",
    )
    max_lines: int | None = Field(default=None, ge=0, description="Truncate files after this many lines.")
    add_metadata: bool = Field(default=False, description="Add size, line count and date to headers.")
    log_file: str = Field(default="", description="Structured log file path.")
