from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, computed_field

from proompt.sizes import format_size

if TYPE_CHECKING:
    from proompt.settings import Settings

BLOCK_DELIMITER = "---"
TRUNCATION_MARKER = "\n... (truncated)"
UNKNOWN_DATE = "unknown"
DATE_FORMAT = "%Y-%m-%d"

HIDDEN_PREFIX = "."
IGNORE_FILE = ".ignore"
GITIGNORE_FILE = ".gitignore"
GIT_DIR = ".git"
GIT_EXCLUDE_FILE = ("info", "exclude")


class DirectoryEntry(BaseModel):
    """One entry yielded while walking a directory root.

    Attributes:
        path: Root-joined path, as displayed in the output header.
        rel: Path relative to the walked root, with POSIX separators.
        is_file: Whether the entry is a regular file (symlinks are not).
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Root-joined entry path")
    rel: str = Field(..., description="Entry path relative to the walked root")
    is_file: bool = Field(..., description="Regular file (not a directory, symlink or device)")


class FileMetadata(BaseModel):
    """Facts about a file gathered for the ``--add-metadata`` header.

    Attributes:
        size: File size in bytes.
        line_count: Number of lines in the full, untruncated content.
        modified: Last modification date as ``YYYY-MM-DD`` (UTC) or ``"unknown"``.
    """

    model_config = ConfigDict(frozen=True)

    size: int = Field(..., ge=0, description="File size in bytes")
    line_count: int = Field(..., ge=0, description="Line count of the full content")
    modified: str = Field(default=UNKNOWN_DATE, description="Modification date (UTC)")

    @computed_field
    @property
    def formatted_size(self) -> str:
        """Human-readable size used in the header."""
        return format_size(self.size)


class WalkOptions(BaseModel):
    """Switches for the directory traversal.

    Each flag enables a suppression rule; all are on by default.
    """

    model_config = ConfigDict(frozen=True)

    hidden: bool = Field(default=True, description="Skip dotfiles and dot-directories.")
    ignore: bool = Field(default=True, description="Honor .ignore files.")
    git_ignore: bool = Field(default=True, description="Honor .gitignore files.")
    git_global: bool = Field(default=True, description="Honor the global git excludes file.")
    git_exclude: bool = Field(default=True, description="Honor .git/info/exclude.")

    @classmethod
    def from_settings(cls, settings: Settings) -> WalkOptions:
        vcs = not settings.ignore_gitignore
        return cls(
            hidden=not settings.include_hidden,
            ignore=vcs,
            git_ignore=vcs,
            git_global=vcs,
            git_exclude=vcs,
        )

    @property
    def uses_git(self) -> bool:
        return self.git_ignore or self.git_global or self.git_exclude
