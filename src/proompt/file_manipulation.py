from __future__ import annotations

import fnmatch
import os
import posixpath
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from proompt.config import DATE_FORMAT, TRUNCATION_MARKER, UNKNOWN_DATE, FileMetadata

if TYPE_CHECKING:
    from collections.abc import Sequence

    from proompt.settings import Settings


def relpath(path: str | Path, root: str | Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (str | Path): the path to "relativise"
        root (str | Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        rel = Path(path).relative_to(root)
    except ValueError:
        return str(path).replace(os.sep, "/")
    return rel.as_posix()


def display_path(path: str | Path) -> str:
    """Render a path for output, replacing undecodable name bytes with U+FFFD.

    Names read from the filesystem may carry surrogate escapes, which no
    strict UTF-8 stream accepts.
    """
    return os.fsencode(path).decode("utf-8", errors="replace")


def file_extension(path: str) -> str | None:
    """Return the extension of the final path component, without the dot.

    A name without a dot, or a bare dotfile such as ``.hidden``, has no
    extension; ``.hidden.txt`` has ``txt`` and ``archive.tar.gz`` has ``gz``.

    Args:
        path (str): a file path or name, with POSIX or native separators

    Returns:
        str | None: the extension, or None when there is none
    """
    name = posixpath.basename(path.replace(os.sep, "/"))
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return None
    return ext


def match_any_glob(rel: str, globs: Sequence[str]) -> bool:
    """Check if a relative path matches any of the provided glob patterns.

    The whole path is matched as one string, so ``*`` also crosses ``/``.
    A ``**/`` segment may also match no directory at all, so ``**/*.txt``
    matches ``a.txt``. Matching is case-sensitive on every platform.

    Args:
        rel (str): the relative path to check
        globs (Sequence[str]): the glob patterns to match against

    Returns:
        bool: True if `rel` matches any pattern in `globs`, False otherwise
    """
    return any(fnmatch.fnmatchcase(rel, form) for g in globs for form in zero_depth_forms(g))


def zero_depth_forms(pattern: str) -> set[str]:
    """Expand a glob into the variants where each ``**/`` matches zero directories."""
    forms = {pattern}
    while True:
        expanded = {f.removeprefix("**/") for f in forms} | {f.replace("/**/", "/", 1) for f in forms}
        if expanded <= forms:
            return forms
        forms |= expanded


def should_include(rel: str, extension: str | None, settings: Settings) -> bool:
    """Decide whether a file discovered in a directory walk is kept.

    - If an extension allow-list is set, the extension must be one of its entries.
    - If ignore globs are set, the relative path must match none of them.

    Both rules must pass; an empty list disables its rule.

    Args:
        rel (str): the path relative to the walked root, with POSIX separators
        extension (str | None): the file extension, None when the name has none
        settings (Settings): the run configuration

    Returns:
        bool: True if the file should be rendered
    """
    if settings.extension and extension not in settings.extension:
        return False
    return not (settings.ignore and match_any_glob(rel, settings.ignore))


def split_lines(content: str) -> list[str]:
    r"""Split text on ``\n``, dropping one trailing ``\r`` per line.

    A trailing newline does not start an extra empty line, so ``"a\nb\n"``
    has two lines and ``""`` has none.

    Returns:
        list[str]: the lines, without terminators
    """
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [ln.removesuffix("\r") for ln in lines]


def read_text(path: Path) -> str:
    """Read a whole file as strict UTF-8, keeping its line endings untouched.

    Args:
        path (Path): the file to read

    Raises:
        UnicodeDecodeError: if the bytes are not valid UTF-8
        OSError: if the file cannot be read

    Returns:
        str: the decoded content
    """
    return path.read_bytes().decode("utf-8")


def truncate_lines(content: str, max_lines: int | None) -> str:
    """Keep the first ``max_lines`` lines and mark the cut.

    Args:
        content (str): the full file content
        max_lines (int | None): the line budget; None disables truncation

    Returns:
        str: `content` unchanged when it fits, else the kept lines joined by a
            newline followed by the truncation marker
    """
    if max_lines is None:
        return content
    lines = split_lines(content)
    if len(lines) <= max_lines:
        return content
    return "\n".join(lines[:max_lines]) + TRUNCATION_MARKER


def modified_date(mtime: float) -> str:
    """Format a POSIX mtime as a UTC calendar date, or ``"unknown"``."""
    try:
        return datetime.fromtimestamp(mtime, tz=UTC).strftime(DATE_FORMAT)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_DATE


def collect_metadata(path: Path) -> FileMetadata:
    """Gather size, line count and modification date of a file.

    The content is read again in full so the count reflects the untruncated
    file.

    Args:
        path (Path): the file to inspect

    Raises:
        OSError: if the file cannot be stat'ed or read
        UnicodeDecodeError: if the content is not valid UTF-8

    Returns:
        FileMetadata: a fresh snapshot, never cached
    """
    st = path.stat()
    line_count = len(split_lines(read_text(path)))
    return FileMetadata(size=st.st_size, line_count=line_count, modified=modified_date(st.st_mtime))
