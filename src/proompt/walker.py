"""Directory traversal honoring hidden-entry and VCS-ignore rules.

The walk is a lazy, one-shot generator per root. Within each directory, names
are visited in sorted order and files are yielded before subdirectories are
entered, so the order is stable for a given filesystem snapshot.

Ignore files are layered from least to most specific: the global git excludes
file, ``.git/info/exclude``, then per directory ``.gitignore`` followed by
``.ignore``. The most specific file with a matching pattern decides.
"""

from __future__ import annotations

import os
import stat
import subprocess  # noqa: S404
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pathspec

from proompt.config import (
    GIT_DIR,
    GIT_EXCLUDE_FILE,
    GITIGNORE_FILE,
    HIDDEN_PREFIX,
    IGNORE_FILE,
    DirectoryEntry,
    WalkOptions,
)
from proompt.exceptions import TraversalEntryError
from proompt.file_manipulation import relpath
from proompt.logging import logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    ErrorHandler = Callable[[TraversalEntryError], None]


@dataclass(frozen=True)
class IgnoreMatcher:
    """Patterns of one ignore file, anchored at the directory holding it."""

    base: str
    spec: pathspec.PathSpec
    source: str

    def check(self, abs_path: str, *, is_dir: bool) -> bool | None:
        """Tell whether this file ignores `abs_path`.

        Returns:
            bool | None: True if ignored, False if re-included by a negated
                pattern, None if no pattern matches or the path is outside `base`.
        """
        rel = os.path.relpath(abs_path, self.base)
        if rel in (os.curdir, os.pardir) or rel.startswith(os.pardir + os.sep):
            return None
        rel = rel.replace(os.sep, "/")
        if is_dir:
            rel += "/"
        return self.spec.check_file(rel).include


def load_ignore_file(path: Path, base: Path, on_error: ErrorHandler | None = None) -> IgnoreMatcher | None:
    """Parse a gitignore-style file into a matcher.

    Args:
        path (Path): the ignore file
        base (Path): the directory its patterns are relative to
        on_error (ErrorHandler | None): receives read failures

    Returns:
        IgnoreMatcher | None: the matcher, or None if the file is missing or unreadable
    """
    if not path.is_file():
        return None
    try:
        lines = path.read_text(encoding="utf-8", errors="ignore").splitlines()
    except OSError as e:
        if on_error is not None:
            on_error(TraversalEntryError(path=str(path), reason=e.strerror or str(e)))
        return None
    logger.debug("ignore_file_loaded", source=str(path), patterns=len(lines))
    return IgnoreMatcher(
        base=os.path.abspath(base),
        spec=pathspec.GitIgnoreSpec.from_lines(lines),
        source=str(path),
    )


def find_git_root(start: Path) -> Path | None:
    """Return the closest directory at or above `start` holding a ``.git`` entry."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / GIT_DIR).exists():
            return candidate
    return None


def global_excludes_file() -> Path:
    """Locate the user's global git excludes file.

    Uses ``git config --global core.excludesFile`` when git is available and
    the key is set, else the XDG default ``$XDG_CONFIG_HOME/git/ignore``.

    Returns:
        Path: the excludes file path (it may not exist)
    """
    try:
        out = subprocess.run(
            ["git", "config", "--global", "--get", "core.excludesFile"],  # noqa: S607
            text=True,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        logger.debug("git config unavailable: %s", e)
    else:
        configured = out.stdout.strip()
        if out.returncode == 0 and configured:
            return Path(configured).expanduser()
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "git" / "ignore"


def root_matchers(
    root: Path,
    repo: Path | None,
    options: WalkOptions,
    on_error: ErrorHandler | None = None,
) -> list[IgnoreMatcher]:
    """Build the matchers that apply before the walk enters `root`.

    These are the global excludes file and ``info/exclude`` of the enclosing
    repository, then for each ancestor of `root` its ``.gitignore`` (up to the
    repository root only) followed by its ``.ignore``.

    Returns:
        list[IgnoreMatcher]: matchers ordered from least to most specific
    """
    candidates: list[tuple[Path, Path]] = []
    if repo is not None and options.git_global:
        candidates.append((global_excludes_file(), repo))
    if repo is not None and options.git_exclude:
        candidates.append((repo.joinpath(GIT_DIR, *GIT_EXCLUDE_FILE), repo))
    for ancestor in reversed(root.resolve().parents):
        in_repo = repo is not None and (ancestor == repo or repo in ancestor.parents)
        if options.git_ignore and in_repo:
            candidates.append((ancestor / GITIGNORE_FILE, ancestor))
        if options.ignore:
            candidates.append((ancestor / IGNORE_FILE, ancestor))

    matchers = [load_ignore_file(path, base, on_error) for path, base in candidates]
    return [m for m in matchers if m is not None]


def directory_matchers(
    directory: str,
    base: str,
    options: WalkOptions,
    on_error: ErrorHandler | None = None,
) -> list[IgnoreMatcher]:
    """Load the ignore files held by `directory`, ``.gitignore`` before ``.ignore``.

    `base` is the real path of `directory`, the anchor for their patterns.
    """
    names: list[str] = []
    if options.git_ignore:
        names.append(GITIGNORE_FILE)
    if options.ignore:
        names.append(IGNORE_FILE)
    matchers = [load_ignore_file(Path(directory, name), Path(base), on_error) for name in names]
    return [m for m in matchers if m is not None]


def is_ignored(abs_path: str, matchers: Sequence[IgnoreMatcher], *, is_dir: bool) -> bool:
    """Check a path against layered matchers, most specific first.

    Args:
        abs_path (str): the real, absolute path to test
        matchers (Sequence[IgnoreMatcher]): matchers ordered from least to most specific
        is_dir (bool): whether the path is a directory, for ``dir/`` patterns

    Returns:
        bool: True if the deciding matcher ignores the path
    """
    for matcher in reversed(matchers):
        verdict = matcher.check(abs_path, is_dir=is_dir)
        if verdict is not None:
            return verdict
    return False


def is_regular_file(path: str) -> bool:
    """Check if a path is a regular file, without following symlinks."""
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError:
        return False


def walk(
    root: str,
    options: WalkOptions,
    on_error: ErrorHandler | None = None,
) -> Iterator[DirectoryEntry]:
    """Lazily enumerate the entries below `root`.

    Args:
        root (str): the directory to walk; yielded paths are joined onto it as given
        options (WalkOptions): hidden and ignore-file switches
        on_error (ErrorHandler | None): receives unreadable entries; the walk continues

    Yields:
        DirectoryEntry: every kept file and directory, the root excluded
    """
    real_root = os.path.realpath(root)

    def anchored(path: str) -> str:
        return os.path.normpath(os.path.join(real_root, os.path.relpath(path, root)))

    def report(err: OSError) -> None:
        if on_error is not None:
            on_error(TraversalEntryError(path=str(err.filename or root), reason=err.strerror or str(err)))

    repo = find_git_root(Path(root)) if options.uses_git else None
    if repo is None:
        # Git-sourced rules only apply inside a repository.
        options = options.model_copy(update={"git_ignore": False, "git_global": False, "git_exclude": False})
    logger.debug("walk_started", root=root, repo=str(repo) if repo else None, options=options.model_dump())
    inherited: dict[str, list[IgnoreMatcher]] = {root: root_matchers(Path(root), repo, options, on_error)}

    for dirpath, dirnames, filenames in os.walk(root, onerror=report):
        current = [*inherited.pop(dirpath, []), *directory_matchers(dirpath, anchored(dirpath), options, on_error)]

        kept_dirs: list[str] = []
        for name in sorted(dirnames):
            full = os.path.join(dirpath, name)
            if options.hidden and name.startswith(HIDDEN_PREFIX):
                continue
            if is_ignored(anchored(full), current, is_dir=True):
                logger.debug("entry_ignored", path=full)
                continue
            kept_dirs.append(name)
            inherited[full] = current
        dirnames[:] = kept_dirs

        for name in sorted(filenames):
            full = os.path.join(dirpath, name)
            if options.hidden and name.startswith(HIDDEN_PREFIX):
                continue
            if is_ignored(anchored(full), current, is_dir=False):
                logger.debug("entry_ignored", path=full)
                continue
            yield DirectoryEntry(path=full, rel=relpath(full, root), is_file=is_regular_file(full))

        for name in kept_dirs:
            full = os.path.join(dirpath, name)
            yield DirectoryEntry(path=full, rel=relpath(full, root), is_file=False)
