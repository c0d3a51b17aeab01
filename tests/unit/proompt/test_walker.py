from __future__ import annotations

from pathlib import Path

import pytest

from proompt.config import WalkOptions
from proompt.exceptions import TraversalEntryError
from proompt.walker import find_git_root, is_regular_file, walk

NO_GLOBAL = WalkOptions(git_global=False)


def make_tree(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def walked_files(root: Path, options: WalkOptions = NO_GLOBAL) -> list[str]:
    return [e.rel for e in walk(str(root), options) if e.is_file]


@pytest.mark.unit
def test_walk_yields_sorted_files_before_subdirectories(tmp_path: Path) -> None:
    make_tree(tmp_path, {"b.txt": "b", "a.txt": "a", "sub/c.txt": "c", "sub/inner/d.txt": "d"})

    entries = list(walk(str(tmp_path), NO_GLOBAL))

    assert [(e.rel, e.is_file) for e in entries] == [
        ("a.txt", True),
        ("b.txt", True),
        ("sub", False),
        ("sub/c.txt", True),
        ("sub/inner", False),
        ("sub/inner/d.txt", True),
    ]
    assert entries[0].path == str(tmp_path / "a.txt")


@pytest.mark.unit
def test_walk_skips_hidden_entries_by_default(tmp_path: Path) -> None:
    make_tree(tmp_path, {".hidden.txt": "h", ".config/settings.txt": "s", "visible.txt": "v"})

    assert walked_files(tmp_path) == ["visible.txt"]
    assert walked_files(tmp_path, WalkOptions(hidden=False, git_global=False)) == [
        ".hidden.txt",
        "visible.txt",
        ".config/settings.txt",
    ]


@pytest.mark.unit
def test_walk_honors_gitignore_inside_repository(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    make_tree(
        tmp_path,
        {
            ".gitignore": "*.log\nbuild/\n!keep.log\n",
            "app.py": "",
            "debug.log": "",
            "keep.log": "",
            "build/out.py": "",
            "src/build.py": "",
        },
    )

    assert walked_files(tmp_path) == ["app.py", "keep.log", "src/build.py"]


@pytest.mark.unit
def test_walk_ignores_gitignore_outside_repository(tmp_path: Path) -> None:
    make_tree(tmp_path, {".gitignore": "*.log\n", "debug.log": "", "app.py": ""})

    assert walked_files(tmp_path) == ["app.py", "debug.log"]


@pytest.mark.unit
def test_walk_nested_gitignore_overrides_parent(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    make_tree(
        tmp_path,
        {
            ".gitignore": "*.gen\n",
            "top.gen": "",
            "pkg/.gitignore": "!wanted.gen\n",
            "pkg/wanted.gen": "",
            "pkg/other.gen": "",
        },
    )

    assert walked_files(tmp_path) == ["pkg/wanted.gen"]


@pytest.mark.unit
def test_walk_applies_ancestor_gitignore_when_rooted_below_repository(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    make_tree(tmp_path, {".gitignore": "*.tmp\n", "sub/a.tmp": "", "sub/a.py": ""})

    assert walked_files(tmp_path / "sub") == ["a.py"]


@pytest.mark.unit
def test_walk_honors_info_exclude(tmp_path: Path) -> None:
    make_tree(tmp_path, {".git/info/exclude": "secret.txt\n", "secret.txt": "", "public.txt": ""})

    assert walked_files(tmp_path) == ["public.txt"]


@pytest.mark.unit
def test_walk_honors_ignore_file_without_repository(tmp_path: Path) -> None:
    make_tree(tmp_path, {".ignore": "vendor/\n", "vendor/lib.py": "", "main.py": ""})

    assert walked_files(tmp_path) == ["main.py"]


@pytest.mark.unit
def test_walk_applies_ancestor_ignore_file_without_repository(tmp_path: Path) -> None:
    make_tree(
        tmp_path,
        {".ignore": "*.tmp\nsub/generated/\n", "sub/a.tmp": "", "sub/a.py": "", "sub/generated/g.py": ""},
    )

    assert walked_files(tmp_path / "sub") == ["a.py"]


@pytest.mark.unit
def test_walk_ancestor_ignore_file_can_be_disabled(tmp_path: Path) -> None:
    make_tree(tmp_path, {".ignore": "*.tmp\n", "sub/a.tmp": "", "sub/a.py": ""})

    assert walked_files(tmp_path / "sub", WalkOptions(git_global=False, ignore=False)) == ["a.py", "a.tmp"]


@pytest.mark.unit
def test_walk_ignore_rules_cover_names_starting_with_two_dots(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    make_tree(tmp_path, {".gitignore": "*.log\n", "..x.log": "", "..x.py": "", "app.log": ""})

    assert walked_files(tmp_path, WalkOptions(git_global=False, hidden=False)) == ["..x.py", ".gitignore"]


@pytest.mark.unit
def test_walk_ignore_rules_can_be_disabled(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    make_tree(tmp_path, {".gitignore": "*.log\n", ".ignore": "*.py\n", "debug.log": "", "app.py": ""})
    options = WalkOptions(ignore=False, git_ignore=False, git_global=False, git_exclude=False)

    assert walked_files(tmp_path, options) == ["app.py", "debug.log"]


@pytest.mark.unit
def test_walk_uses_global_excludes_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "home"
    make_tree(home, {".config/git/ignore": "*.bak\n"})
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    make_tree(repo, {"a.bak": "", "a.py": ""})

    assert walked_files(repo, WalkOptions()) == ["a.py"]


@pytest.mark.unit
def test_walk_classifies_symlinks_as_non_files(tmp_path: Path) -> None:
    make_tree(tmp_path, {"real.txt": "r"})
    (tmp_path / "link.txt").symlink_to(tmp_path / "real.txt")

    entries = {e.rel: e.is_file for e in walk(str(tmp_path), NO_GLOBAL)}

    assert entries == {"link.txt": False, "real.txt": True}
    assert not is_regular_file(str(tmp_path / "link.txt"))


@pytest.mark.unit
def test_walk_reports_unreadable_root(tmp_path: Path) -> None:
    errors: list[TraversalEntryError] = []
    missing = tmp_path / "missing"

    entries = list(walk(str(missing), NO_GLOBAL, on_error=errors.append))

    assert entries == []
    assert len(errors) == 1
    assert errors[0].path == str(missing)
    assert errors[0].message.startswith(f"ERROR: {missing}: ")


@pytest.mark.unit
def test_find_git_root_walks_up(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_git_root(nested) == tmp_path.resolve()
