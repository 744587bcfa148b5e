"""Repository inspection: directory tree, README and build-relevant file excerpts."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "venv",
    ".venv",
    "__pycache__",
    ".tox",
    ".pytest_cache",
    ".mypy_cache",
}

README_CANDIDATES: tuple[str, ...] = ("README.md", "README.rst", "README.txt")
DOCKER_RELATED_FILES: tuple[str, ...] = (".dockerignore", "docker-compose.yml", "Dockerfile")

MAX_TREE_DEPTH = 5
README_BYTE_LIMIT = 2000
FILE_BYTE_LIMIT = 1000

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE = "│   "
_SPACE = "    "


def build_directory_tree(root: Path | str, *, max_depth: int = MAX_TREE_DEPTH) -> str:
    """Render ``root`` as a box-drawn tree, at most ``max_depth`` levels deep.

    Entries are listed in the order the filesystem yields them; the output is
    meant for the model to read and is never parsed back.
    """
    root_path = Path(root)
    lines: List[str] = []
    _walk(root_path, "", 1, max_depth, lines)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def _walk(directory: Path, prefix: str, depth: int, max_depth: int, lines: List[str]) -> None:
    try:
        with os.scandir(directory) as iterator:
            entries = [entry for entry in iterator if entry.name not in _EXCLUDED_DIRS]
    except OSError:
        return

    for index, entry in enumerate(entries):
        is_last = index == len(entries) - 1
        lines.append(f"{prefix}{_LAST_BRANCH if is_last else _BRANCH}{entry.name}")
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        if is_dir and depth < max_depth:
            child_prefix = prefix + (_SPACE if is_last else _PIPE)
            _walk(Path(entry.path), child_prefix, depth + 1, max_depth, lines)


def extract_readme(root: Path | str) -> str:
    """Return the first README found, truncated to ``README_BYTE_LIMIT`` bytes."""
    root_path = Path(root)
    for name in README_CANDIDATES:
        candidate = root_path / name
        if candidate.is_file():
            return read_truncated(candidate, README_BYTE_LIMIT)
    return ""


def extract_docker_files(root: Path | str) -> str:
    """Concatenate excerpts of any existing .dockerignore, compose file and Dockerfile."""
    root_path = Path(root)
    return _render_excerpts(root_path, DOCKER_RELATED_FILES)


def extract_key_files_content(root: Path | str, key_files: Iterable[str]) -> str:
    """Concatenate excerpts of the selected key files.

    Paths that do not exist, are not regular files, or resolve outside ``root``
    are skipped without error since the list comes straight from the model.
    """
    return _render_excerpts(Path(root), key_files)


def _render_excerpts(root: Path, names: Iterable[str]) -> str:
    resolved_root = root.resolve()
    chunks: List[str] = []
    for name in names:
        candidate = _safe_join(resolved_root, name)
        if candidate is None or not candidate.is_file():
            continue
        try:
            excerpt = read_truncated(candidate, FILE_BYTE_LIMIT)
        except OSError:
            continue
        chunks.append(f"--- {name} ---\n{excerpt}\n\n")
    return "".join(chunks)


def _safe_join(root: Path, relative: str) -> Path | None:
    relative = relative.strip()
    if not relative:
        return None
    try:
        candidate = (root / relative).resolve()
    except (OSError, ValueError):
        return None
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


def read_truncated(path: Path, limit: int) -> str:
    """Read at most ``limit`` bytes of ``path`` as UTF-8 text.

    A character split by the byte limit is dropped rather than replaced, so the
    encoded result never exceeds ``limit`` bytes.
    """
    with path.open("rb") as handle:
        data = handle.read(limit)
    return data.decode("utf-8", errors="ignore")


__all__ = [
    "DOCKER_RELATED_FILES",
    "FILE_BYTE_LIMIT",
    "MAX_TREE_DEPTH",
    "README_BYTE_LIMIT",
    "README_CANDIDATES",
    "build_directory_tree",
    "extract_docker_files",
    "extract_key_files_content",
    "extract_readme",
    "read_truncated",
]
