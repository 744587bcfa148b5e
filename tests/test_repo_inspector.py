"""Tests for dockergen.repo_inspector."""

from __future__ import annotations

from pathlib import Path

from dockergen import repo_inspector
from dockergen.repo_inspector import (
    FILE_BYTE_LIMIT,
    README_BYTE_LIMIT,
    build_directory_tree,
    extract_docker_files,
    extract_key_files_content,
    extract_readme,
    read_truncated,
)
from tests._fixtures.repo_builder import RepoBuilder


def test_directory_tree_skips_ignored_directories(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "package.json": "{}",
            "src/app.js": "console.log('hi')",
            "node_modules/left-pad/index.js": "",
            ".git/HEAD": "ref: refs/heads/main",
            ".venv/bin/python": "",
        }
    )

    tree = build_directory_tree(repo_builder.path())

    assert "package.json" in tree
    assert "src" in tree
    assert "app.js" in tree
    assert "node_modules" not in tree
    assert "left-pad" not in tree
    assert ".git" not in tree
    assert ".venv" not in tree


def test_directory_tree_uses_box_drawing_connectors(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"only_dir/inner.txt": "x"})

    tree = build_directory_tree(repo_builder.path())

    assert tree.splitlines() == ["└── only_dir", "    └── inner.txt"]


def test_directory_tree_marks_last_sibling(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"a.txt": "a", "b.txt": "b", "c.txt": "c"})

    lines = build_directory_tree(repo_builder.path()).splitlines()

    assert len(lines) == 3
    assert all(line.startswith("├── ") for line in lines[:-1])
    assert lines[-1].startswith("└── ")


def test_directory_tree_nested_prefix_continues_pipe(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"dir/child.txt": "x", "dir2/child.txt": "x"})

    lines = build_directory_tree(repo_builder.path()).splitlines()

    children = [line for line in lines if line.endswith("child.txt")]
    assert len(children) == 2
    for line in children:
        assert line.startswith("│   └── ") or line.startswith("    └── ")


def test_directory_tree_respects_depth_limit(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"l1/l2/l3/l4/l5/l6/l7/deep.txt": "deep"})

    tree = build_directory_tree(repo_builder.path(), max_depth=3)
    lines = tree.splitlines()

    assert [line.split("── ")[-1] for line in lines] == ["l1", "l2", "l3"]
    assert "deep.txt" not in tree


def test_directory_tree_default_depth_is_bounded(repo_builder: RepoBuilder) -> None:
    nested = "/".join(f"d{index}" for index in range(12))
    repo_builder.write({f"{nested}/leaf.txt": "x"})

    lines = build_directory_tree(repo_builder.path()).splitlines()

    assert len(lines) == repo_inspector.MAX_TREE_DEPTH
    assert "leaf.txt" not in "\n".join(lines)


def test_directory_tree_empty_repository(repo_builder: RepoBuilder) -> None:
    assert build_directory_tree(repo_builder.path()) == ""


def test_extract_readme_prefers_markdown(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "# Markdown", "README.txt": "plain"})

    assert extract_readme(repo_builder.path()).startswith("# Markdown")


def test_extract_readme_falls_back_to_rst_and_txt(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.txt": "plain text readme"})

    assert extract_readme(repo_builder.path()) == "plain text readme"


def test_extract_readme_missing_returns_empty(repo_builder: RepoBuilder) -> None:
    assert extract_readme(repo_builder.path()) == ""


def test_extract_readme_is_truncated_to_budget(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"README.md": "x" * (README_BYTE_LIMIT * 3)})

    readme = extract_readme(repo_builder.path())

    assert len(readme.encode("utf-8")) == README_BYTE_LIMIT


def test_truncation_never_splits_multibyte_characters(tmp_path: Path) -> None:
    target = tmp_path / "unicode.txt"
    target.write_text("é" * 1500, encoding="utf-8")

    excerpt = read_truncated(target, 999)

    assert len(excerpt.encode("utf-8")) <= 999
    assert set(excerpt) == {"é"}


def test_extract_docker_files_includes_headers(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".dockerignore": "node_modules\n",
            "Dockerfile": "FROM node:14\n" + "#" * 5000,
        }
    )

    content = extract_docker_files(repo_builder.path())

    assert content.startswith("--- .dockerignore ---\nnode_modules\n")
    assert "--- Dockerfile ---\nFROM node:14" in content
    assert "docker-compose.yml" not in content
    dockerfile_section = content.split("--- Dockerfile ---\n", 1)[1]
    assert len(dockerfile_section.rstrip("\n").encode("utf-8")) <= FILE_BYTE_LIMIT


def test_extract_docker_files_empty_when_absent(repo_builder: RepoBuilder) -> None:
    assert extract_docker_files(repo_builder.path()) == ""


def test_extract_key_files_content_skips_missing_paths(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": '{"name": "demo"}'})

    content = extract_key_files_content(
        repo_builder.path(),
        ["package.json", "does/not/exist.py", "Here are the files you asked for: src"],
    )

    assert content == '--- package.json ---\n{"name": "demo"}\n\n'


def test_extract_key_files_content_all_missing_is_empty(repo_builder: RepoBuilder) -> None:
    assert extract_key_files_content(repo_builder.path(), ["nope.txt", "", "   "]) == ""


def test_extract_key_files_content_skips_directories_and_escapes(
    repo_builder: RepoBuilder, tmp_path: Path
) -> None:
    repo_builder.write({"src/main.py": "print('x')"})
    (tmp_path / "outside.txt").write_text("secret", encoding="utf-8")

    content = extract_key_files_content(repo_builder.path(), ["src", "../outside.txt"])

    assert content == ""


def test_extract_key_files_content_truncates_each_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"big.txt": "a" * 4000, "small.txt": "b"})

    content = extract_key_files_content(repo_builder.path(), ["big.txt", "small.txt"])

    big_body = content.split("--- big.txt ---\n", 1)[1].split("\n\n", 1)[0]
    assert len(big_body) == FILE_BYTE_LIMIT
    assert "--- small.txt ---\nb\n\n" in content
