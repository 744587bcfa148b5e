"""Repository fetching: derive a checkout directory and shallow-clone into it."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from ..logging import get_logger
from .runner import GitCommandError, GitRunner, default_runner


class FetchError(RuntimeError):
    """Raised when a repository cannot be cloned."""


def derive_repo_name(repo_url: str) -> str:
    """Return the last path segment of ``repo_url`` without a ``.git`` suffix."""
    path = urlparse(repo_url).path if "://" in repo_url else repo_url
    # scp-style remotes such as git@host:owner/repo.git
    path = path.replace(":", "/")
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        raise ValueError(f"Cannot derive a repository name from {repo_url!r}")
    name = segments[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not name:
        raise ValueError(f"Cannot derive a repository name from {repo_url!r}")
    return name


class RepoFetcher:
    """Clones repositories with ``git clone --depth 1``."""

    def __init__(self, runner: GitRunner | None = None) -> None:
        self._runner = runner or default_runner
        self.logger = get_logger("git.fetcher")

    def fetch(self, repo_url: str, workdir: Path) -> Path:
        """Return a local checkout of ``repo_url`` under ``workdir``.

        An existing directory with the derived name is reused as-is.
        """
        repo_path = Path(workdir) / derive_repo_name(repo_url)
        if repo_path.exists():
            self.logger.info("Repository %s already exists; skipping clone", repo_path)
            return repo_path
        return self.clone(repo_url, repo_path)

    def clone(self, repo_url: str, destination: Path) -> Path:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        self.logger.info("Cloning %s into %s", repo_url, destination)
        try:
            self._runner(
                ["git", "clone", "--depth", "1", repo_url, str(destination)],
                cwd=destination.parent,
            )
        except GitCommandError as exc:
            raise FetchError(f"Failed to clone {repo_url}: {exc}") from exc
        return destination


__all__ = ["FetchError", "RepoFetcher", "derive_repo_name"]
