"""Git publishing: commit generated files and push them to a token-authenticated remote."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from ..logging import get_logger
from .runner import GitCommandError, GitRunner, default_runner


class PublishError(RuntimeError):
    """Raised when committing, rebasing or pushing fails."""


class Publisher:
    """Commits Dockerfile/workflow changes and pushes them to the fork."""

    AUTHOR_NAME = "GitHub Action"
    AUTHOR_EMAIL = "action@github.com"
    COMMIT_MESSAGE = "Add Dockerfile and GitHub Actions workflow"

    def __init__(self, runner: GitRunner | None = None) -> None:
        self._runner = runner or default_runner
        self.logger = get_logger("git.publisher")

    def commit(
        self,
        repo_path: Path | str,
        files: Sequence[Path | str],
        *,
        message: str = COMMIT_MESSAGE,
    ) -> bool:
        """Stage the provided files and create a commit if anything changed."""
        repo = Path(repo_path)
        if not (repo / ".git").exists():
            raise PublishError(f"{repo} is not a git checkout")

        self._run(["git", "config", "user.name", self.AUTHOR_NAME], cwd=repo)
        self._run(["git", "config", "user.email", self.AUTHOR_EMAIL], cwd=repo)

        for rel in (self._to_relative(repo, Path(file)) for file in files):
            self._run(["git", "add", rel], cwd=repo)

        status = self._run(["git", "status", "--porcelain"], cwd=repo, capture_output=True)
        if not status.strip():
            self.logger.info("No changes to commit in %s", repo)
            return False

        self._run(["git", "commit", "-m", message], cwd=repo)
        return True

    def push(
        self,
        repo_path: Path | str,
        *,
        full_name: str,
        token: str,
        branch: str = "main",
        host: str = "github.com",
    ) -> None:
        """Rebase onto ``origin/<branch>`` and push over HTTPS with ``token``."""
        repo = Path(repo_path)
        self._run(["git", "pull", "--rebase", "origin", branch], cwd=repo)
        remote = f"https://x-access-token:{token}@{host}/{full_name}.git"
        self._run(["git", "push", remote, f"HEAD:{branch}"], cwd=repo, redactions=(token,))
        self.logger.info("Pushed changes to %s (%s)", full_name, branch)

    def publish(
        self,
        repo_path: Path | str,
        files: Sequence[Path | str],
        *,
        full_name: str,
        token: str,
        branch: str = "main",
    ) -> bool:
        """Commit ``files`` and push them; returns False when there was nothing to commit."""
        committed = self.commit(repo_path, files)
        if not committed:
            return False
        self.push(repo_path, full_name=full_name, token=token, branch=branch)
        return True

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _to_relative(repo: Path, file_path: Path) -> str:
        try:
            return file_path.relative_to(repo).as_posix()
        except ValueError:
            return file_path.as_posix()

    def _run(
        self,
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
        redactions: Sequence[str] = (),
    ) -> str:
        try:
            return self._runner(
                list(args),
                cwd=cwd,
                capture_output=capture_output,
                redactions=redactions,
            )
        except GitCommandError as exc:
            raise PublishError(str(exc)) from exc


__all__ = ["PublishError", "Publisher"]
