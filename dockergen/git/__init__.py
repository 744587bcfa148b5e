"""Git operations: cloning, committing and pushing."""

from .fetcher import FetchError, RepoFetcher, derive_repo_name
from .publisher import PublishError, Publisher
from .runner import GitCommandError, default_runner

__all__ = [
    "FetchError",
    "GitCommandError",
    "PublishError",
    "Publisher",
    "RepoFetcher",
    "default_runner",
    "derive_repo_name",
]
