"""GitHub REST integration."""

from .client import ForkInfo, GitHubAPIError, GitHubClient, RepoPublicKey
from .secrets import SecretProvisioner, seal_secret

__all__ = [
    "ForkInfo",
    "GitHubAPIError",
    "GitHubClient",
    "RepoPublicKey",
    "SecretProvisioner",
    "seal_secret",
]
