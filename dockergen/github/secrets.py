"""Sealed-box encryption and upload of GitHub Actions secrets."""

from __future__ import annotations

from base64 import b64decode, b64encode
from typing import Iterable, List

from nacl.public import PublicKey, SealedBox

from ..logging import get_logger
from ..models import Secret
from .client import GitHubClient


def seal_secret(public_key_b64: str, plaintext: str) -> str:
    """Encrypt ``plaintext`` for the base64-encoded repository public key.

    Returns the base64 sealed box that GitHub expects as ``encrypted_value``.
    """
    public_key = PublicKey(b64decode(public_key_b64))
    sealed = SealedBox(public_key).encrypt(plaintext.encode("utf-8"))
    return b64encode(sealed).decode("ascii")


class SecretProvisioner:
    """Creates or overwrites repository secrets one at a time."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client
        self.logger = get_logger("github.secrets")

    def provision(self, owner: str, repo: str, secret: Secret) -> None:
        public_key = self.client.get_repo_public_key(owner, repo)
        encrypted = seal_secret(public_key.key, secret.plaintext_value)
        self.client.create_or_update_secret(
            owner,
            repo,
            secret.name,
            encrypted_value=encrypted,
            key_id=public_key.key_id,
        )
        self.logger.info("Secret '%s' created or updated on %s/%s", secret.name, owner, repo)

    def provision_all(self, owner: str, repo: str, secrets: Iterable[Secret]) -> List[str]:
        """Upload each secret in order; the first failure propagates.

        Secrets uploaded before the failure are left in place.
        """
        uploaded: List[str] = []
        for secret in secrets:
            self.provision(owner, repo, secret)
            uploaded.append(secret.name)
        return uploaded


__all__ = ["SecretProvisioner", "seal_secret"]
