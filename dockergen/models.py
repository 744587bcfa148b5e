"""Core data models shared across dockergen components."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse


class ProjectInfoError(RuntimeError):
    """Raised when the analysis response cannot be read as a JSON object."""


class ProjectInfo(dict):
    """Loosely-typed project facts extracted by the analysis prompt.

    Keys such as ``language``, ``entryPoint``, ``ports`` or ``environmentVariables``
    are expected but never required; consumers serialise the whole mapping back
    into the next prompt instead of reading individual fields.
    """

    @classmethod
    def from_json(cls, text: str) -> "ProjectInfo":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProjectInfoError(f"Project analysis is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ProjectInfoError(
                f"Project analysis must be a JSON object, got {type(payload).__name__}"
            )
        return cls(payload)

    def to_prompt_json(self) -> str:
        return json.dumps(self, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class GenerationOptions:
    """Per-invocation switches for Dockerfile synthesis."""

    use_multi_stage: bool = False
    template_path: Optional[Path] = None


@dataclass(frozen=True)
class Secret:
    """Repository secret held in memory only long enough to encrypt and upload."""

    name: str
    plaintext_value: str

    def __repr__(self) -> str:
        return f"Secret(name={self.name!r}, plaintext_value='***')"


@dataclass(frozen=True)
class RepoRef:
    """Owner/repository pair parsed from a repository URL."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def from_url(cls, url: str) -> "RepoRef":
        parsed = urlparse(url)
        parts = [part for part in parsed.path.split("/") if part]
        if not parsed.netloc or len(parts) < 2:
            raise ValueError(f"Invalid GitHub repository URL: {url}")
        repo = parts[1]
        if repo.endswith(".git"):
            repo = repo[: -len(".git")]
        if not repo:
            raise ValueError(f"Invalid GitHub repository URL: {url}")
        return cls(owner=parts[0], repo=repo)

