"""End-to-end provisioning: fork, generate, add a CI workflow and secrets, push.

The flow is an ordered list of named steps sharing one ``ProvisioningState``.
The first step that raises stops the run; earlier side effects (the fork,
uploaded secrets, files written into the clone) are intentionally left as-is.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import DockerGenConfig
from ..git.fetcher import RepoFetcher
from ..git.publisher import Publisher
from ..github.client import ForkInfo, GitHubClient
from ..github.secrets import SecretProvisioner
from ..logging import get_logger
from ..models import RepoRef, Secret
from ..orchestrator import Orchestrator
from .workflow import PASSWORD_SECRET, USERNAME_SECRET, write_workflow


class ProvisioningError(RuntimeError):
    """Raised when a provisioning step fails; names the step and keeps the cause."""

    def __init__(self, step: str, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        self.payload = getattr(cause, "payload", None)
        super().__init__(f"Provisioning step '{step}' failed: {cause}")


@dataclass
class ProvisioningState:
    """Values produced by earlier steps and consumed by later ones."""

    source: RepoRef
    workdir: Path
    login: Optional[str] = None
    fork: Optional[ForkInfo] = None
    repo_path: Optional[Path] = None
    dockerfile_path: Optional[Path] = None
    workflow_path: Optional[Path] = None
    secrets: List[str] = field(default_factory=list)
    pushed: bool = False


@dataclass
class ProvisioningResult:
    fork_url: str
    fork_full_name: str
    repo_path: Path
    dockerfile_path: Path
    workflow_path: Path
    secrets: List[str]
    pushed: bool


Step = Tuple[str, Callable[[ProvisioningState], None]]


def fork_name_for(repo: str, *, now: Callable[[], float] = time.time) -> str:
    """Return ``<repo>-dockerfile-<unix millis>`` in lower case."""
    return f"{repo.lower()}-dockerfile-{int(now() * 1000)}"


class CIProvisioner:
    """Runs the fork/generate/workflow/secrets/publish sequence for one repository."""

    def __init__(
        self,
        config: DockerGenConfig,
        *,
        github: GitHubClient | None = None,
        orchestrator: Orchestrator | None = None,
        fetcher: RepoFetcher | None = None,
        publisher: Publisher | None = None,
        secret_provisioner: SecretProvisioner | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.github = github or GitHubClient(config.github)
        self.orchestrator = orchestrator or Orchestrator(config)
        self.fetcher = fetcher or RepoFetcher()
        self.publisher = publisher or Publisher()
        self.secret_provisioner = secret_provisioner or SecretProvisioner(self.github)
        self._sleep = sleep
        self._clock = clock
        self.logger = get_logger("ci.provisioner")

    def steps(self) -> Sequence[Step]:
        return (
            ("authenticate", self._authenticate),
            ("fork", self._fork),
            ("wait", self._wait_for_fork),
            ("clone", self._clone),
            ("generate", self._generate),
            ("workflow", self._write_workflow),
            ("secrets", self._provision_secrets),
            ("publish", self._publish),
        )

    def run(self, repo_url: str, *, workdir: Path | None = None) -> ProvisioningResult:
        source = RepoRef.from_url(repo_url)
        state = ProvisioningState(source=source, workdir=Path(workdir) if workdir else Path.cwd())
        self.logger.info("Provisioning %s", source.full_name)

        for name, step in self.steps():
            self.logger.debug("Running provisioning step '%s'", name)
            try:
                step(state)
            except Exception as exc:
                error = ProvisioningError(name, exc)
                self.logger.error("%s", error)
                if error.payload is not None:
                    self.logger.error("Error response: %s", error.payload)
                raise error from exc

        assert state.fork and state.repo_path and state.dockerfile_path and state.workflow_path
        self.logger.info("Forked, cloned, and updated repository: %s", state.fork.html_url)
        return ProvisioningResult(
            fork_url=state.fork.html_url,
            fork_full_name=state.fork.full_name,
            repo_path=state.repo_path,
            dockerfile_path=state.dockerfile_path,
            workflow_path=state.workflow_path,
            secrets=list(state.secrets),
            pushed=state.pushed,
        )

    # ------------------------------------------------------------------
    # Steps

    def _authenticate(self, state: ProvisioningState) -> None:
        state.login = self.github.get_authenticated_user()
        self.logger.info("Authenticated as GitHub user: %s", state.login)

    def _fork(self, state: ProvisioningState) -> None:
        requested = fork_name_for(state.source.repo, now=self._clock)
        self.logger.info("Forking %s as %s", state.source.full_name, requested)
        state.fork = self.github.create_fork(state.source.owner, state.source.repo, name=requested)
        self.logger.info("Forked repository: %s", state.fork.html_url)

    def _wait_for_fork(self, state: ProvisioningState) -> None:
        delay = self.config.github.fork_ready_delay
        self.logger.info("Waiting %.0fs for the fork to become available", delay)
        self._sleep(delay)

    def _clone(self, state: ProvisioningState) -> None:
        fork = self._require_fork(state)
        destination = state.workdir / fork.name.lower()
        state.repo_path = self.fetcher.clone(fork.clone_url, destination)

    def _generate(self, state: ProvisioningState) -> None:
        assert state.repo_path is not None
        outcome = self.orchestrator.generate_for_path(
            state.repo_path, options=self.orchestrator.options()
        )
        state.dockerfile_path = outcome.dockerfile_path

    def _write_workflow(self, state: ProvisioningState) -> None:
        fork = self._require_fork(state)
        assert state.repo_path is not None
        state.workflow_path = write_workflow(
            state.repo_path,
            fork.name.lower(),
            branch=self.config.github.default_branch,
        )
        self.logger.info("Created GitHub Actions workflow at %s", state.workflow_path)

    def _provision_secrets(self, state: ProvisioningState) -> None:
        fork = self._require_fork(state)
        registry = self.config.registry
        secrets = (
            Secret(USERNAME_SECRET, registry.username or ""),
            Secret(PASSWORD_SECRET, registry.password or ""),
        )
        for secret in secrets:
            self.secret_provisioner.provision(fork.owner, fork.name, secret)
            state.secrets.append(secret.name)

    def _publish(self, state: ProvisioningState) -> None:
        fork = self._require_fork(state)
        assert state.repo_path and state.dockerfile_path and state.workflow_path
        state.pushed = self.publisher.publish(
            state.repo_path,
            [state.dockerfile_path, state.workflow_path],
            full_name=fork.full_name,
            token=self.config.github.token or "",
            branch=self.config.github.default_branch,
        )

    @staticmethod
    def _require_fork(state: ProvisioningState) -> ForkInfo:
        if state.fork is None:
            raise RuntimeError("Fork has not been created")
        return state.fork


__all__ = [
    "CIProvisioner",
    "ProvisioningError",
    "ProvisioningResult",
    "ProvisioningState",
    "fork_name_for",
]
