"""Pipeline orchestration: fetch, inspect, analyse, synthesise and write."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .analyzers.project import ProjectAnalyzer
from .config import DockerGenConfig
from .git.fetcher import RepoFetcher
from .llm.client import CompletionClient
from .logging import get_logger
from .models import GenerationOptions, ProjectInfo
from .prompting.builder import PromptBuilder
from .synthesizer import DOCKERFILE_NAME, DockerfileSynthesizer


@dataclass
class GenerationOutcome:
    """Result of a Dockerfile generation run."""

    repo_path: Path
    dockerfile_path: Path
    content: str
    project_info: ProjectInfo
    dry_run: bool


class Orchestrator:
    """Coordinates the single-repository Dockerfile pipeline."""

    def __init__(
        self,
        config: DockerGenConfig,
        *,
        client: CompletionClient | None = None,
        fetcher: RepoFetcher | None = None,
        prompt_builder: PromptBuilder | None = None,
        analyzer: ProjectAnalyzer | None = None,
        synthesizer: DockerfileSynthesizer | None = None,
    ) -> None:
        self.config = config
        self.client = client or CompletionClient(config.llm)
        self.fetcher = fetcher or RepoFetcher()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.analyzer = analyzer or ProjectAnalyzer(self.client, prompt_builder=self.prompt_builder)
        self.synthesizer = synthesizer or DockerfileSynthesizer(self.client, self.prompt_builder)
        self.logger = get_logger("orchestrator")

    def options(
        self,
        *,
        use_multi_stage: Optional[bool] = None,
        template_path: Optional[Path] = None,
    ) -> GenerationOptions:
        """Merge per-invocation overrides with the configured defaults."""
        multi_stage = (
            self.config.generation.multi_stage if use_multi_stage is None else use_multi_stage
        )
        template = template_path if template_path is not None else self.config.generation.template_path
        return GenerationOptions(use_multi_stage=multi_stage, template_path=template)

    def run_generate(
        self,
        repo_url: str,
        *,
        options: GenerationOptions | None = None,
        workdir: Path | None = None,
        dry_run: bool = False,
    ) -> GenerationOutcome:
        """Fetch ``repo_url`` into ``workdir`` and generate its Dockerfile."""
        self.logger.info("Preparing Dockerfile generation for %s", repo_url)
        repo_path = self.fetcher.fetch(repo_url, Path(workdir) if workdir else Path.cwd())
        return self.generate_for_path(repo_path, options=options, dry_run=dry_run)

    def generate_for_path(
        self,
        repo_path: Path,
        *,
        options: GenerationOptions | None = None,
        dry_run: bool = False,
    ) -> GenerationOutcome:
        """Analyse an existing checkout and write ``<repo_path>/Dockerfile``."""
        repo_path = Path(repo_path)
        if not repo_path.is_dir():
            raise FileNotFoundError(f"Repository path not found: {repo_path}")
        effective = options or self.options()

        self.logger.info("Analysing project structure in %s", repo_path)
        project_info = self.analyzer.analyze(repo_path)

        self.logger.info(
            "Generating %s Dockerfile",
            "multi-stage" if effective.use_multi_stage else "single-stage",
        )
        content = self.synthesizer.synthesize(project_info, effective)

        dockerfile_path = repo_path / DOCKERFILE_NAME
        if dry_run:
            self.logger.info("Dry-run completed; Dockerfile not written")
        else:
            dockerfile_path = self.synthesizer.write(repo_path, content)
            self.logger.info("Dockerfile written to %s", dockerfile_path)
            self.logger.debug("Generated Dockerfile:\n%s", content)

        return GenerationOutcome(
            repo_path=repo_path,
            dockerfile_path=dockerfile_path,
            content=content,
            project_info=project_info,
            dry_run=dry_run,
        )


__all__ = ["GenerationOutcome", "Orchestrator"]
