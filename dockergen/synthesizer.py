"""Dockerfile synthesis from analysed project facts."""

from __future__ import annotations

from pathlib import Path

from .analyzers.key_files import Completer
from .logging import get_logger
from .models import GenerationOptions, ProjectInfo
from .postproc.sanitize import clean_dockerfile
from .prompting.builder import PromptBuilder

DOCKERFILE_NAME = "Dockerfile"


class SynthesisError(RuntimeError):
    """Raised when the model returns nothing usable as a Dockerfile."""


class DockerfileSynthesizer:
    """Generates, cleans and writes the Dockerfile for a repository."""

    def __init__(self, client: Completer, prompt_builder: PromptBuilder | None = None) -> None:
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("synthesizer")

    def synthesize(self, project_info: ProjectInfo, options: GenerationOptions) -> str:
        template = self.load_template(options.template_path) if options.template_path else None
        prompt = self.prompt_builder.dockerfile_prompt(
            project_info,
            use_multi_stage=options.use_multi_stage,
            template=template,
        )
        self.logger.debug(
            "Requesting %s Dockerfile%s",
            "multi-stage" if options.use_multi_stage else "single-stage",
            " from custom template" if template else "",
        )
        content = clean_dockerfile(self.client.complete(prompt))
        if not content.strip():
            raise SynthesisError("Model returned an empty Dockerfile")
        return content

    def load_template(self, template_path: Path) -> str | None:
        path = Path(template_path).expanduser()
        if not path.is_file():
            self.logger.warning("Template %s not found; generating without a template", path)
            return None
        return path.read_text(encoding="utf-8")

    def write(self, repo_path: Path, content: str) -> Path:
        """Write ``content`` verbatim to ``<repo_path>/Dockerfile``, replacing any existing file."""
        dockerfile_path = Path(repo_path) / DOCKERFILE_NAME
        dockerfile_path.write_text(content, encoding="utf-8")
        return dockerfile_path


__all__ = ["DOCKERFILE_NAME", "DockerfileSynthesizer", "SynthesisError"]
