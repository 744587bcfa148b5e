"""Builds the prompts sent to the completion endpoint."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import ProjectInfo
from .constants import (
    ANALYSIS_FIELDS,
    MAX_KEY_FILES,
    MULTI_STAGE_DIRECTIVE,
    REQUIRED_PROPERTIES,
    SINGLE_STAGE_DIRECTIVE,
)


class PromptBuilder:
    """Renders key-file, analysis and Dockerfile prompts from Jinja templates."""

    KEY_FILES_TEMPLATE = "key_files.j2"
    ANALYSIS_TEMPLATE = "analysis.j2"
    DOCKERFILE_TEMPLATE = "dockerfile.j2"

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = self._create_env(self.templates_dir)

    def key_files_prompt(self, directory_tree: str) -> str:
        return self._render(
            self.KEY_FILES_TEMPLATE,
            directory_tree=directory_tree,
            max_files=MAX_KEY_FILES,
        )

    def analysis_prompt(
        self,
        *,
        directory_tree: str,
        readme: str,
        docker_files: str,
        key_files: str,
    ) -> str:
        return self._render(
            self.ANALYSIS_TEMPLATE,
            fields=ANALYSIS_FIELDS,
            directory_tree=directory_tree,
            readme=readme,
            docker_files=docker_files,
            key_files=key_files,
        )

    def dockerfile_prompt(
        self,
        project_info: ProjectInfo,
        *,
        use_multi_stage: bool,
        template: str | None = None,
    ) -> str:
        directive = MULTI_STAGE_DIRECTIVE if use_multi_stage else SINGLE_STAGE_DIRECTIVE
        return self._render(
            self.DOCKERFILE_TEMPLATE,
            stage_directive=directive,
            properties=REQUIRED_PROPERTIES,
            project_info=project_info.to_prompt_json(),
            template=template,
        )

    def _render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context).strip() + "\n"

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


__all__ = ["PromptBuilder"]
