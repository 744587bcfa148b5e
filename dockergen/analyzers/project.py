"""Project analysis: inspect the working tree and extract structured facts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from ..logging import get_logger
from ..models import ProjectInfo
from ..postproc.sanitize import clean_json
from ..prompting.builder import PromptBuilder
from ..repo_inspector import (
    build_directory_tree,
    extract_docker_files,
    extract_key_files_content,
    extract_readme,
)
from .key_files import Completer, KeyFileSelector


@dataclass
class InspectionResult:
    """Raw repository context gathered before the analysis prompt."""

    directory_tree: str
    readme: str
    docker_files: str
    key_files: List[str]
    key_files_content: str


class ProjectAnalyzer:
    """Turns a checked-out repository into a ``ProjectInfo`` via the completion API."""

    def __init__(
        self,
        client: Completer,
        *,
        prompt_builder: PromptBuilder | None = None,
        key_file_selector: KeyFileSelector | None = None,
    ) -> None:
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.key_file_selector = key_file_selector or KeyFileSelector(client, self.prompt_builder)
        self.logger = get_logger("analyzers.project")

    def inspect(self, repo_path: Path) -> InspectionResult:
        directory_tree = build_directory_tree(repo_path)
        readme = extract_readme(repo_path)
        docker_files = extract_docker_files(repo_path)
        key_files = self.key_file_selector.select(directory_tree)
        key_files_content = extract_key_files_content(repo_path, key_files)
        self.logger.debug(
            "Inspection gathered %d tree lines, %d README bytes, %d key files",
            directory_tree.count("\n"),
            len(readme.encode("utf-8")),
            len(key_files),
        )
        return InspectionResult(
            directory_tree=directory_tree,
            readme=readme,
            docker_files=docker_files,
            key_files=key_files,
            key_files_content=key_files_content,
        )

    def analyze(self, repo_path: Path) -> ProjectInfo:
        """Inspect ``repo_path`` and parse the model's JSON description of it.

        Raises ``ProjectInfoError`` when the cleaned answer is not a JSON object.
        """
        inspection = self.inspect(repo_path)
        prompt = self.prompt_builder.analysis_prompt(
            directory_tree=inspection.directory_tree,
            readme=inspection.readme,
            docker_files=inspection.docker_files,
            key_files=inspection.key_files_content,
        )
        response = self.client.complete(prompt)
        project_info = ProjectInfo.from_json(clean_json(response))
        self.logger.info("Project analysis produced %d fields", len(project_info))
        return project_info


__all__ = ["InspectionResult", "ProjectAnalyzer"]
