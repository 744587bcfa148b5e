"""LLM-driven selection of the files worth showing to the analysis prompt."""

from __future__ import annotations

from typing import List, Protocol

from ..logging import get_logger
from ..prompting.builder import PromptBuilder
from ..prompting.constants import MAX_KEY_FILES

_STRIP_CHARS = " \t\r\n\"'`"


class Completer(Protocol):
    def complete(self, prompt: str) -> str: ...


def parse_key_files(response: str, *, limit: int = MAX_KEY_FILES) -> List[str]:
    """Split a comma-separated answer into at most ``limit`` trimmed paths.

    Nothing is validated here: verbose or malformed answers simply produce
    paths that will not exist when read.
    """
    paths: List[str] = []
    for fragment in response.split(","):
        path = fragment.strip(_STRIP_CHARS)
        if path:
            paths.append(path)
        if len(paths) >= limit:
            break
    return paths


class KeyFileSelector:
    """Asks the model which files best describe the project's build and runtime."""

    def __init__(self, client: Completer, prompt_builder: PromptBuilder | None = None) -> None:
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("analyzers.key_files")

    def select(self, directory_tree: str) -> List[str]:
        prompt = self.prompt_builder.key_files_prompt(directory_tree)
        response = self.client.complete(prompt)
        key_files = parse_key_files(response)
        self.logger.debug("Model selected key files: %s", ", ".join(key_files) or "(none)")
        return key_files


__all__ = ["Completer", "KeyFileSelector", "parse_key_files"]
