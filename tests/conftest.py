from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dockergen.config import DockerGenConfig, GenerationConfig, GitHubConfig, LLMConfig, RegistryConfig
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def config() -> DockerGenConfig:
    """A fully populated configuration that never touches the network."""
    return DockerGenConfig(
        llm=LLMConfig(api_url="http://llm.test/v1/chat/completions", retry_delay_ms=10),
        generation=GenerationConfig(),
        github=GitHubConfig(token="ghp_testtoken", fork_ready_delay=15.0),
        registry=RegistryConfig(username="hubuser", password="hubpass"),
    )


@pytest.fixture(autouse=True)
def _reset_dockergen_logger():
    """Undo ``configure_logging`` so caplog keeps seeing dockergen records."""
    yield
    logger = logging.getLogger("dockergen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
