from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dockergen.models import GenerationOptions, ProjectInfo
from dockergen.synthesizer import DockerfileSynthesizer, SynthesisError
from tests._fixtures.doubles import ScriptedCompleter


def test_synthesize_cleans_model_output() -> None:
    completer = ScriptedCompleter(["```dockerfile\nFROM python:3.12-slim\nCMD [\"python\", \"app.py\"]\n```"])
    synthesizer = DockerfileSynthesizer(completer)

    content = synthesizer.synthesize(ProjectInfo({"language": "Python"}), GenerationOptions())

    assert content == 'FROM python:3.12-slim\nCMD ["python", "app.py"]'
    assert "single-stage build" in completer.prompts[0]


def test_synthesize_passes_template_through(tmp_path: Path) -> None:
    template = tmp_path / "Dockerfile.tmpl"
    template.write_text("FROM node:20-alpine\nUSER node\n", encoding="utf-8")
    completer = ScriptedCompleter(["FROM node:20-alpine"])

    DockerfileSynthesizer(completer).synthesize(
        ProjectInfo(), GenerationOptions(use_multi_stage=True, template_path=template)
    )

    prompt = completer.prompts[0]
    assert "USER node" in prompt
    assert '"builder" and "final"' in prompt


def test_missing_template_logs_warning_and_continues(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    completer = ScriptedCompleter(["FROM alpine"])
    options = GenerationOptions(template_path=tmp_path / "nope")

    with caplog.at_level(logging.WARNING, logger="dockergen.synthesizer"):
        content = DockerfileSynthesizer(completer).synthesize(ProjectInfo(), options)

    assert content == "FROM alpine"
    assert "Adapt the following template" not in completer.prompts[0]
    assert any("not found" in record.getMessage() for record in caplog.records)


def test_empty_output_raises() -> None:
    completer = ScriptedCompleter(["```\n\n```"])

    with pytest.raises(SynthesisError):
        DockerfileSynthesizer(completer).synthesize(ProjectInfo(), GenerationOptions())


def test_write_replaces_existing_dockerfile(tmp_path: Path) -> None:
    (tmp_path / "Dockerfile").write_text("FROM old\n", encoding="utf-8")

    path = DockerfileSynthesizer(ScriptedCompleter([])).write(tmp_path, "FROM new")

    assert path == tmp_path / "Dockerfile"
    assert path.read_text(encoding="utf-8") == "FROM new"


def test_write_keeps_content_byte_for_byte(tmp_path: Path) -> None:
    content = "FROM alpine\nRUN true\n\n"

    path = DockerfileSynthesizer(ScriptedCompleter([])).write(tmp_path, content)

    assert path.read_bytes() == content.encode("utf-8")


def test_whitespace_only_output_raises() -> None:
    with pytest.raises(SynthesisError):
        DockerfileSynthesizer(ScriptedCompleter(['"   "'])).synthesize(ProjectInfo(), GenerationOptions())
