"""Recording test doubles shared across the suite."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List


class ScriptedCompleter:
    """Completion client double that replays canned responses and records prompts."""

    def __init__(self, responses: Iterable[str]) -> None:
        self._responses = list(responses)
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise AssertionError("ScriptedCompleter ran out of responses")
        return self._responses.pop(0)


class RecordingGitRunner:
    """Git runner double that records commands instead of executing them."""

    def __init__(self, outputs: dict[tuple[str, ...], str] | None = None) -> None:
        self.calls: List[dict[str, object]] = []
        self._outputs = outputs or {}

    def __call__(self, args, *, cwd=None, env=None, capture_output=False, redactions=()):  # type: ignore[no-untyped-def]
        command = list(args)
        self.calls.append(
            {
                "args": command,
                "cwd": Path(cwd) if cwd is not None else None,
                "capture_output": capture_output,
                "redactions": tuple(redactions),
            }
        )
        return self._outputs.get(tuple(command), "")

    def commands(self) -> List[List[str]]:
        return [call["args"] for call in self.calls]  # type: ignore[misc]


__all__ = ["RecordingGitRunner", "ScriptedCompleter"]
