"""Subprocess runner shared by the git fetcher and publisher."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ..logging import redact

GitRunner = Callable[..., str]


class GitCommandError(RuntimeError):
    """Raised when a git command exits non-zero."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(f"`{' '.join(self.command)}` failed: {detail}")


def default_runner(
    args: Iterable[str],
    *,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    capture_output: bool = True,
    redactions: Sequence[str] = (),
) -> str:
    """Run ``args`` and return stdout, raising ``GitCommandError`` on failure.

    Strings in ``redactions`` are masked in the error so that tokens embedded
    in remote URLs never surface in logs.
    """
    command = list(args)
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            check=True,
            text=True,
            capture_output=capture_output,
        )
    except FileNotFoundError as exc:
        raise GitCommandError(command[:1], 127, f"Unable to locate '{command[0]}'") from exc
    except subprocess.CalledProcessError as exc:
        masked = [redact(part, redactions) for part in command]
        stderr = redact(exc.stderr or "", redactions)
        raise GitCommandError(masked, exc.returncode, stderr) from None
    return completed.stdout or ""


__all__ = ["GitCommandError", "GitRunner", "default_runner"]
