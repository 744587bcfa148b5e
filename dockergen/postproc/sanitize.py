"""Text clean-up for LLM responses before they are parsed or written to disk.

Models frequently wrap answers in Markdown fences, quote them, or preface them
with commentary even when told not to. Each helper here is a pure function:

``strip_code_fences``
    Removes every triple-backtick marker. A language tag (```json,
    ```Dockerfile, ...) is removed with its marker only when nothing but
    blanks follow it on that line, so text glued to a fence is kept.
    Whitespace touching a marker is removed as well.

``clean_json``
    Fence-strips, then keeps the span from the first ``{`` to the last ``}``
    inclusive when both exist in that order. Otherwise the fence-stripped text
    is returned as-is and JSON parsing is left to fail downstream.

``clean_dockerfile``
    Fence-strips, trims, removes one matching pair of surrounding ``"`` or
    ``'`` quotes, and (by default) drops everything before the first
    case-insensitive ``FROM`` word. Text without ``FROM`` is returned as it
    stands after quote removal.
"""

from __future__ import annotations

import re

_FENCE_RE = re.compile(r"\s*```(?:[A-Za-z0-9_+\-.]+(?=[ \t]*(?:\n|$)))?[ \t]*\s*")
_FROM_RE = re.compile(r"\bFROM\b", re.IGNORECASE)
_QUOTES = ('"', "'")


def strip_code_fences(text: str) -> str:
    """Remove Markdown code-fence markers and any language tag after them."""
    return _FENCE_RE.sub(_fence_replacement, text)


def _fence_replacement(match: re.Match[str]) -> str:
    # A fence glued between two lines of content must not merge them.
    start, end = match.span()
    source = match.string
    if 0 < start and end < len(source):
        return "\n"
    return ""


def clean_json(text: str) -> str:
    """Return the outermost ``{...}`` span of a fenced or chatty JSON answer."""
    cleaned = strip_code_fences(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        return cleaned[start : end + 1]
    return cleaned


def clean_dockerfile(text: str, *, anchor_from: bool = True) -> str:
    """Return Dockerfile text with fences, wrapping quotes and preamble removed."""
    cleaned = strip_code_fences(text).strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in _QUOTES:
        cleaned = cleaned[1:-1]
    if anchor_from:
        match = _FROM_RE.search(cleaned)
        if match is not None:
            cleaned = cleaned[match.start() :]
    return cleaned


__all__ = ["clean_dockerfile", "clean_json", "strip_code_fences"]
