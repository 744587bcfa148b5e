"""Chat-completion HTTP client with fixed-delay retries."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import LLMConfig
from ..logging import get_logger


class CompletionError(RuntimeError):
    """Raised by the HTTP transport for unreachable endpoints, error statuses and malformed bodies."""


@dataclass
class CompletionRequest:
    """A single chat-completion call as sent over the wire."""

    url: str
    model: str
    prompt: str
    api_key: Optional[str]
    timeout: float

    def payload(self) -> dict[str, object]:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": self.prompt}],
            "stream": False,
        }


Transport = Callable[[CompletionRequest], str]


class CompletionClient:
    """Sends prompts to the configured endpoint, retrying with a fixed delay.

    Every failure inside an attempt (connection error, non-2xx status, a body
    that is not JSON or lacks ``choices[0].message.content``) counts against
    ``max_retries``. Attempts are separated by ``retry_delay_ms``, never more.
    Once the attempts run out the last exception is re-raised unchanged.
    """

    def __init__(
        self,
        config: LLMConfig,
        *,
        transport: Transport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._transport = transport or self._http_transport
        self._sleep = sleep
        self.logger = get_logger("llm")

    def complete(self, prompt: str) -> str:
        """Return the stripped content of the first choice for ``prompt``."""
        request = CompletionRequest(
            url=self.config.api_url,
            model=self.config.model,
            prompt=prompt,
            api_key=self.config.api_key,
            timeout=self.config.request_timeout,
        )
        attempts = max(1, self.config.max_retries)
        delay = self.config.retry_delay_ms / 1000.0
        for attempt in range(1, attempts + 1):
            try:
                return self._transport(request).strip()
            except Exception as exc:
                self.logger.warning(
                    "Completion request failed (attempt %d/%d): %s", attempt, attempts, exc
                )
                if attempt == attempts:
                    raise
                self._sleep(delay)
        raise CompletionError("Completion endpoint was never called")  # pragma: no cover

    @staticmethod
    def _http_transport(request: CompletionRequest) -> str:
        data = json.dumps(request.payload()).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        http_request = Request(request.url, data=data, headers=headers, method="POST")
        try:
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise CompletionError(f"Completion endpoint returned status {exc.code}: {message}") from exc
        except URLError as exc:
            raise CompletionError(f"Completion endpoint unreachable: {exc.reason}") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CompletionError("Completion endpoint returned invalid JSON") from exc
        return extract_content(payload)


def extract_content(payload: object) -> str:
    """Return ``choices[0].message.content`` or raise if the shape is wrong."""
    if not isinstance(payload, dict):
        raise CompletionError("Completion response is not a JSON object")
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        raise CompletionError("Completion response has no choices")
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise CompletionError("Completion response is missing choices[0].message.content")
    return content


__all__ = ["CompletionClient", "CompletionError", "CompletionRequest", "extract_content"]
