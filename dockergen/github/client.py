"""Minimal GitHub REST client for forking repositories and managing Actions secrets."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import GitHubConfig


class GitHubAPIError(RuntimeError):
    """Raised for failed GitHub API calls; ``payload`` holds the decoded error body."""

    def __init__(self, message: str, *, status: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


@dataclass
class APIRequest:
    """A single GitHub REST call."""

    method: str
    url: str
    token: Optional[str]
    body: Optional[Dict[str, Any]]
    timeout: float


@dataclass
class APIResponse:
    status: int
    payload: Any


@dataclass(frozen=True)
class ForkInfo:
    """Fields of the fork response used by the provisioning flow."""

    name: str
    owner: str
    full_name: str
    clone_url: str
    html_url: str


@dataclass(frozen=True)
class RepoPublicKey:
    key_id: str
    key: str


Transport = Callable[[APIRequest], APIResponse]


class GitHubClient:
    """Wraps the handful of REST endpoints the provisioner needs."""

    API_VERSION = "2022-11-28"

    def __init__(
        self,
        config: GitHubConfig,
        *,
        transport: Transport | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self._transport = transport or self._http_transport

    def get_authenticated_user(self) -> str:
        """Return the login the configured token belongs to."""
        payload = self._request("GET", "/user")
        login = payload.get("login") if isinstance(payload, dict) else None
        if not isinstance(login, str) or not login:
            raise GitHubAPIError("GitHub did not return a user login", payload=payload)
        return login

    def create_fork(self, owner: str, repo: str, *, name: str | None = None) -> ForkInfo:
        body: Dict[str, Any] = {}
        if name:
            body["name"] = name
        payload = self._request("POST", f"/repos/{_q(owner)}/{_q(repo)}/forks", body)
        try:
            return ForkInfo(
                name=str(payload["name"]),
                owner=str(payload["owner"]["login"]),
                full_name=str(payload["full_name"]),
                clone_url=str(payload["clone_url"]),
                html_url=str(payload["html_url"]),
            )
        except (KeyError, TypeError) as exc:
            raise GitHubAPIError("Unexpected fork response from GitHub", payload=payload) from exc

    def get_repo_public_key(self, owner: str, repo: str) -> RepoPublicKey:
        payload = self._request("GET", f"/repos/{_q(owner)}/{_q(repo)}/actions/secrets/public-key")
        try:
            return RepoPublicKey(key_id=str(payload["key_id"]), key=str(payload["key"]))
        except (KeyError, TypeError) as exc:
            raise GitHubAPIError("Unexpected public key response from GitHub", payload=payload) from exc

    def create_or_update_secret(
        self,
        owner: str,
        repo: str,
        name: str,
        *,
        encrypted_value: str,
        key_id: str,
    ) -> None:
        self._request(
            "PUT",
            f"/repos/{_q(owner)}/{_q(repo)}/actions/secrets/{_q(name)}",
            {"encrypted_value": encrypted_value, "key_id": key_id},
        )

    # ------------------------------------------------------------------
    # Helpers

    def _request(self, method: str, path: str, body: Dict[str, Any] | None = None) -> Any:
        request = APIRequest(
            method=method,
            url=f"{self.config.api_url.rstrip('/')}{path}",
            token=self.config.token,
            body=body,
            timeout=self.timeout,
        )
        response = self._transport(request)
        if not 200 <= response.status < 300:
            message = _error_message(response.payload) or "request failed"
            raise GitHubAPIError(
                f"GitHub {method} {path} returned {response.status}: {message}",
                status=response.status,
                payload=response.payload,
            )
        return response.payload

    @classmethod
    def _http_transport(cls, request: APIRequest) -> APIResponse:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": cls.API_VERSION,
            "User-Agent": "dockergen",
        }
        if request.token:
            headers["Authorization"] = f"Bearer {request.token}"
        data = None
        if request.body is not None:
            data = json.dumps(request.body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        http_request = Request(request.url, data=data, headers=headers, method=request.method)
        try:
            with urlopen(http_request, timeout=request.timeout) as response:  # type: ignore[arg-type]
                return APIResponse(status=response.status, payload=_decode(response.read()))
        except HTTPError as exc:
            raw = exc.read() if hasattr(exc, "read") else b""
            return APIResponse(status=exc.code, payload=_decode(raw))
        except URLError as exc:
            raise GitHubAPIError(f"GitHub API unreachable: {exc.reason}") from exc


def _decode(raw: bytes) -> Any:
    if not raw:
        return None
    text = raw.decode("utf-8", errors="ignore")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict):
        message = payload.get("message")
        return str(message) if message else ""
    if isinstance(payload, str):
        return payload.strip()
    return ""


def _q(segment: str) -> str:
    return quote(segment, safe="")


__all__ = [
    "APIRequest",
    "APIResponse",
    "ForkInfo",
    "GitHubAPIError",
    "GitHubClient",
    "RepoPublicKey",
]
