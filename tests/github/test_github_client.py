from __future__ import annotations

import json

import pytest

from dockergen.config import GitHubConfig
from dockergen.github.client import APIResponse, GitHubAPIError, GitHubClient


class FakeTransport:
    def __init__(self, *responses: APIResponse) -> None:
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.pop(0)


FORK_PAYLOAD = {
    "name": "widget-dockerfile-1700000000000",
    "full_name": "me/widget-dockerfile-1700000000000",
    "owner": {"login": "me"},
    "clone_url": "https://github.com/me/widget-dockerfile-1700000000000.git",
    "html_url": "https://github.com/me/widget-dockerfile-1700000000000",
}


def _client(transport: FakeTransport) -> GitHubClient:
    return GitHubClient(GitHubConfig(token="ghp_x", api_url="https://api.github.test/"), transport=transport)


def test_get_authenticated_user() -> None:
    transport = FakeTransport(APIResponse(200, {"login": "me"}))

    assert _client(transport).get_authenticated_user() == "me"
    request = transport.requests[0]
    assert (request.method, request.url, request.token) == ("GET", "https://api.github.test/user", "ghp_x")


def test_create_fork_parses_response() -> None:
    transport = FakeTransport(APIResponse(202, FORK_PAYLOAD))

    fork = _client(transport).create_fork("acme", "widget", name="widget-dockerfile-1700000000000")

    assert fork.name == "widget-dockerfile-1700000000000"
    assert fork.owner == "me"
    assert fork.full_name == "me/widget-dockerfile-1700000000000"
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url == "https://api.github.test/repos/acme/widget/forks"
    assert request.body == {"name": "widget-dockerfile-1700000000000"}


def test_create_fork_with_unexpected_shape_raises() -> None:
    transport = FakeTransport(APIResponse(202, {"name": "x"}))

    with pytest.raises(GitHubAPIError) as excinfo:
        _client(transport).create_fork("acme", "widget")
    assert excinfo.value.payload == {"name": "x"}


def test_error_status_carries_payload() -> None:
    payload = {"message": "Not Found", "documentation_url": "https://docs.github.com"}
    transport = FakeTransport(APIResponse(404, payload))

    with pytest.raises(GitHubAPIError, match="404: Not Found") as excinfo:
        _client(transport).get_repo_public_key("acme", "widget")

    assert excinfo.value.status == 404
    assert excinfo.value.payload == payload


def test_secret_endpoints() -> None:
    transport = FakeTransport(
        APIResponse(200, {"key_id": "568250167242549743", "key": "a2V5"}),
        APIResponse(201, None),
    )
    client = _client(transport)

    key = client.get_repo_public_key("me", "widget")
    client.create_or_update_secret("me", "widget", "DOCKERHUB_USERNAME", encrypted_value="ZW5j", key_id=key.key_id)

    get_request, put_request = transport.requests
    assert get_request.url == "https://api.github.test/repos/me/widget/actions/secrets/public-key"
    assert put_request.method == "PUT"
    assert put_request.url == "https://api.github.test/repos/me/widget/actions/secrets/DOCKERHUB_USERNAME"
    assert put_request.body == {"encrypted_value": "ZW5j", "key_id": "568250167242549743"}


def test_http_transport_sends_github_headers(monkeypatch: pytest.MonkeyPatch) -> None:
    captured = {}

    class FakeResponse:
        status = 200

        def read(self):
            return json.dumps({"login": "me"}).encode("utf-8")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    def fake_urlopen(request, timeout=None):
        captured["headers"] = {k.lower(): v for k, v in request.header_items()}
        captured["method"] = request.get_method()
        captured["data"] = request.data
        return FakeResponse()

    monkeypatch.setattr("dockergen.github.client.urlopen", fake_urlopen)

    login = GitHubClient(GitHubConfig(token="ghp_x")).get_authenticated_user()

    assert login == "me"
    assert captured["method"] == "GET"
    assert captured["data"] is None
    assert captured["headers"]["authorization"] == "Bearer ghp_x"
    assert captured["headers"]["accept"] == "application/vnd.github+json"
    assert captured["headers"]["x-github-api-version"] == "2022-11-28"
