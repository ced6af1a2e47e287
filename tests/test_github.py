"""Tests for the GitHub REST client."""

import base64

import httpx
import pytest

from demosamples.extractors import ContentExtractor
from demosamples.github import GitHubClient


def _file_payload(text):
    return {
        "type": "file",
        "encoding": "base64",
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
    }


def _client(handler, token="secret"):
    return GitHubClient(token, transport=httpx.MockTransport(handler))


def test_list_user_repos():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["per_page"] = request.url.params["per_page"]
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[{"name": "Nancy.Demo.Hosting"}])

    with _client(handler) as github:
        repos = github.list_user_repos("NancyFx")

    assert repos == [{"name": "Nancy.Demo.Hosting"}]
    assert seen == {"path": "/users/NancyFx/repos", "per_page": "100", "auth": "Bearer secret"}


def test_no_authorization_header_without_token():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    with _client(handler, token="") as github:
        github.list_user_repos("NancyFx")
    assert seen["auth"] is None


def test_list_user_repos_http_error_propagates():
    with _client(lambda request: httpx.Response(500)) as github:
        with pytest.raises(httpx.HTTPStatusError):
            github.list_user_repos("NancyFx")


def test_list_user_repos_rejects_non_list():
    handler = lambda request: httpx.Response(200, json={"message": "Not Found"})
    with _client(handler) as github:
        with pytest.raises(ValueError):
            github.list_user_repos("NancyFx")


def test_get_file_content_decodes_base64():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        return httpx.Response(200, json=_file_payload("# Nancy ♥\n"))

    with _client(handler) as github:
        content = github.get_file_content("NancyFx", "Nancy.Demo.Hosting", "readme")

    assert content == "# Nancy ♥\n"
    assert seen["path"] == "/repos/NancyFx/Nancy.Demo.Hosting/readme"


def test_get_file_content_nested_path():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        return httpx.Response(200, json=_file_payload("x"))

    with _client(handler) as github:
        github.get_file_content(
            "NancyFx", "Nancy.Demo.Hosting", "contents/src/Nancy.Demo.Hosting/packages.config"
        )
    assert seen["path"] == "/repos/NancyFx/Nancy.Demo.Hosting/contents/src/Nancy.Demo.Hosting/packages.config"


def test_get_file_content_missing_is_none():
    with _client(lambda request: httpx.Response(404)) as github:
        assert github.get_file_content("NancyFx", "Nancy.Demo.Hosting", "readme") is None


def test_get_file_content_directory_is_none():
    handler = lambda request: httpx.Response(200, json=[{"name": "packages.config"}])
    with _client(handler) as github:
        assert github.get_file_content("NancyFx", "Nancy.Demo.Hosting", "contents/src") is None


def test_get_file_content_server_error_propagates():
    with _client(lambda request: httpx.Response(502)) as github:
        with pytest.raises(httpx.HTTPStatusError):
            github.get_file_content("NancyFx", "Nancy.Demo.Hosting", "readme")


def test_get_file_content_retries_when_rate_limited(monkeypatch):
    delays = []
    monkeypatch.setattr("demosamples.github.time.sleep", delays.append)
    responses = iter([httpx.Response(429), httpx.Response(403), httpx.Response(200, json=_file_payload("ok"))])

    with _client(lambda request: next(responses)) as github:
        assert github.get_file_content("NancyFx", "Nancy.Demo.Hosting", "readme") == "ok"
    assert delays == [1.0, 2.0]


def test_get_file_content_gives_up_after_retries(monkeypatch):
    monkeypatch.setattr("demosamples.github.time.sleep", lambda delay: None)
    with _client(lambda request: httpx.Response(429)) as github:
        with pytest.raises(httpx.HTTPStatusError):
            github.get_file_content("NancyFx", "Nancy.Demo.Hosting", "readme")


def test_content_extractor_passes_empty_string_for_missing_file():
    seen = []

    def transform(content):
        seen.append(content)
        return "transformed"

    with _client(lambda request: httpx.Response(404)) as github:
        result = ContentExtractor(github).extract("NancyFx", "Nancy.Demo.Hosting", "readme", transform)

    assert result == "transformed"
    assert seen == [""]
