"""Tests for GitLab REST client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from gltasks.gitlab.client import (
    GitLabAuthError,
    GitLabClient,
    GitLabClientError,
    GitLabForbiddenError,
    GitLabNotFoundError,
    GitLabRateLimitError,
)
from gltasks.models import GitLabConfig

ISSUE_JSON = {
    "id": 1005,
    "iid": 5,
    "title": "Fix bug",
    "state": "opened",
    "web_url": "https://gitlab.com/group/repo/-/issues/5",
    "created_at": "2024-01-01T09:00:00Z",
    "updated_at": "2024-01-02T10:00:00Z",
    "weight": 3,
}

NOTES_JSON = [
    {
        "id": 1,
        "body": "Looks good",
        "author": {"username": "alice", "name": "Alice"},
        "created_at": "2024-01-03T10:00:00Z",
        "system": False,
    },
    {
        "id": 2,
        "body": "changed the description",
        "author": {"username": "bob"},
        "created_at": "2024-01-04T10:00:00Z",
        "system": True,
    },
]


def _response(status_code: int = 200, json_data=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def cfg():
    """Config for a gitlab.com project."""
    return GitLabConfig(is_enabled=True, project="group/repo", token="cfg-token")


@pytest.fixture
def client():
    """Create a test client."""
    return GitLabClient("default-token")


class TestApiUrl:
    """Tests for GitLabClient.api_url."""

    def test_default_host_encodes_project(self, client, cfg):
        """Project paths are URL-encoded on gitlab.com."""
        assert client.api_url(cfg) == "https://gitlab.com/api/v4/projects/group%2Frepo"

    def test_already_encoded_project(self, client):
        """Encoded project paths are left alone."""
        cfg = GitLabConfig(project="group%2Frepo")
        assert client.api_url(cfg) == "https://gitlab.com/api/v4/projects/group%2Frepo"

    def test_custom_base_url(self, client):
        """Self-hosted instances use their own API root."""
        cfg = GitLabConfig(gitlab_base_url="https://git.example.com/", project="42")
        assert client.api_url(cfg) == "https://git.example.com/api/v4/projects/42"

    def test_missing_project_raises(self, client):
        """A config without project cannot be used."""
        with pytest.raises(GitLabClientError):
            client.api_url(GitLabConfig())


class TestGitLabClientIssues:
    """Tests for the issue API methods."""

    @pytest.mark.asyncio
    async def test_get_by_id_attaches_user_comments(self, client, cfg):
        """get_by_id fetches the issue and its non-system notes."""
        mock_get = AsyncMock(side_effect=[_response(json_data=ISSUE_JSON), _response(json_data=NOTES_JSON)])

        with patch.object(client._client, "get", mock_get):
            issue = await client.get_by_id(5, cfg)

        assert issue.number == 5
        assert issue.weight == 3
        assert [c.author.username for c in issue.comments] == ["alice"]
        urls = [call.args[0] for call in mock_get.await_args_list]
        assert urls == [
            "https://gitlab.com/api/v4/projects/group%2Frepo/issues/5",
            "https://gitlab.com/api/v4/projects/group%2Frepo/issues/5/notes",
        ]

    @pytest.mark.asyncio
    async def test_config_token_is_sent(self, client, cfg):
        """The project's token takes precedence over the default one."""
        mock_get = AsyncMock(side_effect=[_response(json_data=ISSUE_JSON), _response(json_data=[])])

        with patch.object(client._client, "get", mock_get):
            await client.get_by_id(5, cfg)

        assert mock_get.await_args.kwargs["headers"] == {"PRIVATE-TOKEN": "cfg-token"}

    @pytest.mark.asyncio
    async def test_default_token_is_fallback(self, client):
        """Configs without token use the client's default token."""
        cfg = GitLabConfig(project="group/repo")
        mock_get = AsyncMock(return_value=_response(json_data=[]))

        with patch.object(client._client, "get", mock_get):
            await client.get_project_issues(1, cfg)

        assert mock_get.await_args.kwargs["headers"] == {"PRIVATE-TOKEN": "default-token"}

    @pytest.mark.asyncio
    async def test_get_by_ids_sends_iids_and_keeps_order(self, client, cfg):
        """get_by_ids requests all iids at once and keeps the returned order."""
        issue_7 = {**ISSUE_JSON, "id": 1007, "iid": 7}
        mock_get = AsyncMock(
            side_effect=[
                _response(json_data=[issue_7, ISSUE_JSON]),
                _response(json_data=[]),
                _response(json_data=NOTES_JSON),
            ]
        )

        with patch.object(client._client, "get", mock_get):
            issues = await client.get_by_ids(["7", "5"], cfg)

        assert [i.number for i in issues] == [7, 5]
        assert issues[0].comments == []
        assert len(issues[1].comments) == 1
        params = mock_get.await_args_list[0].kwargs["params"]
        assert ("iids[]", "7") in params
        assert ("iids[]", "5") in params
        assert ("sort", "desc") in params

    @pytest.mark.asyncio
    async def test_search_in_project(self, client, cfg):
        """Search results carry the formatted title."""
        mock_get = AsyncMock(return_value=_response(json_data=[ISSUE_JSON]))

        with patch.object(client._client, "get", mock_get):
            results = await client.search_in_project("bug", cfg)

        assert len(results) == 1
        assert results[0].title == "#5 Fix bug"
        assert results[0].issue_type == "GITLAB"
        assert mock_get.await_args.kwargs["params"]["search"] == "bug"

    @pytest.mark.asyncio
    async def test_get_project_issues_requests_page(self, client, cfg):
        """get_project_issues asks for the given page of open issues."""
        mock_get = AsyncMock(return_value=_response(json_data=[ISSUE_JSON]))

        with patch.object(client._client, "get", mock_get):
            issues = await client.get_project_issues(2, cfg)

        assert issues[0].title == "Fix bug"
        params = mock_get.await_args.kwargs["params"]
        assert params["page"] == 2
        assert params["state"] == "opened"


class TestGitLabClientErrors:
    """Tests for HTTP error mapping."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status_code", "error_type"),
        [
            (401, GitLabAuthError),
            (403, GitLabForbiddenError),
            (404, GitLabNotFoundError),
            (429, GitLabRateLimitError),
            (502, GitLabClientError),
        ],
    )
    async def test_status_codes(self, client, cfg, status_code, error_type):
        """Error statuses map to typed exceptions."""
        mock_get = AsyncMock(return_value=_response(status_code, text="Bad Gateway"))

        with patch.object(client._client, "get", mock_get), pytest.raises(error_type):
            await client.get_by_id(5, cfg)

    @pytest.mark.asyncio
    async def test_request_error_wrapped(self, client, cfg):
        """Transport errors become GitLabClientError."""
        mock_get = AsyncMock(side_effect=httpx.ConnectError("offline"))

        with patch.object(client._client, "get", mock_get):
            with pytest.raises(GitLabClientError) as exc_info:
                await client.get_by_id(5, cfg)
        assert "Request failed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self, client, cfg):
        """Undecodable bodies raise GitLabClientError."""
        response = _response()
        response.json.side_effect = ValueError("Expecting value")

        with patch.object(client._client, "get", AsyncMock(return_value=response)):
            with pytest.raises(GitLabClientError) as exc_info:
                await client.get_by_id(5, cfg)
        assert "Invalid JSON" in str(exc_info.value)


class TestGitLabClientLifecycle:
    """Tests for client lifecycle."""

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self):
        """Leaving the context closes the HTTP client."""
        async with GitLabClient("t") as client:
            assert client.token == "t"
        assert client._client.is_closed
