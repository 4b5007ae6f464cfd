"""Test configuration and fixtures."""

import os
from collections.abc import Callable, Generator

import pytest
import responses

# Set environment variables immediately when this module is imported
# This ensures they're available before any other modules try to load Settings
test_env_vars = {
    "GITHUB_API_BASE_URL": "https://api.github.com",
    "APP_NAME": "GitHub PR Rules Engine Test",
    "APP_VERSION": "1.0.0-test",
    "LOG_LEVEL": "DEBUG",
    "REQUEST_DELAY": "0",
    "REQUEST_TIMEOUT": "5",
    "GROUP_FILTER_MAX_WORKERS": "4",
    "REPORT_MODE": "verbose",
}

for key, value in test_env_vars.items():
    os.environ[key] = value
os.environ.pop("GITHUB_TOKEN", None)

from github_pr_rules_engine.github.client import GitHubAPIClient  # noqa: E402
from github_pr_rules_engine.lang import Environment, Interpreter  # noqa: E402
from github_pr_rules_engine.models import PullRequest, PullRequestFile  # noqa: E402
from github_pr_rules_engine.plugins import plugin_builtins  # noqa: E402


def default_pull_request_data(**overrides) -> dict:
    """GitHub API payload of the pull request every test runs against."""
    data = {
        "id": 1234,
        "number": 6,
        "title": "Amazing new feature",
        "body": "Please pull these awesome changes in!",
        "state": "open",
        "draft": False,
        "user": {"login": "john"},
        "html_url": "https://github.com/foobar/default-mock-repo/pull/6",
        "created_at": "2022-01-10T12:00:00Z",
        "merged_at": None,
        "additions": 10,
        "deletions": 5,
        "commits": 2,
        "changed_files": 1,
        "assignees": [{"login": "jane"}],
        "requested_reviewers": [{"login": "mary"}],
        "requested_teams": [{"slug": "reviewpad"}],
        "labels": [{"name": "enhancement"}],
        "base": {
            "ref": "master",
            "repo": {"name": "default-mock-repo", "owner": {"login": "foobar"}},
        },
        "head": {
            "ref": "new-topic",
            "repo": {"name": "default-mock-repo", "owner": {"login": "foobar"}},
        },
    }
    data.update(overrides)
    return data


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    yield

    for key in test_env_vars:
        os.environ.pop(key, None)


@pytest.fixture
def mocked_responses() -> Generator[responses.RequestsMock, None, None]:
    """Mock the GitHub REST API."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def pull_request_data() -> Callable[..., dict]:
    """Factory of GitHub API pull request payloads."""
    return default_pull_request_data


@pytest.fixture
def pull_request() -> PullRequest:
    """Snapshot of the default pull request."""
    return PullRequest.from_github_data(default_pull_request_data())


@pytest.fixture
def github_client() -> GitHubAPIClient:
    """GitHub client pointed at the mocked API."""
    return GitHubAPIClient("test_token")


@pytest.fixture
def make_env(github_client, pull_request) -> Callable[..., Environment]:
    """Build a default environment, optionally with other changed files or pull request."""

    def _make_env(files: list[str] | None = None, pr: PullRequest | None = None, builtins=None) -> Environment:
        pull_request_files = [PullRequestFile(filename=filename) for filename in (["default-mock-repo/file1.ts"] if files is None else files)]
        return Environment(
            github_client,
            pr or pull_request,
            builtins or plugin_builtins(),
            pull_request_files=pull_request_files,
        )

    return _make_env


@pytest.fixture
def mock_env(make_env) -> Environment:
    """Default environment."""
    return make_env()


@pytest.fixture
def interpreter(mock_env) -> Interpreter:
    """Interpreter over the default environment."""
    return Interpreter(mock_env)
