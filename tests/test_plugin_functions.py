"""Unit tests for the built-in functions."""

import pytest
import responses

from github_pr_rules_engine.errors import EvaluationError, GitHubAPIError
from github_pr_rules_engine.lang import RegisterKey
from github_pr_rules_engine.lang.values import (
    build_bool_value,
    build_int_value,
    build_string_array,
    build_string_value,
)
from github_pr_rules_engine.models import PullRequest
from github_pr_rules_engine.plugins import plugin_builtins

REPO_URL = "https://api.github.com/repos/foobar/default-mock-repo"

FUNCTIONS = plugin_builtins().functions


def call(name, env, *args):
    return FUNCTIONS[name].code(env, list(args))


class TestPullRequestFunctions:
    """Test functions reading the pull request snapshot."""

    def test_author(self, mock_env) -> None:
        """Test author login."""
        assert call("author", mock_env) == build_string_value("john")

    def test_title_and_description(self, mock_env) -> None:
        """Test title and body."""
        assert call("title", mock_env) == build_string_value("Amazing new feature")
        assert call("description", mock_env) == build_string_value("Please pull these awesome changes in!")

    def test_description_without_body(self, make_env, pull_request_data) -> None:
        """Test a missing body reads as an empty string."""
        env = make_env(pr=PullRequest.from_github_data(pull_request_data(body=None)))

        assert call("description", env) == build_string_value("")

    def test_branches(self, mock_env) -> None:
        """Test base and head refs."""
        assert call("base", mock_env) == build_string_value("master")
        assert call("head", mock_env) == build_string_value("new-topic")

    def test_is_draft(self, make_env, pull_request_data) -> None:
        """Test draft flag."""
        env = make_env(pr=PullRequest.from_github_data(pull_request_data(draft=True)))

        assert call("isDraft", env) == build_bool_value(True)

    def test_counts(self, make_env) -> None:
        """Test size, file and commit counts."""
        env = make_env(files=["a.go", "b.go", "c.md"])

        assert call("size", env) == build_int_value(15)
        assert call("fileCount", env) == build_int_value(3)
        assert call("commitCount", env) == build_int_value(2)

    def test_assignees_and_labels(self, mock_env) -> None:
        """Test assignees and labels."""
        assert call("assignees", mock_env) == build_string_array(["jane"])
        assert call("labels", mock_env) == build_string_array(["enhancement"])

    def test_reviewers(self, mock_env) -> None:
        """Test requested users come before requested teams."""
        assert call("reviewers", mock_env) == build_string_array(["mary", "reviewpad"])


class TestFileFunctions:
    """Test functions over the changed files."""

    def test_files_path(self, make_env) -> None:
        """Test paths keep the order GitHub lists them in."""
        env = make_env(files=["src/b.ts", "src/a.ts"])

        assert call("filesPath", env) == build_string_array(["src/b.ts", "src/a.ts"])

    @pytest.mark.parametrize(
        ("files", "extensions", "expected"),
        [
            (["default-mock-repo/file1.ts"], [".ts"], True),
            (["a.ts", "b.go"], [".ts"], False),
            (["a.ts", "b.go"], [".ts", ".go"], True),
            (["Makefile"], [".ts"], False),
            ([], [".ts"], True),
        ],
    )
    def test_has_file_extensions(self, make_env, files, extensions, expected) -> None:
        """Test every changed file must carry one of the extensions."""
        env = make_env(files=files)

        assert call("hasFileExtensions", env, build_string_array(extensions)) == build_bool_value(expected)

    def test_has_file_name(self, make_env) -> None:
        """Test exact path match."""
        env = make_env(files=["docs/README.md"])

        assert call("hasFileName", env, build_string_value("docs/README.md")) == build_bool_value(True)
        assert call("hasFileName", env, build_string_value("README.md")) == build_bool_value(False)


class TestStateFunctions:
    """Test functions reading registered declarations."""

    def test_group(self, mock_env) -> None:
        """Test reading a registered group."""
        mock_env.register(RegisterKey.group("devs"), build_string_array(["jane", "john"]))

        assert call("group", mock_env, build_string_value("devs")) == build_string_array(["jane", "john"])

    def test_group_not_found(self, mock_env) -> None:
        """Test reading an unknown group."""
        with pytest.raises(EvaluationError) as exc_info:
            call("group", mock_env, build_string_value("devs"))

        assert str(exc_info.value) == "getGroup: no group with name devs in state"

    def test_group_ignores_labels(self, mock_env) -> None:
        """Test a label with the group name is not a group."""
        mock_env.register(RegisterKey.label("devs"), build_string_value("devs"))

        with pytest.raises(EvaluationError):
            call("group", mock_env, build_string_value("devs"))

    def test_is_element_of(self, mock_env) -> None:
        """Test membership."""
        members = build_string_array(["jane", "john"])

        assert call("isElementOf", mock_env, build_string_value("john"), members) == build_bool_value(True)
        assert call("isElementOf", mock_env, build_string_value("mary"), members) == build_bool_value(False)

    def test_rule(self, mock_env) -> None:
        """Test a registered rule is evaluated on demand."""
        mock_env.register(RegisterKey.rule("is-small"), build_string_value("$size() < 100"))

        assert call("rule", mock_env, build_string_value("is-small")) == build_bool_value(True)

    def test_rule_not_found(self, mock_env) -> None:
        """Test evaluating an unknown rule."""
        with pytest.raises(EvaluationError) as exc_info:
            call("rule", mock_env, build_string_value("is-small"))

        assert str(exc_info.value) == "rule: no rule with name is-small in state"


class TestHostFunctions:
    """Test functions querying GitHub."""

    def test_organization(self, mock_env, mocked_responses) -> None:
        """Test organization members."""
        mocked_responses.add(
            responses.GET,
            "https://api.github.com/orgs/foobar/members",
            json=[{"login": "jane"}, {"login": "john"}],
        )

        assert call("organization", mock_env) == build_string_array(["jane", "john"])

    def test_team(self, mock_env, mocked_responses) -> None:
        """Test team members."""
        mocked_responses.add(
            responses.GET,
            "https://api.github.com/orgs/foobar/teams/reviewpad/members",
            json=[{"login": "mary"}],
        )

        assert call("team", mock_env, build_string_value("reviewpad")) == build_string_array(["mary"])

    def test_total_created_pull_requests_request_fails(self, mock_env, mocked_responses) -> None:
        """Test the GitHub error message is surfaced verbatim."""
        mocked_responses.add(
            responses.GET,
            f"{REPO_URL}/issues",
            json={"message": "ListListIssuesByRepoRequestFail"},
            status=500,
        )

        with pytest.raises(GitHubAPIError) as exc_info:
            call("totalCreatedPullRequests", mock_env, build_string_value("steve"))

        assert str(exc_info.value) == "ListListIssuesByRepoRequestFail"

    def test_total_created_pull_requests(self, mock_env, mocked_responses) -> None:
        """Test only issues that are pull requests are counted."""
        mocked_responses.add(
            responses.GET,
            f"{REPO_URL}/issues",
            json=[
                {"title": "First Issue"},
                {"title": "Second Issue", "pull_request": {"url": "pull-request-link"}},
            ],
        )

        assert call("totalCreatedPullRequests", mock_env, build_string_value("steve")) == build_int_value(1)
        assert "creator=steve" in mocked_responses.calls[0].request.url
