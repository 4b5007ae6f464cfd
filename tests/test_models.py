"""Unit tests for data models."""

import pytest
from pydantic import ValidationError

from github_pr_rules_engine.models import (
    GroupType,
    Program,
    PullRequest,
    PullRequestFile,
    Report,
    ReportMode,
    ReportWorkflowDetails,
    Statement,
)


class TestPullRequest:
    """Test PullRequest model."""

    def test_pull_request_from_github_data(self, pull_request_data) -> None:
        """Test creating a snapshot from GitHub API data."""
        pr = PullRequest.from_github_data(pull_request_data())

        assert pr.github_id == 1234
        assert pr.number == 6
        assert pr.owner == "foobar"
        assert pr.repo == "default-mock-repo"
        assert pr.full_name == "foobar/default-mock-repo"
        assert pr.author_login == "john"
        assert pr.base_ref == "master"
        assert pr.head_ref == "new-topic"
        assert pr.assignees == ("jane",)
        assert pr.requested_reviewers == ("mary",)
        assert pr.requested_teams == ("reviewpad",)
        assert pr.labels == ("enhancement",)
        assert pr.created_at is not None

    def test_pull_request_properties(self, pull_request_data) -> None:
        """Test derived properties."""
        pr = PullRequest.from_github_data(pull_request_data(state="closed", merged_at="2022-01-11T12:00:00Z"))

        assert pr.size == 15
        assert pr.state == "closed"
        assert pr.merged_at is not None

    def test_repository_comes_from_base(self, pull_request_data) -> None:
        """Test a pull request from a fork lives in the base repository."""
        data = pull_request_data(
            head={"ref": "patch-1", "repo": {"name": "fork", "owner": {"login": "contributor"}}},
        )

        pr = PullRequest.from_github_data(data)

        assert pr.full_name == "foobar/default-mock-repo"
        assert pr.head_ref == "patch-1"

    def test_pull_request_is_frozen(self, pull_request) -> None:
        """Test the snapshot cannot change during a run."""
        with pytest.raises(ValidationError):
            pull_request.title = "changed"

    def test_pull_request_repr(self, pull_request) -> None:
        """Test pull request string representation."""
        assert repr(pull_request) == "<PullRequest(owner='foobar', repo='default-mock-repo', number=6)>"


class TestPullRequestFile:
    """Test PullRequestFile model."""

    def test_file_from_github_data(self) -> None:
        """Test creating a changed file from GitHub API data."""
        changed = PullRequestFile.from_github_data(
            {"filename": "src/app.ts", "status": "modified", "additions": None, "deletions": 2},
        )

        assert changed.filename == "src/app.ts"
        assert changed.additions == 0
        assert changed.deletions == 2
        assert changed.patch is None


class TestProgram:
    """Test Program model."""

    def test_program_from_dict(self) -> None:
        """Test loading a program with and without metadata."""
        program = Program.from_dict({
            "statements": [
                {
                    "code": '$addLabel("small")',
                    "metadata": {"workflow": {"name": "size"}, "triggered_by": [{"rule": "is-small"}]},
                },
                {"code": '$comment("hi")'},
            ],
        })

        assert len(program.statements) == 2
        assert program.statements[0].metadata.workflow.name == "size"
        assert program.statements[0].metadata.triggered_by[0].rule == "is-small"
        assert program.statements[1].metadata is None

    def test_statement_build(self) -> None:
        """Test the statement builder."""
        statement = Statement.build("$close()", "stale", ["is-stale", "no-activity"])

        assert statement.code == "$close()"
        assert [rule.rule for rule in statement.metadata.triggered_by] == ["is-stale", "no-activity"]

    def test_enums(self) -> None:
        """Test enums read from configuration strings."""
        assert ReportMode("silent") == ReportMode.SILENT
        assert GroupType("filter") == GroupType.FILTER
        with pytest.raises(ValueError):
            ReportMode("loud")


class TestReport:
    """Test Report model."""

    def test_add_to_report(self) -> None:
        """Test statements of a workflow merge into one entry."""
        report = Report()

        report.add_to_report(Statement.build('$addLabel("a")', "triage", ["r1"]))
        report.add_to_report(Statement.build('$addLabel("b")', "triage", ["r1", "r2"]))
        report.add_to_report(Statement.build("$close()", "stale", ["r3"]))

        assert list(report.workflow_details) == ["triage", "stale"]
        assert report.workflow_details["triage"] == ReportWorkflowDetails(
            name="triage",
            rules={"r1": True, "r2": True},
            actions=['$addLabel("a")', '$addLabel("b")'],
        )

    def test_statement_without_metadata(self) -> None:
        """Test unattributed statements are not reported."""
        report = Report()

        report.add_to_report(Statement(code="$close()"))

        assert report.is_empty
