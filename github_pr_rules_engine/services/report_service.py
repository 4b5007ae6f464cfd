"""Report service: renders the run report and keeps it as a single PR comment."""

from typing import Any

from github_pr_rules_engine.errors import HostAPIError, ReportError
from github_pr_rules_engine.github.client import GitHubAPIClient
from github_pr_rules_engine.models import PullRequest, Report, ReportMode
from github_pr_rules_engine.utils import get_logger

logger = get_logger(__name__)

REPORT_COMMENT_ANNOTATION = "<!--@annotation-reviewpad-report-->"
REPORT_TITLE = "**Reviewpad Report**"
EXPLANATION_HEADER = ":scroll: **Explanation**"
NO_WORKFLOWS_ACTIVATED = "No workflows activated"


def build_report_explanation(report: Report) -> str:
    """Render the workflows of a report as a Markdown table.

    Args:
    ----
        report: Accumulated report of the run

    Returns:
    -------
        Markdown explanation, or a fixed sentence when nothing ran

    """
    if report.is_empty:
        return NO_WORKFLOWS_ACTIVATED

    lines = [
        "| Workflows <sub><sup>activated</sup></sub> "
        "| Rules <sub><sup>triggered</sup></sub> "
        "| Actions <sub><sup>ran</sup></sub> |",
        "| - | - | - |",
    ]
    for details in report.workflow_details.values():
        rules = "<br>".join(rule for rule, triggered in details.rules.items() if triggered)
        actions = "<br>".join(f"`{action}`" for action in details.actions)
        lines.append(f"| {details.name} | {rules} | {actions} |")

    return "\n".join(lines)


def build_report(report: Report) -> str:
    """Render the full comment body, marker included."""
    return "\n".join([
        REPORT_COMMENT_ANNOTATION,
        REPORT_TITLE,
        "",
        EXPLANATION_HEADER,
        build_report_explanation(report),
    ])


def find_report_comment(comments: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Find the comment managed by the report service.

    GitHub lists comments oldest first. Should more than one carry the marker,
    the most recent is the managed one.
    """
    matches = [comment for comment in comments if REPORT_COMMENT_ANNOTATION in (comment.get("body") or "")]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning("Found %d report comments, managing the most recent (%s)", len(matches), matches[-1].get("id"))
    return matches[-1]


class ReportService:
    """Publishes the report of a run on its pull request."""

    def __init__(self, client: GitHubAPIClient, pull_request: PullRequest) -> None:
        self.client = client
        self.pull_request = pull_request

    def publish(self, report: Report, mode: ReportMode) -> None:
        """Publish the report.

        In silent mode an existing report comment is deleted and nothing is
        created. In verbose mode the report comment is updated in place, or
        created when there is none.

        Args:
        ----
            report: Accumulated report of the run
            mode: Publishing mode

        Raises:
        ------
            ReportError: If any GitHub call fails

        """
        owner, repo, number = self.pull_request.owner, self.pull_request.repo, self.pull_request.number

        try:
            comments = self.client.get_issue_comments(owner, repo, number)
        except HostAPIError as e:
            raise ReportError(f"error getting issues {e}") from e

        comment = find_report_comment(comments)

        if mode == ReportMode.SILENT:
            if comment is not None:
                self._delete(comment)
            return

        body = build_report(report)
        if comment is not None:
            self._update(comment, body)
        else:
            self._create(body)

    def _delete(self, comment: dict[str, Any]) -> None:
        try:
            self.client.delete_issue_comment(self.pull_request.owner, self.pull_request.repo, comment["id"])
        except HostAPIError as e:
            raise ReportError(f"error deleting comment {e}") from e
        logger.info("Deleted report comment %s", comment["id"])

    def _update(self, comment: dict[str, Any], body: str) -> None:
        try:
            self.client.update_issue_comment(self.pull_request.owner, self.pull_request.repo, comment["id"], body)
        except HostAPIError as e:
            raise ReportError(f"error updating comment {e}") from e
        logger.info("Updated report comment %s", comment["id"])

    def _create(self, body: str) -> None:
        try:
            created = self.client.create_issue_comment(
                self.pull_request.owner,
                self.pull_request.repo,
                self.pull_request.number,
                body,
            )
        except HostAPIError as e:
            raise ReportError(f"error creating comment {e}") from e
        logger.info("Created report comment %s", created.get("id"))
