"""GitHub API client used by the interpreter and its built-ins."""

import threading
import time
from typing import Any
from urllib.parse import quote, urljoin

import requests

from github_pr_rules_engine.config import get_github_headers, get_settings
from github_pr_rules_engine.errors import GitHubAPIError, RunCancelledError
from github_pr_rules_engine.utils import get_logger

logger = get_logger(__name__)
settings = get_settings()


class GitHubAPIClient:
    """GitHub API client with rate limiting and error handling."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Initialize GitHub API client.

        Args:
        ----
            access_token: GitHub personal access token for authentication
            base_url: REST API root, defaults to the configured one
            cancel_event: Once set, no further request is started

        """
        self.access_token = access_token or settings.github_token
        self.base_url = (base_url or settings.github_api_base_url).rstrip("/") + "/"
        self.cancel_event = cancel_event
        self.session = requests.Session()
        self.session.headers.update(get_github_headers(self.access_token))

        if not self.access_token:
            logger.warning("No GitHub token provided, using unauthenticated requests")

        # Rate limiting, shared by the group filter workers
        self.rate_limit_remaining = None
        self.rate_limit_reset = None
        self.last_request_time = 0
        self._rate_limit_lock = threading.Lock()

        self.request_delay = settings.request_delay
        self.timeout = settings.request_timeout

    def _check_rate_limit(self) -> None:
        """Check rate limit status and wait if necessary.

        Callers hold ``_rate_limit_lock``, so concurrent requests are paced one
        after the other.
        """
        if self.rate_limit_remaining is not None and self.rate_limit_remaining <= 0:
            if self.rate_limit_reset:
                wait_time = self.rate_limit_reset - time.time()
                if wait_time > 0:
                    logger.info("Rate limit exceeded, waiting %.1f seconds", wait_time)
                    self._sleep(wait_time + 1)
            else:
                logger.info("Rate limit exceeded, waiting 60 seconds")
                self._sleep(60)

        # Enforce minimum delay between requests
        time_since_last_request = time.time() - self.last_request_time
        if time_since_last_request < self.request_delay:
            self._sleep(self.request_delay - time_since_last_request)

        self.last_request_time = time.time()

    def _sleep(self, seconds: float) -> None:
        if self.cancel_event is not None:
            self.cancel_event.wait(seconds)
        else:
            time.sleep(seconds)

    def _check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise RunCancelledError

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the provider error message from an error response."""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("message"):
            return payload["message"]
        return response.text or f"{response.status_code} {response.reason}"

    @staticmethod
    def _json(response: requests.Response) -> Any:  # noqa: ANN401
        """Decode a response body, an empty body decoding to an empty dict.

        Raises
        ------
            GitHubAPIError: If the body is not JSON

        """
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            logger.error("Invalid JSON in response from %s", response.url)
            raise GitHubAPIError(
                f"invalid JSON in response from {response.url}",
                status_code=response.status_code,
            ) from e

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # noqa: ANN401
        """Make HTTP request with rate limiting and error handling.

        Args:
        ----
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional request parameters

        Returns:
        -------
            requests.Response: Response object

        Raises:
        ------
            GitHubAPIError: If the request fails or GitHub answers with an error
            RunCancelledError: If the run was cancelled

        """
        self._check_cancelled()
        with self._rate_limit_lock:
            self._check_rate_limit()
        self._check_cancelled()

        # Ensure URL is complete
        if not url.startswith(("http://", "https://")):
            url = urljoin(self.base_url, url.lstrip("/"))

        logger.debug("Making %s request to %s", method, url)
        kwargs.setdefault("timeout", self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.exception("Request failed")
            raise GitHubAPIError(str(e)) from e

        with self._rate_limit_lock:
            if "X-RateLimit-Remaining" in response.headers:
                self.rate_limit_remaining = int(response.headers["X-RateLimit-Remaining"])

            if "X-RateLimit-Reset" in response.headers:
                self.rate_limit_reset = int(response.headers["X-RateLimit-Reset"])

        if not response.ok:
            message = self._error_message(response)
            logger.error("%s %s failed with %d: %s", method, url, response.status_code, message)
            raise GitHubAPIError(message, status_code=response.status_code)

        return response

    def _get_paginated_results(self, url: str, params: dict | None = None) -> list[dict]:
        """Get all results from paginated endpoint.

        Args:
        ----
            url: API endpoint URL
            params: Query parameters

        Returns:
        -------
            List of all results

        """
        all_results = []
        page = 1
        per_page = 100  # Maximum allowed by GitHub

        while True:
            request_params = params.copy() if params else {}
            request_params.update({
                "page": page,
                "per_page": per_page,
            })

            response = self._make_request("GET", url, params=request_params)
            results = self._json(response)

            if not results:
                break

            if not isinstance(results, list):
                raise GitHubAPIError(f"expected a list from {response.url}", status_code=response.status_code)

            all_results.extend(results)

            # Check if we got fewer results than requested (last page)
            if len(results) < per_page:
                break

            page += 1

        return all_results

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> dict:
        """Get a single pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
        -------
            Pull request dictionary

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}"

        response = self._make_request("GET", url)
        return self._json(response)

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> list[dict]:
        """Get files changed in a pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
        -------
            List of file dictionaries

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}/files"

        return self._get_paginated_results(url)

    def get_organization_members(self, organization: str) -> list[dict]:
        """Get members of an organization."""
        url = f"/orgs/{organization}/members"

        return self._get_paginated_results(url)

    def get_team_members(self, organization: str, team_slug: str) -> list[dict]:
        """Get members of an organization team."""
        url = f"/orgs/{organization}/teams/{team_slug}/members"

        return self._get_paginated_results(url)

    def get_repository_issues(self, owner: str, repo: str, creator: str | None = None, state: str = "all") -> list[dict]:
        """Get issues of a repository, pull requests included.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            creator: Only issues created by this login
            state: Issue state ('open', 'closed', 'all')

        Returns:
        -------
            List of issue dictionaries

        """
        url = f"/repos/{owner}/{repo}/issues"
        params = {"state": state}
        if creator:
            params["creator"] = creator

        return self._get_paginated_results(url, params)

    def get_issue_comments(self, owner: str, repo: str, issue_number: int) -> list[dict]:
        """Get issue comments for a pull request (treated as issue).

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            issue_number: Issue/PR number

        Returns:
        -------
            List of issue comment dictionaries

        """
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/comments"

        return self._get_paginated_results(url)

    def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> dict:
        """Create a comment on an issue or pull request."""
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/comments"

        response = self._make_request("POST", url, json={"body": body})
        return self._json(response)

    def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> dict:
        """Replace the body of an existing issue comment."""
        url = f"/repos/{owner}/{repo}/issues/comments/{comment_id}"

        response = self._make_request("PATCH", url, json={"body": body})
        return self._json(response)

    def delete_issue_comment(self, owner: str, repo: str, comment_id: int) -> None:
        """Delete an issue comment."""
        url = f"/repos/{owner}/{repo}/issues/comments/{comment_id}"

        self._make_request("DELETE", url)

    def add_labels_to_issue(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> list[dict]:
        """Add labels to an issue or pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            issue_number: Issue/PR number
            labels: Label names

        Returns:
        -------
            Labels now set on the issue

        """
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/labels"

        response = self._make_request("POST", url, json={"labels": labels})
        return self._json(response)

    def remove_label_from_issue(self, owner: str, repo: str, issue_number: int, label: str) -> None:
        """Remove a label from an issue or pull request."""
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/labels/{quote(label, safe='')}"

        self._make_request("DELETE", url)

    def add_assignees(self, owner: str, repo: str, issue_number: int, assignees: list[str]) -> dict:
        """Assign users to an issue or pull request."""
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/assignees"

        response = self._make_request("POST", url, json={"assignees": assignees})
        return self._json(response)

    def request_reviewers(self, owner: str, repo: str, pr_number: int, reviewers: list[str]) -> dict:
        """Request reviews from users on a pull request."""
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}/requested_reviewers"

        response = self._make_request("POST", url, json={"reviewers": reviewers})
        return self._json(response)

    def update_issue_state(self, owner: str, repo: str, issue_number: int, state: str) -> dict:
        """Open or close an issue or pull request."""
        url = f"/repos/{owner}/{repo}/issues/{issue_number}"

        response = self._make_request("PATCH", url, json={"state": state})
        return self._json(response)

    def merge_pull_request(self, owner: str, repo: str, pr_number: int, merge_method: str = "merge") -> dict:
        """Merge a pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            merge_method: One of 'merge', 'squash', 'rebase'

        Returns:
        -------
            Merge result dictionary

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}/merge"

        response = self._make_request("PUT", url, json={"merge_method": merge_method})
        return self._json(response)
