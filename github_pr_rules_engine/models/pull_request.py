"""Pull Request snapshot model."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PullRequestFile(BaseModel):
    """A file changed by a pull request."""

    model_config = ConfigDict(frozen=True)

    filename: str
    status: str | None = None
    additions: int = 0
    deletions: int = 0
    patch: str | None = None

    @classmethod
    def from_github_data(cls, github_data: dict[str, Any]) -> "PullRequestFile":
        """Create instance from GitHub API data."""
        return cls(
            filename=github_data["filename"],
            status=github_data.get("status"),
            additions=github_data.get("additions") or 0,
            deletions=github_data.get("deletions") or 0,
            patch=github_data.get("patch"),
        )


class PullRequest(BaseModel):
    """Immutable snapshot of a GitHub pull request taken at the start of a run."""

    model_config = ConfigDict(frozen=True)

    github_id: int | None = None
    number: int
    owner: str
    repo: str
    title: str = ""
    body: str | None = None
    state: str = "open"
    draft: bool = False
    author_login: str
    base_ref: str | None = None
    head_ref: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None
    merged_at: datetime | None = None
    additions: int = 0
    deletions: int = 0
    commits: int = 0
    changed_files: int = 0
    assignees: tuple[str, ...] = Field(default_factory=tuple)
    requested_reviewers: tuple[str, ...] = Field(default_factory=tuple)
    requested_teams: tuple[str, ...] = Field(default_factory=tuple)
    labels: tuple[str, ...] = Field(default_factory=tuple)

    def __repr__(self) -> str:
        return f"<PullRequest(owner='{self.owner}', repo='{self.repo}', number={self.number})>"

    @classmethod
    def from_github_data(cls, github_data: dict[str, Any]) -> "PullRequest":
        """Create instance from GitHub API data.

        The repository is taken from the base branch, which is where the
        pull request will be merged and where comments and labels live.
        """
        base = github_data.get("base") or {}
        head = github_data.get("head") or {}
        base_repo = base.get("repo") or {}

        return cls(
            github_id=github_data.get("id"),
            number=github_data["number"],
            owner=base_repo["owner"]["login"],
            repo=base_repo["name"],
            title=github_data.get("title") or "",
            body=github_data.get("body"),
            state=github_data.get("state") or "open",
            draft=bool(github_data.get("draft")),
            author_login=github_data["user"]["login"],
            base_ref=base.get("ref"),
            head_ref=head.get("ref"),
            html_url=github_data.get("html_url"),
            created_at=github_data.get("created_at"),
            merged_at=github_data.get("merged_at"),
            additions=github_data.get("additions") or 0,
            deletions=github_data.get("deletions") or 0,
            commits=github_data.get("commits") or 0,
            changed_files=github_data.get("changed_files") or 0,
            assignees=tuple(user["login"] for user in github_data.get("assignees") or []),
            requested_reviewers=tuple(user["login"] for user in github_data.get("requested_reviewers") or []),
            requested_teams=tuple(team["slug"] for team in github_data.get("requested_teams") or []),
            labels=tuple(label["name"] for label in github_data.get("labels") or []),
        )

    @property
    def full_name(self) -> str:
        """owner/repo of the base repository."""
        return f"{self.owner}/{self.repo}"

    @property
    def size(self) -> int:
        """Number of changed lines."""
        return self.additions + self.deletions
