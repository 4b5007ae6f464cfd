"""Run-scoped interpreter state."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from github_pr_rules_engine.errors import ConstructionError, EvaluationError, HostAPIError, RunCancelledError
from github_pr_rules_engine.github.client import GitHubAPIClient
from github_pr_rules_engine.models import PullRequest, PullRequestFile, Report
from github_pr_rules_engine.utils import EventCollector, get_logger

from .builtins import BuiltIns
from .values import Value

logger = get_logger(__name__)


class RegisterKind(Enum):
    GROUP = ""
    LABEL = "@label:"
    RULE = "@rule:"


@dataclass(frozen=True)
class RegisterKey:
    """Namespaced key of the register map.

    Groups are keyed by their plain name; labels and rules carry a prefix so
    they can never collide with a group.
    """

    kind: RegisterKind
    name: str

    @classmethod
    def group(cls, name: str) -> "RegisterKey":
        return cls(RegisterKind.GROUP, name)

    @classmethod
    def label(cls, label_id: str) -> "RegisterKey":
        return cls(RegisterKind.LABEL, label_id)

    @classmethod
    def rule(cls, name: str) -> "RegisterKey":
        return cls(RegisterKind.RULE, name)

    def __str__(self) -> str:
        return f"{self.kind.value}{self.name}"


def build_internal_label_id(label_id: str) -> str:
    return str(RegisterKey.label(label_id))


def build_internal_rule_name(rule_name: str) -> str:
    return str(RegisterKey.rule(rule_name))


class Environment:
    """State of one evaluation run.

    Owns the register map, the report accumulator and the handles every
    built-in needs: the GitHub client, the pull request snapshot and its
    changed files.
    """

    def __init__(
        self,
        client: GitHubAPIClient,
        pull_request: PullRequest,
        builtins: BuiltIns,
        pull_request_files: list[PullRequestFile] | None = None,
        collector: EventCollector | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.client = client
        self.pull_request = pull_request
        self.builtins = builtins
        self.pull_request_files = list(pull_request_files or [])
        self.collector = collector
        self.cancel_event = cancel_event
        self.register_map: dict[RegisterKey, Value] = {}
        self.report = Report()
        self._rule_calls = threading.local()

    @classmethod
    def create(
        cls,
        client: GitHubAPIClient,
        pull_request: PullRequest,
        builtins: BuiltIns,
        collector: EventCollector | None = None,
        cancel_event: threading.Event | None = None,
    ) -> "Environment":
        """Build the environment of a run, fetching the pull request files.

        Raises
        ------
            ConstructionError: If the changed files cannot be fetched or decoded

        """
        logger.info("Building environment for %s#%d", pull_request.full_name, pull_request.number)

        try:
            files = client.get_pull_request_files(pull_request.owner, pull_request.repo, pull_request.number)
        except HostAPIError as e:
            raise ConstructionError(f"error getting pull request files: {e}") from e

        try:
            pull_request_files = [PullRequestFile.from_github_data(file_data) for file_data in files]
        except (KeyError, TypeError, ValueError) as e:
            raise ConstructionError(f"error reading pull request files: {e!r}") from e

        logger.debug("Pull request changes %d files", len(pull_request_files))

        return cls(
            client,
            pull_request,
            builtins,
            pull_request_files=pull_request_files,
            collector=collector,
            cancel_event=cancel_event,
        )

    def register(self, key: RegisterKey, value: Value) -> None:
        logger.debug("Registering %s", key)
        self.register_map[key] = value

    def lookup(self, key: RegisterKey) -> Value | None:
        return self.register_map.get(key)

    def check_cancelled(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise RunCancelledError

    def collect(self, event: str, properties: dict | None = None) -> None:
        if self.collector is not None:
            self.collector.collect(event, properties)

    @contextmanager
    def evaluating_rule(self, rule_name: str) -> Iterator[None]:
        """Mark a rule as under evaluation on the current thread.

        Raises
        ------
            EvaluationError: If the rule is already being evaluated, i.e. it refers to itself

        """
        active = getattr(self._rule_calls, "names", None)
        if active is None:
            active = self._rule_calls.names = []
        if rule_name in active:
            cycle = " -> ".join([*active[active.index(rule_name):], rule_name])
            raise EvaluationError(f"rule: cyclic reference {cycle}")

        active.append(rule_name)
        try:
            yield
        finally:
            active.pop()
