"""Built-in actions: side effects on the pull request."""

from github_pr_rules_engine.errors import EvaluationError
from github_pr_rules_engine.lang.builtins import BuiltInAction
from github_pr_rules_engine.lang.environment import Environment, RegisterKey
from github_pr_rules_engine.lang.types import STRING, build_array_of_type, build_function_type
from github_pr_rules_engine.lang.values import StringValue, Value
from github_pr_rules_engine.utils import get_logger

logger = get_logger(__name__)

STRING_ARRAY = build_array_of_type(STRING)
MERGE_METHODS = ("merge", "squash", "rebase")


def add_label(env: Environment, args: list[Value]) -> None:
    """Add a label, resolving a declared label id to its name."""
    label = args[0].val
    declared = env.lookup(RegisterKey.label(label))
    if isinstance(declared, StringValue):
        label = declared.val

    pull_request = env.pull_request
    env.client.add_labels_to_issue(pull_request.owner, pull_request.repo, pull_request.number, [label])
    logger.info("Added label %s to %s#%d", label, pull_request.full_name, pull_request.number)


def remove_label(env: Environment, args: list[Value]) -> None:
    label = args[0].val
    declared = env.lookup(RegisterKey.label(label))
    if isinstance(declared, StringValue):
        label = declared.val

    pull_request = env.pull_request
    env.client.remove_label_from_issue(pull_request.owner, pull_request.repo, pull_request.number, label)


def comment(env: Environment, args: list[Value]) -> None:
    pull_request = env.pull_request
    env.client.create_issue_comment(pull_request.owner, pull_request.repo, pull_request.number, args[0].val)


def assign_reviewer(env: Environment, args: list[Value]) -> None:
    """Request reviews, skipping the author who cannot review their own PR."""
    pull_request = env.pull_request
    reviewers = [reviewer.val for reviewer in args[0] if reviewer.val != pull_request.author_login]
    if not reviewers:
        logger.info("No reviewers left to assign on %s#%d", pull_request.full_name, pull_request.number)
        return
    env.client.request_reviewers(pull_request.owner, pull_request.repo, pull_request.number, reviewers)


def assign_assignees(env: Environment, args: list[Value]) -> None:
    pull_request = env.pull_request
    assignees = [assignee.val for assignee in args[0]]
    env.client.add_assignees(pull_request.owner, pull_request.repo, pull_request.number, assignees)


def close(env: Environment, args: list[Value]) -> None:
    pull_request = env.pull_request
    env.client.update_issue_state(pull_request.owner, pull_request.repo, pull_request.number, "closed")


def merge(env: Environment, args: list[Value]) -> None:
    merge_method = args[0].val
    if merge_method not in MERGE_METHODS:
        raise EvaluationError(f"merge: unknown merge method {merge_method}, expected one of {', '.join(MERGE_METHODS)}")

    pull_request = env.pull_request
    env.client.merge_pull_request(pull_request.owner, pull_request.repo, pull_request.number, merge_method)


def builtin_actions() -> list[BuiltInAction]:
    """Actions shipped with the engine."""
    return [
        BuiltInAction("addLabel", build_function_type([STRING], None), add_label),
        BuiltInAction("removeLabel", build_function_type([STRING], None), remove_label),
        BuiltInAction("comment", build_function_type([STRING], None), comment),
        BuiltInAction("assignReviewer", build_function_type([STRING_ARRAY], None), assign_reviewer),
        BuiltInAction("assignAssignees", build_function_type([STRING_ARRAY], None), assign_assignees),
        BuiltInAction("close", build_function_type([], None), close),
        BuiltInAction("merge", build_function_type([STRING], None), merge),
    ]
