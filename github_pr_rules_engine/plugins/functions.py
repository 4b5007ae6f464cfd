"""Built-in functions: read-only queries over the pull request and its repository."""

import os

from github_pr_rules_engine.errors import EvaluationError
from github_pr_rules_engine.lang.builtins import BuiltInFunction
from github_pr_rules_engine.lang.environment import Environment, RegisterKey
from github_pr_rules_engine.lang.evaluator import eval_expr
from github_pr_rules_engine.lang.types import BOOL, INT, STRING, build_array_of_type, build_function_type
from github_pr_rules_engine.lang.values import (
    StringValue,
    Value,
    build_bool_value,
    build_int_value,
    build_string_array,
    build_string_value,
)

STRING_ARRAY = build_array_of_type(STRING)


def author(env: Environment, args: list[Value]) -> Value:
    return build_string_value(env.pull_request.author_login)


def title(env: Environment, args: list[Value]) -> Value:
    return build_string_value(env.pull_request.title)


def description(env: Environment, args: list[Value]) -> Value:
    return build_string_value(env.pull_request.body or "")


def base(env: Environment, args: list[Value]) -> Value:
    return build_string_value(env.pull_request.base_ref or "")


def head(env: Environment, args: list[Value]) -> Value:
    return build_string_value(env.pull_request.head_ref or "")


def is_draft(env: Environment, args: list[Value]) -> Value:
    return build_bool_value(env.pull_request.draft)


def size(env: Environment, args: list[Value]) -> Value:
    return build_int_value(env.pull_request.size)


def file_count(env: Environment, args: list[Value]) -> Value:
    return build_int_value(len(env.pull_request_files))


def commit_count(env: Environment, args: list[Value]) -> Value:
    return build_int_value(env.pull_request.commits)


def assignees(env: Environment, args: list[Value]) -> Value:
    return build_string_array(env.pull_request.assignees)


def reviewers(env: Environment, args: list[Value]) -> Value:
    """Requested reviewers, users first and then teams."""
    pull_request = env.pull_request
    return build_string_array(pull_request.requested_reviewers + pull_request.requested_teams)


def labels(env: Environment, args: list[Value]) -> Value:
    return build_string_array(env.pull_request.labels)


def files_path(env: Environment, args: list[Value]) -> Value:
    return build_string_array(file.filename for file in env.pull_request_files)


def has_file_extensions(env: Environment, args: list[Value]) -> Value:
    """Whether every changed file has one of the given extensions."""
    extensions = {ext.val for ext in args[0]}
    return build_bool_value(
        all(os.path.splitext(file.filename)[1] in extensions for file in env.pull_request_files),
    )


def has_file_name(env: Environment, args: list[Value]) -> Value:
    file_name = args[0].val
    return build_bool_value(any(file.filename == file_name for file in env.pull_request_files))


def group(env: Environment, args: list[Value]) -> Value:
    group_name = args[0].val
    members = env.lookup(RegisterKey.group(group_name))
    if members is None:
        raise EvaluationError(f"getGroup: no group with name {group_name} in state")
    return members


def is_element_of(env: Environment, args: list[Value]) -> Value:
    member, members = args
    return build_bool_value(any(elem == member for elem in members))


def rule(env: Environment, args: list[Value]) -> Value:
    """Evaluate a registered rule by name."""
    rule_name = args[0].val
    condition = env.lookup(RegisterKey.rule(rule_name))
    if not isinstance(condition, StringValue):
        raise EvaluationError(f"rule: no rule with name {rule_name} in state")

    with env.evaluating_rule(rule_name):
        return build_bool_value(eval_expr(env, condition.val))


def organization(env: Environment, args: list[Value]) -> Value:
    members = env.client.get_organization_members(env.pull_request.owner)
    return build_string_array(member["login"] for member in members)


def team(env: Environment, args: list[Value]) -> Value:
    team_slug = args[0].val
    members = env.client.get_team_members(env.pull_request.owner, team_slug)
    return build_string_array(member["login"] for member in members)


def total_created_pull_requests(env: Environment, args: list[Value]) -> Value:
    """Pull requests the developer opened in the repository, all states."""
    dev_name = args[0].val
    issues = env.client.get_repository_issues(env.pull_request.owner, env.pull_request.repo, creator=dev_name)
    return build_int_value(sum(1 for issue in issues if issue.get("pull_request")))


def builtin_functions() -> list[BuiltInFunction]:
    """Functions shipped with the engine."""
    return [
        BuiltInFunction("author", build_function_type([], STRING), author),
        BuiltInFunction("title", build_function_type([], STRING), title),
        BuiltInFunction("description", build_function_type([], STRING), description),
        BuiltInFunction("base", build_function_type([], STRING), base),
        BuiltInFunction("head", build_function_type([], STRING), head),
        BuiltInFunction("isDraft", build_function_type([], BOOL), is_draft),
        BuiltInFunction("size", build_function_type([], INT), size),
        BuiltInFunction("fileCount", build_function_type([], INT), file_count),
        BuiltInFunction("commitCount", build_function_type([], INT), commit_count),
        BuiltInFunction("assignees", build_function_type([], STRING_ARRAY), assignees),
        BuiltInFunction("reviewers", build_function_type([], STRING_ARRAY), reviewers),
        BuiltInFunction("labels", build_function_type([], STRING_ARRAY), labels),
        BuiltInFunction("filesPath", build_function_type([], STRING_ARRAY), files_path),
        BuiltInFunction("hasFileExtensions", build_function_type([STRING_ARRAY], BOOL), has_file_extensions),
        BuiltInFunction("hasFileName", build_function_type([STRING], BOOL), has_file_name),
        BuiltInFunction("group", build_function_type([STRING], STRING_ARRAY), group),
        BuiltInFunction("isElementOf", build_function_type([STRING, STRING_ARRAY], BOOL), is_element_of),
        BuiltInFunction("rule", build_function_type([STRING], BOOL), rule),
        BuiltInFunction("organization", build_function_type([], STRING_ARRAY), organization),
        BuiltInFunction("team", build_function_type([STRING], STRING_ARRAY), team),
        BuiltInFunction(
            "totalCreatedPullRequests",
            build_function_type([STRING], INT),
            total_created_pull_requests,
        ),
    ]

