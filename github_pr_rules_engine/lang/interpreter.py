"""Interpreter: registers groups, labels and rules, runs programs and reports."""

import threading
from concurrent.futures import ThreadPoolExecutor

from github_pr_rules_engine.config import get_settings
from github_pr_rules_engine.errors import (
    ConditionTypeError,
    EvaluationError,
    GroupFilterParseError,
    InvalidGroupError,
    ParseError,
)
from github_pr_rules_engine.github.client import GitHubAPIClient
from github_pr_rules_engine.models import GroupKind, GroupType, Program, PullRequest, ReportMode, Statement
from github_pr_rules_engine.services.report_service import ReportService
from github_pr_rules_engine.utils import EventCollector, get_logger

from .ast import FunctionCall
from .builtins import BuiltIns
from .environment import Environment, RegisterKey
from .evaluator import eval_expr, eval_tree
from .parser import parse
from .typecheck import type_inference
from .types import BOOL, STRING, ArrayType
from .values import ArrayValue, BoolValue, Value, build_string_array, build_string_value

logger = get_logger(__name__)


class Interpreter:
    """Evaluates one pull request against the declarations of its workflows."""

    def __init__(self, env: Environment) -> None:
        self.env = env

    @classmethod
    def create(
        cls,
        client: GitHubAPIClient,
        pull_request: PullRequest,
        builtins: BuiltIns,
        collector: EventCollector | None = None,
        cancel_event: threading.Event | None = None,
    ) -> "Interpreter":
        """Create an interpreter for a pull request.

        Args:
        ----
            client: GitHub API client
            pull_request: Snapshot of the pull request under evaluation
            builtins: Functions and actions available to the rules
            collector: Telemetry collector
            cancel_event: Cancellation signal for the whole run

        Returns:
        -------
            Interpreter ready to register declarations

        Raises:
        ------
            ConstructionError: If the environment cannot be built

        """
        return cls(Environment.create(client, pull_request, builtins, collector, cancel_event))

    def process_group(
        self,
        group_name: str,
        kind: GroupKind,
        group_type: GroupType,
        expr: str,
        param: str,
        where: str,
    ) -> None:
        """Register a group of developers.

        Args:
        ----
            group_name: Name the group is registered under
            kind: Kind of members the group holds
            group_type: STATIC evaluates ``expr``, FILTER keeps the candidates matching ``where``
            expr: Array expression of a static group
            param: Variable the candidate is bound to while evaluating ``where``
            where: Filter condition of a filter group

        """
        logger.info("Processing group %s (%s)", group_name, GroupType(group_type).value)

        if GroupType(group_type) == GroupType.FILTER:
            value = self._eval_group_filter(GroupKind(kind), param, where)
        else:
            value = self._eval_group(expr)

        self.env.register(RegisterKey.group(group_name), value)

    def _group_candidates(self, kind: GroupKind) -> list[str]:
        if kind == GroupKind.DEVELOPER:
            members = self.env.client.get_organization_members(self.env.pull_request.owner)
            return [member["login"] for member in members]
        raise EvaluationError(f"unknown group kind {kind}")

    def _eval_group_filter(self, kind: GroupKind, param: str, where: str) -> ArrayValue:
        try:
            tree = parse(where)
        except ParseError as e:
            raise GroupFilterParseError(e) from e
        if type_inference(self.env.builtins, tree, {param: STRING}) != BOOL:
            raise ConditionTypeError(where)

        candidates = self._group_candidates(kind)
        logger.debug("Filtering %d candidates with %s", len(candidates), where)

        def matches(candidate: str) -> bool:
            result = eval_tree(self.env, tree, {param: build_string_value(candidate)})
            return isinstance(result, BoolValue) and result.val

        # map yields results and errors in candidate order
        max_workers = min(get_settings().group_filter_max_workers, max(len(candidates), 1))
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="GroupFilter") as executor:
            selected = list(executor.map(matches, candidates))

        return build_string_array(candidate for candidate, keep in zip(candidates, selected) if keep)

    def _eval_group(self, expr: str) -> Value:
        tree = parse(expr)

        expr_type = type_inference(self.env.builtins, tree)
        if not isinstance(expr_type, ArrayType):
            raise InvalidGroupError

        return eval_tree(self.env, tree)

    def process_label(self, label_id: str, label_name: str) -> None:
        """Register the name of a label under its internal id."""
        self.env.register(RegisterKey.label(label_id), build_string_value(label_name))

    def process_rule(self, rule_name: str, condition: str) -> None:
        """Register the unevaluated text of a rule for later lookup by name."""
        self.env.register(RegisterKey.rule(rule_name), build_string_value(condition))

    def eval_expr(self, code: str) -> bool:
        """Evaluate a condition against the pull request."""
        return eval_expr(self.env, code)

    def exec_statement(self, statement: Statement) -> None:
        """Run the action call of a statement and record it in the report.

        Raises
        ------
            ParseError: If the code does not parse
            TypeInferenceError: If the arguments do not fit the action signature
            BuiltInNotFoundError: If the callee is not a known action

        """
        tree = parse(statement.code)
        type_inference(self.env.builtins, tree)

        if not isinstance(tree, FunctionCall):
            raise EvaluationError(f"exec: expression {statement.code} is not an action call")

        action = self.env.builtins.get_action(tree.name)
        args = [eval_tree(self.env, arg) for arg in tree.args]

        self.env.check_cancelled()
        logger.info("Executing %s", statement.code)
        action.code(self.env, args)

        self.env.report.add_to_report(statement)
        self.env.collect("Ran Action", {"action": tree.name})

    def exec_program(self, program: Program) -> None:
        """Execute the statements of a program in order, stopping at the first failure."""
        logger.info("Executing program with %d statements", len(program.statements))

        for statement in program.statements:
            self.exec_statement(statement)

        logger.info("Program executed successfully")

    def report(self, mode: ReportMode | None = None) -> None:
        """Publish the report of the run as a single pull request comment.

        Args:
        ----
            mode: Publishing mode, defaults to the configured ``report_mode``

        Raises:
        ------
            ReportError: If listing or writing the comment fails

        """
        mode = ReportMode(mode or get_settings().report_mode)
        ReportService(self.env.client, self.env.pull_request).publish(self.env.report, mode)

