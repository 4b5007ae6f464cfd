"""Evaluation of type checked expression trees."""

from collections.abc import Mapping

from github_pr_rules_engine.errors import ConditionTypeError, EvaluationError
from github_pr_rules_engine.utils import get_logger

from .ast import (
    ArrayLiteral,
    BinaryOp,
    BoolConst,
    Expr,
    FunctionCall,
    IntConst,
    StringConst,
    UnaryOp,
    Variable,
)
from .environment import Environment
from .parser import parse
from .typecheck import type_inference
from .types import BOOL
from .values import (
    ArrayValue,
    BoolValue,
    IntValue,
    Value,
    build_array_value,
    build_bool_value,
    build_int_value,
    build_string_value,
)

logger = get_logger(__name__)


def eval_tree(env: Environment, expr: Expr, bindings: Mapping[str, Value] | None = None) -> Value:
    """Evaluate a tree that already passed type inference.

    Args:
    ----
        env: Run environment
        expr: Root of the tree
        bindings: Values of the variables in scope

    Returns:
    -------
        Resulting value

    """
    return _eval(env, expr, bindings or {})


def _eval(env: Environment, expr: Expr, bindings: Mapping[str, Value]) -> Value:
    if isinstance(expr, IntConst):
        return build_int_value(expr.value)
    if isinstance(expr, StringConst):
        return build_string_value(expr.value)
    if isinstance(expr, BoolConst):
        return build_bool_value(expr.value)
    if isinstance(expr, ArrayLiteral):
        return build_array_value(_eval(env, elem, bindings) for elem in expr.elems)
    if isinstance(expr, Variable):
        if expr.name not in bindings:
            raise EvaluationError(f"eval: unbound variable ${expr.name}")
        return bindings[expr.name]
    if isinstance(expr, FunctionCall):
        function = env.builtins.get_function(expr.name)
        args = [_eval(env, arg, bindings) for arg in expr.args]
        env.check_cancelled()
        logger.debug("Calling built-in function %s", expr.name)
        return function.code(env, args)
    if isinstance(expr, UnaryOp):
        return build_bool_value(not _as_bool(_eval(env, expr.expr, bindings)))
    if isinstance(expr, BinaryOp):
        return _eval_binary(env, expr, bindings)
    raise EvaluationError(f"eval: unknown expression {expr!r}")


def _as_bool(value: Value) -> bool:
    if not isinstance(value, BoolValue):
        raise EvaluationError(f"eval: expected a boolean, got {value!r}")
    return value.val


def _as_int(value: Value) -> int:
    if not isinstance(value, IntValue):
        raise EvaluationError(f"eval: expected an integer, got {value!r}")
    return value.val


def _eval_binary(env: Environment, expr: BinaryOp, bindings: Mapping[str, Value]) -> Value:
    # Logical operators short-circuit
    if expr.op == "&&":
        return build_bool_value(
            _as_bool(_eval(env, expr.left, bindings)) and _as_bool(_eval(env, expr.right, bindings)),
        )
    if expr.op == "||":
        return build_bool_value(
            _as_bool(_eval(env, expr.left, bindings)) or _as_bool(_eval(env, expr.right, bindings)),
        )

    left = _eval(env, expr.left, bindings)
    right = _eval(env, expr.right, bindings)

    if expr.op == "==":
        return build_bool_value(_values_equal(left, right))
    if expr.op == "!=":
        return build_bool_value(not _values_equal(left, right))
    if expr.op == "<":
        return build_bool_value(_as_int(left) < _as_int(right))
    if expr.op == "<=":
        return build_bool_value(_as_int(left) <= _as_int(right))
    if expr.op == ">":
        return build_bool_value(_as_int(left) > _as_int(right))
    if expr.op == ">=":
        return build_bool_value(_as_int(left) >= _as_int(right))
    raise EvaluationError(f"eval: unknown operator {expr.op}")


def _values_equal(left: Value, right: Value) -> bool:
    if isinstance(left, ArrayValue) and isinstance(right, ArrayValue):
        return len(left) == len(right) and all(_values_equal(a, b) for a, b in zip(left, right))
    return left == right


def eval_expr(env: Environment, code: str) -> bool:
    """Parse, type check and evaluate a condition.

    Args:
    ----
        env: Run environment
        code: Condition text

    Returns:
    -------
        Truth value of the condition

    Raises:
    ------
        ParseError: If the text does not parse
        TypeInferenceError: If the tree is ill typed
        ConditionTypeError: If the expression is not a Bool

    """
    expr = parse(code)

    expr_type = type_inference(env.builtins, expr)
    if expr_type != BOOL:
        raise ConditionTypeError(code)

    return _as_bool(eval_tree(env, expr))
