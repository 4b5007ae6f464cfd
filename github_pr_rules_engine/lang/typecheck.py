"""Bottom-up static type inference.

Inference has to succeed on the whole tree before any evaluation happens.
"""

from collections.abc import Mapping

from github_pr_rules_engine.errors import TypeInferenceError

from .ast import (
    EQUALITY_OPERATORS,
    LOGICAL_OPERATORS,
    ORDER_OPERATORS,
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
from .builtins import BuiltIns
from .types import BOOL, INT, STRING, ArrayType, Type, types_match


def type_inference(builtins: BuiltIns, expr: Expr, bindings: Mapping[str, Type] | None = None) -> Type | None:
    """Infer the type of an expression tree.

    Args:
    ----
        builtins: Registry providing the signature of every callee
        expr: Root of the tree
        bindings: Types of the variables in scope

    Returns:
    -------
        Type of the expression, None for an action call

    Raises:
    ------
        TypeInferenceError: On any operator or argument mismatch
        BuiltInNotFoundError: If a callee has no known signature

    """
    return _infer(builtins, expr, bindings or {})


def _infer(builtins: BuiltIns, expr: Expr, bindings: Mapping[str, Type]) -> Type | None:
    if isinstance(expr, IntConst):
        return INT
    if isinstance(expr, StringConst):
        return STRING
    if isinstance(expr, BoolConst):
        return BOOL
    if isinstance(expr, ArrayLiteral):
        return _infer_array(builtins, expr, bindings)
    if isinstance(expr, Variable):
        if expr.name not in bindings:
            raise TypeInferenceError(detail=f"unknown variable ${expr.name}")
        return bindings[expr.name]
    if isinstance(expr, FunctionCall):
        return _infer_call(builtins, expr, bindings)
    if isinstance(expr, UnaryOp):
        if _infer(builtins, expr.expr, bindings) != BOOL:
            raise TypeInferenceError
        return BOOL
    if isinstance(expr, BinaryOp):
        return _infer_binary(builtins, expr, bindings)
    raise TypeInferenceError(detail=f"unknown expression {expr!r}")


def _infer_array(builtins: BuiltIns, expr: ArrayLiteral, bindings: Mapping[str, Type]) -> Type:
    elem_types = [_infer(builtins, elem, bindings) for elem in expr.elems]
    if not elem_types:
        return ArrayType(None)

    first = elem_types[0]
    if first is None or any(not types_match(first, elem_type) for elem_type in elem_types[1:]):
        raise TypeInferenceError
    return ArrayType(first)


def _infer_call(builtins: BuiltIns, expr: FunctionCall, bindings: Mapping[str, Type]) -> Type | None:
    function_type = builtins.lookup_type(expr.name)
    arg_types = [_infer(builtins, arg, bindings) for arg in expr.args]

    if len(arg_types) != len(function_type.param_types):
        raise TypeInferenceError(callee=expr.name)

    for arg_type, param_type in zip(arg_types, function_type.param_types):
        if not types_match(arg_type, param_type):
            raise TypeInferenceError(callee=expr.name)

    return function_type.return_type


def _infer_binary(builtins: BuiltIns, expr: BinaryOp, bindings: Mapping[str, Type]) -> Type:
    left = _infer(builtins, expr.left, bindings)
    right = _infer(builtins, expr.right, bindings)

    if expr.op in EQUALITY_OPERATORS:
        if left is None or not types_match(left, right):
            raise TypeInferenceError
        return BOOL
    if expr.op in ORDER_OPERATORS:
        if left != INT or right != INT:
            raise TypeInferenceError
        return BOOL
    if expr.op in LOGICAL_OPERATORS:
        if left != BOOL or right != BOOL:
            raise TypeInferenceError
        return BOOL
    raise TypeInferenceError(detail=f"unknown operator {expr.op}")
