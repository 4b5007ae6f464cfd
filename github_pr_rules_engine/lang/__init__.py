"""
Rule language: values, types, parser, type inference and interpreter
"""

from .builtins import BuiltInAction, BuiltInFunction, BuiltIns
from .environment import Environment, RegisterKey, build_internal_label_id, build_internal_rule_name
from .evaluator import eval_expr, eval_tree
from .interpreter import Interpreter
from .parser import parse
from .typecheck import type_inference
from .values import (
    ArrayValue,
    BoolValue,
    IntValue,
    StringValue,
    Value,
    build_array_value,
    build_bool_value,
    build_int_value,
    build_string_value,
)

__all__ = [
    "BuiltInAction",
    "BuiltInFunction",
    "BuiltIns",
    "Environment",
    "RegisterKey",
    "build_internal_label_id",
    "build_internal_rule_name",
    "eval_expr",
    "eval_tree",
    "Interpreter",
    "parse",
    "type_inference",
    "ArrayValue",
    "BoolValue",
    "IntValue",
    "StringValue",
    "Value",
    "build_array_value",
    "build_bool_value",
    "build_int_value",
    "build_string_value",
]
