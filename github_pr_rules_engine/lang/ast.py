"""Expression tree of the rule language."""

from dataclasses import dataclass


class Expr:
    """Base class of every tree node."""


@dataclass(frozen=True)
class IntConst(Expr):
    value: int


@dataclass(frozen=True)
class StringConst(Expr):
    value: str


@dataclass(frozen=True)
class BoolConst(Expr):
    value: bool


@dataclass(frozen=True)
class ArrayLiteral(Expr):
    elems: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class Variable(Expr):
    """``$name`` without arguments, bound while evaluating a group filter."""

    name: str


@dataclass(frozen=True)
class FunctionCall(Expr):
    """``$name(args)``, a call to a built-in function or action."""

    name: str
    args: tuple[Expr, ...] = ()


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: str
    expr: Expr


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: str
    left: Expr
    right: Expr


EQUALITY_OPERATORS = ("==", "!=")
ORDER_OPERATORS = ("<", "<=", ">", ">=")
LOGICAL_OPERATORS = ("&&", "||")
