"""Runtime values of the rule language.

Values are immutable and each one knows its static type, so the evaluator and
the type inference pass share one closed set of tags.
"""

from dataclasses import dataclass

from .types import BOOL, INT, STRING, ArrayType, Type


class Value:
    """Base class of every runtime value."""

    @property
    def type(self) -> Type:
        raise NotImplementedError


@dataclass(frozen=True)
class BoolValue(Value):
    val: bool

    @property
    def type(self) -> Type:
        return BOOL


@dataclass(frozen=True)
class IntValue(Value):
    val: int

    @property
    def type(self) -> Type:
        return INT


@dataclass(frozen=True)
class StringValue(Value):
    val: str

    @property
    def type(self) -> Type:
        return STRING


@dataclass(frozen=True)
class ArrayValue(Value):
    vals: tuple[Value, ...] = ()

    @property
    def type(self) -> Type:
        if not self.vals:
            return ArrayType(None)
        return ArrayType(self.vals[0].type)

    def __iter__(self):
        return iter(self.vals)

    def __len__(self) -> int:
        return len(self.vals)


def build_bool_value(val: bool) -> BoolValue:
    return BoolValue(bool(val))


def build_int_value(val: int) -> IntValue:
    return IntValue(int(val))


def build_string_value(val: str) -> StringValue:
    return StringValue(val)


def build_array_value(vals) -> ArrayValue:
    return ArrayValue(tuple(vals))


def build_string_array(vals) -> ArrayValue:
    """Array of strings from plain Python strings, keeping their order."""
    return ArrayValue(tuple(StringValue(val) for val in vals))
