"""Static types of the rule language."""

from dataclasses import dataclass


class Type:
    """Base class of every rule language type."""


@dataclass(frozen=True)
class BoolType(Type):
    def __str__(self) -> str:
        return "Bool"


@dataclass(frozen=True)
class IntType(Type):
    def __str__(self) -> str:
        return "Int"


@dataclass(frozen=True)
class StringType(Type):
    def __str__(self) -> str:
        return "String"


@dataclass(frozen=True)
class ArrayType(Type):
    """Homogeneous array. ``elem_type`` is None only for an empty array literal."""

    elem_type: Type | None = None

    def __str__(self) -> str:
        return f"[]{self.elem_type if self.elem_type is not None else '?'}"


@dataclass(frozen=True)
class FunctionType(Type):
    """Signature of a built-in. Actions have no return type."""

    param_types: tuple[Type, ...] = ()
    return_type: Type | None = None

    def __str__(self) -> str:
        params = ", ".join(str(param) for param in self.param_types)
        return f"({params}) -> {self.return_type if self.return_type is not None else 'Action'}"


BOOL = BoolType()
INT = IntType()
STRING = StringType()


def build_array_of_type(elem_type: Type | None) -> ArrayType:
    return ArrayType(elem_type)


def build_function_type(param_types: list[Type], return_type: Type | None) -> FunctionType:
    return FunctionType(tuple(param_types), return_type)


def types_match(left: Type | None, right: Type | None) -> bool:
    """Whether two types are the same, an empty array matching any array."""
    if isinstance(left, ArrayType) and isinstance(right, ArrayType):
        if left.elem_type is None or right.elem_type is None:
            return True
        return types_match(left.elem_type, right.elem_type)
    return left == right
