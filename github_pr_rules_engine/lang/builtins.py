"""Registry of built-in functions and actions.

Functions are pure: they take the environment and the evaluated arguments and
return a value. Actions have side effects on the pull request and return
nothing. Both live in read-only mappings assembled once, before any program
runs.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from github_pr_rules_engine.errors import BuiltInNotFoundError, DuplicateBuiltInError

from .types import FunctionType
from .values import Value

if TYPE_CHECKING:
    from .environment import Environment

FunctionCode = Callable[["Environment", list[Value]], Value]
ActionCode = Callable[["Environment", list[Value]], None]


@dataclass(frozen=True)
class BuiltInFunction:
    name: str
    type: FunctionType
    code: FunctionCode


@dataclass(frozen=True)
class BuiltInAction:
    name: str
    type: FunctionType
    code: ActionCode


def _index(builtins: Iterable) -> dict:
    indexed = {}
    for builtin in builtins:
        if builtin.name in indexed:
            raise DuplicateBuiltInError(builtin.name)
        indexed[builtin.name] = builtin
    return indexed


class BuiltIns:
    """Immutable name to implementation mapping for functions and actions."""

    def __init__(
        self,
        functions: Iterable[BuiltInFunction] = (),
        actions: Iterable[BuiltInAction] = (),
    ) -> None:
        """Build and validate the registry.

        Args:
        ----
            functions: Built-in functions
            actions: Built-in actions

        Raises:
        ------
            DuplicateBuiltInError: If a name is defined twice, in either namespace

        """
        indexed_functions = _index(functions)
        indexed_actions = _index(actions)

        for name in indexed_functions:
            if name in indexed_actions:
                raise DuplicateBuiltInError(name)

        self._functions = MappingProxyType(indexed_functions)
        self._actions = MappingProxyType(indexed_actions)

    @classmethod
    def merge(cls, *sources: "BuiltIns") -> "BuiltIns":
        """Combine the built-ins of several plugin sources into one registry."""
        functions = [function for source in sources for function in source.functions.values()]
        actions = [action for source in sources for action in source.actions.values()]
        return cls(functions, actions)

    @property
    def functions(self) -> Mapping[str, BuiltInFunction]:
        return self._functions

    @property
    def actions(self) -> Mapping[str, BuiltInAction]:
        return self._actions

    def get_function(self, name: str) -> BuiltInFunction:
        try:
            return self._functions[name]
        except KeyError:
            raise BuiltInNotFoundError(
                name,
                f"eval: {name} not found. are you sure this is a built-in function?",
            ) from None

    def get_action(self, name: str) -> BuiltInAction:
        try:
            return self._actions[name]
        except KeyError:
            raise BuiltInNotFoundError(
                name,
                f"exec: {name} not found. are you sure this is a built-in function?",
            ) from None

    def lookup_type(self, name: str) -> FunctionType:
        """Signature of a function or action.

        Raises
        ------
            BuiltInNotFoundError: If neither namespace defines the name

        """
        if name in self._functions:
            return self._functions[name].type
        if name in self._actions:
            return self._actions[name].type
        raise BuiltInNotFoundError(
            name,
            f"no type for built-in {name}. Please check if the mode in the configuration supports it.",
        )

    def __contains__(self, name: str) -> bool:
        return name in self._functions or name in self._actions

    def __repr__(self) -> str:
        return f"<BuiltIns(functions={len(self._functions)}, actions={len(self._actions)})>"
