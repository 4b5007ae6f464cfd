"""
Built-in functions and actions shipped with the engine
"""

from github_pr_rules_engine.lang.builtins import BuiltIns

from .actions import builtin_actions
from .functions import builtin_functions


def plugin_builtins() -> BuiltIns:
    """Registry with every function and action of this plugin."""
    return BuiltIns(functions=builtin_functions(), actions=builtin_actions())


__all__ = [
    "builtin_actions",
    "builtin_functions",
    "plugin_builtins",
]
