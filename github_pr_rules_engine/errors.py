"""Error types raised by the rules engine."""


class EngineError(Exception):
    """Base class for every error raised by the rules engine."""


class ParseError(EngineError):
    """Expression text could not be turned into a tree."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"parse error: failed to build AST on input {code}")


class TypeInferenceError(EngineError):
    """Operand or argument types do not line up."""

    def __init__(self, callee: str | None = None, detail: str | None = None) -> None:
        self.callee = callee
        if callee is not None:
            message = f"type inference failed: mismatch in arg types on {callee}"
        elif detail is not None:
            message = f"type inference failed: {detail}"
        else:
            message = "type inference failed"
        super().__init__(message)


class ConditionTypeError(EngineError):
    """A condition expression does not have type Bool."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"expression {code} is not a condition")


class BuiltInNotFoundError(EngineError, LookupError):
    """A built-in name could not be resolved."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class DuplicateBuiltInError(EngineError):
    """Two built-in sources define the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"duplicate built-in {name}")


class EvaluationError(EngineError):
    """Evaluation of a well-typed tree failed."""


class HostAPIError(EngineError):
    """The hosting API returned an error."""


class GitHubAPIError(HostAPIError):
    """Error response from the GitHub REST API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RunCancelledError(HostAPIError):
    """The run was cancelled before a host call could start."""

    def __init__(self) -> None:
        super().__init__("run cancelled")


class ConstructionError(EngineError):
    """The interpreter environment could not be set up."""


class ReportError(EngineError):
    """Publishing the report comment failed."""

    def __init__(self, message: str) -> None:
        super().__init__(f"[report] {message}")


class GroupFilterParseError(ParseError):
    """Filter condition of a group failed to parse."""

    def __init__(self, cause: ParseError) -> None:
        self.code = cause.code
        Exception.__init__(self, f"buildGroupAST: {cause}")


class InvalidGroupError(TypeInferenceError):
    """A static group expression is not an array."""

    def __init__(self) -> None:
        self.callee = None
        Exception.__init__(self, "expression is not a valid group")
