"""Program model: the statements a run executes and the declarations feeding it."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class GroupKind(str, Enum):
    """Kind of members a group holds."""

    DEVELOPER = "developer"


class GroupType(str, Enum):
    """How the members of a group are obtained."""

    STATIC = "static"
    FILTER = "filter"


class ReportMode(str, Enum):
    """How the report comment is published."""

    SILENT = "silent"
    VERBOSE = "verbose"


class Workflow(BaseModel):
    """Workflow a statement belongs to."""

    name: str


class WorkflowRule(BaseModel):
    """Rule that caused a statement to be scheduled."""

    rule: str


class Metadata(BaseModel):
    """Where a statement comes from."""

    workflow: Workflow
    triggered_by: list[WorkflowRule] = Field(default_factory=list)


class Statement(BaseModel):
    """A single action invocation together with its origin."""

    code: str
    metadata: Metadata | None = None

    @classmethod
    def build(cls, code: str, workflow: str, rules: list[str]) -> "Statement":
        """Build a statement for a workflow triggered by the given rules."""
        return cls(
            code=code,
            metadata=Metadata(
                workflow=Workflow(name=workflow),
                triggered_by=[WorkflowRule(rule=rule) for rule in rules],
            ),
        )


class Program(BaseModel):
    """Ordered statements of one run."""

    statements: list[Statement] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Program":
        """Create a program from plain configuration data."""
        return cls.model_validate(data)
