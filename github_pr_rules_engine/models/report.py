"""Report accumulated while a program runs."""

from pydantic import BaseModel, Field

from .program import Statement


class ReportWorkflowDetails(BaseModel):
    """What one workflow did during the run."""

    name: str
    rules: dict[str, bool] = Field(default_factory=dict)
    actions: list[str] = Field(default_factory=list)


class Report(BaseModel):
    """Workflow details keyed by workflow name, in the order workflows first ran."""

    workflow_details: dict[str, ReportWorkflowDetails] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.workflow_details

    def add_to_report(self, statement: Statement) -> None:
        """Record a successfully executed statement."""
        if statement.metadata is None:
            return

        name = statement.metadata.workflow.name
        details = self.workflow_details.get(name)
        if details is None:
            details = ReportWorkflowDetails(name=name)
            self.workflow_details[name] = details

        for triggered in statement.metadata.triggered_by:
            details.rules[triggered.rule] = True

        details.actions.append(statement.code)
