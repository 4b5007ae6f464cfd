"""
Data models for the GitHub PR Rules Engine
"""

from .pull_request import PullRequest, PullRequestFile
from .program import GroupKind, GroupType, Metadata, Program, ReportMode, Statement, Workflow, WorkflowRule
from .report import Report, ReportWorkflowDetails

__all__ = [
    "PullRequest",
    "PullRequestFile",
    "GroupKind",
    "GroupType",
    "Metadata",
    "Program",
    "ReportMode",
    "Statement",
    "Workflow",
    "WorkflowRule",
    "Report",
    "ReportWorkflowDetails",
]
