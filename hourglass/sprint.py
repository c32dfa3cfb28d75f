"""Issues in the currently open sprints."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, List

from hourglass.config import HourglassSettings
from hourglass.jira_client import JiraClient

UNASSIGNED = "Unassigned"
OPEN_SPRINTS_JQL = "resolution = Unresolved AND sprint in openSprints()"
SPRINT_FIELDS = ("key", "summary", "assignee")


@dataclass(frozen=True)
class SprintIssue:
    issue: str
    summary: str
    assignee: str = UNASSIGNED


def sprint_issue_from_jira_issue(issue: Mapping[str, Any]) -> SprintIssue:
    fields = issue.get("fields") or {}
    assignee = fields.get("assignee")
    return SprintIssue(
        issue=issue["key"],
        summary=fields.get("summary") or "",
        assignee=(assignee or {}).get("emailAddress") or UNASSIGNED,
    )


def is_unassigned(issue: SprintIssue) -> bool:
    return issue.assignee == UNASSIGNED


def is_users_issue(issue: SprintIssue, username: str) -> bool:
    return issue.assignee.startswith(username)


def keep_users_and_unassigned_issues(issues: Iterable[SprintIssue], username: str) -> List[SprintIssue]:
    return [issue for issue in issues if is_unassigned(issue) or is_users_issue(issue, username)]


def users_issues_in_open_sprints(client: JiraClient, settings: HourglassSettings) -> List[SprintIssue]:
    jira_issues = client.search_issues(OPEN_SPRINTS_JQL, SPRINT_FIELDS)
    issues = [sprint_issue_from_jira_issue(issue) for issue in jira_issues]
    return keep_users_and_unassigned_issues(issues, settings.jira.username)


def format_sprint_issue(issue: SprintIssue) -> str:
    return f"{issue.issue}: {issue.summary} [{issue.assignee}]"
