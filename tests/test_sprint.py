from __future__ import annotations

from hourglass.config import HourglassSettings, JiraSettings
from hourglass.sprint import (
    OPEN_SPRINTS_JQL,
    UNASSIGNED,
    SprintIssue,
    format_sprint_issue,
    keep_users_and_unassigned_issues,
    sprint_issue_from_jira_issue,
    users_issues_in_open_sprints,
)


class FakeClient:
    def __init__(self, issues):
        self.issues = issues
        self.queries = []

    def search_issues(self, jql, fields, *, expand=None, page_size=100):
        self.queries.append((jql, tuple(fields)))
        return self.issues


def test_issue_without_assignee_is_unassigned() -> None:
    issue = sprint_issue_from_jira_issue({"key": "AA-1", "fields": {"summary": "Fix it", "assignee": None}})

    assert issue == SprintIssue(issue="AA-1", summary="Fix it", assignee=UNASSIGNED)


def test_assignee_email_is_used() -> None:
    issue = sprint_issue_from_jira_issue(
        {"key": "AA-2", "fields": {"summary": "Ship it", "assignee": {"emailAddress": "nijo@example.com"}}}
    )

    assert issue.assignee == "nijo@example.com"


def test_keep_users_and_unassigned_issues() -> None:
    issues = [
        SprintIssue("AA-1", "mine", "nijo@example.com"),
        SprintIssue("AA-2", "free", UNASSIGNED),
        SprintIssue("AA-3", "theirs", "other@example.com"),
        SprintIssue("AA-4", "exact", "nijo"),
    ]

    kept = keep_users_and_unassigned_issues(issues, "nijo")

    assert [issue.issue for issue in kept] == ["AA-1", "AA-2", "AA-4"]


def test_users_issues_in_open_sprints() -> None:
    client = FakeClient(
        [
            {"key": "AA-1", "fields": {"summary": "mine", "assignee": {"emailAddress": "nijo@example.com"}}},
            {"key": "AA-3", "fields": {"summary": "theirs", "assignee": {"emailAddress": "x@example.com"}}},
        ]
    )
    settings = HourglassSettings(jira=JiraSettings(username="nijo"))

    issues = users_issues_in_open_sprints(client, settings)

    assert [format_sprint_issue(issue) for issue in issues] == ["AA-1: mine [nijo@example.com]"]
    assert client.queries == [(OPEN_SPRINTS_JQL, ("key", "summary", "assignee"))]
