"""Collect the user's time entries from Jira work logs."""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable, Iterable, Mapping
from typing import Any, List, Optional

import structlog

from hourglass.config import HourglassSettings
from hourglass.entries import TimeEntry
from hourglass.jira_client import JiraClient

logger = structlog.get_logger(__name__)

JIRA_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
SEARCH_FIELDS = ("key", "summary", "worklog")

TimeEntryPredicate = Callable[[TimeEntry], bool]


def parse_jira_timestamp(value: str) -> dt.datetime:
    return dt.datetime.strptime(value, JIRA_TIMESTAMP_FORMAT)


def worklog_to_time_entry(issue: Mapping[str, Any], worklog: Mapping[str, Any]) -> TimeEntry:
    # The date is taken in the timestamp's own offset, as Jira reports it.
    created = parse_jira_timestamp(worklog["created"]).date()
    author = worklog.get("author") or {}
    fields = issue.get("fields") or {}
    return TimeEntry(
        issue=issue["key"],
        summary=fields.get("summary") or "",
        date=created.isoformat(),
        week=created.isocalendar()[1],
        hours=float(worklog.get("timeSpentSeconds") or 0) / 3600,
        comment=worklog.get("comment") or "",
        employee=author.get("name") or "",
        email_address=author.get("emailAddress") or "",
    )


def _issue_worklogs(issue: Mapping[str, Any], client: Optional[JiraClient]) -> List[Mapping[str, Any]]:
    container = (issue.get("fields") or {}).get("worklog") or {}
    worklogs = list(container.get("worklogs") or [])
    total = container.get("total", len(worklogs))
    if client is not None and total > len(worklogs):
        logger.info("collector.fetch_worklogs", issue=issue["key"], embedded=len(worklogs), total=total)
        worklogs = client.issue_worklogs(issue["key"])
    return worklogs


def extract_time_entries_from_issues(
    issues: Iterable[Mapping[str, Any]],
    client: Optional[JiraClient] = None,
) -> List[TimeEntry]:
    """Flatten every issue's work logs into time entries.

    Search results embed a truncated work log list; with a ``client`` the
    full list is fetched for those issues.
    """

    issues = list(issues)
    entries = [
        worklog_to_time_entry(issue, worklog)
        for issue in issues
        for worklog in _issue_worklogs(issue, client)
    ]
    logger.info("collector.extracted", entries=len(entries), issues=len(issues))
    return entries


def jql_string(value: str) -> str:
    """Quote ``value`` as a JQL string literal."""

    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def filter_time_entries(entries: Iterable[TimeEntry], predicate: TimeEntryPredicate) -> List[TimeEntry]:
    return [entry for entry in entries if predicate(entry)]


def authored_by(username: str) -> TimeEntryPredicate:
    def predicate(entry: TimeEntry) -> bool:
        return entry.employee == username or entry.email_address.startswith(username)

    return predicate


def calc_passed_date(settings: HourglassSettings, today: Optional[dt.date] = None) -> dt.date:
    """Monday of the week ``weeks_lookback`` weeks before the current one."""

    today = today or dt.date.today()
    days = settings.jira.weeks_lookback * 7 + today.weekday()
    return today - dt.timedelta(days=days)


def extract_time_entries_from_jira(
    client: JiraClient,
    settings: HourglassSettings,
    today: Optional[dt.date] = None,
) -> List[TimeEntry]:
    """Return the configured user's time entries since :func:`calc_passed_date`."""

    past_date = calc_passed_date(settings, today).isoformat()
    username = settings.jira.username
    logger.info("collector.query", since=past_date, username=username)

    jql = f"worklogDate >= {jql_string(past_date)} AND worklogAuthor = {jql_string(username)}"
    issues = client.search_issues(jql, SEARCH_FIELDS, expand="worklog")
    entries = extract_time_entries_from_issues(issues, client)
    return filter_time_entries(entries, authored_by(username))
