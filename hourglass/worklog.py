"""Submit new work log entries to Jira."""

from __future__ import annotations

from typing import Any, Dict

import structlog

from hourglass.exceptions import WorklogError
from hourglass.jira_client import JiraClient

logger = structlog.get_logger(__name__)


def format_time_spent(hours: int, minutes: int) -> str:
    return f"{hours}h {minutes}m"


def log_work(
    client: JiraClient,
    issue: str,
    hours: int,
    minutes: int,
    comment: str | None = None,
) -> Dict[str, Any]:
    if not issue:
        raise WorklogError("Unable to log work, need --issue")
    if hours < 0 or minutes < 0:
        raise WorklogError("Hours and minutes must not be negative")
    if hours == 0 and minutes == 0:
        raise WorklogError("Unable to log work, need --hours and/or --minutes")

    time_spent = format_time_spent(hours, minutes)
    result = client.add_worklog(issue, time_spent, comment)
    logger.info("worklog.added", issue=issue, time_spent=time_spent)
    return result
