"""Time entry records extracted from Jira work logs."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeEntry:
    """A single logged-work fact.

    ``date`` is an ISO ``YYYY-MM-DD`` string so that entries sort lexically,
    and ``week`` is the ISO week number of that date.
    """

    issue: str
    summary: str
    date: str
    week: int
    hours: float
    comment: str = ""
    employee: str = ""
    email_address: str = ""
