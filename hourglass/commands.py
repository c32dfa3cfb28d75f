"""Turn time entries into low-level report commands.

The report is produced in two steps: ``build_report_commands`` groups the
entries into a flat list of commands marking week/date/issue transitions,
and a renderer in :mod:`hourglass.presentation` interprets them. Keeping
the grouping apart from the formatting makes both easy to test.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from hourglass.entries import TimeEntry


@dataclass(frozen=True)
class Command:
    """Base class for all report commands."""


@dataclass(frozen=True)
class ClearWeek(Command):
    pass


@dataclass(frozen=True)
class ClearDate(Command):
    pass


@dataclass(frozen=True)
class ClearIssue(Command):
    pass


@dataclass(frozen=True)
class NewWeek(Command):
    week: int


@dataclass(frozen=True)
class NewDate(Command):
    date: str


@dataclass(frozen=True)
class NewIssue(Command):
    issue: str
    summary: str


@dataclass(frozen=True)
class SummaryDate(Command):
    pass


@dataclass(frozen=True)
class SummaryWeek(Command):
    pass


@dataclass(frozen=True)
class NoteHours(Command):
    hours: float
    comment: str = ""


@dataclass(frozen=True)
class PrintNewIssue(Command):
    pass


@dataclass(frozen=True)
class PrintSameIssue(Command):
    pass


@dataclass(frozen=True)
class IssueSummaryLine(Command):
    issue: str
    summary: str


# Sentinels never equal to a real entry: weeks start at 1, dates and keys are non-empty.
_NO_WEEK = 0
_NO_DATE = ""
_NO_ISSUE = ""


def _open_issue(entry: TimeEntry) -> list[Command]:
    return [
        NewIssue(issue=entry.issue, summary=entry.summary),
        NoteHours(hours=entry.hours, comment=entry.comment),
        PrintNewIssue(),
    ]


def build_report_commands(entries: Iterable[TimeEntry]) -> list[Command]:
    """Group ``entries`` by week, date and issue into report commands.

    Entries are sorted by date, then issue key. The input is left untouched.
    """

    entries = list(entries)
    ordered = sorted(entries, key=lambda entry: (entry.date, entry.issue))
    commands: list[Command] = []

    current_week = _NO_WEEK
    current_date = _NO_DATE
    current_issue = _NO_ISSUE

    for entry in ordered:
        if entry.week != current_week:
            if current_week != _NO_WEEK:
                commands += [SummaryDate(), SummaryWeek(), ClearIssue(), ClearDate(), ClearWeek()]
            commands += [NewWeek(week=entry.week), NewDate(date=entry.date)]
            commands += _open_issue(entry)
            current_week = entry.week
            current_date = entry.date
            current_issue = entry.issue
        elif entry.date != current_date:
            commands += [SummaryDate(), ClearIssue(), ClearDate()]
            commands.append(NewDate(date=entry.date))
            commands += _open_issue(entry)
            current_date = entry.date
            current_issue = entry.issue
        elif entry.issue != current_issue:
            commands.append(ClearIssue())
            commands += _open_issue(entry)
            current_issue = entry.issue
        else:
            commands += [NoteHours(hours=entry.hours, comment=entry.comment), PrintSameIssue()]

    if not commands:
        return commands

    # Always finish by closing every scope so the last group gets its summaries.
    commands.append(ClearIssue())
    commands += [SummaryDate(), ClearDate()]
    commands += [SummaryWeek(), ClearWeek()]

    summaries: dict[str, str] = {}
    for entry in entries:
        summaries[entry.issue] = entry.summary
    commands += [IssueSummaryLine(issue=issue, summary=summaries[issue]) for issue in sorted(summaries)]

    return commands


__all__ = [
    "ClearDate",
    "ClearIssue",
    "ClearWeek",
    "Command",
    "IssueSummaryLine",
    "NewDate",
    "NewIssue",
    "NewWeek",
    "NoteHours",
    "PrintNewIssue",
    "PrintSameIssue",
    "SummaryDate",
    "SummaryWeek",
    "build_report_commands",
]
