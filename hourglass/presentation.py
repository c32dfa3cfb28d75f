"""Render report commands as terminal text."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from hourglass.commands import (
    ClearDate,
    ClearIssue,
    ClearWeek,
    Command,
    IssueSummaryLine,
    NewDate,
    NewIssue,
    NewWeek,
    NoteHours,
    PrintNewIssue,
    PrintSameIssue,
    SummaryDate,
    SummaryWeek,
    build_report_commands,
)
from hourglass.entries import TimeEntry

WEEK_DIVIDER = "=" * 27
DATE_DIVIDER = "-" * 18


@dataclass(frozen=True)
class ReportOptions:
    show_comments: bool = False
    show_issue_summaries: bool = False


@dataclass
class _Accumulator:
    week: int = 0
    date: str = ""
    issue: str = ""
    summary: str = ""
    comment: str = ""
    week_total: float = 0.0
    date_total: float = 0.0
    issue_total: float = 0.0
    issue_hours: float = 0.0

    def apply(self, command: Command) -> None:
        """Update totals and the current week/date/issue for ``command``."""

        if isinstance(command, ClearWeek):
            self.week = 0
            self.week_total = 0.0
        elif isinstance(command, ClearDate):
            self.date = ""
            self.date_total = 0.0
        elif isinstance(command, ClearIssue):
            self.issue = ""
            self.summary = ""
            self.comment = ""
            self.issue_total = 0.0
            self.issue_hours = 0.0
        elif isinstance(command, NewWeek):
            self.week = command.week
        elif isinstance(command, NewDate):
            self.date = command.date
        elif isinstance(command, NewIssue):
            self.issue = command.issue
            self.summary = command.summary
        elif isinstance(command, NoteHours):
            self.week_total += command.hours
            self.date_total += command.hours
            self.issue_total += command.hours
            self.issue_hours = command.hours
            self.comment = command.comment


def _comment_suffix(state: _Accumulator, options: ReportOptions) -> str:
    if options.show_comments and state.comment:
        return f" // {state.comment}"
    return ""


def render_full(commands: Iterable[Command], options: ReportOptions | None = None) -> str:
    """Render the detailed report: every issue line, date totals and week totals."""

    options = options or ReportOptions()
    state = _Accumulator()
    lines: list[str] = []

    for command in commands:
        state.apply(command)

        if isinstance(command, NewWeek):
            lines += [WEEK_DIVIDER, f"Week {command.week:2d}", WEEK_DIVIDER, ""]
        elif isinstance(command, NewDate):
            lines.append(command.date)
        elif isinstance(command, PrintNewIssue):
            if state.issue:
                line = f"\t{state.issue}: {state.issue_hours:6.2f}"
                if state.summary:
                    line += f" {state.summary}"
                lines.append(line + _comment_suffix(state, options))
        elif isinstance(command, PrintSameIssue):
            lines.append(f"\t    \\--: {state.issue_hours:6.2f}" + _comment_suffix(state, options))
        elif isinstance(command, SummaryDate):
            if state.date:
                lines += [f"\t{DATE_DIVIDER}", f"\t\t {state.date_total:6.2f}"]
        elif isinstance(command, SummaryWeek):
            if state.week:
                lines += ["", f"\tTotal:   {state.week_total:6.2f}", ""]
        elif isinstance(command, IssueSummaryLine):
            if options.show_issue_summaries:
                lines.append(f"{command.issue}: {command.summary}")

    return "".join(f"{line}\n" for line in lines)


def render_brief(commands: Iterable[Command]) -> str:
    """Render one ``Week [ww]: total`` line per week."""

    state = _Accumulator()
    lines: list[str] = []

    for command in commands:
        state.apply(command)
        if isinstance(command, SummaryWeek) and state.week:
            lines.append(f"Week [{state.week:2d}]: {state.week_total:.2f}")

    return "".join(f"{line}\n" for line in lines)


def render_report(
    entries: Iterable[TimeEntry],
    *,
    brief: bool = False,
    options: ReportOptions | None = None,
) -> str:
    commands = build_report_commands(entries)
    if brief:
        return render_brief(commands)
    return render_full(commands, options)


__all__ = ["ReportOptions", "render_brief", "render_full", "render_report"]
