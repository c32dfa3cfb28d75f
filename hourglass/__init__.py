"""Weekly reports of the time you logged in Jira."""

from hourglass.commands import build_report_commands
from hourglass.entries import TimeEntry
from hourglass.presentation import ReportOptions, render_brief, render_full, render_report
from hourglass.redaction import install_stdlib_redaction

install_stdlib_redaction("hourglass")

__version__ = "0.3.0"

__all__ = [
    "ReportOptions",
    "TimeEntry",
    "build_report_commands",
    "render_brief",
    "render_full",
    "render_report",
]
