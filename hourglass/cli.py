#!/usr/bin/env python3
"""Command line entry point: print work log reports and log time in Jira."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from hourglass.collector import extract_time_entries_from_jira
from hourglass.config import (
    HourglassSettings,
    commandline_config,
    default_config_path,
    generate_example_config,
    get_settings,
    read_config_file,
)
from hourglass.exceptions import ConfigError, HourglassError
from hourglass.jira_client import JiraClient
from hourglass.logging import configure_logging
from hourglass.presentation import render_report
from hourglass.sprint import format_sprint_issue, users_issues_in_open_sprints
from hourglass.worklog import log_work

CREDENTIAL_FIELDS = frozenset({"url", "mail", "username", "api_key"})


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hourglass", description="Report the time you logged in Jira")
    parser.add_argument("--url", default="", help="Jira instance, e.g. https://myjira.atlassian.net")
    parser.add_argument("--mail", default="", help="the e-mail address you log in with")
    parser.add_argument("--username", default="", help="Jira username, e.g. nijo")
    parser.add_argument("--api-key", default="", help="Jira API key")
    parser.add_argument("--config", type=Path, help=f"configuration file (default: ~/{default_config_path().name})")
    parser.add_argument("--generate-config", action="store_true", help="write an example configuration file")
    parser.add_argument("--logwork", action="store_true", help="log time in Jira")
    parser.add_argument("--issue", default="", help="issue to log time on")
    parser.add_argument("--hours", type=int, default=0, help="hours to log")
    parser.add_argument("--minutes", type=int, default=0, help="minutes to log")
    parser.add_argument("--comment", default="", help="work log comment")
    parser.add_argument("--brief", action="store_true", help="print only the weekly totals")
    parser.add_argument("--sprint", action="store_true", help="show your issues in the open sprint(s)")
    parser.add_argument("--show-comments", action="store_true", help="append work log comments to report lines")
    parser.add_argument("--weeks", type=int, help="number of weeks to look back")
    parser.add_argument("--verbose", action="store_true", help="log progress to stderr")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> HourglassSettings:
    if args.url and args.mail and args.username and args.api_key:
        settings = commandline_config(args.url, args.mail, args.username, args.api_key)
    elif args.config is not None:
        if not args.config.is_file():
            raise ConfigError(f"No configuration file at {args.config}; create one with --generate-config")
        settings = read_config_file(args.config)
    else:
        settings = get_settings()
        missing = sorted(CREDENTIAL_FIELDS - settings.jira.model_fields_set)
        if not default_config_path().is_file() and missing:
            variables = ", ".join(f"HOURGLASS_JIRA__{name.upper()}" for name in missing)
            raise ConfigError(
                f"No configuration file at {default_config_path()} and {variables} not set; "
                "create one with --generate-config"
            )

    jira = settings.jira
    report = settings.report
    if args.weeks is not None:
        if args.weeks < 0:
            raise ConfigError("--weeks must not be negative")
        jira = jira.model_copy(update={"weeks_lookback": args.weeks})
    if args.show_comments:
        report = report.model_copy(update={"show_comments": True})
    return settings.model_copy(update={"jira": jira, "report": report})


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.INFO if args.verbose else logging.WARNING)

    if args.generate_config:
        path = generate_example_config(args.config or default_config_path())
        print(f"Example configuration written to {path}")
        return 0

    settings = load_settings(args)

    with JiraClient(settings.jira) as client:
        if args.logwork:
            log_work(client, args.issue, args.hours, args.minutes, args.comment or None)
            print(f"Successfully logged {args.hours}h {args.minutes}m to {args.issue}")
            return 0

        if args.sprint:
            for issue in users_issues_in_open_sprints(client, settings):
                print(format_sprint_issue(issue))
            return 0

        entries = extract_time_entries_from_jira(client, settings)

    print(render_report(entries, brief=args.brief, options=settings.report.options()), end="")
    return 0


def run(argv: Optional[List[str]] = None) -> int:
    try:
        return main(argv)
    except HourglassError as exc:
        print(f"hourglass error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(run())
