from __future__ import annotations

from typing import Any, Dict, List

import pytest

from hourglass import cli
from hourglass.config import generate_example_config, read_config_file


def make_issue(key: str, summary: str, created: str, seconds: int) -> Dict[str, Any]:
    worklog = {
        "author": {"name": "myUserName", "emailAddress": "myLogin@example.com"},
        "created": created,
        "timeSpentSeconds": seconds,
        "comment": "standup",
    }
    return {"key": key, "fields": {"summary": summary, "worklog": {"worklogs": [worklog], "total": 1}}}


class FakeJiraClient:
    issues: List[Dict[str, Any]] = []
    added: List[tuple] = []

    def __init__(self, settings, **kwargs):
        self.settings = settings

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None

    def search_issues(self, jql, fields, *, expand=None, page_size=100):
        return list(self.issues)

    def issue_worklogs(self, issue_key):
        return []

    def add_worklog(self, issue_key, time_spent, comment=None):
        FakeJiraClient.added.append((issue_key, time_spent, comment))
        return {}


@pytest.fixture
def fake_jira(monkeypatch):
    FakeJiraClient.issues = [
        make_issue("AA-1", "Build it", "2018-01-01T10:00:00.000+0000", 3600),
        make_issue("AA-2", "Test it", "2018-01-08T10:00:00.000+0000", 7200),
    ]
    FakeJiraClient.added = []
    monkeypatch.setattr(cli, "JiraClient", FakeJiraClient)
    return FakeJiraClient


@pytest.fixture
def config_file(tmp_path):
    return generate_example_config(tmp_path / "hourglass.yaml")


def test_generate_config_writes_home_file(tmp_path, capsys) -> None:
    assert cli.main(["--generate-config"]) == 0

    assert read_config_file(tmp_path / "hourglass.yaml").jira.username == "myUserName"
    assert "Example configuration written" in capsys.readouterr().out


def test_full_report(fake_jira, config_file, capsys) -> None:
    assert cli.main(["--config", str(config_file)]) == 0

    out = capsys.readouterr().out
    assert "Week  1\n" in out
    assert "\tAA-1:   1.00 Build it\n" in out
    assert "\tAA-2:   2.00 Test it\n" in out
    assert "standup" not in out


def test_brief_report(fake_jira, config_file, capsys) -> None:
    assert cli.main(["--config", str(config_file), "--brief"]) == 0

    assert capsys.readouterr().out == "Week [ 1]: 1.00\nWeek [ 2]: 2.00\n"


def test_show_comments_flag(fake_jira, config_file, capsys) -> None:
    assert cli.main(["--config", str(config_file), "--show-comments"]) == 0

    assert "\tAA-1:   1.00 Build it // standup\n" in capsys.readouterr().out


def test_commandline_credentials_skip_config_file(fake_jira, capsys) -> None:
    argv = ["--url", "https://x.atlassian.net", "--mail", "a@b.c", "--username", "myUserName", "--api-key", "k"]

    assert cli.main(argv + ["--brief"]) == 0
    assert capsys.readouterr().out.startswith("Week [ 1]")


def test_sprint_listing(fake_jira, config_file, monkeypatch, capsys) -> None:
    fake_jira.issues = [{"key": "AA-9", "fields": {"summary": "Open work", "assignee": None}}]

    assert cli.main(["--config", str(config_file), "--sprint"]) == 0
    assert capsys.readouterr().out == "AA-9: Open work [Unassigned]\n"


def test_logwork(fake_jira, config_file, capsys) -> None:
    argv = ["--config", str(config_file), "--logwork", "--issue", "AA-1", "--hours", "1", "--minutes", "15"]

    assert cli.main(argv) == 0
    assert fake_jira.added == [("AA-1", "1h 15m", None)]
    assert "Successfully logged 1h 15m to AA-1" in capsys.readouterr().out


def test_logwork_without_time_fails(fake_jira, config_file, capsys) -> None:
    assert cli.run(["--config", str(config_file), "--logwork", "--issue", "AA-1"]) == 1
    assert "hourglass error:" in capsys.readouterr().err


def test_missing_config_file_fails(tmp_path, capsys) -> None:
    assert cli.run(["--config", str(tmp_path / "nope.yaml")]) == 1
    assert "--generate-config" in capsys.readouterr().err


def test_weeks_override(config_file) -> None:
    settings = cli.load_settings(cli.parse_args(["--config", str(config_file), "--weeks", "5"]))

    assert settings.jira.weeks_lookback == 5


def test_negative_weeks_rejected(config_file) -> None:
    assert cli.run(["--config", str(config_file), "--weeks", "-2"]) == 1


def test_environment_configures_cli_without_file(fake_jira, monkeypatch, capsys) -> None:
    monkeypatch.setenv("HOURGLASS_JIRA__URL", "https://acme.atlassian.net")
    monkeypatch.setenv("HOURGLASS_JIRA__MAIL", "myLogin@example.com")
    monkeypatch.setenv("HOURGLASS_JIRA__USERNAME", "myUserName")
    monkeypatch.setenv("HOURGLASS_JIRA__API_KEY", "env-key")

    assert cli.main(["--brief"]) == 0
    assert capsys.readouterr().out == "Week [ 1]: 1.00\nWeek [ 2]: 2.00\n"


def test_incomplete_environment_without_file_fails(monkeypatch, capsys) -> None:
    monkeypatch.setenv("HOURGLASS_JIRA__URL", "https://acme.atlassian.net")

    assert cli.run(["--brief"]) == 1
    err = capsys.readouterr().err
    assert "HOURGLASS_JIRA__API_KEY" in err
    assert "HOURGLASS_JIRA__URL" not in err


def test_home_config_used_by_default(fake_jira, tmp_path, capsys) -> None:
    generate_example_config(tmp_path / "hourglass.yaml")

    assert cli.main(["--brief"]) == 0
    assert capsys.readouterr().out.startswith("Week [ 1]")
