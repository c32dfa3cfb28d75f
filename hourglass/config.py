"""Configuration management using Pydantic settings and a YAML file."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from hourglass.exceptions import ConfigError
from hourglass.presentation import ReportOptions


CONFIG_FILENAME = "hourglass.yaml"

DEFAULT_URL = "https://myJira.atlassian.net"
DEFAULT_MAIL = "myLogin@example.com"
DEFAULT_API_KEY = "1234ABCD"
DEFAULT_USERNAME = "myUserName"
DEFAULT_WEEKS_LOOKBACK = 3


class JiraSettings(BaseModel):
    url: str = DEFAULT_URL
    mail: str = DEFAULT_MAIL
    api_key: str = Field(default=DEFAULT_API_KEY, validation_alias=AliasChoices("api_key", "apikey"))
    username: str = DEFAULT_USERNAME
    weeks_lookback: int = Field(
        default=DEFAULT_WEEKS_LOOKBACK,
        ge=0,
        validation_alias=AliasChoices("weeks_lookback", "weekslookback"),
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, url: str) -> str:
        url = url.strip()
        if not url:
            raise ValueError("Jira URL must not be empty")
        return url.rstrip("/")


class ReportSettings(BaseModel):
    show_comments: bool = False
    show_issue_summaries: bool = False

    def options(self) -> ReportOptions:
        return ReportOptions(
            show_comments=self.show_comments,
            show_issue_summaries=self.show_issue_summaries,
        )


class HourglassSettings(BaseSettings):
    """Top-level configuration: where Jira lives and how reports look."""

    jira: JiraSettings = Field(default_factory=JiraSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)

    model_config = {
        "env_prefix": "HOURGLASS_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


def default_config_path() -> Path:
    return Path.home() / CONFIG_FILENAME


def read_config_file(path: Path | str) -> HourglassSettings:
    """Load settings from a YAML file.

    Values in the file take precedence over `HOURGLASS_*` environment variables.
    """

    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")

    try:
        return HourglassSettings(**data)
    except ValidationError as exc:
        raise ConfigError(f"Config file {path} is invalid: {exc}") from exc


def _settings_to_yaml(settings: HourglassSettings) -> str:
    data: dict[str, Any] = settings.model_dump()
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def generate_example_config(path: Path | str) -> Path:
    """Write the default configuration to ``path`` readable only by the owner."""

    path = Path(path)
    content = _settings_to_yaml(HourglassSettings(jira=JiraSettings(), report=ReportSettings()))
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        raise ConfigError(f"Unable to write config file {path}: {exc}") from exc
    return path


def generate_example_config_in_home() -> Path:
    return generate_example_config(default_config_path())


def commandline_config(url: str, mail: str, username: str, api_key: str) -> HourglassSettings:
    try:
        jira = JiraSettings(url=url, mail=mail, username=username, api_key=api_key)
    except ValidationError as exc:
        raise ConfigError(f"Invalid command line configuration: {exc}") from exc
    return HourglassSettings(jira=jira)


@lru_cache(maxsize=1)
def get_settings() -> HourglassSettings:
    path = default_config_path()
    if path.is_file():
        return read_config_file(path)
    return HourglassSettings()
